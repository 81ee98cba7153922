from .orchestrator import ReportOrchestrator
from .renderer import render_report

__all__ = ["ReportOrchestrator", "render_report"]
