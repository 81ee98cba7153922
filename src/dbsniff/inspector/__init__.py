from typing import Optional
from pydantic import BaseModel
from ..config import DisplaySettings
from ..domain.interfaces import DatabaseConnector
from ..domain.models import ConnectionHealth, HealthStatus, SchemaPreview
from .crawler import SchemaCrawler

class InspectionReport(BaseModel):
    health: ConnectionHealth
    schema_preview: Optional[SchemaPreview] = None

class InspectorFacade:
    """
    Facade Pattern: liveness check followed by the schema preview.
    """
    def __init__(self, connector: DatabaseConnector, display: DisplaySettings = DisplaySettings()):
        self._connector = connector
        self._crawler = SchemaCrawler(connector)
        self._display = display

    def run_diagnostics(self) -> InspectionReport:
        # 1. Check connection first (Fail Fast)
        health = self._connector.check_health()
        if health.status == HealthStatus.FAILED:
            return InspectionReport(health=health, schema_preview=None)

        # 2. Crawl Schema only if the server answered; QueryError propagates
        preview = self._crawler.preview(self._display)
        return InspectionReport(health=health, schema_preview=preview)

__all__ = ["SchemaCrawler", "InspectorFacade", "InspectionReport"]
