from .registry import PROBE_GROUPS, ProbeGroup, select_groups

__all__ = ["PROBE_GROUPS", "ProbeGroup", "select_groups"]
