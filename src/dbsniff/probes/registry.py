import logging
from typing import Dict, List, Mapping, Sequence
from ..config import ProbePolicy
from ..domain.interfaces import DatabaseConnector
from ..domain.models import GroupReport
from ..exceptions import QueryError
from . import health, performance, security
from .base import Probe

logger = logging.getLogger(__name__)

class ProbeGroup:
    """
    Named, ordered collection of probes sharing a theme.
    A QueryError stops the group; rows collected before it are kept.
    """
    def __init__(self, name: str, title: str, probes: Mapping[str, Probe]):
        self.name = name
        self.title = title
        self.probes: Dict[str, Probe] = dict(probes)

    def run(self, conn: DatabaseConnector, policy: ProbePolicy) -> GroupReport:
        report = GroupReport(name=self.name, title=self.title)
        for check_name, probe in self.probes.items():
            try:
                report.rows.extend(probe(conn, policy))
            except QueryError as e:
                logger.error("%s check '%s' failed: %s", self.title, check_name, e)
                if e.sql:
                    logger.debug("Failing statement: %s", " ".join(e.sql.split()))
                report.error = f"error retrieving {check_name}: {e}"
                break
        return report

    def __repr__(self) -> str:
        return f"ProbeGroup({self.name!r}, checks={list(self.probes)})"

HEALTH = ProbeGroup("health", "Health", {
    "uptime": health.check_uptime,
    "active connections": health.check_active_connections,
    "slow queries": health.check_slow_queries,
    "buffer pool usage": health.check_buffer_pool_usage,
    "open tables": health.check_open_tables,
})

SECURITY = ProbeGroup("security", "Security", {
    "empty passwords": security.check_empty_passwords,
    "admin privileges": security.check_admin_privileges,
    "server version": security.check_server_version,
})

PERFORMANCE = ProbeGroup("performance", "Performance", {
    "index usage": performance.check_unindexed_tables,
})

# Fixed run order
PROBE_GROUPS: List[ProbeGroup] = [HEALTH, SECURITY, PERFORMANCE]

def select_groups(names: Sequence[str]) -> List[ProbeGroup]:
    """
    Subset of PROBE_GROUPS in run order. Empty selection means all groups.
    Raises ValueError for unknown names.
    """
    if not names:
        return list(PROBE_GROUPS)
    wanted = {n.strip().lower() for n in names}
    unknown = wanted - {g.name for g in PROBE_GROUPS}
    if unknown:
        raise ValueError(f"Unknown probe group(s): {', '.join(sorted(unknown))}")
    return [g for g in PROBE_GROUPS if g.name in wanted]
