import logging
from typing import Optional, Sequence
from ..config import DisplaySettings, ProbePolicy
from ..domain.interfaces import DatabaseConnector
from ..domain.models import SniffReport
from ..exceptions import QueryError
from ..inspector.crawler import SchemaCrawler
from ..probes.registry import PROBE_GROUPS, ProbeGroup

logger = logging.getLogger(__name__)

class ReportOrchestrator:
    """
    Runs the schema preview and then each probe group, in fixed order,
    against one open connection. A failing step is recorded on its own
    section of the report and never stops the following steps.
    """
    def __init__(
        self,
        policy: ProbePolicy = ProbePolicy(),
        display: DisplaySettings = DisplaySettings(),
        groups: Optional[Sequence[ProbeGroup]] = None,
        include_schema: bool = True,
    ):
        self.policy = policy
        self.display = display
        self.groups = list(PROBE_GROUPS if groups is None else groups)
        self.include_schema = include_schema

    def run(self, conn: DatabaseConnector, database: str = "") -> SniffReport:
        report = SniffReport(database=database or conn.db_alias)

        if self.include_schema:
            try:
                report.schema_preview = SchemaCrawler(conn).preview(self.display)
            except QueryError as e:
                logger.error("Schema introspection failed: %s", e)
                report.schema_error = f"Error retrieving tables: {e}"

        for group in self.groups:
            logger.info("Running %s checks...", group.name)
            group_report = group.run(conn, self.policy)
            if group_report.aborted:
                logger.warning("%s checks aborted after %d rows", group.title, len(group_report.rows))
            report.groups.append(group_report)

        return report
