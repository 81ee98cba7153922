import logging
from typing import Any, List, Optional, Tuple
from ..config import DisplaySettings
from ..domain.interfaces import DatabaseConnector
from ..domain.models import ColumnDef, SchemaPreview, TableSchema
from ..exceptions import QueryError

logger = logging.getLogger(__name__)

SHOW_TABLES_SQL = "SHOW TABLES"

def quote_identifier(name: str) -> str:
    """MySQL identifier quoting: wrap in backticks, double any embedded backtick."""
    return "`" + name.replace("`", "``") + "`"

def describe_sql(table_name: str) -> str:
    return f"DESCRIBE {quote_identifier(table_name)}"

def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    return str(value)

class SchemaCrawler:
    """
    SRP: Responsible only for metadata/schema crawling.
    Returns complete lists; display limits are applied by preview().
    """
    def __init__(self, connector: DatabaseConnector):
        self.connector = connector

    def list_tables(self) -> List[str]:
        rows = self.connector.fetch_rows(SHOW_TABLES_SQL)
        try:
            return [_text(row[0]) for row in rows]
        except IndexError as e:
            raise QueryError(f"Unexpected SHOW TABLES row shape: {e}", sql=SHOW_TABLES_SQL)

    def describe_table(self, table_name: str) -> List[ColumnDef]:
        sql = describe_sql(table_name)
        rows = self.connector.fetch_rows(sql)
        return [self._to_column(row, sql) for row in rows]

    @staticmethod
    def _to_column(row: Tuple[Any, ...], sql: str) -> ColumnDef:
        # DESCRIBE: Field, Type, Null, Key, Default, Extra
        if len(row) < 6:
            raise QueryError(f"Unexpected DESCRIBE row with {len(row)} fields", sql=sql)
        field, data_type, null, key, default, extra = row[:6]
        return ColumnDef(
            name=_text(field),
            data_type=_text(data_type),
            is_nullable=(_text(null) or "").upper() == "YES",
            key=_text(key) or "",
            default=_text(default),
            extra=_text(extra) or "",
        )

    def preview(self, display: DisplaySettings) -> SchemaPreview:
        """
        Lists every table but only describes the first `max_tables`,
        keeping at most `max_columns` columns of each.
        """
        tables = self.list_tables()
        shown = []
        for table in tables[:display.max_tables]:
            columns = self.describe_table(table)
            shown.append(TableSchema(
                table_name=table,
                columns=columns[:display.max_columns],
                total_columns=len(columns),
            ))
        logger.info("Found %d tables, previewing %d", len(tables), len(shown))
        return SchemaPreview(tables=shown, total_tables=len(tables))
