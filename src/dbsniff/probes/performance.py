from typing import List
from ..config import ProbePolicy
from ..domain.interfaces import DatabaseConnector
from ..domain.models import CheckResult, CheckStatus
from ..exceptions import QueryError
from .base import to_number, to_text

def _sql_literal(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "''") + "'"

def unindexed_tables_sql(policy: ProbePolicy) -> str:
    """Large user tables (row estimate above the policy limit) with no index storage at all."""
    excluded = ", ".join(_sql_literal(s) for s in policy.system_schemas) or "''"
    return f"""
    SELECT
        t.table_schema,
        t.table_name,
        t.table_rows,
        ps.index_size,
        ps.data_size,
        ps.total_size
    FROM
        information_schema.tables t
    JOIN (
        SELECT
            table_schema,
            table_name,
            SUM(data_length) data_size,
            SUM(index_length) index_size,
            SUM(data_length + index_length) total_size
        FROM
            information_schema.tables
        GROUP BY
            table_schema,
            table_name
    ) ps ON t.table_schema = ps.table_schema AND t.table_name = ps.table_name
    WHERE
        t.table_schema NOT IN ({excluded})
        AND t.table_rows > {int(policy.large_table_rows)}
        AND ps.index_size = 0"""

def check_unindexed_tables(conn: DatabaseConnector, policy: ProbePolicy) -> List[CheckResult]:
    sql = unindexed_tables_sql(policy)
    results = []
    for row in conn.fetch_rows(sql):
        if len(row) < 6:
            raise QueryError(f"Expected 6 fields per table, got {len(row)}", sql=sql)
        schema, table = to_text(row[0]), to_text(row[1])
        table_rows, index_size, data_size, total_size = (to_number(v, sql) for v in row[2:6])
        results.append(CheckResult(
            check="Table Index Check",
            value=f"{schema}.{table}",
            status=CheckStatus.FAILED,
            remark=(f"{schema}.{table}: {table_rows} rows, Data Size: {data_size}, "
                    f"Index Size: {index_size}, Total Size: {total_size}"),
        ))

    if not results:
        results.append(CheckResult(
            check="Table Index Check",
            value="0 tables",
            status=CheckStatus.PASSED,
            remark="All tables with significant data are indexed.",
        ))
    return results
