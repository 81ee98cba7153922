"""
Health probes: server counters read from SHOW GLOBAL STATUS / SHOW VARIABLES.
"""
from datetime import timedelta
from typing import List
from ..config import ProbePolicy
from ..domain.interfaces import DatabaseConnector
from ..domain.models import CheckResult, CheckStatus
from ..exceptions import QueryError
from .base import fetch_int_variable, to_number, to_text

UPTIME_SQL = "SHOW GLOBAL STATUS LIKE 'Uptime'"
THREADS_CONNECTED_SQL = "SHOW GLOBAL STATUS LIKE 'Threads_connected'"
SLOW_QUERIES_SQL = "SHOW GLOBAL STATUS LIKE 'Slow_queries'"
BUFFER_POOL_SQL = (
    "SHOW GLOBAL STATUS WHERE Variable_name IN "
    "('Innodb_buffer_pool_pages_total', 'Innodb_buffer_pool_pages_data')"
)
OPEN_TABLES_SQL = "SHOW GLOBAL STATUS LIKE 'Open_tables'"
TABLE_OPEN_CACHE_SQL = "SHOW VARIABLES LIKE 'table_open_cache'"

def check_uptime(conn: DatabaseConnector, policy: ProbePolicy) -> List[CheckResult]:
    seconds = fetch_int_variable(conn, UPTIME_SQL)
    return [CheckResult(
        check="Uptime",
        value=str(timedelta(seconds=seconds)),
        status=CheckStatus.OK,
        remark="Database running time",
    )]

def check_active_connections(conn: DatabaseConnector, policy: ProbePolicy) -> List[CheckResult]:
    connected = fetch_int_variable(conn, THREADS_CONNECTED_SQL)
    return [CheckResult(
        check="Active Connections",
        value=str(connected),
        status=CheckStatus.OK,
        remark="Number of current connections",
    )]

def check_slow_queries(conn: DatabaseConnector, policy: ProbePolicy) -> List[CheckResult]:
    slow = fetch_int_variable(conn, SLOW_QUERIES_SQL)
    if slow > policy.slow_query_threshold:
        status, remark = CheckStatus.WARNING, "High number of slow queries"
    else:
        status, remark = CheckStatus.OK, "Acceptable number of slow queries"
    return [CheckResult(check="Slow Queries", value=str(slow), status=status, remark=remark)]

def buffer_pool_usage(total: float, used: float) -> str:
    """Usage percentage as text, or 'N/A' when the pool size is unknown."""
    if total == 0:
        return "N/A"
    return f"{used / total * 100:.2f}%"

def check_buffer_pool_usage(conn: DatabaseConnector, policy: ProbePolicy) -> List[CheckResult]:
    total = used = 0.0
    for row in conn.fetch_rows(BUFFER_POOL_SQL):
        if len(row) < 2:
            raise QueryError(f"Expected (Variable_name, Value), got {len(row)} fields", sql=BUFFER_POOL_SQL)
        name = to_text(row[0])
        if name.lower() == "innodb_buffer_pool_pages_total":
            total = to_number(row[1], BUFFER_POOL_SQL, float)
        elif name.lower() == "innodb_buffer_pool_pages_data":
            used = to_number(row[1], BUFFER_POOL_SQL, float)

    usage = buffer_pool_usage(total, used)
    return [CheckResult(
        check="Buffer Pool Usage",
        value=usage,
        status=CheckStatus.WARNING if usage == "N/A" else CheckStatus.OK,
        remark="Percentage of buffer pool used",
    )]

def open_tables_status(open_tables: int, cache_limit: int, ratio: float) -> CheckStatus:
    if open_tables > ratio * cache_limit:
        return CheckStatus.WARNING
    return CheckStatus.NORMAL

def check_open_tables(conn: DatabaseConnector, policy: ProbePolicy) -> List[CheckResult]:
    open_tables = fetch_int_variable(conn, OPEN_TABLES_SQL)
    cache_limit = fetch_int_variable(conn, TABLE_OPEN_CACHE_SQL)

    status = open_tables_status(open_tables, cache_limit, policy.open_tables_ratio)
    if status is CheckStatus.WARNING:
        remark = f"High open tables count: {open_tables} of {cache_limit} cache limit."
    else:
        remark = f"{open_tables} open tables of {cache_limit} cache limit."
    return [CheckResult(
        check="Open Tables",
        value=f"{open_tables} / {cache_limit}",
        status=status,
        remark=remark + " Review table_open_cache if frequent opening/closing of tables.",
    )]
