from typing import Any, Callable, List
from ..config import ProbePolicy
from ..domain.interfaces import DatabaseConnector
from ..domain.models import CheckResult
from ..exceptions import QueryError

# A probe maps the open connection (plus policy thresholds) to one or more rows
Probe = Callable[[DatabaseConnector, ProbePolicy], List[CheckResult]]

def to_text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    return str(value)

def to_number(value: Any, sql: str, kind: Callable[[str], Any] = int) -> Any:
    """Decode a SHOW STATUS/VARIABLES value, which the server returns as text."""
    try:
        return kind(to_text(value).strip())
    except (TypeError, ValueError):
        raise QueryError(f"Cannot decode {value!r} as {kind.__name__}", sql=sql)

def fetch_variable(conn: DatabaseConnector, sql: str) -> Any:
    """
    Value column of a single-row `SHOW ... LIKE 'name'` result
    (Variable_name, Value). A missing row is a QueryError.
    """
    rows = conn.fetch_rows(sql)
    if not rows:
        raise QueryError("No rows returned", sql=sql)
    row = rows[0]
    if len(row) < 2:
        raise QueryError(f"Expected (Variable_name, Value), got {len(row)} fields", sql=sql)
    return row[1]

def fetch_int_variable(conn: DatabaseConnector, sql: str) -> int:
    return to_number(fetch_variable(conn, sql), sql)
