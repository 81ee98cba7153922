"""
Security probes: account hygiene from mysql.user and the server version.

The account probes emit one row per offending account, or a single clean
row when nothing is found.
"""
import re
from typing import List, Optional, Tuple
from ..config import ProbePolicy
from ..domain.interfaces import DatabaseConnector
from ..domain.models import CheckResult, CheckStatus
from ..exceptions import QueryError
from .base import to_text

EMPTY_PASSWORDS_SQL = (
    "SELECT user, host FROM mysql.user "
    "WHERE authentication_string = '' OR authentication_string IS NULL"
)
ADMIN_PRIVILEGES_SQL = "SELECT user, host FROM mysql.user WHERE Super_priv = 'Y'"
VERSION_SQL = "SELECT @@version"

_VERSION_RE = re.compile(r"^\s*(\d+(?:\.\d+)*)")

def _accounts(conn: DatabaseConnector, sql: str) -> List[str]:
    accounts = []
    for row in conn.fetch_rows(sql):
        if len(row) < 2:
            raise QueryError(f"Expected (user, host), got {len(row)} fields", sql=sql)
        accounts.append(f"{to_text(row[0])}@{to_text(row[1])}")
    return accounts

def check_empty_passwords(conn: DatabaseConnector, policy: ProbePolicy) -> List[CheckResult]:
    offenders = _accounts(conn, EMPTY_PASSWORDS_SQL)
    if not offenders:
        return [CheckResult(
            check="Empty Passwords",
            value="No users with empty passwords.",
            status=CheckStatus.GOOD,
            remark="No action needed.",
        )]
    return [
        CheckResult(check="Empty Passwords", value=account, status=CheckStatus.BAD,
                    remark="Set strong passwords for all accounts.")
        for account in offenders
    ]

def check_admin_privileges(conn: DatabaseConnector, policy: ProbePolicy) -> List[CheckResult]:
    admins = _accounts(conn, ADMIN_PRIVILEGES_SQL)
    if not admins:
        return [CheckResult(
            check="Admin Privileges",
            value="No administrator accounts found.",
            status=CheckStatus.GOOD,
            remark="No action needed.",
        )]
    return [
        CheckResult(check="Admin Privileges", value=account, status=CheckStatus.BAD,
                    remark="Minimize the number of admin accounts.")
        for account in admins
    ]

def parse_version(version: str) -> Optional[Tuple[int, ...]]:
    """Leading dotted numbers of a version string: '8.0.35-0ubuntu' -> (8, 0, 35)."""
    match = _VERSION_RE.match(version)
    if not match:
        return None
    return tuple(int(part) for part in match.group(1).split("."))

def is_version_older(version: str, minimum: str, comparison: str = "numeric") -> Optional[bool]:
    """
    True if `version` sorts before `minimum`.

    comparison="lexical" compares the raw strings, so "10.0" < "8.0".
    comparison="numeric" compares numeric components, padding the shorter
    one with zeros. Returns None when either side has no numeric prefix.
    """
    if comparison == "lexical":
        return version < minimum

    current, required = parse_version(version), parse_version(minimum)
    if current is None or required is None:
        return None
    width = max(len(current), len(required))
    current += (0,) * (width - len(current))
    required += (0,) * (width - len(required))
    return current < required

def check_server_version(conn: DatabaseConnector, policy: ProbePolicy) -> List[CheckResult]:
    rows = conn.fetch_rows(VERSION_SQL)
    if not rows or not rows[0]:
        raise QueryError("No rows returned", sql=VERSION_SQL)
    version = to_text(rows[0][0])

    older = is_version_older(version, policy.min_server_version, policy.version_comparison)
    if older is None:
        status, remark = CheckStatus.WARNING, f"Could not parse version; verify it is {policy.min_server_version} or higher."
    elif older:
        status, remark = CheckStatus.BAD, f"Upgrade to MySQL {policy.min_server_version} or higher."
    else:
        status, remark = CheckStatus.GOOD, "No action needed."
    return [CheckResult(check="MySQL Version", value=f"Version: {version}", status=status, remark=remark)]
