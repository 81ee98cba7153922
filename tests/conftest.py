import sqlite3
import pytest
from dbsniff.config import ProbePolicy
from dbsniff.connectors.base import SQLAlchemyConnector
from dbsniff.domain.models import ConnectionHealth, HealthStatus
from dbsniff.exceptions import ConnectionError, QueryError
from dbsniff.inspector.crawler import SHOW_TABLES_SQL, describe_sql
from dbsniff.probes import health, performance, security

class FakeConnector:
    """
    In-memory stand-in for a live connection: maps exact SQL text to rows.
    Unknown statements and statements listed in `failures` raise QueryError.
    """
    def __init__(self, responses=None, failures=(), db_alias="fake", reachable=True):
        self.responses = dict(responses or {})
        self.failures = set(failures)
        self.db_alias = db_alias
        self.reachable = reachable
        self.executed = []
        self.closed = False

    def connect(self):
        if not self.reachable:
            raise ConnectionError("Error connecting to database 'fake': refused")

    def close(self):
        self.closed = True

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, *exc):
        self.close()

    def check_health(self):
        if not self.reachable:
            return ConnectionHealth(db_alias=self.db_alias, status=HealthStatus.FAILED, error_message="refused")
        return ConnectionHealth(db_alias=self.db_alias, status=HealthStatus.SUCCESS, latency_ms=1.0)

    def fetch_rows(self, sql):
        self.executed.append(sql)
        if sql in self.failures:
            raise QueryError("Query failed: simulated", sql=sql)
        if sql not in self.responses:
            raise QueryError("Query failed: no canned response", sql=sql)
        return list(self.responses[sql])

def healthy_responses(policy=ProbePolicy()):
    """Canned answers for every query a full report issues."""
    return {
        SHOW_TABLES_SQL: [("orders",), ("users",)],
        describe_sql("orders"): [
            ("id", "int", "NO", "PRI", None, "auto_increment"),
            ("total", "decimal(10,2)", "YES", "", "0.00", ""),
        ],
        describe_sql("users"): [
            ("id", "int", "NO", "PRI", None, "auto_increment"),
            ("email", "varchar(255)", "NO", "UNI", None, ""),
        ],
        health.UPTIME_SQL: [("Uptime", "3661")],
        health.THREADS_CONNECTED_SQL: [("Threads_connected", "7")],
        health.SLOW_QUERIES_SQL: [("Slow_queries", "3")],
        health.BUFFER_POOL_SQL: [
            ("Innodb_buffer_pool_pages_data", "512"),
            ("Innodb_buffer_pool_pages_total", "8192"),
        ],
        health.OPEN_TABLES_SQL: [("Open_tables", "40")],
        health.TABLE_OPEN_CACHE_SQL: [("table_open_cache", "4000")],
        security.EMPTY_PASSWORDS_SQL: [],
        security.ADMIN_PRIVILEGES_SQL: [],
        security.VERSION_SQL: [("8.0.36",)],
        performance.unindexed_tables_sql(policy): [],
    }

@pytest.fixture
def policy():
    return ProbePolicy()

@pytest.fixture
def fake_connector():
    return FakeConnector(healthy_responses())

@pytest.fixture
def mysql_shaped_sqlite(tmp_path):
    """
    Builds a SQLAlchemyConnector over SQLite with attached `mysql` and
    `information_schema` databases, so the real account and table-size
    SQL can run. Call with the rows to load; returns the connector.
    """
    connectors = []

    def build(users=(), tables=()):
        main_db = tmp_path / "main.db"
        mysql_db = tmp_path / "mysql.db"
        info_db = tmp_path / "information_schema.db"

        with sqlite3.connect(str(mysql_db)) as raw:
            raw.execute("CREATE TABLE user (user TEXT, host TEXT, authentication_string TEXT, Super_priv TEXT)")
            raw.executemany("INSERT INTO user VALUES (?, ?, ?, ?)", users)
        with sqlite3.connect(str(info_db)) as raw:
            raw.execute(
                "CREATE TABLE tables (table_schema TEXT, table_name TEXT, table_rows INTEGER, "
                "data_length INTEGER, index_length INTEGER)"
            )
            raw.executemany("INSERT INTO tables VALUES (?, ?, ?, ?, ?)", tables)

        def creator():
            raw = sqlite3.connect(str(main_db))
            raw.execute("ATTACH DATABASE ? AS mysql", (str(mysql_db),))
            raw.execute("ATTACH DATABASE ? AS information_schema", (str(info_db),))
            return raw

        connector = SQLAlchemyConnector("sqlite://", "fixture", creator=creator)
        connector.connect()
        connectors.append(connector)
        return connector

    yield build
    for connector in connectors:
        connector.close()
