import pytest
from sqlalchemy import text
from dbsniff.config import ConnectionConfig
from dbsniff.connectors.base import SQLAlchemyConnector
from dbsniff.connectors.factory import get_connector
from dbsniff.connectors.mysql import MySQLConnector, build_url
from dbsniff.domain.models import HealthStatus
from dbsniff.exceptions import ConnectionError, QueryError

# Mocking the connector to use SQLite for testing safety mechanisms
class SafetyConnector(SQLAlchemyConnector):
    def __init__(self):
        # Use in-memory SQLite for fast testing
        super().__init__("sqlite:///:memory:", "test_db")

def test_read_only_listener_allows_select():
    """Test that SELECT statements are allowed."""
    with SafetyConnector() as connector:
        assert connector.fetch_rows("SELECT 1") == [(1,)]

def test_read_only_listener_blocks_create():
    """Test that CREATE TABLE statements are blocked at the engine level."""
    connector = SafetyConnector()
    connector.connect()

    with pytest.raises(PermissionError) as excinfo:
        with connector.engine.connect() as conn:
            conn.execute(text("CREATE TABLE test (id int)"))

    assert "SAFETY BLOCK" in str(excinfo.value)
    connector.close()

@pytest.mark.parametrize("statement", [
    "DROP TABLE users",
    "INSERT INTO users VALUES (1)",
    "UPDATE users SET name='admin'",
    "DELETE FROM users",
    "  grant all on *.* to 'x'",
])
def test_fetch_rows_wraps_blocked_statements(statement):
    """Blocked writes surface as QueryError carrying the statement."""
    with SafetyConnector() as connector:
        with pytest.raises(QueryError) as excinfo:
            connector.fetch_rows(statement)

        assert "SAFETY BLOCK" in str(excinfo.value)
        assert excinfo.value.sql == statement
        # Connection is still usable afterwards
        assert connector.fetch_rows("SELECT 2") == [(2,)]

def test_read_only_listener_allows_explain():
    """Test that EXPLAIN statements are allowed."""
    with SafetyConnector() as connector:
        # SQLite supports EXPLAIN QUERY PLAN
        connector.fetch_rows("EXPLAIN QUERY PLAN SELECT 1")

def test_read_only_listener_allows_with_cte():
    """Test that WITH (CTE) statements are allowed."""
    with SafetyConnector() as connector:
        assert connector.fetch_rows("WITH t AS (SELECT 1 as a) SELECT a FROM t") == [(1,)]

def test_query_failure_raises_query_error():
    with SafetyConnector() as connector:
        with pytest.raises(QueryError):
            connector.fetch_rows("SELECT * FROM missing_table")

def test_close_releases_engine():
    connector = SafetyConnector()
    connector.connect()
    assert connector.engine is not None
    connector.close()
    assert connector.engine is None
    # close is safe to repeat
    connector.close()

def test_unreachable_database_raises_connection_error(tmp_path):
    """Opening fails before any probe can run."""
    connector = get_connector(f"sqlite:///{tmp_path}/missing/dir/db.sqlite")
    with pytest.raises(ConnectionError):
        connector.connect()
    assert connector.engine is None

def test_unreachable_mysql_server_raises_connection_error():
    config = ConnectionConfig(host="127.0.0.1", port=1, user="nobody", database="none", connect_timeout=1)
    connector = get_connector(config)
    assert isinstance(connector, MySQLConnector)
    with pytest.raises(ConnectionError):
        connector.connect()

def test_check_health_reports_failure_without_raising(tmp_path):
    connector = get_connector(f"sqlite:///{tmp_path}/missing/dir/db.sqlite", "broken")
    health = connector.check_health()
    assert health.status == HealthStatus.FAILED
    assert health.db_alias == "broken"
    assert health.error_message

def test_check_health_success():
    connector = SafetyConnector()
    try:
        health = connector.check_health()
    finally:
        connector.close()
    assert health.status == HealthStatus.SUCCESS
    assert health.latency_ms is not None

def test_build_url_escapes_credentials():
    config = ConnectionConfig(host="db.local", port=3307, user="app", password="p@ss:w/rd", database="shop")
    url = build_url(config)
    assert url.drivername == "mysql+pymysql"
    assert url.password == "p@ss:w/rd"
    assert url.port == 3307
    assert url.database == "shop"
    assert "p@ss:w/rd" not in url.render_as_string(hide_password=True)

def test_mysql_connector_default_alias():
    connector = MySQLConnector(ConnectionConfig(user="app", host="db", port=3306, database="shop"))
    assert connector.db_alias == "app@db:3306/shop"

def test_mysql_connector_keeps_only_engine_settings():
    connector = MySQLConnector(ConnectionConfig(user="app", host="db", database="shop", connect_timeout=5))
    assert connector._engine_options == {"connect_args": {"connect_timeout": 5}}
    assert not hasattr(connector, "config")
