from typing import Any, List, Optional, Tuple
import logging
import time
from sqlalchemy import create_engine, text, event
from sqlalchemy.engine import Connection, Engine, URL
from sqlalchemy.exc import SQLAlchemyError
from ..domain.models import HealthStatus, ConnectionHealth
from ..exceptions import ConnectionError, QueryError

logger = logging.getLogger(__name__)

# Only statements starting with one of these keywords may reach the server
READ_ONLY_KEYWORDS = (
    "SELECT",
    "WITH",
    "EXPLAIN",
    "DESCRIBE",
    "SHOW",
    "SET",  # Needed for session configuration
)

class SQLAlchemyConnector:
    """
    Generic SQLAlchemy Connector holding one connection for the whole run.
    Can be specialized per dialect (see MySQLConnector) or used directly
    with a URL string.
    """
    def __init__(self, connection_string: "str | URL", db_alias: str = "unknown", **engine_options: Any):
        self.connection_string = connection_string
        self.db_alias = db_alias
        self._engine_options = engine_options
        self._engine: Optional[Engine] = None
        self._conn: Optional[Connection] = None

    @staticmethod
    def _enforce_read_only_listener(conn, cursor, statement, parameters, context, executemany):
        """
        Strategy 1: Event Hook (Interceptor).
        Blocks any SQL that doesn't start with a whitelist keyword.
        """
        sql = statement.strip().upper()

        if not any(sql.startswith(keyword) for keyword in READ_ONLY_KEYWORDS):
            raise PermissionError(
                f"SAFETY BLOCK: Operation blocked! Only read-only queries are allowed. "
                f"Attempted: {sql[:50]}..."
            )

    @staticmethod
    def _set_readonly_session_listener(connection):
        """
        Strategy 2: Session-Level Read-Only Mode.
        Marks MySQL sessions READ ONLY as soon as they are checked out.
        """
        dialect = connection.dialect.name.lower()
        if dialect not in ("mysql", "mariadb"):
            return
        try:
            connection.exec_driver_sql("SET SESSION TRANSACTION READ ONLY")
        except SQLAlchemyError as e:
            # Strategy 1 is the primary guard
            logger.warning("Failed to set READ ONLY session on %s: %s", dialect, e)

    def _create_engine(self) -> Engine:
        return create_engine(self.connection_string, **self._engine_options)

    @property
    def engine(self) -> Optional[Engine]:
        return self._engine

    def connect(self) -> None:
        """
        Opens the single connection and verifies it with a ping.
        Raises ConnectionError, releasing anything acquired so far.
        """
        if self._conn is not None:
            return
        try:
            if not self._engine:
                self._engine = self._create_engine()

                # Register Strategy 1: Interceptor
                event.listen(self._engine, "before_cursor_execute", self._enforce_read_only_listener)

                # Register Strategy 2: Session Configuration
                event.listen(self._engine, "engine_connect", self._set_readonly_session_listener)

            logger.info("Connecting to %s", self.db_alias)
            self._conn = self._engine.connect()
            self._conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, ImportError, PermissionError) as e:
            self.close()
            raise ConnectionError(f"Error connecting to database '{self.db_alias}': {e}") from e
        logger.info("Connected to %s", self.db_alias)

    def close(self) -> None:
        if self._conn is not None:
            try:
                self._conn.close()
            except SQLAlchemyError as e:
                logger.warning("Error while closing connection to %s: %s", self.db_alias, e)
            self._conn = None
        if self._engine:
            self._engine.dispose()
            self._engine = None

    def __enter__(self) -> "SQLAlchemyConnector":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def check_health(self) -> ConnectionHealth:
        start_time = time.time()
        status = HealthStatus.FAILED
        error_msg = None

        try:
            self.connect()
            self._conn.execute(text("SELECT 1"))
            status = HealthStatus.SUCCESS
        except (ConnectionError, SQLAlchemyError) as e:
            error_msg = str(e)
            status = HealthStatus.FAILED

        latency = (time.time() - start_time) * 1000  # ms

        if latency > 5000:
            # Connection timeouts are the driver's job; this flags slow round trips
            if status == HealthStatus.SUCCESS:
                status = HealthStatus.TIMEOUT

        return ConnectionHealth(
            db_alias=self.db_alias,
            status=status,
            latency_ms=round(latency, 2),
            error_message=error_msg
        )

    def fetch_rows(self, sql: str) -> List[Tuple[Any, ...]]:
        """
        Runs one read-only statement on the shared connection.
        Every failure, including the safety block, surfaces as QueryError.
        """
        self.connect()
        logger.debug("Executing: %s", " ".join(sql.split()))
        try:
            result = self._conn.execute(text(sql))
            return [tuple(row) for row in result]
        except PermissionError as e:
            self._conn.rollback()
            raise QueryError(str(e), sql=sql) from e
        except SQLAlchemyError as e:
            # Leave the connection usable for the next group
            self._conn.rollback()
            # DBAPI errors carry the server message on .orig
            raise QueryError(f"Query failed: {getattr(e, 'orig', None) or e}", sql=sql) from e
