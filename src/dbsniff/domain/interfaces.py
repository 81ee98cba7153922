from typing import Any, List, Protocol, Tuple
from .models import ConnectionHealth

class DatabaseConnector(Protocol):
    """
    What the inspector, probes and orchestrator need from a connection.
    Implemented by SQLAlchemyConnector; tests provide in-memory fakes.
    """
    db_alias: str

    def connect(self) -> None: ...

    def close(self) -> None: ...

    def check_health(self) -> ConnectionHealth: ...

    def fetch_rows(self, sql: str) -> List[Tuple[Any, ...]]: ...
