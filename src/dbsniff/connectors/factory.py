from typing import Union
from ..config import ConnectionConfig
from .base import SQLAlchemyConnector
from .mysql import MySQLConnector

def get_connector(config: Union[str, ConnectionConfig], alias: str = None) -> SQLAlchemyConnector:
    """
    Factory function to create the appropriate connector instance.
    Accepts either a ConnectionConfig (MySQL over PyMySQL) or a ready
    SQLAlchemy URL string.
    """
    if isinstance(config, ConnectionConfig):
        return MySQLConnector(config, alias)

    # Generic SQLAlchemy connector for URLs (mysql+pymysql://..., sqlite://...)
    return SQLAlchemyConnector(config, alias or "unknown")
