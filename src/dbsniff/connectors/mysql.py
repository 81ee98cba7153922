from sqlalchemy.engine import URL
from ..config import ConnectionConfig
from .base import SQLAlchemyConnector

DRIVER_NAME = "mysql+pymysql"

def build_url(config: ConnectionConfig) -> URL:
    """
    SQLAlchemy URL for a ConnectionConfig.
    URL.create escapes special characters in user and password.
    """
    return URL.create(
        DRIVER_NAME,
        username=config.user,
        password=config.password.get_secret_value() or None,
        host=config.host,
        port=config.port,
        database=config.database or None,
    )

class MySQLConnector(SQLAlchemyConnector):
    """
    MySQL/MariaDB implementation over PyMySQL.
    Builds its URL from the config instead of taking a connection string.
    """
    def __init__(self, config: ConnectionConfig, db_alias: str = None):
        connect_args = {}
        if config.connect_timeout is not None:
            connect_args["connect_timeout"] = config.connect_timeout
        super().__init__(
            build_url(config),
            db_alias or f"{config.user}@{config.host}:{config.port}/{config.database}",
            connect_args=connect_args,
        )
