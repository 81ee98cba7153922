from typing import Literal, Optional, Tuple
from pathlib import Path
import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError
from .exceptions import ConfigurationError

class ConnectionConfig(BaseModel):
    """
    Connection details for the target server.
    Immutable once built; passed explicitly to the connector.
    """
    model_config = ConfigDict(frozen=True)

    host: str = "localhost"
    port: int = Field(default=3306, ge=1, le=65535)
    user: str = "root"
    password: SecretStr = SecretStr("")
    database: str = "mydatabase"

    # Driver level timeout in seconds, only forwarded when set
    connect_timeout: Optional[int] = Field(default=None, gt=0)

class ProbePolicy(BaseModel):
    """Thresholds used by the probes to classify results."""
    model_config = ConfigDict(frozen=True)

    slow_query_threshold: int = 100
    open_tables_ratio: float = Field(default=0.8, gt=0)
    large_table_rows: int = 10000
    min_server_version: str = "8.0"
    # 'lexical' keeps plain string ordering ("10.0" < "8.0")
    version_comparison: Literal["numeric", "lexical"] = "numeric"
    system_schemas: Tuple[str, ...] = ("information_schema", "mysql", "performance_schema", "sys")

class DisplaySettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_tables: int = Field(default=5, ge=0)
    max_columns: int = Field(default=10, ge=0)

class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DBSNIFF_", env_nested_delimiter="__")

    connection: ConnectionConfig = ConnectionConfig()
    policy: ProbePolicy = ProbePolicy()
    display: DisplaySettings = DisplaySettings()

    @classmethod
    def from_yaml(cls, config_path: Path) -> "AppConfig":
        if not config_path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r") as f:
                raw_config = yaml.safe_load(f) or {}
            if not isinstance(raw_config, dict):
                raise ConfigurationError(f"Invalid configuration format: expected a mapping in {config_path}")
            return cls(**raw_config)
        except (ValidationError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Invalid configuration format: {e}")

    def with_connection(self, **overrides) -> "AppConfig":
        """
        Returns a copy whose connection fields are replaced by the non-None overrides.
        Used by the CLI to layer command-line options over file/env values.
        """
        values = {k: v for k, v in overrides.items() if v is not None}
        if not values:
            return self
        try:
            connection = ConnectionConfig(**{**self.connection.model_dump(), **values})
        except ValidationError as e:
            raise ConfigurationError(f"Invalid connection settings: {e}")
        return self.model_copy(update={"connection": connection})
