from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

class HealthStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    TIMEOUT = "timeout"

class ConnectionHealth(BaseModel):
    db_alias: str
    status: HealthStatus
    latency_ms: Optional[float] = None
    error_message: Optional[str] = None

class ColumnDef(BaseModel):
    """One row of DESCRIBE output."""
    name: str
    data_type: str
    is_nullable: bool
    key: str = ""  # PRI, UNI, MUL or empty
    default: Optional[str] = None
    extra: str = ""

    @property
    def is_primary_key(self) -> bool:
        return self.key == "PRI"

class TableSchema(BaseModel):
    table_name: str
    columns: List[ColumnDef]
    total_columns: Optional[int] = None  # set when `columns` is a truncated view

class SchemaPreview(BaseModel):
    """Display-limited view of the database schema"""
    tables: List[TableSchema] = Field(default_factory=list)
    total_tables: int = 0

    @property
    def hidden_tables(self) -> int:
        return max(self.total_tables - len(self.tables), 0)

class CheckStatus(str, Enum):
    OK = "OK"
    NORMAL = "Normal"
    GOOD = "Good"
    PASSED = "PASSED"
    WARNING = "Warning"
    BAD = "Bad"
    FAILED = "FAILED"

    @property
    def is_problem(self) -> bool:
        return self in (CheckStatus.WARNING, CheckStatus.BAD, CheckStatus.FAILED)

class CheckResult(BaseModel):
    """Outcome of one probe, ready for display"""
    check: str
    value: str
    status: CheckStatus
    remark: str = ""

class GroupReport(BaseModel):
    """Rows produced by one probe group. `error` is set when the group aborted."""
    name: str
    title: str
    rows: List[CheckResult] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def aborted(self) -> bool:
        return self.error is not None

class SniffReport(BaseModel):
    """Full report for one run"""
    database: str
    schema_preview: Optional[SchemaPreview] = None
    schema_error: Optional[str] = None
    groups: List[GroupReport] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return self.schema_error is not None or any(g.aborted for g in self.groups)

    @property
    def problem_count(self) -> int:
        return sum(1 for g in self.groups for row in g.rows if row.status.is_problem)
