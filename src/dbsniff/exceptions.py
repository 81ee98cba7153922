from typing import Optional

class DbSniffException(Exception):
    """Base Exception Class"""
    pass

class ConnectionError(DbSniffException):
    """Connection Failure (open or liveness check)"""
    pass

class QueryError(DbSniffException):
    """Diagnostic or metadata query failed, or a row could not be decoded"""

    def __init__(self, message: str, sql: Optional[str] = None):
        super().__init__(message)
        self.sql = sql

class ConfigurationError(DbSniffException):
    """Configuration Error"""
    pass
