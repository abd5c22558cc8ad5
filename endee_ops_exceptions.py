"""
Endee Operations Exceptions

This module defines custom exceptions for the Endee_Ops package
to provide clear error handling and reporting.
"""

class EndeeOpsError(Exception):
    """Base exception for all Endee_Ops errors"""
    pass


class ConfigurationError(EndeeOpsError):
    """Raised when configuration is invalid or missing"""
    pass


class QueryError(EndeeOpsError):
    """Raised when a query cannot be prepared for the index"""
    pass
