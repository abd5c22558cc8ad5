"""
Query Operations Exceptions

This module defines custom exceptions for query request preparation,
providing clear error handling and reporting for invalid queries.
"""

from typing import List, Optional

from endee_ops_exceptions import QueryError


class QueryRequestError(QueryError):
    """Base exception for all query request errors"""
    pass


class InvalidQueryParametersError(QueryRequestError):
    """
    Raised when query parameters are invalid.

    All problems found in a request are reported together; the individual
    messages are kept on ``errors``.

    Attributes:
        errors: Individual validation messages
    """
    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = list(errors) if errors else [message]


class FilterClauseError(InvalidQueryParametersError):
    """Raised when a filter clause cannot be constructed"""
    pass
