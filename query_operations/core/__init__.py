"""
Core Query Operations

This module provides request validation and payload conversion for queries.
"""

from .validator import QueryValidator
from .payload import to_payload, from_payload, prepare_query

__all__ = [
    "QueryValidator",
    "to_payload",
    "from_payload",
    "prepare_query",
]
