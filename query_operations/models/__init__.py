"""
Query Models

This module provides the query request model, its builder and filter helpers.
"""

from .filters import FilterClause, FilterOperator, eq, in_, range_, normalize_filter, freeze_filter
from .request import QueryRequest, QueryRequestBuilder

__all__ = [
    "QueryRequest",
    "QueryRequestBuilder",
    "FilterClause",
    "FilterOperator",
    "eq",
    "in_",
    "range_",
    "normalize_filter",
    "freeze_filter",
]
