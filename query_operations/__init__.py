"""
Query Operations Module

This module describes similarity-search queries against an Endee index:
- QueryRequest, an immutable description of one query
- QueryRequestBuilder, a fluent builder for requests
- Filter clause helpers ($eq, $in, $range)
- Validation of requests against engine constraints
- Conversion to and from the wire payload
"""

from .models import (
    QueryRequest,
    QueryRequestBuilder,
    FilterClause,
    FilterOperator,
    eq,
    in_,
    range_,
    normalize_filter,
    freeze_filter,
)

from .core import (
    QueryValidator,
    to_payload,
    from_payload,
    prepare_query,
)

from .query_ops_exceptions import (
    QueryRequestError,
    InvalidQueryParametersError,
    FilterClauseError,
)

__all__ = [
    # Models
    "QueryRequest",
    "QueryRequestBuilder",
    "FilterClause",
    "FilterOperator",
    "eq",
    "in_",
    "range_",
    "normalize_filter",
    "freeze_filter",

    # Core
    "QueryValidator",
    "to_payload",
    "from_payload",
    "prepare_query",

    # Exceptions
    "QueryRequestError",
    "InvalidQueryParametersError",
    "FilterClauseError",
]
