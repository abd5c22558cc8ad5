"""
Filter Clauses

Defines the filter operators understood by the Endee query engine and small
helpers for building filter clauses. A clause is a plain mapping from one
field name to one operator mapping:

    {"category": {"$eq": "tech"}}
    {"score": {"$range": [80, 100]}}

Clauses stay plain dictionaries so they pass through to the engine untouched.
The helpers are optional conveniences; QueryValidator checks the shape.

Typical usage:

    from query_operations import QueryRequest, eq, range_

    request = (
        QueryRequest.builder()
        .vector([0.1, 0.2, 0.3])
        .top_k(10)
        .filter([eq("category", "tech"), range_("score", 80, 100)])
        .build()
    )
"""

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..query_ops_exceptions import FilterClauseError

FilterClause = Dict[str, Dict[str, Any]]


class FilterOperator(str, Enum):
    """Enumeration of supported filter operators"""
    EQ = "$eq"        # Field equals value
    IN = "$in"        # Field equals any of the listed values
    RANGE = "$range"  # Field lies in the inclusive [low, high] range


def _clause(field: str, operator: FilterOperator, value: Any) -> FilterClause:
    if not isinstance(field, str) or not field.strip():
        raise FilterClauseError("Filter field name cannot be empty")
    return {field: {operator.value: value}}


def eq(field: str, value: Any) -> FilterClause:
    """Build an equality clause: ``{field: {"$eq": value}}``."""
    return _clause(field, FilterOperator.EQ, value)


def in_(field: str, values: Iterable[Any]) -> FilterClause:
    """Build a membership clause: ``{field: {"$in": [v1, v2, ...]}}``."""
    return _clause(field, FilterOperator.IN, list(values))


def range_(field: str, low: Any, high: Any) -> FilterClause:
    """Build an inclusive range clause: ``{field: {"$range": [low, high]}}``."""
    return _clause(field, FilterOperator.RANGE, [low, high])


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_thaw(item) for item in value]
    return value


def normalize_filter(clauses: Optional[Sequence[Any]]) -> List[Dict[str, Any]]:
    """
    Copy filter clauses into a fresh list of plain dicts and lists, preserving order.

    The copy is deep, so operand lists such as ``$range`` bounds are not
    shared with the caller. No semantic checks are made here.
    """
    if clauses is None:
        return []
    return [_thaw(clause) for clause in clauses]


def freeze_filter(clauses: Optional[Sequence[Any]]) -> Tuple[Any, ...]:
    """
    Deep-copy filter clauses into read-only form.

    Mappings become ``MappingProxyType`` views over private copies and lists
    become tuples, so a frozen clause cannot be changed through any level.
    """
    if clauses is None:
        return ()
    return tuple(_freeze(clause) for clause in clauses)
