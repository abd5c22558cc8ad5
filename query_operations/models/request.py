"""
Query Request

Defines the QueryRequest model describing a similarity-search query against
an Endee index, and QueryRequestBuilder, the fluent way to assemble one.

A built request is frozen all the way down: fields cannot be reassigned,
vectors are stored as tuples and filter clauses as read-only copies, so
neither the caller nor a reader can change a request after build().
The builder accepts any value; ranges and cross-field consistency are
checked by QueryValidator when the request is submitted.

Typical usage from external projects:

    from query_operations import QueryRequest

    request = (
        QueryRequest.builder()
        .vector([0.1, 0.2, 0.3])
        .top_k(10)
        .filter([
            {"category": {"$eq": "tech"}},
            {"score": {"$range": [80, 100]}},
        ])
        .build()
    )

    payload = request.to_payload()
"""

import logging
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import ArrayLike
from pydantic import BaseModel, ConfigDict, ValidationError, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from config.settings import (
    DEFAULT_EF,
    DEFAULT_FILTER_BOOST_PERCENTAGE,
    DEFAULT_PREFILTER_CARDINALITY_THRESHOLD,
    QuerySettings,
)
from .filters import freeze_filter, normalize_filter
from ..query_ops_exceptions import InvalidQueryParametersError

logger = logging.getLogger(__name__)


def _as_list(value: Any) -> Any:
    """Turn numpy arrays and other sequences into plain lists."""
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, (tuple, range)):
        return list(value)
    return value


def _hashable(value: Any) -> Any:
    if isinstance(value, dict):
        return frozenset((key, _hashable(item)) for key, item in value.items())
    if isinstance(value, list):
        return tuple(_hashable(item) for item in value)
    return value


class QueryRequest(BaseModel):
    """
    Immutable description of a similarity-search query.

    Attributes:
        vector: Dense query vector; None for a sparse-only query
        top_k: Number of results to return; None until set
        filter: Ordered filter clauses, e.g. ``{"category": {"$eq": "tech"}}``
        ef: Search breadth (accuracy/speed trade-off)
        include_vectors: Whether raw vectors are returned with results
        sparse_indices: Indices of the non-zero sparse entries
        sparse_values: Values of the non-zero sparse entries, parallel to sparse_indices
        prefilter_cardinality_threshold: Estimated match count above which the
            engine scores first and filters after (postfiltering)
        filter_boost_percentage: 0-100 bias toward results that match the filter
    """
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    vector: Optional[Tuple[float, ...]] = None
    top_k: Optional[int] = None
    filter: Tuple[Any, ...] = ()
    ef: int = DEFAULT_EF
    include_vectors: bool = False
    sparse_indices: Optional[Tuple[int, ...]] = None
    sparse_values: Optional[Tuple[float, ...]] = None
    prefilter_cardinality_threshold: int = DEFAULT_PREFILTER_CARDINALITY_THRESHOLD
    filter_boost_percentage: int = DEFAULT_FILTER_BOOST_PERCENTAGE

    @field_validator("vector", "sparse_values", mode="before")
    @classmethod
    def coerce_float_sequence(cls, value: Any) -> Any:
        if value is None:
            return None
        try:
            array = np.asarray(value, dtype=np.float64)
        except (TypeError, ValueError, OverflowError) as e:
            raise ValueError(f"expected a sequence of numbers: {e}") from e
        if array.ndim != 1:
            raise ValueError(f"expected a 1D sequence, got {array.ndim} dimensions")
        return array.tolist()

    @field_validator("sparse_indices", mode="before")
    @classmethod
    def coerce_index_sequence(cls, value: Any) -> Any:
        return _as_list(value)

    @field_validator("filter", mode="before")
    @classmethod
    def copy_filter(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, dict):
            raise ValueError("filter must be a sequence of clauses, not a single mapping")
        return freeze_filter(value)

    @field_serializer("vector", "sparse_indices", "sparse_values")
    def serialize_sequence(self, value: Optional[Tuple[Any, ...]]) -> Any:
        return list(value) if value is not None else None

    @field_serializer("filter")
    def serialize_filter(self, value: Tuple[Any, ...]) -> Any:
        return normalize_filter(value)

    def __hash__(self) -> int:
        return hash(_hashable(self.model_dump()))

    @classmethod
    def builder(cls, settings: Optional[QuerySettings] = None) -> "QueryRequestBuilder":
        """Start a new builder, optionally seeded with defaults from settings."""
        return QueryRequestBuilder(settings=settings)

    def to_builder(self) -> "QueryRequestBuilder":
        """Return a builder holding this request's fields, for copy-and-modify."""
        builder = QueryRequestBuilder()
        builder._fields.update(self.model_dump())
        return builder

    @property
    def is_sparse(self) -> bool:
        return self.sparse_indices is not None or self.sparse_values is not None

    @property
    def is_dense(self) -> bool:
        return self.vector is not None

    def to_payload(self) -> Dict[str, Any]:
        """Convert to the wire shape accepted by the query engine."""
        from ..core.payload import to_payload
        return to_payload(self)


class QueryRequestBuilder:
    """
    Fluent builder for QueryRequest.

    Every setter stores one field and returns the builder; calling a setter
    twice keeps the last value. No range or consistency checks are made.
    """

    def __init__(self, settings: Optional[QuerySettings] = None):
        """
        Initialize the builder.

        Args:
            settings: Query settings supplying the defaults for ef, the
                prefilter threshold, the filter boost and include_vectors.
                Without settings the server defaults are used.
        """
        self._fields: Dict[str, Any] = {}
        if settings is not None:
            self._fields.update(
                ef=settings.default_ef,
                include_vectors=settings.default_include_vectors,
                prefilter_cardinality_threshold=settings.default_prefilter_cardinality_threshold,
                filter_boost_percentage=settings.default_filter_boost_percentage,
            )

    def vector(self, vector: Optional[ArrayLike]) -> "QueryRequestBuilder":
        self._fields["vector"] = vector
        return self

    def top_k(self, top_k: int) -> "QueryRequestBuilder":
        self._fields["top_k"] = top_k
        return self

    def filter(self, clauses: Optional[Sequence[Dict[str, Any]]]) -> "QueryRequestBuilder":
        """
        Set the filter clauses, replacing any set before.

        Args:
            clauses: Filter clauses in evaluation order, e.g.
                ``[{"category": {"$eq": "tech"}}, {"score": {"$range": [80, 100]}}]``
        """
        self._fields["filter"] = clauses
        return self

    def add_filter(self, clause: Dict[str, Any]) -> "QueryRequestBuilder":
        """Append one filter clause after those already set."""
        clauses = self._fields.get("filter") or []
        self._fields["filter"] = list(clauses) + [clause]
        return self

    def ef(self, ef: int) -> "QueryRequestBuilder":
        self._fields["ef"] = ef
        return self

    def include_vectors(self, include_vectors: bool = True) -> "QueryRequestBuilder":
        self._fields["include_vectors"] = include_vectors
        return self

    def sparse_indices(self, sparse_indices: Optional[ArrayLike]) -> "QueryRequestBuilder":
        self._fields["sparse_indices"] = sparse_indices
        return self

    def sparse_values(self, sparse_values: Optional[ArrayLike]) -> "QueryRequestBuilder":
        self._fields["sparse_values"] = sparse_values
        return self

    def sparse_vector(self, indices: ArrayLike, values: ArrayLike) -> "QueryRequestBuilder":
        """Set both halves of the sparse vector at once."""
        return self.sparse_indices(indices).sparse_values(values)

    def prefilter_cardinality_threshold(self, threshold: int) -> "QueryRequestBuilder":
        """
        Set the prefilter cardinality threshold.

        When the engine estimates that more than ``threshold`` entries match
        the filter it postfilters (scores first, filters after) instead of
        prefiltering. Must be between 1,000 and 1,000,000. Default: 10,000.
        """
        self._fields["prefilter_cardinality_threshold"] = threshold
        return self

    def filter_boost_percentage(self, percentage: int) -> "QueryRequestBuilder":
        """
        Set the filter boost percentage (0-100).

        Higher values bias ranked results toward filter matches. Default: 0.
        """
        self._fields["filter_boost_percentage"] = percentage
        return self

    def build(self) -> QueryRequest:
        """
        Build the immutable request.

        Returns:
            QueryRequest holding the last value passed to each setter

        Raises:
            InvalidQueryParametersError: If a value cannot be converted to its
                field type (for example a non-numeric vector element)
        """
        fields = {name: value for name, value in self._fields.items() if value is not None}
        try:
            request = QueryRequest(**fields)
        except ValidationError as e:
            errors = [
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]
            raise InvalidQueryParametersError(
                f"Cannot build query request: {'; '.join(errors)}", errors=errors
            ) from e

        logger.debug(
            "Built query request (top_k=%s, dense=%s, sparse=%s, filters=%d)",
            request.top_k, request.is_dense, request.is_sparse, len(request.filter)
        )
        return request
