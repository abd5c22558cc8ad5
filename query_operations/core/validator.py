"""
Query Validator

Checks a QueryRequest against the constraints the Endee query engine enforces,
so that a bad request is rejected with one descriptive error before it is
submitted rather than partway through execution.

Typical usage from external projects:

    from query_operations import QueryRequest, QueryValidator

    request = QueryRequest.builder().vector([0.1, 0.2]).top_k(0).build()

    errors = QueryValidator.collect_errors(request)
    # ["top_k must be positive, got 0"]

    QueryValidator.validate_request(request)  # raises InvalidQueryParametersError
"""

import logging
import math
from collections.abc import Mapping
from typing import Any, List, Optional, Sequence

from config.settings import QuerySettings
from ..models.filters import FilterOperator
from ..models.request import QueryRequest
from ..query_ops_exceptions import InvalidQueryParametersError

logger = logging.getLogger(__name__)


class QueryValidator:
    """
    Validates query requests before they are submitted.

    Each ``validate_*`` method checks one concern and returns the list of
    problems it found (empty when the value is fine). ``validate_request``
    runs every check and raises once with all problems.
    """

    @staticmethod
    def validate_top_k(top_k: Optional[int], max_top_k: int) -> List[str]:
        if top_k is None:
            return ["top_k is required"]
        if top_k <= 0:
            return [f"top_k must be positive, got {top_k}"]
        if top_k > max_top_k:
            return [f"top_k exceeds maximum allowed value ({max_top_k}), got {top_k}"]
        return []

    @staticmethod
    def validate_ef(ef: int, max_ef: int) -> List[str]:
        if ef <= 0:
            return [f"ef must be positive, got {ef}"]
        if ef > max_ef:
            return [f"ef exceeds maximum allowed value ({max_ef}), got {ef}"]
        return []

    @staticmethod
    def validate_vector(vector: Optional[Sequence[float]]) -> List[str]:
        if vector is None:
            return []
        if len(vector) == 0:
            return ["vector cannot be empty"]
        if not all(math.isfinite(x) for x in vector):
            return ["vector must contain only finite values"]
        return []

    @staticmethod
    def validate_sparse(
        indices: Optional[Sequence[int]],
        values: Optional[Sequence[float]]
    ) -> List[str]:
        """
        Validate the sparse vector pair.

        Both halves must be present together, have equal lengths, and
        indices must be unique and non-negative.
        """
        if indices is None and values is None:
            return []
        if indices is None:
            return ["sparse_values given without sparse_indices"]
        if values is None:
            return ["sparse_indices given without sparse_values"]

        errors = []
        if len(indices) != len(values):
            errors.append(
                f"sparse_indices and sparse_values must have the same length, "
                f"got {len(indices)} and {len(values)}"
            )
        if len(set(indices)) != len(indices):
            errors.append("sparse_indices must be unique")
        if any(i < 0 for i in indices):
            errors.append("sparse_indices must be non-negative")
        if not all(math.isfinite(v) for v in values):
            errors.append("sparse_values must contain only finite values")
        return errors

    @staticmethod
    def validate_has_query_vector(request: QueryRequest) -> List[str]:
        has_dense = bool(request.vector)
        has_sparse = bool(request.sparse_indices) and bool(request.sparse_values)
        if not has_dense and not has_sparse:
            return ["query needs a dense vector or sparse_indices and sparse_values"]
        return []

    @staticmethod
    def validate_prefilter_threshold(threshold: int, settings: QuerySettings) -> List[str]:
        low = settings.min_prefilter_cardinality_threshold
        high = settings.max_prefilter_cardinality_threshold
        if not low <= threshold <= high:
            return [
                f"prefilter_cardinality_threshold must be between {low} and {high}, "
                f"got {threshold}"
            ]
        return []

    @staticmethod
    def validate_filter_boost(percentage: int) -> List[str]:
        if not 0 <= percentage <= 100:
            return [f"filter_boost_percentage must be between 0 and 100, got {percentage}"]
        return []

    @staticmethod
    def validate_filter(clauses: Sequence[Any]) -> List[str]:
        """
        Validate filter clause shapes.

        Every clause must map exactly one field name to exactly one
        ``$``-prefixed operator. The operator set belongs to the engine, so
        unrecognised operators pass through; operands are only checked for
        the operators known here: ``$range`` takes ``[low, high]`` with
        ``low <= high`` and ``$in`` takes a non-empty list.
        """
        errors = []
        for position, clause in enumerate(clauses):
            prefix = f"filter[{position}]"
            if not isinstance(clause, Mapping) or len(clause) != 1:
                errors.append(f"{prefix} must be a mapping with exactly one field")
                continue

            field, condition = next(iter(clause.items()))
            if not isinstance(field, str) or not field.strip():
                errors.append(f"{prefix} field name cannot be empty")
                continue
            if not isinstance(condition, Mapping) or len(condition) != 1:
                errors.append(f"{prefix} '{field}' must map to exactly one operator")
                continue

            operator, operand = next(iter(condition.items()))
            if not isinstance(operator, str) or not operator.startswith("$"):
                errors.append(
                    f"{prefix} '{field}' operator {operator!r} must start with '$'"
                )
            elif operator == FilterOperator.RANGE.value:
                errors.extend(QueryValidator._validate_range(prefix, field, operand))
            elif operator == FilterOperator.IN.value:
                if not isinstance(operand, (list, tuple)) or not operand:
                    errors.append(f"{prefix} '{field}' $in needs a non-empty list")
        return errors

    @staticmethod
    def _validate_range(prefix: str, field: str, operand: Any) -> List[str]:
        if not isinstance(operand, (list, tuple)) or len(operand) != 2:
            return [f"{prefix} '{field}' $range needs [low, high]"]
        low, high = operand
        try:
            if low > high:
                return [f"{prefix} '{field}' $range low {low!r} is greater than high {high!r}"]
        except TypeError:
            return [f"{prefix} '{field}' $range bounds {low!r} and {high!r} are not comparable"]
        return []

    @classmethod
    def collect_errors(
        cls,
        request: QueryRequest,
        settings: Optional[QuerySettings] = None
    ) -> List[str]:
        """
        Run every check against a request.

        Args:
            request: Request to validate
            settings: Limits to validate against; defaults apply when omitted

        Returns:
            All problems found, in a stable order; empty when valid
        """
        settings = settings or QuerySettings()
        errors: List[str] = []
        errors.extend(cls.validate_has_query_vector(request))
        errors.extend(cls.validate_top_k(request.top_k, settings.max_top_k))
        errors.extend(cls.validate_ef(request.ef, settings.max_ef))
        errors.extend(cls.validate_vector(request.vector))
        errors.extend(cls.validate_sparse(request.sparse_indices, request.sparse_values))
        errors.extend(cls.validate_prefilter_threshold(
            request.prefilter_cardinality_threshold, settings
        ))
        errors.extend(cls.validate_filter_boost(request.filter_boost_percentage))
        errors.extend(cls.validate_filter(request.filter))
        return errors

    @classmethod
    def validate_request(
        cls,
        request: QueryRequest,
        settings: Optional[QuerySettings] = None
    ) -> None:
        """
        Validate a request, raising once with every problem found.

        Raises:
            InvalidQueryParametersError: If any check fails
        """
        errors = cls.collect_errors(request, settings)
        if errors:
            error_msg = f"Invalid query request: {'; '.join(errors)}"
            logger.error(error_msg)
            raise InvalidQueryParametersError(error_msg, errors=errors)
