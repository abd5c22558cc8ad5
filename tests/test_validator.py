"""Tests for QueryValidator."""

import logging

import pytest

from config.settings import QuerySettings
from query_operations import InvalidQueryParametersError, QueryRequest, QueryValidator


def _dense(**overrides):
    builder = QueryRequest.builder().vector([0.1, 0.2, 0.3]).top_k(10)
    for name, value in overrides.items():
        getattr(builder, name)(value)
    return builder.build()


class TestValidRequests:

    def test_dense_request_is_valid(self, dense_request):
        assert QueryValidator.collect_errors(dense_request) == []
        QueryValidator.validate_request(dense_request)

    def test_sparse_only_request_is_valid(self, sparse_request):
        assert QueryValidator.collect_errors(sparse_request) == []

    def test_threshold_bounds_are_inclusive(self):
        assert QueryValidator.collect_errors(_dense(prefilter_cardinality_threshold=1_000)) == []
        assert QueryValidator.collect_errors(_dense(prefilter_cardinality_threshold=1_000_000)) == []

    def test_boost_bounds_are_inclusive(self):
        assert QueryValidator.collect_errors(_dense(filter_boost_percentage=0)) == []
        assert QueryValidator.collect_errors(_dense(filter_boost_percentage=100)) == []


class TestSingleChecks:

    @pytest.mark.parametrize("top_k", [0, -3])
    def test_non_positive_top_k(self, top_k):
        errors = QueryValidator.collect_errors(_dense(top_k=top_k))

        assert errors == [f"top_k must be positive, got {top_k}"]

    def test_missing_top_k(self):
        request = QueryRequest.builder().vector([0.1]).build()

        assert QueryValidator.collect_errors(request) == ["top_k is required"]

    def test_top_k_above_configured_maximum(self):
        errors = QueryValidator.collect_errors(_dense(top_k=11), QuerySettings(max_top_k=10))

        assert errors == ["top_k exceeds maximum allowed value (10), got 11"]

    def test_non_positive_ef(self):
        assert QueryValidator.collect_errors(_dense(ef=0)) == ["ef must be positive, got 0"]

    @pytest.mark.parametrize("threshold", [999, 1_000_001])
    def test_threshold_out_of_range(self, threshold):
        errors = QueryValidator.collect_errors(_dense(prefilter_cardinality_threshold=threshold))

        assert len(errors) == 1
        assert "prefilter_cardinality_threshold must be between 1000 and 1000000" in errors[0]

    @pytest.mark.parametrize("percentage", [-1, 101])
    def test_boost_out_of_range(self, percentage):
        errors = QueryValidator.collect_errors(_dense(filter_boost_percentage=percentage))

        assert errors == [f"filter_boost_percentage must be between 0 and 100, got {percentage}"]

    def test_no_query_vector(self):
        request = QueryRequest.builder().top_k(5).build()

        assert QueryValidator.collect_errors(request) == [
            "query needs a dense vector or sparse_indices and sparse_values"
        ]

    def test_non_finite_vector(self):
        errors = QueryValidator.collect_errors(_dense(vector=[0.1, float("nan")]))

        assert errors == ["vector must contain only finite values"]


class TestSparseChecks:

    def test_length_mismatch(self):
        errors = QueryValidator.validate_sparse([1, 2, 3], [0.1, 0.2])

        assert errors == [
            "sparse_indices and sparse_values must have the same length, got 3 and 2"
        ]

    def test_duplicate_indices(self):
        assert QueryValidator.validate_sparse([1, 1], [0.1, 0.2]) == ["sparse_indices must be unique"]

    def test_negative_indices(self):
        assert QueryValidator.validate_sparse([-1], [0.1]) == ["sparse_indices must be non-negative"]

    def test_half_a_pair(self):
        assert QueryValidator.validate_sparse([1], None) == ["sparse_indices given without sparse_values"]
        assert QueryValidator.validate_sparse(None, [0.1]) == ["sparse_values given without sparse_indices"]


class TestFilterChecks:

    def test_well_formed_clauses(self, filter_clauses):
        clauses = filter_clauses + [{"lang": {"$in": ["en", "de"]}}]

        assert QueryValidator.validate_filter(clauses) == []

    def test_clause_with_two_fields(self):
        errors = QueryValidator.validate_filter([{"a": {"$eq": 1}, "b": {"$eq": 2}}])

        assert errors == ["filter[0] must be a mapping with exactly one field"]

    def test_condition_that_is_not_a_mapping(self):
        errors = QueryValidator.validate_filter([{"a": 1}])

        assert errors == ["filter[0] 'a' must map to exactly one operator"]

    def test_operators_outside_the_known_set_pass_through(self):
        clauses = [{"a": {"$gt": 1}}, {"b": {"$ne": "x"}}]

        assert QueryValidator.validate_filter(clauses) == []

    def test_request_with_engine_specific_operator_is_valid(self):
        request = _dense(filter=[{"price": {"$lte": 20}}])

        assert QueryValidator.collect_errors(request) == []

    def test_operator_without_dollar_prefix(self):
        errors = QueryValidator.validate_filter([{"a": {"eq": 1}}])

        assert errors == ["filter[0] 'a' operator 'eq' must start with '$'"]

    def test_range_needs_two_bounds(self):
        errors = QueryValidator.validate_filter([{"score": {"$range": [1, 2, 3]}}])

        assert errors == ["filter[0] 'score' $range needs [low, high]"]

    def test_inverted_range(self):
        errors = QueryValidator.validate_filter([{"score": {"$range": [100, 80]}}])

        assert errors == ["filter[0] 'score' $range low 100 is greater than high 80"]

    def test_empty_in_list(self):
        errors = QueryValidator.validate_filter([{"tag": {"$in": []}}])

        assert errors == ["filter[0] 'tag' $in needs a non-empty list"]

    def test_error_positions_follow_clause_order(self):
        errors = QueryValidator.validate_filter([
            {"ok": {"$eq": 1}},
            {"bad": {"nope": 1}},
            "not a clause",
        ])

        assert errors[0].startswith("filter[1]")
        assert errors[1].startswith("filter[2]")


class TestValidateRequest:

    def test_all_problems_reported_in_one_error(self, caplog):
        request = (
            QueryRequest.builder()
            .top_k(0)
            .sparse_indices([1, 2])
            .sparse_values([0.5])
            .prefilter_cardinality_threshold(10)
            .filter_boost_percentage(150)
            .build()
        )

        with caplog.at_level(logging.ERROR):
            with pytest.raises(InvalidQueryParametersError) as exc_info:
                QueryValidator.validate_request(request)

        errors = exc_info.value.errors
        assert len(errors) == 4
        assert any(e.startswith("top_k") for e in errors)
        assert any(e.startswith("sparse_indices and sparse_values") for e in errors)
        assert any(e.startswith("prefilter_cardinality_threshold") for e in errors)
        assert any(e.startswith("filter_boost_percentage") for e in errors)
        assert str(exc_info.value).startswith("Invalid query request: ")
        assert "Invalid query request" in caplog.text
