"""Pytest configuration and shared fixtures for Endee_Ops tests."""

import pytest

from config.settings import QuerySettings
from query_operations import QueryRequest


@pytest.fixture
def query_settings():
    return QuerySettings()


@pytest.fixture
def filter_clauses():
    return [
        {"category": {"$eq": "tech"}},
        {"score": {"$range": [80, 100]}},
    ]


@pytest.fixture
def dense_request(filter_clauses):
    return (
        QueryRequest.builder()
        .vector([0.1, 0.2, 0.3])
        .top_k(10)
        .filter(filter_clauses)
        .build()
    )


@pytest.fixture
def sparse_request():
    return (
        QueryRequest.builder()
        .top_k(5)
        .sparse_indices([1, 5, 9])
        .sparse_values([0.5, 0.2, 0.1])
        .build()
    )
