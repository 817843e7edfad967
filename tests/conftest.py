"""Pytest configuration and fixtures for autoprofiler tests."""

import pytest

from fakes import USERS_QUERY, USERS_TABLE, FakeOracle


@pytest.fixture
def users_query() -> str:
    return USERS_QUERY


@pytest.fixture
def users_table() -> str:
    return USERS_TABLE


@pytest.fixture
def oracle() -> FakeOracle:
    """Oracle accepting everything, formatting as identity."""
    return FakeOracle()
