from unittest.mock import AsyncMock

import pytest

from applyform.schema import SchemaStore


@pytest.fixture(scope="session")
def store():
    """Load the built-in default schema once for the entire test session."""
    s = SchemaStore()
    s.load()
    return s


@pytest.fixture
def mock_db():
    """AsyncMock standing in for AsyncSession; flush/commit are no-ops."""
    return AsyncMock()
