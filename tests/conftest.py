"""Shared pytest fixtures."""

# Clear settings cache before any imports to prevent stale values with coverage
from toolrank.config import get_settings

get_settings.cache_clear()

import pytest
from unittest.mock import AsyncMock, Mock
from contextlib import asynccontextmanager
from datetime import datetime, timezone


# Database mocking fixtures


@pytest.fixture
def mock_async_session():
    """Create a mock AsyncSession for repository tests."""
    session = AsyncMock()

    # Mock result object for execute
    mock_result = Mock()
    mock_result.scalar_one_or_none = Mock(return_value=None)
    mock_result.scalar_one = Mock(return_value=0)
    mock_result.scalars = Mock(return_value=Mock(all=Mock(return_value=[])))
    mock_result.fetchall = Mock(return_value=[])
    mock_result.rowcount = 0

    session.execute = AsyncMock(return_value=mock_result)
    session.scalar = AsyncMock(return_value=0)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.add = Mock()
    session.delete = AsyncMock()

    @asynccontextmanager
    async def begin_nested():
        yield

    session.begin_nested = begin_nested

    return session


def _make_result(scalar=None, rows=None, rowcount=0):
    result = Mock()
    result.scalar_one_or_none = Mock(return_value=scalar)
    result.scalar_one = Mock(return_value=scalar)
    result.fetchall = Mock(return_value=rows or [])
    result.rowcount = rowcount
    return result


@pytest.fixture
def make_result():
    """Factory for mock execute() results: scalar value, fetchall rows, rowcount."""
    return _make_result


@pytest.fixture
def fixed_now():
    """Mid-day instant on 2024-03-15 UTC."""
    return datetime(2024, 3, 15, 12, 30, tzinfo=timezone.utc)


@pytest.fixture
def user_id():
    return "user_2abc123def456"


@pytest.fixture
def tool_id():
    return "tool-video-editor"
