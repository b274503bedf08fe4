"""Shared pytest fixtures for router tests."""

import pytest
from datetime import datetime, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock, Mock, patch

from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from toolrank.services.auth_service import AuthenticatedUser
from toolrank.services.quota_guard import QuotaStatus
from toolrank.services.upvote_service import UpvoteResult

ROUTER_NOW = datetime(2024, 3, 15, 12, 30, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def mock_database_engine():
    """Keep the app lifespan from touching a real connection pool."""
    with patch("toolrank.main.engine") as mock_engine:
        mock_engine.dispose = AsyncMock()
        yield mock_engine


@pytest.fixture
def mock_db_session():
    """Create a mock AsyncSession for router tests."""
    session = AsyncMock(spec=AsyncSession)

    mock_result = Mock()
    mock_result.scalar_one_or_none = Mock(return_value=None)
    mock_result.scalar_one = Mock(return_value=1)
    mock_result.fetchall = Mock(return_value=[])
    mock_result.rowcount = 0

    session.execute = AsyncMock(return_value=mock_result)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    return session


@pytest.fixture
def mock_upvote_service():
    """Create a mock UpvoteService."""
    service = AsyncMock()
    service.upvote = AsyncMock(return_value=UpvoteResult(upvote_count=1, user_upvoted=True))
    service.retract = AsyncMock(return_value=UpvoteResult(upvote_count=0, user_upvoted=False))
    service.set_favorite = AsyncMock(side_effect=lambda user_id, tool_id, desired: desired)
    service.is_favorited = AsyncMock(return_value=False)
    service.listing_state = AsyncMock(return_value=[])
    service.ranking = AsyncMock(return_value=[])
    service.quota_status = AsyncMock(
        return_value=QuotaStatus(
            limit=3,
            used=0,
            daily_reset_at=datetime(2024, 3, 16, tzinfo=timezone.utc),
            monthly_reset_at=datetime(2024, 4, 1, tzinfo=timezone.utc),
        )
    )
    return service


@pytest.fixture
def mock_settings():
    """Create mock settings."""
    settings = Mock()
    settings.cors_origins = ""
    settings.debug = False
    settings.log_level = "INFO"
    settings.api_key = "test-api-key"
    settings.auth_issuer = "https://test-project.supabase.co/auth/v1"
    settings.auth_audience = None
    settings.purge_batch_size = 2000
    return settings


@pytest.fixture
def mock_user():
    """Authenticated caller."""
    return AuthenticatedUser(user_id="user_test123", email="test@example.com")


@pytest.fixture
def router_now():
    return ROUTER_NOW


def _create_test_client(
    mock_db_session,
    mock_upvote_service,
    mock_settings,
    *,
    mock_user=None,
):
    """Build a TestClient with all infra dependencies overridden.

    When mock_user is provided, JWT auth is bypassed (fully authenticated
    client). When omitted, auth dependencies run normally so tests can assert
    401 behaviour. The ops API key check always runs against mock_settings.
    """
    from toolrank.main import app
    from toolrank.database import get_db
    from toolrank.dependencies import (
        get_current_user_optional,
        get_current_user_required,
        get_upvote_service,
    )
    from toolrank.config import get_settings
    from toolrank.utils.clock import get_clock

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield mock_db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_upvote_service] = lambda: mock_upvote_service
    app.dependency_overrides[get_settings] = lambda: mock_settings
    app.dependency_overrides[get_clock] = lambda: (lambda: ROUTER_NOW)

    if mock_user is not None:
        app.dependency_overrides[get_current_user_required] = lambda: mock_user
        app.dependency_overrides[get_current_user_optional] = lambda: mock_user
    else:
        app.dependency_overrides[get_current_user_optional] = lambda: None

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def client(mock_db_session, mock_upvote_service, mock_settings, mock_user):
    """Create TestClient with all dependencies overridden including auth."""
    yield from _create_test_client(
        mock_db_session,
        mock_upvote_service,
        mock_settings,
        mock_user=mock_user,
    )


@pytest.fixture
def unauthenticated_client(mock_db_session, mock_upvote_service, mock_settings):
    """Create TestClient WITHOUT auth override to test 401 responses."""
    yield from _create_test_client(
        mock_db_session,
        mock_upvote_service,
        mock_settings,
    )
