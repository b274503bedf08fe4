"""Shared pytest fixtures for service tests."""

import pytest
from unittest.mock import AsyncMock
from datetime import datetime, timezone


@pytest.fixture
def mock_upvote_repository():
    """Create a mock UpvoteRepository for a user with no votes today."""
    repo = AsyncMock()
    repo.has_voted_today = AsyncMock(return_value=False)
    repo.todays_vote_count = AsyncMock(return_value=0)
    repo.cast_upvote = AsyncMock(return_value=1)
    repo.retract_upvote = AsyncMock(return_value=(0, False))
    repo.visible_count = AsyncMock(return_value=0)
    repo.visible_counts = AsyncMock(return_value={})
    repo.has_voted_today_batch = AsyncMock(return_value=set())
    repo.ranked_tools = AsyncMock(return_value=[])
    repo.purge_older_than = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def mock_favorite_repository():
    """Create a mock FavoriteRepository."""
    repo = AsyncMock()
    repo.set_favorite = AsyncMock(side_effect=lambda user_id, tool_id, desired: desired)
    repo.is_favorited = AsyncMock(return_value=False)
    repo.favorited_batch = AsyncMock(return_value=set())
    return repo


@pytest.fixture
def valid_jwt_payload():
    """Decoded claims of a valid provider token."""
    now = int(datetime.now(timezone.utc).timestamp())
    return {
        "sub": "user_2abc123def456",
        "iss": "https://test-project.supabase.co/auth/v1",
        "aud": "authenticated",
        "email": "test@example.com",
        "iat": now,
        "exp": now + 3600,
    }
