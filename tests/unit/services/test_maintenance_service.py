"""Tests for the stale upvote purge."""

from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, Mock, patch

import pytest
from sqlalchemy.exc import OperationalError

from toolrank.exceptions import PurgeCutoffInFutureError, StorageUnavailableError
from toolrank.services.maintenance_service import (
    PurgeResult,
    purge_stale_upvotes,
    resolve_purge_cutoff,
)


def _session_factory(session):
    @asynccontextmanager
    async def factory():
        yield session

    return factory


class TestPurgeStaleUpvotes:
    """Tests for purge_stale_upvotes."""

    @pytest.mark.asyncio
    async def test_purge_cuts_off_at_month_of_as_of(self, mock_async_session):
        """Verify everything before the first day of as_of's month is targeted."""
        as_of = datetime(2024, 4, 1, 0, 5, tzinfo=timezone.utc)

        with patch(
            "toolrank.services.maintenance_service.AsyncSessionLocal",
            _session_factory(mock_async_session),
        ), patch(
            "toolrank.services.maintenance_service.UpvoteRepository"
        ) as mock_repo_class:
            mock_repo_class.return_value.purge_older_than = AsyncMock(return_value=42)

            result = await purge_stale_upvotes(as_of, batch_size=500)

        assert result == PurgeResult(deleted_count=42, cutoff=date(2024, 4, 1))
        mock_repo_class.assert_called_once_with(mock_async_session)
        mock_repo_class.return_value.purge_older_than.assert_awaited_once_with(
            date(2024, 4, 1), 500
        )

    @pytest.mark.asyncio
    async def test_purge_uses_configured_batch_size(self, mock_async_session):
        settings = Mock(purge_batch_size=123)

        with patch(
            "toolrank.services.maintenance_service.AsyncSessionLocal",
            _session_factory(mock_async_session),
        ), patch(
            "toolrank.services.maintenance_service.get_settings", return_value=settings
        ), patch(
            "toolrank.services.maintenance_service.UpvoteRepository"
        ) as mock_repo_class:
            mock_repo_class.return_value.purge_older_than = AsyncMock(return_value=0)

            result = await purge_stale_upvotes(datetime(2024, 3, 15, tzinfo=timezone.utc))

        assert result.deleted_count == 0
        assert result.cutoff == date(2024, 3, 1)
        mock_repo_class.return_value.purge_older_than.assert_awaited_once_with(
            date(2024, 3, 1), 123
        )

    @pytest.mark.asyncio
    async def test_purge_connection_failure_is_retryable(self, mock_async_session):
        with patch(
            "toolrank.services.maintenance_service.AsyncSessionLocal",
            _session_factory(mock_async_session),
        ), patch(
            "toolrank.services.maintenance_service.UpvoteRepository"
        ) as mock_repo_class:
            mock_repo_class.return_value.purge_older_than = AsyncMock(
                side_effect=OperationalError("DELETE", {}, Exception("server closed"))
            )

            with pytest.raises(StorageUnavailableError):
                await purge_stale_upvotes(datetime(2024, 4, 2, tzinfo=timezone.utc), batch_size=10)

    @pytest.mark.asyncio
    async def test_purge_rejects_as_of_after_current_month(self, mock_async_session):
        """Rows in the current month's bucket are never targeted."""
        now = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)

        with patch(
            "toolrank.services.maintenance_service.AsyncSessionLocal",
            _session_factory(mock_async_session),
        ), patch(
            "toolrank.services.maintenance_service.UpvoteRepository"
        ) as mock_repo_class:
            with pytest.raises(PurgeCutoffInFutureError):
                await purge_stale_upvotes(
                    datetime(2099, 1, 15, tzinfo=timezone.utc), batch_size=10, now=now
                )

        mock_repo_class.assert_not_called()


class TestResolvePurgeCutoff:
    """Tests for resolve_purge_cutoff."""

    NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "as_of,expected",
        [
            (datetime(2024, 3, 31, 23, 59, tzinfo=timezone.utc), date(2024, 3, 1)),
            (datetime(2024, 3, 1, 0, 0, tzinfo=timezone.utc), date(2024, 3, 1)),
            (datetime(2023, 12, 5, tzinfo=timezone.utc), date(2023, 12, 1)),
        ],
    )
    def test_current_or_past_month(self, as_of, expected):
        assert resolve_purge_cutoff(as_of, self.NOW) == expected

    @pytest.mark.parametrize(
        "as_of",
        [
            datetime(2024, 4, 1, 0, 0, tzinfo=timezone.utc),
            datetime(2099, 1, 15, tzinfo=timezone.utc),
        ],
    )
    def test_later_month_is_rejected(self, as_of):
        with pytest.raises(PurgeCutoffInFutureError) as exc_info:
            resolve_purge_cutoff(as_of, self.NOW)

        assert exc_info.value.status_code == 422
        assert exc_info.value.details["current_month"] == "2024-03-01"
