"""Upvote policy definitions.

Single source of truth for the daily upvote cap.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class UpvotePolicy:
    daily_limit: int  # distinct-tool upvotes per user per UTC day


DEFAULT_UPVOTE_POLICY = UpvotePolicy(daily_limit=3)


def get_upvote_policy() -> UpvotePolicy:
    """Resolve the upvote policy. Every user currently shares the default."""
    return DEFAULT_UPVOTE_POLICY
