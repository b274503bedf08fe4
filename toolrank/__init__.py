"""Upvote ranking and rate-limiting service for a tool directory."""

__version__ = "0.1.0"
