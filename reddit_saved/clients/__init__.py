from __future__ import annotations

"""
Client package for talking to reddit.

This package exposes:
- RedditClient: minimal protocol for fetching pages of the saved listing.
- RedditCredentials: username/password, resolved from CLI values or env vars.
- RedditJsonClient: RedditClient backed by an authenticated requests.Session.
- establish_session: the login handshake that produces that session.
"""

from .reddit_client import RedditClient, RedditCredentials, RedditJsonClient
from .session import establish_session

__all__ = [
    "RedditClient",
    "RedditCredentials",
    "RedditJsonClient",
    "establish_session",
]
