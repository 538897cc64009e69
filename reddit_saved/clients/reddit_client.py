from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Optional, Protocol, TextIO, runtime_checkable

import requests

from ..config import ScraperConfig, get_config
from ..errors import ConfigurationError, NetworkError, ProtocolError
from ..logging_utils import TRACE

logger = logging.getLogger(__name__)

UNREADABLE_BODY = "<unreadable body>"


def body_or_placeholder(resp: requests.Response) -> str:
    """
    Response body for error messages, or a placeholder if it cannot be decoded.
    """
    try:
        return resp.text
    except (UnicodeDecodeError, LookupError, requests.RequestException):
        return UNREADABLE_BODY


@runtime_checkable
class RedditClient(Protocol):
    """
    Minimal client abstraction for reading the saved listing.

    Implementations only move bytes: they return the raw response body and
    leave parsing and pagination to the collector.
    """

    def fetch_saved_page(self, after: str) -> str:
        """
        Fetch one page of the saved listing.

        `after` is the cursor from the previous page, or "" for the first
        page. It must be sent exactly as given.
        """
        raise NotImplementedError


@dataclass
class RedditCredentials:
    """
    Username and password used for the login form.

    The password never shows up in repr() or logs.
    """

    username: str
    password: str = field(repr=False)

    @classmethod
    def resolve(
        cls,
        username: Optional[str] = None,
        password: Optional[str] = None,
        password_stdin: bool = False,
        stdin: Optional[TextIO] = None,
    ) -> "RedditCredentials":
        """
        Build credentials from CLI values, falling back to env vars.

        Lookup order for the password:
        - an explicit `password`,
        - one line read from `stdin` when `password_stdin` is set,
        - REDDIT_PASSWORD.

        Raises ConfigurationError if username or password is still missing.
        """
        username = username or os.getenv("REDDIT_USERNAME")
        if not username:
            raise ConfigurationError(
                "No username given (use --username or set REDDIT_USERNAME)"
            )

        if not password and password_stdin:
            line = (stdin or sys.stdin).readline()
            password = line.rstrip("\r\n")
            logger.debug("Read password from standard input")

        password = password or os.getenv("REDDIT_PASSWORD")
        if not password:
            raise ConfigurationError(
                "No password given (use --password, --password-stdin or set REDDIT_PASSWORD)"
            )

        return cls(username=username, password=password)


class RedditJsonClient(RedditClient):
    """
    Reads the saved listing JSON through an already authenticated session.

    The session's cookie jar is the only thing carrying the login.
    """

    def __init__(
        self,
        session: requests.Session,
        scraper_config: Optional[ScraperConfig] = None,
    ) -> None:
        self._cfg = scraper_config or get_config().scraper
        self._session = session

    def fetch_saved_page(self, after: str) -> str:
        url = self._cfg.saved_url
        logger.debug("GET %s after=%r", url, after)

        try:
            resp = self._session.get(
                url,
                params={"after": after},
                timeout=self._cfg.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise NetworkError(f"Could not fetch saved listing from {url}: {exc}") from exc

        logger.log(TRACE, "Saved listing response (%s): %s", resp.status_code, body_or_placeholder(resp))

        if not resp.ok:
            raise ProtocolError(
                f"Unexpected status {resp.status_code} for {url}: {body_or_placeholder(resp)}"
            )

        return resp.text
