from __future__ import annotations

import logging
from typing import Optional

import requests
from bs4 import BeautifulSoup

from ..config import ScraperConfig, get_config
from ..errors import NetworkError, ProtocolError
from .reddit_client import RedditCredentials, body_or_placeholder

logger = logging.getLogger(__name__)


def establish_session(
    credentials: RedditCredentials,
    scraper_config: Optional[ScraperConfig] = None,
    session: Optional[requests.Session] = None,
) -> requests.Session:
    """
    Log in to reddit and return the session holding the login cookies.

    Two requests:
    - GET the login page and pick up its csrf_token,
    - POST the login form with that token.

    Nothing is retried; any failure raises and ends the run.
    """
    cfg = scraper_config or get_config().scraper

    session = session or requests.Session()
    session.headers.update({"User-Agent": cfg.user_agent})

    csrf_token = fetch_csrf_token(session, cfg)
    submit_login(session, cfg, credentials, csrf_token)

    logger.info("Logged in as u/%s", credentials.username)
    return session


def fetch_csrf_token(session: requests.Session, cfg: ScraperConfig) -> str:
    url = cfg.login_url
    logger.debug("GET %s", url)

    try:
        resp = session.get(url, timeout=cfg.timeout_seconds)
    except requests.RequestException as exc:
        raise NetworkError(f"Could not fetch login page {url}: {exc}") from exc

    token = extract_csrf_token(resp.text)
    if token is None:
        raise ProtocolError(
            f"No csrf_token found on {url} (status {resp.status_code}); "
            "the login page changed or the request was blocked"
        )

    logger.debug("Found csrf_token on login page")
    return token


def extract_csrf_token(html: str) -> Optional[str]:
    """
    Return the value of the `name="csrf_token"` field, or None if the page
    has no such field or its value is empty.
    """
    soup = BeautifulSoup(html, "html.parser")
    field = soup.find(attrs={"name": "csrf_token"})
    if field is None:
        return None

    value = field.get("value")
    return value or None


def submit_login(
    session: requests.Session,
    cfg: ScraperConfig,
    credentials: RedditCredentials,
    csrf_token: str,
) -> None:
    url = cfg.login_url
    form = {
        "csrf_token": csrf_token,
        "username": credentials.username,
        "password": credentials.password,
        "dest": cfg.dest_url,
        # Has to be present even without 2FA
        "otp": "",
    }
    logger.debug("POST %s as u/%s", url, credentials.username)

    try:
        resp = session.post(url, data=form, timeout=cfg.timeout_seconds)
    except requests.RequestException as exc:
        raise NetworkError(f"Could not submit login form to {url}: {exc}") from exc

    if not resp.ok:
        raise ProtocolError(
            f"Login failed with status {resp.status_code}: {body_or_placeholder(resp)}"
        )

