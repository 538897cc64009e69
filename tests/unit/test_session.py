from __future__ import annotations

import pytest
import requests

from reddit_saved.clients import RedditCredentials, establish_session
from reddit_saved.clients.reddit_client import UNREADABLE_BODY
from reddit_saved.clients.session import extract_csrf_token
from reddit_saved.config import ScraperConfig
from reddit_saved.errors import NetworkError, ProtocolError


CREDS = RedditCredentials(username="someone", password="hunter2")


def test_extract_csrf_token_from_login_page(login_page):
    assert extract_csrf_token(login_page) == "abc123"


def test_extract_csrf_token_missing_field():
    assert extract_csrf_token("<html><form><input name='username'></form></html>") is None


def test_extract_csrf_token_empty_value():
    assert extract_csrf_token('<input type="hidden" name="csrf_token" value="">') is None


def test_login_posts_form_with_token_and_fixed_fields(fake_session, make_response, login_page):
    cfg = ScraperConfig()
    fake_session.queue("GET", make_response(login_page))
    fake_session.queue("POST", make_response("{}", 200))

    session = establish_session(CREDS, scraper_config=cfg, session=fake_session)

    assert session is fake_session
    assert fake_session.headers["User-Agent"] == cfg.user_agent

    (get_method, get_url, _), (post_method, post_url, post_kwargs) = fake_session.calls
    assert (get_method, get_url) == ("GET", cfg.login_url)
    assert (post_method, post_url) == ("POST", cfg.login_url)
    assert post_kwargs["data"] == {
        "csrf_token": "abc123",
        "username": "someone",
        "password": "hunter2",
        "dest": cfg.dest_url,
        "otp": "",
    }


def test_missing_token_aborts_before_posting(fake_session, make_response):
    fake_session.queue("GET", make_response("<html>blocked</html>", 403))

    with pytest.raises(ProtocolError) as excinfo:
        establish_session(CREDS, session=fake_session)

    assert "csrf_token" in str(excinfo.value)
    assert [method for method, _, _ in fake_session.calls] == ["GET"]


def test_rejected_login_includes_body(fake_session, make_response, login_page):
    fake_session.queue("GET", make_response(login_page))
    fake_session.queue("POST", make_response('{"reason": "WRONG_PASSWORD"}', 400))

    with pytest.raises(ProtocolError) as excinfo:
        establish_session(CREDS, session=fake_session)

    assert "400" in str(excinfo.value)
    assert "WRONG_PASSWORD" in str(excinfo.value)
    assert "hunter2" not in str(excinfo.value)


def test_rejected_login_with_unreadable_body(fake_session, make_response, login_page, undecodable_response):
    fake_session.queue("GET", make_response(login_page))
    fake_session.queue("POST", undecodable_response)

    with pytest.raises(ProtocolError) as excinfo:
        establish_session(CREDS, session=fake_session)

    assert UNREADABLE_BODY in str(excinfo.value)


def test_connection_failure_is_network_error(fake_session):
    fake_session.queue("GET", requests.ConnectionError("connection refused"))

    with pytest.raises(NetworkError):
        establish_session(CREDS, session=fake_session)


def test_password_not_logged(fake_session, make_response, login_page, caplog):
    fake_session.queue("GET", make_response(login_page))
    fake_session.queue("POST", make_response("{}", 200))

    with caplog.at_level(1):
        establish_session(CREDS, session=fake_session)

    assert "hunter2" not in caplog.text
    assert "someone" in caplog.text
