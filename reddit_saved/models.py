from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Union

from .errors import ParseError


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class SchemaError(ValueError):
    """A decoded JSON value does not have the listing/post/comment shape."""


@dataclass
class Post:
    """
    A saved submission (`t3`). Only the fields the archive needs are kept.
    """

    title: str
    url: str
    created: float  # Unix timestamp (seconds, may be fractional)
    subreddit: str  # Subreddit name (without 'r/')


@dataclass
class Comment:
    """
    A saved comment (`t1`).

    The archive points at the thread the comment lives in, so we keep the
    link title/permalink and not the comment body.
    """

    link_title: str
    link_permalink: str
    created: float
    subreddit: str


@dataclass
class Listing:
    """
    One page of a listing endpoint.

    `after` is the cursor for the next page; None means this is the last one.
    """

    after: Optional[str]
    children: List["Thing"] = field(default_factory=list)
    dist: Optional[int] = None


Thing = Union[Listing, Post, Comment]


# ---------------------------------------------------------------------------
# Parsing: `{"kind": ..., "data": {...}}` into Listing / Post / Comment
# ---------------------------------------------------------------------------


def _require_str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise SchemaError(f"field '{key}' must be a string, got {value!r}")
    return value


def _require_number(data: Dict[str, Any], key: str) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SchemaError(f"field '{key}' must be a number, got {value!r}")
    try:
        number = float(value)
    except OverflowError as exc:
        raise SchemaError(f"field '{key}' is out of range: {value!r}") from exc
    if not math.isfinite(number):
        raise SchemaError(f"field '{key}' must be a finite number, got {value!r}")
    return number


def _require_timestamp(data: Dict[str, Any], key: str) -> float:
    value = _require_number(data, key)
    try:
        epoch_to_datetime(value)
    except (OverflowError, ValueError) as exc:
        raise SchemaError(f"field '{key}' is not a usable timestamp: {value!r} ({exc})") from exc
    return value


def _parse_listing(data: Dict[str, Any]) -> Listing:
    after = data.get("after")
    if after is not None and not isinstance(after, str):
        raise SchemaError(f"field 'after' must be a string or null, got {after!r}")

    dist = data.get("dist")
    if dist is not None and (isinstance(dist, bool) or not isinstance(dist, int)):
        raise SchemaError(f"field 'dist' must be an integer or null, got {dist!r}")

    children = data.get("children")
    if not isinstance(children, list):
        raise SchemaError(f"field 'children' must be a list, got {children!r}")

    return Listing(
        after=after,
        children=[parse_thing(child) for child in children],
        dist=dist,
    )


def _parse_post(data: Dict[str, Any]) -> Post:
    return Post(
        title=_require_str(data, "title"),
        url=_require_str(data, "url"),
        created=_require_timestamp(data, "created"),
        subreddit=_require_str(data, "subreddit"),
    )


def _parse_comment(data: Dict[str, Any]) -> Comment:
    return Comment(
        link_title=_require_str(data, "link_title"),
        link_permalink=_require_str(data, "link_permalink"),
        created=_require_timestamp(data, "created"),
        subreddit=_require_str(data, "subreddit"),
    )


# `kind` tag -> parser; reddit uses t3/t1, the other spellings are aliases
KIND_PARSERS: Dict[str, Callable[[Dict[str, Any]], Thing]] = {
    "Listing": _parse_listing,
    "listing": _parse_listing,
    "t3": _parse_post,
    "post": _parse_post,
    "link": _parse_post,
    "t1": _parse_comment,
    "comment": _parse_comment,
}


def parse_thing(obj: Any) -> Thing:
    """
    Turn one decoded `{"kind": ..., "data": ...}` object into a model.

    Raises SchemaError for unknown kinds and for missing/mistyped fields.
    """
    if not isinstance(obj, dict):
        raise SchemaError(f"expected an object with 'kind' and 'data', got {obj!r}")

    kind = obj.get("kind")
    parser = KIND_PARSERS.get(kind) if isinstance(kind, str) else None
    if parser is None:
        raise SchemaError(f"unknown kind {kind!r}")

    data = obj.get("data")
    if not isinstance(data, dict):
        raise SchemaError(f"'data' of kind {kind!r} must be an object, got {data!r}")

    return parser(data)


def parse_listing_response(body: str) -> Thing:
    """
    Decode a raw listing response body.

    Any decode or schema failure is raised as ParseError carrying `body`.
    """
    try:
        decoded = json.loads(body)
    except ValueError as exc:
        raise ParseError(f"response is not valid JSON: {exc}", body) from exc

    try:
        return parse_thing(decoded)
    except SchemaError as exc:
        raise ParseError(f"response does not match the listing schema: {exc}", body) from exc


# ---------------------------------------------------------------------------
# Archive output
# ---------------------------------------------------------------------------


def epoch_to_datetime(seconds: float) -> datetime:
    """
    Epoch seconds -> aware UTC datetime, truncated to whole seconds.
    """
    return EPOCH + timedelta(seconds=int(seconds))


def format_saved(saved: datetime) -> str:
    """
    `YYYY-MM-DDTHH:MM:SSZ`; isoformat() keeps the year at four digits.
    """
    return saved.astimezone(timezone.utc).replace(tzinfo=None).isoformat(timespec="seconds") + "Z"


def archive_tags(subreddit: str) -> List[str]:
    return [f"r/{subreddit}", "reddit"]


@dataclass
class ArchiveItem:
    """
    Normalized record emitted for every saved post or comment.
    """

    title: str
    url: str
    saved: datetime
    tags: List[str]

    @classmethod
    def from_post(cls, post: Post) -> "ArchiveItem":
        return cls(
            title=post.title,
            url=post.url,
            saved=epoch_to_datetime(post.created),
            tags=archive_tags(post.subreddit),
        )

    @classmethod
    def from_comment(cls, comment: Comment) -> "ArchiveItem":
        return cls(
            title=comment.link_title,
            url=comment.link_permalink,
            saved=epoch_to_datetime(comment.created),
            tags=archive_tags(comment.subreddit),
        )

    def to_dict(self) -> Dict[str, str]:
        """
        Output shape: `saved` as an ISO-8601 UTC string, `tags` comma-joined.
        """
        return {
            "title": self.title,
            "url": self.url,
            "saved": format_saved(self.saved),
            "tags": ",".join(self.tags),
        }
