from __future__ import annotations

import json
import logging
from typing import Iterator, List, Sequence, TextIO

from .clients.reddit_client import RedditClient
from .errors import ProtocolError
from .models import ArchiveItem, Comment, Listing, Post, Thing, parse_listing_response

logger = logging.getLogger(__name__)


def iter_listings(client: RedditClient) -> Iterator[Listing]:
    """
    Walk the saved listing page by page, following the `after` cursor.

    Stops the first time a page has no cursor, whatever `dist` says.
    A page that is not a Listing raises ProtocolError.
    """
    after = ""
    page = 0

    while True:
        page += 1
        body = client.fetch_saved_page(after)
        thing = parse_listing_response(body)

        if not isinstance(thing, Listing):
            raise ProtocolError(
                f"Expected a Listing at the top of page {page}, "
                f"got {type(thing).__name__}: {thing!r}"
            )

        logger.info(
            "Page %d: %d items (after=%r, next=%r)",
            page,
            len(thing.children),
            after,
            thing.after,
        )
        yield thing

        if thing.after is None:
            break
        after = thing.after


def to_archive_item(thing: Thing) -> ArchiveItem:
    if isinstance(thing, Post):
        return ArchiveItem.from_post(thing)
    if isinstance(thing, Comment):
        return ArchiveItem.from_comment(thing)

    # Saved listings only ever contain posts and comments
    raise ProtocolError(
        f"Unreachable: saved listing contains a {type(thing).__name__}: {thing!r}"
    )


class Collector:
    """
    Collects every saved post and comment into ArchiveItems, in the order
    reddit returns them.
    """

    def __init__(self, client: RedditClient) -> None:
        self.client = client

    def collect_all(self) -> List[ArchiveItem]:
        items: List[ArchiveItem] = []

        for listing in iter_listings(self.client):
            items.extend(to_archive_item(child) for child in listing.children)

        logger.info("Collected %d saved items", len(items))
        return items


def dump_archive(items: Sequence[ArchiveItem], stream: TextIO) -> None:
    """
    Write the archive as a single JSON array.
    """
    json.dump(
        [item.to_dict() for item in items],
        stream,
        ensure_ascii=False,
        separators=(",", ":"),
    )
    stream.write("\n")
