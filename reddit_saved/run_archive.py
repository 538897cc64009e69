from __future__ import annotations

"""
CLI entrypoint: log in and print the saved posts/comments archive.

Usage (from repo root):

    python -m reddit_saved.run_archive -u someone --password-stdin -v < pw.txt > saved.json

This will:
- Log in to reddit with the given credentials
- Fetch every page of the saved listing
- Print one JSON array of archive items on stdout
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .clients import RedditCredentials, RedditJsonClient, establish_session
from .collector import Collector, dump_archive
from .config import get_config
from .errors import ArchiveError
from .logging_utils import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reddit-saved-archive",
        description="Archive your saved reddit posts and comments as JSON on stdout",
    )
    parser.add_argument("-u", "--username", default=None, help="reddit username (or REDDIT_USERNAME)")
    parser.add_argument("-p", "--password", default=None, help="reddit password (or REDDIT_PASSWORD)")
    parser.add_argument(
        "--password-stdin",
        action="store_true",
        help="Read the password from the first line of standard input",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="More diagnostics on stderr (-v info, -vv debug, -vvv trace)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run(args: argparse.Namespace) -> None:
    cfg = get_config()

    credentials = RedditCredentials.resolve(
        username=args.username,
        password=args.password,
        password_stdin=args.password_stdin,
    )
    session = establish_session(credentials, scraper_config=cfg.scraper)

    client = RedditJsonClient(session, scraper_config=cfg.scraper)
    items = Collector(client).collect_all()

    dump_archive(items, sys.stdout)


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        run(args)
    except ArchiveError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
