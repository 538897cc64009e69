from __future__ import annotations


class ArchiveError(Exception):
    """Base class for every fatal condition of an archive run."""


class ConfigurationError(ArchiveError):
    """Username or password could not be obtained."""


class NetworkError(ArchiveError):
    """A request to reddit could not be completed."""


class ProtocolError(ArchiveError):
    """Reddit answered, but not with the page or shape we expect."""


class ParseError(ArchiveError):
    """
    A response body is not valid JSON or does not match the listing schema.

    The offending body is kept on `.body` and repeated in the message,
    since that is usually the only way to see what reddit actually sent.
    """

    def __init__(self, message: str, body: str) -> None:
        super().__init__(f"{message}\nraw body: {body}")
        self.body = body
