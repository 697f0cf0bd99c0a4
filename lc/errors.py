"""Error types raised by the lc assistant."""
from __future__ import annotations


class LcError(Exception):
    """Base class for every error the assistant reports to the user."""


class UsageError(LcError):
    """No query was supplied and memory mode was not requested."""


class ConfigError(LcError):
    """The configuration could not be located, read, parsed or updated."""


class ConfigWriteError(LcError):
    """The configuration file could not be written."""


class HistoryReadError(LcError):
    """The stored conversation history exists but cannot be read."""


class HistoryWriteError(LcError):
    """The stored conversation history could not be written or removed."""


class CompletionError(LcError):
    """Base class for failures of the chat-completion call."""


class TransportError(CompletionError):
    """The HTTP request never produced a response."""


class ParseError(CompletionError):
    """The response body is not valid JSON."""


class ExtractionError(CompletionError):
    """The response JSON lacks ``choices[0].message.content``."""
