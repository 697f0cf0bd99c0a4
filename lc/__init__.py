"""lc: a command-line assistant backed by a chat-completion API."""

__version__ = "0.1.0"
