"""Lightweight chat-completion client abstraction."""

from .client import CompletionBackend, OpenAICompletionClient, extract_reply

__all__ = ["CompletionBackend", "OpenAICompletionClient", "extract_reply"]
