"""Conversation memory utilities."""

from .memory import ConversationMemory, Message, Role
from .store import ConversationStore, get_history_path

__all__ = [
    "ConversationMemory",
    "ConversationStore",
    "Message",
    "Role",
    "get_history_path",
]
