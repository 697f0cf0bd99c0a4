"""Conversation memory for the assistant."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Literal

Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class Message:
    """Single conversational message."""

    role: Role
    content: str

    def as_dict(self) -> dict:
        return {"role": self.role, "content": self.content}


@dataclass
class ConversationMemory:
    """In-memory rolling log of the conversation, oldest message first."""

    messages: List[Message] = field(default_factory=list)

    def append(self, role: Role, content: str) -> None:
        self.messages.append(Message(role=role, content=content))

    def extend(self, entries: Iterable[Message]) -> None:
        self.messages.extend(entries)

    def without_system(self) -> "ConversationMemory":
        return ConversationMemory(
            [msg for msg in self.messages if msg.role != "system"]
        )

    def truncate(self, max_messages: int) -> None:
        """Trim the log to the newest *max_messages* messages."""
        if max_messages <= 0:
            self.messages.clear()
            return
        if len(self.messages) > max_messages:
            self.messages = self.messages[-max_messages:]

    def __len__(self) -> int:
        return len(self.messages)
