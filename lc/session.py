"""Assemble a request, run the completion and keep the history up to date."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import IO, Callable, List, Optional, Sequence

from .config import Config
from .errors import HistoryReadError, UsageError
from .llm import CompletionBackend
from .memory import ConversationMemory, ConversationStore, Message

logger = logging.getLogger(__name__)

QUERY_PREFIX = "Query: "
INPUT_PREFIX = "Input: "


def compose_query(query: Optional[str], words: Sequence[str], memory: bool) -> str:
    """Return the labelled query text, or raise UsageError when none was given."""
    if query is not None:
        return f"{QUERY_PREFIX}{query.strip()}"
    if words:
        return f"{QUERY_PREFIX}{' '.join(words).strip()}"
    if memory:
        return ""
    raise UsageError("No query supplied")


def read_piped_input(stream: Optional[IO[str]]) -> str:
    """Read everything piped on *stream*; interactive terminals yield ''."""
    if stream is None or stream.closed:
        return ""
    try:
        interactive = stream.isatty()
    except ValueError:
        return ""
    if interactive:
        return ""
    text = stream.read().strip()
    if not text:
        return ""
    return f"{INPUT_PREFIX}{text}"


@dataclass
class ChatSession:
    """One invocation of the assistant.

    The session owns no global state: the configuration, the completion
    backend and the history store are all handed in.
    """

    config: Config
    backend: CompletionBackend
    store: ConversationStore

    def load_history(self) -> List[Message]:
        try:
            return self.store.load()
        except HistoryReadError as exc:
            logger.warning("Ignoring conversation memory: %s", exc)
            return []

    def build_messages(self, query: str, input_text: str, *, memory: bool) -> List[Message]:
        conversation = ConversationMemory()
        conversation.append("system", self.config.system_prompt)
        if memory:
            conversation.extend(self.load_history())
        if query.strip() or input_text.strip():
            conversation.append("user", f"{query}\n\n{input_text}".strip())
        return list(conversation.messages)

    def ask(
        self,
        query: str,
        input_text: str,
        *,
        memory: bool,
        on_reply: Optional[Callable[[str], None]] = None,
    ) -> str:
        """Send the conversation and return the reply.

        CompletionError propagates unchanged and leaves the stored history
        alone. *on_reply* sees the reply before it is persisted, so a failed
        save cannot hide an answer that was already received.
        """
        messages = self.build_messages(query, input_text, memory=memory)
        logger.debug("Messages: %s", [msg.as_dict() for msg in messages])
        reply = self.backend.complete(messages)
        if on_reply is not None:
            on_reply(reply)
        if memory:
            messages.append(Message(role="assistant", content=reply))
            self.store.save(messages, self.config.max_history)
        return reply
