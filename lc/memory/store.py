"""File-backed storage for the rolling conversation history."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List

from pydantic import ValidationError

from ..config import app_dir
from ..errors import HistoryReadError, HistoryWriteError
from ..schemas import MessagePayload, StoredHistory
from .memory import ConversationMemory, Message

logger = logging.getLogger(__name__)

HISTORY_FILENAME = "conversation_memory.json"


def get_history_path() -> Path:
    return app_dir() / HISTORY_FILENAME


class ConversationStore:
    """Persist the non-system turns of a conversation as a JSON array."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = Path(path) if path is not None else get_history_path()

    def load(self) -> List[Message]:
        """Return the stored history, or an empty list when none exists yet."""
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise HistoryReadError(f"Failed to read memory file: {exc}") from exc
        try:
            entries = StoredHistory.validate_json(raw)
        except ValidationError as exc:
            raise HistoryReadError(f"Failed to parse memory file: {exc}") from exc
        messages = [Message(role=entry.role, content=entry.content) for entry in entries]
        logger.debug("Loaded %d message(s) from %s", len(messages), self.path)
        return messages

    def save(self, messages: Iterable[Message], max_history: int) -> List[Message]:
        """Overwrite the file with the newest *max_history* non-system messages."""
        memory = ConversationMemory(list(messages)).without_system()
        memory.truncate(max_history)
        payload = StoredHistory.dump_python(
            [MessagePayload(role=msg.role, content=msg.content) for msg in memory.messages]
        )
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(payload, ensure_ascii=False), encoding="utf-8"
            )
        except OSError as exc:
            raise HistoryWriteError(f"Failed to write memory file: {exc}") from exc
        logger.debug("Saved %d message(s) to %s", len(memory), self.path)
        return list(memory.messages)

    def clear(self) -> bool:
        """Remove the history file. Returns False when there was nothing to clear."""
        if not self.path.exists():
            return False
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise HistoryWriteError(f"Failed to remove memory file: {exc}") from exc
        return True
