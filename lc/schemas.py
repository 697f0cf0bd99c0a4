"""Pydantic schemas for the chat-completion wire format and stored history."""
from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field, TypeAdapter


class MessagePayload(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class ChatCompletionRequest(BaseModel):
    model: str = Field(..., description="Model identifier sent to the endpoint")
    messages: List[MessagePayload]


# The history file is a bare JSON array, not an object.
StoredHistory = TypeAdapter(List[MessagePayload])
