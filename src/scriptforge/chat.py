"""Append-only conversation transcript."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class ChatRole(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    FUNCTION_CALL = "function_call"
    FUNCTION_RESULT = "function_result"


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: ChatRole
    content: str
    name: str | None = None


class ChatMessageBuilder:
    """Builds the transcript entries recorded around a function call."""

    @staticmethod
    def function_call(name: str, params: Any) -> ChatMessage:
        if isinstance(params, BaseModel):
            params = params.model_dump(exclude_none=True)
        return ChatMessage(
            role=ChatRole.FUNCTION_CALL,
            name=name,
            content=json.dumps(params, ensure_ascii=False, default=str),
        )

    @staticmethod
    def function_call_result(name: str, content: str) -> ChatMessage:
        return ChatMessage(role=ChatRole.FUNCTION_RESULT, name=name, content=content)


class Chat:
    """Ordered conversation log. Entries are only ever appended."""

    def __init__(self) -> None:
        self._messages: list[ChatMessage] = []

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def add(self, role: ChatRole, content: str, name: str | None = None) -> ChatMessage:
        message = ChatMessage(role=role, content=content, name=name)
        self._messages.append(message)
        return message

    def add_pair(self, messages: list[ChatMessage]) -> None:
        """Append a function call together with its result."""
        if len(messages) != 2:
            raise ValueError(f"Expected a call/result pair, got {len(messages)} messages")
        call, result = messages
        if call.role != ChatRole.FUNCTION_CALL or result.role != ChatRole.FUNCTION_RESULT:
            raise ValueError("Pair must be a function_call followed by a function_result")
        self._messages.extend([call, result])

    def as_dicts(self) -> list[dict[str, Any]]:
        return [message.model_dump(mode="json", exclude_none=True) for message in self._messages]
