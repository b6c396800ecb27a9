"""Base chat model interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel


class FunctionCall(BaseModel):
    """A function call as emitted by the model. Either field may be missing."""

    name: str | None = None
    arguments: str | None = None


class ModelResponse(BaseModel):
    final_text: str | None = None
    function_call: FunctionCall | None = None


class BaseChatModel(ABC):
    """Abstract chat model interface."""

    @abstractmethod
    def chat(self, messages: list[dict[str, Any]], functions: list[dict[str, Any]] | None) -> ModelResponse:
        """Send chat request and return model response."""
        raise NotImplementedError
