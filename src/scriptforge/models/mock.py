"""Mock chat model for offline testing."""

from __future__ import annotations

from typing import Any

from scriptforge.models.base import BaseChatModel, FunctionCall, ModelResponse


class MockChatModel(BaseChatModel):
    """Deterministic model that replays scripted responses.

    Without a script it answers ``CALL:<name> <args>`` prompts with that
    function call and everything else with a canned final answer.
    """

    def __init__(self, scripted: list[ModelResponse] | None = None) -> None:
        self._scripted = list(scripted or [])
        self.requests: list[list[dict[str, Any]]] = []

    def chat(self, messages: list[dict[str, Any]], functions: list[dict[str, Any]] | None) -> ModelResponse:
        self.requests.append(list(messages))
        if self._scripted:
            return self._scripted.pop(0)
        last = messages[-1].get("content") if messages else ""
        if isinstance(last, str) and last.startswith("CALL:"):
            name, _, arguments = last[len("CALL:") :].strip().partition(" ")
            return ModelResponse(function_call=FunctionCall(name=name or None, arguments=arguments or "{}"))
        return ModelResponse(final_text=f"Mock response to: {last}")
