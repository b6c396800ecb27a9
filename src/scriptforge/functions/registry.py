"""Function registry."""

from __future__ import annotations

from typing import Iterable

from scriptforge.functions.base import AgentFunction


class FunctionRegistry:
    """Ordered registry of functions available to the agent."""

    def __init__(self, functions: Iterable[AgentFunction] | None = None) -> None:
        self._functions: dict[str, AgentFunction] = {}
        if functions:
            self.register_all(functions)

    def register(self, function: AgentFunction) -> None:
        if function.name in self._functions:
            raise ValueError(f"Function '{function.name}' is already registered")
        self._functions[function.name] = function

    def register_all(self, functions: Iterable[AgentFunction]) -> None:
        for function in functions:
            self.register(function)

    def get(self, name: str) -> AgentFunction | None:
        return self._functions.get(name)

    def list(self) -> list[AgentFunction]:
        return list(self._functions.values())

    def names(self) -> list[str]:
        return list(self._functions)

    def definitions(self) -> list[dict]:
        return [function.definition for function in self._functions.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __iter__(self):
        return iter(self._functions.values())

    def __len__(self) -> int:
        return len(self._functions)
