"""Base agent function definitions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, TypeVar

from pydantic import BaseModel

from scriptforge.context import AgentContext
from scriptforge.results import Err, HandlerResult, Ok

P = TypeVar("P", bound=BaseModel)


class AgentFunction(ABC, Generic[P]):
    """A named capability the model can call."""

    name: str
    description: str
    input_model: type[P]

    @abstractmethod
    def build_executor(self, context: AgentContext) -> Callable[[P], Ok[HandlerResult] | Err[str]]:
        """Return an executor bound to ``context``."""
        raise NotImplementedError

    @property
    def parameters(self) -> dict[str, Any]:
        schema = self.input_model.model_json_schema()
        schema.pop("title", None)
        for prop in schema.get("properties", {}).values():
            prop.pop("title", None)
        schema.setdefault("required", [])
        schema["additionalProperties"] = False
        return schema

    @property
    def definition(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }
