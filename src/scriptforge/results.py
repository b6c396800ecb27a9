"""Tagged outcomes and the dispatch error taxonomy."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar, Union

from scriptforge.chat import ChatMessage

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err[E]]


class ErrorKind(str, Enum):
    """Failure categories surfaced by the dispatcher."""

    UNDEFINED_FUNCTION_NAME = "UNDEFINED_FUNCTION_NAME"
    UNDEFINED_FUNCTION_ARGUMENTS = "UNDEFINED_FUNCTION_ARGUMENTS"
    FUNCTION_NOT_FOUND = "FUNCTION_NOT_FOUND"
    UNPARSABLE_FUNCTION_ARGUMENTS = "UNPARSABLE_FUNCTION_ARGUMENTS"
    INVALID_CAPABILITY_ARGUMENTS = "INVALID_CAPABILITY_ARGUMENTS"
    CAPABILITY_EXECUTION_FAILED = "CAPABILITY_EXECUTION_FAILED"
    EVALUATOR_FAILURE = "EVALUATOR_FAILURE"
    SCRIPT_NOT_FOUND = "SCRIPT_NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AgentOutputType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class AgentOutput:
    """User-facing record of one function call."""

    type: AgentOutputType
    title: str
    content: str


@dataclass
class HandlerResult:
    """What a capability hands back: display outputs plus the transcript pair.

    ``result`` is the JSON-serialized raw result on success. ``error_kind``
    is set when the capability ran but reports a failure.
    """

    outputs: list[AgentOutput]
    messages: list[ChatMessage]
    result: str | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @property
    def summary(self) -> str:
        return self.outputs[0].content if self.outputs else ""


@dataclass(frozen=True)
class DispatchError:
    kind: ErrorKind
    message: str
    messages: list[ChatMessage] = field(default_factory=list)
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class FunctionCallSummary:
    name: str
    arguments: dict[str, Any]
    summary: str
    messages: list[ChatMessage]
    outputs: list[AgentOutput] = field(default_factory=list)
