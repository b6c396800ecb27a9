"""Conversation loop: ask the model, dispatch its function calls, repeat."""

from __future__ import annotations

from dataclasses import dataclass, field

from scriptforge.chat import ChatRole
from scriptforge.context import AgentContext
from scriptforge.functions.dispatcher import execute_agent_function
from scriptforge.functions.registry import FunctionRegistry
from scriptforge.models.base import BaseChatModel
from scriptforge.results import Err
from scriptforge.trace import TraceRecorder
from scriptforge.util.logging import get_logger

logger = get_logger(__name__)


@dataclass
class AgentResult:
    answer: str
    functions_used: list[str] = field(default_factory=list)
    steps: int = 0
    trace_path: str | None = None
    completed: bool = True


class Agent:
    """Runs one conversation against a chat model and a function registry."""

    def __init__(
        self,
        context: AgentContext,
        registry: FunctionRegistry,
        model: BaseChatModel | None = None,
        max_steps: int = 20,
        trace: TraceRecorder | None = None,
    ) -> None:
        model = model or context.llm
        if model is None:
            raise ValueError("Agent needs a chat model")
        self.context = context
        self.registry = registry
        self.model = model
        self.max_steps = max_steps
        self.trace = trace
        self.functions_used: list[str] = []

    def run(self, goal: str) -> AgentResult:
        chat = self.context.chat
        chat.add(ChatRole.USER, goal)
        definitions = self.registry.definitions()
        for step in range(1, self.max_steps + 1):
            messages = chat.as_dicts()
            if self.trace:
                self.trace.record_messages(messages)
            response = self.model.chat(messages, definitions)
            call = response.function_call
            if call is None:
                answer = response.final_text or ""
                chat.add(ChatRole.ASSISTANT, answer)
                return self._finish(answer, step, completed=True)
            self.step(call.name, call.arguments)
        logger.warning("Stopped after %s steps without a final answer", self.max_steps)
        return self._finish(
            f"Stopped after {self.max_steps} steps without a final answer.",
            self.max_steps,
            completed=False,
        )

    def step(self, name: str | None, arguments: str | None) -> str:
        """Dispatch one function call and append its transcript pair."""
        if self.trace:
            self.trace.record_function_call(name, arguments)
        outcome = execute_agent_function(name, arguments, self.context, self.registry)
        if isinstance(outcome, Err):
            error = outcome.error
            self.context.chat.add_pair(error.messages)
            if self.trace:
                self.trace.record_function_error(name, error.kind.value, error.message)
            return error.message
        summary = outcome.value
        self.context.chat.add_pair(summary.messages)
        if summary.name not in self.functions_used:
            self.functions_used.append(summary.name)
        if self.trace:
            self.trace.record_function_result(summary.name, summary.summary)
        return summary.summary

    def _finish(self, answer: str, steps: int, completed: bool) -> AgentResult:
        trace_path = None
        if self.trace:
            trace_path = self.trace.finalize(
                {"steps": steps, "functions_used": self.functions_used, "completed": completed}
            )
        return AgentResult(
            answer=answer,
            functions_used=list(self.functions_used),
            steps=steps,
            trace_path=trace_path,
            completed=completed,
        )
