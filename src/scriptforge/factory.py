"""Shared construction helpers for contexts, registries and agents."""

from __future__ import annotations

from pathlib import Path
from uuid import uuid4

from scriptforge.agent import Agent
from scriptforge.config import Settings
from scriptforge.context import AgentContext, new_agent_context
from scriptforge.functions import FunctionRegistry, default_functions
from scriptforge.models.base import BaseChatModel
from scriptforge.models.mock import MockChatModel
from scriptforge.sandbox.evaluator import EvaluationClient, SandboxEvaluator
from scriptforge.scripts import DirectoryScriptCatalog, InMemoryScriptCatalog, ScriptCatalog
from scriptforge.trace import TraceRecorder
from scriptforge.util.logging import set_level


def build_evaluation_client(settings: Settings) -> EvaluationClient:
    evaluator = SandboxEvaluator(
        timeout_seconds=settings.script_timeout_seconds,
        allowed_imports=settings.allowed_import_set(),
    )
    return EvaluationClient(evaluator)


def build_script_catalog(settings: Settings) -> ScriptCatalog:
    if settings.scripts_dir:
        return DirectoryScriptCatalog(settings.scripts_dir)
    return InMemoryScriptCatalog()


def build_registry() -> FunctionRegistry:
    return FunctionRegistry(default_functions())


def build_context(settings: Settings, model: BaseChatModel | None = None) -> AgentContext:
    set_level(settings.log_level)
    return new_agent_context(
        workspace_dir=settings.workspace_dir,
        scripts=build_script_catalog(settings),
        evaluation_client=build_evaluation_client(settings),
        llm=model,
    )


def build_agent(
    settings: Settings,
    model: BaseChatModel | None = None,
    *,
    context: AgentContext | None = None,
    registry: FunctionRegistry | None = None,
    trace: bool = False,
) -> Agent:
    model = model or MockChatModel()
    context = context or build_context(settings, model)
    recorder = None
    if trace:
        recorder = TraceRecorder(trace_id=uuid4().hex, workspace_dir=str(Path(settings.workspace_dir)))
    return Agent(
        context=context,
        registry=registry or build_registry(),
        model=model,
        max_steps=settings.max_steps,
        trace=recorder,
    )
