"""Per-conversation state shared by agent functions."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from scriptforge.chat import Chat
from scriptforge.sandbox.evaluator import EvaluationClient, SandboxEvaluator
from scriptforge.scripts import InMemoryScriptCatalog, ScriptCatalog
from scriptforge.variables import VariableStore
from scriptforge.workspace import Workspace

if TYPE_CHECKING:
    from scriptforge.models.base import BaseChatModel


@dataclass
class AgentContext:
    evaluation_client: EvaluationClient
    workspace: Workspace
    scripts: ScriptCatalog
    variables: VariableStore = field(default_factory=VariableStore)
    chat: Chat = field(default_factory=Chat)
    llm: BaseChatModel | None = None


def new_agent_context(
    workspace_dir: str | Path,
    scripts: ScriptCatalog | None = None,
    evaluation_client: EvaluationClient | None = None,
    llm: BaseChatModel | None = None,
) -> AgentContext:
    return AgentContext(
        evaluation_client=evaluation_client or EvaluationClient(SandboxEvaluator()),
        workspace=Workspace(workspace_dir),
        scripts=scripts if scripts is not None else InMemoryScriptCatalog(),
        llm=llm,
    )
