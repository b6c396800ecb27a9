from __future__ import annotations

from typing import Mapping

import pytest

from scriptforge.context import new_agent_context
from scriptforge.sandbox.evaluator import EvalOutcome, EvaluationClient, ScriptEvaluator
from scriptforge.scripts import InMemoryScriptCatalog, Script


class StubEvaluator(ScriptEvaluator):
    """Returns a fixed outcome and records what it was asked to run."""

    def __init__(self, outcome: EvalOutcome | None = None) -> None:
        self.outcome = outcome or EvalOutcome.success("null")
        self.calls: list[tuple[str, dict[str, str]]] = []

    def evaluate(self, source: str, globals: Mapping[str, str]) -> EvalOutcome:
        self.calls.append((source, dict(globals)))
        return self.outcome


@pytest.fixture
def stub_evaluator() -> StubEvaluator:
    return StubEvaluator()


@pytest.fixture
def context(tmp_path, stub_evaluator):
    catalog = InMemoryScriptCatalog(
        [
            Script(namespace="add", description="Add one to x", arguments="{ x: number }", code="return x + 1"),
            Script(namespace="fail", description="Always raises", code="raise ValueError('boom')"),
        ]
    )
    return new_agent_context(
        workspace_dir=tmp_path / "workspace",
        scripts=catalog,
        evaluation_client=EvaluationClient(stub_evaluator),
    )
