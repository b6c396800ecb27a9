"""Create and find catalog scripts."""

from __future__ import annotations

import json
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from scriptforge.context import AgentContext
from scriptforge.functions.base import AgentFunction
from scriptforge.render import render
from scriptforge.results import Err, ErrorKind, HandlerResult, Ok
from scriptforge.sandbox.validation import validate_script
from scriptforge.scripts import Script


class CreateScriptInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    namespace: str = Field(description="Dotted namespace of the new script, e.g. math.average")
    description: str = Field(description="What the script does")
    arguments: str = Field(description="The global variables the script expects, e.g. { numbers: number[] }")
    code: str = Field(description="Python source. The last expression, or a variable named result, is returned")


class FindScriptInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    query: str = Field(description="Words to look for in script namespaces and descriptions")


class CreateScriptFunction(AgentFunction[CreateScriptInput]):
    name = "createScript"
    description = "Create a script that can later be run with executeScript."
    input_model = CreateScriptInput

    def build_executor(self, context: AgentContext) -> Callable[[CreateScriptInput], Ok[HandlerResult] | Err[str]]:
        def execute(params: CreateScriptInput) -> Ok[HandlerResult] | Err[str]:
            problems = validate_script(params.code)
            if problems:
                return Ok(self._on_error(params, "; ".join(problems)))
            try:
                script = Script(**params.model_dump())
                context.scripts.add_script(script)
            except (ValidationError, ValueError) as exc:
                return Ok(self._on_error(params, str(exc)))
            return Ok(
                render(
                    self.name,
                    Ok(f"Created script '{script.namespace}'."),
                    params,
                    identifier=script.namespace,
                    title=f"Created '{script.namespace}' script.",
                )
            )

        return execute

    def _on_error(self, params: CreateScriptInput, error: str) -> HandlerResult:
        return render(
            self.name,
            Err(error),
            params,
            identifier=params.namespace,
            error_kind=ErrorKind.INVALID_CAPABILITY_ARGUMENTS,
        )


class FindScriptFunction(AgentFunction[FindScriptInput]):
    name = "findScript"
    description = "Search the script catalog by namespace and description."
    input_model = FindScriptInput

    def build_executor(self, context: AgentContext) -> Callable[[FindScriptInput], Ok[HandlerResult] | Err[str]]:
        def execute(params: FindScriptInput) -> Ok[HandlerResult] | Err[str]:
            matches = [
                {"namespace": s.namespace, "description": s.description, "arguments": s.arguments}
                for s in context.scripts.search(params.query)
            ]
            if not matches:
                return Ok(render(self.name, Err(f"No scripts found for '{params.query}'."), params))
            return Ok(render(self.name, Ok(json.dumps(matches, indent=2, ensure_ascii=False)), params))

        return execute
