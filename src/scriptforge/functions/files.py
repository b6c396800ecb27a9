"""Workspace file access."""

from __future__ import annotations

from typing import Callable

from pydantic import BaseModel, ConfigDict, Field

from scriptforge.context import AgentContext
from scriptforge.functions.base import AgentFunction
from scriptforge.render import render
from scriptforge.results import Err, HandlerResult, Ok


class ReadFileInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str = Field(description="Path relative to the workspace")


class WriteFileInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str = Field(description="Path relative to the workspace")
    content: str = Field(description="Text to write; replaces any existing content")


class ReadFileFunction(AgentFunction[ReadFileInput]):
    name = "readFile"
    description = "Read a text file from the workspace."
    input_model = ReadFileInput

    def build_executor(self, context: AgentContext) -> Callable[[ReadFileInput], Ok[HandlerResult] | Err[str]]:
        def execute(params: ReadFileInput) -> Ok[HandlerResult] | Err[str]:
            try:
                content = context.workspace.read_text(params.path)
            except (OSError, ValueError) as exc:
                return Ok(render(self.name, Err(str(exc)), params, identifier=params.path))
            return Ok(render(self.name, Ok(content), params, identifier=params.path))

        return execute


class WriteFileFunction(AgentFunction[WriteFileInput]):
    name = "writeFile"
    description = "Write a text file in the workspace."
    input_model = WriteFileInput

    def build_executor(self, context: AgentContext) -> Callable[[WriteFileInput], Ok[HandlerResult] | Err[str]]:
        def execute(params: WriteFileInput) -> Ok[HandlerResult] | Err[str]:
            try:
                context.workspace.write_text(params.path, params.content)
            except (OSError, ValueError) as exc:
                return Ok(render(self.name, Err(str(exc)), params, identifier=params.path))
            return Ok(
                render(
                    self.name,
                    Ok(f"Wrote {len(params.content)} characters to {params.path}."),
                    params,
                    identifier=params.path,
                )
            )

        return execute
