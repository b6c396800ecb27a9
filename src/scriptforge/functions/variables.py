"""Read and write conversation variables."""

from __future__ import annotations

import json
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field

from scriptforge.context import AgentContext
from scriptforge.functions.base import AgentFunction
from scriptforge.render import read_var_output, render
from scriptforge.results import Err, HandlerResult, Ok


class ReadVarInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(pattern=r"\S", description="The name of the variable to read")


class WriteVarInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(pattern=r"\S", description="The name of the variable to write")
    value: str = Field(description="The value to store. JSON is stored as parsed JSON, anything else as a string")


class ReadVarFunction(AgentFunction[ReadVarInput]):
    name = "readVar"
    description = "Read a variable. Variables are written by scripts and by writeVar."
    input_model = ReadVarInput

    def build_executor(self, context: AgentContext) -> Callable[[ReadVarInput], Ok[HandlerResult] | Err[str]]:
        def execute(params: ReadVarInput) -> Ok[HandlerResult] | Err[str]:
            value = context.variables.get(params.name)
            if value is None:
                return Ok(render(self.name, Err(f"Variable {{{{{params.name}}}}} not found."), params))
            return Ok(
                render(
                    self.name,
                    Ok(value),
                    params,
                    title=f"Read variable {{{{{params.name}}}}}",
                    formatter=lambda text: read_var_output(params.name, text),
                )
            )

        return execute


class WriteVarFunction(AgentFunction[WriteVarInput]):
    name = "writeVar"
    description = "Store a value in a variable so scripts can use it through {{name}}."
    input_model = WriteVarInput

    def build_executor(self, context: AgentContext) -> Callable[[WriteVarInput], Ok[HandlerResult] | Err[str]]:
        def execute(params: WriteVarInput) -> Ok[HandlerResult] | Err[str]:
            try:
                json.loads(params.value)
            except json.JSONDecodeError:
                serialized = context.variables.set(params.name, params.value)
            else:
                context.variables.set_serialized(params.name, params.value)
                serialized = params.value
            return Ok(
                render(
                    self.name,
                    Ok(f"Stored in variable {{{{{params.name}}}}}: {serialized}"),
                    params,
                    title=f"Wrote variable {{{{{params.name}}}}}",
                )
            )

        return execute
