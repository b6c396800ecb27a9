"""Execute a catalog script in the sandbox evaluator."""

from __future__ import annotations

from typing import Callable

from pydantic import BaseModel, ConfigDict, Field

from scriptforge.arguments import resolve_arguments
from scriptforge.context import AgentContext
from scriptforge.functions.base import AgentFunction
from scriptforge.render import execute_script_output, render
from scriptforge.results import Err, ErrorKind, HandlerResult, Ok
from scriptforge.util.logging import get_logger

logger = get_logger(__name__)


class ExecuteScriptInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    namespace: str = Field(description="Namespace of the script to execute")
    arguments: str = Field(
        description=(
            "JSON-formatted arguments to pass into the script being executed. "
            "You can replace a value with a variable by using {{varName}} syntax."
        )
    )
    variable: str | None = Field(
        default=None, pattern=r"\S", description="The name of a variable to store the script's result in"
    )


class ExecuteScriptFunction(AgentFunction[ExecuteScriptInput]):
    name = "executeScript"
    description = "Execute a script."
    input_model = ExecuteScriptInput

    def build_executor(
        self, context: AgentContext
    ) -> Callable[[ExecuteScriptInput], Ok[HandlerResult] | Err[str]]:
        def execute(params: ExecuteScriptInput) -> Ok[HandlerResult] | Err[str]:
            script = context.scripts.get_script_by_name(params.namespace)
            if script is None:
                return Ok(
                    self._on_error(
                        params, f"Script '{params.namespace}' not found!", ErrorKind.SCRIPT_NOT_FOUND
                    )
                )

            args = resolve_arguments(params.arguments, context.variables)
            if isinstance(args, Err):
                return Ok(
                    self._on_error(
                        params,
                        f"Invalid arguments provided for script {params.namespace}: {args.error}",
                        ErrorKind.INVALID_CAPABILITY_ARGUMENTS,
                    )
                )

            outcome = context.evaluation_client.eval_with_globals(script.code, args.value)
            if not outcome.ok:
                return Ok(self._on_error(params, outcome.error, ErrorKind.EVALUATOR_FAILURE))
            if outcome.error is not None:
                return Ok(
                    self._on_error(params, outcome.error, ErrorKind.CAPABILITY_EXECUTION_FAILED)
                )

            if params.variable and outcome.value is not None:
                context.variables.set_serialized(params.variable, outcome.value)
                logger.info("Stored result of %s in {{%s}}", params.namespace, params.variable)
            return Ok(self._on_success(params, outcome.value))

        return execute

    def _on_success(self, params: ExecuteScriptInput, result: str | None) -> HandlerResult:
        return render(
            self.name,
            Ok(result),
            params,
            identifier=params.namespace,
            title=f"Executed '{params.namespace}' script.",
            formatter=lambda value: execute_script_output(params.variable, value),
        )

    def _on_error(self, params: ExecuteScriptInput, error: str | None, kind: ErrorKind) -> HandlerResult:
        return render(
            self.name,
            Err(error or "Unknown error"),
            params,
            identifier=params.namespace,
            title=f"'{params.namespace}' script failed to execute!",
            error_kind=kind,
        )
