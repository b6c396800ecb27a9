"""Dispatch a model-emitted function call to a registered function."""

from __future__ import annotations

import json
from typing import Any, Iterable

from pydantic import ValidationError

from scriptforge.chat import ChatMessageBuilder
from scriptforge.context import AgentContext
from scriptforge.functions.base import AgentFunction
from scriptforge.render import (
    UNDEFINED_FUNCTION_NAME,
    error_block,
    execute_script_output,
    function_call_failed,
    function_call_header,
    function_not_found,
    other_function_output,
    preview,
    read_var_output,
    undefined_function_args,
    unparsable_function_args,
)
from scriptforge.results import (
    DispatchError,
    Err,
    ErrorKind,
    FunctionCallSummary,
    HandlerResult,
    Ok,
    Result,
)
from scriptforge.util.json_repair import JsonRepairError, parse_relaxed_json
from scriptforge.util.logging import get_logger, redact

logger = get_logger(__name__)

EXECUTE_SCRIPT = "executeScript"
READ_VAR = "readVar"


def _dispatch_error(
    kind: ErrorKind,
    message: str,
    name: str | None,
    params: Any,
    details: dict[str, Any] | None = None,
    messages: list | None = None,
) -> Err[DispatchError]:
    label = name or "unknown"
    if messages is None:
        messages = [
            ChatMessageBuilder.function_call(label, params if params is not None else {}),
            ChatMessageBuilder.function_call_result(label, error_block(label, message)),
        ]
    logger.warning("Function call %s failed (%s): %s", label, kind.value, redact(message))
    return Err(DispatchError(kind=kind, message=message, messages=messages, details=details))


def _parse_raw_arguments(raw_args: str) -> Any:
    try:
        return json.loads(raw_args)
    except json.JSONDecodeError as strict_error:
        try:
            return parse_relaxed_json(raw_args)
        except JsonRepairError:
            raise strict_error


def process_function_and_args(
    name: str | None,
    raw_args: str | None,
    functions: Iterable[AgentFunction],
) -> Result[tuple[Any, AgentFunction], DispatchError]:
    """Validate a call before anything executes."""
    if not name:
        return _dispatch_error(ErrorKind.UNDEFINED_FUNCTION_NAME, UNDEFINED_FUNCTION_NAME, None, raw_args)

    function = next((f for f in functions if f.name == name), None)
    if function is None:
        return _dispatch_error(ErrorKind.FUNCTION_NOT_FOUND, function_not_found(name), name, raw_args)

    if not raw_args:
        return _dispatch_error(
            ErrorKind.UNDEFINED_FUNCTION_ARGUMENTS, undefined_function_args(name), name, None
        )

    try:
        fn_args = _parse_raw_arguments(raw_args)
    except json.JSONDecodeError as exc:
        return _dispatch_error(
            ErrorKind.UNPARSABLE_FUNCTION_ARGUMENTS,
            unparsable_function_args(name, raw_args, exc),
            name,
            raw_args,
            details={"parse_error": str(exc)},
        )
    if not isinstance(fn_args, dict):
        return _dispatch_error(
            ErrorKind.UNPARSABLE_FUNCTION_ARGUMENTS,
            unparsable_function_args(name, raw_args, "Arguments must be a JSON object"),
            name,
            raw_args,
        )

    try:
        params = function.input_model.model_validate(fn_args)
    except ValidationError as exc:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in error['loc']) or 'arguments'}: {error['msg']}"
            for error in exc.errors()
        )
        return _dispatch_error(
            ErrorKind.INVALID_CAPABILITY_ARGUMENTS,
            function_call_failed(name, errors, fn_args),
            name,
            fn_args,
            details={"expected_schema": function.parameters},
        )
    return Ok((params, function))


def _format_summary(name: str, params: Any, handler: HandlerResult) -> str:
    summary = function_call_header(name, params)
    if name == EXECUTE_SCRIPT:
        variable = getattr(params, "variable", None)
        summary += preview(handler.result) + "\n"
        summary += execute_script_output(variable, handler.result)
    elif name == READ_VAR:
        summary += read_var_output(getattr(params, "name", ""), handler.result)
    else:
        summary += other_function_output(handler.result)
    return summary


def execute_agent_function(
    name: str | None,
    raw_args: str | None,
    context: AgentContext,
    functions: Iterable[AgentFunction],
) -> Result[FunctionCallSummary, DispatchError]:
    """Run one function call and summarize it for the conversation.

    Never raises; every path returns ``Ok(FunctionCallSummary)`` or
    ``Err(DispatchError)``, each carrying the call/result transcript pair.
    """
    processed = process_function_and_args(name, raw_args, list(functions))
    if isinstance(processed, Err):
        return processed
    params, function = processed.value
    logger.info("Calling %s with %s", function.name, redact(params.model_dump_json(exclude_none=True)))

    try:
        executor = function.build_executor(context)
        response = executor(params)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Function %s raised", function.name)
        return _dispatch_error(
            ErrorKind.INTERNAL_ERROR,
            function_call_failed(function.name, f"Internal error: {exc.__class__.__name__}", params),
            function.name,
            params,
        )

    if isinstance(response, Err):
        return _dispatch_error(
            ErrorKind.CAPABILITY_EXECUTION_FAILED,
            function_call_failed(function.name, response.error, params),
            function.name,
            params,
        )

    handler = response.value
    if not handler.ok:
        return _dispatch_error(
            handler.error_kind,
            function_call_failed(function.name, handler.error, params),
            function.name,
            params,
            messages=handler.messages,
        )

    summary = _format_summary(function.name, params, handler)
    return Ok(
        FunctionCallSummary(
            name=function.name,
            arguments=params.model_dump(exclude_none=True),
            summary=summary,
            messages=handler.messages,
            outputs=handler.outputs,
        )
    )
