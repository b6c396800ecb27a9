"""Bounded, model-readable summaries of function calls."""

from __future__ import annotations

import json
from typing import Any, Callable

from pydantic import BaseModel

from scriptforge.chat import ChatMessageBuilder
from scriptforge.results import (
    AgentOutput,
    AgentOutputType,
    Err,
    ErrorKind,
    HandlerResult,
    Ok,
)

MAX_RESULT_CHARS = 3000
PREVIEW_CHARS = 200
ERROR_CHARS = 300
TRUNCATION_MARKER = "...[truncated]"
NO_RESULT = "No result returned."
_EMPTY_RESULTS = {"", "null", "undefined", '"undefined"', "None"}

UNDEFINED_FUNCTION_NAME = "Function call name was undefined."


def trim_text(text: str, max_chars: int) -> str:
    """Cut ``text`` to ``max_chars`` and append the truncation marker."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def is_empty_result(result: str | None) -> bool:
    return result is None or result.strip() in _EMPTY_RESULTS


def _params_text(params: Any) -> str:
    if isinstance(params, BaseModel):
        params = params.model_dump(exclude_none=True)
    if isinstance(params, str):
        return params
    return json.dumps(params, ensure_ascii=False, indent=2, default=str)


def _error_text(error: Any) -> str:
    if error is None or error == "":
        return "Unknown error"
    if isinstance(error, str):
        return error
    return json.dumps(error, ensure_ascii=False, indent=2, default=str)


def function_not_found(name: str) -> str:
    return f"Function {name} does not exist. Try calling executeScript instead."


def undefined_function_args(name: str) -> str:
    return f"Function {name} has no arguments defined."


def unparsable_function_args(name: str, args: str, error: Any) -> str:
    return (
        f"Could not parse arguments for function {name}.\n"
        f"Arguments:\n```\n{trim_text(args, PREVIEW_CHARS)}\n```\n"
        f"Error:\n```\n{trim_text(_error_text(error), ERROR_CHARS)}\n```"
    )


def function_call_failed(name: str, error: Any, params: Any) -> str:
    return (
        f"The call to {name} failed.\n"
        f"Arguments:\n```\n{trim_text(_params_text(params), PREVIEW_CHARS)}\n```\n"
        f"Error:\n```\n{trim_text(_error_text(error), ERROR_CHARS)}\n```"
    )


def function_call_success_content(name: str, params: Any, result: str) -> str:
    return f"## Function Call:\n```\n{name}({_params_text(params)})\n```\n## Result:\n{result}"


def function_call_header(name: str, params: Any) -> str:
    return f"Function call: `{name}({_params_text(params)})`\n"


def stored_result_in_var(variable: str | None) -> str:
    if variable:
        return f"Result stored in variable: {{{{{variable}}}}}"
    return ""


def preview(result: str | None) -> str:
    if is_empty_result(result):
        return NO_RESULT
    return f"Preview: `{trim_text(result, PREVIEW_CHARS)}`"


def _append_line(text: str, line: str) -> str:
    return f"{text}\n{line}" if line else text


def execute_script_output(variable: str | None, result: str | None) -> str:
    if is_empty_result(result):
        return _append_line(NO_RESULT, stored_result_in_var(variable))
    if len(result) > MAX_RESULT_CHARS:
        text = f"Preview of JSON result:\n```\n{trim_text(result, MAX_RESULT_CHARS)}\n```"
    elif "\n" in result or len(result) > PREVIEW_CHARS:
        text = f"JSON result:\n```\n{result}\n```"
    else:
        text = f"JSON result: {result}"
    return _append_line(text, stored_result_in_var(variable))


def read_var_output(name: str, value: str | None) -> str:
    if is_empty_result(value):
        return f"Variable {{{{{name}}}}} is empty."
    if len(value) > MAX_RESULT_CHARS:
        return f"Preview of {{{{{name}}}}}:\n```\n{trim_text(value, MAX_RESULT_CHARS)}\n```"
    return f"## Variable {{{{{name}}}}}:\n```\n{value}\n```"


def other_function_output(result: str | None) -> str:
    if is_empty_result(result):
        return NO_RESULT
    return f"Result:\n```\n{trim_text(result, MAX_RESULT_CHARS)}\n```"


def error_block(identifier: str, error: Any) -> str:
    return f"Error executing '{identifier}'\n```\n{trim_text(_error_text(error), ERROR_CHARS)}\n```"


def render(
    function_name: str,
    outcome: Ok[str | None] | Err[str],
    params: Any,
    *,
    identifier: str | None = None,
    title: str | None = None,
    formatter: Callable[[str | None], str] = other_function_output,
    error_kind: ErrorKind = ErrorKind.CAPABILITY_EXECUTION_FAILED,
) -> HandlerResult:
    """Render a capability outcome into display output and a transcript pair.

    ``identifier`` names the thing that ran (a script namespace, a file) and
    defaults to the function name.
    """
    identifier = identifier or function_name
    call_message = ChatMessageBuilder.function_call(function_name, params)
    if isinstance(outcome, Ok):
        text = formatter(outcome.value)
        return HandlerResult(
            outputs=[
                AgentOutput(
                    type=AgentOutputType.SUCCESS,
                    title=title or f"Executed '{identifier}'.",
                    content=function_call_success_content(function_name, params, text),
                )
            ],
            messages=[call_message, ChatMessageBuilder.function_call_result(function_name, text)],
            result=outcome.value,
        )
    error = _error_text(outcome.error)
    return HandlerResult(
        outputs=[
            AgentOutput(
                type=AgentOutputType.ERROR,
                title=title or f"'{identifier}' failed to execute!",
                content=function_call_failed(function_name, error, params),
            )
        ],
        messages=[
            call_message,
            ChatMessageBuilder.function_call_result(function_name, error_block(identifier, error)),
        ],
        error=error,
        error_kind=error_kind,
    )
