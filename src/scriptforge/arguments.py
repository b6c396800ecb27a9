"""Argument parsing and ``{{variable}}`` placeholder substitution."""

from __future__ import annotations

import json
import re
from typing import Any, Mapping

from scriptforge.results import Err, Ok, Result
from scriptforge.util.json_repair import JsonRepairError, parse_relaxed_json
from scriptforge.variables import VariableStore

PLACEHOLDER_RE = re.compile(r"\{\{(.*?)\}\}")


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def replace_placeholders(template: str, variables: Mapping[str, Any]) -> Any:
    """Replace ``{{name}}`` tokens with decoded variable values.

    ``variables`` maps names to already-decoded values. Tokens naming an
    unknown variable are kept verbatim. A template that is a single token
    yields the value itself, keeping its type.
    """
    whole = PLACEHOLDER_RE.fullmatch(template.strip())
    if whole and whole.group(1).strip() in variables:
        return variables[whole.group(1).strip()]

    def substitute(match: re.Match[str]) -> str:
        key = match.group(1).strip()
        if key not in variables:
            return match.group(0)
        return _as_text(variables[key])

    return PLACEHOLDER_RE.sub(substitute, template)


def parse_arguments(raw_arguments: str | None) -> Result[dict[str, Any], str]:
    if raw_arguments is None or not raw_arguments.strip():
        return Ok({})
    try:
        parsed = parse_relaxed_json(raw_arguments)
    except JsonRepairError as exc:
        return Err(str(exc))
    if parsed is None:
        return Ok({})
    if not isinstance(parsed, dict):
        return Err(f"Expected a JSON object, got {type(parsed).__name__}")
    return Ok(parsed)


def resolve_arguments(
    raw_arguments: str | None, variables: VariableStore | Mapping[str, str]
) -> Result[dict[str, Any], str]:
    """Parse relaxed-JSON arguments and resolve placeholders in string fields.

    ``variables`` holds JSON-serialized values. On failure the error names
    the offending argument string.
    """
    parsed = parse_arguments(raw_arguments)
    if isinstance(parsed, Err):
        return Err(f"'{raw_arguments}' is not valid JSON ({parsed.error})")
    args = parsed.value
    if not args:
        return Ok(args)
    if isinstance(variables, VariableStore):
        decoded = variables.decoded()
    else:
        decoded = {name: json.loads(value) for name, value in variables.items()}
    resolved: dict[str, Any] = {}
    for key, value in args.items():
        resolved[key] = replace_placeholders(value, decoded) if isinstance(value, str) else value
    return Ok(resolved)
