"""Static checks run on script source before it is evaluated."""

from __future__ import annotations

import ast
from typing import Iterable

FORBIDDEN_CALLS = {"eval", "exec", "compile", "open", "input", "breakpoint", "globals", "vars"}
FORBIDDEN_ATTRS = {"system", "popen", "rmtree", "fork", "kill"}


def validate_script(source: str, allowed_imports: Iterable[str] | None = None) -> list[str]:
    """Return list of validation errors for script source.

    ``allowed_imports`` limits top-level module names; ``None`` allows any.
    """
    allowed = None if allowed_imports is None else set(allowed_imports)
    errors: list[str] = []
    try:
        tree = ast.parse(source)
    except SyntaxError as exc:
        return [f"Syntax error: {exc}"]

    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            modules = [alias.name.split(".")[0] for alias in node.names]
        elif isinstance(node, ast.ImportFrom):
            modules = [(node.module or "").split(".")[0]] if node.level == 0 else [""]
        else:
            modules = []
        for module in modules:
            if allowed is not None and module not in allowed:
                errors.append(f"Forbidden import: {module or 'relative import'}")
        if isinstance(node, ast.Call):
            if isinstance(node.func, ast.Name) and node.func.id in FORBIDDEN_CALLS:
                errors.append(f"Forbidden call: {node.func.id}")
            if isinstance(node.func, ast.Attribute) and node.func.attr in FORBIDDEN_ATTRS:
                errors.append(f"Forbidden call: {node.func.attr}")
        if isinstance(node, ast.Attribute) and node.attr.startswith("__") and node.attr.endswith("__"):
            errors.append(f"Forbidden attribute: {node.attr}")
        if isinstance(node, ast.Name) and node.id.startswith("__") and node.id.endswith("__"):
            errors.append(f"Forbidden name: {node.id}")
    return errors
