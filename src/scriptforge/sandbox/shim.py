"""Turn script source into a callable whose return value is the script result."""

from __future__ import annotations

import ast
import keyword
from typing import Iterable

ENTRYPOINT = "__script_main__"
_TEMPLATE = f"def {ENTRYPOINT}():\n    pass\n"


def _assigns_result(body: list[ast.stmt]) -> bool:
    for node in body:
        if isinstance(node, ast.Assign):
            if any(isinstance(target, ast.Name) and target.id == "result" for target in node.targets):
                return True
        if isinstance(node, ast.AnnAssign):
            if isinstance(node.target, ast.Name) and node.target.id == "result":
                return True
        if isinstance(node, ast.Expr) and isinstance(node.value, ast.NamedExpr):
            if node.value.target.id == "result":
                return True
    return False


def shim_code(
    source: str, filename: str = "<script>", global_names: Iterable[str] = ()
) -> ast.Module:
    """Wrap ``source`` in a function body.

    A trailing expression becomes the return value; otherwise a top-level
    ``result`` assignment is returned. Explicit ``return`` statements work
    as written. ``global_names`` are the injected bindings; they are declared
    ``global`` so the script can reassign them as it could at module level.
    Raises ``SyntaxError`` for unparsable source.
    """
    tree = ast.parse(source, filename=filename)
    body = list(tree.body)
    if body and isinstance(body[-1], ast.Expr):
        last = body[-1]
        body[-1] = ast.copy_location(ast.Return(value=last.value), last)
    elif body and not isinstance(body[-1], ast.Return) and _assigns_result(body):
        body.append(ast.Return(value=ast.Name(id="result", ctx=ast.Load())))

    names = sorted(
        {name for name in global_names if name.isidentifier() and not keyword.iskeyword(name)}
    )
    if names:
        body.insert(0, ast.Global(names=names))

    module = ast.parse(_TEMPLATE, filename=filename)
    function = module.body[0]
    function.body = body or [ast.Pass()]
    ast.fix_missing_locations(module)
    return module
