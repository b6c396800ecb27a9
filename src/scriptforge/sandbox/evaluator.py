"""Script evaluation in a fresh, restricted child process."""

from __future__ import annotations

import builtins
import json
import multiprocessing
import os
import queue
import time
from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping

from pydantic import BaseModel, model_validator

from scriptforge.config import DEFAULT_ALLOWED_IMPORTS
from scriptforge.sandbox.shim import ENTRYPOINT, shim_code
from scriptforge.sandbox.validation import validate_script
from scriptforge.util.logging import get_logger

logger = get_logger(__name__)

SAFE_BUILTIN_NAMES = (
    "abs", "all", "any", "ascii", "bin", "bool", "bytes", "callable", "chr", "dict",
    "divmod", "enumerate", "filter", "float", "format", "frozenset", "hasattr", "hash", "hex", "int", "isinstance", "issubclass", "iter", "len",
    "list", "map", "max", "min", "next", "object", "oct", "ord", "pow", "print",
    "range", "repr", "reversed", "round", "set", "slice", "sorted", "str", "sum",
    "tuple", "type", "zip",
    "Exception", "ArithmeticError", "AssertionError", "AttributeError", "IndexError",
    "KeyError", "LookupError", "NotImplementedError", "OverflowError", "RuntimeError",
    "StopIteration", "TypeError", "ValueError", "ZeroDivisionError",
)
_SENSITIVE_ENV_PREFIXES = ("OPENAI_", "ANTHROPIC_", "API_KEY", "TOKEN", "SECRET", "AWS_")
_ENV_ALLOWLIST = {"PATH", "HOME", "TMPDIR", "LANG", "TZ"}
_POLL_SECONDS = 0.05


class EvalOutcome(BaseModel):
    """Result of one evaluation.

    ``ok`` is False only for evaluator failures (syntax, rejected source,
    timeout, resource exhaustion). A script that raised is ``ok=True`` with
    ``error`` set. ``value`` is the JSON-serialized script result.
    """

    ok: bool
    value: str | None = None
    error: str | None = None

    @model_validator(mode="after")
    def _check_shape(self) -> "EvalOutcome":
        if not self.ok and self.error is None:
            raise ValueError("failed outcomes need an error")
        if self.value is not None and self.error is not None:
            raise ValueError("outcome cannot carry both a value and an error")
        return self

    @property
    def succeeded(self) -> bool:
        return self.ok and self.error is None

    @classmethod
    def success(cls, value: str | None) -> "EvalOutcome":
        return cls(ok=True, value=value)

    @classmethod
    def script_error(cls, error: str) -> "EvalOutcome":
        return cls(ok=True, error=error)

    @classmethod
    def failure(cls, error: str) -> "EvalOutcome":
        return cls(ok=False, error=error)


class ScriptEvaluator(ABC):
    """Runs script source with named global bindings."""

    @abstractmethod
    def evaluate(self, source: str, globals: Mapping[str, str]) -> EvalOutcome:
        """Evaluate ``source``. ``globals`` values are JSON strings."""
        raise NotImplementedError


def sanitize_env(env: Mapping[str, str]) -> dict[str, str]:
    """Return a sanitized environment for the evaluation process."""
    filtered: dict[str, str] = {}
    for key, value in env.items():
        if key.upper().startswith(_SENSITIVE_ENV_PREFIXES):
            continue
        if key in _ENV_ALLOWLIST:
            filtered[key] = value
    return filtered


def _guarded_import(allowed: frozenset[str]):
    real_import = builtins.__import__

    def guarded(name, globals=None, locals=None, fromlist=(), level=0):
        root = name.split(".")[0]
        if level != 0 or root not in allowed:
            raise ImportError(f"Import blocked: {name}")
        return real_import(name, globals, locals, fromlist, level)

    return guarded


def _describe(exc: BaseException) -> str:
    message = str(exc)
    return f"{exc.__class__.__name__}: {message}" if message else exc.__class__.__name__


def _run_script(
    source: str,
    serialized_globals: dict[str, str],
    allowed_imports: frozenset[str],
    output: multiprocessing.Queue,
) -> None:
    sanitized = sanitize_env(os.environ)
    os.environ.clear()
    os.environ.update(sanitized)
    try:
        bindings = {name: json.loads(value) for name, value in serialized_globals.items()}
        compiled = compile(shim_code(source, global_names=bindings), "<script>", "exec")
    except (SyntaxError, ValueError) as exc:
        output.put({"ok": False, "error": _describe(exc)})
        return

    safe_builtins = {name: getattr(builtins, name) for name in SAFE_BUILTIN_NAMES}
    safe_builtins["__import__"] = _guarded_import(allowed_imports)
    scope: dict[str, Any] = {"__builtins__": safe_builtins, "__name__": "__script__"}
    scope.update(bindings)
    try:
        exec(compiled, scope)
        value = scope[ENTRYPOINT]()
    except (MemoryError, RecursionError) as exc:
        output.put({"ok": False, "error": f"Resource exhausted: {_describe(exc)}"})
        return
    except Exception as exc:  # noqa: BLE001
        output.put({"ok": True, "error": _describe(exc)})
        return
    try:
        serialized = json.dumps(value, ensure_ascii=False, default=str)
    except (TypeError, ValueError, RecursionError) as exc:
        output.put({"ok": True, "error": f"Result is not JSON-serializable: {_describe(exc)}"})
        return
    output.put({"ok": True, "value": serialized})


class SandboxEvaluator(ScriptEvaluator):
    """Evaluates each script in its own process with a timeout."""

    def __init__(
        self,
        timeout_seconds: float = 5.0,
        allowed_imports: Iterable[str] | None = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        if allowed_imports is None:
            allowed_imports = DEFAULT_ALLOWED_IMPORTS.split(",")
        self.allowed_imports = frozenset(allowed_imports)

    def evaluate(self, source: str, globals: Mapping[str, str]) -> EvalOutcome:
        reserved = [name for name in globals if name.startswith("__")]
        if reserved:
            return EvalOutcome.failure(f"Invalid global names: {', '.join(sorted(reserved))}")
        problems = validate_script(source, self.allowed_imports)
        if problems:
            return EvalOutcome.failure("Script rejected: " + "; ".join(problems))

        output_queue: multiprocessing.Queue = multiprocessing.Queue()
        process = multiprocessing.Process(
            target=_run_script,
            args=(source, dict(globals), self.allowed_imports, output_queue),
            daemon=True,
        )
        process.start()
        payload, timed_out = self._wait_for_payload(process, output_queue)
        process.join(timeout=1)
        if process.is_alive():
            process.terminate()
            process.join()
        output_queue.close()

        if payload is None:
            if timed_out:
                logger.warning("Script timed out after %ss", self.timeout_seconds)
                return EvalOutcome.failure(f"Script timed out after {self.timeout_seconds}s")
            return EvalOutcome.failure(
                f"Evaluator produced no output (exit code {process.exitcode})"
            )
        return EvalOutcome(**payload)

    def _wait_for_payload(
        self, process: multiprocessing.Process, output_queue: multiprocessing.Queue
    ) -> tuple[dict[str, Any] | None, bool]:
        """Poll until the child reports, exits, or runs out of time."""
        deadline = time.monotonic() + self.timeout_seconds
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return None, True
            try:
                return output_queue.get(timeout=min(_POLL_SECONDS, remaining)), False
            except queue.Empty:
                pass
            if not process.is_alive():
                # the feeder thread may still be flushing when the child exits
                try:
                    return output_queue.get(timeout=_POLL_SECONDS), False
                except queue.Empty:
                    return None, False


class EvaluationClient:
    """Front for an evaluator that remembers the outcome of the last call."""

    def __init__(self, evaluator: ScriptEvaluator) -> None:
        self.evaluator = evaluator
        self.last_output: EvalOutcome | None = None

    def eval_with_globals(self, src: str, globals: Mapping[str, Any]) -> EvalOutcome:
        """Evaluate ``src``; ``globals`` values are serialized to JSON first."""
        try:
            serialized = {
                name: json.dumps(value, ensure_ascii=False) for name, value in globals.items()
            }
        except (TypeError, ValueError) as exc:
            outcome = EvalOutcome.failure(f"Globals are not JSON-serializable: {exc}")
        else:
            try:
                outcome = self.evaluator.evaluate(src, serialized)
            except Exception as exc:  # noqa: BLE001
                logger.exception("Evaluator crashed")
                outcome = EvalOutcome.failure(_describe(exc))
        self.last_output = outcome
        return outcome
