"""Script catalog: named script sources the agent can execute."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from scriptforge.util.logging import get_logger

logger = get_logger(__name__)

NAMESPACE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


class Script(BaseModel):
    model_config = ConfigDict(frozen=True)

    namespace: str = Field(pattern=NAMESPACE_RE.pattern)
    description: str = ""
    arguments: str = ""
    code: str


class ScriptCatalog(ABC):
    """Lookup of scripts by namespace."""

    @abstractmethod
    def get_script_by_name(self, namespace: str) -> Script | None:
        raise NotImplementedError

    @abstractmethod
    def add_script(self, script: Script) -> None:
        """Add a new script. Raises ``ValueError`` if the namespace exists."""
        raise NotImplementedError

    @abstractmethod
    def list(self) -> list[Script]:
        raise NotImplementedError

    def search(self, query: str) -> list[Script]:
        terms = [term for term in query.lower().split() if term]
        matches = []
        for script in self.list():
            haystack = f"{script.namespace} {script.description}".lower()
            if all(term in haystack for term in terms):
                matches.append(script)
        return matches


class InMemoryScriptCatalog(ScriptCatalog):
    def __init__(self, scripts: list[Script] | None = None) -> None:
        self._scripts: dict[str, Script] = {}
        for script in scripts or []:
            self.add_script(script)

    def get_script_by_name(self, namespace: str) -> Script | None:
        return self._scripts.get(namespace)

    def add_script(self, script: Script) -> None:
        if script.namespace in self._scripts:
            raise ValueError(f"Script '{script.namespace}' already exists")
        self._scripts[script.namespace] = script

    def list(self) -> list[Script]:
        return list(self._scripts.values())


class DirectoryScriptCatalog(ScriptCatalog):
    """Scripts stored as ``<namespace>.py`` with a ``<namespace>.yaml`` sidecar.

    The sidecar holds ``description`` and ``arguments``; it is optional.
    Scripts are read once and cached.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        self._cache: dict[str, Script] = {}

    def _load(self, namespace: str) -> Script | None:
        source_path = self.root / f"{namespace}.py"
        if not source_path.is_file():
            return None
        meta_path = self.root / f"{namespace}.yaml"
        meta = {}
        if meta_path.is_file():
            try:
                meta = yaml.safe_load(meta_path.read_text(encoding="utf-8")) or {}
            except yaml.YAMLError as exc:
                logger.warning("Ignoring unreadable metadata for script %s: %s", namespace, exc)
                meta = {}
            if not isinstance(meta, dict):
                logger.warning("Ignoring malformed metadata for script %s", namespace)
                meta = {}
        try:
            return Script(
                namespace=namespace,
                description=str(meta.get("description", "")),
                arguments=str(meta.get("arguments", "")),
                code=source_path.read_text(encoding="utf-8"),
            )
        except ValidationError as exc:
            logger.warning("Skipping invalid script %s: %s", namespace, exc)
            return None

    def get_script_by_name(self, namespace: str) -> Script | None:
        if not NAMESPACE_RE.match(namespace):
            return None
        if namespace not in self._cache:
            script = self._load(namespace)
            if script is None:
                return None
            self._cache[namespace] = script
        return self._cache[namespace]

    def add_script(self, script: Script) -> None:
        if self.get_script_by_name(script.namespace) is not None:
            raise ValueError(f"Script '{script.namespace}' already exists")
        (self.root / f"{script.namespace}.py").write_text(script.code, encoding="utf-8")
        meta = {"description": script.description, "arguments": script.arguments}
        (self.root / f"{script.namespace}.yaml").write_text(
            yaml.safe_dump(meta, sort_keys=False), encoding="utf-8"
        )
        self._cache[script.namespace] = script

    def list(self) -> list[Script]:
        scripts = []
        for path in sorted(self.root.glob("*.py")):
            script = self.get_script_by_name(path.stem)
            if script is not None:
                scripts.append(script)
        return scripts
