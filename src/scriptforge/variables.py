"""Variable store shared by the functions of one conversation."""

from __future__ import annotations

import json
from typing import Any, Iterator


class VariableStore:
    """Mapping of variable names to JSON-serialized values."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._values: dict[str, str] = {}
        for name, value in (initial or {}).items():
            self.set(name, value)

    def set(self, name: str, value: Any) -> str:
        """Serialize ``value`` and store it under ``name``."""
        serialized = json.dumps(value, ensure_ascii=False, default=str)
        self._values[self._check_name(name)] = serialized
        return serialized

    def set_serialized(self, name: str, serialized: str) -> None:
        """Store an already-serialized value. Raises ``ValueError`` if it is not JSON."""
        json.loads(serialized)
        self._values[self._check_name(name)] = serialized

    def get(self, name: str) -> str | None:
        return self._values.get(name)

    def get_value(self, name: str) -> Any:
        serialized = self._values.get(name)
        if serialized is None:
            raise KeyError(name)
        return json.loads(serialized)

    def decoded(self) -> dict[str, Any]:
        return {name: json.loads(value) for name, value in self._values.items()}

    def names(self) -> list[str]:
        return list(self._values)

    def snapshot(self) -> dict[str, str]:
        return dict(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    @staticmethod
    def _check_name(name: str) -> str:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Variable name must be a non-empty string")
        return name.strip()
