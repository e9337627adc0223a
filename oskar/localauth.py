"""Locally stored license settings."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

_DEFAULT_DEMO_REMAININGS = 3


class LocalAuth:
    """License settings kept in a JSON file on disk."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._values = self._load()

    def _load(self) -> dict[str, Any]:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
        return data if isinstance(data, dict) else {}

    def _set(self, key: str, value: Any) -> None:
        self._values[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        temporary = self._path.with_name(self._path.name + ".tmp")
        temporary.write_text(json.dumps(self._values, ensure_ascii=False), encoding="utf-8")
        os.replace(temporary, self._path)

    @property
    def is_demo(self) -> bool:
        return bool(self._values.get("isDemo", False))

    @is_demo.setter
    def is_demo(self, value: bool) -> None:
        self._set("isDemo", bool(value))

    @property
    def demo_remainings(self) -> int:
        try:
            return int(self._values.get("demoRemainings", _DEFAULT_DEMO_REMAININGS))
        except (TypeError, ValueError):
            return 0

    @demo_remainings.setter
    def demo_remainings(self, value: int) -> None:
        self._set("demoRemainings", int(value))

    @property
    def serial(self) -> str:
        value = self._values.get("serial", "")
        return value if isinstance(value, str) else str(value)

    @serial.setter
    def serial(self, value: str) -> None:
        self._set("serial", value)