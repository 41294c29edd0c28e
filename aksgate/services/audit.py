"""Append-only audit log in JSON Lines format."""

from __future__ import annotations

import json
from pathlib import Path

from aksgate.core.result import Err, Ok, Result
from aksgate.core.structured import StrDict, as_str_dict
from aksgate.resolver.model import AuditRecord

__all__ = ["AuditLog"]


class AuditLog:
    """One JSON object per line; existing lines are never rewritten."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def append(self, record: AuditRecord) -> Result[None, str]:
        line = json.dumps(record.to_dict(), sort_keys=True, ensure_ascii=False)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            return Err(f"cannot append audit record to {self._path}: {e}")
        return Ok(None)

    def read_all(self) -> Result[list[StrDict], str]:
        if not self._path.exists():
            return Ok([])
        entries: list[StrDict] = []
        try:
            lines = self._path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            return Err(f"cannot read audit log {self._path}: {e}")
        for n, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                entry = as_str_dict(json.loads(line))
            except json.JSONDecodeError as e:
                return Err(f"{self._path}:{n}: invalid JSON: {e}")
            if entry is None:
                return Err(f"{self._path}:{n}: expected a JSON object")
            entries.append(entry)
        return Ok(entries)
