"""
Local drawing cache.

A string key-value store that outlives the process, one file per key under
a base directory. Writes go through a temp file and an atomic replace.
"""
import os
from pathlib import Path
from typing import Optional


def _safe_key(key: str) -> str:
    # keys become file names; keep them flat
    if not key or any(ch in key for ch in ("/", "\\")) or ".." in key:
        raise ValueError("Invalid cache key")
    return key


class LocalCache:
    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir)

    def _path(self, key: str) -> Path:
        return self.base_dir / f"{_safe_key(key)}.json"

    def get(self, key: str) -> Optional[str]:
        p = self._path(key)
        if not p.exists():
            return None
        return p.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        p = self._path(key)
        p.parent.mkdir(parents=True, exist_ok=True)
        tmp = p.with_suffix(p.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            f.write(value)
            f.flush()
            os.fsync(f.fileno())
        tmp.replace(p)

    def remove(self, key: str) -> bool:
        p = self._path(key)
        if not p.exists():
            return False
        p.unlink()
        return True
