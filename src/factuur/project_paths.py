from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _resolve_from_root(root: Path, value: str) -> Path:
    candidate = Path(value)
    if candidate.is_absolute():
        return candidate
    return (root / candidate).resolve()


def find_project_root(start: Path | None = None) -> Path:
    starts = [start] if start is not None else [Path.cwd(), Path(__file__).parent]
    for begin in starts:
        cursor = begin.resolve()
        for candidate in [cursor, *cursor.parents]:
            if (candidate / "pyproject.toml").exists():
                return candidate
    raise RuntimeError("Could not find project root (missing pyproject.toml in parent chain).")


@dataclass(frozen=True, slots=True)
class ProjectPaths:
    root: Path
    config_dir: Path

    @classmethod
    def detect(cls, start: Path | None = None) -> "ProjectPaths":
        root = find_project_root(start)
        config_dir = _resolve_from_root(root, os.getenv("FACTUUR_CONFIG_DIR", "config"))
        return cls(root=root, config_dir=config_dir)
