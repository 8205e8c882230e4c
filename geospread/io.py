from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Tuple

from .ingest import PhotoResource

TABLE_SUFFIXES = {".csv", ".txt"}


def resolve_input_paths(candidates: Iterable[Path]) -> List[Path]:
    resolved: List[Path] = []
    for candidate in candidates:
        expanded = candidate.expanduser()
        if not expanded.exists():
            raise SystemExit(f"Input file not found: {expanded}")
        if expanded.is_dir():
            raise SystemExit(f"Expected a file but got a directory: {expanded}")
        resolved.append(expanded)
    return resolved


def is_table(path: Path) -> bool:
    return path.suffix.lower() in TABLE_SUFFIXES


def group_inputs(paths: Iterable[Path]) -> List[Tuple[str, List[Path]]]:
    """Group consecutive inputs by kind, keeping the order they were given."""
    groups: List[Tuple[str, List[Path]]] = []
    for path in paths:
        kind = "table" if is_table(path) else "photos"
        if kind == "photos" and groups and groups[-1][0] == "photos":
            groups[-1][1].append(path)
        else:
            groups.append((kind, [path]))
    return groups


def load_photo_resources(paths: Iterable[Path]) -> Iterable[PhotoResource]:
    for path in paths:
        yield PhotoResource.from_path(path)
