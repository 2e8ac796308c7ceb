from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from lintel.config import LintelConfig, load_config, path_is_ignored

DEFAULT_SKIP_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".mypy_cache",
    ".pytest_cache",
    ".tox",
    ".venv",
    "venv",
    "node_modules",
    "dist",
    "build",
    "__pycache__",
}
SOURCE_SUFFIXES = {".py", ".pyi"}

LINTEL_WORKERS_ENV = "LINTEL_WORKERS"
DEFAULT_MAX_WORKERS = 32


@dataclass(frozen=True, slots=True)
class ScanTarget:
    project_root: Path
    scan_paths: tuple[Path, ...]
    config: LintelConfig


def resolve_worker_count(
    raw_value: str | None,
    *,
    default: int | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> int:
    """
    Turn a `LINTEL_WORKERS`-style value into a thread count in `1..max_workers`.

    Missing, blank, `auto`, non-numeric and non-positive values select the
    default (twice the CPU count unless given).
    """

    fallback = max(1, default if default is not None else 2 * (os.cpu_count() or 1))
    text = (raw_value or "").strip().lower()
    requested = int(text) if text.removeprefix("-").isdecimal() else 0
    return min(requested if requested > 0 else fallback, max_workers)


def worker_count_from_env(*, default: int | None = None) -> int:
    return resolve_worker_count(os.environ.get(LINTEL_WORKERS_ENV), default=default)


def prepare_target(scan_paths: Sequence[Path]) -> ScanTarget:
    """
    Resolve the project root from the first path and load its configuration.

    The project root is the closest directory holding a `pyproject.toml`,
    falling back to the path itself (or its parent for files).
    """

    resolved = tuple(p.resolve() for p in scan_paths) or (Path(".").resolve(),)
    project_root = _detect_project_root(resolved[0])
    return ScanTarget(project_root=project_root, scan_paths=resolved, config=load_config(project_root))


def discover_files(target: ScanTarget) -> list[Path]:
    root = target.project_root
    ignore_patterns = target.config.ignore
    files: set[Path] = set()

    for scan_path in target.scan_paths:
        if scan_path.is_file():
            # Explicitly named files are linted whatever their suffix.
            if not path_is_ignored(scan_path, project_root=root, ignore_patterns=ignore_patterns):
                files.add(scan_path)
            continue

        for dirpath, dirnames, filenames in os.walk(scan_path, topdown=True):
            dirnames[:] = [d for d in dirnames if d not in DEFAULT_SKIP_DIRS]
            base = Path(dirpath)
            for filename in filenames:
                path = base / filename
                if path.suffix.lower() not in SOURCE_SUFFIXES:
                    continue
                if path_is_ignored(path, project_root=root, ignore_patterns=ignore_patterns):
                    continue
                files.add(path)

    return sorted(files)


def display_name(path: Path, root: Path) -> str:
    """POSIX-style path relative to `root` when possible, for diagnostics and reports."""

    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except (OSError, ValueError):
        return path.as_posix()


def _detect_project_root(start: Path) -> Path:
    base = start if start.is_dir() else start.parent
    for candidate in (base, *base.parents):
        if (candidate / "pyproject.toml").exists():
            return candidate
    return base
