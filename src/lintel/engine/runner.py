from __future__ import annotations

import logging
import queue
from collections.abc import Callable, Iterator, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import cast

from lintel.config import RuleConfig
from lintel.engine.dispatch import lint
from lintel.engine.source import SourceFile
from lintel.engine.types import Diagnostic
from lintel.rules.base import BaseRule
from lintel.scanner import display_name
from lintel.suppressions import DEFAULT_MARKER

logger = logging.getLogger(__name__)

_DONE = object()


def lint_path(
    path: Path,
    rules: Sequence[BaseRule],
    config: Mapping[str, RuleConfig],
    *,
    project_root: Path,
    marker: str = DEFAULT_MARKER,
) -> Iterator[Diagnostic]:
    file = SourceFile(display_name(path, project_root), path.read_bytes())
    yield from lint(file, rules, config, marker=marker)


def lint_paths(
    paths: Sequence[Path],
    rules: Sequence[BaseRule],
    config: Mapping[str, RuleConfig],
    *,
    project_root: Path,
    marker: str = DEFAULT_MARKER,
    workers: int = 1,
    on_file_done: Callable[[Path], None] | None = None,
) -> Iterator[tuple[Path, Diagnostic]]:
    """
    Lint every path and yield `(path, diagnostic)` pairs as they are produced.

    With more than one worker, each file gets its own pass on a thread pool and
    all passes feed a single queue drained by the caller, so diagnostics of
    different files interleave. The first failure (parse error, rule error or
    unreadable file) is re-raised here and pending files are cancelled.
    """

    logger.debug("linting %d file(s) with %d rule(s)", len(paths), len(rules))

    if workers <= 1 or len(paths) <= 1:
        for path in paths:
            for diagnostic in lint_path(path, rules, config, project_root=project_root, marker=marker):
                yield path, diagnostic
            if on_file_done is not None:
                on_file_done(path)
        return

    results: queue.Queue[tuple[Path, object]] = queue.Queue()

    def produce(path: Path) -> None:
        try:
            for diagnostic in lint_path(path, rules, config, project_root=project_root, marker=marker):
                results.put((path, diagnostic))
        except BaseException as exc:  # noqa: BLE001 - re-raised by the consumer below
            results.put((path, exc))
            return
        results.put((path, _DONE))

    max_workers = min(max(1, workers), len(paths))
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(produce, path) for path in paths]
        remaining = len(futures)
        while remaining:
            path, item = results.get()
            if isinstance(item, BaseException):
                executor.shutdown(wait=False, cancel_futures=True)
                raise item
            if item is _DONE:
                remaining -= 1
                if on_file_done is not None:
                    on_file_done(path)
                continue
            yield path, cast(Diagnostic, item)
