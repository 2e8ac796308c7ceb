from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from lintel.config import compute_enabled_rule_names, unknown_rule_names
from lintel.engine.runner import lint_paths
from lintel.engine.types import Diagnostic
from lintel.rules.base import BaseRule
from lintel.rules.plugins import load_plugin_rules
from lintel.rules.registry import all_rules, set_extra_rules
from lintel.scanner import ScanTarget, discover_files, display_name, prepare_target, worker_count_from_env

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Finding:
    path: str
    diagnostic: Diagnostic


@dataclass(frozen=True, slots=True)
class CheckResult:
    target: ScanTarget
    files: tuple[Path, ...]
    rules: tuple[str, ...]
    findings: tuple[Finding, ...]

    @property
    def error_count(self) -> int:
        return sum(1 for f in self.findings if f.diagnostic.severity == "error")


def resolve_rules(target: ScanTarget) -> list[BaseRule]:
    """
    Load configured plugins and return the rules enabled for this target.

    Raises `PluginLoadError` when a plugin cannot be loaded.
    """

    set_extra_rules(load_plugin_rules(target.config.plugins))
    available = all_rules()
    names = [r.name for r in available]
    for name in unknown_rule_names(target.config, available=names):
        logger.warning("unknown rule name in configuration: %s", name)
    enabled = set(compute_enabled_rule_names(target.config, available=names))
    return [r for r in available if r.name in enabled]


def check_paths(
    scan_paths: Sequence[Path],
    *,
    workers: int | None = None,
    on_finding: Callable[[Finding], None] | None = None,
) -> CheckResult:
    target = prepare_target(scan_paths)
    return check_files(target, files=discover_files(target), workers=workers, on_finding=on_finding)


def check_files(
    target: ScanTarget,
    *,
    files: list[Path],
    workers: int | None = None,
    on_finding: Callable[[Finding], None] | None = None,
) -> CheckResult:
    rules = resolve_rules(target)
    effective_workers = workers if workers is not None else worker_count_from_env()
    logger.debug("discovered %d file(s), %d rule(s) enabled", len(files), len(rules))

    findings: list[Finding] = []
    stream = lint_paths(
        files,
        rules,
        target.config.rules.per_rule,
        project_root=target.project_root,
        marker=target.config.marker,
        workers=effective_workers,
    )
    for path, diagnostic in stream:
        finding = Finding(path=display_name(path, target.project_root), diagnostic=diagnostic)
        findings.append(finding)
        if on_finding is not None:
            on_finding(finding)

    findings.sort(key=_sort_key)
    return CheckResult(
        target=target,
        files=tuple(files),
        rules=tuple(r.name for r in rules),
        findings=tuple(findings),
    )


def _sort_key(finding: Finding) -> tuple[str, int, int, str]:
    rng = finding.diagnostic.range
    line = rng.start.line if rng is not None else 0
    col = rng.start.column if rng is not None else 0
    return finding.path, line, col, finding.diagnostic.rule_name
