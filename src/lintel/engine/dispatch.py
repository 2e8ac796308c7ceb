from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import replace

from lintel.config import EMPTY_RULE_CONFIG, RuleConfig
from lintel.engine.source import SourceFile
from lintel.engine.types import Diagnostic, RuleError, SuppressionInterval
from lintel.rules.base import BaseRule
from lintel.suppressions import DEFAULT_MARKER, disabled_intervals, is_suppressed

logger = logging.getLogger(__name__)


def lint(
    file: SourceFile,
    rules: Sequence[BaseRule],
    config: Mapping[str, RuleConfig],
    *,
    marker: str = DEFAULT_MARKER,
) -> Iterator[Diagnostic]:
    """
    Run `rules` over `file` and yield the diagnostics that are not suppressed.

    Rules run one after another in the given order and each rule's surviving
    diagnostics are yielded as soon as that rule finishes. Any exception raised
    by a rule aborts the pass as a `RuleError`; rules are trusted code, so no
    attempt is made to keep going with the remaining rules.
    """

    intervals = disabled_intervals(file, [rule.name for rule in rules], marker=marker)
    if intervals:
        logger.debug("%s: suppression intervals for %d rule(s)", file.name, len(intervals))

    for rule in rules:
        rule_config = config.get(rule.name, EMPTY_RULE_CONFIG)
        try:
            raw = list(rule.apply(file, rule_config))
        except Exception as exc:
            raise RuleError(rule.name, file.name) from exc

        emitted = 0
        for diagnostic in raw:
            diagnostic = _stamp(file, rule, rule_config, diagnostic)
            if _is_filtered(intervals, diagnostic):
                continue
            emitted += 1
            yield diagnostic
        logger.debug("%s: %s reported %d of %d diagnostic(s)", file.name, rule.name, emitted, len(raw))


def _stamp(file: SourceFile, rule: BaseRule, config: RuleConfig, diagnostic: Diagnostic) -> Diagnostic:
    changes: dict[str, object] = {}
    if not diagnostic.rule_name:
        changes["rule_name"] = rule.name
    if diagnostic.node is not None:
        changes["range"] = file.node_range(diagnostic.node)
    if config.severity is not None and config.severity != diagnostic.severity:
        changes["severity"] = config.severity
    if not changes:
        return diagnostic
    return replace(diagnostic, **changes)


def _is_filtered(intervals: Mapping[str, Sequence[SuppressionInterval]], diagnostic: Diagnostic) -> bool:
    if diagnostic.range is None:
        return False
    return is_suppressed(
        intervals,
        diagnostic.rule_name,
        start_line=diagnostic.range.start.line,
        end_line=diagnostic.range.end.line,
    )
