from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping, Sequence
from functools import lru_cache

from lintel.engine.source import SourceFile
from lintel.engine.types import Directive, Scope, SuppressionInterval, ToggleEvent

DEFAULT_MARKER = "lintel"


@lru_cache(maxsize=8)
def directive_pattern(marker: str) -> re.Pattern[str]:
    return re.compile(rf"^\s*{re.escape(marker)}:(enable|disable)(?:-(line|next-line))?(:|\s|$)")


def scan_directives(
    file: SourceFile,
    rule_names: Sequence[str],
    *,
    marker: str = DEFAULT_MARKER,
) -> Iterator[Directive]:
    """
    Yield the directives found in `file`'s comments, in file order.

    Supported comment forms (keywords are case-sensitive):
    - `lintel:disable` / `lintel:enable` (from this line until toggled again)
    - `lintel:disable-line` / `lintel:enable-line` (this line only)
    - `lintel:disable-next-line` / `lintel:enable-next-line` (the following line only)

    Any of them may be followed by `:name-a,name-b` to target specific rules.
    Without names the directive targets every name in `rule_names`.
    """

    pattern = directive_pattern(marker)
    every_rule = frozenset(rule_names)
    for comment in file.comments:
        match = pattern.match(comment.text)
        if match is None:
            continue
        names = _parse_names(comment.text[match.end() :])
        yield Directive(
            rule_names=frozenset(names) if names else every_rule,
            enabled=match.group(1) == "enable",
            scope=_scope(match.group(2)),
            line=comment.line,
        )


def _scope(modifier: str | None) -> Scope:
    if modifier == "line":
        return "line"
    if modifier == "next-line":
        return "next-line"
    return "from-here"


def _parse_names(value: str) -> list[str]:
    names = []
    for raw in value.split(","):
        name = raw.strip("\n")
        if name:
            names.append(name)
    return names


def expand_toggles(directives: Iterable[Directive]) -> dict[str, list[ToggleEvent]]:
    """
    Turn directives into one ordered toggle history per rule.

    Every rule starts enabled and an event is only recorded when it flips the
    rule's state, so histories always alternate disable/enable.
    """

    toggles: dict[str, list[ToggleEvent]] = {}

    def toggle(name: str, enabled: bool, line: int) -> None:
        history = toggles.setdefault(name, [])
        current = history[-1].enabled if history else True
        if current != enabled:
            history.append(ToggleEvent(enabled=enabled, line=line))

    for directive in directives:
        # Iterate in sorted order so histories don't depend on set ordering.
        for name in sorted(directive.rule_names):
            if directive.scope == "from-here":
                toggle(name, directive.enabled, directive.line)
                continue
            line = directive.line if directive.scope == "line" else directive.line + 1
            history = toggles.get(name)
            prior = history[-1].enabled if history else True
            toggle(name, directive.enabled, line)
            toggle(name, prior, line)

    return toggles


def build_intervals(toggles: Mapping[str, Sequence[ToggleEvent]]) -> dict[str, tuple[SuppressionInterval, ...]]:
    """Pair each rule's toggles into closed intervals; a trailing disable runs to end of file."""

    result: dict[str, tuple[SuppressionInterval, ...]] = {}
    for name, events in toggles.items():
        intervals: list[SuppressionInterval] = []
        for idx in range(0, len(events), 2):
            start = events[idx].line
            if idx + 1 < len(events):
                intervals.append(SuppressionInterval(rule_name=name, start=start, end=events[idx + 1].line))
            else:
                intervals.append(SuppressionInterval(rule_name=name, start=start))
        if intervals:
            result[name] = tuple(intervals)
    return result


def disabled_intervals(
    file: SourceFile,
    rule_names: Sequence[str],
    *,
    marker: str = DEFAULT_MARKER,
) -> dict[str, tuple[SuppressionInterval, ...]]:
    return build_intervals(expand_toggles(scan_directives(file, rule_names, marker=marker)))


def is_suppressed(
    intervals: Mapping[str, Sequence[SuppressionInterval]],
    rule_name: str,
    *,
    start_line: int,
    end_line: int,
) -> bool:
    for interval in intervals.get(rule_name, ()):
        if interval.touches(start_line, end_line):
            return True
    return False
