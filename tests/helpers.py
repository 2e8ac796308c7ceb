from __future__ import annotations

from collections.abc import Sequence

from lintel.config import RuleConfig
from lintel.engine.source import SourceFile
from lintel.engine.types import Diagnostic, Position, Range
from lintel.rules.base import BaseRule, RuleMeta


def make_source(directives: dict[int, str] | None = None, *, length: int = 20, name: str = "example.py") -> SourceFile:
    """Build a file of `length` simple statements with comments placed on the given lines."""

    directives = directives or {}
    lines = [directives.get(idx, f"x{idx} = {idx}") for idx in range(1, length + 1)]
    return SourceFile(name, ("\n".join(lines) + "\n").encode("utf-8"))


class SpanRule(BaseRule):
    """Reports one diagnostic per `(start_line, end_line)` span."""

    def __init__(self, name: str, spans: Sequence[tuple[int, int]], *, stamp_name: bool = True) -> None:
        self.meta = RuleMeta(
            name=name,
            title=name,
            description="Test rule.",
            default_severity="warn",
            category="test",
        )
        self.spans = tuple(spans)
        self.stamp_name = stamp_name

    def apply(self, file: SourceFile, config: RuleConfig) -> list[Diagnostic]:
        out = []
        for start, end in self.spans:
            out.append(
                Diagnostic(
                    message=f"{self.name} {start}-{end}",
                    rule_name=self.name if self.stamp_name else "",
                    range=Range(
                        start=Position(filename=file.name, line=start, column=1),
                        end=Position(filename=file.name, line=end, column=1),
                    ),
                )
            )
        return out


def lines_of(diagnostics: Sequence[Diagnostic]) -> list[tuple[str, int]]:
    out = []
    for d in diagnostics:
        assert d.range is not None
        out.append((d.rule_name, d.range.start.line))
    return out
