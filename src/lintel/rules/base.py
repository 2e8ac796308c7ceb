from __future__ import annotations

import ast
from abc import ABC, abstractmethod
from dataclasses import dataclass

from lintel.config import RuleConfig
from lintel.engine.source import SourceFile
from lintel.engine.types import Diagnostic, Position, Range, Severity


@dataclass(frozen=True, slots=True)
class RuleMeta:
    name: str
    title: str
    description: str
    default_severity: Severity
    category: str


class BaseRule(ABC):
    """
    A single analysis unit.

    Rules must not keep per-file state or mutate the `SourceFile`; one instance
    is shared by every pass, possibly from several threads at once.
    """

    meta: RuleMeta

    @property
    def name(self) -> str:
        return self.meta.name

    @abstractmethod
    def apply(self, file: SourceFile, config: RuleConfig) -> list[Diagnostic]: ...

    def _diagnostic(
        self,
        *,
        message: str,
        node: ast.AST | None = None,
        range: Range | None = None,
        suggestion: str | None = None,
        confidence: float = 1.0,
    ) -> Diagnostic:
        return Diagnostic(
            rule_name=self.meta.name,
            message=message,
            severity=self.meta.default_severity,
            category=self.meta.category,
            confidence=confidence,
            node=node,
            range=range,
            suggestion=suggestion,
        )


def line_range(file: SourceFile, *, line: int, col: int = 1, end_col: int | None = None) -> Range:
    return Range(
        start=Position(filename=file.name, line=line, column=col),
        end=Position(filename=file.name, line=line, column=end_col if end_col is not None else col),
    )
