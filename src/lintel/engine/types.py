from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import Literal

Severity = Literal["info", "warn", "error"]
Scope = Literal["line", "next-line", "from-here"]

# Upper bound used for suppression intervals that are never re-enabled.
MAX_LINE = 2**31 - 1


class LintelError(Exception):
    """Base class for errors that abort a lint pass."""


class ParseError(LintelError):
    def __init__(self, filename: str, message: str, *, line: int | None = None) -> None:
        self.filename = filename
        self.line = line
        where = f"{filename}:{line}" if line is not None else filename
        super().__init__(f"{where}: {message}")


class RuleError(LintelError):
    """Raised when a rule fails while being applied to a file."""

    def __init__(self, rule_name: str, filename: str) -> None:
        self.rule_name = rule_name
        self.filename = filename
        super().__init__(f"rule {rule_name!r} failed on {filename}")


@dataclass(frozen=True, slots=True)
class Position:
    filename: str
    line: int  # 1-based
    column: int  # 1-based, in bytes


@dataclass(frozen=True, slots=True)
class Range:
    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Directive:
    rule_names: frozenset[str]
    enabled: bool
    scope: Scope
    line: int


@dataclass(frozen=True, slots=True)
class ToggleEvent:
    enabled: bool
    line: int


@dataclass(frozen=True, slots=True)
class SuppressionInterval:
    rule_name: str
    start: int
    end: int = MAX_LINE

    def touches(self, start_line: int, end_line: int) -> bool:
        # Only the endpoints are tested: a span that encloses the whole
        # interval without either end inside it is not considered touching.
        return self.start <= start_line <= self.end or self.start <= end_line <= self.end


@dataclass(frozen=True, slots=True)
class Diagnostic:
    message: str
    rule_name: str = ""
    severity: Severity = "warn"
    category: str = ""
    confidence: float = 1.0
    node: ast.AST | None = None
    range: Range | None = None
    suggestion: str | None = None
