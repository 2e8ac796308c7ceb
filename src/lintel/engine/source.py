from __future__ import annotations

import ast
import io
import tokenize
from bisect import bisect_right
from dataclasses import dataclass

from lintel.engine.types import ParseError, Position, Range


@dataclass(frozen=True, slots=True)
class Comment:
    text: str
    line: int
    column: int


class SourceFile:
    """
    A parsed Python module plus the bits rules need to report positions.

    Construction parses `content` once; the instance is read-only afterwards so
    it can be shared by every rule of a pass.
    """

    __slots__ = ("name", "content", "tree", "comments", "_line_starts")

    def __init__(self, name: str, content: bytes) -> None:
        self.name = name
        self.content = content
        try:
            self.tree: ast.Module = ast.parse(content, filename=name, type_comments=False)
        except SyntaxError as exc:
            raise ParseError(name, exc.msg or "invalid syntax", line=exc.lineno) from exc
        except ValueError as exc:
            raise ParseError(name, str(exc)) from exc
        self.comments: tuple[Comment, ...] = _collect_comments(name, content)
        self._line_starts = _line_starts(content)

    def __repr__(self) -> str:
        return f"SourceFile({self.name!r})"

    def position(self, offset: int) -> Position:
        """Resolve a byte offset into a 1-based line/column position."""

        offset = max(0, min(offset, len(self.content)))
        idx = bisect_right(self._line_starts, offset) - 1
        return Position(filename=self.name, line=idx + 1, column=offset - self._line_starts[idx] + 1)

    def node_range(self, node: ast.AST) -> Range:
        line = getattr(node, "lineno", 1)
        col = getattr(node, "col_offset", 0)
        end_line = getattr(node, "end_lineno", None) or line
        end_col = getattr(node, "end_col_offset", None)
        if end_col is None:
            end_col = col
        return Range(
            start=Position(filename=self.name, line=line, column=col + 1),
            end=Position(filename=self.name, line=end_line, column=end_col + 1),
        )

    def render(self, node: ast.AST) -> str:
        return ast.unparse(node)

    def literal_type(self, expr: ast.expr) -> str | None:
        """
        Return the builtin type name `expr` evaluates to on its own.

        The expression is rendered and re-evaluated outside of its context, so
        only literal expressions can be determined. Anything else yields None.
        """

        try:
            value = ast.literal_eval(self.render(expr))
        except (ValueError, TypeError, SyntaxError, MemoryError, RecursionError):
            return None
        return type(value).__name__

    def is_main(self) -> bool:
        for stmt in self.tree.body:
            if not isinstance(stmt, ast.If):
                continue
            test = stmt.test
            if (
                isinstance(test, ast.Compare)
                and isinstance(test.left, ast.Name)
                and test.left.id == "__name__"
                and len(test.ops) == 1
                and isinstance(test.ops[0], ast.Eq)
                and isinstance(test.comparators[0], ast.Constant)
                and test.comparators[0].value == "__main__"
            ):
                return True
        return False


def _collect_comments(name: str, content: bytes) -> tuple[Comment, ...]:
    comments: list[Comment] = []
    try:
        for tok in tokenize.tokenize(io.BytesIO(content).readline):
            if tok.type != tokenize.COMMENT:
                continue
            row, col = tok.start
            comments.append(Comment(text=_comment_text(tok.string), line=row, column=col + 1))
    except (tokenize.TokenError, SyntaxError) as exc:
        # ast.parse accepted the module, so this only happens on exotic input.
        raise ParseError(name, f"cannot tokenize: {exc}") from exc
    return tuple(comments)


def _comment_text(raw: str) -> str:
    text = raw[1:] if raw.startswith("#") else raw
    if text.startswith(" "):
        text = text[1:]
    return text.rstrip() + "\n"


def _line_starts(content: bytes) -> list[int]:
    starts = [0]
    idx = content.find(b"\n")
    while idx != -1:
        starts.append(idx + 1)
        idx = content.find(b"\n", idx + 1)
    return starts
