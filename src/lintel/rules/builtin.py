from __future__ import annotations

import ast
from dataclasses import dataclass

from lintel.config import RuleConfig, int_argument
from lintel.engine.source import SourceFile
from lintel.engine.types import Diagnostic
from lintel.rules.base import BaseRule, RuleMeta, line_range

_FUNCTION_NODES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda)
_LITERAL_CASTS = frozenset({"bool", "bytes", "complex", "float", "int", "str"})


@dataclass(frozen=True, slots=True)
class ArgumentLimit(BaseRule):
    meta = RuleMeta(
        name="argument-limit",
        title="Too many arguments",
        description="Flags functions that declare more parameters than the configured `max` (default 8).",
        default_severity="warn",
        category="code-style",
    )

    def apply(self, file: SourceFile, config: RuleConfig) -> list[Diagnostic]:
        limit = int_argument(config, "max", 8)
        out: list[Diagnostic] = []
        for node in ast.walk(file.tree):
            if not isinstance(node, _FUNCTION_NODES):
                continue
            args = node.args
            count = len(args.posonlyargs) + len(args.args) + len(args.kwonlyargs)
            if count <= limit:
                continue
            out.append(
                self._diagnostic(
                    message=f"maximum number of arguments per function exceeded; max {limit} but got {count}",
                    node=node,
                    suggestion="Group related parameters into a dataclass or split the function.",
                )
            )
        return out


@dataclass(frozen=True, slots=True)
class BareExcept(BaseRule):
    meta = RuleMeta(
        name="bare-except",
        title="Bare except clause",
        description="`except:` also catches SystemExit and KeyboardInterrupt.",
        default_severity="warn",
        category="errors",
    )

    def apply(self, file: SourceFile, config: RuleConfig) -> list[Diagnostic]:
        return [
            self._diagnostic(
                message="bare `except:` clause",
                node=node,
                suggestion="Catch `Exception` (or something narrower) instead.",
            )
            for node in ast.walk(file.tree)
            if isinstance(node, ast.ExceptHandler) and node.type is None
        ]


@dataclass(frozen=True, slots=True)
class EmptyBlock(BaseRule):
    meta = RuleMeta(
        name="empty-block",
        title="Empty block",
        description="Loops, conditionals and context managers whose body is only `pass`.",
        default_severity="info",
        category="logic",
    )

    def apply(self, file: SourceFile, config: RuleConfig) -> list[Diagnostic]:
        out: list[Diagnostic] = []
        for node in ast.walk(file.tree):
            if not isinstance(node, ast.For | ast.AsyncFor | ast.While | ast.If | ast.With | ast.AsyncWith):
                continue
            if len(node.body) == 1 and isinstance(node.body[0], ast.Pass):
                out.append(self._diagnostic(message="this block is empty, you can remove it", node=node.body[0]))
        return out


@dataclass(frozen=True, slots=True)
class LineLengthLimit(BaseRule):
    meta = RuleMeta(
        name="line-length-limit",
        title="Line too long",
        description="Flags lines longer than the configured `max` characters (default 100).",
        default_severity="warn",
        category="code-style",
    )

    def apply(self, file: SourceFile, config: RuleConfig) -> list[Diagnostic]:
        limit = int_argument(config, "max", 100)
        text = file.content.decode("utf-8", errors="replace")
        out: list[Diagnostic] = []
        for idx, line in enumerate(text.split("\n"), start=1):
            length = len(line.rstrip("\r"))
            if length <= limit:
                continue
            out.append(
                self._diagnostic(
                    message=f"line is {length} characters, out of limit {limit}",
                    range=line_range(file, line=idx, col=limit + 1, end_col=length + 1),
                )
            )
        return out


@dataclass(frozen=True, slots=True)
class RedundantLiteralCast(BaseRule):
    meta = RuleMeta(
        name="redundant-literal-cast",
        title="Redundant conversion of a literal",
        description="Calls like `int(3)` or `str('x')` convert a literal to the type it already has.",
        default_severity="info",
        category="style",
    )

    def apply(self, file: SourceFile, config: RuleConfig) -> list[Diagnostic]:
        out: list[Diagnostic] = []
        for node in ast.walk(file.tree):
            if not isinstance(node, ast.Call) or node.keywords or len(node.args) != 1:
                continue
            func = node.func
            if not isinstance(func, ast.Name) or func.id not in _LITERAL_CASTS:
                continue
            if file.literal_type(node.args[0]) != func.id:
                continue
            out.append(
                self._diagnostic(
                    message=f"redundant {func.id}() call: {file.render(node.args[0])} is already {func.id}",
                    node=node,
                    suggestion=f"Use {file.render(node.args[0])} directly.",
                )
            )
        return out


def builtin_rules() -> list[BaseRule]:
    return [
        ArgumentLimit(),
        BareExcept(),
        EmptyBlock(),
        LineLengthLimit(),
        RedundantLiteralCast(),
    ]
