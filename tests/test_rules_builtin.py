from __future__ import annotations

from types import MappingProxyType

from lintel.config import RuleConfig
from lintel.engine.source import SourceFile
from lintel.rules.builtin import (
    ArgumentLimit,
    BareExcept,
    EmptyBlock,
    LineLengthLimit,
    RedundantLiteralCast,
    builtin_rules,
)


def _file(text: str) -> SourceFile:
    return SourceFile("example.py", text.encode("utf-8"))


def _args(**kwargs: object) -> RuleConfig:
    return RuleConfig(arguments=MappingProxyType(dict(kwargs)))


def test_argument_limit_respects_configured_max() -> None:
    file = _file("def f(a, b, c):\n    return a\n\ndef g(a, /, b, *, c, d):\n    return a\n")
    assert ArgumentLimit().apply(file, RuleConfig()) == []
    messages = [d.message for d in ArgumentLimit().apply(file, _args(max=3))]
    assert messages == ["maximum number of arguments per function exceeded; max 3 but got 4"]


def test_bare_except_flags_only_untyped_handlers() -> None:
    file = _file("try:\n    x = 1\nexcept ValueError:\n    x = 2\nexcept:\n    x = 3\n")
    (diagnostic,) = BareExcept().apply(file, RuleConfig())
    assert diagnostic.rule_name == "bare-except"
    assert diagnostic.node is not None
    assert getattr(diagnostic.node, "lineno") == 5


def test_empty_block_ignores_function_bodies() -> None:
    file = _file(
        "def stub():\n    pass\n\nfor i in range(3):\n    pass\n\nif i:\n    pass\nelse:\n    i = 0\n"
    )
    lines = sorted(getattr(d.node, "lineno") for d in EmptyBlock().apply(file, RuleConfig()))
    assert lines == [5, 8]


def test_line_length_limit_reports_range_past_the_limit() -> None:
    file = _file("x = 1\ny = '" + "a" * 20 + "'\n")
    (diagnostic,) = LineLengthLimit().apply(file, _args(max=10))
    assert diagnostic.range is not None
    assert diagnostic.range.start.line == 2
    assert diagnostic.range.start.column == 11
    assert diagnostic.message == "line is 26 characters, out of limit 10"


def test_redundant_literal_cast_uses_literal_evaluation() -> None:
    file = _file("a = int(3)\nb = str('x')\nc = int('3')\nd = int(a)\ne = float(1.5, )\nf = int(base=2)\n")
    messages = [d.message for d in RedundantLiteralCast().apply(file, RuleConfig())]
    assert messages == [
        "redundant int() call: 3 is already int",
        "redundant str() call: 'x' is already str",
        "redundant float() call: 1.5 is already float",
    ]


def test_builtin_rule_names_are_unique_kebab_case() -> None:
    names = [r.name for r in builtin_rules()]
    assert len(names) == len(set(names))
    assert all(name == name.lower() and " " not in name for name in names)
