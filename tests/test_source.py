from __future__ import annotations

import ast

import pytest

from lintel.engine.source import SourceFile
from lintel.engine.types import ParseError, Position


def test_parse_error_is_raised_before_anything_else() -> None:
    with pytest.raises(ParseError) as excinfo:
        SourceFile("broken.py", b"def (:\n")
    assert excinfo.value.filename == "broken.py"
    assert excinfo.value.line == 1
    assert "broken.py:1" in str(excinfo.value)


def test_null_bytes_are_a_parse_error() -> None:
    with pytest.raises(ParseError):
        SourceFile("nul.py", b"x = 1\x00\n")


def test_position_resolves_byte_offsets() -> None:
    file = SourceFile("pos.py", b"ab = 1\ncd = 2\n")
    assert file.position(0) == Position(filename="pos.py", line=1, column=1)
    assert file.position(7) == Position(filename="pos.py", line=2, column=1)
    assert file.position(8) == Position(filename="pos.py", line=2, column=2)


def test_node_range_spans_multiple_lines() -> None:
    file = SourceFile("call.py", b"x = foo(1,\n    2)\n")
    call = next(n for n in ast.walk(file.tree) if isinstance(n, ast.Call))
    rng = file.node_range(call)
    assert (rng.start.line, rng.start.column) == (1, 5)
    assert (rng.end.line, rng.end.column) == (2, 7)
    assert rng.start.filename == "call.py"


def test_comments_skip_strings_and_strip_marker() -> None:
    file = SourceFile("c.py", b'x = "# not a comment"  # real one\n#tight\n')
    assert [(c.text, c.line) for c in file.comments] == [("real one\n", 1), ("tight\n", 2)]


def test_render_round_trips_an_expression() -> None:
    file = SourceFile("r.py", b"value = (1 +   2) * 3\n")
    assign = file.tree.body[0]
    assert isinstance(assign, ast.Assign)
    assert file.render(assign.value) == "(1 + 2) * 3"


@pytest.mark.parametrize(
    ("expr", "expected"),
    [
        ("3", "int"),
        ("-1.5", "float"),
        ("'x'", "str"),
        ("b'x'", "bytes"),
        ("(1, 2)", "tuple"),
        ("name", None),
        ("call()", None),
    ],
)
def test_literal_type(expr: str, expected: str | None) -> None:
    file = SourceFile("lit.py", f"value = {expr}\n".encode())
    assign = file.tree.body[0]
    assert isinstance(assign, ast.Assign)
    assert file.literal_type(assign.value) == expected


def test_is_main_detects_guard() -> None:
    assert SourceFile("m.py", b"def main():\n    pass\n\nif __name__ == '__main__':\n    main()\n").is_main()
    assert not SourceFile("lib.py", b"def main():\n    pass\n").is_main()
