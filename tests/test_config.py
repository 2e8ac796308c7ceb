from __future__ import annotations

from pathlib import Path

import pytest

from lintel.config import (
    ConfigError,
    LintelConfig,
    RuleConfig,
    RulesConfig,
    compute_enabled_rule_names,
    load_config,
    path_is_ignored,
    unknown_rule_names,
)
from lintel.suppressions import DEFAULT_MARKER


def _write(tmp_path: Path, body: str) -> Path:
    (tmp_path / "pyproject.toml").write_text(body.lstrip(), encoding="utf-8")
    return tmp_path


def test_defaults_without_pyproject(tmp_path: Path) -> None:
    assert load_config(tmp_path) == LintelConfig()


def test_defaults_without_tool_table(tmp_path: Path) -> None:
    _write(tmp_path, '[project]\nname = "x"\n')
    assert load_config(tmp_path) == LintelConfig()


def test_default_marker_matches_directive_scanner(tmp_path: Path) -> None:
    assert load_config(tmp_path).marker == DEFAULT_MARKER
    _write(tmp_path, "[tool.lintel]\n")
    assert load_config(tmp_path).marker == DEFAULT_MARKER


def test_full_table_is_parsed(tmp_path: Path) -> None:
    _write(
        tmp_path,
        """
[tool.lintel]
marker = "nolint"
plugins = ["my_rules:RULES"]
ignore = ["build/", "*_pb2.py"]

[tool.lintel.rules]
enable = ["line-length-limit", "bare-except"]
disable = ["bare-except"]

[tool.lintel.rules.line-length-limit]
severity = "warning"
arguments = { max = 120 }
""",
    )
    config = load_config(tmp_path)
    assert config.marker == "nolint"
    assert config.plugins == ("my_rules:RULES",)
    assert config.ignore == ("build/", "*_pb2.py")
    assert config.rules.enable == ("line-length-limit", "bare-except")
    assert config.rules.disable == ("bare-except",)
    rule_cfg = config.rule_config("line-length-limit")
    assert rule_cfg.severity == "warn"
    assert rule_cfg.arguments["max"] == 120
    assert config.rule_config("empty-block") == RuleConfig()


@pytest.mark.parametrize(
    "body",
    [
        '[tool.lintel]\nmarker = "two words"\n',
        "[tool.lintel]\nplugins = 3\n",
        '[tool.lintel.rules]\nenable = 1\n',
        '[tool.lintel.rules]\ndisable = ["Not_A_Name"]\n',
        '[tool.lintel.rules]\nline-length-limit = "loud"\n',
        '[tool.lintel.rules.bare-except]\nseverity = "fatal"\n',
        '[tool.lintel.rules.bare-except]\narguments = 3\n',
        "[tool.lintel\n",
    ],
)
def test_invalid_tables_raise(tmp_path: Path, body: str) -> None:
    _write(tmp_path, body)
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_enable_string_accepts_all_and_comma_lists(tmp_path: Path) -> None:
    _write(tmp_path, '[tool.lintel.rules]\nenable = "bare-except, empty-block"\n')
    assert load_config(tmp_path).rules.enable == ("bare-except", "empty-block")
    _write(tmp_path, '[tool.lintel.rules]\nenable = "ALL"\n')
    assert load_config(tmp_path).rules.enable == "all"


def test_compute_enabled_rule_names_keeps_available_order() -> None:
    available = ["a-rule", "b-rule", "c-rule"]
    assert compute_enabled_rule_names(LintelConfig(), available=available) == available

    config = LintelConfig(rules=RulesConfig(enable=("c-rule", "a-rule", "zzz"), disable=("a-rule",)))
    assert compute_enabled_rule_names(config, available=available) == ["c-rule"]


def test_unknown_rule_names_are_reported() -> None:
    config = LintelConfig(rules=RulesConfig(enable=("a-rule", "ghost"), disable=("phantom",)))
    assert unknown_rule_names(config, available=["a-rule"]) == ["ghost", "phantom"]


def test_path_is_ignored_patterns(tmp_path: Path) -> None:
    gen = tmp_path / "src" / "pkg" / "api_pb2.py"
    built = tmp_path / "build" / "lib" / "mod.py"
    kept = tmp_path / "src" / "pkg" / "core.py"
    for p in (gen, built, kept):
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text("x = 1\n", encoding="utf-8")

    patterns = ["build/", "*_pb2.py", "./docs/**/*.py"]
    assert path_is_ignored(gen, project_root=tmp_path, ignore_patterns=patterns)
    assert path_is_ignored(built, project_root=tmp_path, ignore_patterns=patterns)
    assert not path_is_ignored(kept, project_root=tmp_path, ignore_patterns=patterns)
    assert not path_is_ignored(Path("/elsewhere/x.py"), project_root=tmp_path, ignore_patterns=patterns)
