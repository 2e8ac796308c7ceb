from __future__ import annotations

import fnmatch
import re
import tomllib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, cast

from lintel.engine.types import Severity
from lintel.suppressions import DEFAULT_MARKER


class ConfigError(ValueError):
    """Raised when a Lintel configuration table is invalid."""


RuleName = str

_RULE_NAME_RE = re.compile(r"^[a-z][a-z0-9-]*$")
_MARKER_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_.-]*$")


def _validate_str_list(value: Any, *, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or any(not isinstance(v, str) for v in value):
        raise ConfigError(f"`{field_name}` must be a list of strings.")
    return tuple(v.strip() for v in value if v.strip())


def _validate_severity(value: Any, *, field_name: str) -> Severity:
    if not isinstance(value, str):
        raise ConfigError(f"`{field_name}` must be a string.")
    normalized = value.strip().lower()
    if normalized == "warning":
        normalized = "warn"
    if normalized not in {"info", "warn", "error"}:
        raise ConfigError(f"`{field_name}` must be one of: info, warn, error.")
    return cast(Severity, normalized)


def _validate_rule_name(value: str, *, field_name: str) -> RuleName:
    name = value.strip()
    if not _RULE_NAME_RE.match(name):
        raise ConfigError(f"`{field_name}` contains an invalid rule name: {value!r}. Names look like line-length-limit.")
    return name


@dataclass(frozen=True, slots=True)
class RuleConfig:
    """Per-rule settings handed to `BaseRule.apply`."""

    severity: Severity | None = None
    arguments: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


def int_argument(config: RuleConfig, key: str, default: int) -> int:
    value = config.arguments.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"rule argument `{key}` must be an integer, got {value!r}.")
    return value


EMPTY_RULE_CONFIG = RuleConfig()


@dataclass(frozen=True, slots=True)
class RulesConfig:
    enable: str | tuple[RuleName, ...] = "all"
    disable: tuple[RuleName, ...] = ()
    per_rule: Mapping[RuleName, RuleConfig] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True, slots=True)
class LintelConfig:
    marker: str = DEFAULT_MARKER
    rules: RulesConfig = field(default_factory=RulesConfig)
    ignore: tuple[str, ...] = ()
    plugins: tuple[str, ...] = ()

    def rule_config(self, name: RuleName) -> RuleConfig:
        return self.rules.per_rule.get(name, EMPTY_RULE_CONFIG)


def load_config(project_dir: Path | str = ".") -> LintelConfig:
    """
    Load Lintel configuration from `pyproject.toml` within `project_dir`.

    If no file / no `[tool.lintel]` table exists, returns defaults.
    """

    pyproject_path = Path(project_dir) / "pyproject.toml"
    if not pyproject_path.exists():
        return LintelConfig()

    try:
        data = tomllib.loads(pyproject_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {pyproject_path}: {exc}") from exc

    tool_table = data.get("tool", {})
    if not isinstance(tool_table, dict):
        return LintelConfig()

    lintel_table = tool_table.get("lintel", {})
    if not isinstance(lintel_table, dict) or not lintel_table:
        return LintelConfig()

    return parse_config_table(lintel_table)


def parse_config_table(table: Mapping[str, Any]) -> LintelConfig:
    marker = table.get("marker", DEFAULT_MARKER)
    if not isinstance(marker, str) or not _MARKER_RE.match(marker.strip()):
        raise ConfigError("`tool.lintel.marker` must be a word such as 'lintel'.")

    return LintelConfig(
        marker=marker.strip(),
        rules=_parse_rules_config(table.get("rules", {})),
        ignore=_validate_str_list(table.get("ignore", []), field_name="tool.lintel.ignore"),
        plugins=_validate_str_list(table.get("plugins", []), field_name="tool.lintel.plugins"),
    )


def _parse_rules_config(value: Any) -> RulesConfig:
    if value is None:
        return RulesConfig()
    if not isinstance(value, dict):
        raise ConfigError("`tool.lintel.rules` must be a table.")

    enable: str | tuple[RuleName, ...]
    enable_raw = value.get("enable", "all")
    if isinstance(enable_raw, str):
        stripped = enable_raw.strip()
        if stripped.lower() in {"", "all"}:
            enable = "all"
        else:
            enable = tuple(
                _validate_rule_name(token, field_name="tool.lintel.rules.enable")
                for token in stripped.split(",")
                if token.strip()
            )
    elif isinstance(enable_raw, list) and all(isinstance(v, str) for v in enable_raw):
        enable = tuple(_validate_rule_name(v, field_name="tool.lintel.rules.enable") for v in enable_raw)
    else:
        raise ConfigError("`tool.lintel.rules.enable` must be a string or a list of strings.")

    disable = tuple(
        _validate_rule_name(v, field_name="tool.lintel.rules.disable")
        for v in _validate_str_list(value.get("disable", []), field_name="tool.lintel.rules.disable")
    )

    per_rule: dict[RuleName, RuleConfig] = {}
    for key, sub in value.items():
        if key in {"enable", "disable"}:
            continue
        field_name = f"tool.lintel.rules.{key}"
        if not isinstance(sub, dict):
            raise ConfigError(f"`{field_name}` must be a table.")
        name = _validate_rule_name(str(key), field_name=field_name)
        severity = sub.get("severity")
        arguments = sub.get("arguments", {})
        if not isinstance(arguments, dict):
            raise ConfigError(f"`{field_name}.arguments` must be a table.")
        per_rule[name] = RuleConfig(
            severity=_validate_severity(severity, field_name=f"{field_name}.severity") if severity is not None else None,
            arguments=MappingProxyType(dict(arguments)),
        )

    return RulesConfig(enable=enable, disable=disable, per_rule=MappingProxyType(per_rule))


def compute_enabled_rule_names(config: LintelConfig, *, available: Iterable[RuleName]) -> list[RuleName]:
    """
    Resolve `rules.enable` + `rules.disable` against the available rule names.

    The result keeps the order of `available`. Unknown names are ignored.
    """

    available_list = list(available)
    enable = config.rules.enable
    if isinstance(enable, str):
        enabled = set(available_list)
    else:
        enabled = set(enable)
    enabled.difference_update(config.rules.disable)
    return [name for name in available_list if name in enabled]


def unknown_rule_names(config: LintelConfig, *, available: Iterable[RuleName]) -> list[RuleName]:
    known = set(available)
    mentioned: set[RuleName] = set(config.rules.disable) | set(config.rules.per_rule)
    if not isinstance(config.rules.enable, str):
        mentioned.update(config.rules.enable)
    return sorted(mentioned - known)


def path_is_ignored(path: Path, *, project_root: Path, ignore_patterns: Iterable[str]) -> bool:
    """
    Match `path`, relative to `project_root`, against `ignore` patterns.

    `dir/` patterns ignore everything below that directory, slash-free globs
    also match the basename, and other globs match the whole relative path.
    Paths outside the project are never ignored.
    """

    try:
        relative = path.resolve().relative_to(project_root.resolve())
    except (ValueError, OSError, RuntimeError):
        return False
    rel_posix = relative.as_posix()

    for pattern in _normalized_patterns(ignore_patterns):
        if pattern.endswith("/"):
            matched = rel_posix.startswith(pattern)
        else:
            matched = fnmatch.fnmatch(rel_posix, pattern) or (
                "/" not in pattern and fnmatch.fnmatch(relative.name, pattern)
            )
        if matched:
            return True
    return False


def _normalized_patterns(patterns: Iterable[str]) -> Iterable[str]:
    for raw in patterns:
        pattern = raw.strip().replace("\\", "/").removeprefix("./")
        if pattern:
            yield pattern
