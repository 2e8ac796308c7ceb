from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from functools import lru_cache
from types import MappingProxyType

from lintel.rules.base import BaseRule, RuleMeta
from lintel.rules.builtin import builtin_rules as _builtin_rules

_RULE_NAME_RE = re.compile(r"^[a-z][a-z0-9-]*$")
_EXTRA_RULES: dict[str, BaseRule] = {}
_EXTRA_GENERATION = 0


class RuleRegistryError(RuntimeError):
    """Raised when rule names are malformed or collide."""


def _check_name(name: str) -> None:
    if not _RULE_NAME_RE.match(name):
        raise RuleRegistryError(f"Rule name must match {_RULE_NAME_RE.pattern}: {name!r}")


@lru_cache(maxsize=1)
def builtin_rules() -> tuple[BaseRule, ...]:
    by_name: dict[str, BaseRule] = {}
    for rule in _builtin_rules():
        _check_name(rule.name)
        if rule.name in by_name:  # pragma: no cover
            raise RuleRegistryError(f"Duplicate rule name: {rule.name}")
        by_name[rule.name] = rule
    return tuple(by_name[k] for k in sorted(by_name))


def set_extra_rules(rules: Iterable[BaseRule]) -> None:
    """
    Register extra (plugin) rules for this process.

    Lintel runs as a CLI, so process-wide registration is enough and lets
    `lintel rules` list plugin rule metadata next to the built-ins.
    """

    global _EXTRA_RULES, _EXTRA_GENERATION  # noqa: PLW0603

    by_name: dict[str, BaseRule] = {}
    builtin_names = {r.name for r in builtin_rules()}
    for rule in rules:
        _check_name(rule.name)
        if rule.name in builtin_names:
            raise RuleRegistryError(f"Plugin rule name conflicts with built-in rule: {rule.name}")
        if rule.name in by_name:
            raise RuleRegistryError(f"Duplicate plugin rule name: {rule.name}")
        by_name[rule.name] = rule

    _EXTRA_RULES = by_name
    _EXTRA_GENERATION += 1


def all_rules() -> tuple[BaseRule, ...]:
    return _all_rules(_EXTRA_GENERATION)


@lru_cache(maxsize=4)
def _all_rules(extra_generation: int) -> tuple[BaseRule, ...]:
    _ = extra_generation
    by_name = {r.name: r for r in builtin_rules()}
    by_name.update(_EXTRA_RULES)
    return tuple(by_name[k] for k in sorted(by_name))


def rule_meta_by_name() -> Mapping[str, RuleMeta]:
    return MappingProxyType({r.name: r.meta for r in all_rules()})
