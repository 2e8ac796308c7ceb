from __future__ import annotations

import importlib
from collections.abc import Iterable
from types import ModuleType
from typing import Any

from lintel.rules.base import BaseRule

_MODULE_EXPORTS = ("lintel_rules", "RULES")


class PluginLoadError(RuntimeError):
    """Raised when a configured plugin cannot be imported or doesn't expose rules."""


def load_plugin_rules(plugin_specs: Iterable[str]) -> list[BaseRule]:
    """
    Import every `module` / `module:attribute` spec and collect its rules.

    A module spec must export `lintel_rules` (usually a function) or `RULES`.
    An export may be a rule, a list/tuple of rules, or a callable returning
    either of those.
    """

    rules: list[BaseRule] = []
    for raw_spec in plugin_specs:
        spec = raw_spec.strip()
        if spec:
            rules.extend(_coerce(_resolve_export(spec), spec=spec))
    return rules


def _resolve_export(spec: str) -> Any:
    module_name, sep, attr = spec.partition(":")
    try:
        module = importlib.import_module(module_name)
    except Exception as exc:  # noqa: BLE001
        raise PluginLoadError(f"{spec}: cannot import {module_name!r}: {exc}") from exc

    if not sep:
        return module
    try:
        return getattr(module, attr)
    except AttributeError as exc:
        raise PluginLoadError(f"{spec}: module {module_name!r} has no attribute {attr!r}") from exc


def _coerce(obj: Any, *, spec: str) -> list[BaseRule]:
    if isinstance(obj, ModuleType):
        for name in _MODULE_EXPORTS:
            if hasattr(obj, name):
                return _coerce(getattr(obj, name), spec=spec)
        raise PluginLoadError(f"{spec}: plugin module must define `lintel_rules()` or `RULES`.")

    if isinstance(obj, BaseRule):
        return [obj]

    if isinstance(obj, list | tuple):
        bad = [type(item).__name__ for item in obj if not isinstance(item, BaseRule)]
        if bad:
            raise PluginLoadError(f"{spec}: plugin rules must be BaseRule instances, got: {', '.join(bad)}")
        return list(obj)

    if callable(obj):
        return _coerce(obj(), spec=spec)

    raise PluginLoadError(f"{spec}: unsupported plugin export type: {type(obj).__name__}")
