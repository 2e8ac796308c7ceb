from __future__ import annotations

import json
from typing import Any

from lintel import __version__
from lintel.audit import CheckResult, Finding
from lintel.engine.types import Position

REPORT_SCHEMA_VERSION = 1


def render_json(result: CheckResult) -> str:
    payload = {
        "schema_version": REPORT_SCHEMA_VERSION,
        "tool": {"name": "lintel", "version": __version__},
        "files_checked": len(result.files),
        "rules": list(result.rules),
        "diagnostics": [_finding_to_dict(f) for f in result.findings],
    }
    return json.dumps(payload, indent=2, sort_keys=False)


def _finding_to_dict(finding: Finding) -> dict[str, Any]:
    d = finding.diagnostic
    rng = None
    if d.range is not None:
        rng = {"start": _position_to_dict(d.range.start), "end": _position_to_dict(d.range.end)}
    return {
        "path": finding.path,
        "rule_name": d.rule_name,
        "severity": d.severity,
        "category": d.category,
        "confidence": d.confidence,
        "message": d.message,
        "suggestion": d.suggestion,
        "range": rng,
    }


def _position_to_dict(pos: Position) -> dict[str, int]:
    return {"line": pos.line, "column": pos.column}
