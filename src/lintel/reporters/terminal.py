from __future__ import annotations

from collections import defaultdict

from rich.console import Console
from rich.text import Text

from lintel.audit import CheckResult, Finding

_SEVERITY_ICON = {"error": "✖", "warn": "⚠", "info": "ℹ"}
_SEVERITY_STYLE = {"error": "bold red", "warn": "yellow", "info": "dim"}


def render_terminal(result: CheckResult, *, console: Console, show_details: bool = True) -> None:
    if show_details:
        by_file: dict[str, list[Finding]] = defaultdict(list)
        for finding in result.findings:
            by_file[finding.path].append(finding)

        for path in sorted(by_file):
            console.print(Text(path, style="bold underline"))
            for finding in by_file[path]:
                _print_finding(console, finding)
            console.print()

    _print_summary(result, console=console)


def _print_finding(console: Console, finding: Finding) -> None:
    d = finding.diagnostic
    icon = _SEVERITY_ICON.get(d.severity, "•")
    style = _SEVERITY_STYLE.get(d.severity, "")

    line = Text()
    line.append(f"  {icon} ", style=style)
    if d.range is not None:
        line.append(f"{d.range.start.line}:{d.range.start.column}", style="dim")
        line.append("  ")
    line.append(d.message)
    line.append(f"  {d.rule_name}", style="bold")
    console.print(line)

    if d.suggestion:
        console.print(f"     → {d.suggestion}", style="dim")


def _print_summary(result: CheckResult, *, console: Console) -> None:
    total = len(result.findings)
    errors = result.error_count
    files = len(result.files)
    if total == 0:
        console.print(Text(f"No problems found in {files} file(s).", style="green"))
        return
    console.print(
        Text(
            f"{total} problem(s) ({errors} error(s)) in {files} file(s), {len(result.rules)} rule(s) enabled.",
            style="bold red" if errors else "bold yellow",
        )
    )
