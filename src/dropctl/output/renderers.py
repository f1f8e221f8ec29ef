"""Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from dropctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from dropctl.services.result import ServiceResult

# Fields shown on the status block, in display order.
_FIELD_KEYS = ("site", "hook_status", "simplesamlphp_status")


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        _status_line(console, result)
    else:
        _render_error(result, console, verbose=verbose)

    for key in _FIELD_KEYS:
        if key in result.data:
            _field(console, key, result.data[key])

    steps = result.data.get("steps")
    if isinstance(steps, dict):
        console.print(_steps_table(steps))

    permissions = result.data.get("permissions")
    if isinstance(permissions, dict):
        _field(console, "directories", len(permissions.get("directories", [])))
        _field(console, "files", len(permissions.get("files", [])))
        if verbose:
            for path in [*permissions.get("directories", []), *permissions.get("files", [])]:
                console.print(Text(f"    {path}", style="drop.path"))

    if verbose:
        _render_meta(console, result)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="drop.ok")
    op = Text(f"  {result.op}", style="drop.op")
    console.print(label, op, end="")
    console.print()


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="drop.error")
    op = Text(f"  {result.op}", style="drop.op")
    console.print(label, op, Text(" — "), msg)
    _field(console, "status", result.status)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="drop.key")
    console.print(k, Text(str(value)), sep="", end="")
    console.print()


def _steps_table(steps: dict[str, Any]) -> Table:
    """One row per pipeline step: completed, failed, or skipped."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Step", no_wrap=True)
    table.add_column("Result")

    for name in steps.get("completed", []):
        table.add_row(name, Text("ok", style="drop.step.ok"))
    failed = steps.get("failed")
    if failed:
        status = steps.get("status")
        table.add_row(failed, Text(f"failed ({status})", style="drop.step.failed"))
    for name in steps.get("skipped", []):
        table.add_row(name, Text("skipped", style="drop.step.skipped"))
    return table


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render the span tree: timing, pipeline position, failing statuses in red."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 10000:
        style = "bold red"
    elif duration > 1000:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>10.2f}ms[/{style}]  {name}"
    position = span_data.get("position")
    if position:
        line += f"  ({position})"
    status = span_data.get("status")
    if status:
        line += f"  [drop.step.failed]status {status}[/drop.step.failed]"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)
