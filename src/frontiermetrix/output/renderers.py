"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from frontiermetrix.output.console import create_console, get_output, style_for_risk

if TYPE_CHECKING:
    from rich.console import Console

    from frontiermetrix.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "filtered_view":
        rows = [*result.data.get("signals", []), *result.data.get("flows", [])]
        return "\n".join(str(row["id"]) for row in rows)
    if result.op == "replay":
        return "\n".join(str(frame["instant"]) for frame in result.data.get("frames", []))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="fmx.ok")
    op = Text(f"  {result.op}", style="fmx.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="fmx.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="fmx.id")
    elif key.endswith("instant") or key in ("since", "until"):
        v = Text(str(value), style="fmx.instant")
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        v = Text(str(value), style="fmx.number")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _fields(console: Console, data: dict[str, Any], keys: tuple[str, ...]) -> None:
    for key in keys:
        if key in data:
            _field(console, key, data[key])


def _bounds_field(console: Console, data: dict[str, Any]) -> None:
    bounds = data.get("bounds")
    if bounds:
        _field(console, "bounds", f"{bounds['lower']} .. {bounds['upper']}")


def _risk_text(risk: str) -> Text:
    return Text(risk, style=style_for_risk(risk))


def _render_warnings(console: Console, result: ServiceResult) -> None:
    if not result.warnings:
        return
    console.print()
    console.print(Text("  warnings:", style="fmx.warning"))
    for warning in result.warnings:
        console.print(f"    {warning}")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="fmx.error")
    op = Text(f"  {result.op}", style="fmx.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Arc renderer ──────────────────────────────────────────────────────


def _render_arc(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render build_arc results: summary fields plus the point list."""
    d = result.data
    _status_line(console, result)
    _fields(
        console,
        d,
        ("distance_km", "segments", "height_scale", "magnitude", "width", "opacity"),
    )

    points = d.get("points", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Latitude", justify="right")
    table.add_column("Longitude", justify="right")
    for index, point in enumerate(points):
        table.add_row(str(index), f"{point['latitude']:.4f}", f"{point['longitude']:.4f}")
    console.print()
    console.print(table)


# ── Dataset renderers ─────────────────────────────────────────────────


def _render_load(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render load/refresh results."""
    d = result.data
    _status_line(console, result)
    _fields(
        console,
        d,
        ("signal_count", "flow_count", "visible_signals", "visible_flows", "dropped"),
    )
    _bounds_field(console, d)
    if verbose:
        _render_warnings(console, result)


def _signal_table(signals: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    table = Table(title="Signals", show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="fmx.id", no_wrap=True)
    table.add_column("Name")
    table.add_column("Class", style="fmx.class")
    table.add_column("Risk")
    table.add_column("Country")
    table.add_column("Value", justify="right")
    table.add_column("Timestamp", style="fmx.instant")
    if verbose:
        table.add_column("Lat", justify="right", style="dim")
        table.add_column("Lon", justify="right", style="dim")

    for s in signals:
        row: list[str | Text] = [
            str(s["id"]),
            str(s["name"]),
            str(s["type"]),
            _risk_text(str(s["risk"])),
            str(s["country"]),
            f"{s['value']:,.2f}",
            str(s["ts"]),
        ]
        if verbose:
            row.extend([f"{s['latitude']:.2f}", f"{s['longitude']:.2f}"])
        table.add_row(*row)
    return table


def _flow_table(flows: list[dict[str, Any]]) -> Table:
    table = Table(title="Flows", show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="fmx.id", no_wrap=True)
    table.add_column("Class", style="fmx.class")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Magnitude", justify="right")
    table.add_column("Distance km", justify="right")
    table.add_column("Timestamp", style="fmx.instant")

    for f in flows:
        table.add_row(
            str(f["id"]),
            str(f["classTag"]),
            f"{f['fromLat']:.2f}, {f['fromLon']:.2f}",
            f"{f['toLat']:.2f}, {f['toLon']:.2f}",
            f"{f['magnitude']:.2f}",
            f"{f['distance_km']:,.0f}",
            str(f["ts"]),
        )
    return table


def _render_filtered_view(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    """Render the filtered view as signal and flow tables."""
    d = result.data
    _status_line(console, result)
    filt = d.get("filter", {})
    if filt:
        _field(console, "classes", ", ".join(filt.get("asset_classes", [])))
        _field(console, "risk_min", filt.get("risk_min", ""))
        window = filt.get("date_window", {})
        if window:
            _field(console, "window", f"{window['lower']} .. {window['upper']}")
    _field(console, "signals", f"{d.get('signal_count', 0)} of {d.get('total_signals', 0)}")
    _field(console, "flows", f"{d.get('flow_count', 0)} of {d.get('total_flows', 0)}")

    signals = d.get("signals", [])
    flows = d.get("flows", [])
    if signals:
        console.print()
        console.print(_signal_table(signals, verbose=verbose))
    if flows:
        console.print()
        console.print(_flow_table(flows))
    if verbose:
        _render_warnings(console, result)


# ── Playback renderer ─────────────────────────────────────────────────


def _render_replay(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render replay results: one row per committed timeline frame."""
    d = result.data
    _status_line(console, result)
    _bounds_field(console, d)
    _fields(console, d, ("ticks_run", "final_instant", "is_playing"))

    frames = d.get("frames", [])
    if not frames:
        return
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Instant", style="fmx.instant", no_wrap=True)
    table.add_column("Progress", justify="right")
    table.add_column("Signals", justify="right")
    table.add_column("Flows", justify="right")
    if verbose:
        table.add_column("Visible IDs", style="fmx.id")
    for frame in frames:
        row = [
            str(frame["instant"]),
            f"{frame['progress']:.0%}",
            str(frame["signal_count"]),
            str(frame["flow_count"]),
        ]
        if verbose:
            row.append(", ".join(frame.get("ids", [])))
        table.add_row(*row)
    console.print()
    console.print(table)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "build_arc": _render_arc,
    "load": _render_load,
    "refresh": _render_load,
    "filtered_view": _render_filtered_view,
    "replay": _render_replay,
}
