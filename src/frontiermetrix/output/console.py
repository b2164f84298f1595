"""Rich Console factory and theme for frontiermetrix output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

from frontiermetrix.domain.styling import RISK_STYLES
from frontiermetrix.domain.types import RiskLevel

_RISK_STYLES: dict[str, str] = {str(level): f"fmx.risk.{level}" for level in RiskLevel}

FMX_THEME = Theme(
    {
        "fmx.ok": "bold green",
        "fmx.error": "bold red",
        "fmx.warning": "bold yellow",
        "fmx.op": "bold cyan",
        "fmx.key": "dim",
        "fmx.id": "bold blue",
        "fmx.instant": "cyan",
        "fmx.class": "magenta",
        "fmx.number": "bold",
        **{f"fmx.risk.{level}": style.color for level, style in RISK_STYLES.items()},
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=FMX_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_risk(risk: str) -> str:
    """Return the Rich style name for a risk level value."""
    return _RISK_STYLES.get(risk, "")
