from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from funcplot_core.session import PlotSession


CommandKind = Literal[
    "expr",
    "xmin",
    "xmax",
    "ymin",
    "ymax",
    "auto",
    "plot",
    "zoom_in",
    "zoom_out",
    "reset",
    "points",
    "save",
    "help",
    "quit",
]

HELP_TEXT = "\n".join(
    (
        "Supported: +, -, *, /, ^ (power), sin, cos, tan, sqrt, abs, log, ln, exp, pi, e",
        "Examples: x^2, sin(x), x^3 - 2*x + 1, sqrt(x), e^x",
        "Commands: expr <f(x)> | xmin <n> | xmax <n> | ymin <n|auto> | ymax <n|auto> | auto on|off",
        "          plot | zoom in | zoom out | reset | points | save <file.png> | help | quit",
    )
)

_NO_ARGUMENT = {"plot", "reset", "points", "help", "quit"}
_NEEDS_ARGUMENT = {"expr", "xmin", "xmax", "ymin", "ymax", "auto", "save"}
_ALIASES = {"f": "expr", "exit": "quit", "q": "quit", "?": "help"}
_TRUE = {"on", "true", "yes", "1"}
_FALSE = {"off", "false", "no", "0"}


@dataclass(frozen=True)
class ControlCommand:
    """One parsed line of the text control surface."""

    kind: CommandKind
    argument: str = ""


def parse_control_command(line: str) -> ControlCommand | None:
    """Parse `verb [argument]`; returns None for blank or unrecognized input."""

    raw = line.strip()
    if not raw:
        return None
    verb, _, rest = raw.partition(" ")
    verb = _ALIASES.get(verb.lower(), verb.lower())
    rest = rest.strip()

    if verb == "zoom":
        direction = rest.lower()
        if direction == "in":
            return ControlCommand(kind="zoom_in")
        if direction == "out":
            return ControlCommand(kind="zoom_out")
        return None
    if verb in _NO_ARGUMENT:
        return ControlCommand(kind=verb) if not rest else None  # type: ignore[arg-type]
    if verb in _NEEDS_ARGUMENT:
        if not rest:
            return None
        if verb == "auto" and rest.lower() not in _TRUE | _FALSE:
            return None
        return ControlCommand(kind=verb, argument=rest)  # type: ignore[arg-type]
    return None


def apply_control_command(session: PlotSession, command: ControlCommand) -> bool:
    """Apply a state-changing command; False for commands the caller must handle."""

    kind = command.kind
    if kind == "expr":
        session.set_expression(command.argument)
    elif kind == "xmin":
        session.set_x_min(command.argument)
    elif kind == "xmax":
        session.set_x_max(command.argument)
    elif kind == "ymin":
        session.set_y_min(command.argument)
    elif kind == "ymax":
        session.set_y_max(command.argument)
    elif kind == "auto":
        session.set_auto_y_scale(command.argument.lower() in _TRUE)
    elif kind == "plot":
        session.recompute()
    elif kind == "zoom_in":
        session.zoom_in()
    elif kind == "zoom_out":
        session.zoom_out()
    elif kind == "reset":
        session.reset()
    else:
        return False
    return True
