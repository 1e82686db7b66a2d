from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Iterable, TextIO

import numpy as np

from funcplot_core.config import PlotterConfig, discover_config, load_config
from funcplot_core.session import PlotSession
from funcplot_core.viewport import parse_bound
from funcplot_plot.chart import LineChart
from funcplot_plot.export import save_png

from .commands import HELP_TEXT, apply_control_command, parse_control_command
from .theme import chart_style, validate_theme_tokens

LOGGER = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    try:
        config = _resolve_config(args.config)
        chart = _build_chart(config, args)
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    session = _session_from_args(config, args)

    if args.command == "plot":
        return _cmd_plot(session, chart, args.out)
    if args.command == "points":
        return _cmd_points(session)
    return run_interactive(session, chart, sys.stdin, sys.stdout)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="funcplot", description="Plot a function of x.")
    parser.add_argument("--config", type=Path, default=None, help="Path to funcplot.toml (default: ./funcplot.toml if present).")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    plot = sub.add_parser("plot", help="Render an expression to a PNG file.")
    _add_plot_arguments(plot)
    plot.add_argument("--out", type=Path, required=True, help="Output .png path.")
    plot.add_argument("--width", type=int, default=None)
    plot.add_argument("--height", type=int, default=None)

    points = sub.add_parser("points", help="Print sampled points as JSON.")
    _add_plot_arguments(points)

    interactive = sub.add_parser("interactive", help="Read control commands from stdin.")
    _add_plot_arguments(interactive)
    interactive.add_argument("--width", type=int, default=None)
    interactive.add_argument("--height", type=int, default=None)
    return parser


def _add_plot_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("expression", nargs="?", default=None, help="Expression in x, e.g. 'x^3 - 2*x + 1'.")
    parser.add_argument("--x-min", default=None, help="Domain start (non-numeric falls back to the default).")
    parser.add_argument("--x-max", default=None, help="Domain end (non-numeric falls back to the default).")
    parser.add_argument("--y-min", default=None, help="Fixed y axis minimum; implies manual y scale.")
    parser.add_argument("--y-max", default=None, help="Fixed y axis maximum; implies manual y scale.")


def _resolve_config(path: Path | None) -> PlotterConfig:
    if path is None:
        path = discover_config(Path.cwd())
    return load_config(path)


def _session_from_args(config: PlotterConfig, args: argparse.Namespace) -> PlotSession:
    manual_y = args.y_min is not None or args.y_max is not None
    return PlotSession(
        config=config,
        expression=args.expression,
        x_min=parse_bound(args.x_min, config.x_min),
        x_max=parse_bound(args.x_max, config.x_max),
        y_min=parse_bound(args.y_min, None),
        y_max=parse_bound(args.y_max, None),
        auto_y_scale=not manual_y,
    )


def _build_chart(config: PlotterConfig, args: argparse.Namespace) -> LineChart:
    tokens = validate_theme_tokens(config.theme)
    width = getattr(args, "width", None) or config.width
    height = getattr(args, "height", None) or config.height
    return LineChart(width=width, height=height, style=chart_style(tokens), title=config.title)


def render_session(session: PlotSession, chart: LineChart) -> np.ndarray:
    return chart.render(
        session.points,
        y_domain=session.y_domain,
        x_fallback=(session.config.x_min, session.config.x_max),
        error=session.error,
    )


def describe_session(session: PlotSession) -> str:
    if session.error:
        return f"error: {session.error}"
    lo, hi = session.y_domain
    return (
        f"ok: {len(session.points)} points for {session.expression!r} "
        f"over [{session.x_min:g}, {session.x_max:g}], y: {lo}..{hi}"
    )


def _cmd_plot(session: PlotSession, chart: LineChart, out: Path) -> int:
    try:
        path = save_png(render_session(session, chart), out)
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    if session.error:
        print(f"error: {session.error}", file=sys.stderr)
        return 1
    print(f"wrote {path} ({len(session.points)} points)")
    return 0


def _cmd_points(session: PlotSession) -> int:
    if session.error:
        print(f"error: {session.error}", file=sys.stderr)
        return 1
    json.dump([p.as_dict() for p in session.points], sys.stdout)
    sys.stdout.write("\n")
    return 0


def run_interactive(session: PlotSession, chart: LineChart, lines: Iterable[str], out: TextIO) -> int:
    """Drive a session from text commands until `quit` or end of input."""

    out.write(describe_session(session) + "\n")
    for line in lines:
        command = parse_control_command(line)
        if command is None:
            if line.strip():
                out.write(f"unknown command: {line.strip()} (try `help`)\n")
            continue
        if command.kind == "quit":
            break
        if command.kind == "help":
            out.write(HELP_TEXT + "\n")
            continue
        if command.kind == "points":
            out.write(json.dumps([p.as_dict() for p in session.points]) + "\n")
            continue
        if command.kind == "save":
            try:
                path = save_png(render_session(session, chart), command.argument)
            except (OSError, ValueError) as exc:
                LOGGER.error("save failed: %s", exc)
                out.write(f"save failed: {exc}\n")
                continue
            out.write(f"wrote {path}\n")
            continue
        apply_control_command(session, command)
        out.write(describe_session(session) + "\n")
    return 0
