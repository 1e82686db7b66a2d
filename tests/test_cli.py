from __future__ import annotations

import contextlib
import io
import json
from pathlib import Path
import tempfile
import unittest
from unittest import mock

from funcplot_core.session import PlotSession
from funcplot_plot import LineChart
from funcplot_ui.cli import describe_session, main, render_session, run_interactive


def _run(argv: list[str]) -> tuple[int, str, str]:
    stdout, stderr = io.StringIO(), io.StringIO()
    with mock.patch("funcplot_ui.cli.discover_config", return_value=None):
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            code = main(argv)
    return code, stdout.getvalue(), stderr.getvalue()


class CliTests(unittest.TestCase):
    def test_points_prints_json(self) -> None:
        code, out, _ = _run(["points", "x^2", "--x-min", "0", "--x-max", "1"])
        self.assertEqual(code, 0)
        points = json.loads(out)
        self.assertEqual(len(points), 501)
        self.assertEqual(points[0], {"x": 0.0, "y": 0.0})
        self.assertEqual(points[-1], {"x": 1.0, "y": 1.0})

    def test_points_reports_invalid_expression(self) -> None:
        code, out, err = _run(["points", "foo(x)"])
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("Invalid function", err)

    def test_plot_writes_png(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out_path = Path(tmp) / "plot.png"
            code, out, _ = _run(["plot", "sin(x)", "--out", str(out_path), "--width", "320", "--height", "200"])
            self.assertEqual(code, 0)
            self.assertTrue(out_path.exists())
            self.assertIn("501 points", out)

    def test_plot_with_error_still_writes_banner_png(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out_path = Path(tmp) / "plot.png"
            code, _, err = _run(["plot", "sqrt(x)", "--x-max", "-1", "--out", str(out_path)])
            self.assertEqual(code, 1)
            self.assertTrue(out_path.exists())
            self.assertIn("No valid points to plot", err)

    def test_plot_rejects_reversed_manual_y_range(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            code, _, err = _run(["plot", "x", "--y-min", "5", "--y-max", "1", "--out", str(Path(tmp) / "p.png")])
        self.assertEqual(code, 1)
        self.assertIn("y axis min must be < y axis max", err)

    def test_plot_reports_overflowing_y_range(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out_path = Path(tmp) / "p.png"
            code, _, err = _run(["plot", "x*1.7e308", "--x-min", "-1", "--x-max", "1", "--out", str(out_path)])
            self.assertFalse(out_path.exists())
        self.assertEqual(code, 1)
        self.assertIn("y range too large to plot", err)

    def test_points_reports_deeply_nested_expression(self) -> None:
        code, _, err = _run(["points", "(" * 5000 + "x" + ")" * 5000])
        self.assertEqual(code, 1)
        self.assertIn("expression is nested too deeply", err)

    def test_config_errors_exit_2(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config = Path(tmp) / "funcplot.toml"
            config.write_text('[theme]\nline = "blue"\n', encoding="utf-8")
            code, _, err = _run(["--config", str(config), "points", "x"])
        self.assertEqual(code, 2)
        self.assertIn("hex color", err)


class InteractiveTests(unittest.TestCase):
    def test_session_script(self) -> None:
        session = PlotSession()
        chart = LineChart(width=320, height=200)
        out = io.StringIO()
        with tempfile.TemporaryDirectory() as tmp:
            saved = Path(tmp) / "shot.png"
            lines = [
                "expr sin(x)",
                "zoom in",
                "bogus",
                "",
                "help",
                f"save {saved}",
                "save shot.gif",
                "quit",
                "expr x",
            ]
            code = run_interactive(session, chart, lines, out)
            self.assertTrue(saved.exists())
        text = out.getvalue()
        self.assertEqual(code, 0)
        self.assertTrue(text.startswith("ok: 501 points for 'x^2'"))
        self.assertIn("unknown command: bogus (try `help`)", text)
        self.assertIn("Supported:", text)
        self.assertIn(f"wrote {saved}", text)
        self.assertIn("save failed:", text)
        self.assertEqual(session.expression, "sin(x)")
        self.assertAlmostEqual(session.domain.width, 7.0)

    def test_loop_survives_pathological_input(self) -> None:
        session = PlotSession()
        out = io.StringIO()
        with tempfile.TemporaryDirectory() as tmp:
            lines = [
                "expr " + "-" * 2000 + "x",
                "expr " + "(" * 5000 + "x" + ")" * 5000,
                "expr " + "+".join(["x"] * 3000),
                "expr x*1.7e308",
                "xmin -1",
                "xmax 1",
                f"save {Path(tmp) / 'huge.png'}",
                "expr x",
            ]
            code = run_interactive(session, LineChart(width=320, height=200), lines, out)
        text = out.getvalue()
        self.assertEqual(code, 0)
        self.assertIn("error: Invalid function: expression is nested too deeply", text)
        self.assertIn("save failed: y range too large to plot", text)
        self.assertEqual(session.expression, "x")
        self.assertEqual(session.status, "ok")

    def test_points_command_dumps_current_points(self) -> None:
        session = PlotSession(expression="x", x_min=0.0, x_max=1.0)
        out = io.StringIO()
        run_interactive(session, LineChart(width=320, height=200), ["points"], out)
        dumped = json.loads(out.getvalue().splitlines()[1])
        self.assertEqual(len(dumped), 501)

    def test_describe_and_render_error_state(self) -> None:
        session = PlotSession(expression="ln(x)", x_min=-5.0, x_max=-1.0)
        self.assertEqual(describe_session(session), "error: No valid points to plot")
        frame = render_session(session, LineChart(width=320, height=200))
        self.assertEqual(frame.shape, (200, 320, 4))


if __name__ == "__main__":
    unittest.main()
