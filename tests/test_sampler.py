from __future__ import annotations

import math
import unittest

import numpy as np

from funcplot_core.errors import InvalidDomainError, NoValidPointsError
from funcplot_core.expression import compile_expression
from funcplot_core.sampler import PlotRequest, compute_plot, sample_expression, sample_grid


class SampleGridTests(unittest.TestCase):
    def test_grid_includes_both_endpoints(self) -> None:
        grid = sample_grid(0.0, 1.0, 4)
        self.assertTrue(np.allclose(grid, [0.0, 0.25, 0.5, 0.75, 1.0]))
        self.assertEqual(grid[0], 0.0)
        self.assertEqual(grid[-1], 1.0)

    def test_default_grid_has_501_samples(self) -> None:
        self.assertEqual(sample_grid(-5, 5).size, 501)

    def test_reversed_or_empty_domain_is_rejected(self) -> None:
        with self.assertRaises(InvalidDomainError):
            sample_grid(5, -5)
        with self.assertRaises(InvalidDomainError):
            sample_grid(1, 1)

    def test_non_finite_domain_is_rejected(self) -> None:
        with self.assertRaises(InvalidDomainError):
            sample_grid(-math.inf, 5)
        with self.assertRaises(InvalidDomainError):
            sample_grid(0, math.nan)

    def test_steps_must_be_positive(self) -> None:
        with self.assertRaises(ValueError):
            sample_grid(0, 1, 0)


class SampleExpressionTests(unittest.TestCase):
    def test_cubic_over_default_domain(self) -> None:
        points = sample_expression("x^3 - 2*x + 1", -5, 5)
        self.assertEqual(len(points), 501)
        self.assertEqual(points[0].x, -5.0)
        self.assertEqual(points[-1].x, 5.0)
        self.assertEqual(points[0].y, -114.0)
        self.assertEqual(points[-1].y, 116.0)
        xs = [p.x for p in points]
        self.assertTrue(all(a < b for a, b in zip(xs, xs[1:])))

    def test_pole_sample_is_dropped(self) -> None:
        # Step 1.0 puts a sample exactly on x = 0.
        points = sample_expression("1/x", -250, 250)
        self.assertEqual(len(points), 500)
        self.assertNotIn(0.0, [p.x for p in points])

    def test_nan_samples_are_dropped(self) -> None:
        points = sample_expression("sqrt(x)", -5, 5)
        self.assertGreater(len(points), 0)
        self.assertTrue(all(p.x >= 0 for p in points))
        self.assertTrue(all(math.isfinite(p.y) for p in points))

    def test_all_invalid_samples_raise(self) -> None:
        with self.assertRaises(NoValidPointsError) as ctx:
            sample_expression("sqrt(x)", -5, -1)
        self.assertEqual(str(ctx.exception), "No valid points to plot")

    def test_values_are_rounded_to_four_decimals(self) -> None:
        points = sample_expression("x/3", 0, 1)
        for p in points:
            self.assertEqual(p.y, round(p.y, 4))
            self.assertEqual(p.x, round(p.x, 4))
        self.assertEqual(points[-1].y, 0.3333)

    def test_rounding_keeps_huge_finite_values(self) -> None:
        points = sample_expression("exp(x)", 700, 709)
        self.assertEqual(len(points), 501)
        self.assertTrue(all(math.isfinite(p.y) for p in points))

    def test_accepts_compiled_expression(self) -> None:
        compiled = compile_expression("2*x")
        points = sample_expression(compiled, 0, 1, steps=2)
        self.assertEqual([(p.x, p.y) for p in points], [(0.0, 0.0), (0.5, 1.0), (1.0, 2.0)])

    def test_negative_decimals_rejected(self) -> None:
        with self.assertRaises(ValueError):
            sample_expression("x", 0, 1, decimals=-1)


class ComputePlotTests(unittest.TestCase):
    def test_ok_result(self) -> None:
        result = compute_plot(PlotRequest(expression="sin(x)", x_min=-5, x_max=5))
        self.assertTrue(result.ok)
        self.assertEqual(result.status, "ok")
        self.assertEqual(result.error, "")
        self.assertEqual(result.xs().shape, (501,))
        self.assertEqual(result.ys().shape, (501,))

    def test_invalid_expression_result(self) -> None:
        result = compute_plot(PlotRequest(expression="foo(x)", x_min=-5, x_max=5))
        self.assertEqual(result.status, "invalid_expression")
        self.assertTrue(result.error.startswith("Invalid function"))
        self.assertEqual(result.points, ())

    def test_no_points_result(self) -> None:
        result = compute_plot(PlotRequest(expression="log(x)", x_min=-5, x_max=-1))
        self.assertEqual(result.status, "no_points")
        self.assertEqual(result.error, "No valid points to plot")
        self.assertEqual(result.points, ())

    def test_invalid_domain_result(self) -> None:
        result = compute_plot(PlotRequest(expression="x", x_min=5, x_max=-5))
        self.assertEqual(result.status, "invalid_domain")
        self.assertTrue(result.error.startswith("Invalid domain"))
        self.assertFalse(result.ok)

    def test_long_and_deep_expressions_do_not_escape(self) -> None:
        flat = compute_plot(PlotRequest(expression="+".join(["x"] * 3000), x_min=-5, x_max=5))
        self.assertTrue(flat.ok)
        self.assertEqual(flat.points[-1].y, 15000.0)

        nested = compute_plot(PlotRequest(expression="(" * 5000 + "x" + ")" * 5000, x_min=-5, x_max=5))
        self.assertEqual(nested.status, "invalid_expression")
        self.assertEqual(nested.error, "Invalid function: expression is nested too deeply")
        self.assertEqual(nested.points, ())

    def test_overflowing_domain_width_is_invalid(self) -> None:
        result = compute_plot(PlotRequest(expression="x", x_min=-1e308, x_max=1e308))
        self.assertEqual(result.status, "invalid_domain")
        self.assertEqual(result.error, "Invalid domain: x range is too large")

    def test_custom_step_count(self) -> None:
        result = compute_plot(PlotRequest(expression="x", x_min=0, x_max=1, steps=10))
        self.assertEqual(len(result.points), 11)


if __name__ == "__main__":
    unittest.main()
