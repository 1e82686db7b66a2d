from __future__ import annotations

import unittest

from funcplot_plot import ChartStyle
from funcplot_ui.theme import DEFAULT_TOKENS, chart_style, hex_to_rgba, validate_theme_tokens


class ThemeTests(unittest.TestCase):
    def test_default_tokens_match_chart_style(self) -> None:
        self.assertEqual(validate_theme_tokens(), DEFAULT_TOKENS)
        self.assertEqual(chart_style(DEFAULT_TOKENS), ChartStyle())

    def test_overrides_apply(self) -> None:
        tokens = validate_theme_tokens({"line": "#ff0000", "line_width": "3"})
        style = chart_style(tokens)
        self.assertEqual(style.line, (255, 0, 0, 255))
        self.assertEqual(style.line_width, 3)

    def test_unknown_token(self) -> None:
        with self.assertRaisesRegex(ValueError, "Unknown theme token: glow"):
            validate_theme_tokens({"glow": "#FFFFFF"})

    def test_bad_color(self) -> None:
        with self.assertRaisesRegex(ValueError, "Token `grid` must be a hex color"):
            validate_theme_tokens({"grid": "gray"})

    def test_bad_line_width(self) -> None:
        for value in (0, -1, True, "wide", 1.5):
            with self.assertRaises(ValueError):
                validate_theme_tokens({"line_width": value})

    def test_hex_to_rgba(self) -> None:
        self.assertEqual(hex_to_rgba("#11223344"), (17, 34, 51, 68))
        self.assertEqual(hex_to_rgba("#2563EB"), (37, 99, 235, 255))
        with self.assertRaises(ValueError):
            hex_to_rgba("2563EB")


if __name__ == "__main__":
    unittest.main()
