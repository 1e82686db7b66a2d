"""Control surface for funcplot: text commands, theme tokens and the CLI."""

from .commands import HELP_TEXT, ControlCommand, apply_control_command, parse_control_command
from .theme import ThemeTokens, chart_style, validate_theme_tokens

__all__ = [
    "ControlCommand",
    "HELP_TEXT",
    "ThemeTokens",
    "apply_control_command",
    "chart_style",
    "parse_control_command",
    "validate_theme_tokens",
]
