"""Colorful console logging formatter."""

import logging
import re
from datetime import datetime

# ANSI color codes
COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "white": "\033[37m",
    "cyan": "\033[36m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "bright_black": "\033[90m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
    "bright_yellow": "\033[93m",
    "bright_blue": "\033[94m",
    "bright_magenta": "\033[95m",
    "bright_cyan": "\033[96m",
    "bg_red": "\033[41m",
}

LEVEL_COLORS = {
    "DEBUG": COLORS["bright_black"],
    "INFO": COLORS["bright_green"],
    "WARNING": COLORS["bright_yellow"],
    "ERROR": COLORS["bright_red"],
    "CRITICAL": COLORS["bg_red"] + COLORS["white"] + COLORS["bold"],
}

# Longest prefix first
COMPONENT_COLORS = {
    "shellfinder.services.registry": COLORS["bright_magenta"],
    "shellfinder.services": COLORS["bright_blue"],
    "shellfinder.gateway": COLORS["bright_cyan"],
    "shellfinder.server": COLORS["bright_cyan"],
    "shellfinder.middleware": COLORS["yellow"],
    "shellfinder.config": COLORS["green"],
}

_HIGHLIGHTS = [
    (re.compile(r"(\d+\.?\d*ms)"), COLORS["bright_yellow"]),
    (re.compile(r"([\w.\-]+@[\w.\-]+:\d+)"), COLORS["bright_magenta"]),
    (re.compile(r"(sessions=\d+)"), COLORS["cyan"]),
]


class ColorfulFormatter(logging.Formatter):
    """Log formatter with aligned columns and optional ANSI colors.

    Output looks like::

        14:02:11.532 10/17 | INFO     | services.registry    | Session ab12cd34 opened
    """

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors

    def _colorize(self, text: str, color: str) -> str:
        if not self.use_colors:
            return text
        return f"{color}{text}{COLORS['reset']}"

    def _format_timestamp(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created)
        return f"{dt:%H:%M:%S}.{int(record.msecs):03d} {dt:%m/%d}"

    def _format_component(self, record: logging.LogRecord) -> str:
        name = record.name
        if name.startswith("shellfinder."):
            name = name[len("shellfinder."):]
        color = COLORS["white"]
        for prefix, prefix_color in COMPONENT_COLORS.items():
            if record.name.startswith(prefix):
                color = prefix_color
                break
        return self._colorize(f"{name:<20}", color)

    def _highlight_message(self, message: str) -> str:
        if not self.use_colors:
            return message
        for pattern, color in _HIGHLIGHTS:
            message = pattern.sub(f"{color}\\1{COLORS['reset']}", message)
        return message

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as a single aligned line."""
        sep = self._colorize("|", COLORS["dim"])
        timestamp = self._colorize(self._format_timestamp(record), COLORS["dim"])
        level = self._colorize(
            f"{record.levelname:<8}",
            LEVEL_COLORS.get(record.levelname, COLORS["white"]),
        )
        component = self._format_component(record)
        message = self._highlight_message(record.getMessage())

        line = f"{timestamp} {sep} {level} {sep} {component} {sep} {message}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line
