# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing console output with optional colour and emoji support."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Final

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

LOGGER_NAMESPACE: Final[str] = "json_partials"


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


@dataclass(slots=True)
class CLILogger:
    """Adapter writing status lines to a Rich console."""

    console: Console
    use_emoji: bool
    debug_enabled: bool = False
    _key_value_re: re.Pattern[str] = re.compile(r"([\w-]+)=(\".*?\"|\S+)")

    def ok(self, message: str) -> None:
        """Log a success message."""

        self.console.print(Text(f"{emoji('✅ ', self.use_emoji)}{message}", style="green"))

    def warn(self, message: str) -> None:
        """Log a warning message."""

        self.console.print(Text(f"{emoji('⚠️ ', self.use_emoji)}{message}", style="yellow"))

    def fail(self, message: str) -> None:
        """Log a failure message."""

        self.console.print(Text(f"{emoji('❌ ', self.use_emoji)}{message}", style="bold red"))

    def echo(self, message: str) -> None:
        """Write ``message`` verbatim to stdout."""

        typer.echo(message)

    def debug(self, message: str) -> None:
        """Emit a debug line, highlighting ``key=value`` pairs, when debug output is on."""

        if not self.debug_enabled:
            return
        text = Text("[debug] ", style="bold cyan")
        cursor = 0
        for match in self._key_value_re.finditer(message):
            start, end = match.span()
            if start > cursor:
                text.append(message[cursor:start], style="dim")
            text.append(match.group(1), style="bold magenta")
            text.append("=", style="dim")
            text.append(match.group(2), style="bold green")
            cursor = end
        if cursor < len(message):
            text.append(message[cursor:], style="dim")
        self.console.print(text)


def build_cli_logger(*, emoji: bool, debug: bool = False, no_color: bool = False) -> CLILogger:
    """Return a ``CLILogger`` bound to a dedicated Rich console.

    When ``debug`` is set, library log records are routed to the same console.
    """

    console = Console(no_color=no_color, highlight=False, soft_wrap=True)
    if debug:
        configure_library_logging(console, level=logging.DEBUG)
    return CLILogger(console=console, use_emoji=emoji, debug_enabled=debug)


def configure_library_logging(console: Console, *, level: int = logging.INFO) -> None:
    """Send ``json_partials`` log records to ``console`` at ``level``.

    Records stop propagating to ancestor loggers so each line is printed once.
    """

    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.handlers = [
        handler for handler in logger.handlers if not isinstance(handler, RichHandler)
    ]
    logger.addHandler(RichHandler(console=console, show_time=False, show_path=False, markup=False))
    logger.propagate = False
    logger.setLevel(level)


__all__ = ["CLILogger", "build_cli_logger", "configure_library_logging", "emoji"]
