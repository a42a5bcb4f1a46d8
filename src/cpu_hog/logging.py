"""Centralized diagnostics for cpu-hog.

This module provides:
1. Icon vocabulary (Icon class namespace)
2. Core console functions (log, info, warn, error) rendered with Rich on stderr
3. Domain-specific helpers (startup_failed, sampler_exited, etc.)
4. Structlog configuration (configure)

stdout belongs to the status-bar protocol, so nothing here ever writes to it.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from datetime import datetime
from typing import TYPE_CHECKING

import structlog
from rich.console import Console
from rich.markup import escape

if TYPE_CHECKING:
    from cpu_hog.config import Config

_console = Console(stderr=True, highlight=False)


# ─────────────────────────────────────────────────────────────────────────────
# Icons
# ─────────────────────────────────────────────────────────────────────────────


class Icon:
    """Icon vocabulary for console output."""

    OK = "[bold green]✓[/]"
    FAIL = "[bold red]✗[/]"
    SIGNAL = "⚡"


_LEVEL_STYLES = {
    "info": "[bright_blue]\\[info][/]",
    "warn": "[yellow]\\[warn][/]",
    "error": "[bold red]\\[err][/] ",
}


# ─────────────────────────────────────────────────────────────────────────────
# Core Functions
# ─────────────────────────────────────────────────────────────────────────────


def log(level: str, msg: str, icon: str = "") -> None:
    """Print a log message with timestamp and level to stderr.

    Args:
        level: Log level (info, warn, error)
        msg: Message to print (can include Rich markup)
        icon: Optional icon to show after level (e.g., Icon.OK)
    """
    ts = datetime.now().strftime("%H:%M:%S")
    lvl = _LEVEL_STYLES.get(level, f"[{level}]")
    icon_part = f" {icon}" if icon else ""
    _console.print(f"[dim]{ts}[/] {lvl}{icon_part} {msg}")


def info(msg: str, icon: str = "") -> None:
    """Log an info message."""
    log("info", msg, icon)


def warn(msg: str, icon: str = "") -> None:
    """Log a warning message."""
    log("warn", msg, icon)


def error(msg: str, icon: str = "") -> None:
    """Log an error message."""
    log("error", msg, icon)


# ─────────────────────────────────────────────────────────────────────────────
# Domain Helpers
# ─────────────────────────────────────────────────────────────────────────────


def startup_failed(reason: str) -> None:
    """Log a fatal startup problem (platform, sampler, core count)."""
    error(escape(reason), Icon.FAIL)


def config_invalid(reason: str) -> None:
    """Log an unusable config file."""
    error(f"Config error: {escape(reason)}", Icon.FAIL)


def sampler_exited(argv0: str, returncode: int | None) -> None:
    """Log the sampler going away unexpectedly."""
    error(
        f"[cyan]{escape(argv0)}[/] exited unexpectedly [dim](status {returncode})[/]",
        Icon.FAIL,
    )


def output_closed() -> None:
    """Log the status-bar reader going away."""
    error("stdout closed by reader, stopping", Icon.FAIL)


def shutdown_requested(name: str) -> None:
    """Log signal-initiated shutdown."""
    info(f"Received [bold]{name}[/], stopping sampler", Icon.SIGNAL)


# ─────────────────────────────────────────────────────────────────────────────
# Structlog Configuration
# ─────────────────────────────────────────────────────────────────────────────


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def configure(config: Config, verbose: bool = False) -> None:
    """Configure structlog on top of stdlib logging.

    verbose adds a human-readable stderr handler at DEBUG level, which
    includes the per-period readings. A JSON Lines rotating file is written
    when config.logging.file_enabled is set.

    Args:
        config: Application config with paths and log settings
        verbose: Enable debug diagnostics on stderr
    """
    stdlib_root = logging.getLogger()
    stdlib_root.setLevel(logging.DEBUG if verbose else logging.INFO)
    stdlib_root.handlers.clear()

    if config.logging.file_enabled:
        config.state_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            config.log_path,
            maxBytes=config.logging.log_max_bytes,
            backupCount=config.logging.log_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.JSONRenderer(),
                foreign_pre_chain=[
                    structlog.processors.TimeStamper(fmt="iso", utc=False, key="ts"),
                    *_shared_processors(),
                ],
            )
        )
        stdlib_root.addHandler(file_handler)

    if verbose:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.dev.ConsoleRenderer(colors=False),
                foreign_pre_chain=[
                    structlog.processors.TimeStamper(fmt="%H:%M:%S", utc=False),
                    *_shared_processors(),
                ],
            )
        )
        stdlib_root.addHandler(console_handler)

    if not stdlib_root.handlers:
        # Keep stdlib's last-resort handler from printing warnings
        stdlib_root.addHandler(logging.NullHandler())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S", utc=False),
            structlog.processors.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
