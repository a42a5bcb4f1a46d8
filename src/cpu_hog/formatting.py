"""Formatting of period summaries into fixed-width status lines."""

import math

from cpu_hog.accumulator import PeriodSummary

DEFAULT_NAME_WIDTH = 12


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def format_name(name: str, process_count: int, width: int = DEFAULT_NAME_WIDTH) -> str:
    """Truncate a command name so name plus "*N" suffix fits in width.

    The suffix is only added when more than one process shares the name.
    """
    suffix = f"*{process_count}" if process_count > 1 else ""
    room = max(width - len(suffix), 0)
    return name[:room] + suffix


def format_summary(
    summary: PeriodSummary,
    threshold: float,
    *,
    name_width: int = DEFAULT_NAME_WIDTH,
) -> str:
    """Render a period summary as a status line.

    Args:
        summary: Core-normalized period summary
        threshold: Minimum total (inclusive) for the line to be shown
        name_width: Column budget for the name and process count

    Returns:
        "" when the total is below threshold, otherwise e.g.
        "   firefox*3   42% /  57%". Numbers wider than their column are
        printed in full.
    """
    if summary.total_cpu_percent < threshold:
        return ""

    top = summary.top
    name_and_count = format_name(top.name, top.process_count, name_width)
    top_pct = round_half_away(top.cpu_percent)
    total_pct = round_half_away(summary.total_cpu_percent)
    return f"{name_and_count:>{name_width}} {top_pct:4d}% /{total_pct:4d}%"
