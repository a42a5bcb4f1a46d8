"""Line classifiers for sampler output.

Each sampler line is either a Record (one process's command and CPU usage)
or a Boundary (anything else). Boundaries end the current reporting period.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Record:
    """One process's CPU usage for the current sampling window."""

    command: str
    cpu_percent: float


class Boundary:
    """Any line that carries no process CPU data."""

    _instance: "Boundary | None" = None

    def __new__(cls) -> "Boundary":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "BOUNDARY"


BOUNDARY = Boundary()

ParsedLine = Record | Boundary

# Time UID PID %usr %system %guest %wait %CPU CPU Command
_PIDSTAT_RE = re.compile(
    r"^\d\d:\d\d:\d\d\s+"
    r"\d+\s+"  # UID
    r"\d+\s+"  # PID
    r"(?P<usr>\d+(?:\.\d+)?)\s+"
    r"(?P<system>\d+(?:\.\d+)?)\s+"
    r"\d+(?:\.\d+)?\s+"  # %guest
    r"\d+(?:\.\d+)?\s+"  # %wait
    r"\d+(?:\.\d+)?\s+"  # %CPU
    r"\d+\s+"  # CPU
    r"(?P<command>\S.*?)\s*$"
)

# %CPU COMMAND
_TOP_RE = re.compile(r"^\s*(?P<cpu>\d+(?:\.\d+)?)\s+(?P<command>\S.*?)\s*$")


def parse_pidstat_line(line: str) -> ParsedLine:
    """Classify a line of `pidstat -u` output.

    Usage is %usr + %system; guest and wait time are not counted.
    """
    match = _PIDSTAT_RE.match(line)
    if match is None:
        return BOUNDARY
    try:
        cpu = float(match.group("usr")) + float(match.group("system"))
    except ValueError:
        return BOUNDARY
    return Record(command=match.group("command"), cpu_percent=cpu)


def parse_top_line(line: str) -> ParsedLine:
    """Classify a line of `top -stats cpu,command` output.

    Idle processes (0.0%) are boundaries so they never reach the accumulator.
    """
    match = _TOP_RE.match(line)
    if match is None:
        return BOUNDARY
    try:
        cpu = float(match.group("cpu"))
    except ValueError:
        return BOUNDARY
    if not cpu > 0:
        return BOUNDARY
    return Record(command=match.group("command"), cpu_percent=cpu)
