"""Shared test fixtures for cpu-hog."""

import sys
from collections.abc import Callable

import pytest

from cpu_hog.config import Config
from cpu_hog.parser import ParsedLine, parse_pidstat_line
from cpu_hog.profile import PlatformProfile


def make_profile(
    core_count: int = 1,
    parse_line: Callable[[str], ParsedLine] = parse_pidstat_line,
    script: str = "",
) -> PlatformProfile:
    """Create a profile whose sampler is a Python one-liner.

    The script ignores the interval; it only has to write sampler-shaped lines.
    """
    return PlatformProfile(
        name="test",
        core_count=core_count,
        executable=sys.executable,
        launch_args=lambda interval: ["-c", script],
        parse_line=parse_line,
    )


@pytest.fixture
def config() -> Config:
    """Default config with a short teardown timeout."""
    cfg = Config()
    cfg.sampler.terminate_timeout = 1.0
    return cfg


PIDSTAT_PERIOD = [
    "Linux 6.1.0-18-amd64 (devbox) \t10/19/2026 \t_x86_64_\t(4 CPU)",
    "",
    "14:23:01      UID       PID    %usr %system  %guest   %wait    %CPU   CPU  Command",
    "14:23:01     1000       100    1.00    2.00    0.00    0.00    3.00     0  node",
    "14:23:01     1000       101    0.50    0.50    0.00    0.00    1.00     1  chrome",
    "",
]
