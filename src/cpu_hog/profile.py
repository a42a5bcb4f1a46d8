"""Platform profile resolution.

A profile bundles everything that differs between supported platforms: the
sampler command line, its line classifier and the logical core count. It is
resolved once at startup with a plain conditional.
"""

import os
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import structlog

from cpu_hog.config import Config
from cpu_hog.parser import ParsedLine, parse_pidstat_line, parse_top_line
from cpu_hog.sysctl import sysctl_int

log = structlog.get_logger()


class StartupError(RuntimeError):
    """Prerequisites for monitoring are missing on this host."""


@dataclass(frozen=True)
class PlatformProfile:
    """How to sample and parse per-process CPU usage on one platform."""

    name: str
    core_count: int
    executable: str
    launch_args: Callable[[int], list[str]]
    parse_line: Callable[[str], ParsedLine]

    def __post_init__(self) -> None:
        if self.core_count < 1:
            raise ValueError(f"core_count must be >= 1, got {self.core_count}")

    def command(self, interval: int) -> list[str]:
        """Full sampler argv for a sampling interval in seconds."""
        return [self.executable, *self.launch_args(interval)]


def pidstat_args(interval: int) -> list[str]:
    """pidstat arguments: per-process CPU, every interval seconds, forever."""
    return ["-u", str(interval)]


def top_args(interval: int) -> list[str]:
    """top arguments: unlimited logging-mode samples of %CPU and command."""
    return ["-l", "0", "-s", str(interval), "-stats", "cpu,command"]


def linux_core_count(cpuinfo_path: str | Path = "/proc/cpuinfo") -> int:
    """Count logical processors listed in /proc/cpuinfo.

    Raises:
        StartupError: If the file can't be read or lists no processors.
    """
    try:
        text = Path(cpuinfo_path).read_text()
    except OSError as e:
        raise StartupError(f"Cannot read {cpuinfo_path}: {e}") from e

    count = sum(
        1 for line in text.splitlines() if line.split(":", 1)[0].strip() == "processor"
    )
    if count < 1:
        raise StartupError(f"No processor entries found in {cpuinfo_path}")
    return count


def darwin_core_count() -> int:
    """Read hw.logicalcpu via sysctl.

    Raises:
        StartupError: If the sysctl is unavailable or not positive.
    """
    count = sysctl_int("hw.logicalcpu")
    if count is None or count < 1:
        raise StartupError(f"Cannot determine logical CPU count (hw.logicalcpu={count})")
    return count


def _require_executable(path: str, hint: str) -> None:
    if not os.path.exists(path):
        raise StartupError(f"{path} not found{hint}")


def resolve_profile(config: Config, platform: str | None = None) -> PlatformProfile:
    """Build the profile for the running platform.

    Args:
        config: Application config (sampler paths)
        platform: Platform identity, defaults to sys.platform

    Raises:
        StartupError: Unsupported platform, missing sampler, or unknown core count.
    """
    platform = platform or sys.platform
    sampler = config.sampler

    if platform.startswith("linux"):
        _require_executable(sampler.pidstat_path, " (install the sysstat package)")
        profile = PlatformProfile(
            name="linux",
            core_count=linux_core_count(sampler.cpuinfo_path),
            executable=sampler.pidstat_path,
            launch_args=pidstat_args,
            parse_line=parse_pidstat_line,
        )
    elif platform == "darwin":
        _require_executable(sampler.top_path, "")
        profile = PlatformProfile(
            name="darwin",
            core_count=darwin_core_count(),
            executable=sampler.top_path,
            launch_args=top_args,
            parse_line=parse_top_line,
        )
    else:
        raise StartupError(f"Unsupported platform: {platform}")

    log.debug(
        "profile_resolved",
        platform=profile.name,
        core_count=profile.core_count,
        executable=profile.executable,
    )
    return profile
