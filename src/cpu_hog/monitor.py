"""Main loop: sampler lines in, one status line per reporting period out."""

import signal
from collections.abc import Callable, Iterable, Iterator

import structlog

from cpu_hog import logging as console
from cpu_hog.accumulator import Accumulator, summarize
from cpu_hog.config import Config
from cpu_hog.formatting import DEFAULT_NAME_WIDTH, format_summary
from cpu_hog.profile import PlatformProfile
from cpu_hog.supervisor import SamplerExited, SamplerProcess

log = structlog.get_logger()

SHUTDOWN_SIGNALS = (signal.SIGTERM, signal.SIGINT, signal.SIGHUP)


def _emit(line: str) -> None:
    print(line, flush=True)


class Monitor:
    """Turns classified sampler lines into period summary lines."""

    def __init__(
        self,
        profile: PlatformProfile,
        threshold: float,
        name_width: int = DEFAULT_NAME_WIDTH,
    ):
        self.profile = profile
        self.threshold = threshold
        self.name_width = name_width
        self.accumulator = Accumulator()

    def process_line(self, line: str) -> str | None:
        """Feed one sampler line; return an output line when a period closes."""
        readings = self.accumulator.feed(self.profile.parse_line(line))
        if readings is None:
            return None

        summary = summarize(readings, self.profile.core_count)
        log.debug(
            "period_flushed",
            readings=readings,
            total=summary.total_cpu_percent,
            top=summary.top.name,
            top_cpu=summary.top.cpu_percent,
            top_count=summary.top.process_count,
        )
        return format_summary(summary, self.threshold, name_width=self.name_width)

    def process_lines(self, lines: Iterable[str]) -> Iterator[str]:
        """Yield one output line (possibly empty) per completed period."""
        for line in lines:
            output = self.process_line(line)
            if output is not None:
                yield output


def run(
    profile: PlatformProfile,
    period: int,
    threshold: float,
    config: Config,
    out: Callable[[str], None] = _emit,
) -> int:
    """Run the sampler until shutdown.

    Returns:
        0 when stopped by SIGTERM, SIGINT or SIGHUP.

    Raises:
        StartupError: If the sampler can't be started.
        SamplerExited: If the sampler's output ends without a shutdown request.
    """
    monitor = Monitor(profile, threshold, name_width=config.output.name_width)
    sampler = SamplerProcess(
        profile.command(period),
        terminate_timeout=config.sampler.terminate_timeout,
    )
    shutdown: list[str] = []

    def handle_signal(signum: int, frame: object) -> None:
        name = signal.Signals(signum).name
        log.info("signal_received", signal=name)
        if not shutdown:
            console.shutdown_requested(name)
        shutdown.append(name)
        sampler.request_stop()

    previous = {sig: signal.signal(sig, handle_signal) for sig in SHUTDOWN_SIGNALS}
    try:
        with sampler:
            # A signal that arrived before the sampler existed had nothing to stop
            if shutdown:
                sampler.request_stop()
            for output in monitor.process_lines(sampler.lines()):
                out(output)
            returncode = sampler.wait()
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    if shutdown:
        log.info("sampler_stopped", signal=shutdown[0], returncode=returncode)
        return 0

    log.error("sampler_exited", argv=sampler.argv, returncode=returncode)
    raise SamplerExited(returncode)
