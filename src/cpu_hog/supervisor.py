"""Sampler subprocess supervision."""

import os
import subprocess
from collections.abc import Iterator
from enum import Enum

import psutil
import structlog

from cpu_hog.profile import StartupError

log = structlog.get_logger()


class StreamStatus(Enum):
    """Sampler stream status."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    STOPPED = "stopped"
    FAILED = "failed"


class SamplerExited(RuntimeError):
    """The sampler closed its output while it was expected to run forever."""

    def __init__(self, returncode: int | None):
        self.returncode = returncode
        super().__init__(f"sampler exited with status {returncode}")


class SamplerProcess:
    """A long-running sampler whose stdout is read line by line.

    stderr is inherited so sampler diagnostics reach our own stderr.
    Teardown terminates the sampler and every descendant it spawned.
    """

    def __init__(self, argv: list[str], terminate_timeout: float = 3.0):
        self.argv = argv
        self.terminate_timeout = terminate_timeout
        self._process: subprocess.Popen[str] | None = None
        self._status = StreamStatus.NOT_STARTED
        self._terminating = False
        self._signalled: list[psutil.Process] = []

    @property
    def status(self) -> StreamStatus:
        """Current stream status."""
        return self._status

    @property
    def pid(self) -> int | None:
        """PID of the sampler, None before start()."""
        return self._process.pid if self._process is not None else None

    def __enter__(self) -> "SamplerProcess":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.terminate()
        self.close()

    def start(self) -> None:
        """Start the sampler subprocess.

        Raises:
            StartupError: If the sampler can't be executed.
        """
        if self._process is not None:
            return

        # Fixed C locale keeps pidstat timestamps 24h and decimals dotted
        env = {**os.environ, "LC_ALL": "C"}

        try:
            self._process = subprocess.Popen(
                self.argv,
                stdout=subprocess.PIPE,
                stderr=None,
                stdin=subprocess.DEVNULL,
                text=True,
                errors="replace",
                bufsize=1,
                env=env,
            )
        except (FileNotFoundError, PermissionError) as e:
            self._status = StreamStatus.FAILED
            log.error("sampler_start_failed", argv=self.argv, error=str(e))
            raise StartupError(f"Cannot run {self.argv[0]}: {e}") from e

        self._status = StreamStatus.RUNNING
        log.info("sampler_started", argv=self.argv, pid=self._process.pid)

    def lines(self) -> Iterator[str]:
        """Yield sampler output lines, newline stripped, until end of stream.

        Blocks on the pipe with no timeout.
        """
        if self._process is None or self._process.stdout is None:
            return

        for line in self._process.stdout:
            yield line.rstrip("\r\n")

    def wait(self) -> int | None:
        """Reap the sampler and return its exit status."""
        if self._process is None:
            return None
        returncode = self._process.wait()
        if self._status is StreamStatus.RUNNING:
            self._status = StreamStatus.STOPPED
        return returncode

    def _descendants(self) -> list[psutil.Process]:
        """Live descendants of the sampler."""
        if self._process is None:
            return []
        try:
            return psutil.Process(self._process.pid).children(recursive=True)
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            return []

    def request_stop(self) -> None:
        """Send SIGTERM to the sampler and its descendants without waiting.

        Safe to call from a signal handler; reaping is left to terminate().
        """
        proc = self._process
        if proc is None:
            return
        descendants = self._descendants()
        self._signalled.extend(descendants)

        if proc.returncode is None:
            try:
                proc.terminate()
            except ProcessLookupError:
                pass
        for child in descendants:
            try:
                child.terminate()
            except psutil.NoSuchProcess:
                pass

    def terminate(self) -> None:
        """Terminate the sampler and all its descendants, then reap them.

        Safe to call repeatedly. Survivors are killed after
        terminate_timeout seconds. Not for signal handlers: use request_stop().
        """
        proc = self._process
        if proc is None or self._terminating:
            return
        self._terminating = True
        try:
            self.request_stop()
            descendants = list(dict.fromkeys(self._signalled))

            try:
                proc.wait(timeout=self.terminate_timeout)
            except subprocess.TimeoutExpired:
                log.warning("sampler_kill", pid=proc.pid)
                proc.kill()
                proc.wait()

            _, alive = psutil.wait_procs(descendants, timeout=self.terminate_timeout)
            for child in alive:
                try:
                    child.kill()
                except psutil.NoSuchProcess:
                    pass
            self._signalled.clear()
        finally:
            self._terminating = False

        if self._status is StreamStatus.RUNNING:
            self._status = StreamStatus.STOPPED
        log.debug("sampler_terminated", pid=proc.pid, returncode=proc.returncode)

    def close(self) -> None:
        """Close our end of the sampler's stdout pipe."""
        if self._process is not None and self._process.stdout is not None:
            self._process.stdout.close()
