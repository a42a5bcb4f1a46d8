"""Tests for sampler line classifiers."""

import pytest

from cpu_hog.parser import BOUNDARY, Boundary, Record, parse_pidstat_line, parse_top_line


class TestParsePidstatLine:
    """Tests for pidstat -u output."""

    def test_record_sums_usr_and_system(self) -> None:
        """cpu_percent is %usr + %system."""
        line = "14:23:01     1000       100    1.00    2.00    0.00    0.00    3.00     0  node"
        assert parse_pidstat_line(line) == Record(command="node", cpu_percent=3.0)

    def test_guest_and_wait_are_excluded(self) -> None:
        """%guest and %wait never count towards usage."""
        line = "09:00:00 0 1 0.50 0.25 7.00 9.00 16.75 2 kvm"
        assert parse_pidstat_line(line) == Record(command="kvm", cpu_percent=0.75)

    def test_command_with_spaces(self) -> None:
        """Command names keep inner spaces, lose trailing whitespace."""
        line = "09:00:00 1000 4242 5.00 1.00 0.00 0.00 6.00 3 Web Content   "
        assert parse_pidstat_line(line) == Record(command="Web Content", cpu_percent=6.0)

    @pytest.mark.parametrize(
        "line",
        [
            "",
            "Linux 6.1.0-18-amd64 (devbox) \t10/19/2026 \t_x86_64_\t(4 CPU)",
            "14:23:01      UID       PID    %usr %system  %guest   %wait    %CPU   CPU  Command",
            "Average:     1000       100    1.00    2.00    0.00    0.00    3.00     -  node",
            "14:23:01 1000 100 1.00 2.00 0.00 3.00 0 node",
            "02:23:01 PM 1000 100 1.00 2.00 0.00 0.00 3.00 0 node",
        ],
    )
    def test_non_records_are_boundaries(self, line: str) -> None:
        """Headers, banners, averages and short lines are boundaries."""
        assert parse_pidstat_line(line) is BOUNDARY


class TestParseTopLine:
    """Tests for top -stats cpu,command output."""

    def test_record(self) -> None:
        """A float followed by a command is a record."""
        assert parse_top_line("12.5 WindowServer") == Record("WindowServer", 12.5)

    def test_leading_whitespace(self) -> None:
        """top right-aligns the %CPU column."""
        assert parse_top_line("  3.1  Google Chrome Helper") == Record(
            "Google Chrome Helper", 3.1
        )

    def test_zero_usage_is_boundary(self) -> None:
        """Idle processes never reach the accumulator."""
        assert parse_top_line("0.0 kernel_task") is BOUNDARY
        assert parse_top_line("0 launchd") is BOUNDARY

    @pytest.mark.parametrize(
        "line",
        [
            "",
            "Processes: 512 total, 3 running, 509 sleeping, 2400 threads",
            "2026/10/19 14:23:01",
            "Load Avg: 2.10, 1.95, 1.80",
            "%CPU COMMAND",
            "1.2.3 weird",
            "12.5",
        ],
    )
    def test_non_records_are_boundaries(self, line: str) -> None:
        """Anything that isn't <float> <command> is a boundary."""
        assert parse_top_line(line) is BOUNDARY


def test_boundary_is_singleton() -> None:
    """Boundary() always returns the shared BOUNDARY instance."""
    assert Boundary() is BOUNDARY
    assert repr(BOUNDARY) == "BOUNDARY"
