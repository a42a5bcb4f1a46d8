"""Per-period accumulation and summarizing of CPU readings."""

from dataclasses import dataclass

from cpu_hog.parser import ParsedLine, Record


@dataclass(frozen=True, slots=True)
class TopCommand:
    """The command with the greatest summed usage in a period."""

    name: str
    cpu_percent: float
    process_count: int


@dataclass(frozen=True, slots=True)
class PeriodSummary:
    """Reduced view of one reporting period."""

    total_cpu_percent: float
    top: TopCommand


class Accumulator:
    """Groups CPU readings by command name within the current period.

    Commands keep their first-appearance order; summarize() depends on it
    for tie-breaking.
    """

    def __init__(self) -> None:
        self._readings: dict[str, list[float]] = {}

    def __len__(self) -> int:
        return len(self._readings)

    @property
    def readings(self) -> dict[str, list[float]]:
        """Readings collected since the last flush."""
        return self._readings

    def feed(self, parsed: ParsedLine) -> dict[str, list[float]] | None:
        """Apply one classified line.

        Returns:
            The completed period's readings when a Boundary closes a non-empty
            period, otherwise None.
        """
        if isinstance(parsed, Record):
            self._readings.setdefault(parsed.command, []).append(parsed.cpu_percent)
            return None

        if not self._readings:
            return None

        completed = self._readings
        self._readings = {}
        return completed


def summarize(readings: dict[str, list[float]], core_count: int) -> PeriodSummary:
    """Reduce a period's readings to the machine total and the top command.

    Ties keep the earliest-appearing command (strict greater-than). Both
    figures are divided by core_count.
    """
    total = 0.0
    top = TopCommand(name="?", cpu_percent=0.0, process_count=0)

    for name, values in readings.items():
        summed = sum(values)
        total += summed
        if summed > top.cpu_percent:
            top = TopCommand(name=name, cpu_percent=summed, process_count=len(values))

    return PeriodSummary(
        total_cpu_percent=total / core_count,
        top=TopCommand(
            name=top.name,
            cpu_percent=top.cpu_percent / core_count,
            process_count=top.process_count,
        ),
    )
