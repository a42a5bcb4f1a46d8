"""Configuration system for cpu-hog."""

from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path

import tomlkit


@dataclass
class SamplerConfig:
    """External sampler configuration."""

    pidstat_path: str = "/usr/bin/pidstat"  # Linux sampler (sysstat)
    top_path: str = "/usr/bin/top"  # macOS sampler
    cpuinfo_path: str = "/proc/cpuinfo"  # Linux core count source
    terminate_timeout: float = 3.0  # Seconds before SIGKILL on teardown


@dataclass
class OutputConfig:
    """Summary line layout."""

    name_width: int = 12  # Column budget for command name plus "*N"


@dataclass
class LoggingConfig:
    """Log file configuration.

    Console diagnostics always go to stderr; the JSON file is opt-in.
    """

    file_enabled: bool = False
    log_max_bytes: int = 1024 * 1024  # Max log file size (1MB)
    log_backup_count: int = 2  # Number of backup log files to keep


def _dataclass_to_table(obj: object) -> tomlkit.items.Table:
    """Convert a dataclass instance to a tomlkit Table recursively."""
    table = tomlkit.table()
    for f in fields(obj):  # type: ignore[arg-type]
        value = getattr(obj, f.name)
        if is_dataclass(value) and not isinstance(value, type):
            table.add(f.name, _dataclass_to_table(value))
        else:
            table.add(f.name, value)
    return table


@dataclass
class Config:
    """Main configuration container."""

    sampler: SamplerConfig = field(default_factory=SamplerConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def config_dir(self) -> Path:
        """Configuration directory."""
        return Path.home() / ".config" / "cpu-hog"

    @property
    def config_path(self) -> Path:
        """Path to config file."""
        return self.config_dir / "config.toml"

    @property
    def state_dir(self) -> Path:
        """State directory for logs."""
        return Path.home() / ".local" / "state" / "cpu-hog"

    @property
    def log_path(self) -> Path:
        """JSON log path."""
        return self.state_dir / "cpu-hog.log"

    def save(self, path: Path | None = None) -> None:
        """Save config to TOML file."""
        path = path or self.config_path
        path.parent.mkdir(parents=True, exist_ok=True)

        doc = tomlkit.document()
        for name in ("sampler", "output", "logging"):
            doc.add(name, _dataclass_to_table(getattr(self, name)))
            doc.add(tomlkit.nl())

        path.write_text(tomlkit.dumps(doc))

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Load config from TOML file, returning defaults for missing values.

        Raises:
            ValueError: If the file cannot be parsed or holds invalid values.
        """
        defaults = cls()
        path = path or defaults.config_path
        if not path.exists():
            return defaults

        try:
            with open(path) as f:
                data = tomlkit.load(f)
        except tomlkit.exceptions.TOMLKitError as e:
            raise ValueError(f"Failed to parse config file {path}: {e}") from e

        return cls(
            sampler=_load_sampler_config(data.get("sampler", {})),
            output=_load_output_config(data.get("output", {})),
            logging=_load_logging_config(data.get("logging", {})),
        )


def _load_sampler_config(data: dict) -> SamplerConfig:
    """Load sampler config from TOML data."""
    d = SamplerConfig()
    terminate_timeout = data.get("terminate_timeout", d.terminate_timeout)
    if terminate_timeout < 0:
        raise ValueError(f"terminate_timeout must be >= 0, got {terminate_timeout}")

    return SamplerConfig(
        pidstat_path=data.get("pidstat_path", d.pidstat_path),
        top_path=data.get("top_path", d.top_path),
        cpuinfo_path=data.get("cpuinfo_path", d.cpuinfo_path),
        terminate_timeout=terminate_timeout,
    )


def _load_output_config(data: dict) -> OutputConfig:
    """Load output config from TOML data."""
    d = OutputConfig()
    name_width = data.get("name_width", d.name_width)
    if name_width < 1:
        raise ValueError(f"name_width must be >= 1, got {name_width}")
    return OutputConfig(name_width=name_width)


def _load_logging_config(data: dict) -> LoggingConfig:
    """Load logging config from TOML data."""
    d = LoggingConfig()
    return LoggingConfig(
        file_enabled=bool(data.get("file_enabled", d.file_enabled)),
        log_max_bytes=data.get("log_max_bytes", d.log_max_bytes),
        log_backup_count=data.get("log_backup_count", d.log_backup_count),
    )
