"""Tests for configuration system."""

from pathlib import Path

import pytest

from cpu_hog.config import Config, LoggingConfig, OutputConfig, SamplerConfig


def test_sampler_config_defaults():
    """SamplerConfig points at the standard sampler locations."""
    config = SamplerConfig()
    assert config.pidstat_path == "/usr/bin/pidstat"
    assert config.top_path == "/usr/bin/top"
    assert config.cpuinfo_path == "/proc/cpuinfo"
    assert config.terminate_timeout == 3.0


def test_output_config_defaults():
    """OutputConfig uses a 12-column name budget."""
    assert OutputConfig().name_width == 12


def test_logging_config_defaults():
    """File logging is off by default."""
    config = LoggingConfig()
    assert config.file_enabled is False
    assert config.log_backup_count == 2


def test_config_paths():
    """Config provides correct paths."""
    config = Config()
    assert "cpu-hog" in str(config.config_dir)
    assert config.config_path.name == "config.toml"
    assert config.log_path.parent == config.state_dir


def test_load_missing_file_returns_defaults(tmp_path: Path):
    """A missing config file means defaults."""
    assert Config.load(tmp_path / "config.toml") == Config()


def test_save_then_load(tmp_path: Path):
    """Saved values are read back."""
    config_path = tmp_path / "sub" / "config.toml"
    config = Config()
    config.sampler.pidstat_path = "/opt/sysstat/bin/pidstat"
    config.output.name_width = 16
    config.logging.file_enabled = True
    config.save(config_path)

    loaded = Config.load(config_path)

    assert loaded.sampler.pidstat_path == "/opt/sysstat/bin/pidstat"
    assert loaded.output.name_width == 16
    assert loaded.logging.file_enabled is True
    assert loaded.sampler.top_path == "/usr/bin/top"


def test_partial_file_uses_defaults(tmp_path: Path):
    """Missing keys fall back to dataclass defaults."""
    config_path = tmp_path / "config.toml"
    config_path.write_text("[output]\nname_width = 20\n")

    config = Config.load(config_path)

    assert config.output.name_width == 20
    assert config.sampler == SamplerConfig()


def test_invalid_toml(tmp_path: Path):
    """Unparseable files raise ValueError."""
    config_path = tmp_path / "config.toml"
    config_path.write_text("[output\nname_width = ")

    with pytest.raises(ValueError, match="Failed to parse"):
        Config.load(config_path)


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("[output]\nname_width = 0\n", "name_width"),
        ("[sampler]\nterminate_timeout = -1.0\n", "terminate_timeout"),
    ],
)
def test_invalid_values(tmp_path: Path, content: str, message: str):
    """Out-of-range values raise ValueError."""
    config_path = tmp_path / "config.toml"
    config_path.write_text(content)

    with pytest.raises(ValueError, match=message):
        Config.load(config_path)
