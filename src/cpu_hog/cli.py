"""CLI entry point for cpu-hog."""

from pathlib import Path

import click


@click.command()
@click.argument("period", type=click.IntRange(min=1))
@click.argument("threshold", type=click.FloatRange(min=0))
@click.option("--verbose", "-v", is_flag=True, help="Log debug diagnostics to stderr")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.config/cpu-hog/config.toml)",
)
@click.version_option(package_name="cpu-hog")
def main(period: int, threshold: float, verbose: bool, config_path: Path | None) -> None:
    """Print the top CPU command every PERIOD seconds.

    Each line shows the busiest command, its share and the machine total,
    normalized per core. A blank line is printed when the total is below
    THRESHOLD percent.
    """
    from cpu_hog import logging as console
    from cpu_hog.config import Config
    from cpu_hog.monitor import run
    from cpu_hog.profile import StartupError, resolve_profile
    from cpu_hog.supervisor import SamplerExited

    try:
        config = Config.load(config_path)
    except ValueError as e:
        console.config_invalid(str(e))
        raise SystemExit(1)

    console.configure(config, verbose=verbose)

    try:
        profile = resolve_profile(config)
        raise SystemExit(run(profile, period, threshold, config))
    except StartupError as e:
        console.startup_failed(str(e))
        raise SystemExit(1)
    except SamplerExited as e:
        console.sampler_exited(profile.executable, e.returncode)
        raise SystemExit(1)
    except BrokenPipeError:
        console.output_closed()
        raise SystemExit(1)
