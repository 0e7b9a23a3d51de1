"""CLI interface for waitretry"""

import logging
from datetime import timedelta
from pathlib import Path
from typing import Iterable, Optional

import click
from pydantic import ValidationError

from waitretry.application.backoff import generate_delays
from waitretry.domain.config import BackoffConfig
from waitretry.domain.errors import InvalidArgument
from waitretry.domain.models.duration import to_milliseconds
from waitretry.infrastructure.config.config_manager import ConfigManager, ConfigurationError

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.getLogger().setLevel(level)


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def _apply_overrides(
    backoff_config: BackoffConfig,
    policy: Optional[str],
    retry_count: Optional[int],
    seed: Optional[int],
    fast_first: Optional[bool],
) -> BackoffConfig:
    """Return a validated copy of backoff_config with CLI overrides applied"""
    overrides = {
        "policy": policy.lower() if policy else None,
        "retry_count": retry_count,
        "seed": seed,
        "fast_first": fast_first,
    }
    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return backoff_config
    return BackoffConfig(**{**backoff_config.model_dump(), **updates})


def _output_delays(delays: Iterable[timedelta]) -> None:
    """Print one line per delay followed by the total"""
    total_ms = 0.0
    count = 0
    for count, delay in enumerate(delays, start=1):
        ms = to_milliseconds(delay)
        total_ms += ms
        click.echo(f"#{count}  {ms:.3f} ms")

    if count == 0:
        click.echo("No delays (retry_count is 0)")
        return
    click.echo(f"\nTotal: {total_ms:.3f} ms over {count} retries")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .waitretry.yml config file",
)
@click.pass_context
def cli(ctx, verbose: bool, config: Path):
    """waitretry - backoff delay sequences for retry loops"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose


@cli.command()
@click.option(
    "--policy",
    type=click.Choice(["constant", "linear", "exponential", "decorrelated_jitter"], case_sensitive=False),
    help="Backoff policy. Overrides config.",
)
@click.option("--retry-count", type=int, help="Number of delays to generate. Overrides config.")
@click.option("--seed", type=int, help="Seed for reproducible jitter. Overrides config.")
@click.option("--fast-first/--no-fast-first", default=None, help="Make the first retry immediate.")
@click.pass_context
def preview(ctx, policy: str, retry_count: int, seed: int, fast_first: Optional[bool]):
    """Print the delay sequence described by the configuration."""
    verbose = ctx.obj.get("verbose", False)

    try:
        config_manager = ConfigManager(config_path=ctx.obj.get("config_path"))
        backoff_config = _apply_overrides(
            config_manager.get_backoff_config(), policy, retry_count, seed, fast_first
        )
        logger.info(f"Using {backoff_config.policy} backoff with {backoff_config.retry_count} retries")
        delays = generate_delays(
            backoff_config.to_policy(), backoff_config.retry_count, backoff_config.fast_first
        )
    except ConfigurationError as e:
        _die(str(e), verbose=verbose, exc=e)
    except ValidationError as e:
        _die(f"Invalid option: {e}", verbose=verbose, exc=e)
    except InvalidArgument as e:
        _die(f"Invalid backoff configuration: {e}", verbose=verbose, exc=e)

    _output_delays(delays)


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
