"""
Cosmos DB Samples Command-Line Interface

Runs the sync, async and passwordless samples against a Cosmos DB account
or the local emulator, and inspects the sample data and queries.
"""

import sys
import json
import asyncio
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import click
from pydantic import ValidationError

from cosmos_samples import __version__
from cosmos_samples.common.families import FamilyGenerator
from cosmos_samples.core.config_manager import ConfigManager, SamplesConfig
from cosmos_samples.core.logging_config import setup_logging
from cosmos_samples.samples.async_main import AsyncSample, PasswordlessSample
from cosmos_samples.samples.base import BaseSample
from cosmos_samples.samples.errors import describe_error
from cosmos_samples.samples.queries import NAMED_QUERIES
from cosmos_samples.samples.report import SampleReport
from cosmos_samples.samples.sync_main import SyncSample

logger = logging.getLogger("cosmos_samples.cli")


def sample_options(func: Callable) -> Callable:
    """Options shared by every sample command."""
    options = [
        click.option(
            "--config",
            "-c",
            "config_file",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            help="Path to configuration file (YAML or JSON)",
        ),
        click.option("--endpoint", help="Account endpoint (default: ACCOUNT_HOST or the emulator)"),
        click.option("--key", help="Account key (default: ACCOUNT_KEY)"),
        click.option("--database", help="Database name"),
        click.option("--container", help="Container name"),
        click.option(
            "--query",
            "-q",
            help=f"Named query ({', '.join(NAMED_QUERIES)}) or raw SQL",
        ),
        click.option("--page-size", type=click.IntRange(min=1), help="Items per query page"),
        click.option(
            "--insecure",
            is_flag=True,
            help="Skip TLS verification (local emulator)",
        ),
        click.option(
            "--log-level",
            type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
            help="Logging level",
        ),
        click.option(
            "--log-format",
            type=click.Choice(["text", "json"], case_sensitive=False),
            help="Log output format",
        ),
        click.option(
            "--metrics-file",
            type=click.Path(dir_okay=False, path_type=Path),
            help="Write request charge metrics (Prometheus text format) to this file",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _overrides(**params: Any) -> Dict[str, Any]:
    """Translate CLI parameters into configuration overrides."""
    overrides: Dict[str, Any] = {}

    def put(section: str, key: str, value: Any) -> None:
        if value is not None:
            overrides.setdefault(section, {})[key] = value

    put("account", "endpoint", params.get("endpoint"))
    put("account", "key", params.get("key"))
    if params.get("insecure"):
        put("account", "connection_verify", False)
    put("container", "database", params.get("database"))
    put("container", "container", params.get("container"))
    put("query", "text", params.get("query"))
    put("query", "page_size", params.get("page_size"))
    if params.get("log_level"):
        put("logging", "level", params["log_level"].upper())
    if params.get("log_format"):
        put("logging", "format", params["log_format"].lower())

    for key in ("family_count", "seed", "read_back"):
        if params.get(key) is not None:
            overrides[key] = params[key]
    return overrides


def _load_config(config_file: Optional[Path], **params: Any) -> SamplesConfig:
    try:
        config = ConfigManager().load(
            config_file=str(config_file) if config_file else None,
            cli_overrides=_overrides(**params),
        )
    except (ValidationError, ValueError, FileNotFoundError) as e:
        click.echo(f"[ERROR] Invalid configuration: {e}", err=True)
        sys.exit(2)

    setup_logging(
        level=config.logging.level,
        format_type=config.logging.format,
        log_file=config.logging.file,
        rotation_size=config.logging.rotation_size,
        rotation_count=config.logging.rotation_count,
        module_levels=config.logging.module_levels,
    )
    return config


def _execute(sample: BaseSample, runner: Callable[[], SampleReport], metrics_file: Optional[Path]) -> None:
    """Run a sample, report its outcome and exit non-zero on any failure."""
    try:
        report = runner()
    except Exception as e:
        logger.error(f"Cosmos getStarted failed with {e}", exc_info=e)
        sample.report.errors.append(describe_error("get_started", e))
        report = sample.report

    if metrics_file:
        sample.metrics.write(str(metrics_file))
        logger.info(f"Metrics written to {metrics_file}")

    click.echo(json.dumps(report.summary(), indent=2))
    if not report.succeeded:
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="cosmos-samples")
@click.pass_context
def cli(ctx):
    """
    Azure Cosmos DB getting-started samples.

    Create a database and container, write family documents, read them
    back and run a paged query, logging the request charge of each step.
    """
    ctx.ensure_object(dict)


@cli.command("sync")
@sample_options
@click.option("--no-read-back", is_flag=True, help="Skip the point reads")
def sync_command(config_file: Optional[Path], metrics_file: Optional[Path], no_read_back: bool, **params: Any):
    """
    Run the synchronous sample with the four sample families.

    Examples:
        cosmos-samples sync --insecure --key <emulator key>
        cosmos-samples sync -c samples.yaml --query by-last-name
    """
    config = _load_config(config_file, read_back=False if no_read_back else None, **params)
    sample = SyncSample(config)
    _execute(sample, sample.run, metrics_file)


@cli.command("async")
@sample_options
@click.option("--count", "family_count", type=click.IntRange(min=1), help="Number of families to generate")
@click.option("--seed", type=int, help="Seed for reproducible families")
@click.option("--no-read-back", is_flag=True, help="Skip the point reads")
def async_command(
    config_file: Optional[Path],
    metrics_file: Optional[Path],
    no_read_back: bool,
    **params: Any,
):
    """
    Run the asynchronous sample with generated families.

    Examples:
        cosmos-samples async --count 20 --seed 7
        cosmos-samples async --query boys-without-district
    """
    config = _load_config(config_file, read_back=False if no_read_back else None, **params)
    sample = AsyncSample(config)
    _execute(sample, lambda: asyncio.run(sample.run()), metrics_file)


@cli.command("passwordless")
@sample_options
def passwordless_command(config_file: Optional[Path], metrics_file: Optional[Path], **params: Any):
    """
    Run the asynchronous sample with Azure AD authentication.

    The database and container must already exist; with RBAC they can only
    be created through the control plane (portal, CLI or ARM templates).
    """
    config = _load_config(config_file, **params)
    sample = PasswordlessSample(config)
    _execute(sample, lambda: asyncio.run(sample.run()), metrics_file)


@cli.command()
@click.option("--count", default=3, show_default=True, type=click.IntRange(min=1), help="Families to generate")
@click.option("--seed", type=int, help="Seed for reproducible families")
def generate(count: int, seed: Optional[int]):
    """Print randomly generated family documents as JSON."""
    families = FamilyGenerator(seed=seed).generate_families(count)
    click.echo(json.dumps([family.to_document() for family in families], indent=2))


@cli.command()
def queries():
    """List the named queries."""
    for name, text in NAMED_QUERIES.items():
        click.echo(f"{name}:")
        click.echo(f"  {text}")


@cli.command()
def version():
    """Show the samples version."""
    click.echo(f"cosmos-samples version {__version__}")


def main():
    """Main entry point for CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
