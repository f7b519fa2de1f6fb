"""Command-line interface for the landing zone naming engine.

Commands:
- 'names': Compose every resource name for a module deployment
- 'resolve': Resolve names plus configuration and print them as YAML/JSON
- 'suffix': Show (or assign) the persisted random suffix of a deployment
- 'regions': List region abbreviations or abbreviate one region
- 'init-config': Write an example override file
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, NoReturn, Optional

import click
import yaml
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .config.loader import ConfigLoader, create_default_config
from .config.resolver import resolve_module
from .engine import resolve_deployment
from .exceptions import ConfigValidationError, LandingZoneError
from .logging_config import configure_logging, get_logger
from .naming.context import NamingContext, NamingModule
from .naming.suffix_store import SuffixStore, deployment_key
from .naming.templates import get_module_naming
from .regions import RegionAbbreviator

console = Console()
logger = get_logger(__name__)

DEFAULT_STATE_FILE = Path(".alz") / "suffixes.json"
MODULE_CHOICE = click.Choice([m.value for m in NamingModule])


def exit_with_error(error: LandingZoneError) -> NoReturn:
    """Print a landing zone error and exit non-zero."""
    click.echo(f"Error: {error.message}", err=True)
    if isinstance(error, ConfigValidationError):
        for path, message in error.issues:
            click.echo(f"  - {path}: {message}", err=True)
    elif error.context:
        for key, value in error.context.items():
            click.echo(f"  {key}: {value}", err=True)
    if error.recovery_suggestion:
        click.echo(f"Suggestion: {error.recovery_suggestion}", err=True)
    sys.exit(1)


def deployment_options(func):
    """Options shared by commands that address one module deployment."""
    options = [
        click.option(
            "--module", "-m", "module", type=MODULE_CHOICE, required=True,
            help="Landing zone module",
        ),
        click.option(
            "--environment", "-e", envvar="ALZ_ENVIRONMENT", required=True,
            help="Environment name (env: ALZ_ENVIRONMENT)",
        ),
        click.option(
            "--location", "-l", envvar="ALZ_LOCATION", required=True,
            help="Azure region display name, e.g. 'UK South' (env: ALZ_LOCATION)",
        ),
        click.option(
            "--service", "-s", default=None,
            help="Service token; required for spoke (the workload role)",
        ),
        click.option(
            "--suffix", default=None,
            help="Use this random suffix instead of the persisted one",
        ),
        click.option(
            "--state-file", type=click.Path(path_type=Path), envvar="ALZ_SUFFIX_STATE_FILE",
            default=DEFAULT_STATE_FILE, show_default=True,
            help="JSON file holding persisted random suffixes",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _resolve_suffix(
    module: NamingModule,
    environment: str,
    location: str,
    service: Optional[str],
    suffix: Optional[str],
    state_file: Path,
) -> str:
    if suffix:
        return suffix
    ctx = NamingContext.for_module(module, environment, location, service=service)
    key = deployment_key(module.value, environment, location, ctx.service)
    return SuffixStore(state_file).get_or_create(
        key, get_module_naming(module).suffix_length
    )


def _dump(data: Dict[str, Any], output_format: str) -> str:
    if output_format == "json":
        return json.dumps(data, indent=2)
    return yaml.safe_dump(data, sort_keys=False)


@click.group()
@click.option("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--json-logs", is_flag=True, help="Emit structured JSON log lines")
@click.pass_context
def cli(ctx: click.Context, log_level: str, json_logs: bool) -> None:
    """Azure Landing Zone naming and configuration resolution."""
    load_dotenv()
    configure_logging(log_level, json_output=json_logs)
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level.upper()


@cli.command("names")
@deployment_options
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table")
def names(
    module: str,
    environment: str,
    location: str,
    service: Optional[str],
    suffix: Optional[str],
    state_file: Path,
    output_format: str,
) -> None:
    """Compose every resource name for a module deployment."""
    try:
        module_enum = NamingModule(module)
        random_suffix = _resolve_suffix(
            module_enum, environment, location, service, suffix, state_file
        )
        deployment = resolve_deployment(
            module_enum, environment, location, random_suffix, service=service
        )
    except LandingZoneError as e:
        exit_with_error(e)

    logger.info("names_composed", module=module, environment=environment, count=len(deployment.names))

    if output_format == "json":
        click.echo(
            json.dumps({p.value: n for p, n in deployment.names.items()}, indent=2)
        )
        return

    table = Table(title=f"{module} names ({deployment.region}, suffix {random_suffix})")
    table.add_column("Purpose", style="cyan")
    table.add_column("Name", style="green")
    for purpose, name in deployment.names.items():
        table.add_row(purpose.value, name)
    console.print(table)


@cli.command("resolve")
@deployment_options
@click.option(
    "--config", "config_path", type=click.Path(path_type=Path), default=None,
    help="YAML override file (default: $ALZ_CONFIG_PATH or ~/.config/alz-naming/config.yaml)",
)
@click.option("--format", "output_format", type=click.Choice(["yaml", "json"]), default="yaml")
def resolve(
    module: str,
    environment: str,
    location: str,
    service: Optional[str],
    suffix: Optional[str],
    state_file: Path,
    config_path: Optional[Path],
    output_format: str,
) -> None:
    """Resolve names and configuration for a module deployment."""
    try:
        module_enum = NamingModule(module)
        overrides = ConfigLoader(config_path).load_overrides(module_enum)
        # reject bad overrides before a suffix is assigned and persisted
        resolve_module(module_enum, overrides)
        random_suffix = _resolve_suffix(
            module_enum, environment, location, service, suffix, state_file
        )
        deployment = resolve_deployment(
            module_enum,
            environment,
            location,
            random_suffix,
            overrides=overrides,
            service=service,
        )
    except LandingZoneError as e:
        exit_with_error(e)

    click.echo(_dump(deployment.to_dict(), output_format))


@cli.command("suffix")
@click.option("--module", "-m", "module", type=MODULE_CHOICE, required=True)
@click.option("--environment", "-e", envvar="ALZ_ENVIRONMENT", required=True)
@click.option("--location", "-l", envvar="ALZ_LOCATION", required=True)
@click.option("--service", "-s", default=None)
@click.option(
    "--state-file", type=click.Path(path_type=Path), envvar="ALZ_SUFFIX_STATE_FILE",
    default=DEFAULT_STATE_FILE, show_default=True,
)
@click.option("--assign", is_flag=True, help="Assign a suffix if none is stored yet")
def suffix(
    module: str,
    environment: str,
    location: str,
    service: Optional[str],
    state_file: Path,
    assign: bool,
) -> None:
    """Show the persisted random suffix of a deployment."""
    try:
        module_enum = NamingModule(module)
        ctx = NamingContext.for_module(module_enum, environment, location, service=service)
        key = deployment_key(module_enum.value, environment, location, ctx.service)
        store = SuffixStore(state_file)
        if assign:
            value = store.get_or_create(key, get_module_naming(module_enum).suffix_length)
        else:
            value = store.get(key)
    except LandingZoneError as e:
        exit_with_error(e)

    if value is None:
        click.echo(f"No suffix assigned for {key} (use --assign)", err=True)
        sys.exit(1)
    click.echo(value)


@cli.command("regions")
@click.argument("location", required=False)
def regions(location: Optional[str]) -> None:
    """List region abbreviations, or abbreviate LOCATION."""
    abbreviator = RegionAbbreviator()
    if location is not None:
        click.echo(abbreviator.abbreviate(location))
        if not abbreviator.is_known(location):
            click.echo(f"'{location}' is not in the table; derived code used", err=True)
        return

    table = Table(title="Azure region abbreviations")
    table.add_column("Region", style="cyan")
    table.add_column("Code", style="green")
    for region, code in sorted(abbreviator.table.items()):
        table.add_row(region, code)
    console.print(table)


@cli.command("init-config")
@click.option("--path", "config_path", type=click.Path(path_type=Path), default=None)
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init_config(config_path: Optional[Path], force: bool) -> None:
    """Write an example configuration override file."""
    try:
        path = create_default_config(config_path, force=force)
    except LandingZoneError as e:
        exit_with_error(e)
    click.echo(f"Configuration written to {path}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
