#!/usr/bin/env python3

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console as RichConsole
from rich.logging import RichHandler

from pypatcher.config import ConfigError, PatcherConfig
from pypatcher.console import Console
from pypatcher.patcher import apply_patches

LOG_LEVELS = ["debug", "info", "warning", "error"]


def setup_logging(level: str) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=RichConsole(stderr=True), show_path=False)],
        force=True,
    )


@click.command()
@click.option(
    "--patches-dir",
    envvar="PYPATCHER_PATCHES_DIR",
    type=click.Path(file_okay=False, dir_okay=True),
    help="Directory containing pm-<MODULE>-<VERSION>-<TOPIC>.patch files",
)
@click.option("-R", "--reverse", is_flag=True, help="Reverse-apply the patches")
@click.option("--dry-run", is_flag=True, help="Only report what would be done")
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON config file (default: ~/.config/pypatcher.json if present)",
)
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="warning",
    show_default=True,
)
@click.option("-v", "--verbose", is_flag=True, help="Shortcut for --log-level=info")
@click.option("--debug", is_flag=True, help="Shortcut for --log-level=debug")
def main(
    patches_dir: str | None,
    reverse: bool,
    dry_run: bool,
    config_file: Path | None,
    as_json: bool,
    log_level: str,
    verbose: bool,
    debug: bool,
):
    """Apply a set of module patches on your Python installation.

    Every file in PATCHES_DIR named like

        pm-<MODULE-NAME-DASH-SEPARATED>-<VERSION>-<TOPIC>.patch

    is fed to patch(1) inside the directory of the installed module. Patches
    that are already applied are skipped, so running again is safe.
    """
    if debug:
        log_level = "debug"
    elif verbose:
        log_level = "info"
    setup_logging(log_level)

    try:
        config = PatcherConfig.find_config(config_file) or PatcherConfig()
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    config = config.merged(
        patches_dir=patches_dir, reverse=reverse or None, dry_run=dry_run or None
    )

    envelope = apply_patches(config)

    if as_json:
        click.echo(json.dumps(envelope.model_dump(), indent=2))
    elif "table.fields" in envelope.metadata:
        Console().print_report(envelope)
    else:
        Console(stderr=True).print_error(envelope)

    sys.exit(0 if envelope.is_success else 1)


if __name__ == "__main__":
    main()
