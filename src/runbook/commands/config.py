# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
Config command for sensu-runbook.

Provides basic configuration validation.
"""

import typer

from runbook.config import build_config, load_config
from runbook.errors import InputError

app = typer.Typer(help="Manage and validate configuration")


@app.command()
def validate(
    config_path: str = typer.Option(..., "--config", "-c", envvar="SENSU_RUNBOOK_CONFIG", help="Path to config file"),
):
    """
    Validate configuration file.

    Checks that the config file exists, is valid YAML and holds
    everything a dispatch needs.
    """
    typer.echo("Validating configuration...")
    typer.echo()

    try:
        config = build_config({}, load_config(config_path))
        config.validate()
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    except InputError as e:
        typer.echo(f"Validation failed: {e}", err=True)
        raise typer.Exit(1)

    typer.echo("Configuration structure is valid")
    typer.echo()
    for key, value in config.redacted().items():
        if value:
            typer.echo(f"{key}: {value}")
    typer.echo()
    typer.echo("Configuration validation complete!")
