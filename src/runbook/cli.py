# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
Main CLI entry point for sensu-runbook.

Dumb trigger: binds flags and environment, builds config, dispatches.
Exit status is the Sensu check state: 0 OK, 1 warning, 2 critical.
"""

import logging
import sys
from typing import Optional

import typer

from runbook import __version__
from runbook.config import build_config, load_config
from runbook.dispatcher import dispatch
from runbook.errors import InputError
from runbook.schemas import ExitOutcome


app = typer.Typer(
    name="sensu-runbook",
    help="Sensu Runbook Automation. Execute commands on Sensu Agent nodes.",
    no_args_is_help=True,
)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@app.command()
def run(
    job_id: Optional[str] = typer.Option(
        None, "--id", "-i", envvar="SENSU_RUNBOOK_JOB_ID",
        help="The ID or name to use for the job (defaults to a random UUIDv4)",
    ),
    command: Optional[str] = typer.Option(
        None, "--command", "-c", envvar="SENSU_RUNBOOK_COMMAND",
        help="The command that should be executed by the Sensu Go agent(s)",
    ),
    timeout: Optional[str] = typer.Option(
        None, "--timeout", "-t", envvar="SENSU_RUNBOOK_TIMEOUT",
        help="Command execution timeout, in seconds (default: 10)",
    ),
    runtime_assets: Optional[str] = typer.Option(
        None, "--runtime-assets", "-a", envvar="SENSU_RUNBOOK_ASSETS",
        help="Comma-separated list of assets to distribute with the command(s)",
    ),
    subscriptions: Optional[str] = typer.Option(
        None, "--subscriptions", "-s", envvar="SENSU_RUNBOOK_SUBSCRIPTIONS",
        help="Comma-separated list of subscriptions to execute the command(s) on",
    ),
    namespace: Optional[str] = typer.Option(
        None, "--namespace", "-n", envvar="SENSU_NAMESPACE",
        help="Sensu Namespace to perform the runbook automation (defaults to $SENSU_NAMESPACE)",
    ),
    sensu_api_url: Optional[str] = typer.Option(
        None, "--sensu-api-url", envvar="SENSU_API_URL",
        help="Sensu API URL (defaults to $SENSU_API_URL)",
    ),
    sensu_access_token: Optional[str] = typer.Option(
        None, "--sensu-access-token", envvar="SENSU_ACCESS_TOKEN",
        help="Sensu API Access Token (defaults to $SENSU_ACCESS_TOKEN)",
    ),
    sensu_trusted_ca_file: Optional[str] = typer.Option(
        None, "--sensu-trusted-ca-file", envvar="SENSU_TRUSTED_CA_FILE",
        help="Sensu API Trusted Certificate Authority File (defaults to $SENSU_TRUSTED_CA_FILE)",
    ),
    event_log: Optional[str] = typer.Option(
        None, "--event-log", envvar="SENSU_RUNBOOK_EVENT_LOG",
        help="Append create/execute results to this JSONL file",
    ),
    config_path: Optional[str] = typer.Option(
        None, "--config", envvar="SENSU_RUNBOOK_CONFIG", help="Path to YAML config file",
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the request bodies without calling the API"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Register a runbook job and execute it on the given subscriptions."""
    _setup_logging(verbose)

    options = {
        "job_id": job_id,
        "command": command,
        "timeout": timeout,
        "runtime_assets": runtime_assets,
        "subscriptions": subscriptions,
        "namespace": namespace,
        "sensu_api_url": sensu_api_url,
        "sensu_access_token": sensu_access_token,
        "sensu_trusted_ca_file": sensu_trusted_ca_file,
        "event_log": event_log,
    }

    try:
        config = build_config(options, load_config(config_path))
    except (FileNotFoundError, InputError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(int(ExitOutcome.WARNING))

    outcome = dispatch(config, dry_run=dry_run)
    raise typer.Exit(int(outcome))


@app.command()
def version():
    """Show version information."""
    typer.echo(f"sensu-runbook version {__version__}")


# Static commands (config)
from runbook.commands import config

app.add_typer(config.app, name="config")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
