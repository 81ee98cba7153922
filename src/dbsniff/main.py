import logging
from typing import List, Optional
from pathlib import Path
import typer
from rich.console import Console
from .config import AppConfig
from .connectors.factory import get_connector
from .domain.models import HealthStatus
from .exceptions import ConfigurationError, ConnectionError, QueryError
from .inspector import InspectorFacade
from .logging_config import setup_logger
from .probes.registry import select_groups
from .report.orchestrator import ReportOrchestrator
from .report.renderer import SEPARATOR, render_report, render_schema

app = typer.Typer(help="MySQL health, security and performance sniffer")

# Interactive prompts for connection fields not given by file, env or options
PROMPTS = {
    "host": ("What is your database host?", str),
    "port": ("What is your database port?", int),
    "user": ("What is your database user?", str),
    "password": ("What is your database password?", str),
    "database": ("What is your database name?", str),
}

@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    setup_logger(logging.DEBUG if verbose else logging.WARNING)

def _load_config(
    config: Optional[Path],
    interactive: bool,
    **overrides,
) -> AppConfig:
    """
    Layers configuration: YAML file (or DBSNIFF_* environment), then command
    line options, then prompts for whatever connection field is still unset.
    """
    try:
        app_config = AppConfig.from_yaml(config) if config else AppConfig()
    except ConfigurationError as e:
        typer.echo(f"Error loading config: {e}", err=True)
        raise typer.Exit(code=1)

    provided = set(app_config.connection.model_fields_set)
    provided.update(k for k, v in overrides.items() if v is not None)

    if interactive:
        current = app_config.connection
        for field, (message, kind) in PROMPTS.items():
            if field in provided:
                continue
            if field == "password":
                overrides[field] = typer.prompt(message, default="", hide_input=True, show_default=False)
            else:
                overrides[field] = typer.prompt(message, default=getattr(current, field), type=kind)

    try:
        return app_config.with_connection(**overrides)
    except ConfigurationError as e:
        typer.echo(f"Error loading config: {e}", err=True)
        raise typer.Exit(code=1)

@app.command()
def sniff(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to YAML configuration file"),
    host: Optional[str] = typer.Option(None, "--host", help="Database host"),
    port: Optional[int] = typer.Option(None, "--port", help="Database port"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Database user"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Database password"),
    database: Optional[str] = typer.Option(None, "--database", "-d", help="Database name"),
    group: Optional[List[str]] = typer.Option(None, "--group", "-g", help="Probe group to run (health, security, performance); repeatable"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
    no_input: bool = typer.Option(False, "--no-input", help="Never prompt; use defaults for missing connection values"),
    json_output: bool = typer.Option(False, "--json", help="Print the report as JSON instead of tables; implies --no-input so stdout holds only the report"),
    strict: bool = typer.Option(False, "--strict", help="Exit with code 2 when any check fails or reports a problem"),
):
    """
    Connects, previews the schema and runs the health, security and
    performance checks in that order.
    """
    try:
        groups = select_groups(group or [])
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    # Prompts echo to stdout, which must hold nothing but the JSON report
    interactive = not (no_input or json_output)
    app_config = _load_config(
        config, interactive=interactive,
        host=host, port=port, user=user, password=password, database=database,
    )

    if not json_output:
        typer.secho(SEPARATOR, fg=typer.colors.BLUE)
        typer.secho(
            "WARNING: The sniffing process may take some time, depending on the database size and performance.",
            fg=typer.colors.BRIGHT_YELLOW, bold=True,
        )
    if interactive and not yes:
        if not typer.confirm("Do you want to perform a database sniff? It may take some time."):
            typer.echo("Sniff cancelled.")
            raise typer.Exit(code=0)

    connector = get_connector(app_config.connection)
    try:
        connector.connect()
    except ConnectionError as e:
        typer.secho(f"Error connecting to the database: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    with connector:
        if not json_output:
            typer.secho("Successfully connected to the database.", fg=typer.colors.GREEN)
        orchestrator = ReportOrchestrator(
            policy=app_config.policy,
            display=app_config.display,
            groups=groups,
        )
        report = orchestrator.run(connector, database=app_config.connection.database)

    if json_output:
        typer.echo(report.model_dump_json(indent=2))
    else:
        render_report(report, Console())

    if strict and (report.has_errors or report.problem_count):
        raise typer.Exit(code=2)

@app.command()
def check_conn(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to YAML configuration file"),
    host: Optional[str] = typer.Option(None, "--host", help="Database host"),
    port: Optional[int] = typer.Option(None, "--port", help="Database port"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Database user"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Database password"),
    database: Optional[str] = typer.Option(None, "--database", "-d", help="Database name"),
    no_input: bool = typer.Option(False, "--no-input", help="Never prompt; use defaults for missing connection values"),
):
    """
    Liveness check only: opens the connection, pings it and reports latency.
    """
    app_config = _load_config(
        config, interactive=not no_input,
        host=host, port=port, user=user, password=password, database=database,
    )
    connector = get_connector(app_config.connection)
    try:
        health = connector.check_health()
    finally:
        connector.close()

    if health.status == HealthStatus.SUCCESS:
        typer.secho(f"✅ {health.db_alias}: Connection Successful ({health.latency_ms}ms)", fg=typer.colors.GREEN)
    elif health.status == HealthStatus.TIMEOUT:
        typer.secho(f"⚠️ {health.db_alias}: Connected but slow ({health.latency_ms}ms)", fg=typer.colors.YELLOW)
    else:
        typer.secho(f"❌ {health.db_alias}: Connection Failed. Error: {health.error_message}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

@app.command()
def schema(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to YAML configuration file"),
    host: Optional[str] = typer.Option(None, "--host", help="Database host"),
    port: Optional[int] = typer.Option(None, "--port", help="Database port"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Database user"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Database password"),
    database: Optional[str] = typer.Option(None, "--database", "-d", help="Database name"),
    no_input: bool = typer.Option(False, "--no-input", help="Never prompt; use defaults for missing connection values"),
):
    """
    Liveness check followed by the schema preview (no probes).
    """
    app_config = _load_config(
        config, interactive=not no_input,
        host=host, port=port, user=user, password=password, database=database,
    )
    connector = get_connector(app_config.connection)
    try:
        inspection = InspectorFacade(connector, app_config.display).run_diagnostics()
    except QueryError as e:
        typer.secho(f"Error retrieving tables: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    finally:
        connector.close()

    if inspection.schema_preview is None:
        typer.secho(
            f"❌ {inspection.health.db_alias}: Connection Failed. Error: {inspection.health.error_message}",
            fg=typer.colors.RED,
        )
        raise typer.Exit(code=1)
    render_schema(inspection.schema_preview, Console())

if __name__ == "__main__":
    app()
