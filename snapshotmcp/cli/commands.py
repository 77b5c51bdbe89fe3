"""CLI commands for snapshot-mcp.

Entry point for both transports: `serve` runs the HTTP gateway, `stdio`
speaks line-delimited JSON-RPC on stdin/stdout.
"""

import asyncio
import errno
import socket
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from snapshotmcp import __logo__, __version__
from snapshotmcp.cli.logging_utils import configure_stderr, ensure_rotating_log_file
from snapshotmcp.config.loader import load_config
from snapshotmcp.config.schema import Config
from snapshotmcp.tools import build_catalog

app = typer.Typer(
    name="snapshot-mcp",
    help=f"{__logo__} snapshot-mcp - MCP gateway for Snapshot governance",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} snapshot-mcp v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """snapshot-mcp - MCP gateway for Snapshot governance."""
    load_dotenv()


def _load(config_path: Optional[Path]) -> Config:
    try:
        return load_config(config_path)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def _port_in_use(host: str, port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((host, port))
            return False
        except OSError as e:
            if e.errno == errno.EADDRINUSE:
                return True
            raise


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Bind host (default from config)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port (default from config / PORT)"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.json"),
    log_level: str = typer.Option("INFO", "--log-level", "-l", help="Log level"),
    log_file: bool = typer.Option(True, "--log-file/--no-log-file", help="Also log to ~/.snapshot-mcp/logs/serve.log"),
):
    """Start the HTTP gateway (POST /mcp, GET /health)."""
    from snapshotmcp.api.server import run_server

    configure_stderr(log_level)
    config = _load(config_path)
    bind_host = host or config.server.host
    bind_port = port or config.server.port

    if _port_in_use(bind_host, bind_port):
        console.print(
            f"[red]Port {bind_port} is already in use.[/red] "
            f"Stop the process using it or pass [cyan]--port[/cyan] (current: {bind_host}:{bind_port})."
        )
        raise typer.Exit(1)

    console.print(f"{__logo__} Snapshot MCP Server v{__version__} starting")
    console.print(f"  Server:       http://{bind_host}:{bind_port}")
    console.print(f"  MCP endpoint: http://{bind_host}:{bind_port}/mcp")
    console.print(f"  Health check: http://{bind_host}:{bind_port}/health")
    console.print(f"  Snapshot hub: {config.hub.hub_url}")
    if log_file:
        log_path = ensure_rotating_log_file("serve", level=log_level)
        console.print(f"[dim]Logs: {log_path}[/dim]")
    catalog = build_catalog()
    console.print(f"[dim]{len(catalog)} tools available: {', '.join(catalog.tool_names)}[/dim]")

    run_server(config, host=bind_host, port=bind_port)


@app.command()
def stdio(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.json"),
    log_level: str = typer.Option("WARNING", "--log-level", "-l", help="Log level (stderr)"),
):
    """Speak MCP over stdin/stdout, one JSON-RPC message per line."""
    from snapshotmcp.api.stdio import run_stdio_server

    configure_stderr(log_level)
    config = _load(config_path)
    try:
        asyncio.run(run_stdio_server(config))
    except KeyboardInterrupt:
        pass


@app.command()
def tools():
    """List the operation catalog."""
    table = Table(title="Snapshot MCP tools")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Required")
    table.add_column("Description")
    for op in build_catalog():
        table.add_row(op.name, ", ".join(op.required) or "-", op.description)
    console.print(table)


@app.command()
def version():
    """Show version."""
    console.print(f"{__logo__} snapshot-mcp v{__version__}")
