"""Service commands: HTTP API and MCP tool server."""

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
import uvicorn

from sse_converter.api import create_app
from sse_converter.config import load_settings
from sse_converter.tools import create_server

from .common import err_console, setup_logging


app = typer.Typer(help="Converter service commands")

logger = logging.getLogger(__name__)


class McpTransport(str, Enum):
    STDIO = "stdio"
    SSE = "sse"


@app.command("http")
def serve_http(
    host: Annotated[
        Optional[str],
        typer.Option("--host", help="Bind address (default from config: 0.0.0.0)")
    ] = None,
    port: Annotated[
        Optional[int],
        typer.Option("--port", "-p", envvar="PORT", help="Listen port (default from config: 3001)")
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="YAML config file")
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging")
    ] = False,
) -> None:
    """Run the HTTP conversion API.

    Example:
        sse-converter serve http --port 3001
    """
    setup_logging(verbose)
    settings = load_settings(config_path)

    bind_host = host or settings.server.host
    bind_port = port or settings.server.port

    logger.info(f"SSE Converter HTTP API running on {bind_host}:{bind_port}")
    logger.info(f"Health check: http://localhost:{bind_port}/health")
    logger.info(f"API documentation: http://localhost:{bind_port}/api/tools")

    uvicorn.run(create_app(settings), host=bind_host, port=bind_port, log_config=None)


@app.command("mcp")
def serve_mcp(
    transport: Annotated[
        McpTransport,
        typer.Option("--transport", help="MCP transport")
    ] = McpTransport.STDIO,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="YAML config file")
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging")
    ] = False,
) -> None:
    """Run the MCP tool server (stdio by default)."""
    setup_logging(verbose, stderr=True)

    try:
        server = create_server(load_settings(config_path))
        logger.info(f"SSE converter MCP server started ({transport.value})")
        server.run(transport=transport.value)
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Interrupted by user[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        err_console.print(f"\n[red]Error:[/red] {e}")
        logger.exception("MCP server failed to start")
        raise typer.Exit(1)
