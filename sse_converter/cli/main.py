"""CLI entry point for sse-converter."""

import typer

from .convert import convert
from .serve import app as serve_app

app = typer.Typer(
    name="sse-converter",
    help="Convert SSE streams and event objects into replay preset data.",
    no_args_is_help=True,
)

# Register subcommands
app.command("convert")(convert)
app.add_typer(serve_app, name="serve", help="Run the HTTP or MCP service")


if __name__ == "__main__":
    app()
