"""Convert command: SSE text, files or event objects to preset JSON."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
import yaml
from pydantic import ValidationError

from sse_converter.config import load_settings
from sse_converter.errors import ConverterError, FileReadError
from sse_converter.models.record import NormalizedRecord, TimestampStrategy
from sse_converter.normalizers import convert_from_object, convert_sse_data, parse_object
from sse_converter.storage import render_records, write_records

from .common import console, err_console, setup_logging


logger = logging.getLogger(__name__)


def read_input_file(path: Path) -> str:
    """Read SSE text from a file.

    Raises:
        FileReadError: If the file is missing or not UTF-8 text
    """
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(f"Failed to read file {path}: {e}") from e


def decode_escapes(raw: str) -> str:
    """Turn literal ``\\n`` sequences into line breaks.

    Shell arguments like ``"event:message\\ndata:{}"`` arrive with the
    backslashes intact. Text that already holds real line breaks is
    returned unchanged.
    """
    if "\n" in raw or "\\n" not in raw:
        return raw
    return raw.replace("\\r\\n", "\n").replace("\\n", "\n")


def convert(
    ctx: typer.Context,
    raw: Annotated[
        Optional[str],
        typer.Option("--raw", "-r", help="SSE text to convert")
    ] = None,
    file: Annotated[
        Optional[Path],
        typer.Option("--file", "-f", help="Read SSE text from a file")
    ] = None,
    sse_object: Annotated[
        Optional[str],
        typer.Option("--object", help="Convert a JSON event object")
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output file (default: stdout)")
    ] = None,
    timestamp: Annotated[
        Optional[str],
        typer.Option("--timestamp", "-t", help="Fallback timestamp (epoch ms)")
    ] = None,
    strategy: Annotated[
        Optional[TimestampStrategy],
        typer.Option("--strategy", "-s", help="Timestamp strategy (default from config: payload)")
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
    """Convert SSE data into a preset JSON array.

    Example:
        sse-converter convert --raw "event:message\\ndata:{\\"test\\":\\"data\\"}\\n\\n"
        sse-converter convert --file input.txt --output preset-data/converted.json
        sse-converter convert --object '{"event":"message","sseId":"123","content":"hello"}'
    """
    setup_logging(verbose, stderr=True)

    sources = [name for name, value in (("--raw", raw), ("--file", file), ("--object", sse_object)) if value]
    if not sources:
        err_console.print("[red]Error:[/red] No input data provided")
        typer.echo(ctx.get_help())
        raise typer.Exit(0)
    if len(sources) > 1:
        err_console.print(f"[red]Error:[/red] Provide only one of {', '.join(sources)}")
        raise typer.Exit(1)

    try:
        settings = load_settings(config_path)
    except (OSError, yaml.YAMLError, ValidationError) as e:
        err_console.print(f"[red]Error:[/red] Invalid configuration: {e}")
        raise typer.Exit(1)

    strategy = strategy or settings.timestamp_strategy

    try:
        records: list[NormalizedRecord]
        if sse_object:
            records = [convert_from_object(parse_object(sse_object), timestamp)]
        else:
            text = read_input_file(file) if file else decode_escapes(raw or "")
            records = convert_sse_data(
                text,
                timestamp,
                strategy=strategy,
                increment_range=settings.increment_range,
            )
    except ConverterError as e:
        err_console.print(f"[red]Conversion failed:[/red] {e}")
        logger.debug(f"Offending input: {e.detail!r}")
        raise typer.Exit(1)

    if output:
        try:
            write_records(records, output)
        except OSError as e:
            err_console.print(f"[red]Error:[/red] Failed to write {output}: {e}")
            raise typer.Exit(1)
        console.print(f"[bold green]✓ Conversion completed[/bold green]: {output}")
        console.print(f"  Events: {len(records)}")
    else:
        typer.echo(render_records(records))
