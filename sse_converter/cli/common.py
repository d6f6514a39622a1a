"""Console and logging setup shared by CLI commands."""

import logging

from rich.console import Console
from rich.logging import RichHandler


console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool = False, *, stderr: bool = False) -> None:
    """Setup logging with rich handler.

    Protocol servers talking over stdout log to stderr instead.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console if stderr else console, rich_tracebacks=True)],
        force=True,
    )
