"""CLI entrypoint: Typer app definition and command registration"""

from typing import Annotated

import typer

from mdxld.cli.commands import (
    ingest_cmd, init_cmd, links_cmd, parse_cmd, stringify_cmd, validate_cmd,
)
from mdxld.config import load_config
from mdxld.logging_config import configure_logging


app = typer.Typer(name="mdxld", no_args_is_help=True, help="MDX linked-data documents: parse, stringify, relationships")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
    ):
    """Configure logging before any command runs."""
    try:
        level = load_config().log_level
    except ValueError:
        # the command reports the bad config when it loads settings
        level = None
    configure_logging(verbose=verbose, level=level)


app.command(name="parse")(parse_cmd)
app.command(name="stringify")(stringify_cmd)
app.command(name="validate")(validate_cmd)
app.command(name="links")(links_cmd)
app.command(name="ingest")(ingest_cmd)
app.command(name="init")(init_cmd)
