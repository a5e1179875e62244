"""Entry point for ``python3 -m craprs``."""

from craprs.cli.main import cli

cli()
