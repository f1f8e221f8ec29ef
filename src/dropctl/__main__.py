"""Allow ``python -m dropctl``."""

from dropctl.cli import cli

cli()
