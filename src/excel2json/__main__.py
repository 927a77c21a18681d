"""Allow ``python -m excel2json``."""

from excel2json import cli

cli.app()
