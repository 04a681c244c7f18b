"""Click CLI entry point for sarifix."""

from __future__ import annotations

import click

from sarifix._version import __version__


@click.group()
@click.version_option(version=__version__, prog_name="sarifix")
def cli():
    """sarifix - SARIF findings in, one fix pull request per file out.

    Requests a fix for every finding, folds the fixes for each file
    together and opens a pull request with the combined change.
    """
    pass


# Import and register subcommands
from sarifix.cli.run_cmd import run  # noqa: E402
from sarifix.cli.rules_cmd import rules  # noqa: E402
from sarifix.cli.apply_cmd import apply  # noqa: E402

cli.add_command(run)
cli.add_command(rules)
cli.add_command(apply)


if __name__ == "__main__":
    cli()
