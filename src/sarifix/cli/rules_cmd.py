"""sarifix rules command."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from sarifix.core.errors import SarifFormatError
from sarifix.core.output import console, print_fatal, print_rules
from sarifix.sarif.loader import load_sarif
from sarifix.sarif.rules import RuleCatalog


@click.command()
@click.argument("sarif_file", type=click.Path(exists=True, dir_okay=False))
def rules(sarif_file: str):
    """Show how each rule id in SARIF_FILE resolves."""
    try:
        document = load_sarif(Path(sarif_file))
    except SarifFormatError as e:
        print_fatal(e)
        sys.exit(1)

    for index, run in enumerate(document["runs"]):
        if not isinstance(run, dict):
            continue
        console.print(f"\n  [bold]Run {index}[/bold]")
        print_rules(RuleCatalog.from_run(run))
