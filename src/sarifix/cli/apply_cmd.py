"""sarifix apply command."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from sarifix.core.errors import PatchConflictError
from sarifix.core.output import console
from sarifix.fix.diff import DiffEngine


@click.command()
@click.argument("patch_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("target", type=click.Path(exists=True, dir_okay=False))
@click.option("--check", is_flag=True, help="Only report whether the patch applies")
def apply(patch_file: str, target: str, check: bool):
    """Apply the unified diff in PATCH_FILE to TARGET.

    Context must match exactly; a mismatch leaves TARGET untouched.
    """
    engine = DiffEngine()
    try:
        patch = engine.parse_patch(Path(patch_file).read_text(encoding="utf-8"))
    except ValueError as e:
        console.print(f"\n  [red]Malformed patch: {e}[/red]\n")
        sys.exit(1)

    target_path = Path(target)
    with open(target_path, encoding="utf-8", newline="") as f:
        content = f.read()

    try:
        patched = engine.apply_or_raise(content, patch)
    except PatchConflictError:
        console.print(f"\n  [red]Patch does not apply to {target}.[/red]\n")
        sys.exit(1)

    if check:
        console.print(f"\n  [green]Patch applies cleanly to {target}.[/green]\n")
        return

    with open(target_path, "w", encoding="utf-8", newline="") as f:
        f.write(patched)
    console.print(f"\n  [green]Applied {len(patch.hunks)} hunk(s) to {target}.[/green]\n")
