"""sarifix run command."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from sarifix.core.config import Credentials, load_config
from sarifix.core.errors import SarifixError
from sarifix.core.output import console, print_fatal, print_fold_preview, print_run_report, setup_logging
from sarifix.fix.engine import FixEngine


@click.command()
@click.option("--workspace", "-w", default=".", help="Local checkout of the repository (default: current dir)")
@click.option("--sarif-dir", type=click.Path(file_okay=False), help="Directory holding .sarif files")
@click.option("--repo", help="Repository as owner/name (default: GITHUB_REPOSITORY)")
@click.option("--github-token", envvar="GITHUB_TOKEN", help="GitHub token (default: GITHUB_TOKEN)")
@click.option("--api-key", envvar="SARIFIX_API_KEY", help="Solver API key (default: SARIFIX_API_KEY)")
@click.option("--dry-run", is_flag=True, help="Fold and preview fixes without submitting")
@click.option("--local", is_flag=True, help="Write fixes into the workspace instead of opening pull requests")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def run(
    workspace: str,
    sarif_dir: str | None,
    repo: str | None,
    github_token: str | None,
    api_key: str | None,
    dry_run: bool,
    local: bool,
    verbose: bool,
):
    """Fix every SARIF finding and open one pull request per file.

    Partial failures are reported and do not change the exit status.
    Missing configuration or malformed SARIF exits with status 1.
    """
    setup_logging(verbose)
    project_path = Path(workspace).resolve()

    try:
        config = load_config(project_path)
        if repo:
            config.github.repository = repo
        credentials = Credentials(github_token=github_token or "", api_key=api_key or "")

        engine = FixEngine.remote(project_path, config, credentials, dry_run=dry_run, local=local)
        report = engine.run(Path(sarif_dir).resolve() if sarif_dir else None)
    except SarifixError as e:
        print_fatal(e)
        sys.exit(1)

    if dry_run:
        for folded in report.folded:
            print_fold_preview(folded)

    print_run_report(report)
    if not report.folded:
        console.print("  [dim]No fixable findings.[/dim]\n")
