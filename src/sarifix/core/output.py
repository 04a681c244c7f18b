"""Rich terminal formatting for sarifix output."""

from __future__ import annotations

import json
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from sarifix.core.errors import SarifixError
from sarifix.fix.diff import DiffEngine
from sarifix.fix.models import FoldResult, RunReport
from sarifix.sarif.rules import RuleCatalog

console = Console()
error_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Route sarifix loggers through rich on stderr."""
    handler = RichHandler(console=error_console, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root = logging.getLogger("sarifix")
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.propagate = False


def diff_lines(diff: str) -> list[str]:
    lines = []
    for diff_line in diff.splitlines():
        text = escape(diff_line)
        if diff_line.startswith("-"):
            lines.append(f"  [red]{text}[/red]")
        elif diff_line.startswith("+"):
            lines.append(f"  [green]{text}[/green]")
        elif diff_line.startswith("@@"):
            lines.append(f"  [cyan]{text}[/cyan]")
        else:
            lines.append(f"  {text}")
    return lines


def print_fold_preview(folded: FoldResult) -> None:
    """Show what a folded file would change relative to its live content."""
    patch = DiffEngine().create_patch(folded.file_path, folded.base_content, folded.content)
    lines = [
        f"  {len(folded.applied)}/{folded.patch_count} patches applied",
        f"  Recommendation: {escape(folded.recommendation.splitlines()[0] if folded.recommendation else '')}",
        "",
    ]
    lines.extend(diff_lines(patch.to_unified()) if not patch.is_empty else ["  [dim](no changes)[/dim]"])

    color = "green" if not folded.conflicts else "yellow"
    console.print(Panel(
        "\n".join(lines),
        title=f"[bold]{escape(folded.file_path)}[/bold]",
        border_style=color,
        padding=(0, 1),
    ))


def print_run_report(report: RunReport) -> None:
    """Print the run summary card."""
    lines = [""]
    lines.append(
        f"  {report.sarif_files} SARIF file(s) | {report.findings} findings | "
        f"{len(report.folded)} file(s) folded"
    )
    lines.append("")

    for submission in report.submissions:
        if submission.number:
            lines.append(
                f"  [green]✅ #{submission.number}[/green]  {escape(submission.file_path)}"
                f"  [dim]{escape(submission.branch)}[/dim]"
            )
        else:
            lines.append(f"  [green]✅ written[/green]  {escape(submission.file_path)}")

    for folded in report.folded:
        if not folded.should_submit:
            lines.append(f"  [dim]- unchanged  {escape(folded.file_path)}[/dim]")

    for failure in report.failures:
        where = escape(failure.file_path)
        if failure.index is not None:
            where += f" (patch {failure.index})"
        rule = f" {escape(failure.rule_id)}" if failure.rule_id else ""
        lines.append(f"  [red]❌ {failure.kind}[/red]{rule}  {where}: {escape(failure.message)}")

    lines.append("")
    border = "green" if not report.failures else "yellow"
    console.print(Panel(
        "\n".join(lines),
        title="[bold]sarifix Run Report[/bold]",
        border_style=border,
        padding=(0, 1),
    ))


def print_rules(catalog: RuleCatalog) -> None:
    if not len(catalog):
        console.print("\n  No rules defined in this run.\n")
        return
    for rule_id, info in catalog.items():
        console.print(f"\n  [bold]{escape(rule_id)}[/bold]")
        console.print(f"  {escape(info.description)}")
        console.print(f"  [dim]{escape(info.recommendation.splitlines()[0] if info.recommendation else '')}[/dim]")
    console.print()


def print_fatal(error: Exception) -> None:
    """Report a run-ending error with whatever HTTP context it carries."""
    error_console.print(f"\n  [red bold]Error:[/red bold] {escape(str(error))}")
    if isinstance(error, SarifixError) and error.has_http_context:
        if error.request:
            error_console.print(f"  Request: {escape(error.request)}")
        if error.status is not None:
            error_console.print(f"  Response status: {error.status}")
        if error.response_headers:
            error_console.print(f"  Response headers: {escape(json.dumps(error.response_headers, indent=2))}")
        if error.response_body is not None:
            body = error.response_body
            if not isinstance(body, str):
                body = json.dumps(body, indent=2, default=str)
            error_console.print(f"  Response data: {escape(body)}")
    error_console.print()
