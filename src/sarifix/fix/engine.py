"""Fix engine: orchestrates SARIF reading, aggregation and submission."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from sarifix.core.config import Credentials, SarifixConfig, load_config, require_repository
from sarifix.core.errors import SubmissionError
from sarifix.core.models import ItemFailure, Submission
from sarifix.fix.aggregator import PatchAggregator
from sarifix.fix.diff import DiffEngine
from sarifix.fix.models import FoldResult, RunReport
from sarifix.fix.requester import FixRequester
from sarifix.fix.solver import SolverClient
from sarifix.fix.sources import RemoteContentSource, WorkspaceContentSource
from sarifix.github.client import GitHubClient
from sarifix.sarif.loader import discover_sarif_files, load_sarif, read_findings
from sarifix.submit.local import LocalWriter
from sarifix.submit.pipeline import SubmissionPipeline

logger = logging.getLogger(__name__)


class Sink(Protocol):
    def submit(self, folded: FoldResult) -> Submission: ...


class FixEngine:
    """Runs every SARIF file through aggregation and hands folded files to a sink.

    With no sink the run is a dry run: files are folded and reported only.
    """

    def __init__(
        self,
        aggregator: PatchAggregator,
        sink: Sink | None = None,
        project_path: Path | None = None,
        config: SarifixConfig | None = None,
    ):
        self.project_path = (project_path or Path.cwd()).resolve()
        self.config = config or load_config(self.project_path)
        self.aggregator = aggregator
        self.sink = sink

    @classmethod
    def remote(
        cls,
        project_path: Path,
        config: SarifixConfig,
        credentials: Credentials,
        dry_run: bool = False,
        local: bool = False,
    ) -> FixEngine:
        """Wire the GitHub and solver clients for a real run. Raises ConfigError."""
        require_repository(config)
        credentials.require()

        github = GitHubClient(
            config.github.repository,
            credentials.github_token,
            api_url=config.github.api_url,
            timeout=config.github.timeout,
        )
        solver = SolverClient(config.solver.url, credentials.api_key, timeout=config.solver.timeout)
        aggregator = PatchAggregator(
            FixRequester(RemoteContentSource(github), solver),
            WorkspaceContentSource(project_path),
            DiffEngine(config.diff.context_lines),
        )

        sink: Sink | None
        if dry_run:
            sink = None
        elif local:
            sink = LocalWriter(project_path)
        else:
            sink = SubmissionPipeline(github, config.github, config.pull_request)
        return cls(aggregator, sink, project_path, config)

    def run(self, sarif_dir: Path | None = None) -> RunReport:
        """Process every SARIF file. SarifFormatError is fatal and propagates."""
        directory = sarif_dir or self.project_path / self.config.sarif.directory
        report = RunReport()

        for sarif_file in discover_sarif_files(directory, self.config.sarif.extension):
            logger.info("Processing SARIF file: %s", sarif_file)
            report.sarif_files += 1
            for analysis in read_findings(load_sarif(sarif_file)):
                report.findings += len(analysis.findings)
                result = self.aggregator.aggregate(analysis.findings)
                report.extend(result)
                for folded in result.folded.values():
                    self._submit(folded, report)

        return report

    def _submit(self, folded: FoldResult, report: RunReport) -> None:
        if not folded.should_submit:
            logger.info("Nothing to submit for %s: no patch changed it", folded.file_path)
            return
        if self.sink is None:
            return
        try:
            report.submissions.append(self.sink.submit(folded))
        except SubmissionError as e:
            logger.warning("%s", e)
            report.failures.append(
                ItemFailure(kind="submission", file_path=folded.file_path, message=str(e))
            )
