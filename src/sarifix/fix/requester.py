"""Requests one fix per finding from the solver."""

from __future__ import annotations

import logging

from sarifix.core.errors import SolverError
from sarifix.core.models import Finding
from sarifix.fix.models import FixProposal
from sarifix.fix.solver import SolverClient
from sarifix.fix.sources import ContentSource

logger = logging.getLogger(__name__)


class FixRequester:
    """Fetches a finding's file and asks the solver for its replacement.

    One content read and one solver call per finding, with no caching:
    every proposal is made against the content as it is at request time.
    The content source is bound to the repository and the solver to the
    API key, so a request only needs the finding.
    """

    def __init__(self, source: ContentSource, solver: SolverClient):
        self.source = source
        self.solver = solver

    def request(self, finding: Finding) -> FixProposal:
        """Raises ContentFetchError or SolverError."""
        if not finding.file_path:
            raise SolverError(f"Finding {finding.rule_id} has no file location")

        original = self.source.read(finding.file_path)
        logger.debug("Requesting fix for %s in %s", finding.rule_id, finding.file_path)
        proposed = self.solver.solve(finding.annotated_result(original))
        return FixProposal(
            finding=finding,
            file_path=finding.file_path,
            original_content=original,
            proposed_content=proposed,
        )
