"""Per-file patch aggregation and sequential folding.

Every patch for a file is derived from that file's content as it was when
its finding was processed, never from another patch's output. The patches
are then applied one after another to a single evolving buffer that
starts from a fresh read of the live file, in the order their findings
appeared. A patch whose context no longer matches is skipped and the
buffer carries on unchanged, so one conflict costs one fix, not the file.
"""

from __future__ import annotations

import logging
from typing import Iterable

from sarifix.core.errors import ContentFetchError, PatchConflictError, SolverError
from sarifix.core.models import DEFAULT_RECOMMENDATION, Finding, ItemFailure
from sarifix.fix.diff import DiffEngine
from sarifix.fix.models import AggregationResult, FileAggregate, FoldResult
from sarifix.fix.requester import FixRequester
from sarifix.fix.sources import ContentSource

logger = logging.getLogger(__name__)


class PatchAggregator:
    """Groups findings by file, one patch per finding, and folds each file."""

    def __init__(
        self,
        requester: FixRequester,
        live_source: ContentSource,
        diff_engine: DiffEngine | None = None,
    ):
        self.requester = requester
        self.live_source = live_source
        self.diff_engine = diff_engine or DiffEngine()

    def aggregate(self, findings: Iterable[Finding]) -> AggregationResult:
        """Collect patches for ``findings`` then fold every touched file."""
        aggregates, failures = self.collect(findings)
        result = self.fold_all(aggregates)
        result.failures[:0] = failures
        return result

    def collect(self, findings: Iterable[Finding]) -> tuple[dict[str, FileAggregate], list[ItemFailure]]:
        """One patch per finding, grouped by file in first-seen order.

        The returned map is owned by the caller and lives for one run.
        """
        aggregates: dict[str, FileAggregate] = {}
        failures: list[ItemFailure] = []

        for finding in findings:
            if not finding.file_path:
                logger.debug("Skipping %s: no file location", finding.rule_id)
                continue

            try:
                proposal = self.requester.request(finding)
            except (ContentFetchError, SolverError) as e:
                logger.warning("No fix for %s in %s: %s", finding.rule_id, finding.file_path, e)
                failures.append(ItemFailure(
                    kind="finding",
                    file_path=finding.file_path,
                    message=str(e),
                    rule_id=finding.rule_id,
                ))
                continue

            patch = self.diff_engine.create_patch(
                proposal.file_path, proposal.original_content, proposal.proposed_content
            )
            aggregate = aggregates.get(finding.file_path)
            if aggregate is None:
                aggregate = aggregates[finding.file_path] = FileAggregate(finding.file_path)
            aggregate.add(patch, finding.rule_id, finding.rule.recommendation)
            logger.info(
                "Patch %d for %s from %s (%d hunks)",
                len(aggregate.patches), finding.file_path, finding.rule_id, len(patch.hunks),
            )

        return aggregates, failures

    def fold_all(self, aggregates: dict[str, FileAggregate]) -> AggregationResult:
        """Read each file's live content and fold its patches over it."""
        result = AggregationResult()
        for file_path, aggregate in aggregates.items():
            try:
                # No staleness check against the snapshots the patches came from
                base = self.live_source.read(file_path)
            except ContentFetchError as e:
                logger.warning("Cannot fold %s: %s", file_path, e)
                result.failures.append(ItemFailure(kind="file", file_path=file_path, message=str(e)))
                continue

            folded = self.fold(aggregate, base)
            for conflict in folded.conflicts:
                result.failures.append(ItemFailure(
                    kind="patch",
                    file_path=file_path,
                    message=str(conflict),
                    rule_id=aggregate.rule_ids[conflict.index],
                    index=conflict.index,
                ))
            result.folded[file_path] = folded
        return result

    def fold(self, aggregate: FileAggregate, base: str) -> FoldResult:
        """Apply the aggregate's patches to ``base`` in the order they were added."""
        content = base
        folded = FoldResult(
            file_path=aggregate.file_path,
            base_content=base,
            content=base,
            recommendation=aggregate.recommendation or DEFAULT_RECOMMENDATION,
            patch_count=len(aggregate.patches),
        )

        for index, patch in enumerate(aggregate.patches):
            try:
                content = self.diff_engine.apply_or_raise(content, patch, index)
            except PatchConflictError as e:
                logger.warning("Failed to apply patch %d for %s", index, aggregate.file_path)
                folded.conflicts.append(e)
                continue
            folded.applied.append(index)

        folded.content = content
        return folded
