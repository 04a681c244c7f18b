"""Fix pipeline data models."""

from __future__ import annotations

from dataclasses import dataclass, field

from sarifix.core.errors import PatchConflictError
from sarifix.core.models import Finding, ItemFailure, Submission


@dataclass(frozen=True)
class FixProposal:
    """The solver's replacement content for one finding."""

    finding: Finding
    file_path: str
    original_content: str
    proposed_content: str


@dataclass(frozen=True)
class Hunk:
    """One contiguous block of a patch.

    Each entry in ``lines`` is a marker (" ", "-" or "+") followed by the
    line text including its line terminator. Only the last line of a file
    may lack a terminator.
    """

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: tuple[str, ...]

    @property
    def old_lines(self) -> list[str]:
        return [line[1:] for line in self.lines if line[0] in " -"]

    @property
    def new_lines(self) -> list[str]:
        return [line[1:] for line in self.lines if line[0] in " +"]


@dataclass(frozen=True)
class Patch:
    """A textual diff for one file, held as parsed hunks."""

    file_path: str
    hunks: tuple[Hunk, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.hunks

    def to_unified(self) -> str:
        """Render as a standard unified diff."""
        from sarifix.fix.diff import format_patch

        return format_patch(self)


@dataclass
class FileAggregate:
    """Patches collected for one file, in finding order."""

    file_path: str
    patches: list[Patch] = field(default_factory=list)
    rule_ids: list[str] = field(default_factory=list)
    recommendation: str | None = None

    def add(self, patch: Patch, rule_id: str, recommendation: str) -> None:
        self.patches.append(patch)
        self.rule_ids.append(rule_id)
        # First recommendation wins, later findings never override it
        if self.recommendation is None:
            self.recommendation = recommendation


@dataclass
class FoldResult:
    """Final content for one file after folding all of its patches."""

    file_path: str
    base_content: str
    content: str
    recommendation: str
    patch_count: int = 0
    applied: list[int] = field(default_factory=list)
    conflicts: list[PatchConflictError] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.content != self.base_content

    @property
    def should_submit(self) -> bool:
        return bool(self.applied) and self.changed


@dataclass
class AggregationResult:
    """Output of one aggregation pass over an analysis run."""

    folded: dict[str, FoldResult] = field(default_factory=dict)
    failures: list[ItemFailure] = field(default_factory=list)


@dataclass
class RunReport:
    """Everything that happened during one sarifix run."""

    folded: list[FoldResult] = field(default_factory=list)
    submissions: list[Submission] = field(default_factory=list)
    failures: list[ItemFailure] = field(default_factory=list)
    sarif_files: int = 0
    findings: int = 0

    def extend(self, result: AggregationResult) -> None:
        self.folded.extend(result.folded.values())
        self.failures.extend(result.failures)

    @property
    def conflict_count(self) -> int:
        return sum(len(f.conflicts) for f in self.folded)

    @property
    def failure_count(self) -> int:
        return len(self.failures)
