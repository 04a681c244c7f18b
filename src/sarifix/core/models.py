"""Shared data models used across sarifix modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

DEFAULT_DESCRIPTION = "Description not provided."
DEFAULT_RECOMMENDATION = "No recommendation provided."


@dataclass(frozen=True)
class RuleInfo:
    """Human-readable text for a rule, resolved per rule id."""

    description: str = DEFAULT_DESCRIPTION
    recommendation: str = DEFAULT_RECOMMENDATION


@dataclass(frozen=True)
class Finding:
    """A single static-analysis result read from a SARIF run."""

    rule_id: str
    file_path: str | None
    raw_result: dict[str, Any] = field(default_factory=dict, compare=False)
    rule: RuleInfo = field(default_factory=RuleInfo)

    def annotated_result(self, file_content: str) -> dict[str, Any]:
        """The raw result plus the keys the solver expects."""
        result = dict(self.raw_result)
        result["fileContent"] = file_content
        result["description"] = self.rule.description
        result["recommendation"] = self.rule.recommendation
        return result


@dataclass
class Submission:
    """A pull request opened for one file."""

    file_path: str
    branch: str
    number: int
    url: str = ""
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class ItemFailure:
    """A per-finding, per-patch or per-file failure that did not abort the run."""

    kind: str  # "finding", "patch", "file", "submission"
    file_path: str
    message: str
    rule_id: str = ""
    index: int | None = None
