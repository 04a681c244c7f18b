"""Shared fakes for sarifix tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from sarifix.core.errors import ContentFetchError, SolverError


class FakeSource:
    """Content source backed by a dict; counts reads per path."""

    def __init__(self, files: dict[str, str]):
        self.files = files
        self.reads: list[str] = []

    def read(self, file_path: str) -> str:
        self.reads.append(file_path)
        if file_path not in self.files:
            raise ContentFetchError(f"File not found: {file_path}")
        return self.files[file_path]


class FakeSolver:
    """Returns a canned solution per rule id; an exception value is raised."""

    def __init__(self, solutions: dict[str, Any]):
        self.solutions = solutions
        self.requests: list[dict[str, Any]] = []

    def solve(self, annotated_result: dict[str, Any]) -> str:
        self.requests.append(annotated_result)
        solution = self.solutions.get(annotated_result["ruleId"])
        if solution is None:
            raise SolverError(f"No solution for {annotated_result['ruleId']}")
        if isinstance(solution, Exception):
            raise solution
        return solution


def make_result(rule_id: str, uri: str | None) -> dict[str, Any]:
    result: dict[str, Any] = {"ruleId": rule_id, "message": {"text": f"{rule_id} issue"}}
    if uri is not None:
        result["locations"] = [{"physicalLocation": {"artifactLocation": {"uri": uri}}}]
    return result


def make_rule(rule_id: str, description: str | None = None, recommendation: str | None = None) -> dict[str, Any]:
    rule: dict[str, Any] = {"id": rule_id}
    if description is not None:
        rule["fullDescription"] = {"text": description}
    if recommendation is not None:
        rule["help"] = {"text": recommendation}
    return rule


def make_sarif(results: list[dict], rules: list[dict] | None = None) -> dict[str, Any]:
    return {
        "version": "2.1.0",
        "runs": [{
            "tool": {
                "driver": {"name": "CodeQL", "rules": []},
                "extensions": [{"name": "codeql/javascript-queries", "rules": rules or []}],
            },
            "results": results,
        }],
    }


@pytest.fixture
def sarif_dir(tmp_path: Path) -> Path:
    directory = tmp_path / ".github" / "codeql-analysis"
    directory.mkdir(parents=True)
    return directory


def write_sarif(directory: Path, name: str, document: dict[str, Any]) -> Path:
    path = directory / name
    path.write_text(json.dumps(document))
    return path
