"""SARIF discovery, parsing and finding extraction."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from sarifix.core.errors import SarifFormatError
from sarifix.core.models import Finding
from sarifix.sarif.rules import RuleCatalog

logger = logging.getLogger(__name__)


@dataclass
class AnalysisRun:
    """One SARIF run: its rule table and its findings in report order."""

    catalog: RuleCatalog
    findings: list[Finding] = field(default_factory=list)
    tool: str = ""


def discover_sarif_files(directory: Path, extension: str = ".sarif") -> list[Path]:
    """List SARIF files directly inside ``directory``, sorted by name."""
    if not directory.is_dir():
        raise SarifFormatError(f"SARIF directory not found: {directory}")
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix == extension)


def load_sarif(path: Path) -> dict[str, Any]:
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise SarifFormatError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SarifFormatError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(document, dict) or not isinstance(document.get("runs"), list):
        raise SarifFormatError(f"{path} has no 'runs' list")
    return document


def result_file_path(result: dict[str, Any]) -> str | None:
    """``locations[0].physicalLocation.artifactLocation.uri``, or None."""
    locations = result.get("locations") or []
    if not locations or not isinstance(locations[0], dict):
        return None
    physical = locations[0].get("physicalLocation") or {}
    artifact = physical.get("artifactLocation") or {}
    uri = artifact.get("uri")
    if not isinstance(uri, str) or not uri:
        return None
    return uri


def read_findings(document: dict[str, Any]) -> list[AnalysisRun]:
    """Build one AnalysisRun per SARIF run that has results."""
    runs = []
    for index, run in enumerate(document.get("runs", [])):
        if not isinstance(run, dict):
            raise SarifFormatError(f"Run {index} is not an object")
        results = run.get("results")
        if not results:
            continue
        if not isinstance(results, list):
            raise SarifFormatError(f"Run {index} 'results' is not a list")

        catalog = RuleCatalog.from_run(run)
        driver = (run.get("tool") or {}).get("driver") or {}
        analysis = AnalysisRun(catalog=catalog, tool=driver.get("name", ""))
        for result in results:
            if not isinstance(result, dict):
                raise SarifFormatError(f"Run {index} has a result that is not an object")
            rule_id = result.get("ruleId", "")
            analysis.findings.append(
                Finding(
                    rule_id=rule_id,
                    file_path=result_file_path(result),
                    raw_result=result,
                    rule=catalog.resolve(rule_id),
                )
            )
        logger.debug(
            "Run %d (%s): %d findings, %d rules",
            index, analysis.tool or "unknown tool", len(analysis.findings), len(catalog),
        )
        runs.append(analysis)
    return runs
