"""Writes folded content into the local checkout with backup support."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

from sarifix.core.config import get_state_dir
from sarifix.core.errors import ContentFetchError, SubmissionError
from sarifix.core.models import Submission
from sarifix.fix.models import FoldResult
from sarifix.fix.sources import WorkspaceContentSource

logger = logging.getLogger(__name__)


class LocalWriter:
    """Applies folded files in place instead of opening pull requests."""

    def __init__(self, workspace: Path):
        self.workspace = WorkspaceContentSource(workspace)
        self.backup_session = (
            get_state_dir(self.workspace.root) / "backups" / datetime.now().strftime("%Y-%m-%dT%H-%M-%S")
        )

    def submit(self, folded: FoldResult) -> Submission:
        try:
            path = self.workspace.resolve(folded.file_path)
        except ContentFetchError as e:
            raise SubmissionError(str(e)) from e

        try:
            backup = self._create_backup(folded.file_path, path, folded.base_content)
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(folded.content)
        except OSError as e:
            raise SubmissionError(f"Cannot write {folded.file_path}: {e}") from e

        logger.info("Wrote %s (backup %s)", folded.file_path, backup)
        return Submission(file_path=folded.file_path, branch="", number=0, url=str(path))

    def _create_backup(self, file_path: str, path: Path, content: str) -> Path:
        """Save the pre-fold content and record it in the session manifest."""
        self.backup_session.mkdir(parents=True, exist_ok=True)

        backup_file = self.backup_session / f"{path.name}.bak"
        counter = 1
        while backup_file.exists():
            backup_file = self.backup_session / f"{path.name}.{counter}.bak"
            counter += 1
        with open(backup_file, "w", encoding="utf-8", newline="") as f:
            f.write(content)

        manifest_file = self.backup_session / "manifest.json"
        manifest = []
        if manifest_file.exists():
            manifest = json.loads(manifest_file.read_text())

        manifest.append({
            "file": file_path,
            "backup": str(backup_file),
            "timestamp": datetime.now().isoformat(timespec="seconds"),
        })
        manifest_file.write_text(json.dumps(manifest, indent=2))
        return backup_file
