"""Where file content is read from: the remote repository or the local checkout."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from sarifix.core.errors import ContentFetchError, GitHubAPIError
from sarifix.github.client import GitHubClient


class ContentSource(Protocol):
    def read(self, file_path: str) -> str: ...


class RemoteContentSource:
    """Reads files through the GitHub contents API."""

    def __init__(self, client: GitHubClient, ref: str | None = None):
        self.client = client
        self.ref = ref

    def read(self, file_path: str) -> str:
        try:
            return self.client.get_raw_content(file_path, ref=self.ref)
        except GitHubAPIError as e:
            raise ContentFetchError.wrap(f"Cannot fetch {file_path}", e) from e


class WorkspaceContentSource:
    """Reads files from a local checkout, confined to its root."""

    def __init__(self, root: Path):
        self.root = root.resolve()

    def resolve(self, file_path: str) -> Path:
        path = (self.root / file_path).resolve()
        if path != self.root and self.root not in path.parents:
            raise ContentFetchError(f"{file_path} is outside the workspace {self.root}")
        return path

    def read(self, file_path: str) -> str:
        path = self.resolve(file_path)
        try:
            # newline="" keeps CRLF intact so patches see the bytes git sees
            with open(path, encoding="utf-8", newline="") as f:
                return f.read()
        except FileNotFoundError as e:
            raise ContentFetchError(f"File not found in workspace: {file_path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise ContentFetchError(f"Cannot read {file_path}: {e}") from e
