"""Minimal GitHub REST client for contents, refs, pulls and labels."""

from __future__ import annotations

import base64
import logging
from typing import Any
from urllib.parse import quote

import requests

from sarifix.core.errors import GitHubAPIError

logger = logging.getLogger(__name__)

RAW_MEDIA_TYPE = "application/vnd.github.v3.raw"
JSON_MEDIA_TYPE = "application/vnd.github+json"


class GitHubClient:
    """GitHub API client bound to one repository."""

    def __init__(
        self,
        repository: str,
        token: str,
        api_url: str = "https://api.github.com",
        timeout: float = 30,
        session: requests.Session | None = None,
    ):
        self.repository = repository
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": JSON_MEDIA_TYPE,
            "User-Agent": "sarifix",
        })

    @property
    def repo_url(self) -> str:
        return f"{self.api_url}/repos/{self.repository}"

    def get_raw_content(self, path: str, ref: str | None = None) -> str:
        """File content as text, using the raw media type."""
        params = {"ref": ref} if ref else None
        response = self._request(
            "GET", self._contents_url(path), params=params, headers={"Accept": RAW_MEDIA_TYPE}
        )
        try:
            return response.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise GitHubAPIError(f"{path} is not UTF-8 text", request=f"GET {path}") from e

    def get_file_sha(self, path: str, ref: str | None = None) -> str | None:
        """Blob sha of ``path``; None when the file does not exist on ``ref``."""
        params = {"ref": ref} if ref else None
        try:
            data = self._request("GET", self._contents_url(path), params=params).json()
        except GitHubAPIError as e:
            if e.status == 404:
                return None
            raise
        return data.get("sha")

    def get_ref_sha(self, branch: str) -> str:
        data = self._request("GET", f"{self.repo_url}/git/ref/heads/{quote(branch, safe='/')}").json()
        return data["object"]["sha"]

    def create_branch(self, name: str, sha: str) -> None:
        self._request("POST", f"{self.repo_url}/git/refs", json={"ref": f"refs/heads/{name}", "sha": sha})

    def put_file(
        self,
        path: str,
        content: str,
        message: str,
        branch: str,
        sha: str | None = None,
    ) -> dict[str, Any]:
        """Create or update ``path`` on ``branch``."""
        body: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": branch,
        }
        if sha:
            body["sha"] = sha
        return self._request("PUT", self._contents_url(path), json=body).json()

    def create_pull(self, title: str, head: str, base: str, body: str) -> dict[str, Any]:
        return self._request(
            "POST",
            f"{self.repo_url}/pulls",
            json={"title": title, "head": head, "base": base, "body": body},
        ).json()

    def add_labels(self, number: int, labels: list[str]) -> None:
        self._request("POST", f"{self.repo_url}/issues/{number}/labels", json={"labels": labels})

    def _contents_url(self, path: str) -> str:
        return f"{self.repo_url}/contents/{quote(path.lstrip('/'), safe='/')}"

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        description = f"{method} {url}"
        logger.debug("GitHub request: %s", description)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise GitHubAPIError(f"No response from GitHub: {e}", request=description) from e

        if not response.ok:
            raise GitHubAPIError(
                f"GitHub returned {response.status_code} for {description}",
                request=description,
                status=response.status_code,
                response_body=_body(response),
                response_headers=dict(response.headers),
            )
        return response


def _body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text
