"""Tests for the GitHub REST client."""

from __future__ import annotations

import base64
from unittest.mock import MagicMock

import pytest
import requests

from sarifix.core.errors import GitHubAPIError
from sarifix.github.client import RAW_MEDIA_TYPE, GitHubClient


def _response(status: int = 200, payload=None, content: bytes = b"") -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.headers = {"x-github-request-id": "abc"}
    response.content = content
    response.text = content.decode("utf-8", "replace")
    if payload is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def session() -> MagicMock:
    session = MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def client(session: MagicMock) -> GitHubClient:
    return GitHubClient("octo/repo", "tok", api_url="https://api.github.test/", session=session)


class TestGitHubClient:
    def test_sets_auth_headers(self, client: GitHubClient, session: MagicMock):
        assert session.headers["Authorization"] == "Bearer tok"
        assert client.repo_url == "https://api.github.test/repos/octo/repo"

    def test_get_raw_content(self, client: GitHubClient, session: MagicMock):
        session.request.return_value = _response(content="héllo\n".encode("utf-8"))

        assert client.get_raw_content("src/a b.js") == "héllo\n"
        args, kwargs = session.request.call_args
        assert args == ("GET", "https://api.github.test/repos/octo/repo/contents/src/a%20b.js")
        assert kwargs["headers"] == {"Accept": RAW_MEDIA_TYPE}

    def test_get_file_sha_missing_file(self, client: GitHubClient, session: MagicMock):
        session.request.return_value = _response(status=404, payload={"message": "Not Found"})
        assert client.get_file_sha("new.js", ref="fixes/1") is None

    def test_get_ref_sha(self, client: GitHubClient, session: MagicMock):
        session.request.return_value = _response(payload={"object": {"sha": "abc123"}})

        assert client.get_ref_sha("main") == "abc123"
        assert session.request.call_args[0][1].endswith("/git/ref/heads/main")

    def test_put_file_encodes_content(self, client: GitHubClient, session: MagicMock):
        session.request.return_value = _response(payload={"commit": {"sha": "c1"}})

        client.put_file("src/a.js", "fixed\n", "msg", "fixes/1", sha="s1")

        body = session.request.call_args[1]["json"]
        assert base64.b64decode(body["content"]).decode() == "fixed\n"
        assert body["branch"] == "fixes/1"
        assert body["sha"] == "s1"

    def test_error_keeps_http_context(self, client: GitHubClient, session: MagicMock):
        session.request.return_value = _response(status=422, payload={"message": "Reference already exists"})

        with pytest.raises(GitHubAPIError) as exc_info:
            client.create_branch("fixes/1", "abc")

        error = exc_info.value
        assert error.status == 422
        assert error.response_body == {"message": "Reference already exists"}
        assert error.response_headers == {"x-github-request-id": "abc"}
        assert error.request.startswith("POST ")

    def test_transport_error(self, client: GitHubClient, session: MagicMock):
        session.request.side_effect = requests.exceptions.Timeout("slow")

        with pytest.raises(GitHubAPIError, match="No response"):
            client.add_labels(3, ["AUTO"])
