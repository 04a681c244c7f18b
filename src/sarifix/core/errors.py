"""Error taxonomy for sarifix.

Per-item errors (content fetch, solver, patch conflict, submission) are
caught where a single finding, patch or file is processed and recorded on
the run report. Everything else is fatal to the run.
"""

from __future__ import annotations

from typing import Any


class SarifixError(Exception):
    """Base class for all sarifix errors.

    Errors raised from an HTTP exchange keep the request and response
    details so the fatal reporter can print them.
    """

    def __init__(
        self,
        message: str,
        *,
        request: str = "",
        status: int | None = None,
        response_body: Any = None,
        response_headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.request = request
        self.status = status
        self.response_body = response_body
        self.response_headers = response_headers or {}

    @property
    def has_http_context(self) -> bool:
        return bool(self.request) or self.status is not None

    @classmethod
    def wrap(cls, message: str, cause: SarifixError):
        """Re-raise ``cause`` as ``cls`` keeping its HTTP context."""
        return cls(
            f"{message}: {cause.message}",
            request=cause.request,
            status=cause.status,
            response_body=cause.response_body,
            response_headers=cause.response_headers,
        )


class ContentFetchError(SarifixError):
    """A file's original or live content could not be read."""


class SolverError(SarifixError):
    """The remote fix service returned no usable solution."""


class PatchConflictError(SarifixError):
    """A patch's context does not match the content it is applied to."""

    def __init__(self, file_path: str, index: int, message: str = ""):
        super().__init__(
            message or f"Patch {index} for {file_path} does not apply (context mismatch)"
        )
        self.file_path = file_path
        self.index = index


class SubmissionError(SarifixError):
    """Branch, commit, pull request or label creation failed for a file."""


class GitHubAPIError(SarifixError):
    """A GitHub REST call failed."""


class SarifFormatError(SarifixError):
    """A SARIF document is missing or structurally invalid. Fatal."""


class ConfigError(SarifixError):
    """Required configuration or credentials are missing. Fatal."""
