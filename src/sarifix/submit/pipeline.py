"""Branch, commit, pull request and label creation for one folded file."""

from __future__ import annotations

import logging
import time

from sarifix.core.config import GitHubConfig, PullRequestConfig
from sarifix.core.errors import GitHubAPIError, SubmissionError
from sarifix.core.models import Submission
from sarifix.fix.models import FoldResult
from sarifix.github.client import GitHubClient

logger = logging.getLogger(__name__)


def pull_request_body(recommendation: str) -> str:
    return "### Recommendation:\n\n" + recommendation + "\n\n---\n\n"


class SubmissionPipeline:
    """Opens one pull request per file against the base branch."""

    def __init__(
        self,
        client: GitHubClient,
        github: GitHubConfig | None = None,
        pull_request: PullRequestConfig | None = None,
    ):
        self.client = client
        self.github = github or GitHubConfig()
        self.pull_request = pull_request or PullRequestConfig()
        self._counter = 0

    def branch_name(self) -> str:
        # Counter keeps names unique when two files land in the same millisecond
        self._counter += 1
        return f"{self.pull_request.branch_prefix}/{int(time.time() * 1000)}-{self._counter}"

    def submit(self, folded: FoldResult) -> Submission:
        """Raises SubmissionError; nothing is retried."""
        path = folded.file_path
        base = self.github.base_branch
        title = self.pull_request.title.format(path=path)
        branch = self.branch_name()

        try:
            base_sha = self.client.get_ref_sha(base)
            self.client.create_branch(branch, base_sha)
            file_sha = self.client.get_file_sha(path, ref=branch)
            self.client.put_file(path, folded.content, title, branch, sha=file_sha)
            pull = self.client.create_pull(
                title=title,
                head=branch,
                base=base,
                body=pull_request_body(folded.recommendation),
            )
            self.client.add_labels(pull["number"], [self.pull_request.label])
        except GitHubAPIError as e:
            raise SubmissionError.wrap(f"Submission failed for {path}", e) from e
        except (KeyError, TypeError) as e:
            raise SubmissionError(f"Unexpected GitHub response for {path}: {e}") from e

        logger.info("Opened pull request #%s for %s on %s", pull["number"], path, branch)
        return Submission(
            file_path=path,
            branch=branch,
            number=pull["number"],
            url=pull.get("html_url", ""),
        )
