"""Configuration management for sarifix (sarifix.toml parsing + defaults)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

from sarifix.core.errors import ConfigError

CONFIG_FILE = "sarifix.toml"


@dataclass
class SarifConfig:
    directory: str = ".github/codeql-analysis/"
    extension: str = ".sarif"


@dataclass
class GitHubConfig:
    api_url: str = "https://api.github.com"
    repository: str = ""
    base_branch: str = "main"
    timeout: float = 30


@dataclass
class SolverConfig:
    url: str = "https://backend.repodex.ai/api/sarif_solver/"
    timeout: float = 120


@dataclass
class PullRequestConfig:
    branch_prefix: str = "fixes"
    label: str = "AUTO"
    title: str = "[AUTO] Fixes for issues in {path}"


@dataclass
class DiffConfig:
    context_lines: int = 4


@dataclass
class SarifixConfig:
    """Complete sarifix configuration."""

    sarif: SarifConfig = field(default_factory=SarifConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)
    pull_request: PullRequestConfig = field(default_factory=PullRequestConfig)
    diff: DiffConfig = field(default_factory=DiffConfig)


@dataclass
class Credentials:
    """Secrets for one run, from the environment or CLI. Never from the config file."""

    github_token: str = ""
    api_key: str = ""

    def require(self) -> None:
        if not self.github_token:
            raise ConfigError("A GitHub token is required (GITHUB_TOKEN or --github-token).")
        if not self.api_key:
            raise ConfigError("A solver API key is required (SARIFIX_API_KEY or --api-key).")


_SECTIONS = {
    "sarif": ("directory", "extension"),
    "github": ("api_url", "repository", "base_branch", "timeout"),
    "solver": ("url", "timeout"),
    "pull_request": ("branch_prefix", "label", "title"),
    "diff": ("context_lines",),
}


def load_config(project_path: Path | None = None) -> SarifixConfig:
    """Load configuration from sarifix.toml if present, otherwise return defaults.

    ``GITHUB_REPOSITORY`` in the environment overrides ``[github] repository``.
    """
    config = SarifixConfig()

    if project_path is None:
        project_path = Path.cwd()

    config_file = project_path / CONFIG_FILE
    if config_file.exists():
        try:
            with open(config_file, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid {CONFIG_FILE}: {e}") from e

        for section, attrs in _SECTIONS.items():
            values = data.get(section, {})
            target = getattr(config, section)
            for attr in attrs:
                if attr in values:
                    setattr(target, attr, values[attr])

    repository = os.environ.get("GITHUB_REPOSITORY")
    if repository:
        config.github.repository = repository

    return config


def require_repository(config: SarifixConfig) -> tuple[str, str]:
    """Split ``owner/name``; a missing or malformed value is fatal."""
    repository = config.github.repository
    owner, _, name = repository.partition("/")
    if not owner or not name or "/" in name:
        raise ConfigError(
            f"Repository must be 'owner/name', got {repository!r} "
            "(set GITHUB_REPOSITORY, --repo or [github] repository)."
        )
    return owner, name


def get_state_dir(project_path: Path | None = None) -> Path:
    """Get or create the .sarifix directory."""
    if project_path is None:
        project_path = Path.cwd()
    state_dir = project_path / ".sarifix"
    state_dir.mkdir(exist_ok=True)
    return state_dir
