"""Configuration for the label sync utility.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

To avoid collisions with other tools that may also use `GITHUB_TOKEN`, this
project uses a dedicated token variable: `LABEL_SYNC_GITHUB_TOKEN`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def normalize_repositories(values: list[str], *, owner: str = "") -> list[str]:
    """Normalize repository identifiers into unique "owner/repo" strings, keeping order."""

    default_owner = owner.strip().strip("/")
    normalized: list[str] = []
    for value in values:
        repo = value.strip().strip("/")
        if not repo:
            continue
        if "/" not in repo:
            if not default_owner:
                raise ValueError(
                    f"Repository {repo!r} has no owner; use 'owner/repo' or set LABEL_SYNC_OWNER"
                )
            repo = f"{default_owner}/{repo}"
        if repo not in normalized:
            normalized.append(repo)
    return normalized


class SyncSettings(BaseSettings):
    """Settings for the label sync utility.

    Environment variables:
    - LABEL_SYNC_GITHUB_TOKEN
    - GITHUB_BASE_URL            (optional)
    - LOG_LEVEL                  (optional)
    - LOG_FORMAT                 (optional, json | text)
    - LABEL_SYNC_REPOSITORIES    (optional, comma-separated)
    - LABEL_SYNC_OWNER           (optional)
    - LABEL_SYNC_TAXONOMY_PATH   (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `SyncSettings(_env_file=path_to_env)`.
    """

    github_token: str = Field(
        default="",
        validation_alias="LABEL_SYNC_GITHUB_TOKEN",
        description="GitHub token used for API authentication",
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_BASE_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        validation_alias="LOG_FORMAT",
        description="Log output format: json or text",
    )

    repositories_csv: str = Field(
        default="",
        validation_alias="LABEL_SYNC_REPOSITORIES",
        description="Comma-separated repositories to synchronize, in processing order",
    )
    default_owner: str = Field(
        default="",
        validation_alias="LABEL_SYNC_OWNER",
        description="Owner applied to repository entries given without one",
    )

    taxonomy_path: Path | None = Field(
        default=None,
        validation_alias="LABEL_SYNC_TAXONOMY_PATH",
        description="Optional JSON file replacing the built-in label taxonomy",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_github_auth(self) -> SyncSettings:
        if not self.github_token.strip():
            raise ValueError("LABEL_SYNC_GITHUB_TOKEN is required")
        return self

    @model_validator(mode="after")
    def _check_repositories(self) -> SyncSettings:
        # Fail early on entries without an owner.
        normalize_repositories(self.repositories_csv.split(","), owner=self.default_owner)
        return self

    @property
    def repositories(self) -> list[str]:
        """Configured repositories as normalized "owner/repo" names."""

        return normalize_repositories(self.repositories_csv.split(","), owner=self.default_owner)
