"""GitHub API client wrapper for label synchronization.

Exposes only the operations the reconciliation passes need. Label CRUD and issue edits go
through the REST API with a `requests` session; issue listing uses PyGithub's lazy
pagination so large repositories are streamed rather than loaded up front.

Every remote failure surfaces as :class:`TransportError`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import quote

import requests
from github import Auth, Github, GithubException
from github.Repository import Repository

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class TransportError(Exception):
    """A remote call failed (network, authentication, rate limiting, ...)."""

    operation: str
    repository: str
    detail: str

    def __str__(self) -> str:
        return f"{self.operation} failed for {self.repository}: {self.detail}"


@dataclass(frozen=True, slots=True)
class RemoteLabel:
    """Label as it currently exists in a repository."""

    name: str
    color: str


@dataclass(frozen=True, slots=True)
class RemoteIssue:
    """Open issue and the names of its attached labels, in tracker order."""

    number: int
    labels: tuple[str, ...]


class IssueTracker(Protocol):
    """The remote operations the reconciliation passes rely on."""

    def list_labels(self, repository: str) -> list[RemoteLabel]: ...

    def create_label(self, repository: str, *, name: str, color: str) -> None: ...

    def update_label(self, repository: str, old_name: str, *, name: str, color: str) -> None: ...

    def delete_label(self, repository: str, *, name: str) -> None: ...

    def list_issues(
        self, repository: str, *, label: str, state: str = "open"
    ) -> Iterator[RemoteIssue]: ...

    def edit_issue(self, repository: str, number: int, *, labels: list[str]) -> None: ...


class LabelClient:
    """Small wrapper around the GitHub REST API and PyGithub for label maintenance."""

    def __init__(
        self,
        *,
        token: str,
        base_url: str = "https://api.github.com",
        session: requests.Session | None = None,
        github_api: Github | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")

        self._rest_base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "github-label-sync",
            }
        )
        self._github = github_api or Github(auth=Auth.Token(token), base_url=self._rest_base_url)
        self._repos: dict[str, Repository] = {}

    def _repo_url(self, *, repository: str, path: str) -> str:
        repository = repository.strip().strip("/")
        path = path.lstrip("/")
        if not path:
            return f"{self._rest_base_url}/repos/{repository}"
        return f"{self._rest_base_url}/repos/{repository}/{path}"

    def _label_url(self, *, repository: str, name: str) -> str:
        return self._repo_url(repository=repository, path=f"labels/{quote(name, safe='')}")

    def _get_repo(self, repository: str) -> Repository:
        repo = self._repos.get(repository)
        if repo is None:
            repo = self._github.get_repo(repository, lazy=True)
            self._repos[repository] = repo
        return repo

    @contextmanager
    def _transport(self, operation: str, repository: str) -> Iterator[None]:
        try:
            yield
        except (requests.RequestException, GithubException) as e:
            raise TransportError(operation=operation, repository=repository, detail=str(e)) from e

    def _get_paginated_json_list(self, url: str) -> list[dict[str, Any]]:
        """Fetch a REST endpoint that returns a JSON list, following page numbers to the end."""

        items: list[dict[str, Any]] = []
        per_page = 100
        page = 1
        while True:
            resp = self._session.get(url, params={"per_page": per_page, "page": page}, timeout=30)
            resp.raise_for_status()
            payload = resp.json()
            if not isinstance(payload, list):
                break

            items.extend(p for p in payload if isinstance(p, dict))

            if len(payload) < per_page:
                break
            page += 1
        return items

    def list_labels(self, repository: str) -> list[RemoteLabel]:
        with self._transport("list_labels", repository):
            raw = self._get_paginated_json_list(self._repo_url(repository=repository, path="labels"))

        labels: list[RemoteLabel] = []
        for item in raw:
            name = item.get("name")
            if not isinstance(name, str):
                continue
            color = item.get("color")
            labels.append(RemoteLabel(name=name, color=color if isinstance(color, str) else ""))
        logger.debug("Fetched labels", extra={"repo": repository, "count": len(labels)})
        return labels

    def create_label(self, repository: str, *, name: str, color: str) -> None:
        with self._transport("create_label", repository):
            resp = self._session.post(
                self._repo_url(repository=repository, path="labels"),
                json={"name": name, "color": color},
                timeout=30,
            )
            resp.raise_for_status()

    def update_label(self, repository: str, old_name: str, *, name: str, color: str) -> None:
        with self._transport("update_label", repository):
            resp = self._session.patch(
                self._label_url(repository=repository, name=old_name),
                json={"new_name": name, "color": color},
                timeout=30,
            )
            resp.raise_for_status()

    def delete_label(self, repository: str, *, name: str) -> None:
        with self._transport("delete_label", repository):
            resp = self._session.delete(
                self._label_url(repository=repository, name=name), timeout=30
            )
            resp.raise_for_status()

    def list_issues(
        self, repository: str, *, label: str, state: str = "open"
    ) -> Iterator[RemoteIssue]:
        """Lazily yield issues carrying ``label``; pages are fetched as iteration proceeds."""

        with self._transport("list_issues", repository):
            repo = self._get_repo(repository)
            for issue in repo.get_issues(state=state, labels=[label]):
                yield RemoteIssue(
                    number=issue.number,
                    labels=tuple(item.name for item in issue.labels),
                )

    def edit_issue(self, repository: str, number: int, *, labels: list[str]) -> None:
        """Replace the full label set of an issue."""

        if number <= 0:
            raise ValueError("issue number must be a positive integer")
        with self._transport("edit_issue", repository):
            resp = self._session.patch(
                self._repo_url(repository=repository, path=f"issues/{number}"),
                json={"labels": labels},
                timeout=30,
            )
            resp.raise_for_status()

    def close(self) -> None:
        self._session.close()
        self._github.close()
