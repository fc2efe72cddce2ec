"""Test configuration and fixtures."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from github_label_sync.github.client import RemoteIssue, RemoteLabel, TransportError
from github_label_sync.taxonomy import DeprecatedLabel, LabelSpec, LabelTaxonomy


class FakeTracker:
    """In-memory issue tracker.

    Labels and issues are kept per repository. Every write is recorded in ``writes``;
    ``fail_on`` maps an operation name to a key (label name or issue number) whose
    call raises ``TransportError`` instead of applying.
    """

    def __init__(self) -> None:
        self.labels: dict[str, dict[str, str]] = {}
        self.issues: dict[str, dict[int, list[str]]] = {}
        self.writes: list[tuple[str, str, object]] = []
        self.reads: list[tuple[str, str, object]] = []
        self.fail_on: dict[str, object] = {}

    def add_label(self, repository: str, name: str, color: str) -> None:
        self.labels.setdefault(repository, {})[name] = color

    def add_issue(self, repository: str, number: int, labels: list[str]) -> None:
        self.issues.setdefault(repository, {})[number] = list(labels)

    def issue_labels(self, repository: str, number: int) -> list[str]:
        return self.issues[repository][number]

    def _maybe_fail(self, operation: str, repository: str, key: object) -> None:
        if operation in self.fail_on and self.fail_on[operation] == key:
            raise TransportError(operation=operation, repository=repository, detail="boom")

    def list_labels(self, repository: str) -> list[RemoteLabel]:
        self.reads.append(("list_labels", repository, None))
        self._maybe_fail("list_labels", repository, None)
        return [
            RemoteLabel(name=name, color=color)
            for name, color in self.labels.get(repository, {}).items()
        ]

    def create_label(self, repository: str, *, name: str, color: str) -> None:
        self._maybe_fail("create_label", repository, name)
        self.writes.append(("create_label", repository, name))
        self.labels.setdefault(repository, {})[name] = color

    def update_label(self, repository: str, old_name: str, *, name: str, color: str) -> None:
        self._maybe_fail("update_label", repository, old_name)
        self.writes.append(("update_label", repository, old_name))
        labels = self.labels[repository]
        del labels[old_name]
        labels[name] = color

    def delete_label(self, repository: str, *, name: str) -> None:
        self._maybe_fail("delete_label", repository, name)
        self.writes.append(("delete_label", repository, name))
        del self.labels[repository][name]
        for labels in self.issues.get(repository, {}).values():
            if name in labels:
                labels.remove(name)

    def list_issues(
        self, repository: str, *, label: str, state: str = "open"
    ) -> Iterator[RemoteIssue]:
        self.reads.append(("list_issues", repository, label))
        self._maybe_fail("list_issues", repository, label)
        matching = [
            RemoteIssue(number=number, labels=tuple(labels))
            for number, labels in sorted(self.issues.get(repository, {}).items())
            if label in labels
        ]
        return iter(matching)

    def edit_issue(self, repository: str, number: int, *, labels: list[str]) -> None:
        self._maybe_fail("edit_issue", repository, number)
        self.writes.append(("edit_issue", repository, number))
        self.issues[repository][number] = list(labels)


@pytest.fixture
def tracker() -> FakeTracker:
    """Provide an empty in-memory tracker."""
    return FakeTracker()


@pytest.fixture
def small_taxonomy() -> LabelTaxonomy:
    """Provide a compact taxonomy with one of each kind of entry."""
    return LabelTaxonomy(
        labels=(
            LabelSpec(name="stage:todo", color="ededed"),
            LabelSpec(name="stage:doing", color="ededed"),
            LabelSpec(name="stage:done", color="e11d21"),
            LabelSpec(name="bug", color="207de5"),
            LabelSpec(name="good-first-bug", color="009800"),
        ),
        deprecated=(
            DeprecatedLabel(name="good first bug", replacement="good-first-bug"),
            DeprecatedLabel(name="stage:now", replacement="stage:doing"),
            DeprecatedLabel(name="P1"),
        ),
        lifecycle_order=("stage:todo", "stage:doing", "stage:done"),
        obsolete_prefixes=("stage:", "Old"),
    )


@pytest.fixture
def env_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from a clean directory with no label-sync variables inherited from the shell."""
    for name in (
        "LABEL_SYNC_GITHUB_TOKEN",
        "GITHUB_BASE_URL",
        "LOG_LEVEL",
        "LOG_FORMAT",
        "LABEL_SYNC_REPOSITORIES",
        "LABEL_SYNC_OWNER",
        "LABEL_SYNC_TAXONOMY_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path / ".env"


@pytest.fixture
def restore_root_logger() -> Iterator[None]:
    """Undo handler and level changes made by `configure_logging`."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
