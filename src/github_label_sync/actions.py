"""Remote write actions and the sequential runner that applies them.

Each reconciliation pass first reads remote state, then plans a list of actions and
hands it to :class:`ActionRunner`. Actions run strictly one after another; the first
failure propagates and the rest of the list is not attempted. Nothing is rolled back:
every action is idempotent, so re-running a pass resumes convergence.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, ClassVar, Protocol

from github_label_sync.github.client import IssueTracker

logger = logging.getLogger(__name__)


class Action(Protocol):
    """A single idempotent remote write."""

    message: ClassVar[str]

    def context(self) -> dict[str, Any]: ...

    def execute(self, tracker: IssueTracker) -> None: ...


@dataclass(frozen=True, slots=True)
class CreateLabel:
    message: ClassVar[str] = "Creating label"

    repository: str
    name: str
    color: str

    def context(self) -> dict[str, Any]:
        return {"repo": self.repository, "label": self.name, "color": self.color}

    def execute(self, tracker: IssueTracker) -> None:
        tracker.create_label(self.repository, name=self.name, color=self.color)


@dataclass(frozen=True, slots=True)
class UpdateLabelColor:
    """Recolor a label; ``new_name`` only differs from ``name`` in letter case."""

    message: ClassVar[str] = "Updating label color"

    repository: str
    name: str
    new_name: str
    color: str
    previous_color: str

    def context(self) -> dict[str, Any]:
        ctx: dict[str, Any] = {
            "repo": self.repository,
            "label": self.new_name,
            "color": self.color,
            "previous_color": self.previous_color,
        }
        if self.new_name != self.name:
            ctx["previous_name"] = self.name
        return ctx

    def execute(self, tracker: IssueTracker) -> None:
        tracker.update_label(self.repository, self.name, name=self.new_name, color=self.color)


@dataclass(frozen=True, slots=True)
class DeleteLabel:
    message: ClassVar[str] = "Deleting label"

    repository: str
    name: str

    def context(self) -> dict[str, Any]:
        return {"repo": self.repository, "label": self.name}

    def execute(self, tracker: IssueTracker) -> None:
        tracker.delete_label(self.repository, name=self.name)


@dataclass(frozen=True, slots=True)
class ReplaceIssueLabels:
    """Overwrite an issue's labels.

    ``reason`` is ``"migration"`` (deprecated label swapped for its replacement) or
    ``"collapse"`` (extra lifecycle labels removed).
    """

    message: ClassVar[str] = "Replacing issue labels"

    repository: str
    issue_number: int
    labels: tuple[str, ...]
    previous_labels: tuple[str, ...]
    reason: str

    def context(self) -> dict[str, Any]:
        return {
            "repo": self.repository,
            "issue_number": self.issue_number,
            "reason": self.reason,
            "labels": list(self.labels),
            "previous_labels": list(self.previous_labels),
        }

    def execute(self, tracker: IssueTracker) -> None:
        tracker.edit_issue(self.repository, self.issue_number, labels=list(self.labels))


class ActionRunner:
    """Apply actions in order, stopping at the first failure.

    With ``dry_run`` enabled, actions are logged but never executed.
    """

    def __init__(self, tracker: IssueTracker, *, dry_run: bool = False) -> None:
        self._tracker = tracker
        self._dry_run = dry_run
        self.applied: list[Action] = []

    @property
    def tracker(self) -> IssueTracker:
        return self._tracker

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    def run(self, actions: Iterable[Action]) -> list[Action]:
        """Run ``actions`` sequentially and return the ones that were applied (or planned)."""

        done: list[Action] = []
        for action in actions:
            logger.info(action.message, extra={**action.context(), "dry_run": self._dry_run})
            if not self._dry_run:
                action.execute(self._tracker)
            done.append(action)
            self.applied.append(action)
        return done
