"""Delete labels that are obsolete by namespace or explicit deprecation."""

from __future__ import annotations

from github_label_sync.actions import Action, ActionRunner, DeleteLabel
from github_label_sync.github.client import IssueTracker, RemoteLabel
from github_label_sync.taxonomy import DEFAULT_TAXONOMY, LabelTaxonomy


def plan_deletions(
    repository: str, taxonomy: LabelTaxonomy, current: list[RemoteLabel]
) -> list[Action]:
    # Remote listing order; canonical labels are never obsolete.
    return [
        DeleteLabel(repository=repository, name=label.name)
        for label in current
        if taxonomy.is_obsolete(label.name)
    ]


def prune_labels(
    tracker: IssueTracker,
    repository: str,
    *,
    taxonomy: LabelTaxonomy = DEFAULT_TAXONOMY,
    runner: ActionRunner | None = None,
) -> list[Action]:
    runner = runner or ActionRunner(tracker)
    return runner.run(plan_deletions(repository, taxonomy, tracker.list_labels(repository)))
