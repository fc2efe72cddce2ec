"""Move open issues off deprecated labels and down to a single lifecycle label.

Two sub-phases run in sequence:

1. Deprecated-label migration: for each deprecation entry with a replacement, every
   open issue tagged with the obsolete label gets it swapped for the replacement.
   Entries without a replacement are skipped here; the pruner deletes those labels.
2. Lifecycle collapse: stages are visited from the last entry of the lifecycle order
   to the first. Issues found under a stage keep that stage and lose every other
   lifecycle label, so an issue ends up on the latest column it was tagged with.

Each label's issue listing is read to completion before any edit is issued, because
editing an issue removes it from the listing being paged through.
"""

from __future__ import annotations

import logging

from github_label_sync.actions import Action, ActionRunner, ReplaceIssueLabels
from github_label_sync.github.client import IssueTracker, RemoteIssue
from github_label_sync.taxonomy import DEFAULT_TAXONOMY, LabelTaxonomy

logger = logging.getLogger(__name__)

REASON_MIGRATION = "migration"
REASON_COLLAPSE = "collapse"


def plan_migration(
    repository: str, issue: RemoteIssue, old_label: str, new_label: str
) -> ReplaceIssueLabels | None:
    """Swap ``old_label`` for ``new_label`` on one issue; None when nothing changes."""

    labels = [name for name in issue.labels if name != old_label]
    if new_label not in labels:
        labels.append(new_label)
    if tuple(labels) == issue.labels:
        return None
    return ReplaceIssueLabels(
        repository=repository,
        issue_number=issue.number,
        labels=tuple(labels),
        previous_labels=issue.labels,
        reason=REASON_MIGRATION,
    )


def plan_collapse(
    repository: str, issue: RemoteIssue, stage: str, lifecycle: tuple[str, ...]
) -> ReplaceIssueLabels | None:
    """Keep ``stage`` and non-lifecycle labels; None when no other stage is attached."""

    kept = tuple(name for name in issue.labels if name == stage or name not in lifecycle)
    if len(kept) == len(issue.labels):
        return None
    return ReplaceIssueLabels(
        repository=repository,
        issue_number=issue.number,
        labels=kept,
        previous_labels=issue.labels,
        reason=REASON_COLLAPSE,
    )


def migrate_deprecated_labels(
    runner: ActionRunner, repository: str, taxonomy: LabelTaxonomy
) -> list[Action]:
    applied: list[Action] = []
    for entry in taxonomy.deprecated:
        if entry.replacement is None:
            continue
        issues = list(runner.tracker.list_issues(repository, label=entry.name, state="open"))
        actions: list[Action] = []
        for issue in issues:
            action = plan_migration(repository, issue, entry.name, entry.replacement)
            if action is not None:
                actions.append(action)
        applied.extend(runner.run(actions))
    return applied


def collapse_lifecycle_labels(
    runner: ActionRunner, repository: str, taxonomy: LabelTaxonomy
) -> list[Action]:
    lifecycle = taxonomy.lifecycle_order
    applied: list[Action] = []
    for stage in reversed(lifecycle):
        issues = list(runner.tracker.list_issues(repository, label=stage, state="open"))
        actions: list[Action] = []
        for issue in issues:
            action = plan_collapse(repository, issue, stage, lifecycle)
            if action is not None:
                actions.append(action)
        applied.extend(runner.run(actions))
    return applied


def migrate_issues(
    tracker: IssueTracker,
    repository: str,
    *,
    taxonomy: LabelTaxonomy = DEFAULT_TAXONOMY,
    runner: ActionRunner | None = None,
) -> list[Action]:
    runner = runner or ActionRunner(tracker)
    applied = migrate_deprecated_labels(runner, repository, taxonomy)
    applied.extend(collapse_lifecycle_labels(runner, repository, taxonomy))
    logger.debug("Issue migration complete", extra={"repo": repository, "edits": len(applied)})
    return applied
