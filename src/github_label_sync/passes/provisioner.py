"""Ensure every canonical label exists with its canonical color."""

from __future__ import annotations

from github_label_sync.actions import Action, ActionRunner, CreateLabel, UpdateLabelColor
from github_label_sync.github.client import IssueTracker, RemoteLabel
from github_label_sync.taxonomy import DEFAULT_TAXONOMY, LabelTaxonomy


def plan_label_changes(
    repository: str, taxonomy: LabelTaxonomy, current: list[RemoteLabel]
) -> list[Action]:
    """Return the creates/updates needed, in taxonomy order.

    GitHub label names are case-insensitive, so a remote label that differs only in case
    is updated in place (renamed to the canonical spelling) rather than re-created.
    Remote labels outside the taxonomy are left alone.
    """

    by_name = {label.name.casefold(): label for label in current}
    actions: list[Action] = []
    for spec in taxonomy.labels:
        existing = by_name.get(spec.name.casefold())
        if existing is None:
            actions.append(CreateLabel(repository=repository, name=spec.name, color=spec.color))
        elif existing.color.lower() != spec.color or existing.name != spec.name:
            actions.append(
                UpdateLabelColor(
                    repository=repository,
                    name=existing.name,
                    new_name=spec.name,
                    color=spec.color,
                    previous_color=existing.color,
                )
            )
    return actions


def reconcile_labels(
    tracker: IssueTracker,
    repository: str,
    *,
    taxonomy: LabelTaxonomy = DEFAULT_TAXONOMY,
    runner: ActionRunner | None = None,
) -> list[Action]:
    runner = runner or ActionRunner(tracker)
    actions = plan_label_changes(repository, taxonomy, tracker.list_labels(repository))
    return runner.run(actions)
