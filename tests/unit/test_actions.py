"""Unit tests for write actions and the sequential runner."""

from __future__ import annotations

import logging
from unittest.mock import Mock, call

import pytest

from github_label_sync.actions import (
    ActionRunner,
    CreateLabel,
    DeleteLabel,
    ReplaceIssueLabels,
    UpdateLabelColor,
)
from github_label_sync.github.client import LabelClient, TransportError

REPO = "octo-org/octo-repo"


def test_actions_call_the_matching_tracker_operation() -> None:
    tracker = Mock(spec=LabelClient)

    ActionRunner(tracker).run(
        [
            CreateLabel(repository=REPO, name="ux", color="207de5"),
            UpdateLabelColor(
                repository=REPO, name="Wip", new_name="WIP", color="207de5", previous_color="fff"
            ),
            DeleteLabel(repository=REPO, name="P1"),
            ReplaceIssueLabels(
                repository=REPO,
                issue_number=42,
                labels=("security", "waffle:active"),
                previous_labels=("waffle:now", "security"),
                reason="migration",
            ),
        ]
    )

    assert tracker.mock_calls == [
        call.create_label(REPO, name="ux", color="207de5"),
        call.update_label(REPO, "Wip", name="WIP", color="207de5"),
        call.delete_label(REPO, name="P1"),
        call.edit_issue(REPO, 42, labels=["security", "waffle:active"]),
    ]


def test_runner_stops_at_first_failure() -> None:
    tracker = Mock(spec=LabelClient)
    tracker.delete_label.side_effect = [
        None,
        TransportError(operation="delete_label", repository=REPO, detail="rate limited"),
        None,
    ]
    runner = ActionRunner(tracker)

    with pytest.raises(TransportError):
        runner.run([DeleteLabel(repository=REPO, name=name) for name in ("P1", "P2", "P3")])

    assert tracker.delete_label.call_count == 2
    assert runner.applied == [DeleteLabel(repository=REPO, name="P1")]


def test_dry_run_logs_but_does_not_execute(caplog: pytest.LogCaptureFixture) -> None:
    tracker = Mock(spec=LabelClient)
    runner = ActionRunner(tracker, dry_run=True)

    with caplog.at_level(logging.INFO, logger="github_label_sync.actions"):
        done = runner.run([DeleteLabel(repository=REPO, name="P1")])

    assert done == [DeleteLabel(repository=REPO, name="P1")]
    assert tracker.mock_calls == []
    (record,) = caplog.records
    assert record.getMessage() == "Deleting label"
    assert record.repo == REPO  # type: ignore[attr-defined]
    assert record.label == "P1"  # type: ignore[attr-defined]
    assert record.dry_run is True  # type: ignore[attr-defined]


def test_one_log_line_per_issue_edit(caplog: pytest.LogCaptureFixture) -> None:
    tracker = Mock(spec=LabelClient)
    action = ReplaceIssueLabels(
        repository=REPO,
        issue_number=7,
        labels=("waffle:active",),
        previous_labels=("waffle:backlog", "waffle:active"),
        reason="collapse",
    )

    with caplog.at_level(logging.INFO, logger="github_label_sync.actions"):
        ActionRunner(tracker).run([action])

    (record,) = caplog.records
    assert record.getMessage() == "Replacing issue labels"
    assert record.issue_number == 7  # type: ignore[attr-defined]
    assert record.reason == "collapse"  # type: ignore[attr-defined]


def test_update_context_reports_renames_only_when_case_changes() -> None:
    same = UpdateLabelColor(
        repository=REPO, name="ux", new_name="ux", color="207de5", previous_color="000000"
    )
    renamed = UpdateLabelColor(
        repository=REPO, name="Ux", new_name="ux", color="207de5", previous_color="207de5"
    )

    assert "previous_name" not in same.context()
    assert renamed.context()["previous_name"] == "Ux"
