"""Reconciliation passes, run per repository in this order: provision, migrate, prune."""

from github_label_sync.passes.migrator import migrate_issues
from github_label_sync.passes.provisioner import reconcile_labels
from github_label_sync.passes.pruner import prune_labels

__all__ = ["migrate_issues", "prune_labels", "reconcile_labels"]
