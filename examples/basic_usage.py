#!/usr/bin/env python3
"""Programmatic label sync example.

This demonstrates using the passes directly instead of the `label-sync` CLI:

* load settings from `.env`
* plan the label changes for one repository without applying them
* print what each pass would do

Repository selection is passed as an argument (not read from `.env`).
"""

from __future__ import annotations

import argparse
from typing import Sequence

from github_label_sync.actions import ActionRunner
from github_label_sync.config import SyncSettings
from github_label_sync.github.client import LabelClient
from github_label_sync.logging import configure_logging
from github_label_sync.passes import migrate_issues, prune_labels, reconcile_labels
from github_label_sync.taxonomy import load_taxonomy


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Preview label changes (programmatic example).")
    parser.add_argument("--repo", required=True, help='Target repository in the form "owner/repo"')
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = SyncSettings()
    configure_logging("WARNING", fmt="text")
    taxonomy = load_taxonomy(settings.taxonomy_path)

    client = LabelClient(token=settings.github_token, base_url=settings.github_base_url)
    runner = ActionRunner(client, dry_run=True)
    try:
        for name, run_pass in (
            ("provision", reconcile_labels),
            ("migrate", migrate_issues),
            ("prune", prune_labels),
        ):
            planned = run_pass(client, args.repo, taxonomy=taxonomy, runner=runner)
            print(f"{name}: {len(planned)} change(s)")
            for action in planned:
                print(f"  {action.message}: {action.context()}")
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
