"""CLI entrypoint and per-repository driver.

Repositories are processed one at a time, in configured order. For each one the
selected passes run in the fixed order provision -> migrate -> prune, each finishing
all of its remote writes before the next begins. The first failure stops everything;
already applied changes stay in place and a re-run picks up where it left off.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable, Sequence

from pydantic import ValidationError

from github_label_sync import __version__
from github_label_sync.actions import Action, ActionRunner
from github_label_sync.config import SyncSettings, normalize_repositories
from github_label_sync.github.client import IssueTracker, LabelClient
from github_label_sync.logging import configure_logging
from github_label_sync.passes import migrate_issues, prune_labels, reconcile_labels
from github_label_sync.taxonomy import DEFAULT_TAXONOMY, LabelTaxonomy, load_taxonomy

logger = logging.getLogger(__name__)

PassFunction = Callable[..., list[Action]]

PASSES: dict[str, PassFunction] = {
    "provision": reconcile_labels,
    "migrate": migrate_issues,
    "prune": prune_labels,
}
SYNC_ORDER: tuple[str, ...] = ("provision", "migrate", "prune")


def sync_repository(
    tracker: IssueTracker,
    repository: str,
    *,
    taxonomy: LabelTaxonomy = DEFAULT_TAXONOMY,
    passes: Sequence[str] = SYNC_ORDER,
    dry_run: bool = False,
) -> list[Action]:
    """Run the requested passes against one repository and return the writes issued."""

    unknown = [name for name in passes if name not in PASSES]
    if unknown:
        raise ValueError(f"Unknown passes: {unknown}")

    logger.info("Checking labels", extra={"repo": repository, "passes": list(passes)})
    runner = ActionRunner(tracker, dry_run=dry_run)
    # Keep the canonical order regardless of how the caller listed the passes.
    for name in SYNC_ORDER:
        if name in passes:
            PASSES[name](tracker, repository, taxonomy=taxonomy, runner=runner)
    return list(runner.applied)


def sync_repositories(
    tracker: IssueTracker,
    repositories: Sequence[str],
    *,
    taxonomy: LabelTaxonomy = DEFAULT_TAXONOMY,
    passes: Sequence[str] = SYNC_ORDER,
    dry_run: bool = False,
    on_synced: Callable[[str, list[Action]], None] | None = None,
) -> dict[str, list[Action]]:
    """Synchronize repositories in order; an exception halts the remaining ones.

    ``on_synced`` is called with each repository and its writes as soon as that
    repository finishes.
    """

    results: dict[str, list[Action]] = {}
    for repository in repositories:
        try:
            applied = sync_repository(
                tracker, repository, taxonomy=taxonomy, passes=passes, dry_run=dry_run
            )
        except Exception:
            logger.exception("Label sync failed", extra={"repo": repository})
            raise
        results[repository] = applied
        if on_synced is not None:
            on_synced(repository, applied)
    return results


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="label-sync",
        description="Apply the standard label taxonomy to a set of GitHub repositories",
    )
    parser.add_argument("--version", action="version", version=f"github-label-sync {__version__}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--repo",
        "--repository",
        dest="repositories",
        action="append",
        default=None,
        help=(
            "Repository in the form 'owner/repo' (repeatable); "
            "overrides LABEL_SYNC_REPOSITORIES"
        ),
    )
    common.add_argument(
        "--dry-run",
        action="store_true",
        help="Log the writes that would be made without making them",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser(
        "sync", parents=[common], help="Provision, migrate and prune labels (the full run)"
    )
    subparsers.add_parser(
        "provision", parents=[common], help="Create missing labels and fix label colors"
    )
    subparsers.add_parser(
        "migrate",
        parents=[common],
        help="Move issues off deprecated labels and collapse duplicate lifecycle labels",
    )
    subparsers.add_parser("prune", parents=[common], help="Delete obsolete labels")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = SyncSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level, fmt=settings.log_format)

    try:
        taxonomy = load_taxonomy(settings.taxonomy_path)
        if args.repositories:
            repositories = normalize_repositories(args.repositories, owner=settings.default_owner)
        else:
            repositories = settings.repositories
    except (OSError, ValueError) as e:
        logger.error("Invalid configuration", extra={"error": str(e)})
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    if not repositories:
        print(
            "No repositories to synchronize; set LABEL_SYNC_REPOSITORIES or pass --repo",
            file=sys.stderr,
        )
        return 2

    passes = SYNC_ORDER if args.command == "sync" else (args.command,)
    verb = "Planned" if args.dry_run else "Applied"

    def report(repository: str, applied: list[Action]) -> None:
        print(f"{verb} {len(applied)} change(s) on {repository}")

    tracker = LabelClient(token=settings.github_token, base_url=settings.github_base_url)
    try:
        sync_repositories(
            tracker,
            repositories,
            taxonomy=taxonomy,
            passes=passes,
            dry_run=args.dry_run,
            on_synced=report,
        )
    except Exception as e:
        print(f"Label sync failed ({e}); stopping", file=sys.stderr)
        return 1
    finally:
        tracker.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
