"""GitHub Label Sync.

Keeps a fixed label taxonomy (lifecycle, resolution, severity, scheduling) consistent
across a set of GitHub repositories:
- configuration loaded from `.env`
- structured logging
- idempotent provision / migrate / prune passes
"""

__version__ = "0.1.0"

from github_label_sync.config import SyncSettings
from github_label_sync.taxonomy import DEFAULT_TAXONOMY, LabelTaxonomy

__all__ = ["__version__", "DEFAULT_TAXONOMY", "LabelTaxonomy", "SyncSettings"]
