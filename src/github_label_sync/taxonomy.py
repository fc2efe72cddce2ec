"""Shared GitHub label taxonomy.

These labels are intended to exist with the same colors on every managed repository.
The taxonomy is plain configuration data:

- the label specification (name -> color), applied in declaration order
- the deprecation map (obsolete name -> replacement name, or ``None``)
- the lifecycle order (mutually exclusive workflow columns, first to last)
- obsolescence prefixes (namespaces whose unknown labels are deleted)

The built-in taxonomy can be replaced at startup by a JSON document with the same
shape as :class:`LabelTaxonomy`.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_HEX_COLOR = re.compile(r"^[0-9a-f]{6}$")


class LabelColor:
    STATUS = "ededed"
    RESOLUTION = "e6e6e6"
    ALERT = "e11d21"
    WARNING = "eb6420"
    INFO = "207de5"
    TARGET = "d4c5f9"
    WELCOMING = "009800"


class LabelSpec(BaseModel):
    """A canonical label: name plus display color (6 hex digits, lower case)."""

    model_config = ConfigDict(frozen=True)

    name: str
    color: str

    @field_validator("name")
    @classmethod
    def _non_empty_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("label name must be non-empty")
        return value

    @field_validator("color")
    @classmethod
    def _normalize_color(cls, value: str) -> str:
        normalized = value.strip().lstrip("#").lower()
        if not _HEX_COLOR.match(normalized):
            raise ValueError(f"invalid label color {value!r}; expected 6 hex digits")
        return normalized


class DeprecatedLabel(BaseModel):
    """An obsolete label and the label its issues move to (``None`` to just drop it)."""

    model_config = ConfigDict(frozen=True)

    name: str
    replacement: str | None = None


class LabelTaxonomy(BaseModel):
    """Immutable, validated label taxonomy."""

    model_config = ConfigDict(frozen=True)

    labels: tuple[LabelSpec, ...]
    deprecated: tuple[DeprecatedLabel, ...] = Field(default=())
    lifecycle_order: tuple[str, ...] = Field(default=())
    obsolete_prefixes: tuple[str, ...] = Field(default=())

    @model_validator(mode="after")
    def _check_consistency(self) -> LabelTaxonomy:
        # GitHub treats label names case-insensitively, so collisions are checked on
        # folded names.
        names = [spec.name for spec in self.labels]
        folded = [n.casefold() for n in names]
        duplicates = sorted({n for n in names if folded.count(n.casefold()) > 1})
        if duplicates:
            raise ValueError(f"duplicate label names: {duplicates}")

        known = set(names)
        known_folded = set(folded)
        seen_deprecated: set[str] = set()
        for entry in self.deprecated:
            key = entry.name.casefold()
            if key in known_folded:
                raise ValueError(f"label {entry.name!r} is both canonical and deprecated")
            if key in seen_deprecated:
                raise ValueError(f"label {entry.name!r} is deprecated more than once")
            seen_deprecated.add(key)
            if entry.replacement is not None and entry.replacement not in known:
                raise ValueError(
                    f"replacement {entry.replacement!r} for {entry.name!r} is not a canonical label"
                )

        if len(set(self.lifecycle_order)) != len(self.lifecycle_order):
            raise ValueError("lifecycle order contains duplicates")
        unknown_stages = [stage for stage in self.lifecycle_order if stage not in known]
        if unknown_stages:
            raise ValueError(f"lifecycle labels missing from the label list: {unknown_stages}")

        if any(not prefix for prefix in self.obsolete_prefixes):
            raise ValueError("obsolete prefixes must be non-empty")
        return self

    @property
    def label_colors(self) -> dict[str, str]:
        """Label specification as an ordered name -> color mapping."""

        return {spec.name: spec.color for spec in self.labels}

    @property
    def deprecation_map(self) -> dict[str, str | None]:
        return {entry.name: entry.replacement for entry in self.deprecated}

    def is_canonical(self, name: str) -> bool:
        """Return True when ``name`` matches a canonical label, ignoring case."""

        folded = name.casefold()
        return any(spec.name.casefold() == folded for spec in self.labels)

    def is_lifecycle_label(self, name: str) -> bool:
        return name in self.lifecycle_order

    def is_obsolete(self, name: str) -> bool:
        """Return True when a remote label should be deleted.

        Canonical labels are never obsolete. Anything else is obsolete if it sits in a
        reserved namespace or is listed in the deprecation map (with or without a
        replacement).
        """

        if self.is_canonical(name):
            return False
        if any(name.startswith(prefix) for prefix in self.obsolete_prefixes):
            return True
        folded = name.casefold()
        return any(entry.name.casefold() == folded for entry in self.deprecated)


LIFECYCLE_PREFIX = "waffle:"
LEGACY_VERSION_PREFIX = "Fx4"

LIFECYCLE_ORDER: tuple[str, ...] = (
    "waffle:backlog",
    "waffle:next",
    "waffle:active",
    "waffle:review",
    "waffle:blocked",
)


def _labels(color: str, *names: str) -> list[LabelSpec]:
    return [LabelSpec(name=name, color=color) for name in names]


DEFAULT_TAXONOMY = LabelTaxonomy(
    labels=(
        # Issue lifecycle columns.
        *_labels(LabelColor.STATUS, "waffle:backlog", "waffle:next", "waffle:active", "waffle:review"),
        *_labels(LabelColor.ALERT, "waffle:blocked"),
        # Resolution reasons, for reporting on closed issues.
        *_labels(
            LabelColor.RESOLUTION,
            "resolved:fixed",
            "resolved:wontfix",
            "resolved:invalid",
            "resolved:duplicate",
            "resolved:worksforme",
        ),
        # Severity and call-outs.
        *_labels(LabelColor.ALERT, "❤", "❤❤❤", "blocker"),
        *_labels(LabelColor.WARNING, "shipit"),
        *_labels(LabelColor.WELCOMING, "good-first-bug"),
        *_labels(LabelColor.INFO, "WIP"),
        # Cross-cutting concerns.
        *_labels(LabelColor.INFO, "i18n", "security", "ux"),
        # Train scheduling.
        *_labels(LabelColor.TARGET, *(f"train-{n}" for n in range(102, 108))),
    ),
    deprecated=(
        DeprecatedLabel(name="❤❤"),
        DeprecatedLabel(name="z-later"),
        DeprecatedLabel(name="wontfix"),
        DeprecatedLabel(name="backlog"),
        DeprecatedLabel(name="good first bug", replacement="good-first-bug"),
        DeprecatedLabel(name="strings"),
        DeprecatedLabel(name="waffle:now", replacement="waffle:active"),
        DeprecatedLabel(name="P1:now"),
        DeprecatedLabel(name="P2:next"),
        DeprecatedLabel(name="P3:backlog"),
        DeprecatedLabel(name="P5:wishlist"),
        DeprecatedLabel(name="P1"),
        DeprecatedLabel(name="P2"),
        DeprecatedLabel(name="P3"),
        DeprecatedLabel(name="P5"),
        *(DeprecatedLabel(name=f"train-{n}") for n in range(93, 102)),
    ),
    lifecycle_order=LIFECYCLE_ORDER,
    obsolete_prefixes=(LIFECYCLE_PREFIX, LEGACY_VERSION_PREFIX),
)


def load_taxonomy(path: Path | None = None) -> LabelTaxonomy:
    """Return the taxonomy stored at ``path``, or the built-in one when no path is given."""

    if path is None:
        return DEFAULT_TAXONOMY
    return LabelTaxonomy.model_validate_json(path.read_text(encoding="utf-8"))
