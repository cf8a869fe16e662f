"""Predefined snippet catalog offered as choices for ``BY_ID`` buttons."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterable, Mapping, Sequence, Tuple


@dataclass(frozen=True)
class CatalogEntry:
    """Selector value and the caption shown next to it."""

    value: str
    label: str


# Element ids of the predefined reply blocks rendered on the ticket page.
DEFAULT_CATALOG: Final[Tuple[CatalogEntry, ...]] = (
    CatalogEntry("greeting", "Greeting"),
    CatalogEntry("signature", "Signature"),
    CatalogEntry("awaiting-reply", "Awaiting customer reply"),
    CatalogEntry("escalated", "Escalated to second line"),
    CatalogEntry("resolved", "Marked as resolved"),
    CatalogEntry("closing", "Closing remarks"),
)


def catalog_choices(catalog: Iterable[CatalogEntry]) -> list[tuple[str, str]]:
    """Return ``(value, label)`` pairs for populating a selector widget."""

    return [(entry.value, entry.label) for entry in catalog]


def catalog_labels(catalog: Iterable[CatalogEntry]) -> Mapping[str, str]:
    return {entry.value: entry.label for entry in catalog}


def describe_selector(selector: str, catalog: Iterable[CatalogEntry]) -> str:
    """Return the catalog caption for ``selector`` or flag it as unknown."""

    label = catalog_labels(catalog).get(selector)
    if label is None:
        return f"{selector or '<none>'} (not in catalog)"
    return label


def default_selector(catalog: Sequence[CatalogEntry]) -> str:
    return catalog[0].value if catalog else ""


__all__ = [
    "CatalogEntry",
    "DEFAULT_CATALOG",
    "catalog_choices",
    "catalog_labels",
    "default_selector",
    "describe_selector",
]
