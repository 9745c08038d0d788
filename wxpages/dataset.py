"""Loading and querying the places dataset."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError

from .io_utils import read_data
from .models import Dataset, Place, PlaceMatch, SiteConfig

DEFAULT_EXAMPLE_COUNT = 3


def load_dataset(path: Path) -> Dataset:
    """Load and validate a places dataset (YAML or JSON)."""

    if not path.exists():
        raise SystemExit(f"Dataset not found: {path}")
    try:
        payload = read_data(path) or {}
        return Dataset.model_validate(payload)
    except (json.JSONDecodeError, yaml.YAMLError, ValidationError) as exc:
        raise SystemExit(f"Invalid dataset {path}: {exc}") from exc


def load_site_config(path: Path) -> SiteConfig:
    """Load a standalone site configuration file."""

    if not path.exists():
        raise SystemExit(f"Site config not found: {path}")
    try:
        payload = read_data(path) or {}
        return SiteConfig.model_validate(payload)
    except (json.JSONDecodeError, yaml.YAMLError, ValidationError) as exc:
        raise SystemExit(f"Invalid site config {path}: {exc}") from exc


def find_place(dataset: Dataset, slug: str) -> Optional[Place]:
    for place in dataset.places:
        if place.slug == slug:
            return place
    return None


def _by_importance(place: Place) -> tuple:
    return (-place.importance, place.name)


def search_places(dataset: Dataset, query: str, limit: Optional[int] = None) -> List[Place]:
    """Places whose name contains ``query``, most important first."""

    needle = query.strip().casefold()
    if not needle:
        return []
    if limit is None:
        limit = dataset.site.search_limit
    matches = [place for place in dataset.places if needle in place.name.casefold()]
    return sorted(matches, key=_by_importance)[:limit]


def other_matches(dataset: Dataset, place: Place, limit: Optional[int] = None) -> List[PlaceMatch]:
    """Other places sharing ``place``'s name, for disambiguation links."""

    if limit is None:
        limit = dataset.site.other_matches_limit
    same_name = [
        other
        for other in dataset.places
        if other.name == place.name and other.slug != place.slug
    ]
    ranked = sorted(same_name, key=lambda other: -other.importance)
    return [other.as_match() for other in ranked[:limit]]


def example_places(dataset: Dataset, site: Optional[SiteConfig] = None) -> List[PlaceMatch]:
    """Places linked from the home page.

    Uses the configured example slugs, else up to three cities by name.
    """

    slugs = (site or dataset.site).example_slugs
    if slugs:
        found = [find_place(dataset, slug) for slug in slugs]
        return [place.as_match() for place in found if place is not None]

    cities = sorted(
        (place for place in dataset.places if place.type == "city"),
        key=lambda place: place.name,
    )
    return [place.as_match() for place in cities[:DEFAULT_EXAMPLE_COUNT]]


__all__ = [
    "example_places",
    "find_place",
    "load_dataset",
    "load_site_config",
    "other_matches",
    "search_places",
]
