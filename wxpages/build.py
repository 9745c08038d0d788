"""Build a static copy of the forecast site from a places dataset."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import List, Optional

from .dataset import example_places, other_matches
from .io_utils import warn, write_text
from .models import Dataset, Place, SiteConfig
from .views import forecast_page, home_page, not_found_page


@dataclass
class BuildContext:
    """Configuration for building the forecast site."""

    out_root: Path
    site: SiteConfig
    today: Optional[date] = None
    build_label: Optional[str] = None

    def page_path(self, *parts: str) -> Path:
        return self.out_root.joinpath(*parts)

    def write_page(self, path: Path, rendered: str) -> Path:
        if self.build_label:
            rendered += f"\n<!-- wxpages build: {self.build_label} -->\n"
        return write_text(path, rendered)


def today_for_build(*, deterministic: bool = False) -> date:
    """Return the date pages treat as today.

    With ``deterministic`` the date comes from ``SOURCE_DATE_EPOCH`` (or the
    epoch itself) so repeated builds produce identical output.
    """

    if not deterministic:
        return date.today()
    epoch = os.environ.get("SOURCE_DATE_EPOCH", "0")
    try:
        seconds = int(epoch)
    except ValueError as exc:
        raise SystemExit(f"SOURCE_DATE_EPOCH must be an integer, got {epoch!r}") from exc
    return datetime.fromtimestamp(seconds, tz=timezone.utc).date()


def build_home(dataset: Dataset, ctx: BuildContext) -> List[Path]:
    rendered = home_page(ctx.site, example_places(dataset, ctx.site))
    return [ctx.write_page(ctx.page_path("index.html"), rendered)]


def build_forecast(dataset: Dataset, place: Place, ctx: BuildContext) -> List[Path]:
    """Render the forecast page for ``place``.

    Returns a list of written paths to make it easy to tally outputs.
    """

    if place.forecast is None and place.observation is None:
        warn(f"[build] {place.slug}: no forecast or observation data")
    rendered = forecast_page(
        ctx.site,
        place,
        observation=place.observation,
        forecast=place.forecast,
        other_matches=other_matches(dataset, place, ctx.site.other_matches_limit),
        today=ctx.today,
    )
    output_file = ctx.page_path("forecast", place.slug, "index.html")
    return [ctx.write_page(output_file, rendered)]


def build_not_found(ctx: BuildContext, slug: str = "") -> List[Path]:
    rendered = not_found_page(ctx.site, slug)
    return [ctx.write_page(ctx.page_path("404.html"), rendered)]


def build_site(dataset: Dataset, ctx: BuildContext) -> List[Path]:
    """Render every page of the site into ``ctx.out_root``."""

    written: List[Path] = []
    written.extend(build_home(dataset, ctx))
    for place in dataset.places:
        written.extend(build_forecast(dataset, place, ctx))
    written.extend(build_not_found(ctx))
    return written


__all__ = [
    "BuildContext",
    "build_forecast",
    "build_home",
    "build_not_found",
    "build_site",
    "today_for_build",
]
