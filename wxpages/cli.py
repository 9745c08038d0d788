"""Command-line interface for wxpages."""

import argparse
import hashlib
import shutil
import sys
import tempfile
from collections import Counter
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Optional

from .build import BuildContext, build_site, today_for_build
from .dataset import (
    example_places,
    find_place,
    load_dataset,
    load_site_config,
    other_matches,
    search_places,
)
from .hiccup import render
from .io_utils import warn, write_text
from .models import Dataset, SiteConfig
from .views import (
    ICON_MAP,
    error_page,
    forecast_page,
    home_page,
    not_found_page,
    suggestions,
)

VERSION = "0.1.0"


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from exc


def _load_inputs(args: argparse.Namespace) -> tuple[Dataset, SiteConfig]:
    dataset = load_dataset(Path(args.data)) if args.data else Dataset()
    site = load_site_config(Path(args.config)) if args.config else dataset.site
    return dataset, site


def _emit(rendered: str, out: Optional[str]) -> None:
    if out:
        write_text(Path(out), rendered)
        print(f"Wrote {out}", file=sys.stderr)
    else:
        sys.stdout.write(rendered + "\n")


def _handle_render(args: argparse.Namespace) -> None:
    dataset, site = _load_inputs(args)

    if args.page == "home":
        _emit(home_page(site, example_places(dataset, site)), args.out)
        return
    if args.page == "error":
        _emit(error_page(site, args.message or "Something went wrong."), args.out)
        return
    if args.page == "not-found":
        _emit(not_found_page(site, args.slug or ""), args.out)
        return

    if not args.slug:
        raise SystemExit("render forecast requires --slug")
    place = find_place(dataset, args.slug)
    if place is None:
        _emit(not_found_page(site, args.slug), args.out)
        raise SystemExit(1)
    rendered = forecast_page(
        site,
        place,
        observation=place.observation,
        forecast=place.forecast,
        other_matches=other_matches(dataset, place, site.other_matches_limit),
        today=args.today,
    )
    _emit(rendered, args.out)


def _hash_dir(root: Path) -> dict[str, str]:
    hashes: dict[str, str] = {}
    for path in sorted(root.rglob("*")):
        if path.is_file():
            rel = path.relative_to(root)
            hashes[str(rel)] = hashlib.sha256(path.read_bytes()).hexdigest()
    return hashes


def _copy_output(src: Path, dest: Path) -> None:
    if dest.exists():
        shutil.rmtree(dest)
    shutil.copytree(src, dest)


def _build_once(args: argparse.Namespace, out_root: Path) -> list[Path]:
    dataset, site = _load_inputs(args)
    today = args.today or today_for_build(deterministic=args.deterministic)
    ctx = BuildContext(
        out_root=out_root,
        site=site,
        today=today,
        build_label=args.build_label,
    )
    return build_site(dataset, ctx)


def _handle_build(args: argparse.Namespace) -> None:
    out_root = Path(args.out)

    if args.check:
        with tempfile.TemporaryDirectory() as tmp:
            tmp_dir = Path(tmp)
            run1 = tmp_dir / "run1"
            run2 = tmp_dir / "run2"
            _build_once(args, run1)
            _build_once(args, run2)
            if _hash_dir(run1) != _hash_dir(run2):
                raise SystemExit("Determinism check failed: outputs differ between runs")
            _copy_output(run1, out_root)
        print(f"Determinism check passed. Output copied to {out_root}")
        return

    written = _build_once(args, out_root)
    print(f"Built {len(written)} file(s) into {out_root}")


def _is_iso_timestamp(value: str) -> bool:
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


def _handle_validate(args: argparse.Namespace) -> None:
    data_path = Path(args.data)
    dataset = load_dataset(data_path)

    errors: list[str] = []
    slug_counts = Counter(place.slug for place in dataset.places)
    for slug, count in sorted(slug_counts.items()):
        if count > 1:
            errors.append(f"{data_path}: slug '{slug}' is used by {count} places")

    for slug in dataset.site.example_slugs:
        if slug not in slug_counts:
            errors.append(f"{data_path}: example slug '{slug}' does not match any place")

    for place in dataset.places:
        if place.forecast is None:
            continue
        for period in place.forecast.periods:
            if period.icon and period.icon not in ICON_MAP:
                warn(f"[validate] {place.slug}: unknown icon '{period.icon}'")
            if not _is_iso_timestamp(period.start_time):
                warn(
                    f"[validate] {place.slug}: start_time '{period.start_time}' "
                    "is not an ISO timestamp"
                )

    if errors:
        for message in errors:
            print(message, file=sys.stderr)
        raise SystemExit(1)

    print(f"Validated {len(dataset.places)} place(s) in {data_path}.")


def _handle_suggest(args: argparse.Namespace) -> None:
    dataset = load_dataset(Path(args.data))
    matches = search_places(dataset, args.query)
    print(render(suggestions(matches, args.active)))


def _add_input_arguments(parser: argparse.ArgumentParser, *, data_required: bool) -> None:
    parser.add_argument(
        "--data",
        required=data_required,
        help="Path to the places dataset (YAML or JSON).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Site config file overriding the dataset's site block.",
    )
    parser.add_argument(
        "--today",
        type=_parse_date,
        default=None,
        help="Date treated as today when labelling forecast days (YYYY-MM-DD).",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wxpages",
        description="Render forecast site pages from hiccup trees",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"wxpages {VERSION}",
        help="Show the wxpages version and exit.",
    )

    subparsers = parser.add_subparsers(dest="command")

    render_parser = subparsers.add_parser(
        "render",
        help="Render a single page.",
        description="Render one page to a file or stdout.",
    )
    render_parser.add_argument(
        "page",
        choices=["home", "forecast", "not-found", "error"],
        help="Page to render.",
    )
    _add_input_arguments(render_parser, data_required=False)
    render_parser.add_argument("--slug", default=None, help="Place slug for forecast pages.")
    render_parser.add_argument("--message", default=None, help="Message for the error page.")
    render_parser.add_argument("--out", default=None, help="Output file (default: stdout).")
    render_parser.set_defaults(func=_handle_render)

    build_parser = subparsers.add_parser(
        "build",
        help="Build the static site.",
        description="Render the home, forecast and 404 pages into a directory.",
    )
    _add_input_arguments(build_parser, data_required=True)
    build_parser.add_argument(
        "--out",
        default="generated",
        help="Directory to write rendered output.",
    )
    build_parser.add_argument(
        "--deterministic",
        action="store_true",
        help="Use SOURCE_DATE_EPOCH (or 0) as today's date when --today is not given.",
    )
    build_parser.add_argument(
        "--build-label",
        dest="build_label",
        default=None,
        help="Append a build label comment to every page.",
    )
    build_parser.add_argument(
        "--check",
        action="store_true",
        help=(
            "Run two builds into temporary directories and fail if outputs differ. "
            "An existing --out directory is removed and replaced by the checked output."
        ),
    )
    build_parser.set_defaults(func=_handle_build)

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a places dataset.",
        description="Check a dataset for schema errors, duplicate slugs and unknown icons.",
    )
    validate_parser.add_argument("--data", required=True, help="Path to the places dataset.")
    validate_parser.set_defaults(func=_handle_validate)

    suggest_parser = subparsers.add_parser(
        "suggest",
        help="Print search suggestion markup.",
        description="Search places by name and print the suggestion rows.",
    )
    suggest_parser.add_argument("--data", required=True, help="Path to the places dataset.")
    suggest_parser.add_argument("--q", dest="query", required=True, help="Search text.")
    suggest_parser.add_argument(
        "--active",
        type=int,
        default=-1,
        help="Index of the highlighted suggestion.",
    )
    suggest_parser.set_defaults(func=_handle_suggest)

    return parser


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


__all__ = ["build_parser", "main"]


if __name__ == "__main__":
    main()
