"""Verify a built forecast site: page structure and internal forecast links."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterable

from bs4 import BeautifulSoup

DOCTYPE = "<!DOCTYPE html>"
FORECAST_PREFIX = "/forecast/"


def find_html_files(root: Path) -> Iterable[Path]:
    """Yield all HTML files under the given root directory."""

    for path in sorted(root.rglob("*.html")):
        if path.is_file():
            yield path


def _resolve_forecast_href(root: Path, href: str) -> Path:
    slug = href[len(FORECAST_PREFIX):].strip("/")
    return root / "forecast" / slug / "index.html"


def _check_page(root: Path, html_path: Path) -> list[str]:
    errors: list[str] = []
    html = html_path.read_text(encoding="utf-8")
    if not html.startswith(DOCTYPE):
        errors.append(f"{html_path}: missing doctype")

    soup = BeautifulSoup(html, "html.parser")
    if not soup.title or not soup.title.get_text(strip=True):
        errors.append(f"{html_path}: empty or missing <title>")

    viewport = soup.find("meta", attrs={"name": "viewport"})
    if not viewport or "width=device-width" not in (viewport.get("content") or ""):
        errors.append(f"{html_path}: viewport meta missing")

    stylesheets = soup.find_all("link", rel=lambda value: value and "stylesheet" in value)
    if not stylesheets:
        errors.append(f"{html_path}: stylesheet link missing")

    for link in soup.select("a[href]"):
        href = link["href"]
        if href.startswith(FORECAST_PREFIX) and not _resolve_forecast_href(root, href).exists():
            errors.append(f"{html_path}: broken forecast link {href}")
    return errors


def verify_site(root: Path) -> list[str]:
    errors: list[str] = []
    for required in (root / "index.html", root / "404.html"):
        if not required.exists():
            errors.append(f"Expected file missing: {required}")

    for html_path in find_html_files(root):
        errors.extend(_check_page(root, html_path))
    return errors


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Verify a built forecast site.")
    parser.add_argument("--root", required=True, help="Built output root (e.g., generated)")
    args = parser.parse_args(argv)

    root = Path(args.root)
    if not root.exists():
        print(f"{root} not found; run wxpages build first.", file=sys.stderr)
        return 1

    errors = verify_site(root)
    if errors:
        for message in errors:
            print(message, file=sys.stderr)
        return 1

    print(f"Verified {len(list(find_html_files(root)))} page(s) at {root}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
