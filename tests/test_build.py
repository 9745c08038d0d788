from datetime import date
from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from scripts.verify_site import verify_site
from wxpages.build import BuildContext, build_site, today_for_build
from wxpages.dataset import load_dataset

ROOT = Path(__file__).resolve().parents[1]


def _build(out_root: Path, **kwargs) -> list[Path]:
    dataset = load_dataset(ROOT / "content" / "places.yaml")
    ctx = BuildContext(out_root=out_root, site=dataset.site, today=date(2026, 10, 19), **kwargs)
    return build_site(dataset, ctx)


def test_build_site_writes_every_page(tmp_path: Path):
    written = _build(tmp_path)

    assert tmp_path / "index.html" in written
    assert tmp_path / "404.html" in written
    assert tmp_path / "forecast" / "melbourne" / "index.html" in written
    assert len(written) == 8
    assert all(path.exists() for path in written)


def test_built_pages_link_to_each_other(tmp_path: Path):
    _build(tmp_path)

    home = BeautifulSoup((tmp_path / "index.html").read_text(encoding="utf-8"), "html.parser")
    hrefs = [a["href"] for a in home.select("div.examples a")]
    assert hrefs == ["/forecast/melbourne", "/forecast/sydney", "/forecast/brisbane"]

    detail = (tmp_path / "forecast" / "melbourne" / "index.html").read_text(encoding="utf-8")
    assert "Today" in detail and "Tomorrow" in detail
    assert verify_site(tmp_path) == []


def test_build_label_is_appended(tmp_path: Path):
    _build(tmp_path, build_label="test-label")
    html = (tmp_path / "404.html").read_text(encoding="utf-8")
    assert html.endswith("\n<!-- wxpages build: test-label -->\n")


def test_build_is_deterministic(tmp_path: Path):
    _build(tmp_path / "a")
    _build(tmp_path / "b")
    for name in ("index.html", "404.html", "forecast/brisbane/index.html"):
        assert (tmp_path / "a" / name).read_bytes() == (tmp_path / "b" / name).read_bytes()


def test_missing_data_warns(tmp_path: Path, capsys):
    _build(tmp_path)
    assert "[build] richmond-tas: no forecast or observation data" in capsys.readouterr().err


def test_today_for_build_uses_source_date_epoch(monkeypatch):
    monkeypatch.setenv("SOURCE_DATE_EPOCH", "86400")
    assert today_for_build(deterministic=True) == date(1970, 1, 2)

    monkeypatch.delenv("SOURCE_DATE_EPOCH")
    assert today_for_build(deterministic=True) == date(1970, 1, 1)

    monkeypatch.setenv("SOURCE_DATE_EPOCH", "soon")
    with pytest.raises(SystemExit):
        today_for_build(deterministic=True)


def test_verify_site_reports_broken_links(tmp_path: Path):
    _build(tmp_path)
    (tmp_path / "forecast" / "sydney" / "index.html").unlink()
    errors = verify_site(tmp_path)
    assert any("broken forecast link /forecast/sydney" in message for message in errors)
