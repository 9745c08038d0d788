import json
from datetime import date
from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from wxpages.dataset import load_dataset, other_matches
from wxpages.hiccup import render
from wxpages.models import (
    Forecast,
    ForecastPeriod,
    Observation,
    Place,
    PlaceMatch,
    SiteConfig,
)
from wxpages.views import (
    DEFAULT_ICON,
    current_conditions,
    error_page,
    forecast_card,
    forecast_page,
    forecast_section,
    format_day,
    format_number,
    home_page,
    icon_for,
    json_script,
    not_found_page,
    other_matches_section,
    suggestions,
)

ROOT = Path(__file__).resolve().parents[1]
TODAY = date(2026, 10, 19)


@pytest.fixture
def dataset():
    return load_dataset(ROOT / "content" / "places.yaml")


@pytest.mark.parametrize(
    "start_time, expected",
    [
        ("2026-10-19T00:00:00+11:00", "Today"),
        ("2026-10-20T06:00:00Z", "Tomorrow"),
        ("2026-10-22T00:00:00+11:00", "Thu 22"),
        ("2026-10-25", "Sun 25"),
        ("not a date", "not a date"),
    ],
)
def test_format_day(start_time, expected):
    assert format_day(start_time, TODAY) == expected


def test_format_number_drops_trailing_zero():
    assert format_number(21.0) == "21"
    assert format_number(18.4) == "18.4"
    assert format_number(5) == "5"


def test_icon_lookup_falls_back_to_thermometer():
    assert icon_for("sunny") == "☀️"
    assert icon_for("volcano") == DEFAULT_ICON
    assert icon_for(None) == DEFAULT_ICON


def test_home_page_structure():
    examples = [PlaceMatch(name="Melbourne", slug="melbourne", type="city", state="VIC")]
    html = home_page(SiteConfig(), examples)
    assert html.startswith("<!DOCTYPE html><html lang=\"en\">")

    soup = BeautifulSoup(html, "html.parser")
    assert soup.title.get_text() == "Australian Weather Forecast"
    search = soup.find("input", id="search")
    assert search["type"] == "text"
    assert search["autocomplete"] == "off"
    assert soup.find("div", id="suggestions")["class"] == ["suggestions"]
    assert [a["href"] for a in soup.select("div.examples a")] == ["/forecast/melbourne"]
    assert '<script src="/js/client.js" defer></script>' in html
    assert "Built with Python + wxpages<br>Data from Bureau of Meteorology" in html


def test_forecast_page_for_sample_place(dataset):
    place = next(p for p in dataset.places if p.slug == "melbourne")
    html = forecast_page(
        dataset.site,
        place,
        observation=place.observation,
        forecast=place.forecast,
        other_matches=[],
        today=TODAY,
    )
    soup = BeautifulSoup(html, "html.parser")

    assert soup.title.get_text() == "Melbourne Weather Forecast"
    assert soup.select_one("div.location-header h2").get_text() == "Melbourne"
    assert soup.select_one("div.state").get_text() == "city, VIC"
    assert soup.select_one("div.current-conditions h3").get_text() == (
        "Current Conditions \u2014 Melbourne (Olympic Park)"
    )
    assert soup.select_one("span.temp-main").get_text() == "18.4°"
    days = [div.get_text() for div in soup.select("div.forecast-card div.day")]
    assert days == ["Today", "Tomorrow", "Wed 21"]
    assert soup.select_one("div.other-matches") is None
    assert soup.find("script", src="/js/client.js") is None

    payload = json.loads(soup.find("script", id="forecast-data").string)
    assert payload["place"]["slug"] == "melbourne"
    assert len(payload["forecast"]["periods"]) == 3


def test_forecast_page_lists_other_matches(dataset):
    place = next(p for p in dataset.places if p.slug == "richmond-vic")
    html = forecast_page(
        dataset.site, place, other_matches=other_matches(dataset, place), today=TODAY
    )
    soup = BeautifulSoup(html, "html.parser")

    links = soup.select("div.other-matches a")
    assert [a["href"] for a in links] == ["/forecast/richmond-nsw", "/forecast/richmond-tas"]
    assert [a.get_text() for a in links] == ["Richmond, NSW", "Richmond, TAS"]
    assert soup.select_one("div.current-conditions") is None
    assert soup.select_one("div.forecast-section") is None


def test_current_conditions_with_missing_readings():
    html = render(current_conditions(Observation()))
    assert '<span class="temp-main">--</span>' in html
    assert "Feels like" not in html
    assert '<div class="current-details"></div>' in html


def test_current_conditions_details():
    observation = Observation(humidity=62, wind_speed_kmh=17, gust_speed_kmh=28.5, rain_24hr_mm=0)
    soup = BeautifulSoup(render(current_conditions(observation)), "html.parser")
    values = [div.get_text() for div in soup.select("div.detail-value")]
    assert values == ["62%", "17 km/h", "28.5 km/h", "0 mm"]


def test_forecast_card_rain_chance():
    card = forecast_card(
        ForecastPeriod(start_time="2026-10-19", icon="rain", min_temp=0, rain_chance=0), TODAY
    )
    assert render(card) == (
        '<div class="forecast-card"><div class="day">Today</div>'
        '<div class="icon">🌧️</div><div class="conditions"></div>'
        '<div class="temps"><span class="temp min">0°</span>'
        '<span class="temp rain">0%</span></div></div>'
    )


def test_empty_sections_render_nothing():
    assert forecast_section(Forecast()) is None
    assert other_matches_section([]) is None
    assert render(forecast_section(Forecast())) == ""


def test_suggestions_markup():
    places = [
        PlaceMatch(name="Melbourne", slug="melbourne", type="city", state="VIC"),
        PlaceMatch(name="Melton", slug="melton", state="VIC"),
    ]
    assert render(suggestions(places, active_index=1)) == (
        '<div data-slug="melbourne" data-index="0" class="suggestion">'
        '<span class="suggestion-name">Melbourne</span>'
        '<span class="suggestion-meta">city, VIC</span></div>'
        '<div data-slug="melton" data-index="1" class="suggestion active">'
        '<span class="suggestion-name">Melton</span>'
        '<span class="suggestion-meta">, VIC</span></div>'
    )
    assert render(suggestions([])) == ""


def test_json_script_cannot_close_its_element():
    html = render(json_script({"name": "</script><script>alert(1)</script> & more"}, "data"))
    assert html.count("</script>") == 1
    assert html.startswith('<script type="application/json" id="data">')
    body = html[len('<script type="application/json" id="data">'):-len("</script>")]
    assert json.loads(body) == {"name": "</script><script>alert(1)</script> & more"}


def test_not_found_page_escapes_slug():
    html = not_found_page(SiteConfig(), "<img src=x>")
    assert "<img src=x>" not in html
    assert 'We couldn\'t find a location matching "&lt;img src=x&gt;".' in html
    assert '<a class="back-link" href="/">' not in html
    assert '<a href="/" class="back-link">← Back to search</a>' in html


def test_error_page_message_is_escaped():
    html = error_page(SiteConfig(), "Upstream <timeout>")
    assert '<div class="error">Upstream &lt;timeout&gt;</div>' in html
    assert "<title>Error</title>" in html


def test_site_config_changes_layout():
    config = SiteConfig(lang="en-AU", stylesheet_href="/css/site.css", footer_lines=["One"])
    place = Place(name="Hobart", slug="hobart", state="TAS")
    html = forecast_page(config, place)
    assert html.startswith('<!DOCTYPE html><html lang="en-AU">')
    assert '<link rel="stylesheet" href="/css/site.css">' in html
    assert '<div class="tech-stack">One</div>' in html
    assert '<div class="state">TAS</div>' in html
