"""Server-rendered pages for the forecast site, built as hiccup trees."""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Optional, Sequence
from urllib.parse import quote

from .hiccup import INNER_HTML, Node, document, raw
from .models import Forecast, ForecastPeriod, Observation, Place, PlaceMatch, SiteConfig

ICON_MAP = {
    "sunny": "☀️",
    "clear": "🌙",
    "partly-cloudy": "⛅",
    "cloudy": "☁️",
    "hazy": "🌫️",
    "light-rain": "🌦️",
    "windy": "💨",
    "fog": "🌫️",
    "showers": "🌧️",
    "rain": "🌧️",
    "dusty": "💨",
    "frost": "❄️",
    "snow": "🌨️",
    "storm": "⛈️",
    "light-showers": "🌦️",
    "heavy-showers": "🌧️",
    "cyclone": "🌀",
}
DEFAULT_ICON = "🌡️"

BACK_LABEL = "← Back to search"

_JSON_SCRIPT_ESCAPES = {ord(ch): f"\\u{ord(ch):04x}" for ch in "<>&"}


def icon_for(icon: Optional[str]) -> str:
    return ICON_MAP.get(icon or "", DEFAULT_ICON)


def format_number(value: Any) -> str:
    """Format a reading without a trailing ``.0`` for whole numbers."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_day(start_time: str, today: Optional[date] = None) -> str:
    """Label a forecast period as Today, Tomorrow or a short day (``Mon 20``).

    The date is taken in the timestamp's own offset. Text that is not an ISO
    timestamp is returned unchanged.
    """

    try:
        moment = datetime.fromisoformat(start_time.replace("Z", "+00:00"))
    except ValueError:
        return start_time

    today = today or date.today()
    day = moment.date()
    if day == today:
        return "Today"
    if day == today + timedelta(days=1):
        return "Tomorrow"
    return f"{day:%a} {day.day}"


def forecast_href(slug: str) -> str:
    return f"/forecast/{quote(slug)}"


def _back_link() -> Node:
    return ["a.back-link", {"href": "/"}, BACK_LABEL]


def _with_breaks(lines: Sequence[str]) -> Node:
    parts: list[Node] = []
    for index, line in enumerate(lines):
        if index:
            parts.append(["br"])
        parts.append(line)
    return tuple(parts)


def json_script(payload: Any, element_id: Optional[str] = None) -> Node:
    """Embed ``payload`` as a JSON data block.

    ``<``, ``>`` and ``&`` are written as unicode escapes so the payload can
    never close the script element, which makes the raw insertion safe.
    """

    text = json.dumps(payload, ensure_ascii=False, sort_keys=True)
    return [
        "script",
        {
            "type": "application/json",
            "id": element_id,
            INNER_HTML: raw(text.translate(_JSON_SCRIPT_ESCAPES)),
        },
    ]


def layout(config: SiteConfig, title: str, *body: Node, include_client_js: bool = False) -> str:
    """Full HTML document wrapping ``body`` in the shared page chrome."""

    return document(
        [
            "html",
            {"lang": config.lang},
            [
                "head",
                ["meta", {"charset": "UTF-8"}],
                [
                    "meta",
                    {"name": "viewport", "content": "width=device-width, initial-scale=1.0"},
                ],
                ["title", title],
                ["link", {"rel": "stylesheet", "href": config.stylesheet_href}],
            ],
            [
                "body",
                ["div.container", body],
                include_client_js
                and ["script", {"src": config.client_js_href, "defer": True}],
            ],
        ]
    )


def tech_stack(config: SiteConfig) -> Node:
    return ["div.tech-stack", _with_breaks(config.footer_lines)]


def _detail(label: str, value: str) -> Node:
    return ["div.detail", ["div.detail-label", label], ["div.detail-value", value]]


def current_conditions(observation: Observation) -> Node:
    """Current observation block."""

    heading = "Current Conditions"
    if observation.station:
        heading += f" \u2014 {observation.station}"

    temp = observation.temp_c
    feels_like = observation.feels_like_c
    wind_text = f"{observation.wind_dir or ''} {format_number(observation.wind_speed_kmh)} km/h"
    return [
        "div.current-conditions",
        ["h3", heading],
        [
            "div.current-temps",
            ["span.temp-main", f"{format_number(temp)}°" if temp is not None else "--"],
            feels_like is not None
            and ["span.feels-like", f"Feels like {format_number(feels_like)}°"],
        ],
        [
            "div.current-details",
            observation.humidity is not None
            and _detail("Humidity", f"{format_number(observation.humidity)}%"),
            observation.wind_speed_kmh is not None and _detail("Wind", wind_text.strip()),
            observation.gust_speed_kmh is not None
            and _detail("Gusts", f"{format_number(observation.gust_speed_kmh)} km/h"),
            observation.rain_24hr_mm is not None
            and _detail("Rain (24h)", f"{format_number(observation.rain_24hr_mm)} mm"),
        ],
    ]


def _rain_text(rain_chance: Any) -> str:
    if isinstance(rain_chance, int):
        return f"{rain_chance}%"
    return str(rain_chance)


def forecast_card(period: ForecastPeriod, today: Optional[date] = None) -> Node:
    return [
        "div.forecast-card",
        ["div.day", format_day(period.start_time, today)],
        ["div.icon", icon_for(period.icon)],
        ["div.conditions", period.forecast or ""],
        [
            "div.temps",
            period.min_temp is not None
            and ["span.temp.min", f"{format_number(period.min_temp)}°"],
            period.max_temp is not None
            and ["span.temp.max", f"{format_number(period.max_temp)}°"],
            period.rain_chance is not None
            and ["span.temp.rain", _rain_text(period.rain_chance)],
        ],
    ]


def forecast_section(forecast: Forecast, today: Optional[date] = None) -> Node:
    if not forecast.periods:
        return None
    return [
        "div.forecast-section",
        ["h3", "7-Day Forecast"],
        [forecast_card(period, today) for period in forecast.periods],
    ]


def other_matches_section(matches: Sequence[PlaceMatch]) -> Node:
    """Links to other places sharing the same name."""
    if not matches:
        return None
    return [
        "div.other-matches",
        ["h4", "Other matches:"],
        [
            ["a", {"href": forecast_href(match.slug)}, f"{match.name}, {match.state}"]
            for match in matches
        ],
    ]


def suggestions(places: Iterable[PlaceMatch], active_index: int = -1) -> Node:
    """Search suggestion rows, as shown under the home page search box."""

    return tuple(
        [
            "div.suggestion",
            {
                "class": index == active_index and "active",
                "data-slug": place.slug,
                "data-index": index,
            },
            ["span.suggestion-name", place.name],
            ["span.suggestion-meta", f"{place.type or ''}, {place.state}"],
        ]
        for index, place in enumerate(places)
    )


def home_page(config: SiteConfig, examples: Sequence[PlaceMatch]) -> str:
    """Home page with search autocomplete."""

    return layout(
        config,
        config.title,
        ["h1", config.title],
        ["p.subtitle", config.subtitle],
        [
            "div.search-box",
            [
                "input#search",
                {"type": "text", "placeholder": "Enter city name...", "autocomplete": "off"},
            ],
            ["div#suggestions.suggestions"],
        ],
        [
            "div.examples",
            "Try: ",
            [["a", {"href": forecast_href(example.slug)}, example.name] for example in examples],
        ],
        tech_stack(config),
        include_client_js=True,
    )


def forecast_page(
    config: SiteConfig,
    place: Place,
    observation: Optional[Observation] = None,
    forecast: Optional[Forecast] = None,
    other_matches: Sequence[PlaceMatch] = (),
    today: Optional[date] = None,
) -> str:
    """Forecast page for a single place."""

    state_line = f"{place.type}, {place.state}" if place.type else place.state
    payload = {
        "place": place.as_match().model_dump(),
        "observation": observation.model_dump() if observation else None,
        "forecast": forecast.model_dump() if forecast else None,
    }
    return layout(
        config,
        f"{place.name} Weather Forecast",
        _back_link(),
        ["div.location-header", ["h2", place.name], ["div.state", state_line]],
        observation is not None and current_conditions(observation),
        forecast is not None and forecast_section(forecast, today),
        other_matches_section(other_matches),
        tech_stack(config),
        json_script(payload, "forecast-data"),
    )


def not_found_page(config: SiteConfig, slug: str) -> str:
    """404 page for unknown locations."""

    return layout(
        config,
        "Location Not Found",
        [
            "div.not-found",
            ["h2", "Location Not Found"],
            ["p", f'We couldn\'t find a location matching "{slug}".'],
            _back_link(),
        ],
    )


def error_page(config: SiteConfig, message: str) -> str:
    return layout(config, "Error", _back_link(), ["div.error", message])


__all__ = [
    "DEFAULT_ICON",
    "ICON_MAP",
    "current_conditions",
    "error_page",
    "forecast_card",
    "forecast_href",
    "forecast_page",
    "forecast_section",
    "format_day",
    "format_number",
    "home_page",
    "icon_for",
    "json_script",
    "layout",
    "not_found_page",
    "other_matches_section",
    "suggestions",
    "tech_stack",
]
