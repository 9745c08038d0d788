"""Pydantic models for forecast pages and site configuration."""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Observation(BaseModel):
    """Latest reading from an observation station."""

    station: Optional[str] = Field(None, description="Observation station name.")
    temp_c: Optional[float] = Field(None, description="Air temperature in Celsius.")
    feels_like_c: Optional[float] = Field(
        None, description="Apparent temperature in Celsius."
    )
    humidity: Optional[float] = Field(
        None, ge=0, le=100, description="Relative humidity percentage."
    )
    wind_dir: Optional[str] = Field(None, description="Compass wind direction, e.g. NW.")
    wind_speed_kmh: Optional[float] = Field(None, ge=0, description="Wind speed in km/h.")
    gust_speed_kmh: Optional[float] = Field(None, ge=0, description="Gust speed in km/h.")
    rain_24hr_mm: Optional[float] = Field(
        None, ge=0, description="Rainfall over the last 24 hours in millimetres."
    )


class ForecastPeriod(BaseModel):
    """One day of a precis forecast."""

    start_time: str = Field(..., description="ISO timestamp the period starts at.")
    forecast: Optional[str] = Field(None, description="Short forecast text.")
    icon: Optional[str] = Field(None, description="Icon key such as sunny or showers.")
    min_temp: Optional[float] = Field(None, description="Minimum temperature in Celsius.")
    max_temp: Optional[float] = Field(None, description="Maximum temperature in Celsius.")
    rain_chance: Optional[Union[int, str]] = Field(
        None, description="Chance of rain, either a percentage or display text."
    )


class Forecast(BaseModel):
    """Multi-day forecast for a forecast area."""

    periods: List[ForecastPeriod] = Field(
        default_factory=list, description="Forecast periods in chronological order."
    )


class PlaceMatch(BaseModel):
    """Minimal place data used for links and search suggestions."""

    name: str = Field(..., description="Display name.")
    slug: str = Field(
        ...,
        pattern=r"^[A-Za-z0-9][A-Za-z0-9_-]*$",
        description="URL slug for the forecast page.",
    )
    type: Optional[str] = Field(None, description="Place kind, e.g. city or town.")
    state: str = Field(..., description="State or territory abbreviation.")


class Place(PlaceMatch):
    """Entry in the places dataset."""

    lat: Optional[float] = Field(None, ge=-90, le=90, description="Latitude.")
    lon: Optional[float] = Field(None, ge=-180, le=180, description="Longitude.")
    importance: float = Field(0, description="Ranking weight for search results.")
    bom_aac: Optional[str] = Field(
        None, description="Forecast area code the place belongs to."
    )
    obs_wmo: Optional[str] = Field(
        None, description="WMO id of the nearest observation station."
    )
    obs_name: Optional[str] = Field(None, description="Observation station name.")
    observation: Optional[Observation] = Field(
        None, description="Latest observation for the place, if any."
    )
    forecast: Optional[Forecast] = Field(None, description="Forecast for the place.")

    def as_match(self) -> PlaceMatch:
        return PlaceMatch(name=self.name, slug=self.slug, type=self.type, state=self.state)


class SiteConfig(BaseModel):
    """Site-wide settings shared by every page."""

    title: str = Field(
        "Australian Weather Forecast", description="Home page title and heading."
    )
    subtitle: str = Field(
        "Search for any Australian city or town",
        description="Line shown under the home page heading.",
    )
    lang: str = Field("en", description="Value of the html lang attribute.")
    stylesheet_href: str = Field(
        "/styles.css", alias="stylesheetHref", description="Stylesheet linked from every page."
    )
    client_js_href: str = Field(
        "/js/client.js",
        alias="clientJsHref",
        description="Search script included on pages that need it.",
    )
    footer_lines: List[str] = Field(
        default_factory=lambda: [
            "Built with Python + wxpages",
            "Data from Bureau of Meteorology",
        ],
        alias="footerLines",
        description="Lines of the tech stack footer, separated by line breaks.",
    )
    example_slugs: List[str] = Field(
        default_factory=list,
        alias="exampleSlugs",
        description="Places linked from the home page; defaults to three cities.",
    )
    search_limit: int = Field(
        10, ge=1, alias="searchLimit", description="Maximum search results."
    )
    other_matches_limit: int = Field(
        5,
        ge=0,
        alias="otherMatchesLimit",
        description="Maximum same-name places listed on a forecast page.",
    )

    model_config = ConfigDict(populate_by_name=True)


class Dataset(BaseModel):
    """Schema for a places dataset file."""

    site: SiteConfig = Field(
        default_factory=SiteConfig, description="Embedded site configuration."
    )
    places: List[Place] = Field(default_factory=list, description="Known places.")


__all__ = [
    "Dataset",
    "Forecast",
    "ForecastPeriod",
    "Observation",
    "Place",
    "PlaceMatch",
    "SiteConfig",
]
