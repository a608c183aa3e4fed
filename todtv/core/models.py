"""
Core Data Models - Pydantic models for the provider content model.

This module defines the structures exchanged between the host and a
provider plugin: catalog sections, search results, load responses for
movies, series and live channels, episodes and playable stream links.
All of them are transient view objects built per request.
"""

from enum import Enum
from typing import Callable, List, Optional

from pydantic import BaseModel, Field, HttpUrl, field_validator


class TvType(str, Enum):
    """Content kinds a provider can return."""

    MOVIE = "Movie"
    TV_SERIES = "TvSeries"
    LIVE = "Live"

    def __str__(self) -> str:
        return self.value


class Quality(str, Enum):
    """Video quality of a stream link."""

    UNKNOWN = "Unknown"
    LOW = "480p"
    MEDIUM = "720p"
    HIGH = "1080p"
    ULTRA = "1440p"
    FOUR_K = "2160p"

    @classmethod
    def from_height(cls, height: int) -> "Quality":
        """Convert a vertical resolution to the closest Quality."""
        if height <= 0:
            return cls.UNKNOWN
        if height <= 480:
            return cls.LOW
        elif height <= 720:
            return cls.MEDIUM
        elif height <= 1080:
            return cls.HIGH
        elif height <= 1440:
            return cls.ULTRA
        else:
            return cls.FOUR_K

    @property
    def height(self) -> int:
        """Get the height in pixels for this quality (0 when unknown)."""
        if self is Quality.UNKNOWN:
            return 0
        return int(self.value.replace('p', ''))

    def __str__(self) -> str:
        return self.value


class SearchResult(BaseModel):
    """
    A lightweight reference to a title, produced from one anchor element.

    Used both for catalog sections and for search results.
    """

    title: str = Field(..., min_length=1, description="Display title")
    url: HttpUrl = Field(..., description="Absolute URL of the title page")
    provider_name: str = Field(..., min_length=1, description="Name of the provider that produced it")
    type: TvType = Field(..., description="Content kind")
    poster_url: Optional[str] = Field(None, description="Poster image URL")

    @field_validator('title')
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Strip surrounding whitespace; blank titles are rejected."""
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v

    def __str__(self) -> str:
        return f"{self.title} ({self.type})"


class HomePageList(BaseModel):
    """A named catalog section of the main page."""

    name: str = Field(..., min_length=1, description="Section title")
    items: List[SearchResult] = Field(default_factory=list, description="Section items in page order")


class HomePageResponse(BaseModel):
    """Main page listing returned by a provider."""

    items: List[HomePageList] = Field(default_factory=list)
    has_next: bool = Field(False, description="Whether another page can be requested")


class MainPageRequest(BaseModel):
    """Host handle describing which main page listing to fetch."""

    name: str = Field(..., description="Listing display name")
    data: str = Field(..., description="Provider-specific listing locator")


class Episode(BaseModel):
    """A single episode of a series."""

    url: HttpUrl = Field(..., description="Absolute URL of the episode page")
    title: str = Field(..., min_length=1, description="Episode title")
    season: int = Field(1, ge=0, description="Season number")
    episode: int = Field(..., ge=0, description="Episode number")
    thumbnail_url: Optional[str] = Field(None, description="Episode thumbnail URL")

    def __str__(self) -> str:
        return f"S{self.season:02d}E{self.episode:02d}: {self.title}"


class LoadResponse(BaseModel):
    """
    Full metadata for one title page.

    Concrete shapes are MovieLoadResponse, TvSeriesLoadResponse and
    LiveStreamLoadResponse; ``data_url`` is what the host later passes
    back to ``load_links``.
    """

    title: str = Field(..., min_length=1, description="Title")
    url: HttpUrl = Field(..., description="Absolute URL of the title page")
    provider_name: str = Field(..., min_length=1, description="Provider name")
    type: TvType = Field(..., description="Content kind")
    data_url: str = Field(..., description="Locator handed to load_links")
    poster_url: Optional[str] = Field(None, description="Poster image URL")
    plot: Optional[str] = Field(None, description="Synopsis")
    year: Optional[int] = Field(None, description="Release year")
    tags: List[str] = Field(default_factory=list, description="Genre tags")

    @field_validator('title')
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        """Drop blank tags and duplicates, keeping page order."""
        cleaned = [tag.strip() for tag in v if tag and tag.strip()]
        return list(dict.fromkeys(cleaned))

    def __str__(self) -> str:
        return f"{self.title} ({self.type})"


class MovieLoadResponse(LoadResponse):
    """Load response for a movie."""

    type: TvType = TvType.MOVIE


class TvSeriesLoadResponse(LoadResponse):
    """Load response for a series, including its episodes."""

    type: TvType = TvType.TV_SERIES
    episodes: List[Episode] = Field(default_factory=list, description="Episodes in page order")


class LiveStreamLoadResponse(LoadResponse):
    """Load response for a live channel."""

    type: TvType = TvType.LIVE


class ExtractorLink(BaseModel):
    """A playable stream link delivered to the host through a callback."""

    source: str = Field(..., description="Provider or extractor that found the link")
    name: str = Field(..., description="Display name")
    url: str = Field(..., min_length=1, description="Stream URL")
    referer: str = Field("", description="Referer to send when playing")
    quality: Quality = Field(Quality.UNKNOWN, description="Stream quality")
    is_m3u8: bool = Field(False, description="Whether the URL is an HLS manifest")
    headers: dict = Field(default_factory=dict, description="Extra playback headers")

    def __str__(self) -> str:
        return f"{self.name} [{self.quality}] {self.url}"


class SubtitleFile(BaseModel):
    """An external subtitle track."""

    lang: str
    url: str


# Callback signatures used by load_links and extractors
LinkCallback = Callable[[ExtractorLink], None]
SubtitleCallback = Callable[[SubtitleFile], None]

# Export all models and types
__all__ = [
    "TvType",
    "Quality",
    "SearchResult",
    "HomePageList",
    "HomePageResponse",
    "MainPageRequest",
    "Episode",
    "LoadResponse",
    "MovieLoadResponse",
    "TvSeriesLoadResponse",
    "LiveStreamLoadResponse",
    "ExtractorLink",
    "SubtitleFile",
    "LinkCallback",
    "SubtitleCallback",
]
