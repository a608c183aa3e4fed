"""
TOD TV Parser - HTML parsing utilities for todtv.com.tr

This module holds every selector the plugin uses and turns the site's
pages into result models. Missing fields degrade to defaults or skip the
element; nothing here raises on unexpected markup.
"""

import re
import logging
from typing import Any, Dict, List, Optional

from bs4 import Tag

from todtv.core.models import Episode, HomePageList, SearchResult
from todtv.plugins.common import (
    HTMLParser,
    TextCleaner,
    URLHelper,
    classify_content_url,
    create_episode,
    create_search_result,
)


logger = logging.getLogger(__name__)

SECTION_SELECTOR = "div.swiper-slide, div.content-row, section.category"
SECTION_TITLE_SELECTOR = "h2, h3, .section-title"
CARD_TITLE_SELECTOR = "div.title, .card-title, span.name"
SEARCH_RESULT_SELECTOR = "a.search-result-item, div.search-item a, .result-card a"

TITLE_SELECTOR = "h1.title, h1.content-title, h1"
POSTER_SELECTOR = "img.poster, .cover img, meta[property='og:image']"
PLOT_SELECTOR = "div.description, p.synopsis, .content-desc"
YEAR_SELECTOR = ".year, .content-year"
TAG_SELECTOR = ".genre, .tag"

# Tried in order; the first selector with any match wins
EPISODE_SELECTORS = [
    "div.episode-item",
    ".episode-card",
    "a[href*='/bolum/']",
]
EPISODE_TITLE_SELECTOR = ".episode-title, span"
EPISODE_NUMBER_SELECTOR = ".episode-number"

IFRAME_SELECTOR = "iframe[src]"
M3U8_PATTERN = re.compile(r"""["'](https?://[^"']+\.m3u8[^"']*)["']""")


def _non_negative(value: Optional[int]) -> Optional[int]:
    return value if value is not None and value >= 0 else None


class TodTvParser:
    """Specialized parser for todtv.com.tr content."""

    def __init__(self, html_content: str, base_url: str = "https://www.todtv.com.tr", provider_name: str = "TOD TV"):
        """
        Initialize TOD TV parser.

        Args:
            html_content: HTML content to parse
            base_url: Base URL for resolving relative links
            provider_name: Name stamped on produced results
        """
        self.parser = HTMLParser(html_content, base_url)
        self.soup = self.parser.soup
        self.base_url = base_url
        self.provider_name = provider_name

    def to_search_result(self, anchor: Tag) -> Optional[SearchResult]:
        """
        Map one anchor element to a search result.

        Returns None when the anchor has no title, no href, or an href
        that does not classify as a movie, series or live channel.
        """
        title = HTMLParser.text_of(anchor, CARD_TITLE_SELECTOR) or HTMLParser.attr(anchor, "title")
        if not title:
            return None

        href = HTMLParser.attr(anchor, "href")
        if not href:
            return None

        kind = classify_content_url(href)
        if kind is None:
            return None

        return create_search_result(
            title=title,
            url=URLHelper.make_absolute(href, self.base_url),
            provider_name=self.provider_name,
            kind=kind,
            poster_url=self.parser.image_source(anchor),
        )

    def _map_anchors(self, anchors: List[Tag]) -> List[SearchResult]:
        results = []
        for anchor in anchors:
            result = self.to_search_result(anchor)
            if result is not None:
                results.append(result)
        return results

    def parse_main_page(self) -> List[HomePageList]:
        """
        Parse the home page into named catalog sections.

        Sections without a heading or without any usable item are dropped.
        """
        sections = []

        for section in self.soup.select(SECTION_SELECTOR):
            heading = HTMLParser.select_first(section, SECTION_TITLE_SELECTOR)
            if heading is None:
                continue
            name = heading.get_text(" ", strip=True)
            if not name:
                continue

            items = self._map_anchors(section.select("a[href]"))
            if items:
                sections.append(HomePageList(name=name, items=items))
            else:
                logger.debug(f"Dropping empty section '{name}'")

        return sections

    def parse_search_results(self) -> List[SearchResult]:
        """Parse search result anchors from the search page."""
        return self._map_anchors(self.soup.select(SEARCH_RESULT_SELECTOR))

    def parse_title(self) -> Optional[str]:
        """Title of a detail page, or None when no title element has text."""
        return HTMLParser.first_text(self.soup, TITLE_SELECTOR)

    def parse_poster(self) -> Optional[str]:
        """
        First poster candidate in document order, made absolute.

        ``meta`` tags give their ``content``; images prefer the lazy-load
        ``data-src`` over ``src``.
        """
        element = HTMLParser.select_first(self.soup, POSTER_SELECTOR)
        if element is None:
            return None

        if element.name == "meta":
            poster = HTMLParser.attr(element, "content")
        else:
            poster = HTMLParser.attr(element, "data-src") or HTMLParser.attr(element, "src")

        return URLHelper.make_absolute(poster, self.base_url) or None

    def parse_details(self) -> Dict[str, Any]:
        """
        Parse title metadata from a detail page.

        Returns:
            Dictionary with title, poster_url, plot, year and tags. The
            title is None when the page has no recognizable title.
        """
        return {
            'title': self.parse_title(),
            'poster_url': self.parse_poster(),
            'plot': HTMLParser.text_of(self.soup, PLOT_SELECTOR) or None,
            'year': TextCleaner.to_int(HTMLParser.text_of(self.soup, YEAR_SELECTOR)),
            'tags': TextCleaner.unique(self.parser.all_text(TAG_SELECTOR)),
        }

    def _episode_elements(self) -> List[Tag]:
        for selector in EPISODE_SELECTORS:
            elements = self.soup.select(selector)
            if elements:
                logger.debug(f"Found {len(elements)} episode items with selector '{selector}'")
                return elements
        return []

    def _episode_href(self, element: Tag) -> str:
        # Fragment-only hrefs point back at the page itself
        for candidate in [element, *element.select("a[href]")]:
            href = HTMLParser.attr(candidate, "href")
            if href and not href.startswith("#"):
                return URLHelper.make_absolute(href, self.base_url)
        return ""

    def parse_episodes(self) -> List[Episode]:
        """
        Parse the episode list of a series page.

        Episodes without a usable (non-negative) number take their 1-based
        position among the matched elements; a missing or negative season
        is season 1. Elements without a usable link are skipped.
        """
        episodes = []

        for position, element in enumerate(self._episode_elements(), start=1):
            url = self._episode_href(element)
            if not url:
                logger.debug(f"Skipping episode element {position} without a link")
                continue

            number = _non_negative(TextCleaner.to_int(HTMLParser.text_of(element, EPISODE_NUMBER_SELECTOR)))
            if number is None:
                number = position

            season = _non_negative(TextCleaner.to_int(HTMLParser.attr(element, "data-season")))

            episode = create_episode(
                number=number,
                title=HTMLParser.text_of(element, EPISODE_TITLE_SELECTOR),
                url=url,
                season=season if season is not None else 1,
                thumbnail_url=self.parser.image_source(element),
            )
            if episode is not None:
                episodes.append(episode)

        return episodes

    def find_iframe_source(self) -> Optional[str]:
        """Absolute source of the first embedded frame, if any."""
        for frame in self.soup.select(IFRAME_SELECTOR):
            src = HTMLParser.attr(frame, "src")
            if src:
                return URLHelper.make_absolute(src, self.base_url)
        return None

    @staticmethod
    def find_m3u8_urls(page_text: str) -> List[str]:
        """Distinct quoted HLS manifest URLs in raw page text, in order."""
        return TextCleaner.unique(match.group(1) for match in M3U8_PATTERN.finditer(page_text))


# Export parser class
__all__ = ["TodTvParser"]
