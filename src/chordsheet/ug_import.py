"""Import from a saved tabs.ultimate-guitar.com chord page.

Nothing is fetched here; callers hand in the HTML of a page they saved.

Two page formats are supported:

Current format:
    <div class="js-store" data-content="<html-entity-encoded JSON>">
    JSON path:
        store.page.data.tab
            .song_name        → Song.title
            .artist_name      → Song.artist
            .tonality_name    → Song.key
        store.page.data.tab_view
            .wiki_tab.content → raw tab text

Legacy format (Next.js, kept as fallback):
    <script id="__NEXT_DATA__" type="application/json">
    JSON path:
        props.pageProps.data.tab_view
            .song_name / .artist_name / .capo / .tonality_name
            .wiki_tab.content

The tab text marks chords as ``[ch]D[/ch]`` on chord-above-lyric lines and
may wrap chord+lyric pairs in ``[tab]...[/tab]``.  Both are stripped to the
bare text a reader sees on the page, which keeps the column alignment the
normalizer relies on.
"""

import html as html_module
import json
import logging
import re

from bs4 import BeautifulSoup

from .exceptions import ImportFormatError
from .models import Song
from .normalizer import normalize

logger = logging.getLogger(__name__)

_CH_TAG_RE = re.compile(r"\[ch\]([^\[]*)\[/ch\]")
_TAB_TAG_RE = re.compile(r"\[/?tab\]")


def strip_ug_tags(text: str) -> str:
    """Strip UG-specific markup from tab content.

    - ``[ch]D[/ch]`` → ``D``
    - ``[tab]`` / ``[/tab]`` → removed
    - ``\\r\\n`` → ``\\n``
    """
    text = _CH_TAG_RE.sub(r"\1", text)
    text = _TAB_TAG_RE.sub("", text)
    return text.replace("\r\n", "\n")


def _extract_page_data(soup: BeautifulSoup) -> dict:
    """Return the ``page.data`` dict from whichever JSON container is present.

    Raises :class:`~chordsheet.exceptions.ImportFormatError` if neither is
    found or can be parsed.
    """
    # --- Current format: <div class="js-store" data-content="..."> ---
    store_div = soup.find("div", class_="js-store")
    if store_div and store_div.get("data-content"):
        try:
            data = json.loads(html_module.unescape(store_div["data-content"]))
            return data["store"]["page"]["data"]
        except (KeyError, TypeError, json.JSONDecodeError) as exc:
            logger.debug("js-store data unusable, trying __NEXT_DATA__: %s", exc)

    # --- Legacy format: <script id="__NEXT_DATA__"> ---
    script_tag = soup.find("script", id="__NEXT_DATA__")
    if script_tag and script_tag.string:
        try:
            data = json.loads(script_tag.string)
            return data["props"]["pageProps"]["data"]
        except (KeyError, TypeError, json.JSONDecodeError) as exc:
            logger.debug("__NEXT_DATA__ unusable: %s", exc)

    raise ImportFormatError("Could not find tab data (tried js-store and __NEXT_DATA__)")


def _tab_sections(html: str) -> tuple[dict, dict]:
    page_data = _extract_page_data(BeautifulSoup(html, "html.parser"))
    # Metadata lives in page_data["tab"] (current) or page_data["tab_view"] (legacy).
    tab_meta = page_data.get("tab") or page_data.get("tab_view") or {}
    tab_view = page_data.get("tab_view") or {}
    return tab_meta, tab_view


def extract_tab_text(html: str) -> str:
    """Return the chord-above-lyric tab text of a saved UG page, tags stripped."""
    _, tab_view = _tab_sections(html)
    wiki_tab = tab_view.get("wiki_tab") or {}
    content = wiki_tab.get("content") or ""
    if not content:
        raise ImportFormatError("wiki_tab.content is empty or missing")
    return strip_ug_tags(content)


def extract_song(html: str, strategy: str = "density") -> Song:
    """Return a :class:`~chordsheet.models.Song` with inline lyrics from a saved UG page."""
    tab_meta, tab_view = _tab_sections(html)
    capo_raw = tab_meta.get("capo") or tab_view.get("capo") or 0
    return Song(
        title=tab_meta.get("song_name") or "",
        artist=tab_meta.get("artist_name") or "",
        lyrics=normalize(extract_tab_text(html), strategy),
        key=tab_meta.get("tonality_name") or tab_view.get("tonality_name") or None,
        capo=int(capo_raw) if capo_raw else None,
    )
