# === FILE: focus_crawler/parser/html_parser.py ===
"""HTML parsing for FocusCrawler.

:func:`parse_html` turns rendered markup into the pieces a page record
needs:

* title: document <title> text or ``""`` if absent.
* headings: text of every ``h1``…``h6`` in document order.
* paragraphs: non-empty text of every ``<p>``.
* tables: each ``<table>`` as rows of cell texts.
* links: absolute targets of ``<a href="…">`` plus their anchor text.

Links are resolved against the page URL here, so everything downstream
sees absolute hrefs.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

__all__: Sequence[str] = ("ParsedPage", "parse_html")

_HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
_SKIP_SCHEMES = ("mailto:", "javascript:", "tel:", "data:")


@dataclass(slots=True)
class ParsedPage:
    """Lightweight representation of an HTML page."""

    url: str
    title: str = ""
    headings: list[str] = field(default_factory=list)
    paragraphs: list[str] = field(default_factory=list)
    tables: list[list[list[str]]] = field(default_factory=list)
    links: list[str] = field(default_factory=list)
    link_texts: dict[str, str] = field(default_factory=dict)


def _text(tag: Tag) -> str:
    return " ".join(tag.get_text(" ", strip=True).split())


def _table_rows(table: Tag) -> list[list[str]]:
    rows: list[list[str]] = []
    for tr in table.find_all("tr"):
        # rows of nested tables belong to the inner table
        if tr.find_parent("table") is not table:
            continue
        cells = [_text(cell) for cell in tr.find_all(["th", "td"]) if cell.find_parent("tr") is tr]
        if any(cells):
            rows.append(cells)
    return rows


def parse_html(html: str, base_url: str = "") -> ParsedPage:
    """Parse *html* fetched from *base_url*."""
    soup = BeautifulSoup(html, "html.parser")
    for element in soup(["script", "style", "noscript", "template"]):
        element.decompose()

    title_tag = soup.find("title")
    title = _text(title_tag) if isinstance(title_tag, Tag) else ""

    headings = [t for t in (_text(h) for h in soup.find_all(_HEADING_TAGS)) if t]
    paragraphs = [t for t in (_text(p) for p in soup.find_all("p")) if t]
    tables = [rows for rows in (_table_rows(t) for t in soup.find_all("table")) if rows]

    links: list[str] = []
    link_texts: dict[str, str] = {}
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        raw = href_val.strip()
        if not raw or raw.startswith("#") or raw.lower().startswith(_SKIP_SCHEMES):
            continue
        try:
            absolute = urljoin(base_url, raw) if base_url else raw
        except ValueError:
            # malformed href; left for the canonicalizer to reject
            absolute = raw
        if absolute not in link_texts:
            links.append(absolute)
            link_texts[absolute] = ""
        if not link_texts[absolute]:
            link_texts[absolute] = _text(tag)

    return ParsedPage(
        url=base_url,
        title=title,
        headings=headings,
        paragraphs=paragraphs,
        tables=tables,
        links=links,
        link_texts=link_texts,
    )
