# focus_crawler/crawler/models.py
"""
Data models for the FocusCrawler traversal core.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, NewType, Optional, Tuple

__all__ = ("CanonicalURL", "FrontierEntry", "RawPage", "PageRecord", "Table")

#: Normalized absolute URL; the identity key for dedup.
CanonicalURL = NewType("CanonicalURL", str)

#: Rows of cells, row/cell order preserved.
Table = Tuple[Tuple[str, ...], ...]


@dataclass(frozen=True, slots=True)
class FrontierEntry:
    """A URL admitted for processing together with its discovery depth."""

    url: CanonicalURL
    depth: int


@dataclass(frozen=True, slots=True)
class RawPage:
    """What a renderer hands back: the final URL after redirects and the page markup."""

    url: str
    html: str
    status: Optional[int] = None


@dataclass(frozen=True, slots=True)
class PageRecord:
    """Structured content extracted from one fetched page."""

    url: CanonicalURL
    title: str = ""
    headings: Tuple[str, ...] = ()
    paragraphs: Tuple[str, ...] = ()
    tables: Tuple[Table, ...] = ()
    outbound_links: FrozenSet[str] = frozenset()
    link_texts: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # frozen: bypass __setattr__ to freeze the mapping as well
        object.__setattr__(self, "link_texts", MappingProxyType(dict(self.link_texts)))

    def anchor_text(self, link: str) -> Optional[str]:
        """Return the anchor text seen for *link*, if any."""
        return self.link_texts.get(link)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready form used by the sinks."""
        return {
            "url": self.url,
            "title": self.title,
            "headings": list(self.headings),
            "paragraphs": list(self.paragraphs),
            "tables": [[list(row) for row in table] for table in self.tables],
        }
