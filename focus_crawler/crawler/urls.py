# === FILE: focus_crawler/crawler/urls.py ===
"""
URL canonicalization and validation.

Every URL that enters the visited registry, the frontier or the result
collection goes through :func:`canonicalize` first.
"""
from __future__ import annotations

import posixpath
from typing import Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

from focus_crawler.crawler.models import CanonicalURL
from focus_crawler.exceptions import InvalidURLError

__all__ = ("canonicalize", "is_valid_url", "hostname_of")

_DEFAULT_PORTS = {"http": 80, "https": 443}


def canonicalize(raw: str, base: Optional[str] = None) -> CanonicalURL:
    """
    Normalize *raw* into a :data:`CanonicalURL`.

    Relative references are resolved against *base* when given. The scheme
    and host are lower-cased, default ports dropped, dot segments removed,
    query parameters sorted and the fragment stripped.

    Raises :class:`InvalidURLError` when the result is not an absolute
    http(s) URL with a host.
    """
    if not isinstance(raw, str):
        raise InvalidURLError(repr(raw), "not a string")
    candidate = raw.strip()
    if not candidate:
        raise InvalidURLError(raw, "empty string")
    if any(ch.isspace() for ch in candidate):
        raise InvalidURLError(raw, "contains whitespace")
    try:
        if base:
            candidate = urljoin(base, candidate)
        parts = urlsplit(candidate)
        port = parts.port
    except ValueError as exc:
        raise InvalidURLError(raw, str(exc)) from exc

    scheme = parts.scheme.lower()
    if scheme not in _DEFAULT_PORTS:
        raise InvalidURLError(raw, f"unsupported scheme {scheme or '(none)'!r}")
    host = (parts.hostname or "").lower().rstrip(".")
    if not host:
        raise InvalidURLError(raw, "missing host")

    netloc = host
    if ":" in host:
        netloc = f"[{host}]"
    if port is not None and port != _DEFAULT_PORTS[scheme]:
        netloc = f"{netloc}:{port}"
    if parts.username:
        userinfo = parts.username
        if parts.password:
            userinfo = f"{userinfo}:{parts.password}"
        netloc = f"{userinfo}@{netloc}"

    path = _normalize_path(parts.path)
    query = _sort_query(parts.query)
    return CanonicalURL(urlunsplit((scheme, netloc, path, query, "")))


def _normalize_path(path: str) -> str:
    if not path:
        return "/"
    norm = posixpath.normpath(path)
    # POSIX keeps a leading "//"; URLs should not
    norm = "/" + norm.lstrip("/")
    if norm == "/.":
        norm = "/"
    if path.endswith("/") and not norm.endswith("/"):
        norm += "/"
    return norm


def _sort_query(query: str) -> str:
    # raw pairs are sorted as-is; decoding would change escapes and bare keys
    pairs = [p for p in query.split("&") if p]
    return "&".join(sorted(pairs))


def is_valid_url(raw: str) -> bool:
    """Return True if *raw* canonicalizes without error."""
    try:
        canonicalize(raw)
    except InvalidURLError:
        return False
    return True


def hostname_of(url: str) -> str:
    """Lower-cased hostname of *url* (empty string if there is none)."""
    return (urlsplit(url).hostname or "").lower()
