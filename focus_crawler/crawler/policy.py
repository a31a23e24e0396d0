# === FILE: focus_crawler/crawler/policy.py ===
"""
Link policy: an ordered chain of independent predicates deciding whether a
discovered link may enter the frontier.

Checks run cheapest first and stop at the first rejection, so the relevance
predicate (possibly the most expensive one) only sees links that already
passed the domain, extension and host-pattern filters.
"""
from __future__ import annotations

import fnmatch
import re
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Iterable, Literal, Optional, Protocol, Sequence, Tuple
from urllib.parse import unquote, urlsplit

from focus_crawler.crawler.models import CanonicalURL
from focus_crawler.crawler.urls import hostname_of

__all__ = (
    "PolicyContext",
    "PolicyConfig",
    "Predicate",
    "DomainPredicate",
    "ExtensionPredicate",
    "HostPatternPredicate",
    "RelevancePredicate",
    "KeywordMatcher",
    "LinkPolicy",
)

RelevanceFn = Callable[[str, Optional[str]], bool]
MatchMode = Literal["substring", "token"]

_TOKEN_RE = re.compile(r"[0-9a-z]+")


@dataclass(frozen=True, slots=True)
class PolicyContext:
    """Extra information about where a link was found."""

    anchor_text: Optional[str] = None
    parent_url: Optional[str] = None


class Predicate(Protocol):
    name: str

    def __call__(self, url: CanonicalURL, context: PolicyContext) -> bool: ...


class KeywordMatcher:
    """
    Keyword relevance matcher.

    ``substring`` mode accepts a URL when any keyword occurs inside its
    lower-cased path or anchor text; ``token`` mode splits both on
    non-alphanumerics and requires a whole-token match. With no keywords
    every URL is relevant.
    """

    def __init__(self, keywords: Iterable[str] = (), mode: MatchMode = "substring") -> None:
        if mode not in ("substring", "token"):
            raise ValueError(f"unknown relevance mode: {mode!r}")
        self.keywords: Tuple[str, ...] = tuple(
            k.strip().lower() for k in keywords if k and k.strip()
        )
        self.mode = mode

    def __call__(self, url: str, anchor_text: Optional[str] = None) -> bool:
        if not self.keywords:
            return True
        haystacks = [unquote(urlsplit(url).path).lower()]
        if anchor_text:
            haystacks.append(anchor_text.lower())
        if self.mode == "substring":
            return any(k in text for k in self.keywords for text in haystacks)
        tokens = {tok for text in haystacks for tok in _TOKEN_RE.findall(text)}
        return any(k in tokens for k in self.keywords)

    def __repr__(self) -> str:
        return f"KeywordMatcher({list(self.keywords)!r}, mode={self.mode!r})"


@dataclass(frozen=True)
class PolicyConfig:
    """Enumerated policy settings."""

    base_domain: str
    excluded_extensions: FrozenSet[str] = frozenset()
    excluded_host_patterns: FrozenSet[str] = frozenset()
    relevance_predicate: RelevanceFn = field(default_factory=KeywordMatcher)


class DomainPredicate:
    """Host must equal the base domain or be one of its subdomains."""

    name = "domain"

    def __init__(self, base_domain: str) -> None:
        self.base_domain = base_domain.strip().lower().strip(".")

    def __call__(self, url: CanonicalURL, context: PolicyContext) -> bool:
        host = hostname_of(url)
        return host == self.base_domain or host.endswith("." + self.base_domain)


class ExtensionPredicate:
    """Reject paths ending in a non-content file extension."""

    name = "extension"

    def __init__(self, extensions: Iterable[str]) -> None:
        self.extensions: Tuple[str, ...] = tuple(
            sorted({e if e.startswith(".") else f".{e}" for e in (x.lower() for x in extensions) if e})
        )

    def __call__(self, url: CanonicalURL, context: PolicyContext) -> bool:
        path = urlsplit(url).path.lower()
        return not path.endswith(self.extensions) if self.extensions else True


class HostPatternPredicate:
    """
    Reject hosts matching an excluded pattern.

    Patterns containing glob characters are matched with :mod:`fnmatch`;
    plain patterns match when they occur anywhere in the hostname.
    """

    name = "host_pattern"

    def __init__(self, patterns: Iterable[str]) -> None:
        self.patterns: Tuple[str, ...] = tuple(p.strip().lower() for p in patterns if p.strip())

    def __call__(self, url: CanonicalURL, context: PolicyContext) -> bool:
        host = hostname_of(url)
        for pattern in self.patterns:
            if any(ch in pattern for ch in "*?["):
                if fnmatch.fnmatchcase(host, pattern):
                    return False
            elif pattern in host:
                return False
        return True


class RelevancePredicate:
    """Delegate to a pluggable relevance function."""

    name = "relevance"

    def __init__(self, matcher: RelevanceFn) -> None:
        self.matcher = matcher

    def __call__(self, url: CanonicalURL, context: PolicyContext) -> bool:
        return bool(self.matcher(url, context.anchor_text))


class LinkPolicy:
    """Conjunction of predicates evaluated in order with short-circuit rejection."""

    def __init__(self, predicates: Sequence[Predicate]) -> None:
        self.predicates: Tuple[Predicate, ...] = tuple(predicates)

    @classmethod
    def from_config(cls, config: PolicyConfig) -> LinkPolicy:
        return cls(
            [
                DomainPredicate(config.base_domain),
                ExtensionPredicate(config.excluded_extensions),
                HostPatternPredicate(config.excluded_host_patterns),
                RelevancePredicate(config.relevance_predicate),
            ]
        )

    def rejected_by(self, url: CanonicalURL, context: Optional[PolicyContext] = None) -> Optional[str]:
        """Name of the first predicate rejecting *url*, or None if it is eligible."""
        ctx = context or PolicyContext()
        for predicate in self.predicates:
            if not predicate(url, ctx):
                return predicate.name
        return None

    def is_eligible(self, url: CanonicalURL, context: Optional[PolicyContext] = None) -> bool:
        return self.rejected_by(url, context) is None
