"""
Meta analyzer: title, meta description, headings, canonical, robots meta,
favicon, <html lang> and social (Open Graph / Twitter) tags.
"""
from __future__ import annotations

from typing import Any, Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

from analyzers.base import BaseAnalyzer, PageContext
from models import (
    AuditSettings,
    CanonicalSignals,
    FaviconSignals,
    HeadingSignals,
    HtmlSignals,
    MetaDescriptionSignals,
    MetaRobotsSignals,
    SocialSignals,
    TitleSignals,
)


class MetaAnalyzer(BaseAnalyzer):
    categories = (
        "title", "meta_description", "headings", "canonical",
        "meta_robots", "favicon", "html", "social",
    )

    def analyze(self, page: PageContext, settings: AuditSettings) -> dict[str, Any]:
        dom = page.snapshot

        title_tag = dom.first("title")
        title = title_tag.get_text().strip() if title_tag is not None else ""
        description = dom.attr('meta[name="description"]', "content")
        robots = dom.attr('meta[name="robots"]', "content")
        canonical_href = dom.attr('link[rel~="canonical"]', "href").strip()

        return {
            "title": TitleSignals(exists=bool(title), length=len(title), value=title),
            "meta_description": MetaDescriptionSignals(
                exists=bool(description),
                length=len(description),
            ),
            "headings": HeadingSignals(
                h1_count=dom.count("h1"),
                h2_count=dom.count("h2"),
            ),
            "canonical": CanonicalSignals(
                matches_current=canonical_matches(canonical_href, page.requested_url, page.fetch.final_url),
                value=canonical_href,
            ),
            "meta_robots": MetaRobotsSignals(noindex="noindex" in robots.lower()),
            "favicon": FaviconSignals(exists=dom.exists('link[rel~="icon"]')),
            "html": HtmlSignals(lang=len(dom.attr("html", "lang").strip())),
            "social": SocialSignals(
                og_title=dom.exists('meta[property="og:title"]'),
                og_image=dom.exists('meta[property="og:image"]'),
                twitter_card=dom.exists('meta[name="twitter:card"], meta[property="twitter:card"]'),
            ),
        }


# ── Canonical ──────────────────────────────────────────────────────────────────

def canonical_matches(href: str, requested_url: str, final_url: str) -> bool:
    """
    True if `href`, resolved against the requested URL, points at the final URL.
    A single trailing slash is ignored; anything unparseable is a mismatch.
    """
    if not href:
        return False
    try:
        canonical = _normalize_url(urljoin(requested_url, href))
        final = _normalize_url(final_url)
    except ValueError:
        return False
    if canonical is None or final is None:
        return False
    return _strip_slash(canonical) == _strip_slash(final)


_DEFAULT_PORTS = {"http": 80, "https": 443}


def _normalize_url(url: str) -> Optional[str]:
    parts = urlsplit(url.strip())
    if parts.scheme.lower() not in ("http", "https") or not parts.hostname:
        return None
    # Accessing .port validates it (raises ValueError when out of range)
    port = parts.port
    scheme = parts.scheme.lower()
    netloc = parts.hostname.lower()
    if port is not None and port != _DEFAULT_PORTS[scheme]:
        netloc = f"{netloc}:{port}"
    return urlunsplit((scheme, netloc, parts.path or "/", parts.query, parts.fragment))


def _strip_slash(url: str) -> str:
    return url[:-1] if url.endswith("/") else url
