"""
Technical analyzer: page weight, DOM size, request estimate, render-blocking
resources, analytics tags and structured data.
"""
from __future__ import annotations

import logging
import re
from typing import Any

from analyzers.base import BaseAnalyzer, PageContext
from crawler.dom import DomSnapshot
from models import (
    AdvancedSignals,
    AnalyticsSignals,
    AuditSettings,
    NetworkSignals,
    PageSignals,
    PerformanceSignals,
)

logger = logging.getLogger(__name__)

_BLOCKING_SCRIPTS = "head script[src]:not([async]):not([defer])"
_BLOCKING_STYLES = 'head link[rel~="stylesheet"]'


class TechnicalAnalyzer(BaseAnalyzer):
    categories = ("page", "network", "performance", "analytics", "advanced")

    def analyze(self, page: PageContext, settings: AuditSettings) -> dict[str, Any]:
        dom = page.snapshot

        scripts = dom.count("script[src]")
        styles = dom.count('link[rel~="stylesheet"]')
        images = dom.count("img")
        blocking = dom.count(_BLOCKING_SCRIPTS) + dom.count(_BLOCKING_STYLES)

        return {
            "page": PageSignals(
                html_size_kb=len(page.html.encode("utf-8", errors="surrogatepass")) / 1024,
                dom_nodes=dom.element_count,
            ),
            "network": NetworkSignals(request_count=1 + scripts + styles + images),
            "performance": PerformanceSignals(
                render_blocking_count=blocking,
                has_render_blocking_resources=blocking > 0,
            ),
            "analytics": AnalyticsSignals(
                detected=analytics_detected(dom, settings.analytics_patterns),
            ),
            "advanced": AdvancedSignals(
                schema_detected=dom.exists('script[type="application/ld+json"]'),
            ),
        }


def analytics_detected(dom: DomSnapshot, patterns: list[str]) -> bool:
    """True if inline script text or any script src matches one of `patterns`."""
    matchers = [_compile_pattern(p) for p in patterns]
    if not matchers:
        return False
    haystack = dom.text("script") + " " + " ".join(dom.attr_values("script", "src"))
    return any(m.search(haystack) for m in matchers)


def _compile_pattern(pattern: str) -> re.Pattern:
    """Compile a vendor pattern; one that is not a valid regex is matched literally."""
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        logger.debug("Analytics pattern %r is not a valid regex (%s); matching it literally", pattern, exc)
        return re.compile(re.escape(pattern), re.IGNORECASE)
