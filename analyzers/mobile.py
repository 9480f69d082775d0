"""
Mobile analyzer: viewport meta and responsive CSS detection.

Layout-dependent checks (horizontal scroll, tap targets) need a rendered page
and keep their defaults.
"""
from __future__ import annotations

from typing import Any

from analyzers.base import BaseAnalyzer, PageContext
from models import AuditSettings, MobileSignals


class MobileAnalyzer(BaseAnalyzer):
    categories = ("mobile",)

    def analyze(self, page: PageContext, settings: AuditSettings) -> dict[str, Any]:
        dom = page.snapshot

        style_text = dom.text("style") + " " + " ".join(dom.attr_values("[style]", "style"))
        media_queries = "@media" in style_text or "media=" in page.html

        return {
            "mobile": MobileSignals(
                viewport_exists=dom.exists('meta[name="viewport"]'),
                media_queries_found=media_queries,
            ),
        }
