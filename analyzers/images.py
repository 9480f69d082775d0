"""
Image analyzer: alt text coverage, modern format usage, declared dimensions.
"""
from __future__ import annotations

from typing import Any
from urllib.parse import urlsplit

from analyzers.base import BaseAnalyzer, PageContext
from crawler.dom import attr_text
from models import AuditSettings, ImageSignals


class ImageAnalyzer(BaseAnalyzer):
    categories = ("images",)

    def analyze(self, page: PageContext, settings: AuditSettings) -> dict[str, Any]:
        images = page.snapshot.select("img")
        total = len(images)
        if total == 0:
            return {"images": ImageSignals()}

        extensions = tuple(ext.lower() for ext in settings.modern_image_extensions)
        with_alt = 0
        modern = 0
        sized = 0

        for img in images:
            if attr_text(img, "alt"):
                with_alt += 1
            if _src_path(attr_text(img, "src")).endswith(extensions):
                modern += 1
            if attr_text(img, "width").strip() and attr_text(img, "height").strip():
                sized += 1

        return {
            "images": ImageSignals(
                alt_coverage=with_alt / total,
                modern_format_ratio=modern / total,
                properly_sized=sized == total,
                total=total,
            ),
        }


def _src_path(src: str) -> str:
    src = src.strip().lower()
    try:
        return urlsplit(src).path
    except ValueError:
        return src
