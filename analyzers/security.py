"""
Security analyzer: HTTPS, mixed content, unsafe new-tab links, and the
security/compression response headers.
"""
from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

from analyzers.base import BaseAnalyzer, PageContext
from crawler.dom import DomSnapshot, attr_text
from models import AuditSettings, CompressionSignals, HeaderSignals, SecuritySignals

_SUBRESOURCES = "script[src], link[href], img[src], iframe[src]"


class SecurityAnalyzer(BaseAnalyzer):
    categories = ("security", "headers", "compression")

    def analyze(self, page: PageContext, settings: AuditSettings) -> dict[str, Any]:
        headers = page.headers
        dom = page.snapshot
        https = page.scheme == "https"

        return {
            "security": SecuritySignals(
                is_https=https,
                ssl_valid=https,
                www_resolve_match=_same_site(page.hostname, _hostname(page.fetch.final_url)),
                http2_enabled=(page.fetch.http_version or "").startswith(("2", "3")),
                # Mixed content only exists on HTTPS pages
                mixed_content_found=https and bool(find_mixed_content(dom)),
                unsafe_cross_links=bool(find_unsafe_blank_links(dom)),
                x_content_type_options="nosniff" in headers.get("x-content-type-options", "").lower(),
            ),
            "headers": HeaderSignals(hsts="strict-transport-security" in headers),
            "compression": CompressionSignals(enabled=bool(headers.get("content-encoding", "").strip())),
        }


def find_mixed_content(dom: DomSnapshot) -> list[str]:
    """Sub-resource URLs loaded over plain HTTP."""
    mixed: list[str] = []
    for element in dom.select(_SUBRESOURCES):
        src = attr_text(element, "src") or attr_text(element, "href")
        if src.strip().lower().startswith("http://"):
            mixed.append(src)
    return mixed


def find_unsafe_blank_links(dom: DomSnapshot) -> list[str]:
    """target=_blank links missing rel=noopener or rel=noreferrer."""
    unsafe: list[str] = []
    for a_tag in dom.select('a[target="_blank"]'):
        rel = set(attr_text(a_tag, "rel").lower().split())
        if "noopener" not in rel or "noreferrer" not in rel:
            unsafe.append(attr_text(a_tag, "href"))
    return unsafe


def _same_site(requested_host: str, final_host: str) -> bool:
    """www.example.com and example.com count as the same site."""
    if not final_host:
        return True
    return _strip_www(requested_host.lower()) == _strip_www(final_host.lower())


def _hostname(url: str) -> str:
    try:
        return urlparse(url or "").hostname or ""
    except ValueError:
        return ""


def _strip_www(host: str) -> str:
    return host[len("www."):] if host.startswith("www.") else host
