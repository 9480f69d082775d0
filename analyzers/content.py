"""
Content analyzer: site-identity keyword placement and rough word count.

The "keyword" is a branding token taken from the hostname (acme.com -> acme),
not the result of any keyword research; word count is a whitespace token
count, not linguistic segmentation.
"""
from __future__ import annotations

from typing import Any

from analyzers.base import BaseAnalyzer, PageContext
from crawler.dom import normalize_whitespace
from models import AuditSettings, ContentSignals, KeywordSignals


class ContentAnalyzer(BaseAnalyzer):
    categories = ("keywords", "content")

    def analyze(self, page: PageContext, settings: AuditSettings) -> dict[str, Any]:
        dom = page.snapshot
        token = site_identity_token(page.hostname)

        title_tag = dom.first("title")
        title = title_tag.get_text().strip().lower() if title_tag is not None else ""
        h1_text = " ".join(dom.texts("h1")).lower()
        body_text = normalize_whitespace(dom.body_text)

        return {
            "keywords": KeywordSignals(
                found_in_title_or_h1=bool(token) and (token in title or token in h1_text),
                found_in_content=bool(token) and token in body_text.lower(),
            ),
            "content": ContentSignals(word_count=len(body_text.split(" ")) if body_text else 0),
        }


def site_identity_token(hostname: str) -> str:
    """`www.acme.co.uk` -> `acme`; empty string when there is no hostname."""
    host = hostname.lower()
    if host.startswith("www."):
        host = host[len("www."):]
    return host.split(".")[0]
