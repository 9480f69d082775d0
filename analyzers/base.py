"""
Base class for all page signal analyzers.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

from crawler.dom import DomSnapshot
from models import AuditInput, AuditSettings, FetchResult


@dataclass(frozen=True)
class PageContext:
    """Everything an analyzer may read about the audited page."""

    audit_input: AuditInput
    snapshot: DomSnapshot

    @property
    def requested_url(self) -> str:
        return self.audit_input.requested_url

    @property
    def html(self) -> str:
        return self.audit_input.html

    @property
    def fetch(self) -> FetchResult:
        return self.audit_input.fetch

    @property
    def scheme(self) -> str:
        return urlparse(self.requested_url).scheme.lower()

    @property
    def hostname(self) -> str:
        return urlparse(self.requested_url).hostname or ""

    @property
    def headers(self) -> dict[str, str]:
        return {k.lower(): v for k, v in (self.fetch.headers or {}).items()}


class BaseAnalyzer(ABC):
    """All analyzers inherit from this class."""

    # Report categories this analyzer produces records for
    categories: tuple[str, ...] = ()

    @abstractmethod
    def analyze(self, page: PageContext, settings: AuditSettings) -> dict[str, Any]:
        """Return {report category: signal record} for `page`."""
        ...
