"""
Pytest configuration and shared fixtures for audit engine tests.

No test touches the network: HTTP sessions and DNS resolvers are mocks.
"""

import pytest
from unittest.mock import Mock

from analyzers.base import PageContext
from crawler.dom import parse_html
from models import AuditInput, AuditSettings, FetchResult


@pytest.fixture
def make_input():
    """Factory for AuditInput objects with sensible defaults."""

    def _make(
        html="<html><head></head><body></body></html>",
        url="https://acme.com",
        final_url=None,
        headers=None,
        duration_ms=500.0,
        http_version="",
    ):
        fetch = FetchResult(
            final_url=final_url or url,
            headers=headers or {},
            fetch_duration_ms=duration_ms,
            http_version=http_version,
        )
        return AuditInput(requested_url=url, html=html, fetch=fetch)

    return _make


@pytest.fixture
def make_page(make_input):
    """Factory for analyzer PageContext objects; accepts make_input's arguments."""

    def _make(html="<html><head></head><body></body></html>", **kwargs):
        audit_input = make_input(html=html, **kwargs)
        return PageContext(audit_input=audit_input, snapshot=parse_html(audit_input.html))

    return _make


@pytest.fixture
def settings():
    return AuditSettings()


@pytest.fixture
def offline_settings():
    """Settings with the auxiliary probes disabled."""
    return AuditSettings(enable_probes=False)


@pytest.fixture
def make_session():
    """Mock requests.Session answering each probe path with a given status."""

    def _make(statuses=None, default=404):
        statuses = statuses or {}

        def _respond(url, **kwargs):
            for suffix, status in statuses.items():
                if url.endswith(suffix):
                    if isinstance(status, Exception):
                        raise status
                    return Mock(status_code=status)
            return Mock(status_code=default)

        session = Mock()
        session.get.side_effect = _respond
        session.head.side_effect = _respond
        return session

    return _make


@pytest.fixture
def spf_resolver():
    """Mock dns resolver returning one SPF TXT record split over two strings."""
    resolver = Mock()
    resolver.resolve.return_value = [
        Mock(strings=[b"google-site-verification=abc"]),
        Mock(strings=[b"v=spf1 include:_spf.google.com", b" ~all"]),
    ]
    return resolver
