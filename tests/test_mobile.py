"""
Unit tests for the mobile analyzer.
"""

import pytest

from analyzers.mobile import MobileAnalyzer


def test_viewport_detected(make_page, settings):
    html = '<html><head><meta name="viewport" content="width=device-width"></head></html>'
    mobile = MobileAnalyzer().analyze(make_page(html), settings)["mobile"]

    assert mobile.viewport_exists is True
    assert mobile.media_queries_found is False


@pytest.mark.parametrize("html", [
    "<html><head><style>@media (max-width: 600px) { body { margin: 0 } }</style></head></html>",
    '<html><head><link rel="stylesheet" href="/m.css" media="screen and (max-width: 600px)"></head></html>',
])
def test_media_queries_detected(make_page, settings, html):
    assert MobileAnalyzer().analyze(make_page(html), settings)["mobile"].media_queries_found is True


def test_layout_checks_keep_defaults(make_page, settings):
    mobile = MobileAnalyzer().analyze(make_page("<html></html>"), settings)["mobile"]

    assert mobile.viewport_exists is False
    assert mobile.horizontal_scroll is False
    assert mobile.tap_target_issues is False
