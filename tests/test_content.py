"""
Unit tests for the content analyzer: identity keyword heuristic and word count.
"""

import pytest

from analyzers.content import ContentAnalyzer, site_identity_token


@pytest.mark.parametrize("hostname, token", [
    ("acme.com", "acme"),
    ("www.acme.com", "acme"),
    ("WWW.Acme.co.uk", "acme"),
    ("shop.acme.com", "shop"),
    ("localhost", "localhost"),
    ("", ""),
])
def test_site_identity_token(hostname, token):
    assert site_identity_token(hostname) == token


def test_keyword_found_in_title(make_page, settings):
    html = "<html><head><title>ACME Widgets</title></head><body><p>Widgets</p></body></html>"
    keywords = ContentAnalyzer().analyze(make_page(html, url="https://www.acme.com"), settings)["keywords"]

    assert keywords.found_in_title_or_h1 is True
    assert keywords.found_in_content is False


def test_keyword_found_in_any_h1(make_page, settings):
    html = "<html><body><h1>Welcome</h1><h1>The Acme story</h1></body></html>"
    keywords = ContentAnalyzer().analyze(make_page(html), settings)["keywords"]

    assert keywords.found_in_title_or_h1 is True
    assert keywords.found_in_content is True


def test_keyword_absent(make_page, settings):
    html = "<html><head><title>Widgets</title></head><body><p>Nothing here</p></body></html>"
    keywords = ContentAnalyzer().analyze(make_page(html), settings)["keywords"]

    assert keywords.found_in_title_or_h1 is False
    assert keywords.found_in_content is False


def test_word_count_collapses_whitespace(make_page, settings):
    html = "<html><body><p>one   two\n\tthree</p><div> four </div></body></html>"
    content = ContentAnalyzer().analyze(make_page(html), settings)["content"]

    assert content.word_count == 4


def test_word_count_of_empty_body_is_zero(make_page, settings):
    content = ContentAnalyzer().analyze(make_page("<html><body>  </body></html>"), settings)["content"]

    assert content.word_count == 0
