"""
Unit tests for the image analyzer.
"""

from analyzers.images import ImageAnalyzer
from models import AuditSettings


def test_no_images_defaults_to_full_coverage(make_page, settings):
    images = ImageAnalyzer().analyze(make_page("<html><body><p>text</p></body></html>"), settings)["images"]

    assert images.alt_coverage == 1
    assert images.modern_format_ratio == 1
    assert images.properly_sized is True
    assert images.total == 0


def test_alt_and_format_ratios(make_page, settings):
    html = (
        "<html><body>"
        '<img src="/a.webp" alt="A">'
        '<img src="/b.jpg" alt="">'
        '<img src="/c.AVIF?v=2" alt="C">'
        '<img src="/d.png">'
        "</body></html>"
    )
    images = ImageAnalyzer().analyze(make_page(html), settings)["images"]

    assert images.total == 4
    assert images.alt_coverage == 0.5
    assert images.modern_format_ratio == 0.5


def test_any_non_empty_alt_counts(make_page, settings):
    html = '<html><body><img src="/a.jpg" alt=" "><img src="/b.jpg" alt=""></body></html>'
    images = ImageAnalyzer().analyze(make_page(html), settings)["images"]

    assert images.alt_coverage == 0.5


def test_properly_sized_requires_both_dimensions(make_page, settings):
    sized = '<html><body><img src="/a.jpg" width="10" height="10"></body></html>'
    unsized = '<html><body><img src="/a.jpg" width="10" height="10"><img src="/b.jpg" width="5"></body></html>'

    assert ImageAnalyzer().analyze(make_page(sized), settings)["images"].properly_sized is True
    assert ImageAnalyzer().analyze(make_page(unsized), settings)["images"].properly_sized is False


def test_modern_extensions_are_configurable(make_page):
    html = '<html><body><img src="/a.jxl" alt="x"><img src="/b.webp" alt="y"></body></html>'
    settings = AuditSettings(modern_image_extensions=(".jxl",))

    assert ImageAnalyzer().analyze(make_page(html), settings)["images"].modern_format_ratio == 0.5
