"""
Unit tests for the fetch-duration based metric estimator.
"""

import pytest

from analyzers.performance import PerformanceEstimator, estimate_metrics
from models import AuditSettings


def test_metrics_scale_with_fetch_duration(make_page, settings):
    metrics = PerformanceEstimator().analyze(make_page(duration_ms=1000.0), settings)["metrics"]

    assert metrics.ttfb == pytest.approx(0.4)
    assert metrics.fcp == pytest.approx(1.5)
    assert metrics.lcp == pytest.approx(2.0)
    assert metrics.cls == pytest.approx(0.05)


@pytest.mark.parametrize("duration", [0, -250.0, "n/a", None])
def test_invalid_or_negative_duration_is_zero(duration):
    metrics = estimate_metrics(duration, AuditSettings())

    assert metrics.ttfb == 0
    assert metrics.fcp == 0
    assert metrics.lcp == 0


def test_multipliers_are_configurable():
    settings = AuditSettings(metric_multipliers={"ttfb": 1.0, "fcp": 1.0, "lcp": 1.0}, nominal_cls=0.2)
    metrics = estimate_metrics(500.0, settings)

    assert metrics.ttfb == metrics.fcp == metrics.lcp == pytest.approx(0.5)
    assert metrics.cls == pytest.approx(0.2)


def test_metrics_are_exact_products():
    metrics = estimate_metrics(1250.2, AuditSettings())

    assert metrics.lcp == (1250.2 / 1000) * 2.0
    assert metrics.lcp > 2.5
