"""
Performance estimator.

Derives TTFB / FCP / LCP as fixed multiples of the total fetch duration and
reports a nominal CLS. These are coarse proxies for the scoring rules, not
measured Core Web Vitals; nothing here runs a browser.
"""
from __future__ import annotations

from typing import Any

from analyzers.base import BaseAnalyzer, PageContext
from models import AuditSettings, MetricSignals


class PerformanceEstimator(BaseAnalyzer):
    categories = ("metrics",)

    def analyze(self, page: PageContext, settings: AuditSettings) -> dict[str, Any]:
        return {"metrics": estimate_metrics(page.fetch.fetch_duration_ms, settings)}


def estimate_metrics(duration_ms: float, settings: AuditSettings) -> MetricSignals:
    try:
        seconds = max(0.0, float(duration_ms)) / 1000
    except (TypeError, ValueError):
        seconds = 0.0

    multipliers = settings.metric_multipliers
    return MetricSignals(
        ttfb=seconds * multipliers.get("ttfb", 0.0),
        fcp=seconds * multipliers.get("fcp", 0.0),
        lcp=seconds * multipliers.get("lcp", 0.0),
        cls=settings.nominal_cls,
    )
