"""
Health score calculator.

Scoring model:
- Every rule carries a severity weight (HIGH 3, MEDIUM 2, LOW 1) and earns
  its status score (PASS 1.0, WARNING 0.5, FAIL 0.0).
- A category scores max_points × Σ(weight × status score) / Σ(weight).
- The health score is the sum of the category scores (0–100).
"""
from __future__ import annotations

from models import AuditReport, Finding, Status
from config import CATEGORY_MAX_POINTS, SEVERITY_WEIGHTS, STATUS_SCORES
from scoring.rules import evaluate_rules


def compute_health_score(results: list[Finding]) -> tuple[float, dict[str, float]]:
    """
    Returns (overall_score 0–100, category_scores dict).

    A category with no evaluated rules keeps its full points.
    """
    by_cat: dict[str, list[Finding]] = {}
    for result in results:
        by_cat.setdefault(result.category, []).append(result)

    category_scores: dict[str, float] = {}
    for category, max_points in CATEGORY_MAX_POINTS.items():
        cat_results = by_cat.get(category, [])
        total_weight = sum(SEVERITY_WEIGHTS.get(r.severity, 0.0) for r in cat_results)
        if total_weight == 0:
            category_scores[category] = float(max_points)
            continue

        earned = sum(
            SEVERITY_WEIGHTS.get(r.severity, 0.0) * STATUS_SCORES.get(r.status, 0.0)
            for r in cat_results
        )
        category_scores[category] = round(max_points * earned / total_weight, 2)

    overall = max(0.0, min(100.0, sum(category_scores.values())))
    return round(overall, 1), category_scores


def score_report(report: AuditReport) -> tuple[float, dict[str, float], list[Finding]]:
    """Evaluate the rules on `report`; returns (score, category scores, non-passing findings)."""
    results = evaluate_rules(report)
    score, category_scores = compute_health_score(results)
    findings = [r for r in results if r.status != Status.PASS]
    return score, category_scores, findings


def score_label(score: float) -> str:
    if score >= 90:
        return "Excellent"
    elif score >= 75:
        return "Good"
    elif score >= 50:
        return "Needs Work"
    else:
        return "Poor"
