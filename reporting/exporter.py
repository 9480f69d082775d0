"""
Converts audit reports and scoring results to JSON, Pandas DataFrames and CSV bytes for export.
"""
from __future__ import annotations

import io
import json

import pandas as pd

from models import AuditReport, AuditResult, Finding, Severity


# ── JSON ───────────────────────────────────────────────────────────────────────

def report_to_json(report: AuditReport, indent: int = 2) -> str:
    return json.dumps(report.to_dict(), indent=indent, sort_keys=True)


def result_to_dict(result: AuditResult) -> dict:
    return {
        "url":            result.requested_url,
        "healthScore":    result.health_score,
        "categoryScores": dict(result.category_scores),
        "report":         result.report.to_dict(),
        "findings": [
            {
                "category":       f.category,
                "rule":           f.rule_id,
                "severity":       f.severity,
                "status":         f.status,
                "message":        f.message,
                "recommendation": f.recommendation,
                "detail":         f.detail,
            }
            for f in result.findings
        ],
        "durationSeconds": result.duration_seconds,
    }


# ── Signals DataFrame ──────────────────────────────────────────────────────────

def report_to_df(report: AuditReport) -> pd.DataFrame:
    """One row per signal: Category, Signal, Value."""
    rows = []
    for category, signals in report.to_dict().items():
        for signal, value in signals.items():
            rows.append({"Category": category, "Signal": signal, "Value": value})
    return pd.DataFrame(rows, columns=["Category", "Signal", "Value"])


# ── Findings DataFrame ─────────────────────────────────────────────────────────

def findings_to_df(findings: list[Finding]) -> pd.DataFrame:
    columns = ["Severity", "Status", "Category", "Rule", "Detail", "Message", "Recommendation"]
    if not findings:
        return pd.DataFrame(columns=columns)

    rows = []
    for finding in findings:
        rows.append({
            "Severity":       finding.severity,
            "Status":         finding.status,
            "Category":       finding.category,
            "Rule":           _humanize(finding.rule_id),
            "Detail":         finding.detail or "",
            "Message":        finding.message,
            "Recommendation": finding.recommendation,
        })

    df = pd.DataFrame(rows, columns=columns)

    severity_order = {Severity.HIGH: 0, Severity.MEDIUM: 1, Severity.LOW: 2}
    df["_sev_order"] = df["Severity"].map(severity_order)
    df = df.sort_values(["_sev_order", "Category", "Rule"]).drop(columns=["_sev_order"])
    df = df.reset_index(drop=True)
    return df


def category_scores_df(result: AuditResult) -> pd.DataFrame:
    rows = [{"Category": cat, "Score": score} for cat, score in result.category_scores.items()]
    return pd.DataFrame(rows, columns=["Category", "Score"])


# ── CSV export ─────────────────────────────────────────────────────────────────

def to_csv_bytes(df: pd.DataFrame) -> bytes:
    buf = io.StringIO()
    df.to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")


# ── Helpers ────────────────────────────────────────────────────────────────────

def _humanize(snake: str) -> str:
    """Convert snake_case to Title Case for display."""
    return snake.replace("_", " ").title()
