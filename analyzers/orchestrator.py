"""
Runs one page audit: validates the input, starts the auxiliary probes, runs
every analyzer over the DOM snapshot while the probes are in flight, then
joins the probes and assembles the report.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional
from urllib.parse import urlparse

import dns.resolver
import requests

from analyzers.assembler import assemble_report
from analyzers.base import PageContext
from analyzers.content import ContentAnalyzer
from analyzers.images import ImageAnalyzer
from analyzers.meta import MetaAnalyzer
from analyzers.mobile import MobileAnalyzer
from analyzers.performance import PerformanceEstimator
from analyzers.security import SecurityAnalyzer
from analyzers.technical import TechnicalAnalyzer
from config import DEFAULT_REQUEST_TIMEOUT
from crawler.dom import parse_html
from crawler.fetcher import fetch_page
from crawler.probes import skipped_probes, start_probes
from models import (
    AuditInput,
    AuditReport,
    AuditResult,
    AuditSettings,
    FetchResult,
    InvalidAuditInput,
)
from scoring.scorer import score_report

logger = logging.getLogger(__name__)


_ANALYZERS = [
    MetaAnalyzer(),
    ContentAnalyzer(),
    ImageAnalyzer(),
    TechnicalAnalyzer(),
    MobileAnalyzer(),
    SecurityAnalyzer(),
    PerformanceEstimator(),
]


def run_audit(
    audit_input: AuditInput,
    settings: Optional[AuditSettings] = None,
    session: Optional[requests.Session] = None,
    resolver: Optional[dns.resolver.Resolver] = None,
) -> AuditReport:
    """
    Audit one page and return its fully-populated report.
    Raises InvalidAuditInput if the input cannot be audited; nothing else escapes.
    """
    validate_input(audit_input)
    settings = settings or AuditSettings()

    if settings.enable_probes:
        pending = start_probes(
            audit_input.requested_url,
            session=session,
            resolver=resolver,
            timeout=settings.probe_timeout,
            user_agent=settings.user_agent,
        )
    else:
        pending = skipped_probes()

    page = PageContext(audit_input=audit_input, snapshot=parse_html(audit_input.html))

    parts: dict[str, Any] = {}
    for analyzer in _ANALYZERS:
        try:
            parts.update(analyzer.analyze(page, settings))
        except Exception:
            # One analyzer failing leaves its categories at their defaults
            logger.exception(
                "%s failed on %s; using defaults for %s",
                type(analyzer).__name__, audit_input.requested_url, ", ".join(analyzer.categories),
            )

    return assemble_report(parts, pending.join())


def audit_page(
    audit_input: AuditInput,
    settings: Optional[AuditSettings] = None,
    session: Optional[requests.Session] = None,
    resolver: Optional[dns.resolver.Resolver] = None,
) -> AuditResult:
    """Audit one page and score the report against the health rules."""
    validate_input(audit_input)
    started = datetime.now()
    logger.info("Auditing %s", audit_input.requested_url)

    report = run_audit(audit_input, settings=settings, session=session, resolver=resolver)
    score, category_scores, findings = score_report(report)

    result = AuditResult(
        report=report,
        requested_url=audit_input.requested_url,
        health_score=score,
        category_scores=category_scores,
        findings=findings,
        started_at=started,
        finished_at=datetime.now(),
    )
    logger.info(
        "Audit of %s completed in %.2fs - score %.1f/100 (%d findings)",
        audit_input.requested_url, result.duration_seconds, score, len(findings),
    )
    return result


def audit_url(
    url: str,
    settings: Optional[AuditSettings] = None,
    session: Optional[requests.Session] = None,
    resolver: Optional[dns.resolver.Resolver] = None,
    timeout: int = DEFAULT_REQUEST_TIMEOUT,
) -> AuditResult:
    """Fetch `url` with the reference fetcher, then audit it. Raises FetchError on fetch failure."""
    settings = settings or AuditSettings()
    fetched = fetch_page(url, session=session, timeout=timeout, user_agent=settings.user_agent)
    return audit_page(fetched.to_audit_input(), settings=settings, session=session, resolver=resolver)


def validate_input(audit_input: AuditInput) -> None:
    if not isinstance(audit_input, AuditInput):
        raise InvalidAuditInput(f"Expected AuditInput, got {type(audit_input).__name__}")
    if not isinstance(audit_input.html, str):
        raise InvalidAuditInput("html must be a string")
    if not isinstance(audit_input.fetch, FetchResult):
        raise InvalidAuditInput("fetch must be a FetchResult")

    url = audit_input.requested_url
    if not isinstance(url, str) or not url.strip():
        raise InvalidAuditInput("requested_url is empty")
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
    except ValueError as exc:
        raise InvalidAuditInput(f"requested_url is malformed: {url!r}") from exc
    if parsed.scheme.lower() not in ("http", "https") or not hostname:
        raise InvalidAuditInput(f"requested_url is not an absolute http(s) URL: {url!r}")
