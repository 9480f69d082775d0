"""
Core data models for the page audit engine.
All modules import from here; nothing else is cross-imported at this level.

Every signal record has a default for every field, so a report built from
nothing is still structurally complete.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Optional

from config import (
    ANALYTICS_PATTERNS,
    METRIC_MULTIPLIERS,
    MODERN_IMAGE_EXTENSIONS,
    NOMINAL_CLS,
    PROBE_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
)


# ── Errors ────────────────────────────────────────────────────────────────────
class InvalidAuditInput(ValueError):
    """The audit input cannot be audited (bad base URL, wrong types)."""


class FetchError(RuntimeError):
    """The reference fetcher could not retrieve the page."""


# ── Severity / status ─────────────────────────────────────────────────────────
class Severity:
    HIGH   = "HIGH"
    MEDIUM = "MEDIUM"
    LOW    = "LOW"

    ALL = [HIGH, MEDIUM, LOW]


class Status:
    PASS    = "PASS"
    WARNING = "WARNING"
    FAIL    = "FAIL"

    ALL = [PASS, WARNING, FAIL]


# ── Inputs ────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class FetchResult:
    final_url: str
    headers: dict[str, str] = field(default_factory=dict)
    fetch_duration_ms: float = 0.0
    status_code: int = 200
    http_version: str = ""


@dataclass(frozen=True)
class AuditInput:
    requested_url: str
    html: str
    fetch: FetchResult


@dataclass(frozen=True)
class FetchedPage:
    url: str
    html: str
    fetch: FetchResult

    def to_audit_input(self) -> AuditInput:
        return AuditInput(requested_url=self.url, html=self.html, fetch=self.fetch)


@dataclass
class AuditSettings:
    probe_timeout: float = PROBE_TIMEOUT_SECONDS
    enable_probes: bool = True
    analytics_patterns: list[str] = field(default_factory=lambda: list(ANALYTICS_PATTERNS))
    modern_image_extensions: tuple[str, ...] = MODERN_IMAGE_EXTENSIONS
    metric_multipliers: dict[str, float] = field(default_factory=lambda: dict(METRIC_MULTIPLIERS))
    nominal_cls: float = NOMINAL_CLS
    user_agent: str = DEFAULT_USER_AGENT


# ── Signal records ────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class TitleSignals:
    exists: bool = False
    length: int = 0
    value: str = ""


@dataclass(frozen=True)
class MetaDescriptionSignals:
    exists: bool = False
    length: int = 0


@dataclass(frozen=True)
class HeadingSignals:
    h1_count: int = 0
    h2_count: int = 0


@dataclass(frozen=True)
class KeywordSignals:
    found_in_title_or_h1: bool = False
    found_in_content: bool = False


@dataclass(frozen=True)
class ImageSignals:
    # No images is not penalised: both ratios default to 1
    alt_coverage: float = 1.0
    modern_format_ratio: float = 1.0
    properly_sized: bool = True
    total: int = 0


@dataclass(frozen=True)
class FaviconSignals:
    exists: bool = False


@dataclass(frozen=True)
class CanonicalSignals:
    matches_current: bool = False
    value: str = ""


@dataclass(frozen=True)
class MetaRobotsSignals:
    noindex: bool = False


@dataclass(frozen=True)
class CompressionSignals:
    enabled: bool = False


@dataclass(frozen=True)
class PageSignals:
    html_size_kb: float = 0.0
    dom_nodes: int = 0


@dataclass(frozen=True)
class HtmlSignals:
    lang: int = 0  # length of <html lang>; > 0 means declared


@dataclass(frozen=True)
class NetworkSignals:
    request_count: int = 1


@dataclass(frozen=True)
class PerformanceSignals:
    render_blocking_count: int = 0
    has_render_blocking_resources: bool = False


@dataclass(frozen=True)
class MetricSignals:
    ttfb: float = 0.0
    fcp: float = 0.0
    lcp: float = 0.0
    cls: float = NOMINAL_CLS


@dataclass(frozen=True)
class SecuritySignals:
    is_https: bool = False
    ssl_valid: bool = False
    www_resolve_match: bool = True
    http2_enabled: bool = False
    mixed_content_found: bool = False
    unsafe_cross_links: bool = False
    x_content_type_options: bool = False


@dataclass(frozen=True)
class HeaderSignals:
    hsts: bool = False


@dataclass(frozen=True)
class MobileSignals:
    viewport_exists: bool = False
    media_queries_found: bool = False
    horizontal_scroll: bool = False    # needs a rendered layout
    tap_target_issues: bool = False    # needs a rendered layout


@dataclass(frozen=True)
class AdvancedSignals:
    robots_txt_exists: bool = False
    sitemap_exists: bool = False
    schema_detected: bool = False
    custom404_exists: bool = True      # not probed
    ads_txt_exists: bool = False
    ads_txt_exists_or_not_relevant: bool = True
    spf_record_exists: bool = False


@dataclass(frozen=True)
class AnalyticsSignals:
    detected: bool = False


@dataclass(frozen=True)
class ContentSignals:
    word_count: int = 0


@dataclass(frozen=True)
class SocialSignals:
    og_title: bool = False
    og_image: bool = False
    twitter_card: bool = False


@dataclass(frozen=True)
class ProbeResults:
    robots_txt: bool = False
    sitemap: bool = False
    ads_txt: bool = False
    spf: bool = False


# ── Report ────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class AuditReport:
    title: TitleSignals = field(default_factory=TitleSignals)
    meta_description: MetaDescriptionSignals = field(default_factory=MetaDescriptionSignals)
    headings: HeadingSignals = field(default_factory=HeadingSignals)
    keywords: KeywordSignals = field(default_factory=KeywordSignals)
    images: ImageSignals = field(default_factory=ImageSignals)
    favicon: FaviconSignals = field(default_factory=FaviconSignals)
    canonical: CanonicalSignals = field(default_factory=CanonicalSignals)
    meta_robots: MetaRobotsSignals = field(default_factory=MetaRobotsSignals)
    compression: CompressionSignals = field(default_factory=CompressionSignals)
    page: PageSignals = field(default_factory=PageSignals)
    html: HtmlSignals = field(default_factory=HtmlSignals)
    network: NetworkSignals = field(default_factory=NetworkSignals)
    performance: PerformanceSignals = field(default_factory=PerformanceSignals)
    metrics: MetricSignals = field(default_factory=MetricSignals)
    security: SecuritySignals = field(default_factory=SecuritySignals)
    headers: HeaderSignals = field(default_factory=HeaderSignals)
    mobile: MobileSignals = field(default_factory=MobileSignals)
    advanced: AdvancedSignals = field(default_factory=AdvancedSignals)
    analytics: AnalyticsSignals = field(default_factory=AnalyticsSignals)
    content: ContentSignals = field(default_factory=ContentSignals)
    social: SocialSignals = field(default_factory=SocialSignals)

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """JSON-ready mapping with camelCase category and signal names."""
        out: dict[str, dict[str, Any]] = {}
        for cat in fields(self):
            record = getattr(self, cat.name)
            out[camel_case(cat.name)] = {
                camel_case(f.name): getattr(record, f.name) for f in fields(record)
            }
        return out


def camel_case(snake: str) -> str:
    head, *rest = snake.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


# ── Scoring models ────────────────────────────────────────────────────────────
@dataclass
class Finding:
    category: str
    rule_id: str
    severity: str          # Severity.HIGH / MEDIUM / LOW
    status: str            # Status.WARNING / FAIL
    message: str
    recommendation: str
    detail: str = ""       # the signal values that triggered the finding


@dataclass
class AuditResult:
    report: AuditReport
    requested_url: str = ""
    health_score: float = 0.0
    category_scores: dict[str, float] = field(default_factory=dict)
    findings: list[Finding] = field(default_factory=list)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def duration_seconds(self) -> float:
        if self.started_at and self.finished_at:
            return (self.finished_at - self.started_at).total_seconds()
        return 0.0

    @property
    def findings_by_severity(self) -> dict[str, list[Finding]]:
        out: dict[str, list[Finding]] = {s: [] for s in Severity.ALL}
        for finding in self.findings:
            out.setdefault(finding.severity, []).append(finding)
        return out

    @property
    def findings_by_category(self) -> dict[str, list[Finding]]:
        out: dict[str, list[Finding]] = {}
        for finding in self.findings:
            out.setdefault(finding.category, []).append(finding)
        return out
