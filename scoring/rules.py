"""
Declarative SEO health rules and their evaluation against an AuditReport.

Rule anatomy:
- `checks`      every condition must hold, otherwise the rule FAILs
- `thresholds`  evaluated once the checks hold: `pass` -> PASS,
                `warning` -> WARNING, anything else -> FAIL
- `sub_rules`   metric ceilings (value <= pass); a failing HIGH sub-rule
                FAILs the rule, any other failure is a WARNING

Fields are dotted camelCase paths into AuditReport.to_dict().
"""
from __future__ import annotations

from typing import Any, Callable

from models import AuditReport, Finding, Severity, Status

_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "equals":  lambda actual, expected: actual == expected,
    "gte":     lambda actual, expected: actual >= expected,
    "gt":      lambda actual, expected: actual > expected,
    "lte":     lambda actual, expected: actual <= expected,
    "lt":      lambda actual, expected: actual < expected,
    "between": lambda actual, bounds: bounds[0] <= actual <= bounds[1],
    "outside": lambda actual, bounds: actual < bounds[0] or actual > bounds[1],
}

RULE_CATEGORIES: list[dict[str, Any]] = [
    {
        "id": "common_seo",
        "name": "Common SEO & On-Page",
        "rules": [
            {
                "id": "meta_title",
                "severity": Severity.HIGH,
                "checks": [{"field": "title.exists", "operator": "equals", "value": True}],
                "thresholds": {
                    "pass": {"field": "title.length", "operator": "between", "value": [30, 65]},
                    "warning": {"field": "title.length", "operator": "outside", "value": [30, 65]},
                },
                "message": "Meta title missing or incorrect length",
                "recommendation": "Ensure title exists and is between 30–65 characters.",
            },
            {
                "id": "meta_description",
                "severity": Severity.MEDIUM,
                "checks": [{"field": "metaDescription.exists", "operator": "equals", "value": True}],
                "thresholds": {
                    "pass": {"field": "metaDescription.length", "operator": "between", "value": [120, 220]},
                    "warning": {"field": "metaDescription.length", "operator": "outside", "value": [120, 220]},
                },
                "message": "Meta description missing or suboptimal length",
                "recommendation": "Add a meta description between 120–220 characters.",
            },
            {
                "id": "h1_unique",
                "severity": Severity.HIGH,
                "checks": [{"field": "headings.h1Count", "operator": "equals", "value": 1}],
                "message": "H1 heading missing or multiple found",
                "recommendation": "Ensure exactly one H1 tag per page.",
            },
            {
                "id": "h2_structure",
                "severity": Severity.LOW,
                "checks": [{"field": "headings.h2Count", "operator": "gte", "value": 1}],
                "message": "No H2 headings found",
                "recommendation": "Use H2 headings to structure content.",
            },
            {
                "id": "keyword_usage",
                "severity": Severity.MEDIUM,
                "checks": [
                    {"field": "keywords.foundInTitleOrH1", "operator": "equals", "value": True},
                    {"field": "keywords.foundInContent", "operator": "equals", "value": True},
                ],
                "message": "Primary keywords missing from critical areas",
                "recommendation": "Include primary keywords in the Title or H1 and within the body content.",
            },
            {
                "id": "image_alt",
                "severity": Severity.MEDIUM,
                "thresholds": {
                    "pass": {"field": "images.altCoverage", "operator": "gte", "value": 0.95},
                    "warning": {"field": "images.altCoverage", "operator": "between", "value": [0.80, 0.95]},
                },
                "message": "Images missing alt attributes",
                "recommendation": "Ensure at least 95% of images have descriptive alt text.",
            },
            {
                "id": "canonical_tag",
                "severity": Severity.MEDIUM,
                "checks": [{"field": "canonical.matchesCurrent", "operator": "equals", "value": True}],
                "message": "Canonical tag missing or incorrect",
                "recommendation": "Set a canonical URL that matches the preferred domain version.",
            },
        ],
    },
    {
        "id": "speed_performance",
        "name": "Speed & Performance",
        "rules": [
            {
                "id": "compression",
                "severity": Severity.HIGH,
                "checks": [{"field": "compression.enabled", "operator": "equals", "value": True}],
                "message": "Text compression (GZIP/Brotli) not enabled",
                "recommendation": "Enable GZIP or Brotli compression on the server.",
            },
            {
                "id": "html_size",
                "severity": Severity.LOW,
                "thresholds": {
                    "pass": {"field": "page.htmlSizeKb", "operator": "lt", "value": 100},
                    "warning": {"field": "page.htmlSizeKb", "operator": "between", "value": [100, 250]},
                },
                "message": "HTML document size is too large",
                "recommendation": "Reduce HTML size to under 100KB where possible.",
            },
            {
                "id": "dom_size",
                "severity": Severity.LOW,
                "checks": [{"field": "page.domNodes", "operator": "lt", "value": 1500}],
                "message": "Excessive DOM size",
                "recommendation": "Reduce DOM complexity (aim for < 1500 nodes).",
            },
            {
                "id": "http_requests",
                "severity": Severity.MEDIUM,
                "thresholds": {
                    "pass": {"field": "network.requestCount", "operator": "lte", "value": 40},
                    "warning": {"field": "network.requestCount", "operator": "between", "value": [41, 80]},
                },
                "message": "High number of HTTP requests",
                "recommendation": "Combine files or lazy load assets to keep requests under 40.",
            },
            {
                "id": "render_blocking",
                "severity": Severity.HIGH,
                "checks": [{"field": "performance.renderBlockingCount", "operator": "equals", "value": 0}],
                "message": "Render-blocking resources detected",
                "recommendation": "Defer or inline critical CSS/JS to remove render-blocking resources.",
            },
            {
                "id": "modern_image_formats",
                "severity": Severity.MEDIUM,
                "checks": [{"field": "images.modernFormatRatio", "operator": "gte", "value": 0.7}],
                "message": "Legacy image formats used",
                "recommendation": "Serve images in modern formats like WebP or AVIF.",
            },
            {
                "id": "image_sizing",
                "severity": Severity.MEDIUM,
                "checks": [{"field": "images.properlySized", "operator": "equals", "value": True}],
                "message": "Images not properly sized or distorted",
                "recommendation": "Declare width and height on images so the layout does not shift.",
            },
            {
                "id": "core_web_vitals",
                "severity": Severity.HIGH,
                "sub_rules": [
                    {"field": "metrics.lcp", "metric": "LCP", "pass": 2.5, "severity": Severity.HIGH},
                    {"field": "metrics.ttfb", "metric": "TTFB", "pass": 0.8, "severity": Severity.MEDIUM},
                    {"field": "metrics.cls", "metric": "CLS", "pass": 0.1, "severity": Severity.MEDIUM},
                    {"field": "metrics.fcp", "metric": "FCP", "pass": 1.8, "severity": Severity.MEDIUM},
                ],
                "message": "Core Web Vitals poor (estimated from fetch time)",
                "recommendation": "Optimize LCP (<2.5s), TTFB (<0.8s), and CLS (<0.1).",
            },
        ],
    },
    {
        "id": "server_security",
        "name": "Server & Security",
        "rules": [
            {
                "id": "https_ssl",
                "severity": Severity.HIGH,
                "checks": [
                    {"field": "security.isHttps", "operator": "equals", "value": True},
                    {"field": "security.sslValid", "operator": "equals", "value": True},
                ],
                "message": "Site not secure (HTTPS/SSL)",
                "recommendation": "Enforce HTTPS and ensure a valid SSL certificate.",
            },
            {
                "id": "url_canonicalization",
                "severity": Severity.HIGH,
                "checks": [{"field": "security.wwwResolveMatch", "operator": "equals", "value": True}],
                "message": "WWW and non-WWW versions do not resolve to same URL",
                "recommendation": "Redirect www to non-www (or vice versa) consistently.",
            },
            {
                "id": "http2_usage",
                "severity": Severity.MEDIUM,
                "checks": [{"field": "security.http2Enabled", "operator": "equals", "value": True}],
                "message": "HTTP/2 not enabled",
                "recommendation": "Upgrade server configuration to support HTTP/2.",
            },
            {
                "id": "hsts_header",
                "severity": Severity.LOW,
                "checks": [{"field": "headers.hsts", "operator": "equals", "value": True}],
                "message": "HSTS header missing",
                "recommendation": "Enable Strict-Transport-Security header.",
            },
            {
                "id": "mixed_content",
                "severity": Severity.HIGH,
                "checks": [{"field": "security.mixedContentFound", "operator": "equals", "value": False}],
                "message": "Mixed content (HTTP assets on HTTPS) detected",
                "recommendation": "Update all resource links to use HTTPS.",
            },
            {
                "id": "unsafe_cross_origin",
                "severity": Severity.LOW,
                "checks": [{"field": "security.unsafeCrossLinks", "operator": "equals", "value": False}],
                "message": "Unsafe target='_blank' links found",
                "recommendation": "Add rel='noopener noreferrer' to external links opening in new tabs.",
            },
        ],
    },
    {
        "id": "mobile_usability",
        "name": "Mobile Usability",
        "rules": [
            {
                "id": "viewport_meta",
                "severity": Severity.HIGH,
                "checks": [{"field": "mobile.viewportExists", "operator": "equals", "value": True}],
                "message": "Viewport meta tag missing",
                "recommendation": "Add <meta name='viewport' content='width=device-width, initial-scale=1'>.",
            },
            {
                "id": "responsive_css",
                "severity": Severity.MEDIUM,
                "checks": [{"field": "mobile.mediaQueriesFound", "operator": "equals", "value": True}],
                "message": "Responsive CSS (media queries) not detected",
                "recommendation": "Use CSS media queries to adapt layout for mobile devices.",
            },
            {
                "id": "mobile_layout_issues",
                "severity": Severity.MEDIUM,
                "checks": [
                    {"field": "mobile.horizontalScroll", "operator": "equals", "value": False},
                    {"field": "mobile.tapTargetIssues", "operator": "equals", "value": False},
                ],
                "message": "Mobile layout issues detected",
                "recommendation": "Ensure no horizontal scrolling and tap targets are appropriately sized.",
            },
        ],
    },
    {
        "id": "advanced_seo",
        "name": "Advanced SEO",
        "rules": [
            {
                "id": "robots_txt",
                "severity": Severity.HIGH,
                "checks": [{"field": "advanced.robotsTxtExists", "operator": "equals", "value": True}],
                "message": "robots.txt file missing",
                "recommendation": "Add a valid robots.txt file to control crawler access.",
            },
            {
                "id": "sitemap_xml",
                "severity": Severity.HIGH,
                "checks": [{"field": "advanced.sitemapExists", "operator": "equals", "value": True}],
                "message": "XML Sitemap missing",
                "recommendation": "Create and link a sitemap.xml file.",
            },
            {
                "id": "structured_data",
                "severity": Severity.HIGH,
                "checks": [{"field": "advanced.schemaDetected", "operator": "equals", "value": True}],
                "message": "Structured Data (Schema.org) missing",
                "recommendation": "Implement JSON-LD structured data (e.g., Organization, LocalBusiness).",
            },
            {
                "id": "custom_404",
                "severity": Severity.MEDIUM,
                "checks": [{"field": "advanced.custom404Exists", "operator": "equals", "value": True}],
                "message": "Custom 404 page missing",
                "recommendation": "Configure a user-friendly custom 404 error page.",
            },
            {
                "id": "ads_txt",
                "severity": Severity.LOW,
                "checks": [{"field": "advanced.adsTxtExistsOrNotRelevant", "operator": "equals", "value": True}],
                "message": "Ads.txt missing (if ads are present)",
                "recommendation": "If running ads, ensure ads.txt is present and valid.",
            },
            {
                "id": "spf_record",
                "severity": Severity.LOW,
                "checks": [{"field": "advanced.spfRecordExists", "operator": "equals", "value": True}],
                "message": "SPF record missing",
                "recommendation": "Add an SPF DNS record to improve domain trust and email deliverability.",
            },
        ],
    },
]


def evaluate_rules(
    report: AuditReport,
    categories: list[dict[str, Any]] = RULE_CATEGORIES,
) -> list[Finding]:
    """Evaluate every rule; returns one Finding per rule, passing ones included."""
    data = report.to_dict()
    results: list[Finding] = []
    for category in categories:
        for rule in category["rules"]:
            status, detail = evaluate_rule(rule, data)
            results.append(Finding(
                category=category["name"],
                rule_id=rule["id"],
                severity=rule["severity"],
                status=status,
                message=rule["message"],
                recommendation=rule["recommendation"],
                detail=detail,
            ))
    return results


def evaluate_rule(rule: dict[str, Any], data: dict[str, Any]) -> tuple[str, str]:
    """Return (status, detail) for one rule against report data."""
    for check in rule.get("checks", []):
        if not _holds(check, data):
            return Status.FAIL, _describe(check, data)

    thresholds = rule.get("thresholds")
    if thresholds:
        if _holds(thresholds["pass"], data):
            return Status.PASS, ""
        detail = _describe(thresholds["pass"], data)
        if "warning" in thresholds and _holds(thresholds["warning"], data):
            return Status.WARNING, detail
        return Status.FAIL, detail

    sub_rules = rule.get("sub_rules")
    if sub_rules:
        return _evaluate_sub_rules(sub_rules, data)

    return Status.PASS, ""


def _evaluate_sub_rules(sub_rules: list[dict[str, Any]], data: dict[str, Any]) -> tuple[str, str]:
    failed = []
    for sub in sub_rules:
        value = lookup(data, sub["field"])
        if value is None or value > sub["pass"]:
            failed.append(sub)

    if not failed:
        return Status.PASS, ""
    detail = "; ".join(
        f"{sub['metric']}={lookup(data, sub['field'])} (target ≤ {sub['pass']})" for sub in failed
    )
    if any(sub["severity"] == Severity.HIGH for sub in failed):
        return Status.FAIL, detail
    return Status.WARNING, detail


def _holds(condition: dict[str, Any], data: dict[str, Any]) -> bool:
    actual = lookup(data, condition["field"])
    if actual is None:
        return False
    operator = _OPERATORS.get(condition["operator"])
    if operator is None:
        raise ValueError(f"Unknown rule operator {condition['operator']!r}")
    return operator(actual, condition["value"])


def _describe(condition: dict[str, Any], data: dict[str, Any]) -> str:
    return f"{condition['field']}={lookup(data, condition['field'])!r}"


def lookup(data: dict[str, Any], path: str) -> Any:
    """Resolve a dotted path (`title.length`) in nested dicts; None if absent."""
    node: Any = data
    for key in path.split("."):
        if not isinstance(node, dict) or key not in node:
            return None
        node = node[key]
    return node
