"""
Global configuration constants for the page audit engine.
All tunable thresholds live here.
"""

# ── Auxiliary probes ──────────────────────────────────────────────────────────
PROBE_TIMEOUT_SECONDS = 3.0
PROBE_JOIN_GRACE_SECONDS = 1.0          # slack on top of the timeout when joining
PROBE_WORKERS = 4

# ── Fetch defaults ────────────────────────────────────────────────────────────
DEFAULT_REQUEST_TIMEOUT = 15            # seconds
DEFAULT_USER_AGENT = (
    "PageAuditBot/1.0 (+https://github.com/page-audit-engine)"
)

# ── Structural signals ────────────────────────────────────────────────────────
MODERN_IMAGE_EXTENSIONS = (".webp", ".avif")

# Case-insensitive regexes matched against inline script text and script src
ANALYTICS_PATTERNS = [
    r"google-analytics",
    r"googletagmanager",
    r"plausible",
    r"segment",
    r"mixpanel",
]

# ── Performance proxies (NOT measured Core Web Vitals) ────────────────────────
# Multiples of the total fetch duration in seconds.
METRIC_MULTIPLIERS: dict[str, float] = {
    "ttfb": 0.4,
    "fcp":  1.5,
    "lcp":  2.0,
}
NOMINAL_CLS = 0.05

# ── Scoring ───────────────────────────────────────────────────────────────────
SEVERITY_WEIGHTS: dict[str, float] = {
    "HIGH":   3,
    "MEDIUM": 2,
    "LOW":    1,
}

STATUS_SCORES: dict[str, float] = {
    "PASS":    1.0,
    "WARNING": 0.5,
    "FAIL":    0.0,
}

# Category max points (must sum to 100)
CATEGORY_MAX_POINTS: dict[str, float] = {
    "Common SEO & On-Page": 30,
    "Speed & Performance":  25,
    "Server & Security":    15,
    "Mobile Usability":     15,
    "Advanced SEO":         15,
}
