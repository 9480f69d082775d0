"""
Auxiliary probes against the audited page's origin: robots.txt, sitemap.xml,
ads.txt and the SPF TXT record.

Each probe is bounded by a timeout and isolated: any error, non-200 status or
timeout becomes that probe's negative result and nothing else.
"""
from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Callable, Optional
from urllib.parse import urlparse

import dns.exception
import dns.resolver
import requests

from config import (
    DEFAULT_USER_AGENT,
    PROBE_JOIN_GRACE_SECONDS,
    PROBE_TIMEOUT_SECONDS,
    PROBE_WORKERS,
)
from models import ProbeResults

logger = logging.getLogger(__name__)


# ── Individual probes ─────────────────────────────────────────────────────────

def check_robots_txt(origin: str, session: requests.Session, timeout: float = PROBE_TIMEOUT_SECONDS) -> bool:
    resp = session.get(f"{origin}/robots.txt", timeout=timeout, allow_redirects=True)
    return resp.status_code == 200


def check_sitemap_xml(origin: str, session: requests.Session, timeout: float = PROBE_TIMEOUT_SECONDS) -> bool:
    return _resource_exists(f"{origin}/sitemap.xml", session, timeout)


def check_ads_txt(origin: str, session: requests.Session, timeout: float = PROBE_TIMEOUT_SECONDS) -> bool:
    return _resource_exists(f"{origin}/ads.txt", session, timeout)


def check_spf_record(
    hostname: str,
    resolver: dns.resolver.Resolver,
    timeout: float = PROBE_TIMEOUT_SECONDS,
) -> bool:
    answers = resolver.resolve(hostname, "TXT", lifetime=timeout)
    for rdata in answers:
        record = b"".join(rdata.strings).decode("utf-8", errors="replace")
        if "v=spf1" in record:
            return True
    return False


def _resource_exists(url: str, session: requests.Session, timeout: float) -> bool:
    """HEAD existence check; retries with GET when HEAD is not allowed."""
    resp = session.head(url, timeout=timeout, allow_redirects=True)
    if resp.status_code == 405:
        resp = session.get(url, timeout=timeout, allow_redirects=True, stream=True)
        resp.close()
    return resp.status_code == 200


# ── Runner ────────────────────────────────────────────────────────────────────

class PendingProbes:
    """Probes in flight; `join()` waits for all of them up to a shared deadline."""

    def __init__(self, executor: Optional[ThreadPoolExecutor], futures: dict[str, Future], deadline: float):
        self._executor = executor
        self._futures = futures
        self._deadline = deadline

    def join(self) -> ProbeResults:
        if not self._futures:
            return ProbeResults()

        remaining = max(0.0, self._deadline - time.monotonic())
        wait(self._futures.values(), timeout=remaining)

        outcome: dict[str, bool] = {}
        for name, future in self._futures.items():
            if future.done():
                outcome[name] = future.result()
            else:
                logger.debug("Probe %s timed out", name)
                future.cancel()
                outcome[name] = False

        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
        return ProbeResults(**outcome)


def start_probes(
    page_url: str,
    session: Optional[requests.Session] = None,
    resolver: Optional[dns.resolver.Resolver] = None,
    timeout: float = PROBE_TIMEOUT_SECONDS,
    user_agent: str = DEFAULT_USER_AGENT,
) -> PendingProbes:
    """Submit all four probes concurrently and return without waiting."""
    parsed = urlparse(page_url)
    hostname = parsed.hostname or ""
    try:
        port = parsed.port
    except ValueError:
        port = None
    origin = _origin(parsed.scheme, hostname, port)

    session = session or make_session(user_agent)

    jobs: dict[str, Callable[[], bool]] = {
        "robots_txt": lambda: check_robots_txt(origin, session, timeout),
        "sitemap":    lambda: check_sitemap_xml(origin, session, timeout),
        "ads_txt":    lambda: check_ads_txt(origin, session, timeout),
        # Resolver() reads the system config and may raise; build it inside the probe
        "spf":        lambda: check_spf_record(hostname, resolver or dns.resolver.Resolver(), timeout),
    }

    deadline = time.monotonic() + timeout + PROBE_JOIN_GRACE_SECONDS
    executor = ThreadPoolExecutor(max_workers=PROBE_WORKERS, thread_name_prefix="probe")
    futures = {name: executor.submit(_contained, name, job) for name, job in jobs.items()}
    return PendingProbes(executor, futures, deadline)


def skipped_probes() -> PendingProbes:
    return PendingProbes(None, {}, time.monotonic())


def run_probes(page_url: str, **kwargs) -> ProbeResults:
    return start_probes(page_url, **kwargs).join()


def _origin(scheme: str, hostname: str, port: Optional[int]) -> str:
    """`scheme://host[:port]`; userinfo never reaches the probe URLs."""
    host = f"[{hostname}]" if ":" in hostname else hostname
    return f"{scheme}://{host}:{port}" if port is not None else f"{scheme}://{host}"


def _contained(name: str, job: Callable[[], bool]) -> bool:
    try:
        return bool(job())
    except requests.RequestException as exc:
        logger.debug("Probe %s failed: %s", name, exc)
    except dns.exception.DNSException as exc:
        logger.debug("Probe %s DNS lookup failed: %s", name, exc)
    except Exception as exc:
        logger.debug("Probe %s raised %s: %s", name, type(exc).__name__, exc)
    return False


def make_session(user_agent: str = DEFAULT_USER_AGENT) -> requests.Session:
    session = requests.Session()
    session.headers.update({
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
        "Accept-Encoding": "gzip, deflate",
    })
    return session
