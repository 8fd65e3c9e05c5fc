"""Analysis orchestrator — the single entry point of the audit filter engine."""

from __future__ import annotations

from datetime import datetime

import structlog

from auditgate.engines.audit_filter.allowlist import parse_allowlist
from auditgate.engines.audit_filter.classifier import classify_vulnerabilities
from auditgate.engines.audit_filter.dates import DEFAULT_EXPIRY_WARNING_DAYS, to_utc
from auditgate.engines.audit_filter.models import AnalysisResult
from auditgate.engines.audit_filter.report_parser import parse_audit_report

log = structlog.get_logger("auditgate.engine")


def analyze_audit_report(
    report_json: str,
    allowlist_json: str | None,
    now: datetime,
    *,
    expiring_within_days: int = DEFAULT_EXPIRY_WARNING_DAYS,
    strict_format: bool = False,
) -> AnalysisResult:
    """Analyze npm audit output against an allowlist.

    Both inputs are parsed and validated before anything is classified, so a
    malformed report or allowlist raises without producing a partial result.
    *now* is taken as given; callers own the clock.
    """
    report = parse_audit_report(report_json, strict=strict_format)
    allowlist = parse_allowlist(allowlist_json)

    result = classify_vulnerabilities(
        report.vulnerabilities,
        allowlist,
        now,
        expiring_within_days=expiring_within_days,
    )

    log.info(
        "audit_filter.analysis_completed",
        format=report.format.value,
        analysis_date=to_utc(now).isoformat(),
        allowlist_entries=len(allowlist),
        is_successful=result.is_successful,
        new_count=len(result.vulnerabilities),
        allowed_count=len(result.allowed_vulnerabilities),
        expired_count=len(result.expired_allowlist_entries),
        expiring_count=len(result.expiring_entries),
    )
    return result
