"""Classify canonical vulnerabilities against the allowlist — pure functions."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from auditgate.engines.audit_filter.dates import (
    DEFAULT_EXPIRY_WARNING_DAYS,
    is_expired,
    will_expire_soon,
)
from auditgate.engines.audit_filter.models import (
    BLOCKING_SEVERITIES,
    AllowlistEntry,
    AllowlistStatus,
    AnalysisResult,
    ClassifiedVulnerability,
    Vulnerability,
)


def index_allowlist(allowlist: Iterable[AllowlistEntry]) -> dict[tuple[str, str], AllowlistEntry]:
    """Key entries by ``(id, package)``; the first entry for a key wins."""
    index: dict[tuple[str, str], AllowlistEntry] = {}
    for entry in allowlist:
        index.setdefault((entry.id, entry.package), entry)
    return index


def find_allowlist_entry(
    vulnerability: Vulnerability,
    index: dict[tuple[str, str], AllowlistEntry],
) -> AllowlistEntry | None:
    """Exact match on advisory id (as a string) and package name."""
    return index.get((str(vulnerability.id), vulnerability.package))


def _classified(
    vuln: Vulnerability,
    status: AllowlistStatus,
    entry: AllowlistEntry | None = None,
) -> ClassifiedVulnerability:
    return ClassifiedVulnerability(
        id=vuln.id,
        package=vuln.package,
        severity=vuln.severity,
        title=vuln.title,
        url=vuln.url,
        vulnerable_versions=vuln.vulnerable_versions,
        source=vuln.source,
        allowlist_status=status,
        reason=entry.reason if entry else None,
        expires_on=entry.expires if entry else None,
    )


def classify_vulnerabilities(
    vulnerabilities: Iterable[Vulnerability],
    allowlist: Iterable[AllowlistEntry],
    now: datetime,
    *,
    expiring_within_days: int = DEFAULT_EXPIRY_WARNING_DAYS,
) -> AnalysisResult:
    """Sort every high/critical vulnerability into new, allowed or expired.

    Lower severities are dropped. Allowed vulnerabilities whose entry expires
    within *expiring_within_days* of *now* are also listed in
    ``expiring_entries``.
    """
    index = index_allowlist(allowlist)
    result = AnalysisResult()

    for vuln in vulnerabilities:
        if vuln.severity not in BLOCKING_SEVERITIES:
            continue

        entry = find_allowlist_entry(vuln, index)
        if entry is None:
            result.vulnerabilities.append(_classified(vuln, "new"))
        elif is_expired(entry.expires, now):
            result.expired_allowlist_entries.append(_classified(vuln, "expired", entry))
        else:
            allowed = _classified(vuln, "allowed", entry)
            result.allowed_vulnerabilities.append(allowed)
            if will_expire_soon(entry.expires, now, expiring_within_days):
                result.expiring_entries.append(allowed)

    return result
