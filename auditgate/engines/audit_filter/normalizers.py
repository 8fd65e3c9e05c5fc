"""Normalizers — turn a validated raw report into canonical vulnerability rows.

One normalizer is registered per :class:`DetectedFormat`. Normalizers never
raise: shape mismatches are rejected earlier, at detection time.
"""

from __future__ import annotations

from typing import Callable

from pydantic import BaseModel

from auditgate.engines.audit_filter.models import (
    AuditReport,
    DetectedFormat,
    SeverityCounts,
    Vulnerability,
)
from auditgate.engines.audit_filter.schemas import (
    RawMetadata,
    RawNpmV6Audit,
    RawNpmV7PlusAudit,
    RawViaAdvisory,
)

ANY_VERSION = "*"

Normalizer = Callable[[BaseModel], AuditReport]

NORMALIZER_REGISTRY: dict[DetectedFormat, Normalizer] = {}


def register_normalizer(fmt: DetectedFormat) -> Callable[[Normalizer], Normalizer]:
    """Register the decorated function as the normalizer for *fmt*."""

    def decorator(func: Normalizer) -> Normalizer:
        NORMALIZER_REGISTRY[fmt] = func
        return func

    return decorator


def normalize(fmt: DetectedFormat, raw: BaseModel) -> AuditReport:
    """Dispatch *raw* to the normalizer registered for *fmt*.

    Raises ``KeyError`` if no normalizer exists for *fmt* (e.g. ``UNKNOWN``).
    """
    return NORMALIZER_REGISTRY[fmt](raw)


def advisory_id(value: int | float | str) -> str:
    """Render an advisory id in its decimal string form."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def counts_from_metadata(metadata: RawMetadata) -> SeverityCounts:
    counts = metadata.vulnerabilities
    return SeverityCounts(
        info=counts.info,
        low=counts.low,
        moderate=counts.moderate,
        high=counts.high,
        critical=counts.critical,
        total=counts.total,
    )


@register_normalizer(DetectedFormat.NPM_V6)
def normalize_v6(raw: RawNpmV6Audit) -> AuditReport:
    """One canonical row per advisory."""
    rows = [
        Vulnerability(
            id=advisory_id(advisory.id),
            package=advisory.module_name,
            severity=advisory.severity,
            title=advisory.title or "",
            url=advisory.url or "",
            vulnerable_versions=advisory.vulnerable_versions or ANY_VERSION,
            source=DetectedFormat.NPM_V6.value,
        )
        for advisory in raw.advisories.values()
    ]
    return AuditReport(
        vulnerabilities=rows,
        metadata=counts_from_metadata(raw.metadata),
        format=DetectedFormat.NPM_V6,
    )


@register_normalizer(DetectedFormat.NPM_V7_PLUS)
def normalize_v7_plus(raw: RawNpmV7PlusAudit) -> AuditReport:
    """One canonical row per structured ``via`` advisory of each package.

    A package that lists several advisories fans out into several rows.
    Bare string entries point at other vulnerable packages and are skipped;
    those packages carry their own advisories.
    """
    rows: list[Vulnerability] = []
    for package_name, entry in raw.vulnerabilities.items():
        for via in entry.via:
            if not isinstance(via, RawViaAdvisory):
                continue
            rows.append(
                Vulnerability(
                    id=advisory_id(via.source),
                    package=package_name,
                    severity=via.severity or entry.severity or "info",
                    title=via.title or "",
                    url=via.url or "",
                    vulnerable_versions=via.range or ANY_VERSION,
                    source=DetectedFormat.NPM_V7_PLUS.value,
                )
            )
    return AuditReport(
        vulnerabilities=rows,
        metadata=counts_from_metadata(raw.metadata),
        format=DetectedFormat.NPM_V7_PLUS,
    )
