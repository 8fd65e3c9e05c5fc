"""Pydantic schemas for raw ``npm audit --json`` payloads and allowlist entries.

The report schemas describe structural markers only: optional fields default
to ``None`` and the normalizers fill in neutral values. Unknown keys are
ignored since npm adds fields between releases.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, StrictStr, field_validator

from auditgate.engines.audit_filter.dates import parse_utc_date
from auditgate.engines.audit_filter.models import Severity


class _RawModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# ── shared ───────────────────────────────────────────────────────────────


class RawSeverityCounts(_RawModel):
    info: NonNegativeInt = 0
    low: NonNegativeInt = 0
    moderate: NonNegativeInt = 0
    high: NonNegativeInt = 0
    critical: NonNegativeInt = 0
    total: NonNegativeInt = 0


class RawMetadata(_RawModel):
    vulnerabilities: RawSeverityCounts


# ── npm v6: advisories keyed by advisory id ──────────────────────────────


class RawAdvisoryV6(_RawModel):
    id: int | str
    module_name: str
    severity: Severity
    title: str | None = None
    url: str | None = None
    vulnerable_versions: str | None = None


class RawNpmV6Audit(_RawModel):
    advisories: dict[str, RawAdvisoryV6]
    metadata: RawMetadata


# ── npm v7+: vulnerabilities keyed by package name ───────────────────────


class RawViaAdvisory(_RawModel):
    """A structured advisory inside a package's ``via`` list."""

    source: int | str
    title: str | None = None
    url: str | None = None
    severity: Severity | None = None
    range: str | None = None


class RawVulnerabilityV7(_RawModel):
    # Only what the normalizer reads is declared; isDirect, effects, nodes
    # and fixAvailable vary between npm releases and must not affect detection.
    severity: Severity | None = None
    # Strings reference other vulnerable packages; objects are advisories.
    via: list[RawViaAdvisory | str]


class RawNpmV7PlusAudit(_RawModel):
    vulnerabilities: dict[str, RawVulnerabilityV7]
    metadata: RawMetadata


# ── allowlist ────────────────────────────────────────────────────────────

NonEmptyStr = Annotated[StrictStr, Field(min_length=1)]


class AllowlistEntrySchema(BaseModel):
    """One allowlist entry as written in ``.audit-allowlist.json``."""

    model_config = ConfigDict(extra="forbid")

    id: NonEmptyStr
    package: NonEmptyStr
    reason: NonEmptyStr
    expires: NonEmptyStr
    notes: StrictStr | None = None
    reviewed_on: StrictStr | None = Field(default=None, alias="reviewedOn")

    @field_validator("expires", "reviewed_on")
    @classmethod
    def _must_be_date_time(cls, value: str | None) -> str | None:
        if value is not None and parse_utc_date(value) is None:
            raise ValueError("must be a valid ISO 8601 date-time")
        return value
