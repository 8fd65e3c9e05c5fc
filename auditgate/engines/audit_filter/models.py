"""Data models for the audit filter engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Literal

Severity = Literal["info", "low", "moderate", "high", "critical"]
AllowlistStatus = Literal["new", "allowed", "expired"]

BLOCKING_SEVERITIES: frozenset[str] = frozenset({"high", "critical"})


class DetectedFormat(str, Enum):
    """Report shape resolved once at the parsing boundary."""

    NPM_V6 = "npm-v6"
    NPM_V7_PLUS = "npm-v7+"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Vulnerability:
    """Canonical vulnerability row, independent of the report shape it came from."""

    id: str
    package: str
    severity: Severity
    title: str
    url: str
    vulnerable_versions: str
    source: str


@dataclass(frozen=True)
class SeverityCounts:
    """Severity counters copied from a report's ``metadata.vulnerabilities``."""

    info: int = 0
    low: int = 0
    moderate: int = 0
    high: int = 0
    critical: int = 0
    total: int = 0


@dataclass(frozen=True)
class AuditReport:
    """Canonical audit report produced by the parser."""

    vulnerabilities: list[Vulnerability]
    metadata: SeverityCounts
    format: DetectedFormat


@dataclass(frozen=True)
class AllowlistEntry:
    """A validated, reviewed exception for one advisory in one package."""

    id: str
    package: str
    reason: str
    expires: str
    notes: str | None = None
    reviewed_on: str | None = None


@dataclass(frozen=True)
class ClassifiedVulnerability:
    """A high/critical vulnerability with its allowlist verdict."""

    id: str
    package: str
    severity: Severity
    title: str
    url: str
    vulnerable_versions: str
    source: str
    allowlist_status: AllowlistStatus
    reason: str | None = None
    expires_on: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class AnalysisResult:
    """Outcome of one analysis run."""

    vulnerabilities: list[ClassifiedVulnerability] = field(default_factory=list)
    allowed_vulnerabilities: list[ClassifiedVulnerability] = field(default_factory=list)
    expired_allowlist_entries: list[ClassifiedVulnerability] = field(default_factory=list)
    expiring_entries: list[ClassifiedVulnerability] = field(default_factory=list)

    @property
    def is_successful(self) -> bool:
        return not self.vulnerabilities and not self.expired_allowlist_entries

    def to_dict(self) -> dict[str, Any]:
        return {
            "vulnerabilities": [v.to_dict() for v in self.vulnerabilities],
            "allowed_vulnerabilities": [v.to_dict() for v in self.allowed_vulnerabilities],
            "expired_allowlist_entries": [v.to_dict() for v in self.expired_allowlist_entries],
            "expiring_entries": [v.to_dict() for v in self.expiring_entries],
            "is_successful": self.is_successful,
        }
