"""Audit filter engine — gate npm audit reports against a time-bound allowlist."""

from auditgate.engines.audit_filter.allowlist import parse_allowlist
from auditgate.engines.audit_filter.analyzer import analyze_audit_report
from auditgate.engines.audit_filter.classifier import classify_vulnerabilities
from auditgate.engines.audit_filter.errors import (
    AllowlistSchemaError,
    AllowlistStructureError,
    AuditFilterError,
    JsonSyntaxError,
    SchemaViolation,
    UnsupportedFormatError,
)
from auditgate.engines.audit_filter.models import (
    AllowlistEntry,
    AnalysisResult,
    AuditReport,
    ClassifiedVulnerability,
    DetectedFormat,
    SeverityCounts,
    Vulnerability,
)
from auditgate.engines.audit_filter.report_parser import parse_audit_report

__all__ = [
    "AllowlistEntry",
    "AllowlistSchemaError",
    "AllowlistStructureError",
    "AnalysisResult",
    "AuditFilterError",
    "AuditReport",
    "ClassifiedVulnerability",
    "DetectedFormat",
    "JsonSyntaxError",
    "SchemaViolation",
    "SeverityCounts",
    "UnsupportedFormatError",
    "Vulnerability",
    "analyze_audit_report",
    "classify_vulnerabilities",
    "parse_allowlist",
    "parse_audit_report",
]
