"""Canonical parser for ``npm audit --json`` output."""

from __future__ import annotations

import json
from typing import Any

import structlog

from auditgate.engines.audit_filter.detector import detect_format
from auditgate.engines.audit_filter.errors import JsonSyntaxError, UnsupportedFormatError
from auditgate.engines.audit_filter.models import AuditReport, DetectedFormat, SeverityCounts
from auditgate.engines.audit_filter.normalizers import normalize

log = structlog.get_logger("auditgate.engine")

_COUNT_KEYS = ("info", "low", "moderate", "high", "critical", "total")


def decode_json(text: str, *, source: str, hints: tuple[str, ...]) -> Any:
    """``json.loads`` that raises :class:`JsonSyntaxError` with actionable hints."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        log.error(
            "audit_filter.json_parse_failed",
            source=source,
            input_length=len(text),
            lineno=exc.lineno,
            colno=exc.colno,
        )
        hint_lines = "\n".join(f"- {hint}" for hint in hints)
        raise JsonSyntaxError(
            source,
            f"Failed to parse {source} as JSON: {exc.msg} "
            f"(line {exc.lineno}, column {exc.colno}).\n"
            f"Common causes:\n{hint_lines}",
            lineno=exc.lineno,
            colno=exc.colno,
        ) from exc


_REPORT_HINTS = (
    "Trailing commas after the last element of an object or array",
    "Unquoted or single-quoted object keys",
    "Non-JSON text (warnings, progress output) mixed into the scanner output",
)


def parse_audit_report(report_json: str, *, strict: bool = False) -> AuditReport:
    """Parse raw ``npm audit --json`` output into an :class:`AuditReport`.

    Raises :class:`JsonSyntaxError` for invalid JSON and
    :class:`UnsupportedFormatError` when the top-level value is not an object.
    A valid object matching no known format degrades to an empty report
    carrying whatever severity counts could be salvaged, unless *strict* is
    set, in which case it raises :class:`UnsupportedFormatError` too.
    """
    log.debug("audit_filter.parse_report", input_length=len(report_json))
    payload = decode_json(report_json, source="npm audit output", hints=_REPORT_HINTS)

    if not isinstance(payload, dict):
        input_type = "array" if isinstance(payload, list) else type(payload).__name__
        log.error("audit_filter.invalid_report_structure", input_type=input_type)
        raise UnsupportedFormatError(
            f"Invalid npm audit output: not a valid object (got {input_type})"
        )

    detected = detect_format(payload)
    if detected.format is DetectedFormat.UNKNOWN or detected.raw is None:
        details = "\n".join(f"{fmt}: {msg}" for fmt, msg in detected.errors.items())
        if strict:
            raise UnsupportedFormatError(
                "The npm audit JSON does not match any supported format. "
                "Please ensure you are using a compatible npm version.\n\n"
                f"Validation details:\n{details}"
            )
        log.warning(
            "audit_filter.unsupported_format_fallback",
            has_advisories="advisories" in payload,
            has_vulnerabilities="vulnerabilities" in payload,
        )
        return AuditReport(
            vulnerabilities=[],
            metadata=salvage_counts(payload),
            format=DetectedFormat.UNKNOWN,
        )

    report = normalize(detected.format, detected.raw)
    log.debug(
        "audit_filter.report_normalized",
        format=report.format.value,
        vulnerability_rows=len(report.vulnerabilities),
        total=report.metadata.total,
    )
    return report


def salvage_counts(payload: dict[str, Any]) -> SeverityCounts:
    """Best-effort severity counts from ``metadata.vulnerabilities``.

    Anything that is not a non-negative integer counts as 0.
    """
    metadata = payload.get("metadata")
    counts = metadata.get("vulnerabilities") if isinstance(metadata, dict) else None
    if not isinstance(counts, dict):
        return SeverityCounts()

    values: dict[str, int] = {}
    for key in _COUNT_KEYS:
        value = counts.get(key)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            value = 0
        values[key] = value
    return SeverityCounts(**values)
