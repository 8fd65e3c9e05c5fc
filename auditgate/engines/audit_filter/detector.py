"""Report shape detection — resolve which npm audit format a payload uses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import BaseModel, ValidationError

from auditgate.engines.audit_filter.models import DetectedFormat
from auditgate.engines.audit_filter.schemas import RawNpmV6Audit, RawNpmV7PlusAudit

log = structlog.get_logger("auditgate.engine")

# Checked in order: npm v7+ is the current format and wins on hybrid payloads.
_CANDIDATES: tuple[tuple[DetectedFormat, type[BaseModel]], ...] = (
    (DetectedFormat.NPM_V7_PLUS, RawNpmV7PlusAudit),
    (DetectedFormat.NPM_V6, RawNpmV6Audit),
)


@dataclass(frozen=True)
class DetectedReport:
    """A payload tagged with its format and, when known, its validated raw model."""

    format: DetectedFormat
    raw: BaseModel | None
    # Per-format validation messages, populated only for UNKNOWN.
    errors: dict[str, str]


def detect_format(payload: dict[str, Any]) -> DetectedReport:
    """Match *payload* against each known report shape.

    Returns a :class:`DetectedReport` tagged ``UNKNOWN`` when nothing matches;
    the caller decides whether that is fatal.
    """
    errors: dict[str, str] = {}
    for fmt, schema in _CANDIDATES:
        try:
            raw = schema.model_validate(payload)
        except ValidationError as exc:
            errors[fmt.value] = _summarize(exc)
            continue
        log.debug("audit_filter.format_detected", format=fmt.value)
        return DetectedReport(format=fmt, raw=raw, errors={})

    log.debug(
        "audit_filter.format_unknown",
        has_advisories="advisories" in payload,
        has_vulnerabilities="vulnerabilities" in payload,
        top_level_keys=sorted(payload)[:20],
    )
    return DetectedReport(format=DetectedFormat.UNKNOWN, raw=None, errors=errors)


def _summarize(exc: ValidationError, limit: int = 5) -> str:
    messages = []
    for err in exc.errors()[:limit]:
        loc = " → ".join(str(part) for part in err["loc"]) or "<root>"
        messages.append(f"{loc}: {err['msg']}")
    if exc.error_count() > limit:
        messages.append(f"... and {exc.error_count() - limit} more")
    return "; ".join(messages)
