"""Allowlist parsing and schema validation."""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import TypeAdapter, ValidationError

from auditgate.engines.audit_filter.errors import (
    AllowlistSchemaError,
    AllowlistStructureError,
    SchemaViolation,
)
from auditgate.engines.audit_filter.models import AllowlistEntry
from auditgate.engines.audit_filter.report_parser import decode_json
from auditgate.engines.audit_filter.schemas import AllowlistEntrySchema

log = structlog.get_logger("auditgate.engine")

_ENTRIES = TypeAdapter(list[AllowlistEntrySchema])

_ALLOWLIST_HINTS = (
    "Missing commas between array elements or object properties",
    "Unescaped quotes in strings",
    "Trailing commas (not allowed in JSON)",
    "Mismatched brackets or braces",
)

# pydantic error type → rule name reported to the user.
_RULES: dict[str, str] = {
    "missing": "missing",
    "string_too_short": "empty",
    "string_type": "wrong_type",
    "extra_forbidden": "unknown_property",
    "value_error": "invalid_date",
    "model_type": "not_an_object",
    "model_attributes_type": "not_an_object",
}


def parse_allowlist(allowlist_json: str | None) -> list[AllowlistEntry]:
    """Parse and validate allowlist JSON.

    ``None`` means no allowlist was supplied and yields an empty list.
    Raises :class:`JsonSyntaxError` for invalid JSON,
    :class:`AllowlistStructureError` when the top-level value is not an
    array, and :class:`AllowlistSchemaError` listing every entry violation.
    """
    if allowlist_json is None:
        log.debug("audit_filter.allowlist_absent")
        return []

    log.debug("audit_filter.parse_allowlist", input_length=len(allowlist_json))
    payload: Any = decode_json(allowlist_json, source="allowlist file", hints=_ALLOWLIST_HINTS)

    if not isinstance(payload, list):
        input_type = "object" if isinstance(payload, dict) else type(payload).__name__
        raise AllowlistStructureError(f"Allowlist must be an array (got {input_type})")

    try:
        validated = _ENTRIES.validate_python(payload)
    except ValidationError as exc:
        violations = [_to_violation(err) for err in exc.errors()]
        log.error(
            "audit_filter.allowlist_invalid",
            violation_count=len(violations),
            entry_count=len(payload),
            affected_entries=sorted({v.index for v in violations}),
        )
        raise AllowlistSchemaError(violations) from exc

    return [
        AllowlistEntry(
            id=item.id,
            package=item.package,
            reason=item.reason,
            expires=item.expires,
            notes=item.notes,
            reviewed_on=item.reviewed_on,
        )
        for item in validated
    ]


def _to_violation(err: Any) -> SchemaViolation:
    """Translate one pydantic error dict into a :class:`SchemaViolation`."""
    loc = err["loc"]
    index = loc[0] if loc and isinstance(loc[0], int) else -1
    field = str(loc[1]) if len(loc) > 1 else None
    rule = _RULES.get(err["type"], err["type"])
    prefix = f"Entry at index {index}"

    if rule == "missing":
        message = f"{prefix}: missing required property '{field}'"
    elif rule == "empty":
        message = f"{prefix}: field '{field}' cannot be empty"
    elif rule == "wrong_type":
        message = f"{prefix}: field '{field}' must be a string"
    elif rule == "unknown_property":
        message = f"{prefix}: has unexpected property '{field}'"
    elif rule == "invalid_date":
        message = f"{prefix}: field '{field}' must be a valid ISO 8601 date-time"
    elif rule == "not_an_object":
        message = f"{prefix}: must be an object"
    elif field is not None:
        message = f"{prefix}: field '{field}' {err['msg']}"
    else:
        message = f"{prefix}: {err['msg']}"

    return SchemaViolation(index=index, field=field, rule=rule, message=message)
