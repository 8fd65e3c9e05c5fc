"""Exceptions raised by the audit filter engine."""

from __future__ import annotations

from dataclasses import dataclass


class AuditFilterError(Exception):
    """Base exception for all audit filter errors."""


class JsonSyntaxError(AuditFilterError):
    """Raised when an input string is not valid JSON."""

    def __init__(self, source: str, message: str, lineno: int | None = None, colno: int | None = None):
        self.source = source
        self.lineno = lineno
        self.colno = colno
        super().__init__(message)


class UnsupportedFormatError(AuditFilterError):
    """Raised when a report's top-level value cannot be used as an audit report."""


class AllowlistStructureError(AuditFilterError):
    """Raised when the allowlist's top-level value is not an array."""


@dataclass(frozen=True)
class SchemaViolation:
    """One broken rule in one allowlist entry."""

    index: int
    field: str | None
    rule: str
    message: str


class AllowlistSchemaError(AuditFilterError):
    """Raised when one or more allowlist entries break the entry schema.

    Every violation across every entry is collected before raising.
    """

    def __init__(self, violations: list[SchemaViolation]):
        self.violations = violations
        lines = "\n".join(f"  - {v.message}" for v in violations)
        super().__init__(
            f"Allowlist validation failed with {len(violations)} error(s):\n{lines}"
        )
