"""auditgate: gate dependency-audit reports against a time-bound allowlist."""

__version__ = "0.1.0"
