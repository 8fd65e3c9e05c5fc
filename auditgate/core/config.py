"""Runtime settings for the CLI layer, resolved from the environment."""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass

DEFAULT_ALLOWLIST_PATH = ".audit-allowlist.json"
DEFAULT_AUDIT_COMMAND = "npm audit --json"
DEFAULT_EXPIRY_WARNING_DAYS = 30
DEFAULT_AUDIT_TIMEOUT = 300.0


@dataclass(frozen=True)
class Settings:
    """CLI defaults; command-line flags override individual fields."""

    allowlist_path: str = DEFAULT_ALLOWLIST_PATH
    audit_command: tuple[str, ...] = tuple(shlex.split(DEFAULT_AUDIT_COMMAND))
    expiry_warning_days: int = DEFAULT_EXPIRY_WARNING_DAYS
    audit_timeout: float = DEFAULT_AUDIT_TIMEOUT


def _env_int(key: str, default: int) -> int:
    return int(os.environ.get(key, default))


def _env_float(key: str, default: float) -> float:
    return float(os.environ.get(key, default))


def load_settings() -> Settings:
    """Build :class:`Settings` from ``AUDITGATE_*`` environment variables.

    Raises ``ValueError`` when a numeric variable cannot be parsed or the
    expiry warning window is negative.
    """
    expiry_days = _env_int("AUDITGATE_EXPIRY_WARNING_DAYS", DEFAULT_EXPIRY_WARNING_DAYS)
    if expiry_days < 0:
        raise ValueError("AUDITGATE_EXPIRY_WARNING_DAYS must be >= 0")

    command = os.environ.get("AUDITGATE_AUDIT_COMMAND", DEFAULT_AUDIT_COMMAND)
    return Settings(
        allowlist_path=os.environ.get("AUDITGATE_ALLOWLIST_PATH", DEFAULT_ALLOWLIST_PATH),
        audit_command=tuple(shlex.split(command)),
        expiry_warning_days=expiry_days,
        audit_timeout=_env_float("AUDITGATE_AUDIT_TIMEOUT", DEFAULT_AUDIT_TIMEOUT),
    )
