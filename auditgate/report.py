"""Result reporting: human console report and sanitized structured logs.

The two surfaces follow different disclosure rules: log events carry only
package, advisory id and severity, while titles, URLs, allowlist reasons and
expiry dates are reserved for the console report.
"""

from __future__ import annotations

from typing import Any

import click
import structlog

from auditgate.engines.audit_filter.models import AnalysisResult, ClassifiedVulnerability

log = structlog.get_logger("auditgate.report")


def sanitize(vuln: ClassifiedVulnerability) -> dict[str, Any]:
    """Minimal identifiers safe for the log channel."""
    return {"package": vuln.package, "id": vuln.id, "severity": vuln.severity}


def log_results(result: AnalysisResult, expiry_warning_days: int) -> None:
    """Emit the sanitized summary of *result* to the structured log."""
    if result.is_successful:
        log.info(
            "audit.passed",
            allowed_count=len(result.allowed_vulnerabilities),
            expiring_count=len(result.expiring_entries),
        )
        if result.allowed_vulnerabilities:
            log.info(
                "audit.allowlisted_vulnerabilities",
                vulnerabilities=[sanitize(v) for v in result.allowed_vulnerabilities],
            )
        if result.expiring_entries:
            log.warning(
                "audit.allowlist_expiring",
                within_days=expiry_warning_days,
                entries=[sanitize(v) for v in result.expiring_entries],
            )
        return

    log.error(
        "audit.failed",
        new_count=len(result.vulnerabilities),
        expired_count=len(result.expired_allowlist_entries),
    )
    if result.vulnerabilities:
        log.error(
            "audit.new_vulnerabilities",
            vulnerabilities=[sanitize(v) for v in result.vulnerabilities],
        )
    if result.expired_allowlist_entries:
        log.error(
            "audit.allowlist_expired",
            entries=[sanitize(v) for v in result.expired_allowlist_entries],
        )


def print_report(result: AnalysisResult, expiry_warning_days: int, allowlist_name: str) -> None:
    """Render the human-facing report to the console."""
    if result.is_successful:
        click.echo("✅ Security scan passed!")

        if result.allowed_vulnerabilities:
            click.echo(f"\n{len(result.allowed_vulnerabilities)} allowlisted vulnerabilities found:")
            for v in result.allowed_vulnerabilities:
                click.echo(f"  - {v.package}@{v.id} ({v.severity}): {v.title}")
                click.echo(f"    Reason: {v.reason}")
                if v.expires_on:
                    click.echo(f"    Expires: {v.expires_on}")

        if result.expiring_entries:
            click.echo(
                f"\n⚠️  Warning: the following allowlist entries expire within "
                f"{expiry_warning_days} days:"
            )
            for v in result.expiring_entries:
                click.echo(f"  - {v.package}@{v.id} expires on {v.expires_on}")
        return

    click.echo("❌ Security scan failed!", err=True)

    if result.vulnerabilities:
        click.echo(
            f"\nFound {len(result.vulnerabilities)} non-allowlisted high/critical vulnerabilities:",
            err=True,
        )
        for v in result.vulnerabilities:
            click.echo(f"  - {v.package}@{v.id} ({v.severity}): {v.title}", err=True)
            click.echo(f"    URL: {v.url}", err=True)

    if result.expired_allowlist_entries:
        click.echo(
            f"\n{len(result.expired_allowlist_entries)} allowlist entries have expired:",
            err=True,
        )
        for v in result.expired_allowlist_entries:
            click.echo(f"  - {v.package}@{v.id} ({v.severity}): {v.title}", err=True)
            click.echo(f"    Reason was: {v.reason}", err=True)
            click.echo(f"    Expired on: {v.expires_on}", err=True)

    click.echo("\nTo fix this issue:", err=True)
    click.echo("1. Update dependencies to resolve vulnerabilities", err=True)
    click.echo(f"2. Or add entries to {allowlist_name} with proper justification", err=True)
