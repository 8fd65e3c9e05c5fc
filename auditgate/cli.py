"""CLI entry point: auditgate.

Subcommands:
    auditgate check                              # run npm audit and gate on the allowlist
    auditgate check --report audit.json --json   # analyze a saved report, print JSON
    auditgate validate-allowlist                 # validate .audit-allowlist.json only
"""

from __future__ import annotations

import json
import sys
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

import click
import structlog
from dotenv import load_dotenv

from auditgate.core.config import Settings, load_settings
from auditgate.core.logging import LOG_FORMATS, setup_logging
from auditgate.engines.audit_filter import (
    AuditFilterError,
    analyze_audit_report,
    parse_allowlist,
)
from auditgate.engines.audit_filter.dates import is_expired, will_expire_soon
from auditgate.report import log_results, print_report
from auditgate.scanner import ScannerError, run_audit

log = structlog.get_logger("auditgate.cli")


def _read_allowlist(path: Path) -> str | None:
    """Return the allowlist text, or None when the file does not exist."""
    if not path.is_file():
        log.info("audit.allowlist_not_found", allowlist_path=str(path))
        return None
    content = path.read_text(encoding="utf-8")
    log.info("audit.allowlist_loaded", allowlist_path=str(path), content_size=len(content))
    return content


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMATS),
    default=None,
    help="Log rendering on stderr (default: $AUDITGATE_LOG_FORMAT or console)",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, log_format: str | None) -> None:
    """auditgate: fail the build on unreviewed high/critical npm advisories."""
    load_dotenv()
    try:
        setup_logging("DEBUG" if verbose else None, log_format)
        ctx.obj = load_settings()
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e


@main.command("check")
@click.option(
    "--report",
    "report_path",
    type=click.Path(dir_okay=False, allow_dash=True),
    default=None,
    help="Saved `npm audit --json` output ('-' for stdin). Runs the audit command if omitted.",
)
@click.option("--allowlist", "allowlist_path", default=None, help="Allowlist file path")
@click.option(
    "--expiry-warning-days",
    type=click.IntRange(min=0),
    default=None,
    help="Warn about allowlist entries expiring within this many days",
)
@click.option("--cwd", type=click.Path(file_okay=False, exists=True), default=None,
              help="Directory to run the audit command in")
@click.option("--json", "as_json", is_flag=True, help="Print the analysis result as JSON")
@click.option("--strict-format", is_flag=True, help="Fail on unrecognized report formats")
@click.pass_obj
def check(
    settings: Settings,
    report_path: str | None,
    allowlist_path: str | None,
    expiry_warning_days: int | None,
    cwd: str | None,
    as_json: bool,
    strict_format: bool,
) -> None:
    """Analyze npm audit output against the allowlist; exit 1 on failure."""
    if allowlist_path is not None:
        settings = replace(settings, allowlist_path=allowlist_path)
    if expiry_warning_days is not None:
        settings = replace(settings, expiry_warning_days=expiry_warning_days)

    now = datetime.now(timezone.utc)
    allowlist_file = Path(settings.allowlist_path)

    try:
        allowlist_json = _read_allowlist(allowlist_file)
        if allowlist_json is None and not as_json:
            click.echo(
                "Allowlist file not found. All high/critical vulnerabilities will fail the audit."
            )

        if report_path is not None:
            with click.open_file(report_path, encoding="utf-8") as fh:
                report_json = fh.read()
        else:
            if not as_json:
                click.echo("🔒 Running npm audit with allowlist filtering...")
            report_json = run_audit(
                settings.audit_command,
                cwd=Path(cwd) if cwd else None,
                timeout=settings.audit_timeout,
            )

        result = analyze_audit_report(
            report_json,
            allowlist_json,
            now,
            expiring_within_days=settings.expiry_warning_days,
            strict_format=strict_format,
        )
    except (AuditFilterError, ScannerError, OSError, UnicodeDecodeError) as e:
        log.error("audit.aborted", error_type=type(e).__name__)
        click.echo(f"Error analyzing audit results: {e}", err=True)
        sys.exit(1)

    log_results(result, settings.expiry_warning_days)
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        print_report(result, settings.expiry_warning_days, allowlist_file.name)

    sys.exit(0 if result.is_successful else 1)


@main.command("validate-allowlist")
@click.argument("path", required=False, type=click.Path(dir_okay=False))
@click.pass_obj
def validate_allowlist(settings: Settings, path: str | None) -> None:
    """Validate an allowlist file without running the audit."""
    allowlist_file = Path(path or settings.allowlist_path)
    try:
        entries = parse_allowlist(allowlist_file.read_text(encoding="utf-8"))
    except (AuditFilterError, OSError, UnicodeDecodeError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    now = datetime.now(timezone.utc)
    click.echo(f"{allowlist_file.name}: {len(entries)} valid entries")
    for entry in entries:
        if is_expired(entry.expires, now):
            click.echo(f"  expired:  {entry.package}@{entry.id} (expired {entry.expires})")
        elif will_expire_soon(entry.expires, now, settings.expiry_warning_days):
            click.echo(f"  expiring: {entry.package}@{entry.id} (expires {entry.expires})")


if __name__ == "__main__":
    main()
