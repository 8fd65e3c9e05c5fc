"""Run the package manager's audit command and capture its JSON output."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

import structlog

log = structlog.get_logger("auditgate.scanner")


class ScannerError(Exception):
    """Raised when the audit command cannot be run or produces no output."""


def run_audit(
    command: Sequence[str],
    *,
    cwd: Path | None = None,
    timeout: float | None = None,
) -> str:
    """Execute *command* and return its stdout.

    ``npm audit`` exits non-zero whenever it finds vulnerabilities, so a
    non-zero exit is only an error when stdout is empty.
    """
    log.debug("scanner.run", command=list(command), cwd=str(cwd) if cwd else None)
    try:
        proc = subprocess.run(
            list(command),
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as exc:
        raise ScannerError(f"audit command not found: {command[0]}") from exc
    except subprocess.TimeoutExpired as exc:
        raise ScannerError(f"audit command timed out after {timeout}s") from exc

    output = proc.stdout or ""
    if not output.strip():
        stderr = (proc.stderr or "").strip()
        raise ScannerError(
            f"audit command produced no output (exit {proc.returncode}): {stderr}"
        )

    log.debug("scanner.completed", exit_code=proc.returncode, output_length=len(output))
    return output
