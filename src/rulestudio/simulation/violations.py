"""
Parsing of the lint tool's JSON reporter output into ``Violation`` values.
"""

import json
import logging
from pathlib import Path
from typing import Any

from rulestudio.core.errors import InvocationOutputMalformedError
from rulestudio.rules.models import Severity, Violation

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("rule_id", "reason", "severity", "file")


def parse_violations(output: str, workspace: Path | None = None) -> list[Violation]:
    """
    Map reporter records to violations, in output order.

    Records missing a required field are skipped. Output that is not a JSON
    array fails the whole call.

    Raises:
        InvocationOutputMalformedError: If the payload is not a JSON array.
    """
    if not output.strip():
        return []

    try:
        payload = json.loads(output)
    except json.JSONDecodeError as e:
        raise InvocationOutputMalformedError(f"not valid JSON ({e.msg} at line {e.lineno})") from e

    if not isinstance(payload, list):
        raise InvocationOutputMalformedError(f"expected a JSON array, got {type(payload).__name__}")

    violations = []
    skipped = 0
    for record in payload:
        violation = _to_violation(record, workspace)
        if violation is None:
            skipped += 1
            continue
        violations.append(violation)

    if skipped:
        logger.warning(f"Skipped {skipped} malformed violation record(s)")
    return violations


def _to_violation(record: Any, workspace: Path | None) -> Violation | None:
    if not isinstance(record, dict):
        return None
    if not all(isinstance(record.get(field), str) for field in REQUIRED_FIELDS):
        return None

    line = _as_int(record.get("line"))
    character = _as_int(record.get("character", record.get("column")))

    return Violation(
        rule_id=record["rule_id"],
        file_path=relative_to_workspace(record["file"], workspace),
        line=line if line and line > 0 else 1,
        column=character if character and character > 0 else None,
        severity=Severity.parse(record["severity"]),
        message=record["reason"],
    )


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    return None


def relative_to_workspace(file_path: str, workspace: Path | None) -> str:
    """Paths under the workspace become workspace-relative; others are kept."""
    if workspace is None:
        return file_path
    try:
        return str(Path(file_path).relative_to(Path(workspace)))
    except ValueError:
        return file_path
