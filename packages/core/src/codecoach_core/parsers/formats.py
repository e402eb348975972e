"""Transforms from specific tool outputs into Findings."""

from __future__ import annotations

import re
from typing import Any, Sequence

from codecoach_core.models import Finding, Severity
from codecoach_core.parsers.base import ParseContext, relative_source, to_int


def parse_eslint(payload: Any, context: ParseContext) -> Sequence[Finding]:
    """Parse ESLint ``--format json`` output."""
    items = payload if isinstance(payload, list) else []
    results: list[Finding] = []
    for entry in items:
        if not isinstance(entry, dict):
            continue
        source = relative_source(entry.get("filePath"), context)
        for message in entry.get("messages", []) or []:
            if not isinstance(message, dict):
                continue
            severity = {2: Severity.error, 1: Severity.warning}.get(message.get("severity"), Severity.ignore)
            results.append(
                Finding(
                    source=source,
                    line=to_int(message.get("line")),
                    column=to_int(message.get("column")),
                    severity=severity,
                    msg=str(message.get("message", "")).strip(),
                    rule_id=message.get("ruleId"),
                    tool="eslint",
                )
            )
    return results


def parse_pylint(payload: Any, context: ParseContext) -> Sequence[Finding]:
    """Parse Pylint ``--output-format=json`` output."""
    items = payload if isinstance(payload, list) else []
    results: list[Finding] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        sev = str(item.get("type", "")).lower()
        severity = {
            "fatal": Severity.error,
            "error": Severity.error,
            "warning": Severity.warning,
        }.get(sev, Severity.ignore)
        results.append(
            Finding(
                source=relative_source(item.get("path"), context),
                line=to_int(item.get("line")),
                column=to_int(item.get("column")),
                severity=severity,
                msg=str(item.get("message", "")).strip(),
                rule_id=item.get("symbol") or item.get("message-id"),
                tool="pylint",
            )
        )
    return results


_MYPY_PATTERN = re.compile(
    r"^(?P<file>[^:\n]+):(?P<line>\d+):(?:(?P<col>\d+):)?\s*"
    r"(?P<severity>error|warning|note):\s*(?P<message>.+?)(?:\s+\[(?P<code>[\w-]+)\])?$"
)


def parse_mypy(stdout: str, context: ParseContext) -> Sequence[Finding]:
    """Parse mypy's default text output; the trailing summary line is skipped."""
    results: list[Finding] = []
    for line in stdout.splitlines():
        match = _MYPY_PATTERN.match(line.strip())
        if not match:
            continue
        results.append(
            Finding(
                source=relative_source(match.group("file"), context),
                line=int(match.group("line")),
                column=to_int(match.group("col")),
                severity={"error": Severity.error, "warning": Severity.warning}.get(
                    match.group("severity"), Severity.ignore
                ),
                msg=match.group("message").strip(),
                rule_id=match.group("code"),
                tool="mypy",
            )
        )
    return results


_TSC_PATTERN = re.compile(
    r"^(?P<file>[^:(\n]+)\((?P<line>\d+),(?P<col>\d+)\):\s*"
    r"(?P<severity>error|warning)\s*(?P<code>TS\d+)?\s*:?\s*(?P<message>.+)$"
)


def parse_tsc(stdout: str, context: ParseContext) -> Sequence[Finding]:
    """Parse TypeScript compiler diagnostics (``--pretty false``)."""
    results: list[Finding] = []
    for line in stdout.splitlines():
        match = _TSC_PATTERN.match(line.strip())
        if not match:
            continue
        results.append(
            Finding(
                source=relative_source(match.group("file"), context),
                line=int(match.group("line")),
                column=int(match.group("col")),
                severity=Severity.error if match.group("severity") == "error" else Severity.warning,
                msg=match.group("message").strip(),
                rule_id=match.group("code"),
                tool="tsc",
            )
        )
    return results
