"""Select the findings that belong on the review request.

Only errors and warnings on lines inside the request's diff are reported:
everything else was already there before the change and is not the author's
concern in this review.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, Sequence

from codecoach_core.models import DiffEntry, Finding, Severity

FindingPredicate = Callable[[Finding], bool]


def only_severity(*severities: Severity) -> FindingPredicate:
    allowed = set(severities)

    def predicate(finding: Finding) -> bool:
        return finding.severity in allowed

    return predicate


def only_in(diff: Sequence[DiffEntry]) -> FindingPredicate:
    """Return a predicate matching findings on a changed line of ``diff``."""
    by_file: dict[str, list[DiffEntry]] = {}
    for entry in diff:
        by_file.setdefault(entry.file, []).append(entry)

    def predicate(finding: Finding) -> bool:
        if finding.line is None:
            return False
        return any(entry.touches(finding.line) for entry in by_file.get(finding.source, []))

    return predicate


def filter_findings(findings: Iterable[Finding], diff: Sequence[DiffEntry]) -> list[Finding]:
    """Keep errors and warnings whose file and line fall inside the diff, in input order."""
    reportable = only_severity(Severity.error, Severity.warning)
    touched = only_in(diff)
    return [f for f in findings if reportable(f) and touched(f)]


def suppress_rules(findings: Iterable[Finding], patterns: Sequence[str]) -> list[Finding]:
    """Drop findings whose rule id fully matches any of ``patterns``."""
    if not patterns:
        return list(findings)
    compiled = [re.compile(p) for p in patterns]
    return [f for f in findings if not (f.rule_id and any(rx.fullmatch(f.rule_id) for rx in compiled))]
