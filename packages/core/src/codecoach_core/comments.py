from __future__ import annotations

from typing import Iterable

from codecoach_core.messages import finding_message
from codecoach_core.models import CommentGroup, Finding, Severity


def group_comments(findings: Iterable[Finding]) -> list[CommentGroup]:
    """Merge findings sharing a (file, line) into one CommentGroup each.

    Groups come out in the order their location first appears, and each
    group's messages keep the order the findings were given in.
    """
    groups: dict[tuple[str, int], CommentGroup] = {}
    for finding in findings:
        if finding.severity not in (Severity.error, Severity.warning):
            continue
        # Callers filter against the diff first, so line is always set here.
        key = (finding.source, finding.line)
        group = groups.get(key)
        if group is None:
            group = groups[key] = CommentGroup(file=finding.source, line=finding.line)

        if finding.severity == Severity.error:
            group.errors += 1
        else:
            group.warnings += 1
        group.messages.append(finding_message(finding.msg, finding.severity))

    return list(groups.values())
