from __future__ import annotations

import re

from codecoach_core.models import LineRange

_HUNK_HEADER_RE = re.compile(r"^@@ -\d+(?:,\d+)? \+(\d+)(?:,(\d+))? @@")


def parse_patch(patch_text: str | None) -> tuple[LineRange, ...]:
    """
    Return the new-file line ranges covered by each hunk of a unified patch.

    Only the ``@@ -a,b +c,d @@`` headers are read: a hunk covers new-file lines
    c..c+d-1, context lines included, which is exactly the set of lines both
    GitHub and GitLab accept inline comments on (GitLab also wants the old
    number of a context line, see ``map_context_lines``). A missing length
    means one line; a zero length is a pure deletion and covers nothing.
    """
    ranges: list[LineRange] = []
    for line in (patch_text or "").splitlines():
        match = _HUNK_HEADER_RE.match(line)
        if not match:
            continue
        start = int(match.group(1))
        length = int(match.group(2)) if match.group(2) is not None else 1
        if length == 0:
            continue
        ranges.append(LineRange(start, start + length - 1))
    return tuple(ranges)


_HUNK_STARTS_RE = re.compile(r"^@@ -(\d+)(?:,\d+)? \+(\d+)(?:,\d+)? @@")


def map_context_lines(patch_text: str | None) -> dict[int, int]:
    """
    Map each unchanged (context) line of a unified patch from its new-file
    number to its old-file number.

    Added lines are absent from the map. GitLab anchors a comment on a context
    line only when it is given both numbers.
    """
    context: dict[int, int] = {}
    old = new = 0
    in_hunk = False
    for line in (patch_text or "").splitlines():
        match = _HUNK_STARTS_RE.match(line)
        if match:
            old, new = int(match.group(1)), int(match.group(2))
            in_hunk = True
            continue
        if not in_hunk or line.startswith("\\"):
            # "\ No newline at end of file"
            continue
        if line.startswith("+"):
            new += 1
        elif line.startswith("-"):
            old += 1
        else:
            context[new] = old
            old += 1
            new += 1
    return context
