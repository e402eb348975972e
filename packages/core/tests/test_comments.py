"""Tests for grouping findings into one comment per file and line."""

from codecoach_core.comments import group_comments
from codecoach_core.models import Finding, Severity


def finding(source="a.py", line=1, severity=Severity.error, msg="issue"):
    return Finding(source=source, line=line, severity=severity, msg=msg)


def test_groups_by_file_and_line():
    groups = group_comments(
        [
            finding(line=1, msg="one"),
            finding(line=2, msg="two"),
            finding(line=1, severity=Severity.warning, msg="three"),
            finding(source="b.py", line=1, msg="four"),
        ]
    )
    assert [(g.file, g.line) for g in groups] == [("a.py", 1), ("a.py", 2), ("b.py", 1)]
    assert (groups[0].errors, groups[0].warnings) == (1, 1)


def test_message_order_is_first_seen():
    groups = group_comments([finding(msg="first"), finding(severity=Severity.warning, msg="second")])
    assert groups[0].text == ":rotating_light: first  \n:warning: second"


def test_counts_do_not_depend_on_order():
    items = [
        finding(msg="e1"),
        finding(severity=Severity.warning, msg="w1"),
        finding(msg="e2"),
    ]
    forward = group_comments(items)[0]
    backward = group_comments(list(reversed(items)))[0]
    assert (forward.errors, forward.warnings) == (backward.errors, backward.warnings) == (2, 1)
    assert backward.messages[0].endswith("e2")


def test_every_group_has_at_least_one_finding():
    groups = group_comments([finding(severity=Severity.ignore), finding(line=2, severity=Severity.warning)])
    assert [(g.line, g.errors + g.warnings) for g in groups] == [(2, 1)]


def test_empty_input():
    assert group_comments([]) == []
