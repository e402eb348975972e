"""Data models shared by parsers, the filter/grouper pipeline and the VCS services.

Everything here is scoped to a single report run. Parsers produce
Findings, platform services produce DiffEntries and ExistingComments, and the
grouper turns filtered Findings into CommentGroups, one per posted inline comment.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    error = "error"
    warning = "warning"
    ignore = "ignore"  # never reported


class CommitStatus(str, Enum):
    success = "success"
    failure = "failure"


@dataclass(frozen=True)
class Finding:
    """A single issue reported by a linter, type checker or compiler.

    ``source`` is relative to the repository root so it compares equal to the
    file paths the platform returns in the diff. ``line`` is None for issues the
    tool reports against a whole file; those never match a diff line.
    """

    source: str
    line: int | None
    severity: Severity
    msg: str
    rule_id: str | None = None
    column: int | None = None
    tool: str | None = None

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "line": self.line,
            "severity": self.severity.value,
            "msg": self.msg,
            "rule_id": self.rule_id,
            "column": self.column,
            "tool": self.tool,
        }


@dataclass(frozen=True)
class LineRange:
    """Inclusive range of new-file line numbers covered by one diff hunk."""

    start: int
    end: int

    def __contains__(self, line: int) -> bool:
        return self.start <= line <= self.end


@dataclass(frozen=True)
class DiffEntry:
    file: str
    patch: tuple[LineRange, ...] = ()

    def touches(self, line: int) -> bool:
        return any(line in r for r in self.patch)


@dataclass
class CommentGroup:
    """All findings on one (file, line), rendered as a single inline comment."""

    file: str
    line: int
    errors: int = 0
    warnings: int = 0
    messages: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        # Two trailing spaces force a markdown line break on both platforms.
        return "  \n".join(self.messages)


@dataclass(frozen=True)
class ExistingComment:
    """A comment already on the request, as returned by a platform service."""

    id: int
    author_id: int | None
    system: bool = False
