"""Report findings onto a pull/merge request.

One report() call runs four steps in order:

    identify   → latest revision + diff from the platform
    correlate  → filter findings to the diff, group per (file, line), count
    clean      → (optional) delete every comment codecoach posted before
    publish    → inline comments, one summary comment, commit status

The reporter holds no per-run state: counts travel from correlate to publish
as a Correlation value, so one Reporter can serve several runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from codecoach_core.comments import group_comments
from codecoach_core.filters import filter_findings
from codecoach_core.messages import commit_description, overview_message
from codecoach_core.models import CommentGroup, CommitStatus, ExistingComment, Finding
from codecoach_core.utils.fanout import run_all
from codecoach_core.vcs.base import PlatformService

logger = logging.getLogger(__name__)


@dataclass
class Correlation:
    """What a run is about to post: the groups, their totals and the anchor revision."""

    revision: Any
    comments: list[CommentGroup] = field(default_factory=list)
    n_error: int = 0
    n_warning: int = 0

    @property
    def passed(self) -> bool:
        return self.n_error == 0


class Reporter:
    def __init__(self, service: PlatformService, remove_old_comments: bool = False):
        self.service = service
        self.remove_old_comments = remove_old_comments

    def report(self, findings: Iterable[Finding]) -> bool:
        """Post findings to the request and return True when no error was reported."""
        try:
            correlation = self.preview(findings)

            if self.remove_old_comments:
                self._remove_existing_comments()

            run_all([lambda c=c: self._create_inline_comment(correlation.revision, c) for c in correlation.comments])
            self._create_summary_comment(correlation)
            self._set_status(correlation)

            logger.info("Report completed: %d error(s), %d warning(s)", correlation.n_error, correlation.n_warning)
        except Exception as e:
            logger.error("%s report failed: %s", type(self.service).__name__, e)
            raise

        return correlation.passed

    def preview(self, findings: Iterable[Finding]) -> Correlation:
        """Fetch the revision and diff, then correlate findings without posting anything."""
        revision = self.service.get_latest_revision_id()
        diff = self.service.get_diff()

        comments = group_comments(filter_findings(findings, diff))
        correlation = Correlation(
            revision=revision,
            comments=comments,
            n_error=sum(c.errors for c in comments),
            n_warning=sum(c.warnings for c in comments),
        )
        logger.debug(
            "Correlated %d comment(s) over %d changed file(s): %d error(s), %d warning(s)",
            len(comments),
            len(diff),
            correlation.n_error,
            correlation.n_warning,
        )
        return correlation

    def _create_inline_comment(self, revision: Any, comment: CommentGroup) -> CommentGroup:
        self.service.create_inline_comment(revision, comment.text, comment.file, comment.line)
        logger.debug("Created inline comment on %s:%d", comment.file, comment.line)
        return comment

    def _create_summary_comment(self, correlation: Correlation) -> None:
        if correlation.n_error + correlation.n_warning > 0:
            self.service.create_summary_comment(overview_message(correlation.n_error, correlation.n_warning))
            logger.info("Created summary comment")
        else:
            logger.info("No summary comment needed")

    def _set_status(self, correlation: Correlation) -> None:
        status = CommitStatus.success if correlation.passed else CommitStatus.failure
        self.service.set_status(correlation.revision, status, commit_description(correlation.n_error))
        logger.debug("Set commit status: %s", status.value)

    def _remove_existing_comments(self) -> None:
        user_id, comments, reviews = run_all(
            [
                self.service.get_current_user_id,
                self.service.list_top_level_comments,
                self.service.list_inline_comments,
            ]
        )
        logger.debug("Fetched %d comment(s) and %d inline comment(s)", len(comments), len(reviews))

        deletions = [
            lambda c=c: self.service.delete_top_level_comment(c.id) for c in comments if _is_own(c, user_id)
        ] + [lambda r=r: self.service.delete_inline_comment(r.id) for r in reviews if _is_own(r, user_id)]

        run_all(deletions)
        logger.debug("Deleted %d previous codecoach comment(s)", len(deletions))


def _is_own(comment: ExistingComment, user_id: int) -> bool:
    return not comment.system and comment.author_id == user_id
