from __future__ import annotations

from github import Github

from codecoach_core.models import CommitStatus, DiffEntry, ExistingComment
from codecoach_core.utils.diff import parse_patch
from codecoach_core.vcs.base import PlatformService

STATUS_CONTEXT = "codecoach"


class GitHubPRService(PlatformService):
    """PlatformService for one GitHub pull request, backed by PyGithub.

    The revision handed to the reporter is the PR head ``Commit`` object, so
    inline comments and the commit status land on the same SHA without a
    second lookup. Listed comments are kept by id so deleting them does not
    re-fetch each one.
    """

    def __init__(self, gh: Github, repo_name: str, pr_number: int):
        self._gh = gh
        self._repo = gh.get_repo(repo_name)
        self._pr = self._repo.get_pull(pr_number)
        self._issue_comments: dict[int, object] = {}
        self._review_comments: dict[int, object] = {}

    @classmethod
    def from_token(cls, repo_name: str, pr_number: int, token: str) -> GitHubPRService:
        return cls(Github(token), repo_name, pr_number)

    def get_latest_revision_id(self):
        return self._repo.get_commit(self._pr.head.sha)

    def get_diff(self) -> list[DiffEntry]:
        return [DiffEntry(file=f.filename, patch=parse_patch(f.patch)) for f in self._pr.get_files()]

    def create_summary_comment(self, text: str) -> None:
        self._pr.create_issue_comment(text)

    def create_inline_comment(self, revision, text: str, file: str, line: int) -> None:
        self._pr.create_review_comment(text, revision, file, line=line, side="RIGHT")

    def set_status(self, revision, status: CommitStatus, description: str) -> None:
        revision.create_status(state=status.value, description=description, context=STATUS_CONTEXT)

    def get_current_user_id(self) -> int:
        return self._gh.get_user().id

    def list_top_level_comments(self) -> list[ExistingComment]:
        self._issue_comments = {c.id: c for c in self._pr.get_issue_comments()}
        return [_to_existing(c) for c in self._issue_comments.values()]

    def list_inline_comments(self) -> list[ExistingComment]:
        self._review_comments = {c.id: c for c in self._pr.get_review_comments()}
        return [_to_existing(c) for c in self._review_comments.values()]

    def delete_top_level_comment(self, comment_id: int) -> None:
        comment = self._issue_comments.get(comment_id) or self._pr.get_issue_comment(comment_id)
        comment.delete()

    def delete_inline_comment(self, comment_id: int) -> None:
        comment = self._review_comments.get(comment_id) or self._pr.get_review_comment(comment_id)
        comment.delete()


def _to_existing(comment) -> ExistingComment:
    # user is None for comments left by accounts that have since been deleted
    author_id = comment.user.id if comment.user is not None else None
    return ExistingComment(id=comment.id, author_id=author_id)
