"""Tests for the PyGithub-backed pull request service."""

from unittest.mock import MagicMock

from codecoach_core.models import CommitStatus, DiffEntry, ExistingComment, LineRange
from codecoach_core.vcs.github import GitHubPRService

SHA = "a" * 40


def _comment(comment_id, user_id):
    c = MagicMock()
    c.id = comment_id
    c.user.id = user_id
    return c


def _make_service():
    gh = MagicMock()
    repo = gh.get_repo.return_value
    pr = repo.get_pull.return_value
    pr.head.sha = SHA
    return GitHubPRService(gh, "owner/repo", 7), gh, repo, pr


class TestGitHubPRService:
    def test_looks_up_repo_and_pull(self):
        _, gh, repo, _ = _make_service()
        gh.get_repo.assert_called_once_with("owner/repo")
        repo.get_pull.assert_called_once_with(7)

    def test_revision_is_head_commit(self):
        service, _, repo, _ = _make_service()
        revision = service.get_latest_revision_id()
        repo.get_commit.assert_called_once_with(SHA)
        assert revision is repo.get_commit.return_value

    def test_diff_parses_patches(self):
        service, _, _, pr = _make_service()
        changed = MagicMock(filename="src/app.py", patch="@@ -1,2 +1,3 @@\n a\n+b\n c")
        binary = MagicMock(filename="logo.png", patch=None)
        pr.get_files.return_value = [changed, binary]

        assert service.get_diff() == [
            DiffEntry(file="src/app.py", patch=(LineRange(1, 3),)),
            DiffEntry(file="logo.png", patch=()),
        ]

    def test_summary_is_issue_comment(self):
        service, _, _, pr = _make_service()
        service.create_summary_comment("overview")
        pr.create_issue_comment.assert_called_once_with("overview")

    def test_inline_comment_on_right_side(self):
        service, _, _, pr = _make_service()
        commit = MagicMock()
        service.create_inline_comment(commit, "text", "src/app.py", 3)
        pr.create_review_comment.assert_called_once_with("text", commit, "src/app.py", line=3, side="RIGHT")

    def test_set_status_on_commit(self):
        service, _, _, _ = _make_service()
        commit = MagicMock()
        service.set_status(commit, CommitStatus.failure, "CodeCoach found 1 error(s)")
        commit.create_status.assert_called_once_with(
            state="failure", description="CodeCoach found 1 error(s)", context="codecoach"
        )

    def test_current_user_id(self):
        service, gh, _, _ = _make_service()
        gh.get_user.return_value.id = 42
        assert service.get_current_user_id() == 42

    def test_lists_comments_as_existing_comments(self):
        service, _, _, pr = _make_service()
        ghost = _comment(3, None)
        ghost.user = None
        pr.get_issue_comments.return_value = [_comment(1, 42), ghost]
        pr.get_review_comments.return_value = [_comment(2, 42)]

        assert service.list_top_level_comments() == [
            ExistingComment(id=1, author_id=42),
            ExistingComment(id=3, author_id=None),
        ]
        assert service.list_inline_comments() == [ExistingComment(id=2, author_id=42)]

    def test_delete_uses_listed_comment(self):
        service, _, _, pr = _make_service()
        issue_comment = _comment(1, 42)
        review_comment = _comment(2, 42)
        pr.get_issue_comments.return_value = [issue_comment]
        pr.get_review_comments.return_value = [review_comment]
        service.list_top_level_comments()
        service.list_inline_comments()

        service.delete_top_level_comment(1)
        service.delete_inline_comment(2)

        issue_comment.delete.assert_called_once()
        review_comment.delete.assert_called_once()
        pr.get_issue_comment.assert_not_called()
        pr.get_review_comment.assert_not_called()

    def test_delete_fetches_unlisted_comment(self):
        service, _, _, pr = _make_service()
        service.delete_top_level_comment(5)
        pr.get_issue_comment.assert_called_once_with(5)
        pr.get_issue_comment.return_value.delete.assert_called_once()
