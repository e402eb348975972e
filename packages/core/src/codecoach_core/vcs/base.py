"""Platform service interface.

The reporter talks to GitHub and GitLab only through this capability set. Each
concrete service wraps the platform's client (PyGithub, a requests session) and
translates platform records into codecoach models; authentication, pagination
and wire formats stay inside the service.

Every method should raise on failure. The reporter logs and propagates, it
never retries.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from codecoach_core.models import CommitStatus, DiffEntry, ExistingComment


class PlatformService(ABC):
    """Operations on one pull/merge request."""

    @abstractmethod
    def get_latest_revision_id(self) -> Any:
        """Return the revision inline comments and the status are anchored to.

        Opaque to the reporter: a commit SHA on GitHub, a diff version on GitLab.
        """

    @abstractmethod
    def get_diff(self) -> list[DiffEntry]:
        """Return the changed files of the request with their hunk line ranges."""

    @abstractmethod
    def create_summary_comment(self, text: str) -> None: ...

    @abstractmethod
    def create_inline_comment(self, revision: Any, text: str, file: str, line: int) -> None: ...

    @abstractmethod
    def set_status(self, revision: Any, status: CommitStatus, description: str) -> None: ...

    @abstractmethod
    def get_current_user_id(self) -> int:
        """Return the id of the account codecoach posts as."""

    @abstractmethod
    def list_top_level_comments(self) -> list[ExistingComment]: ...

    @abstractmethod
    def list_inline_comments(self) -> list[ExistingComment]: ...

    @abstractmethod
    def delete_top_level_comment(self, comment_id: int) -> None: ...

    @abstractmethod
    def delete_inline_comment(self, comment_id: int) -> None: ...
