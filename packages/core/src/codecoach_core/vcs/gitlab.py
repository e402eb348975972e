from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import requests

from codecoach_core.models import CommitStatus, DiffEntry, ExistingComment
from codecoach_core.utils.diff import map_context_lines, parse_patch
from codecoach_core.vcs.base import PlatformService

STATUS_NAME = "codecoach"
PER_PAGE = 100

# GitLab spells the failing commit state differently from GitHub.
_STATE = {CommitStatus.success: "success", CommitStatus.failure: "failed"}


class GitLabError(RuntimeError):
    def __init__(self, status_code: int, body: str):
        super().__init__(f"GitLab API error {status_code}: {body}")
        self.status_code = status_code
        self.body = body


@dataclass(frozen=True)
class MergeRequestVersion:
    """One diff version of a merge request, the anchor for discussions."""

    id: int
    base_sha: str
    start_sha: str
    head_sha: str


class GitLabMRService(PlatformService):
    """PlatformService for one GitLab merge request over the REST v4 API.

    Inline comments are discussions with a text position; they come back from
    the notes endpoint as notes of type ``DiffNote``. System notes (pushes,
    label changes) are listed with ``system=True`` so the reporter never
    deletes them.

    The diff is read from the latest MR version, the one discussions are
    anchored to, and the service remembers the old line number of each
    unchanged line so a comment on a context line carries both sides.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        project_id: str,
        mr_iid: int,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._project = quote(str(project_id), safe="")
        self._mr_iid = mr_iid
        self.session = session or requests.Session()
        self.session.headers.update({"PRIVATE-TOKEN": token})
        self._latest: MergeRequestVersion | None = None
        # new line -> old line of every unchanged line in the diff, per file
        self._context_lines: dict[str, dict[int, int]] = {}
        self._old_paths: dict[str, str] = {}

    def _send(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f"{self.base_url}/api/v4{path}"
        response = self.session.request(method, url, **kwargs)
        if not response.ok:
            raise GitLabError(response.status_code, response.text)
        return response

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self._send(method, path, **kwargs)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def _get_all(self, path: str) -> list[dict]:
        """GET every page of a list endpoint, following ``X-Next-Page``."""
        items: list[dict] = []
        page = "1"
        while page:
            response = self._send("GET", path, params={"per_page": PER_PAGE, "page": page})
            items.extend(response.json() or [])
            page = response.headers.get("X-Next-Page", "")
        return items

    @property
    def _mr_path(self) -> str:
        return f"/projects/{self._project}/merge_requests/{self._mr_iid}"

    def get_latest_revision_id(self) -> MergeRequestVersion:
        versions = self._request("GET", f"{self._mr_path}/versions")
        if not versions:
            raise GitLabError(404, f"merge request !{self._mr_iid} has no diff versions")
        latest = versions[0]
        self._latest = MergeRequestVersion(
            id=latest["id"],
            base_sha=latest["base_commit_sha"],
            start_sha=latest["start_commit_sha"],
            head_sha=latest["head_commit_sha"],
        )
        return self._latest

    def get_diff(self) -> list[DiffEntry]:
        # Read the diff of the same version comments are anchored to.
        version = self._latest or self.get_latest_revision_id()
        detail = self._request("GET", f"{self._mr_path}/versions/{version.id}") or {}
        entries = []
        for change in detail.get("diffs", []):
            if change.get("deleted_file"):
                continue
            path = change["new_path"]
            self._context_lines[path] = map_context_lines(change.get("diff"))
            self._old_paths[path] = change.get("old_path") or path
            entries.append(DiffEntry(file=path, patch=parse_patch(change.get("diff"))))
        return entries

    def create_summary_comment(self, text: str) -> None:
        self._request("POST", f"{self._mr_path}/notes", json={"body": text})

    def create_inline_comment(self, revision: MergeRequestVersion, text: str, file: str, line: int) -> None:
        position = {
            "position_type": "text",
            "base_sha": revision.base_sha,
            "start_sha": revision.start_sha,
            "head_sha": revision.head_sha,
            "new_path": file,
            "new_line": line,
        }
        old_line = self._context_lines.get(file, {}).get(line)
        if old_line is not None:
            # unchanged lines are only accepted with both sides given
            position["old_path"] = self._old_paths.get(file, file)
            position["old_line"] = old_line
        self._request("POST", f"{self._mr_path}/discussions", json={"body": text, "position": position})

    def set_status(self, revision: MergeRequestVersion, status: CommitStatus, description: str) -> None:
        payload = {"state": _STATE[status], "name": STATUS_NAME, "description": description}
        self._request("POST", f"/projects/{self._project}/statuses/{revision.head_sha}", json=payload)

    def get_current_user_id(self) -> int:
        return self._request("GET", "/user")["id"]

    def _list_notes(self) -> list[dict]:
        return self._get_all(f"{self._mr_path}/notes")

    def list_top_level_comments(self) -> list[ExistingComment]:
        return [_to_existing(n) for n in self._list_notes() if n.get("type") != "DiffNote"]

    def list_inline_comments(self) -> list[ExistingComment]:
        return [_to_existing(n) for n in self._list_notes() if n.get("type") == "DiffNote"]

    def delete_top_level_comment(self, comment_id: int) -> None:
        self._request("DELETE", f"{self._mr_path}/notes/{comment_id}")

    def delete_inline_comment(self, comment_id: int) -> None:
        # Discussion notes are deleted through the same notes endpoint.
        self._request("DELETE", f"{self._mr_path}/notes/{comment_id}")


def _to_existing(note: dict) -> ExistingComment:
    author = note.get("author") or {}
    return ExistingComment(id=note["id"], author_id=author.get("id"), system=bool(note.get("system")))
