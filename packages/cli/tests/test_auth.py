"""Tests for platform token lookup."""

import subprocess
from unittest.mock import MagicMock

from codecoach_cli.auth import resolve_github_token, resolve_gitlab_token


class TestResolveGithubToken:
    def test_configured_token_wins(self, mocker):
        run = mocker.patch("codecoach_cli.auth.subprocess.run")
        assert resolve_github_token({"github_token": "cfg-tok"}) == "cfg-tok"
        run.assert_not_called()

    def test_does_not_read_environment_itself(self, monkeypatch, mocker):
        monkeypatch.setenv("GITHUB_TOKEN", "env-tok")
        mocker.patch("codecoach_cli.auth.subprocess.run", return_value=MagicMock(returncode=1, stdout=""))
        assert resolve_github_token({"github_token": None}) is None

    def test_falls_back_to_gh_cli(self, mocker):
        run = mocker.patch(
            "codecoach_cli.auth.subprocess.run",
            return_value=MagicMock(returncode=0, stdout="gh-tok\n"),
        )
        assert resolve_github_token({"github_token": None}) == "gh-tok"
        assert run.call_args.args[0] == ["gh", "auth", "token"]

    def test_gh_not_logged_in(self, mocker):
        mocker.patch("codecoach_cli.auth.subprocess.run", return_value=MagicMock(returncode=1, stdout=""))
        assert resolve_github_token({}) is None

    def test_gh_prints_nothing(self, mocker):
        mocker.patch("codecoach_cli.auth.subprocess.run", return_value=MagicMock(returncode=0, stdout="\n"))
        assert resolve_github_token({}) is None

    def test_gh_not_installed(self, mocker):
        mocker.patch("codecoach_cli.auth.subprocess.run", side_effect=FileNotFoundError)
        assert resolve_github_token({}) is None

    def test_gh_timeout(self, mocker):
        mocker.patch("codecoach_cli.auth.subprocess.run", side_effect=subprocess.TimeoutExpired("gh", 5))
        assert resolve_github_token({}) is None


class TestResolveGitlabToken:
    def test_configured_token(self):
        assert resolve_gitlab_token({"gitlab_token": "gl-tok"}) == "gl-tok"

    def test_empty_token_is_none(self):
        assert resolve_gitlab_token({"gitlab_token": ""}) is None
        assert resolve_gitlab_token({}) is None
