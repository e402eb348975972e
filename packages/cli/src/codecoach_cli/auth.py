"""Credential lookup for the platform services.

GitHub: the ``github_token`` already resolved by load_config (GITHUB_TOKEN or
``.codecoach.yml``), then the gh CLI session left by ``gh auth login``.
GitLab: only ``gitlab_token``; there is no CLI session to fall back to.
"""

from __future__ import annotations

import logging
import subprocess

logger = logging.getLogger(__name__)


def _gh_cli_token() -> str | None:
    try:
        result = subprocess.run(["gh", "auth", "token"], capture_output=True, text=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def resolve_github_token(config: dict) -> str | None:
    """Return the GitHub token for this run, or None when there is none.

    Never raises; the caller turns None into a UsageError.
    """
    if config.get("github_token"):
        return config["github_token"]
    token = _gh_cli_token()
    if token:
        logger.debug("Using the GitHub token of the gh CLI session.")
    return token


def resolve_gitlab_token(config: dict) -> str | None:
    return config.get("gitlab_token") or None
