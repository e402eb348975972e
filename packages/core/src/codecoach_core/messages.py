"""Comment and status text posted to the pull/merge request."""

from __future__ import annotations

from codecoach_core.models import Severity

_SEVERITY_EMOJI = {
    Severity.error: ":rotating_light:",
    Severity.warning: ":warning:",
}


def finding_message(msg: str, severity: Severity) -> str:
    """Prefix a finding's message with the marker for its severity."""
    emoji = _SEVERITY_EMOJI.get(severity)
    return f"{emoji} {msg}" if emoji else msg


def overview_message(n_error: int, n_warning: int) -> str:
    """Build the summary comment body posted once per report."""
    total = n_error + n_warning
    if n_error:
        verdict = f"{n_error} error(s) must be fixed before merging."
    else:
        verdict = "No blocking errors, but please have a look at the warnings."

    lines = [
        "## CodeCoach reports",
        "",
        f"> {verdict}",
        "",
        "| Severity | Count |",
        "|----------|:-----:|",
        f"| :rotating_light: Error | {n_error} |",
        f"| :warning: Warning | {n_warning} |",
        f"| **Total** | **{total}** |",
    ]
    return "\n".join(lines)


def commit_description(n_error: int) -> str:
    if n_error > 0:
        return f"CodeCoach found {n_error} error(s)"
    return "CodeCoach found no critical issue, good job!"
