"""report command — parse build logs and report findings onto a pull/merge request."""

from __future__ import annotations

import json

import click
from rich.console import Console

from codecoach_core.filters import suppress_rules
from codecoach_core.models import Finding
from codecoach_core.parsers import parse_build_log
from codecoach_core.reporter import Correlation, Reporter
from codecoach_core.vcs.github import GitHubPRService
from codecoach_core.vcs.gitlab import GitLabMRService

console = Console()


def _load_findings(config: dict) -> list[Finding]:
    findings: list[Finding] = []
    for spec in config["build_logs"]:
        try:
            findings.extend(parse_build_log(spec))
        except (ValueError, FileNotFoundError) as e:
            raise click.UsageError(str(e))
    return suppress_rules(findings, config["suppress_rules"])


def _write_output(findings: list[Finding], output_path: str) -> None:
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump([finding.to_dict() for finding in findings], f, indent=2)
    console.print(f"[dim]Wrote {len(findings)} finding(s) to {output_path}[/dim]")


def _build_service(config: dict):
    """Instantiate the platform service for the configured VCS.

    Validates that every setting the chosen platform needs is present before
    any network call is made.
    """
    from codecoach_cli.auth import resolve_github_token, resolve_gitlab_token

    if config["vcs"] == "github":
        token = resolve_github_token(config)
        if not token:
            raise click.UsageError("No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.")
        if not config.get("github_repo") or not config.get("github_pr"):
            raise click.UsageError("GitHub reporting needs --repo (owner/name) and --pr.")
        return GitHubPRService.from_token(config["github_repo"], int(config["github_pr"]), token)

    token = resolve_gitlab_token(config)
    if not token:
        raise click.UsageError("No GitLab token found. Set GITLAB_TOKEN or gitlab_token in the config file.")
    if not config.get("gitlab_project_id") or not config.get("gitlab_mr_iid"):
        raise click.UsageError("GitLab reporting needs --project-id and --mr.")
    return GitLabMRService(
        base_url=config["gitlab_url"],
        token=token,
        project_id=config["gitlab_project_id"],
        mr_iid=int(config["gitlab_mr_iid"]),
    )


def print_dry_run(correlation: Correlation) -> None:
    """Print the comments a report would post, without posting them."""
    if not correlation.comments:
        console.print("[green]Dry run: no findings on changed lines.[/green]")
        return
    console.print(f"\n[bold]Dry run — {len(correlation.comments)} comment(s) (not posted)[/bold]\n")
    for c in correlation.comments:
        color = "red" if c.errors else "yellow"
        console.print(
            f"[bold cyan]{c.file}[/bold cyan]  line [bold]{c.line}[/bold]  "
            f"[{color}]{c.errors} error(s), {c.warnings} warning(s)[/{color}]"
        )
        for message in c.messages:
            console.print(f"  {message}")
        console.print()


@click.command("report")
@click.option("--vcs", type=click.Choice(["github", "gitlab"]), default=None, help="Hosting platform.")
@click.option(
    "--build-log",
    "build_logs",
    multiple=True,
    help="Build log as 'type;path[;cwd]'. Repeatable. Types: eslint, pylint, mypy, tsc.",
)
@click.option("--repo", "github_repo", default=None, help="GitHub repository in owner/name format.")
@click.option("--pr", "github_pr", type=int, default=None, help="GitHub pull request number.")
@click.option("--gitlab-url", default=None, help="GitLab base URL.")
@click.option("--project-id", "gitlab_project_id", default=None, help="GitLab project id or path.")
@click.option("--mr", "gitlab_mr_iid", type=int, default=None, help="GitLab merge request iid.")
@click.option(
    "--suppress-rule",
    "suppress_rules",
    multiple=True,
    help="Regex of rule ids to drop before reporting. Repeatable.",
)
@click.option("--output", default=None, help="Write the parsed findings as JSON to this path.")
@click.option(
    "--remove-old-comments",
    is_flag=True,
    help="Delete comments codecoach posted on earlier runs before posting new ones.",
)
@click.option("--dry-run", is_flag=True, help="Print the comments that would be posted instead of posting them.")
@click.pass_context
def report_cmd(
    ctx,
    vcs: str | None,
    build_logs: tuple[str, ...],
    github_repo: str | None,
    github_pr: int | None,
    gitlab_url: str | None,
    gitlab_project_id: str | None,
    gitlab_mr_iid: int | None,
    suppress_rules: tuple[str, ...],
    output: str | None,
    remove_old_comments: bool,
    dry_run: bool,
):
    """Report linter findings on changed lines as review comments.

    Exits with status 1 when at least one error lands on a changed line.

    \b
    Required environment variables:
      GITHUB_TOKEN   GitHub token (or use gh CLI) when --vcs github
      GITLAB_TOKEN   GitLab token with api scope when --vcs gitlab
    """
    from codecoach_core.config import load_config

    config_path = ctx.obj.get("config_path", ".codecoach.yml") if ctx.obj else ".codecoach.yml"
    try:
        config = load_config(
            config_path,
            cli_overrides={
                "vcs": vcs,
                "build_logs": build_logs,
                "github_repo": github_repo,
                "github_pr": github_pr,
                "gitlab_url": gitlab_url,
                "gitlab_project_id": gitlab_project_id,
                "gitlab_mr_iid": gitlab_mr_iid,
                "suppress_rules": suppress_rules,
                "output": output,
                # The flag can only switch removal on; False means "not given".
                "remove_old_comments": remove_old_comments or None,
            },
        )
    except ValueError as e:
        raise click.UsageError(str(e))

    if not config["build_logs"]:
        raise click.UsageError("No build log given. Pass --build-log 'type;path[;cwd]' or set build_logs.")

    findings = _load_findings(config)
    if config.get("output"):
        _write_output(findings, config["output"])

    reporter = Reporter(_build_service(config), remove_old_comments=bool(config["remove_old_comments"]))

    if dry_run:
        correlation = reporter.preview(findings)
        print_dry_run(correlation)
        passed = correlation.passed
    else:
        passed = reporter.report(findings)
        console.print(f"[green]Report posted to {config['vcs']}.[/green]")

    if not passed:
        console.print("[red]Errors found on changed lines.[/red]")
        ctx.exit(1)
