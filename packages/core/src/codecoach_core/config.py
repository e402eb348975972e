import os
from pathlib import Path
from typing import Optional

import yaml

VCS_CHOICES = ("github", "gitlab")

DEFAULT_CONFIG: dict = {
    "vcs": "github",
    "remove_old_comments": False,
    "build_logs": [],  # "type;path[;cwd]" strings, e.g. "eslint;reports/eslint.json;."
    "suppress_rules": [],  # regexes matched against each finding's rule id
    "output": None,  # path to dump parsed findings as JSON; None = don't write
    "github_repo": None,
    "github_pr": None,
    "gitlab_url": "https://gitlab.com",
    "gitlab_project_id": None,
    "gitlab_mr_iid": None,
    "github_token": None,  # GITHUB_TOKEN wins; the gh CLI session is tried last
    "gitlab_token": None,  # GITLAB_TOKEN wins
}

_LIST_KEYS = ("build_logs", "suppress_rules")


def load_config(config_path: str = ".codecoach.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .codecoach.yml in the current directory
      3. CLI argument overrides (None and empty tuples are ignored)
      4. GITHUB_TOKEN / GITLAB_TOKEN, for the two token keys only
    """
    config = {**DEFAULT_CONFIG, **{key: list(DEFAULT_CONFIG[key]) for key in _LIST_KEYS}}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is None:
                continue
            # click hands repeatable options over as tuples; an empty one means "not given".
            if isinstance(value, (tuple, list)):
                if not value:
                    continue
                value = list(value)
            config[key] = value

    if config["vcs"] not in VCS_CHOICES:
        raise ValueError(f"Unknown vcs: {config['vcs']!r}. Choose 'github' or 'gitlab'.")

    # Environment variables win over tokens written into the config file.
    for key, env_var in (("github_token", "GITHUB_TOKEN"), ("gitlab_token", "GITLAB_TOKEN")):
        config[key] = os.environ.get(env_var) or config.get(key)

    return config
