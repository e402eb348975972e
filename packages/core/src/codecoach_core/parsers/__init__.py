"""Build-log parsers, looked up by the tool name given on the command line."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from codecoach_core.models import Finding
from codecoach_core.parsers.base import JsonParser, ParseContext, TextParser
from codecoach_core.parsers.formats import parse_eslint, parse_mypy, parse_pylint, parse_tsc

Parser = Union[JsonParser, TextParser]

PARSERS: dict[str, Parser] = {
    "eslint": JsonParser(parse_eslint),
    "pylint": JsonParser(parse_pylint),
    "mypy": TextParser(parse_mypy),
    "tsc": TextParser(parse_tsc),
}


def get_parser(name: str) -> Parser:
    try:
        return PARSERS[name.lower()]
    except KeyError:
        choices = ", ".join(sorted(PARSERS))
        raise ValueError(f"Unknown build log type: {name!r}. Choose one of: {choices}.")


def parse_build_log(spec: str) -> list[Finding]:
    """Parse a ``type;path[;cwd]`` build log spec into findings.

    ``cwd`` is the directory the tool ran in and defaults to the current one;
    absolute paths in the log are made relative to it.
    """
    parts = spec.split(";")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise ValueError(f"Invalid build log {spec!r}: expected 'type;path[;cwd]'.")
    name, path = parts[0], parts[1]
    cwd = parts[2] if len(parts) > 2 and parts[2] else os.getcwd()

    parser = get_parser(name)
    log_path = Path(path)
    if not log_path.exists():
        raise FileNotFoundError(f"Build log not found: {path}")
    content = log_path.read_text(encoding="utf-8", errors="replace")
    return list(parser.parse(content, ParseContext(cwd=cwd)))
