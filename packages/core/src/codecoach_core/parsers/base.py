"""Parser plumbing shared by every build-log format.

A parser turns one tool's raw output into Findings. JSON formats decode the
whole payload and hand it to a transform; text formats hand the transform the
raw text. Either way the transform gets a ParseContext carrying the working
directory the tool ran in, so reported paths can be made relative to it.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Callable, Sequence

from codecoach_core.models import Finding

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseContext:
    cwd: str


JsonTransform = Callable[[Any, ParseContext], Sequence[Finding]]
TextTransform = Callable[[str, ParseContext], Sequence[Finding]]


def relative_source(path: str | None, context: ParseContext) -> str:
    """Return ``path`` relative to the tool's working directory with ``/`` separators."""
    if not path:
        return ""
    if os.path.isabs(path):
        try:
            path = os.path.relpath(path, context.cwd)
        except ValueError:
            # Different drive on Windows; keep the absolute path.
            pass
    return PurePosixPath(path.replace("\\", "/")).as_posix()


def to_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class JsonParser:
    transform: JsonTransform

    def parse(self, content: str, context: ParseContext) -> Sequence[Finding]:
        content = content.strip()
        if not content:
            return []
        try:
            payload = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning("Could not decode JSON build log: %s", e)
            return []
        return self.transform(payload, context)


@dataclass(frozen=True)
class TextParser:
    transform: TextTransform

    def parse(self, content: str, context: ParseContext) -> Sequence[Finding]:
        return self.transform(content, context)
