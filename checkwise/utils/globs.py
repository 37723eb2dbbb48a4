"""Glob pattern matching for repository-relative file paths.

Patterns follow the usual globstar dialect used by CI configuration files:

- ``*`` and ``?`` never match across ``/``
- wildcards and ``**`` skip hidden names (a leading ``.``) unless the
  pattern segment itself starts with a dot
- ``**`` as a whole path segment matches zero or more directories
- ``{a,b}`` expands to alternatives
- ``[abc]`` / ``[!abc]`` are character classes
- a leading ``!`` negates the pattern (see :func:`match_globs`)

Example:
    from checkwise.utils.globs import match_globs

    match_globs("src/app/main.ts", ["src/**/*.ts"])          # True
    match_globs("infra/readme.md", ["infra/**", "!**/*.md"])  # False
"""

import re
from functools import lru_cache

from .logging import get_logger

logger = get_logger(__name__)

NEGATION_PREFIX = "!"

# Wildcards at the start of a segment never match hidden files or directories.
NO_DOT = r"(?!\.)"
ANY_DIRECTORIES = r"(?:(?!\.)[^/]+/)*"
ANY_SEGMENTS = r"(?:(?!\.)[^/]+(?:/(?!\.)[^/]+)*)?"


def _expand_braces(pattern: str) -> list[str]:
    """Expand brace groups like ``*.{ts,tsx}`` into ``['*.ts', '*.tsx']``.

    Supports multiple brace groups via recursion.
    If no braces are present, returns [pattern].
    """
    start = pattern.find("{")
    if start == -1:
        return [pattern]
    end = pattern.find("}", start + 1)
    if end == -1:
        return [pattern]

    before = pattern[:start]
    inside = pattern[start + 1 : end]
    after = pattern[end + 1 :]

    parts = inside.split(",")
    if len(parts) <= 1:
        return [pattern]

    out: list[str] = []
    for part in parts:
        out.extend(_expand_braces(f"{before}{part}{after}"))
    return out


def _translate_class(segment: str, start: int) -> tuple[str, int] | None:
    """Translate the ``[...]`` class opening at ``start``.

    Returns the regex fragment and the index of the closing ``]``, or ``None``
    when the class is never closed. A ``]`` right after the opening (or after
    the negation mark) is a literal member.
    """
    i = start + 1
    negated = segment[i : i + 1] in ("!", "^")
    if negated:
        i += 1
    body_start = i
    if segment[i : i + 1] == "]":
        i += 1
    close = segment.find("]", i)
    if close == -1:
        return None

    members = []
    for char in segment[body_start:close]:
        members.append("\\" + char if char in "\\]^[" else char)
    return ("[^" if negated else "[") + "".join(members) + "]", close


def _translate_segment(segment: str) -> str:
    """Translate one path segment (no ``/``) into a regex fragment.

    Wildcards never match a leading ``.``, so hidden files only match patterns
    whose segment itself starts with a dot.
    """
    out: list[str] = []
    if segment[:1] in ("*", "?", "["):
        out.append(NO_DOT)
    i = 0
    n = len(segment)
    while i < n:
        char = segment[i]
        if char == "*":
            # Runs of stars inside a segment behave like a single star.
            while i + 1 < n and segment[i + 1] == "*":
                i += 1
            out.append("[^/]*")
        elif char == "?":
            out.append("[^/]")
        elif char == "[":
            translated = _translate_class(segment, i)
            if translated is None:
                out.append(re.escape(char))
            else:
                fragment, i = translated
                out.append(fragment)
        else:
            out.append(re.escape(char))
        i += 1
    return "".join(out)


def _translate(pattern: str) -> str:
    segments = pattern.split("/")
    parts: list[str] = []
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        if segment == "**":
            parts.append(ANY_SEGMENTS if last else ANY_DIRECTORIES)
        else:
            parts.append(_translate_segment(segment) + ("" if last else "/"))
    return "".join(parts)


def _normalize(path: str) -> str:
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path.lstrip("/")


@lru_cache(maxsize=512)
def glob_to_regex(pattern: str) -> re.Pattern:
    """Compile a single (non-negated) glob pattern into an anchored regex.

    A pattern that still does not compile (for example a reversed range such
    as ``[z-a]``) is matched literally instead of failing the run.
    """
    alternatives = [_translate(_normalize(p)) for p in _expand_braces(pattern)]
    try:
        return re.compile("(?:" + "|".join(alternatives) + ")", re.DOTALL)
    except re.error as e:
        logger.warning("Invalid glob pattern %r (%s), matching it literally", pattern, e)
        return re.compile(re.escape(_normalize(pattern)), re.DOTALL)


def matches_pattern(path: str, pattern: str) -> bool:
    """Check whether ``path`` matches a single non-negated glob."""
    return glob_to_regex(pattern).fullmatch(_normalize(path)) is not None


def split_patterns(patterns: list[str]) -> tuple[list[str], list[str]]:
    """Split patterns into (positive, negated-without-prefix) lists."""
    positive: list[str] = []
    negative: list[str] = []
    for pattern in patterns:
        if pattern.startswith(NEGATION_PREFIX):
            negative.append(pattern[len(NEGATION_PREFIX):])
        else:
            positive.append(pattern)
    return positive, negative


def match_globs(path: str, patterns: list[str]) -> bool:
    """Apply a pattern set to one path.

    The path matches when it matches at least one positive pattern and no
    negated one. Negated patterns only exclude, so a set made exclusively of
    negations never matches anything.
    """
    positive, negative = split_patterns(patterns)
    if not any(matches_pattern(path, p) for p in positive):
        return False
    return not any(matches_pattern(path, p) for p in negative)


def filter_paths(paths: list[str], patterns: list[str]) -> list[str]:
    """Return the paths selected by ``patterns``, in input order."""
    return [path for path in paths if match_globs(path, patterns)]


__all__ = [
    "glob_to_regex",
    "matches_pattern",
    "match_globs",
    "filter_paths",
    "split_patterns",
]
