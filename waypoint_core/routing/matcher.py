"""Path Matcher - Path template compilation and matching.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from waypoint_core.errors import CompilationFault

DEFAULT_PARAM_PATTERN = r"[^/]+"

_PARAM_NAME = re.compile(r"\w+")


def strip_trailing(path: str) -> str:
    """Strip trailing separators; the root path becomes empty."""
    return path.rstrip("/")


@dataclass(frozen=True)
class CompiledPath:
    """A compiled path template.

    Attributes:
        template: Template as registered, e.g. ``/files/:name(\\d+)``
        regex: Anchored pattern with one capturing group per parameter
        param_names: Parameter names in declaration order
    """

    template: str
    regex: "re.Pattern[str]" = field(repr=False)
    param_names: Tuple[str, ...] = ()

    def match(self, path: str) -> Optional[Dict[str, str]]:
        """Match a request path.

        Returns:
            Dict of path parameters in declaration order, None if no match
        """
        found = self.regex.fullmatch(strip_trailing(path))
        if found is None:
            return None
        return dict(zip(self.param_names, found.groups()))


def _read_override(template: str, start: int) -> Tuple[str, int]:
    """Read a parenthesised override starting at ``template[start] == "("``.

    Returns:
        Tuple of (pattern body, index just past the closing parenthesis)
    """
    depth = 0
    i = start
    while i < len(template):
        char = template[i]
        if char == "\\":
            i += 2
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return template[start + 1:i], i + 1
        i += 1
    raise CompilationFault(template, "unbalanced parenthesis in parameter pattern")


def _non_capturing(template: str, pattern: str) -> str:
    """Rewrite capturing groups in an override so captures stay positional."""
    out = []
    i = 0
    in_class = False
    while i < len(pattern):
        char = pattern[i]
        if char == "\\":
            out.append(pattern[i:i + 2])
            i += 2
            continue
        if in_class:
            if char == "]":
                in_class = False
        elif char == "[":
            in_class = True
        elif char == "(":
            if pattern.startswith("(?P<", i):
                raise CompilationFault(template, "named groups are not allowed in parameter patterns")
            if not pattern.startswith("(?", i):
                out.append("(?:")
                i += 1
                continue
        out.append(char)
        i += 1
    return "".join(out)


def compile_path(template: str) -> CompiledPath:
    """Compile a path template into an anchored matcher.

    ``:name`` captures one or more non-separator characters, and
    ``:name(regex)`` overrides the capture. Everything else is literal.

    Raises:
        CompilationFault: If the template is malformed
    """
    source = strip_trailing(template)
    parts: List[str] = []
    names: List[str] = []
    literal_start = 0
    i = 0

    while i < len(source):
        if source[i] != ":":
            i += 1
            continue

        parts.append(re.escape(source[literal_start:i]))
        name_match = _PARAM_NAME.match(source, i + 1)
        if name_match is None:
            raise CompilationFault(template, f"empty parameter name at offset {i}")
        name = name_match.group(0)
        if name in names:
            raise CompilationFault(template, f"duplicate parameter {name!r}")
        names.append(name)
        i = name_match.end()

        pattern = DEFAULT_PARAM_PATTERN
        if i < len(source) and source[i] == "(":
            pattern, i = _read_override(source, i)
            if not pattern:
                raise CompilationFault(template, f"empty pattern for parameter {name!r}")
            pattern = _non_capturing(template, pattern)
        parts.append(f"({pattern})")
        literal_start = i

    parts.append(re.escape(source[literal_start:]))

    try:
        regex = re.compile("".join(parts))
    except re.error as e:
        raise CompilationFault(template, str(e)) from e

    return CompiledPath(template=template, regex=regex, param_names=tuple(names))


class PathMatcher:
    """URL path pattern matcher with a per-template cache.

    Supports:
    - Exact matches: /users
    - Path parameters: /users/:id
    - Parameter patterns: /files/:name(\\d+)
    """

    def __init__(self):
        self._cache: Dict[str, CompiledPath] = {}
        self._lock = threading.Lock()

    def compile(self, template: str) -> CompiledPath:
        """Get compiled template (cached)."""
        with self._lock:
            compiled = self._cache.get(template)
            if compiled is None:
                compiled = compile_path(template)
                self._cache[template] = compiled
            return compiled

    def matches(self, template: str, path: str) -> bool:
        """Check if path matches template."""
        return self.extract(template, path) is not None

    def extract(self, template: str, path: str) -> Optional[Dict[str, str]]:
        """Extract path parameters."""
        return self.compile(template).match(path)


__all__ = [
    "DEFAULT_PARAM_PATTERN",
    "CompiledPath",
    "PathMatcher",
    "compile_path",
    "strip_trailing",
]
