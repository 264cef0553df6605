"""Scope Stack - Prefix and middleware scoping for route groups.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Optional, Tuple


def join_path(prefix: str, path: str) -> str:
    """Join a prefix and a path with exactly one separator between them."""
    return prefix.rstrip("/") + "/" + path.strip("/")


@dataclass(frozen=True)
class ScopeFrame:
    """One level of group scoping."""

    prefix: str = ""
    middleware: Tuple[Any, ...] = ()


class ScopeStack:
    """Stack of scope frames used while routes are registered.

    Each ``group`` call pushes a frame whose prefix and middleware extend
    the current frame, and pops it once the builder returns. Frames are
    immutable, so popping restores the parent exactly.

    Usage:
        stack = ScopeStack()
        with stack.scope("/api", [auth]):
            stack.current.prefix      # "/api"
        stack.current.prefix          # ""
    """

    def __init__(self, base_path: str = "", middleware: Optional[Iterable[Any]] = None):
        self._frames: List[ScopeFrame] = [
            ScopeFrame(prefix=base_path.rstrip(), middleware=tuple(middleware or ()))
        ]

    @property
    def current(self) -> ScopeFrame:
        """Innermost frame."""
        return self._frames[-1]

    @property
    def depth(self) -> int:
        """Number of pushed frames above the root."""
        return len(self._frames) - 1

    def push(self, prefix: str, middleware: Optional[Iterable[Any]] = None) -> ScopeFrame:
        """Push a frame nested inside the current one."""
        parent = self.current
        frame = ScopeFrame(
            prefix=join_path(parent.prefix, prefix),
            middleware=parent.middleware + tuple(middleware or ()),
        )
        self._frames.append(frame)
        return frame

    def pop(self) -> ScopeFrame:
        """Pop the innermost frame; the root frame cannot be popped."""
        if len(self._frames) == 1:
            raise IndexError("pop from root scope")
        return self._frames.pop()

    @contextmanager
    def scope(
        self,
        prefix: str,
        middleware: Optional[Iterable[Any]] = None,
    ) -> Iterator[ScopeFrame]:
        """Push a frame for the duration of a ``with`` block."""
        frame = self.push(prefix, middleware)
        try:
            yield frame
        finally:
            self.pop()

    def resolve(self, path: str) -> str:
        """Resolve a route path against the current prefix."""
        return join_path(self.current.prefix, path)


__all__ = [
    "ScopeFrame",
    "ScopeStack",
    "join_path",
]
