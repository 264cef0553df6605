"""Middleware Base - The middleware pipeline.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from waypoint_core.errors import DeadlineExceeded
from waypoint_core.http.contracts import remaining_time

Middleware = Callable[[Any, Any, Dict[str, str]], Any]


class HaltReason(Enum):
    """Why a pipeline stopped before the handler."""

    RETURNED_FALSE = auto()
    RESPONSE_SENT = auto()


@dataclass
class PipelineResult:
    """Outcome of running a middleware pipeline."""

    completed: bool
    steps: int = 0
    halted_by: Optional[Middleware] = None
    reason: Optional[HaltReason] = None

    @property
    def halted(self) -> bool:
        return not self.completed


def check_deadline(request: Any, stage: str) -> None:
    """Raise DeadlineExceeded if the request deadline has passed."""
    remaining = remaining_time(request)
    if remaining is not None and remaining <= 0:
        raise DeadlineExceeded(stage, overrun=-remaining)


def middleware_name(middleware: Middleware) -> str:
    return getattr(middleware, "__qualname__", None) or type(middleware).__name__


class MiddlewarePipeline:
    """Ordered middleware run before a route handler.

    Pipeline:
    ┌────────────────────────────────────────────────────────────┐
    │                  Middleware Pipeline                        │
    │                                                             │
    │  Request ──▶ Global ──▶ Group ──▶ Route ──▶ Handler         │
    │                │          │         │                       │
    │                └──────────┴─────────┴──▶ halt               │
    │                  (returned False or response sent)          │
    └────────────────────────────────────────────────────────────┘

    A middleware halts the pipeline by returning ``False``. Independently,
    the response's sent flag is checked after every step and takes
    priority over the return value.
    """

    def __init__(self, middleware: Optional[Iterable[Middleware]] = None):
        self._middleware: List[Middleware] = list(middleware or [])

    @classmethod
    def compose(cls, *chains: Sequence[Middleware]) -> "MiddlewarePipeline":
        """Concatenate chains in the given order."""
        pipeline = cls()
        for chain in chains:
            pipeline._middleware.extend(chain)
        return pipeline

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """Add middleware to the end of the pipeline."""
        self._middleware.append(middleware)
        return self

    def run(
        self,
        request: Any,
        response: Any,
        params: Dict[str, str],
    ) -> PipelineResult:
        """Run every middleware in order until one halts.

        Raises:
            DeadlineExceeded: If the request deadline passes between steps
        """
        steps = 0
        for mw in self._middleware:
            check_deadline(request, f"middleware {middleware_name(mw)}")

            result = mw(request, response, params)
            steps += 1

            if response.is_sent():
                return PipelineResult(
                    completed=False,
                    steps=steps,
                    halted_by=mw,
                    reason=HaltReason.RESPONSE_SENT,
                )
            if result is False:
                return PipelineResult(
                    completed=False,
                    steps=steps,
                    halted_by=mw,
                    reason=HaltReason.RETURNED_FALSE,
                )

        return PipelineResult(completed=True, steps=steps)

    def __iter__(self):
        return iter(self._middleware)

    def __len__(self) -> int:
        return len(self._middleware)


__all__ = [
    "Middleware",
    "MiddlewarePipeline",
    "PipelineResult",
    "HaltReason",
    "check_deadline",
    "middleware_name",
]
