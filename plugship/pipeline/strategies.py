# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Ordered fallback strategies.

A few decisions in the pipeline are "try A, then B, then C, use the first
that works": reading the version (structured parse, then text match) and
picking how to launch the version helper (native script, then each
interpreter in preference order). Each attempt returns an Outcome, which is
either a success carrying a value or a failure carrying a reason, and
first_success walks the list.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a single strategy attempt."""

    ok: bool
    value: Optional[T] = None
    reasons: list[str] = field(default_factory=list)

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, reason: str) -> "Outcome[T]":
        return cls(ok=False, reasons=[reason])


Strategy = Callable[[], Outcome[T]]


def first_success(strategies: Iterable[Strategy[T]]) -> Outcome[T]:
    """
    Run strategies in order and return the first successful outcome.

    Strategies after the first success are never called. If every strategy
    fails, the returned failure carries all of their reasons in order.
    """
    reasons: list[str] = []
    for strategy in strategies:
        outcome = strategy()
        if outcome.ok:
            return outcome
        reasons.extend(outcome.reasons)
    return Outcome(ok=False, reasons=reasons)
