"""Deterministic exponential backoff.

Delay for retry k (0-indexed) is min(initial * multiplier^k, max_delay).
With the defaults this yields 1000, 2000, 4000, 8000, 10000, 10000, ...
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from itertools import islice


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """Exponential backoff without jitter, in milliseconds.

    Attributes:
        initial_delay_ms: Delay before the first retry
        max_delay_ms: Upper bound for any single delay
        multiplier: Growth factor applied after each retry
    """

    initial_delay_ms: float = 1_000
    max_delay_ms: float = 10_000
    multiplier: float = 2.0

    def delay(self, attempt: int) -> float:
        """Delay before retry `attempt` (0-indexed)."""
        d = float(self.initial_delay_ms)
        for _ in range(attempt):
            d = min(d * self.multiplier, self.max_delay_ms)
        return d

    def delays(self) -> Iterator[float]:
        """Infinite delay sequence, each step derived from the previous one."""
        d = float(self.initial_delay_ms)
        while True:
            yield d
            d = min(d * self.multiplier, self.max_delay_ms)

    def schedule(self, retries: int) -> list[float]:
        """First `retries` delays."""
        return list(islice(self.delays(), retries))
