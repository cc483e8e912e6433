"""Cost ledger — estimated X API spend for the current session.

The X API v2 is pay-per-use. Every successful tool call tracks its estimated
cost here under an action key ("post", "search", "like", ...). The ledger
accumulates at full precision and only rounds when read, so summing many
small prices (100 x $0.005) reads back as an exact $0.50 instead of
0.5000000000000002.

One ledger is owned by each plugin instance and shared by all of its tools.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

# USD per call (or per returned result for the *_per_result keys).
ACTION_COSTS: dict[str, float] = {
    "post": 0.01,
    "search_per_result": 0.005,
    "like": 0.005,
    "user_lookup": 0.001,
    "mention_per_result": 0.005,
    "dm_send": 0.01,
    "dm_read_per_result": 0.005,
}

_PRECISION = 4


def format_cost(value: float) -> str:
    """Render a cost the way tool payloads show it: "$0.0100"."""
    return f"${value:.{_PRECISION}f}"


@dataclass
class CostEntry:
    calls: int = 0
    total_cost: float = 0.0


class CostLedger:
    """In-memory accumulator of action -> (call count, total cost)."""

    def __init__(self) -> None:
        self._entries: dict[str, CostEntry] = {}
        self._lock = threading.Lock()

    def track(self, action: str, cost: float) -> None:
        """Record one call of `action` costing `cost` USD."""
        with self._lock:
            entry = self._entries.setdefault(action, CostEntry())
            entry.calls += 1
            entry.total_cost += cost

    @property
    def total_cost(self) -> float:
        with self._lock:
            total = sum(entry.total_cost for entry in self._entries.values())
        return round(total, _PRECISION)

    def get_summary(self) -> dict:
        """Return the rounded total and a per-action breakdown."""
        with self._lock:
            breakdown = {
                action: {
                    "calls": entry.calls,
                    "total_cost": round(entry.total_cost, _PRECISION),
                }
                for action, entry in self._entries.items()
            }
        return {"total_cost": self.total_cost, "breakdown": breakdown}

    def reset(self) -> None:
        with self._lock:
            self._entries.clear()
