"""Shared budget accounting for one extraction run."""

import threading
from typing import Optional

from .models import Budget


class BudgetTracker:
    """
    Running byte/token totals checked against a Budget.

    ``try_reserve`` is the only way to move the counters: it checks and
    commits under one lock, so concurrent callers can never push the totals
    past the configured maxima and a rejected reservation changes nothing.
    One tracker is created per run and passed to whoever needs it.
    """

    def __init__(self, budget: Budget):
        self.budget = budget
        self._lock = threading.Lock()
        self._bytes = 0
        self._tokens = 0

    @property
    def consumed_bytes(self) -> int:
        return self._bytes

    @property
    def consumed_tokens(self) -> int:
        return self._tokens

    @property
    def remaining_bytes(self) -> Optional[int]:
        if self.budget.max_bytes is None:
            return None
        return self.budget.max_bytes - self._bytes

    @property
    def remaining_tokens(self) -> Optional[int]:
        if self.budget.max_tokens is None:
            return None
        return self.budget.max_tokens - self._tokens

    def _fits(self, num_bytes: int, tokens: int) -> bool:
        if self.budget.max_bytes is not None and self._bytes + num_bytes > self.budget.max_bytes:
            return False
        if self.budget.max_tokens is not None and self._tokens + tokens > self.budget.max_tokens:
            return False
        return True

    def try_reserve(self, num_bytes: int, tokens: int) -> bool:
        """
        Commit ``num_bytes`` and ``tokens`` if both totals stay within budget.

        Returns:
            True if committed, False if rejected (state unchanged).
        """
        if num_bytes < 0 or tokens < 0:
            raise ValueError("Reservations must be non-negative")
        with self._lock:
            if not self._fits(num_bytes, tokens):
                return False
            self._bytes += num_bytes
            self._tokens += tokens
            return True
