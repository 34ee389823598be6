# -*- coding: ascii -*-
"""Exhaustive enumeration of every building-block combination."""

from typing import Any, Callable, Dict, List, Tuple

from ..errors import ExhaustionError, StateMismatchError
from .. import state_io
from .base import EnumerationStrategyBase
from .registry import register_strategy


@register_strategy
class CartesianProductStrategy(EnumerationStrategyBase):
    """
    Visit every point of the product space exactly once.

    Positions advance like an odometer with the last site varying fastest,
    so sizes [2, 3] give (0,0), (0,1), (0,2), (1,0), (1,1), (1,2). The first
    call to next() returns the all-zero tuple. Completion is detected from
    the position itself, so spaces whose size overflows the permutation
    count still enumerate correctly.
    """

    type = "CartesianProductStrategy"
    is_random = False

    def __init__(self):
        super().__init__()
        self._started = False
        self._num_permutations_processed = 0

    def initialize_strategy(self) -> None:
        self._started = False
        self._num_permutations_processed = 0

    def has_next(self) -> bool:
        if not self._initialized:
            return False
        if 0 in self._permutation_sizes:
            return False
        if not self._started:
            return True
        return any(idx < size - 1 for idx, size in zip(self._permutation, self._permutation_sizes))

    def next(self) -> Tuple[int, ...]:
        self._require_initialized()
        if not self.has_next():
            raise ExhaustionError(
                f"{self.type} exhausted after {self._num_permutations_processed} permutations")

        if self._started:
            self._increment()
        else:
            self._started = True
        self._num_permutations_processed += 1
        return self.get_position()

    def _increment(self) -> None:
        for i in reversed(range(len(self._permutation))):
            self._permutation[i] += 1
            if self._permutation[i] < self._permutation_sizes[i]:
                return
            self._permutation[i] = 0

    def get_permutation_idx(self) -> int:
        """Number of tuples produced since initialization."""
        return self._num_permutations_processed

    def variant_state(self) -> Dict[str, Any]:
        return {
            'started': self._started,
            'num_permutations_processed': self._num_permutations_processed,
        }

    def prepare_variant_state(self, variant: Any, sizes: List[int],
                              position: List[int]) -> Callable[[], None]:
        state_io.require_fields(variant, ('started', 'num_permutations_processed'), 'variant')
        started = variant['started']
        if not isinstance(started, bool):
            raise StateMismatchError(f"started must be a boolean, got {started!r}")
        processed = state_io.require_int(variant['num_permutations_processed'],
                                         'num_permutations_processed')

        if started and 0 in sizes:
            raise StateMismatchError("Enumeration over an empty site cannot have started")
        expected = _rank(position, sizes) + 1 if started else 0
        if not started and any(position):
            raise StateMismatchError(f"Unstarted enumeration has non-zero position {position}")
        if processed != expected:
            raise StateMismatchError(
                f"num_permutations_processed={processed} does not match position {position}")

        def commit():
            self._started = started
            self._num_permutations_processed = processed
        return commit


def _rank(position: List[int], sizes: List[int]) -> int:
    """Zero-based index of position in odometer order."""
    rank = 0
    for idx, size in zip(position, sizes):
        rank = rank * size + idx
    return rank
