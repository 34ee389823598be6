# -*- coding: ascii -*-
"""Random sampling that cycles through every building block of every site."""

from typing import Any, Callable, Dict, List, Optional, Tuple

from ..errors import EmptySpaceError, StateMismatchError
from .. import state_io
from .base import EnumerationStrategyBase
from .random_sample import export_generator_state, make_generator, restore_generator
from .registry import register_strategy


@register_strategy
class RandomSampleAllBBsStrategy(EnumerationStrategyBase):
    """
    Random tuples in rounds of max(sizes) draws.

    Each site walks through a shuffled order of its building blocks and
    reshuffles whenever it has used them all or a new round starts, so every
    building block of every site appears at least once per round. Like
    RandomSampleStrategy this never runs out.
    """

    type = "RandomSampleAllBBsStrategy"
    is_random = True

    def __init__(self, seed: Optional[int] = None):
        super().__init__()
        self._rng = make_generator(seed)
        self._offset = 0
        self._max_offset = 1
        self._orders: List[List[int]] = []
        self._num_permutations_processed = 0

    def check_sizes(self, sizes: List[int]) -> None:
        for i, size in enumerate(sizes):
            if size == 0:
                raise EmptySpaceError(i)

    def initialize_strategy(self) -> None:
        self._max_offset = max(self._permutation_sizes, default=1)
        self._offset = 0
        self._orders = [[] for _ in self._permutation_sizes]
        self._num_permutations_processed = 0

    def has_next(self) -> bool:
        return True

    def next(self) -> Tuple[int, ...]:
        self._require_initialized()
        for i, size in enumerate(self._permutation_sizes):
            step = self._offset % size
            if step == 0:
                self._orders[i] = [int(v) for v in self._rng.permutation(size)]
            self._permutation[i] = self._orders[i][step]

        self._offset = (self._offset + 1) % self._max_offset
        self._num_permutations_processed += 1
        return self.get_position()

    def get_permutation_idx(self) -> int:
        return self._num_permutations_processed

    def variant_state(self) -> Dict[str, Any]:
        return {
            'num_permutations_processed': self._num_permutations_processed,
            'offset': self._offset,
            'orders': [list(order) for order in self._orders],
            'rng': export_generator_state(self._rng),
        }

    def prepare_variant_state(self, variant: Any, sizes: List[int],
                              position: List[int]) -> Callable[[], None]:
        state_io.require_fields(
            variant, ('num_permutations_processed', 'offset', 'orders', 'rng'), 'variant')
        processed = state_io.require_int(variant['num_permutations_processed'],
                                         'num_permutations_processed')
        max_offset = max(sizes, default=1)
        offset = state_io.require_int(variant['offset'], 'offset')
        if offset >= max_offset:
            raise StateMismatchError(f"offset {offset} is out of range for round length {max_offset}")

        orders = variant['orders']
        if not isinstance(orders, list) or len(orders) != len(sizes):
            raise StateMismatchError("orders must be a list with one entry per site")
        checked = []
        for i, (order, size) in enumerate(zip(orders, sizes)):
            if not isinstance(order, list):
                raise StateMismatchError(f"orders[{i}] must be a list")
            # sites are reshuffled before use whenever offset % size == 0
            if not order and offset % size == 0:
                checked.append([])
                continue
            order = [state_io.require_int(v, f"orders[{i}]") for v in order]
            if sorted(order) != list(range(size)):
                raise StateMismatchError(f"orders[{i}] is not a permutation of range({size})")
            checked.append(order)

        rng = restore_generator(variant['rng'])

        def commit():
            self._num_permutations_processed = processed
            self._max_offset = max_offset
            self._offset = offset
            self._orders = checked
            self._rng = rng
        return commit
