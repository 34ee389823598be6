# -*- coding: ascii -*-
"""
Base class for enumeration strategies.

A strategy walks the product space of per-site building-block collections and
hands out one index per site on every call to next(). Callers only ever talk
to this interface, so exhaustive and sampling strategies are interchangeable:

    strategy = CartesianProductStrategy()
    strategy.initialize(building_blocks)
    while strategy.has_next():
        rgroups = strategy.next()
        reactants = get_reactants_from_rgroups(building_blocks, rgroups)
        ...
"""

import abc
import copy
import logging
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

from ..errors import EnumerationStrategyError, StateMismatchError
from ..product_size import (
    ProductCount,
    compute_num_products,
    get_sizes_from_bbs,
    is_overflow,
    validate_sizes,
)
from .. import state_io

LOG = logging.getLogger(__name__)


class EnumerationStrategyBase(abc.ABC):
    """
    Shared state and lifecycle for all enumeration strategies.

    Holds the current position, the per-site sizes and the cached total
    number of permutations. Subclasses implement the traversal policy via
    initialize_strategy(), has_next() and next(), and persist their own
    fields through variant_state() / prepare_variant_state().
    """

    type = "EnumerationStrategyBase"
    is_random = False

    def __init__(self):
        self._permutation: List[int] = []
        self._permutation_sizes: List[int] = []
        self._num_permutations: ProductCount = 0
        self._initialized = False

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(sizes={self._permutation_sizes}, "
                f"position={self._permutation})")

    # Lifecycle

    def initialize(self, building_blocks: Sequence[Sequence[Any]]) -> None:
        """
        Initialize from per-site building-block collections.

        Only the length of each collection is used. Calling this again
        discards all progress.
        """
        self.initialize_from_sizes(get_sizes_from_bbs(building_blocks))

    def initialize_from_sizes(self, sizes: Sequence[int]) -> None:
        """Initialize from per-site building-block counts, e.g. [10, 40, 50]."""
        sizes = validate_sizes(sizes)
        self.check_sizes(sizes)

        self._permutation_sizes = sizes
        self._permutation = [0] * len(sizes)
        self._num_permutations = compute_num_products(sizes)
        self._initialized = True

        if is_overflow(self._num_permutations):
            LOG.warning("%s: number of permutations for sizes %s exceeds the representable range",
                        self.type, sizes)
        else:
            LOG.debug("%s initialized: sizes=%s permutations=%d",
                      self.type, sizes, self._num_permutations)

        self.initialize_strategy()

    def check_sizes(self, sizes: List[int]) -> None:
        """Reject sizes this strategy cannot traverse. Called before any state changes."""

    @abc.abstractmethod
    def initialize_strategy(self) -> None:
        """Strategy-specific setup; base state is already initialized."""

    # Iteration

    @abc.abstractmethod
    def has_next(self) -> bool:
        """True if another tuple is available. Sampling strategies always return True."""

    @abc.abstractmethod
    def next(self) -> Tuple[int, ...]:
        """Advance and return the new position {r1, r2, ...}."""

    def __bool__(self) -> bool:
        return self.has_next()

    def __iter__(self):
        return self

    def __next__(self) -> Tuple[int, ...]:
        if not self.has_next():
            raise StopIteration
        return self.next()

    def skip(self, skip_count: int) -> bool:
        """
        Advance skip_count steps, discarding the intermediate tuples.

        Equivalent to calling next() skip_count times, so random strategies
        consume exactly the same draws.
        """
        if skip_count < 0:
            raise ValueError(f"skip_count must be non-negative, got {skip_count}")
        self._require_initialized()
        for _ in range(skip_count):
            self.next()
        return True

    # Accessors

    def get_position(self) -> Tuple[int, ...]:
        """The most recently produced tuple."""
        return tuple(self._permutation)

    def get_sizes(self) -> Tuple[int, ...]:
        return tuple(self._permutation_sizes)

    def get_num_permutations(self) -> ProductCount:
        """Total tuples in the product space, or ENUMERATION_OVERFLOW."""
        return self._num_permutations

    @property
    def initialized(self) -> bool:
        return self._initialized

    def clone(self) -> 'EnumerationStrategyBase':
        """Independent copy including generator state."""
        return copy.deepcopy(self)

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise EnumerationStrategyError(f"{self.type} has not been initialized")

    # Persistence

    def get_state(self) -> Dict[str, Any]:
        """Export the complete state as a JSON-compatible dict."""
        self._require_initialized()
        return {
            'format_version': state_io.FORMAT_VERSION,
            'strategy': self.type,
            'sizes': list(self._permutation_sizes),
            'position': list(self._permutation),
            'num_permutations': state_io.count_to_payload(self._num_permutations),
            'variant': self.variant_state(),
        }

    def set_state(self, state: Mapping[str, Any]) -> None:
        """
        Restore state exported by get_state().

        Everything is validated before anything is assigned; on
        StateMismatchError this instance is left exactly as it was.
        """
        if not isinstance(state, Mapping):
            raise StateMismatchError(f"State must be a mapping, got {type(state).__name__}")
        state_io.check_format_version(state)
        state_io.require_fields(state, state_io.STATE_FIELDS, 'state')

        if state['strategy'] != self.type:
            raise StateMismatchError(
                f"State was saved by {state['strategy']!r}, cannot load into {self.type}")

        sizes = state['sizes']
        if not isinstance(sizes, list):
            raise StateMismatchError("sizes must be a list")
        try:
            sizes = validate_sizes(sizes)
            self.check_sizes(sizes)
        except ValueError as e:
            raise StateMismatchError(f"Invalid sizes in state: {e}") from e

        position = self._validate_position(state['position'], sizes)

        count = state_io.count_from_payload(state['num_permutations'])
        expected = compute_num_products(sizes)
        if count != expected:
            raise StateMismatchError(
                f"num_permutations {count!r} does not match sizes {sizes} ({expected!r})")

        commit_variant = self.prepare_variant_state(state['variant'], sizes, position)

        self._permutation_sizes = sizes
        self._permutation = position
        self._num_permutations = count
        self._initialized = True
        commit_variant()
        LOG.debug("Restored %s", state_io.state_summary(state))

    @staticmethod
    def _validate_position(position: Any, sizes: List[int]) -> List[int]:
        if not isinstance(position, list):
            raise StateMismatchError("position must be a list")
        if len(position) != len(sizes):
            raise StateMismatchError(
                f"position has {len(position)} entries but sizes has {len(sizes)}")
        result = []
        for i, (idx, size) in enumerate(zip(position, sizes)):
            idx = state_io.require_int(idx, f"position[{i}]")
            # an empty site still carries a zero placeholder
            if idx >= max(size, 1):
                raise StateMismatchError(f"position[{i}]={idx} is out of range for size {size}")
            result.append(idx)
        return result

    @abc.abstractmethod
    def variant_state(self) -> Dict[str, Any]:
        """Strategy-specific fields to persist."""

    @abc.abstractmethod
    def prepare_variant_state(self, variant: Any, sizes: List[int],
                              position: List[int]) -> Callable[[], None]:
        """
        Validate persisted strategy-specific fields.

        Must not modify self. Returns a callable that applies the fields once
        the base state has been committed.
        """
