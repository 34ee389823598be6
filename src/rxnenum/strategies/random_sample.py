# -*- coding: ascii -*-
"""
Uniform random sampling of building-block combinations.

Basic usage:

    strategy = RandomSampleStrategy(seed=42)
    strategy.initialize(building_blocks)
    for _ in range(num_samples):
        reactants = get_reactants_from_rgroups(building_blocks, strategy.next())
        products = rxn.RunReactants(reactants)

Sampling is with replacement, so the same tuple may be produced any number
of times, and the strategy never runs out.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import numpy as np

from ..errors import EmptySpaceError, StateMismatchError
from .. import state_io
from ..product_size import MAX_PERMUTATIONS
from .base import EnumerationStrategyBase
from .registry import register_strategy

LOG = logging.getLogger(__name__)


class UniformIntDistribution:
    """Uniform integer distribution over the closed range [low, high]."""

    def __init__(self, low: int, high: int):
        if high < low:
            raise ValueError(f"Empty distribution range [{low}, {high}]")
        self.low = low
        self.high = high

    def __call__(self, rng: np.random.Generator) -> int:
        return int(rng.integers(self.low, self.high, endpoint=True, dtype=np.uint64))

    def __repr__(self) -> str:
        return f"UniformIntDistribution({self.low}, {self.high})"


def make_generator(seed: Optional[int] = None) -> np.random.Generator:
    """Generator used by the random strategies; its bit generator state is serializable."""
    return np.random.Generator(np.random.PCG64(seed))


def export_generator_state(rng: np.random.Generator) -> Dict[str, Any]:
    return dict(rng.bit_generator.state)


def restore_generator(blob: Any) -> np.random.Generator:
    """
    Build a new generator from an exported bit generator state.

    Raises StateMismatchError for anything numpy will not accept, and for
    numeric fields that are not plain integers (numpy would coerce them).
    """
    if not isinstance(blob, Mapping):
        raise StateMismatchError("Generator state must be a mapping")
    name = blob.get('bit_generator')
    bit_generator_class = getattr(np.random, name, None) if isinstance(name, str) else None
    if (not isinstance(bit_generator_class, type)
            or not issubclass(bit_generator_class, np.random.BitGenerator)
            or bit_generator_class is np.random.BitGenerator):
        raise StateMismatchError(f"Unknown bit generator {name!r} in generator state")

    for key, value in blob.items():
        if key != 'bit_generator':
            _check_int_fields(value, f"rng.{key}")

    try:
        bit_generator = bit_generator_class()
        bit_generator.state = dict(blob)
    except (TypeError, ValueError, KeyError, OverflowError, NotImplementedError) as e:
        raise StateMismatchError(f"Malformed generator state: {e}") from e
    return np.random.Generator(bit_generator)


def _check_int_fields(value: Any, name: str) -> None:
    if isinstance(value, Mapping):
        for key, item in value.items():
            _check_int_fields(item, f"{name}.{key}")
    elif isinstance(value, list):
        for i, item in enumerate(value):
            _check_int_fields(item, f"{name}[{i}]")
    else:
        state_io.require_int(value, name)


@register_strategy
class RandomSampleStrategy(EnumerationStrategyBase):
    """
    Draw every site's index independently and uniformly on each call.

    The generator is created once per instance. Re-initializing keeps
    consuming the same random stream; construct a new instance (or pass a
    seed) to start over.
    """

    type = "RandomSampleStrategy"
    is_random = True

    def __init__(self, seed: Optional[int] = None):
        super().__init__()
        self._rng = make_generator(seed)
        self._distributions: List[UniformIntDistribution] = []
        self._num_permutations_processed = 0

    def check_sizes(self, sizes: List[int]) -> None:
        for i, size in enumerate(sizes):
            if size == 0:
                raise EmptySpaceError(i)
            if size - 1 > MAX_PERMUTATIONS:
                raise ValueError(f"Site {i} has {size} building blocks, more than a draw can index")

    def initialize_strategy(self) -> None:
        self._distributions = _build_distributions(self._permutation_sizes)
        self._num_permutations_processed = 0
        LOG.debug("Sampling distributions: %s", self._distributions)

    def has_next(self) -> bool:
        return True

    def next(self) -> Tuple[int, ...]:
        self._require_initialized()
        for i, distribution in enumerate(self._distributions):
            self._permutation[i] = distribution(self._rng)
        self._num_permutations_processed += 1
        return self.get_position()

    def get_permutation_idx(self) -> int:
        """Number of samples drawn since initialization."""
        return self._num_permutations_processed

    def variant_state(self) -> Dict[str, Any]:
        return {
            'num_permutations_processed': self._num_permutations_processed,
            'rng': export_generator_state(self._rng),
        }

    def prepare_variant_state(self, variant: Any, sizes: List[int],
                              position: List[int]) -> Callable[[], None]:
        state_io.require_fields(variant, ('num_permutations_processed', 'rng'), 'variant')
        processed = state_io.require_int(variant['num_permutations_processed'],
                                         'num_permutations_processed')
        rng = restore_generator(variant['rng'])
        distributions = _build_distributions(sizes)

        def commit():
            self._num_permutations_processed = processed
            self._distributions = distributions
            self._rng = rng
        return commit


def _build_distributions(sizes: List[int]) -> List[UniformIntDistribution]:
    return [UniformIntDistribution(0, size - 1) for size in sizes]
