# -*- coding: ascii -*-
"""Building-block combination strategies for combinatorial reaction enumeration."""

from .errors import (
    EmptySpaceError,
    EnumerationStrategyError,
    ExhaustionError,
    StateMismatchError,
)
from .product_size import (
    ENUMERATION_OVERFLOW,
    MAX_PERMUTATIONS,
    compute_num_products,
    get_reactants_from_rgroups,
    get_sizes_from_bbs,
)
from .strategies import (
    CartesianProductStrategy,
    EnumerationStrategyBase,
    RandomSampleAllBBsStrategy,
    RandomSampleStrategy,
    make_strategy,
)

__version__ = "0.1.0"
