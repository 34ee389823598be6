# -*- coding: ascii -*-
"""
Product-space arithmetic and building-block index mapping.

The number of tuples in a combinatorial library is the product of the
per-site building-block counts. It is computed with Python integers, so the
comparison against the 64-bit count limit is exact; results above the limit
are reported as ENUMERATION_OVERFLOW rather than a wrapped value.
"""

import logging
from enum import Enum
from typing import Any, List, Sequence, Union

LOG = logging.getLogger(__name__)

# Largest count representable by the native (size_t) permutation counter
MAX_PERMUTATIONS = 2 ** 64 - 1


class CountStatus(Enum):
    """Non-numeric product counts."""
    OVERFLOW = "overflow"

    def __repr__(self) -> str:
        return "ENUMERATION_OVERFLOW"


ENUMERATION_OVERFLOW = CountStatus.OVERFLOW

ProductCount = Union[int, CountStatus]


def validate_sizes(sizes: Sequence[int]) -> List[int]:
    """Return sizes as a list of ints, rejecting negative and non-integer entries."""
    result = []
    for i, size in enumerate(sizes):
        if isinstance(size, bool) or not isinstance(size, int):
            raise ValueError(f"Size at site {i} must be an integer, got {size!r}")
        if size < 0:
            raise ValueError(f"Size at site {i} must be non-negative, got {size}")
        result.append(int(size))
    return result


def compute_num_products(sizes: Sequence[int]) -> ProductCount:
    """
    Compute the number of tuples spanned by the given per-site sizes.

    Args:
        sizes: Number of building blocks at each reaction site

    Returns:
        Exact product as an int, or ENUMERATION_OVERFLOW when the product is
        larger than MAX_PERMUTATIONS. No sites gives 1 (the empty tuple);
        any zero-size site gives 0.
    """
    sizes = validate_sizes(sizes)
    if not sizes:
        return 1

    total = 1
    for size in sizes:
        total *= size

    if total > MAX_PERMUTATIONS:
        LOG.debug("Product of sizes %s exceeds %d, reporting overflow", sizes, MAX_PERMUTATIONS)
        return ENUMERATION_OVERFLOW
    return total


def is_overflow(count: ProductCount) -> bool:
    """True when count is the overflow sentinel."""
    return count is ENUMERATION_OVERFLOW


def get_sizes_from_bbs(building_blocks: Sequence[Sequence[Any]]) -> List[int]:
    """Number of building blocks available at each site."""
    return [len(bbs) for bbs in building_blocks]


def get_reactants_from_rgroups(building_blocks: Sequence[Sequence[Any]],
                               rgroups: Sequence[int]) -> List[Any]:
    """
    Map a position tuple to the building blocks it selects.

    Args:
        building_blocks: Per-site building-block collections
        rgroups: One index per site, as produced by a strategy

    Returns:
        List with building_blocks[i][rgroups[i]] for every site
    """
    if len(building_blocks) != len(rgroups):
        raise ValueError(
            f"Position has {len(rgroups)} entries but there are {len(building_blocks)} sites")
    return [building_blocks[i][idx] for i, idx in enumerate(rgroups)]
