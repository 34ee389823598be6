# -*- coding: ascii -*-
"""Enumeration strategies. Importing this package registers the built-in strategies."""

from .base import EnumerationStrategyBase
from .cartesian import CartesianProductStrategy
from .random_sample import RandomSampleStrategy, UniformIntDistribution
from .random_sample_all_bbs import RandomSampleAllBBsStrategy
from .registry import available_strategies, get_strategy_class, make_strategy, register_strategy

__all__ = [
    'EnumerationStrategyBase',
    'CartesianProductStrategy',
    'RandomSampleStrategy',
    'RandomSampleAllBBsStrategy',
    'UniformIntDistribution',
    'available_strategies',
    'get_strategy_class',
    'make_strategy',
    'register_strategy',
]
