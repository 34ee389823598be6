# -*- coding: ascii -*-
"""Tests for the strategy registry."""

import unittest

from rxnenum.strategies import (
    CartesianProductStrategy,
    EnumerationStrategyBase,
    RandomSampleStrategy,
    available_strategies,
    get_strategy_class,
    make_strategy,
    register_strategy,
)


class _ReverseStrategy(CartesianProductStrategy):
    """Test-only variant registered under its own tag."""
    type = "TestReverseStrategy"

    def next(self):
        position = super().next()
        return tuple(size - 1 - idx for idx, size in zip(position, self.get_sizes()))


class TestRegistry(unittest.TestCase):

    def test_builtin_strategies_registered(self):
        names = available_strategies()
        for name in ('CartesianProductStrategy', 'RandomSampleStrategy',
                     'RandomSampleAllBBsStrategy'):
            self.assertIn(name, names)

    def test_make_strategy(self):
        strategy = make_strategy('RandomSampleStrategy', seed=3)
        self.assertIsInstance(strategy, RandomSampleStrategy)
        self.assertIsInstance(strategy, EnumerationStrategyBase)

    def test_unknown_strategy(self):
        with self.assertRaises(KeyError):
            get_strategy_class('NoSuchStrategy')

    def test_register_custom_strategy(self):
        register_strategy(_ReverseStrategy)
        self.assertIs(get_strategy_class('TestReverseStrategy'), _ReverseStrategy)

        strategy = make_strategy('TestReverseStrategy')
        strategy.initialize_from_sizes([2, 2])
        self.assertEqual(list(strategy), [(1, 1), (1, 0), (0, 1), (0, 0)])

    def test_register_requires_strategy_subclass(self):
        with self.assertRaises(ValueError):
            register_strategy(dict)


if __name__ == '__main__':
    unittest.main(verbosity=2)
