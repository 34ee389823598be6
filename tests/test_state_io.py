# -*- coding: ascii -*-
"""Tests for JSON checkpoint files."""

import json
import os
import shutil
import tempfile
import unittest

from rxnenum import state_io
from rxnenum.errors import StateMismatchError
from rxnenum.strategies import (
    CartesianProductStrategy,
    RandomSampleAllBBsStrategy,
    RandomSampleStrategy,
)


class TestStateIO(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_dumps_loads_picks_variant(self):
        for strategy in (CartesianProductStrategy(), RandomSampleStrategy(seed=1),
                         RandomSampleAllBBsStrategy(seed=1)):
            with self.subTest(strategy=strategy.type):
                strategy.initialize_from_sizes([3, 4, 5])
                strategy.skip(17)
                restored = state_io.loads(state_io.dumps(strategy))
                self.assertIsInstance(restored, type(strategy))
                self.assertEqual([restored.next() for _ in range(10)],
                                 [strategy.next() for _ in range(10)])

    def test_save_and_load_file(self):
        strategy = RandomSampleStrategy(seed=31)
        strategy.initialize_from_sizes([100, 200])
        strategy.skip(50)
        path = os.path.join(self.tmpdir, 'nested', 'state.json')

        state_io.save_state(strategy, path)
        self.assertTrue(os.path.exists(path))
        self.assertEqual(os.listdir(os.path.dirname(path)), ['state.json'])

        restored = state_io.load_state(path)
        self.assertEqual([restored.next() for _ in range(50)],
                         [strategy.next() for _ in range(50)])

    def test_save_overwrites_previous_checkpoint(self):
        strategy = CartesianProductStrategy()
        strategy.initialize_from_sizes([5, 5])
        path = os.path.join(self.tmpdir, 'state.json')
        state_io.save_state(strategy, path)
        strategy.skip(7)
        state_io.save_state(strategy, path)
        self.assertEqual(state_io.load_state(path).get_position(), (1, 1))

    def test_load_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            state_io.load_state(os.path.join(self.tmpdir, 'missing.json'))

    def test_load_corrupt_file(self):
        path = os.path.join(self.tmpdir, 'corrupt.json')
        with open(path, 'w', encoding='ascii') as f:
            f.write('{"format_version": 1, "strat')
        with self.assertRaises(StateMismatchError):
            state_io.load_state(path)

    def test_loads_invalid_json(self):
        with self.assertRaises(StateMismatchError):
            state_io.loads('not json')

    def test_unknown_strategy(self):
        strategy = CartesianProductStrategy()
        strategy.initialize_from_sizes([2])
        state = strategy.get_state()
        state['strategy'] = 'SobolSequenceStrategy'
        with self.assertRaises(StateMismatchError):
            state_io.loads(json.dumps(state))

    def test_state_not_a_mapping(self):
        with self.assertRaises(StateMismatchError):
            state_io.loads('[1, 2, 3]')

    def test_count_payload(self):
        from rxnenum.product_size import ENUMERATION_OVERFLOW

        self.assertEqual(state_io.count_to_payload(ENUMERATION_OVERFLOW), 'overflow')
        self.assertIs(state_io.count_from_payload('overflow'), ENUMERATION_OVERFLOW)
        self.assertEqual(state_io.count_from_payload(12), 12)
        with self.assertRaises(StateMismatchError):
            state_io.count_from_payload(-1)
        with self.assertRaises(StateMismatchError):
            state_io.count_from_payload('12')


if __name__ == '__main__':
    unittest.main(verbosity=2)
