# -*- coding: ascii -*-
"""Unit tests for product-space arithmetic."""

import unittest

from rxnenum.product_size import (
    ENUMERATION_OVERFLOW,
    MAX_PERMUTATIONS,
    compute_num_products,
    get_reactants_from_rgroups,
    get_sizes_from_bbs,
    is_overflow,
    validate_sizes,
)

# 2**64 - 1 = 3 * 5 * 17 * 257 * 641 * 65537 * 6700417
MAX_FACTORS = [3, 5, 17, 257, 641, 65537, 6700417]


class TestComputeNumProducts(unittest.TestCase):

    def test_simple_product(self):
        self.assertEqual(compute_num_products([2, 3]), 6)
        self.assertEqual(compute_num_products([10, 40, 50]), 20000)

    def test_no_sites_is_one(self):
        """The empty tuple is the only combination of zero sites."""
        self.assertEqual(compute_num_products([]), 1)

    def test_empty_site_is_zero_not_overflow(self):
        count = compute_num_products([3, 0, 5])
        self.assertEqual(count, 0)
        self.assertFalse(is_overflow(count))

    def test_product_equal_to_max_is_exact(self):
        count = compute_num_products(MAX_FACTORS)
        self.assertEqual(count, MAX_PERMUTATIONS)
        self.assertFalse(is_overflow(count))
        self.assertEqual(compute_num_products([MAX_PERMUTATIONS]), MAX_PERMUTATIONS)

    def test_one_past_max_overflows(self):
        self.assertIs(compute_num_products([2 ** 63, 2]), ENUMERATION_OVERFLOW)
        self.assertIs(compute_num_products([MAX_PERMUTATIONS + 1]), ENUMERATION_OVERFLOW)
        self.assertIs(compute_num_products([2 ** 32, 2 ** 32]), ENUMERATION_OVERFLOW)

    def test_huge_product_overflows(self):
        self.assertIs(compute_num_products([10 ** 6] * 5), ENUMERATION_OVERFLOW)

    def test_overflow_with_empty_site_is_zero(self):
        self.assertEqual(compute_num_products([10 ** 12, 10 ** 12, 0]), 0)

    def test_overflow_sentinel_is_not_a_number(self):
        self.assertNotEqual(ENUMERATION_OVERFLOW, 0)
        self.assertNotEqual(ENUMERATION_OVERFLOW, MAX_PERMUTATIONS)
        self.assertFalse(isinstance(ENUMERATION_OVERFLOW, int))

    def test_invalid_sizes_rejected(self):
        with self.assertRaises(ValueError):
            compute_num_products([2, -1])
        with self.assertRaises(ValueError):
            compute_num_products([2, 1.5])
        with self.assertRaises(ValueError):
            compute_num_products([True, 2])

    def test_validate_sizes_returns_list(self):
        self.assertEqual(validate_sizes((4, 1, 7)), [4, 1, 7])


class TestIndexMapping(unittest.TestCase):

    def setUp(self):
        self.bbs = [['a0', 'a1'], ['b0', 'b1', 'b2'], ['c0']]

    def test_sizes_from_bbs(self):
        self.assertEqual(get_sizes_from_bbs(self.bbs), [2, 3, 1])
        self.assertEqual(get_sizes_from_bbs([]), [])

    def test_reactants_from_rgroups(self):
        self.assertEqual(get_reactants_from_rgroups(self.bbs, (1, 2, 0)), ['a1', 'b2', 'c0'])

    def test_reactants_length_mismatch(self):
        with self.assertRaises(ValueError):
            get_reactants_from_rgroups(self.bbs, (0, 0))

    def test_reactants_out_of_range(self):
        with self.assertRaises(IndexError):
            get_reactants_from_rgroups(self.bbs, (0, 3, 0))


if __name__ == '__main__':
    unittest.main(verbosity=2)
