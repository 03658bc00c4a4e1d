import unittest

import numpy as np
import pytest

from pedigree_tools import (InbredPedigree, UNKNOWN, compute_inbreeding, inbreeding, pedigree,
                            with_inbreeding)
from pedigree_tools.inbreeding import longest_ancestral_paths
from tests.fixtures import (DAM, F_EXPECTED, LABEL, LETTERS_DAM, LETTERS_LABEL, LETTERS_SIRE, SIRE,
                            random_pedigree, tabular_a)


class TestInbreeding(unittest.TestCase):

    def test_canonical_values(self):
        f = inbreeding(pedigree(SIRE, DAM, LABEL))
        np.testing.assert_allclose(f.values, F_EXPECTED)
        self.assertEqual(f.name, "F")
        self.assertEqual(list(f.index), LABEL)

    def test_selfing_and_repeated_inbreeding(self):
        f = inbreeding(pedigree(LETTERS_SIRE, LETTERS_DAM, LETTERS_LABEL))
        expected = {"A": 0.0, "B": 0.0, "C": 0.0, "D": 0.25, "E": 0.125, "F": 0.375,
                    "G": 0.34375, "H": 0.0, "I": 0.3359375, "J": 0.5}
        for lab, value in expected.items():
            self.assertAlmostEqual(f[lab], value, places=12, msg=lab)

    def test_full_sibs_share_inbreeding(self):
        ped = pedigree(SIRE + [5], DAM + [2], LABEL + [7])
        f = inbreeding(ped)
        self.assertAlmostEqual(f[7], f[6])
        self.assertAlmostEqual(f[7], 0.125)

    def test_founders_and_half_known_parents_are_not_inbred(self):
        ped = pedigree([None, None, 1, 3], [None, None, None, None], [1, 2, 3, 4])
        np.testing.assert_array_equal(inbreeding(ped).values, np.zeros(4))

    def test_empty_pedigree(self):
        f = compute_inbreeding(np.array([], dtype=int), np.array([], dtype=int))
        self.assertEqual(len(f), 0)

    def test_deep_pedigree_visits_each_ancestor_once(self):
        # z(k+1) = (x, y) with x = (z(k), ?) and y = (z(k), ?): path weights halve
        # every block and underflow to zero long before the top
        blocks = 1100
        sire, dam = [UNKNOWN], [UNKNOWN]
        for _ in range(blocks):
            z = len(sire) - 1
            sire += [z, z, z + 1]
            dam += [UNKNOWN, UNKNOWN, z + 2]
        sire, dam = np.array(sire), np.array(dam)
        self.assertGreater(longest_ancestral_paths(sire, dam).max(), 2 * blocks - 1)

        f = compute_inbreeding(sire, dam)
        self.assertAlmostEqual(f[-1], 1.0 / 7.0, places=12)
        np.testing.assert_array_equal(f[1::3], 0.0)

    def test_longest_ancestral_paths(self):
        ped = pedigree(SIRE, DAM, LABEL)
        np.testing.assert_array_equal(longest_ancestral_paths(ped.sire, ped.dam), [0, 0, 1, 1, 2, 3])


class TestWithInbreeding(unittest.TestCase):

    def test_stores_coefficients(self):
        ped = pedigree(SIRE, DAM, LABEL)
        inbred = with_inbreeding(ped)
        self.assertIsInstance(inbred, InbredPedigree)
        self.assertIs(inbred.pedigree, ped)
        np.testing.assert_allclose(inbred.f, F_EXPECTED)
        self.assertFalse(inbred.f.flags.writeable)

    def test_already_inbred_is_returned(self):
        inbred = with_inbreeding(pedigree(SIRE, DAM, LABEL))
        self.assertIs(with_inbreeding(inbred), inbred)

    def test_stored_coefficients_are_used(self):
        ped = pedigree(SIRE, DAM, LABEL)
        stored = InbredPedigree(pedigree=ped, f=np.full(6, 0.5))
        np.testing.assert_array_equal(inbreeding(stored).values, np.full(6, 0.5))

    def test_rejects_non_pedigree(self):
        with self.assertRaises(TypeError):
            inbreeding([SIRE, DAM, LABEL])


@pytest.mark.parametrize("seed,window", [(11, None), (12, 5), (13, 3), (14, 10)])
def test_matches_tabular_diagonal(seed, window):
    sire, dam, label = random_pedigree(60, seed, window=window)
    ped = pedigree(sire, dam, label)
    expected = np.diag(tabular_a(ped.sire, ped.dam)) - 1.0
    np.testing.assert_allclose(inbreeding(ped).values, expected, atol=1e-12)


def test_unknown_constant_is_padding_slot():
    f = compute_inbreeding(np.array([UNKNOWN, UNKNOWN, 0]), np.array([UNKNOWN, UNKNOWN, 1]))
    np.testing.assert_array_equal(f, np.zeros(3))
