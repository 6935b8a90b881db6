"""Numeral/particle normalizer tests."""

from __future__ import annotations

import unittest

from sinhalize.numerals import is_unit_suffix, normalize_numeral, split_numeral_suffix
from sinhalize.resources import SinhalizeResources


class TestSplitNumeralSuffix(unittest.TestCase):
    def test_split(self) -> None:
        self.assertEqual(split_numeral_suffix("rs.500k"), ("rs.", "500", "k"))
        self.assertEqual(split_numeral_suffix("4.1k"), ("", "4.1", "k"))
        self.assertEqual(split_numeral_suffix("2025"), ("", "2025", ""))
        self.assertEqual(split_numeral_suffix("100°F"), ("100°", "", "F"))


class TestNormalizeNumeral(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.resources = SinhalizeResources.load_default()

    def test_particle_k(self) -> None:
        out, rw = normalize_numeral("500k", self.resources)
        self.assertEqual(out, "500ක්")
        assert rw is not None
        self.assertEqual(rw.original, "500k")
        self.assertEqual(rw.suffix, "k")
        self.assertEqual(rw.particle, "ක්")

    def test_decimal_particle(self) -> None:
        self.assertEqual(normalize_numeral("4.1k", self.resources)[0], "4.1ක්")

    def test_particle_ta(self) -> None:
        self.assertEqual(normalize_numeral("10ta", self.resources)[0], "10ට")

    def test_units_win_over_particles(self) -> None:
        for text in ("55kg", "5km", "100°F", "10a.m.", "2nd", "5th", "55KG"):
            out, rw = normalize_numeral(text, self.resources)
            self.assertEqual(out, text)
            self.assertIsNone(rw)

    def test_unknown_suffix_preserved(self) -> None:
        self.assertEqual(normalize_numeral("12xyz", self.resources), ("12xyz", None))

    def test_currency_only(self) -> None:
        self.assertEqual(normalize_numeral("rs.5000", self.resources), ("rs.5000", None))
        self.assertEqual(normalize_numeral("Rs.", self.resources), ("Rs.", None))

    def test_is_unit_suffix(self) -> None:
        self.assertTrue(is_unit_suffix("kg", self.resources))
        self.assertTrue(is_unit_suffix("Kg", self.resources))
        self.assertFalse(is_unit_suffix("k", self.resources))


if __name__ == "__main__":
    unittest.main()
