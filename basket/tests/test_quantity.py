from decimal import Decimal
from fractions import Fraction
import unittest

from basket.domain.Quantity import (
    Quantity, merge, scale, parse_amount, parse_scale, normalize_unit, unit_family, MASS, VOLUME, COUNT
)
from basket.domain.errors import InvalidScale


class TestParseAmount(unittest.TestCase):

    def test_fraction_strings(self):
        self.assertEqual(parse_amount("1/2"), Fraction(1, 2))
        self.assertEqual(parse_amount("1 1/2"), Fraction(3, 2))
        self.assertEqual(parse_amount(" 0.25 "), Fraction(1, 4))

    def test_numbers_are_exact(self):
        self.assertEqual(parse_amount(0.1), Fraction(1, 10))
        self.assertEqual(parse_amount(Decimal("2.5")), Fraction(5, 2))
        self.assertEqual(parse_amount(3), Fraction(3))

    def test_rejects_negative_and_garbage(self):
        for bad in (-1, "-2", "abc", "1/0", float("inf"), True, None):
            with self.assertRaises(ValueError):
                parse_amount(bad)

    def test_scale_must_be_positive(self):
        self.assertEqual(parse_scale("1/2"), Fraction(1, 2))
        for bad in (0, -1, "nan", "x"):
            with self.assertRaises(InvalidScale):
                parse_scale(bad)

    def test_invalid_scale_is_value_error(self):
        with self.assertRaises(ValueError):
            parse_scale(0)


class TestUnits(unittest.TestCase):

    def test_aliases_fold_to_symbols(self):
        self.assertEqual(normalize_unit("Grams"), "g")
        self.assertEqual(normalize_unit("tablespoons"), "tbsp")
        self.assertEqual(normalize_unit("Tbsp."), "tbsp")
        self.assertIsNone(normalize_unit("  "))

    def test_families(self):
        self.assertEqual(unit_family("kg"), MASS)
        self.assertEqual(unit_family("cup"), VOLUME)
        self.assertEqual(unit_family(None), COUNT)
        self.assertEqual(unit_family("pinch"), "unit:pinch")

    def test_plural_free_form_units_fold(self):
        self.assertEqual(normalize_unit("cloves"), "clove")
        self.assertEqual(normalize_unit("Pinches"), "pinch")
        self.assertEqual(normalize_unit("cans"), "can")
        self.assertEqual(normalize_unit("slices"), "slice")
        self.assertEqual(normalize_unit("large cans"), "large can")
        self.assertEqual(unit_family("cloves"), unit_family("clove"))


class TestMerge(unittest.TestCase):

    def test_same_unit_keeps_unit(self):
        result = merge(Quantity(200, "g"), Quantity(100, "grams"))
        self.assertTrue(result.merged)
        self.assertEqual(result.quantity, Quantity(300, "g"))

    def test_mixed_units_sum_in_base_unit(self):
        result = merge(Quantity(200, "g"), Quantity(1, "kg"))
        self.assertEqual(result.quantity, Quantity(1200, "g"))

    def test_volume_units_convert_to_ml(self):
        result = merge(Quantity(1, "l"), Quantity(250, "ml"))
        self.assertEqual(result.quantity, Quantity(1250, "ml"))

    def test_counts_merge(self):
        self.assertEqual(merge(Quantity(2), Quantity(3)).quantity, Quantity(5))

    def test_incompatible_families_are_unmerged(self):
        self.assertTrue(merge(Quantity(2, "cup"), Quantity(100, "g")).unmerged)
        self.assertTrue(merge(Quantity(2), Quantity(100, "g")).unmerged)

    def test_unknown_units_only_merge_with_themselves(self):
        self.assertEqual(merge(Quantity(1, "pinch"), Quantity(2, "pinch")).quantity, Quantity(3, "pinch"))
        self.assertTrue(merge(Quantity(1, "pinch"), Quantity(1, "clove")).unmerged)

    def test_singular_and_plural_unit_spellings_merge(self):
        result = merge(Quantity(2, "cloves"), Quantity(1, "clove"))
        self.assertTrue(result.merged)
        self.assertEqual(result.quantity, Quantity(3, "clove"))


class TestScaleAndDisplay(unittest.TestCase):

    def test_scale_is_linear(self):
        self.assertEqual(scale(Quantity(2, "cup"), 3), Quantity(6, "cup"))
        self.assertEqual(scale(Quantity(2, "cup"), "1/2"), Quantity(1, "cup"))

    def test_scale_rejects_zero(self):
        with self.assertRaises(InvalidScale):
            scale(Quantity(2, "cup"), 0)

    def test_display(self):
        self.assertEqual(Quantity("1 1/2", "tbsp").display(), "1 1/2 tbsp")
        self.assertEqual(Quantity("0.5").display(), "1/2")
        self.assertEqual(Quantity("1.25", "kg").display(), "1.25 kg")
        self.assertEqual(Quantity(300, "g").display(), "300 g")

    def test_immutable(self):
        q = Quantity(1, "g")
        with self.assertRaises(AttributeError):
            q.amount = 2

    def test_dict_form_keeps_exact_amount(self):
        q = Quantity("1/3", "cup")
        self.assertEqual(q.to_dict(), {"amount": "1/3", "unit": "cup"})
        self.assertEqual(Quantity.from_dict(q.to_dict()), q)
