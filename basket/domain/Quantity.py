"""Quantity value object: an exact amount with an optional unit, plus unit-family merging."""
from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation
from fractions import Fraction
from typing import Dict, Optional, Tuple

from basket.domain.errors import InvalidScale
from basket.logic.normalize.normalizer import singularize

MASS = "mass"
VOLUME = "volume"
COUNT = "count"

# Canonical symbol -> (family, size in the family base unit)
UNITS: Dict[str, Tuple[str, Fraction]] = {
    "mg": (MASS, Fraction(1, 1000)),
    "g": (MASS, Fraction(1)),
    "kg": (MASS, Fraction(1000)),
    "oz": (MASS, Fraction("28.349523125")),
    "lb": (MASS, Fraction("453.59237")),
    "ml": (VOLUME, Fraction(1)),
    "cl": (VOLUME, Fraction(10)),
    "dl": (VOLUME, Fraction(100)),
    "l": (VOLUME, Fraction(1000)),
    "tsp": (VOLUME, Fraction("4.92892159375")),
    "tbsp": (VOLUME, Fraction("14.78676478125")),
    "fl oz": (VOLUME, Fraction("29.5735295625")),
    "cup": (VOLUME, Fraction("236.5882365")),
    "pint": (VOLUME, Fraction("473.176473")),
    "quart": (VOLUME, Fraction("946.352946")),
    "gallon": (VOLUME, Fraction("3785.411784")),
}

BASE_UNITS: Dict[str, str] = {MASS: "g", VOLUME: "ml"}

UNIT_ALIASES: Dict[str, str] = {
    "milligram": "mg", "milligrams": "mg",
    "gram": "g", "grams": "g", "gr": "g",
    "kilogram": "kg", "kilograms": "kg", "kgs": "kg",
    "ounce": "oz", "ounces": "oz",
    "pound": "lb", "pounds": "lb", "lbs": "lb",
    "milliliter": "ml", "milliliters": "ml", "millilitre": "ml", "millilitres": "ml",
    "centiliter": "cl", "centiliters": "cl",
    "deciliter": "dl", "deciliters": "dl",
    "liter": "l", "liters": "l", "litre": "l", "litres": "l",
    "teaspoon": "tsp", "teaspoons": "tsp",
    "tablespoon": "tbsp", "tablespoons": "tbsp", "tbs": "tbsp", "tbl": "tbsp",
    "fluid ounce": "fl oz", "fluid ounces": "fl oz", "floz": "fl oz", "fl. oz": "fl oz",
    "cups": "cup",
    "pints": "pint", "pt": "pint",
    "quarts": "quart", "qt": "quart",
    "gallons": "gallon", "gal": "gallon",
}

# Family ordering inside an entry; private families sort after these.
FAMILY_ORDER: Dict[str, int] = {MASS: 0, VOLUME: 1, COUNT: 2}

# Units shown with cooking fractions rather than decimals
FRACTION_DISPLAY_UNITS = {"tsp", "tbsp", "cup", "fl oz", "pint", "quart", "gallon", None}

_MIXED_RE = re.compile(r"^(?P<whole>\d+)\s+(?P<num>\d+)\s*/\s*(?P<den>\d+)$")
_FRACTION_RE = re.compile(r"^(?P<num>\d+)\s*/\s*(?P<den>\d+)$")


def normalize_unit(unit: Optional[str]) -> Optional[str]:
    """Fold a unit spelling onto its canonical symbol. Empty units become None (count)."""
    if unit is None:
        return None
    u = " ".join(str(unit).strip().lower().split())
    if not u:
        return None
    if u in UNITS:
        return u
    if u in UNIT_ALIASES:
        return UNIT_ALIASES[u]
    stripped = u.rstrip(".")
    if stripped in UNITS:
        return stripped
    if stripped in UNIT_ALIASES:
        return UNIT_ALIASES[stripped]
    # cloves -> clove, pinches -> pinch
    words = stripped.split(" ")
    words[-1] = singularize(words[-1])
    return " ".join(words)


def unit_family(unit: Optional[str]) -> str:
    """Return the family of a canonical unit. Unknown units form their own family."""
    if unit is None:
        return COUNT
    known = UNITS.get(unit)
    if known:
        return known[0]
    return f"unit:{unit}"


def family_sort_key(family: str) -> Tuple[int, str]:
    return (FAMILY_ORDER.get(family, len(FAMILY_ORDER)), family)


def parse_amount(value) -> Fraction:
    """Parse an amount into an exact Fraction.

    Accepts ints, Fractions, Decimals, floats (through their shortest repr) and
    strings like '2', '0.25', '1/2' or '1 1/2'. Negative amounts are rejected.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, Fraction):
        amount = value
    elif isinstance(value, int):
        amount = Fraction(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Invalid amount: {value!r}")
        amount = Fraction(repr(value))
    elif isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Invalid amount: {value!r}")
        amount = Fraction(value)
    elif isinstance(value, str):
        text = value.strip()
        mixed = _MIXED_RE.match(text)
        simple = _FRACTION_RE.match(text)
        if mixed:
            den = int(mixed.group("den"))
            if den == 0:
                raise ValueError(f"Invalid amount: {value!r}")
            amount = int(mixed.group("whole")) + Fraction(int(mixed.group("num")), den)
        elif simple:
            den = int(simple.group("den"))
            if den == 0:
                raise ValueError(f"Invalid amount: {value!r}")
            amount = Fraction(int(simple.group("num")), den)
        else:
            try:
                dec = Decimal(text)
            except InvalidOperation:
                raise ValueError(f"Invalid amount: {value!r}") from None
            if not dec.is_finite():
                raise ValueError(f"Invalid amount: {value!r}")
            amount = Fraction(dec)
    else:
        raise ValueError(f"Invalid amount: {value!r}")
    if amount < 0:
        raise ValueError(f"Amount cannot be negative: {value!r}")
    return amount


def parse_scale(factor) -> Fraction:
    """Parse a scale factor, raising InvalidScale unless it is a finite number > 0."""
    try:
        value = parse_amount(factor)
    except ValueError:
        raise InvalidScale(factor) from None
    if value <= 0:
        raise InvalidScale(factor)
    return value


class Quantity:
    """An amount in a unit. Immutable once built; arithmetic returns new instances."""

    __slots__ = ("amount", "unit")

    def __init__(self, amount=0, unit: Optional[str] = None):
        object.__setattr__(self, "amount", parse_amount(amount))
        object.__setattr__(self, "unit", normalize_unit(unit))

    def __setattr__(self, name, value):
        raise AttributeError("Quantity is immutable")

    @property
    def family(self) -> str:
        return unit_family(self.unit)

    def in_base_unit(self) -> "Quantity":
        """Convert to the base unit of the family (g or ml). Other families are returned as-is."""
        known = UNITS.get(self.unit) if self.unit else None
        if not known:
            return self
        family, size = known
        return Quantity(self.amount * size, BASE_UNITS[family])

    def display(self) -> str:
        """Human readable form: mixed eighths for cooking volumes and counts, decimals otherwise."""
        if self.unit in FRACTION_DISPLAY_UNITS:
            text = _format_eighths(self.amount)
        else:
            text = _format_decimal(self.amount)
        return f"{text} {self.unit}" if self.unit else text

    def __eq__(self, other) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.amount == other.amount and self.unit == other.unit

    def __hash__(self) -> int:
        return hash((self.amount, self.unit))

    def __str__(self) -> str:
        return f"{self.amount} {self.unit}" if self.unit else str(self.amount)

    def __repr__(self) -> str:
        return f"Quantity({str(self.amount)!r}, {self.unit!r})"

    def to_dict(self):
        '''Converts the Quantity to a dictionary for JSON persistence (exact amount as a fraction string).'''
        return {"amount": str(self.amount), "unit": self.unit}

    @staticmethod
    def from_dict(data):
        '''Creates a Quantity from a dictionary produced by to_dict (or a plain {amount, unit} record).'''
        if not isinstance(data, dict):
            raise ValueError(f"Invalid quantity record: {data!r}")
        return Quantity(data.get("amount", 0), data.get("unit"))


class MergeResult:
    """Outcome of merging two quantities: either one summed Quantity or 'unmerged'."""

    __slots__ = ("quantity",)

    def __init__(self, quantity: Optional[Quantity] = None):
        self.quantity = quantity

    @property
    def merged(self) -> bool:
        return self.quantity is not None

    @property
    def unmerged(self) -> bool:
        return self.quantity is None

    def __repr__(self) -> str:
        return f"MergeResult({self.quantity!r})" if self.merged else "MergeResult(unmerged)"


UNMERGED = MergeResult()


def merge(a: Quantity, b: Quantity) -> MergeResult:
    """Sum two quantities of the same unit family.

    Same unit keeps that unit, mixed units of a convertible family are summed in
    the family base unit. Different families are not an error: the result is
    flagged unmerged and the caller keeps both records.
    """
    if a.family != b.family:
        return UNMERGED
    if a.unit == b.unit:
        return MergeResult(Quantity(a.amount + b.amount, a.unit))
    left, right = a.in_base_unit(), b.in_base_unit()
    if left.unit != right.unit:
        return UNMERGED
    return MergeResult(Quantity(left.amount + right.amount, left.unit))


def scale(q: Quantity, factor) -> Quantity:
    """Multiply the amount by a positive factor; the unit is unchanged."""
    return Quantity(q.amount * parse_scale(factor), q.unit)


def _format_eighths(amount: Fraction) -> str:
    eighths = round(amount * 8)
    if eighths == 0 and amount > 0:
        return _format_decimal(amount)
    whole, rest = divmod(eighths, 8)
    if rest == 0:
        return str(whole)
    frac = Fraction(rest, 8)
    frac_text = f"{frac.numerator}/{frac.denominator}"
    return f"{whole} {frac_text}" if whole else frac_text


def _format_decimal(amount: Fraction) -> str:
    if amount.denominator == 1:
        return str(amount.numerator)
    return f"{float(amount):.2f}".rstrip("0").rstrip(".")


__all__ = [
    "Quantity", "MergeResult", "merge", "scale", "parse_amount", "parse_scale",
    "normalize_unit", "unit_family", "family_sort_key", "MASS", "VOLUME", "COUNT",
]
