"""
Exact resource quantities in the Kubernetes notation.

Values are held as ``decimal.Decimal`` so sums and comparisons never go
through binary floating point. The notation a quantity was written in is
kept so it prints back in its canonical Kubernetes form.
"""

import re
from decimal import (
    ROUND_UP,
    Context,
    Decimal,
)
from enum import StrEnum
from fractions import Fraction
from typing import Any, Self

from kubernetes.utils import parse_quantity
from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

from vpa_recommendation.exceptions import QuantityParseError

# large enough to never round a resource amount
EXACT = Context(prec=200)

NANO = Decimal("1E-9")

DECIMAL_SUFFIXES = {
    -9: "n",
    -6: "u",
    -3: "m",
    0: "",
    3: "k",
    6: "M",
    9: "G",
    12: "T",
    15: "P",
    18: "E",
}

BINARY_SUFFIXES = ["", "Ki", "Mi", "Gi", "Ti", "Pi", "Ei"]

EXPONENT_RE = re.compile(r"[eE][-+]?\d+$")


class QuantityFormat(StrEnum):
    DECIMAL_SI = "DecimalSI"
    BINARY_SI = "BinarySI"
    DECIMAL_EXPONENT = "DecimalExponent"


def detect_format(value: str) -> QuantityFormat:
    if value.endswith("i"):
        return QuantityFormat.BINARY_SI
    if EXPONENT_RE.search(value):
        return QuantityFormat.DECIMAL_EXPONENT
    return QuantityFormat.DECIMAL_SI


def quo_round_down(dividend: Decimal, divisor: int, scale: int) -> Decimal:
    """
    Divide exactly and truncate toward zero, keeping `scale` digits after
    the decimal point. A negative scale truncates to tens, hundreds, etc.
    """
    if divisor == 0:
        raise ZeroDivisionError("quantity division by zero")
    quotient = Fraction(dividend) * Fraction(10) ** scale / divisor
    unscaled = int(quotient)  # int() truncates toward zero
    return Decimal(f"{unscaled}E{-scale}")


class Quantity:
    __slots__ = ("format", "value")

    def __init__(
        self,
        value: Decimal | int = 0,
        format: QuantityFormat = QuantityFormat.DECIMAL_SI,
    ) -> None:
        self.value = Decimal(value)
        self.format = format

    @classmethod
    def parse(cls, value: str | int | float | Decimal) -> Self:
        text = str(value).strip()
        if not text:
            raise QuantityParseError("empty string")
        try:
            number = parse_quantity(text)
        except (ValueError, ArithmeticError) as e:
            raise QuantityParseError(e) from None
        if not number.is_finite():
            raise QuantityParseError(f"{text} is not a finite number")
        return cls(number, detect_format(text))

    @property
    def scale(self) -> int:
        """Number of digits after the decimal point, negative for E+ values."""
        return -self.value.as_tuple().exponent  # type: ignore[operator]

    def is_zero(self) -> bool:
        return self.value.is_zero()

    def cmp(self, other: "Quantity") -> int:
        return (self.value > other.value) - (self.value < other.value)

    def __add__(self, other: "Quantity") -> "Quantity":
        # a zero quantity takes the notation of whatever is added to it
        fmt = other.format if self.is_zero() else self.format
        return Quantity(EXACT.add(self.value, other.value), fmt)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.value == other.value

    def __hash__(self) -> int:
        return hash(self.value)

    def __repr__(self) -> str:
        return f"Quantity({str(self)!r})"

    def __str__(self) -> str:
        fmt = self.format
        if fmt == QuantityFormat.BINARY_SI and (
            -1024 < self.value < 1024 or self.value != self.value.to_integral_value()
        ):
            fmt = QuantityFormat.DECIMAL_SI

        if fmt == QuantityFormat.BINARY_SI:
            amount = int(self.value)
            power = 0
            while amount % 1024 == 0 and power < len(BINARY_SUFFIXES) - 1:
                amount //= 1024
                power += 1
            return f"{amount}{BINARY_SUFFIXES[power]}"

        rounded = self.value.quantize(NANO, rounding=ROUND_UP, context=EXACT)
        if rounded.is_zero():
            return "0"
        sign, digits, exponent = rounded.normalize(context=EXACT).as_tuple()
        mantissa = int("".join(str(d) for d in digits))
        exp3 = (exponent // 3) * 3  # type: ignore[operator]
        mantissa *= 10 ** (exponent - exp3)  # type: ignore[operator]
        if exp3 > 18:
            mantissa *= 10 ** (exp3 - 18)
            exp3 = 18
        if fmt == QuantityFormat.DECIMAL_EXPONENT:
            suffix = f"e{exp3}" if exp3 else ""
        else:
            suffix = DECIMAL_SUFFIXES[exp3]
        return f"{'-' if sign else ''}{mantissa}{suffix}"

    def as_plain_string(self) -> str:
        return format(self.value, "f")

    def round_up(self) -> int:
        """Round away from zero to a whole unit."""
        return int(self.value.quantize(Decimal(1), rounding=ROUND_UP, context=EXACT))

    @classmethod
    def _validate(cls, value: Any) -> "Quantity":
        if isinstance(value, Quantity):
            return value
        if isinstance(value, bool) or not isinstance(
            value, str | int | float | Decimal
        ):
            raise ValueError(f"unsupported quantity type {type(value).__name__}")
        return cls.parse(value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )
