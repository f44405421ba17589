"""
Aggregate statistics over the quantity columns of a table.

All arithmetic is exact decimal arithmetic with an explicit rounding mode and
scale at each division.
"""

import functools
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import humanize

from vpa_recommendation.table.compare import compare_quantities
from vpa_recommendation.table.model import Row
from vpa_recommendation.table.quantity import (
    Quantity,
    QuantityFormat,
    quo_round_down,
)

UNSET_CELL = "-"

Column = Callable[[Row], Quantity | None]
StatFunction = Callable[[Sequence[Row], Column], Quantity | None]


def sum_quantities(table: Sequence[Row], column: Column) -> Quantity:
    total = Quantity()
    for row in table:
        if (value := column(row)) is not None:
            total += value
    return total


def mean_quantities(table: Sequence[Row], column: Column) -> Quantity:
    """
    Sum of the column divided by the number of rows, including rows where
    the column is unset. Truncated toward zero at the scale of the sum.
    """
    if not table:
        raise ZeroDivisionError("mean of a table without rows")
    total = sum_quantities(table, column)
    return Quantity(
        quo_round_down(total.value, len(table), total.scale),
        QuantityFormat.DECIMAL_SI,
    )


def median_quantities(table: Sequence[Row], column: Column) -> Quantity | None:
    values = sorted(
        (value for row in table if (value := column(row)) is not None),
        key=functools.cmp_to_key(compare_quantities),
    )
    n = len(values)
    if n == 0:
        return None
    if n % 2 == 1:
        return values[n // 2]
    # the upper operand is the element at n/2 + 1. With two values that index
    # is past the end, the literal rule has no answer there and the last
    # element is used instead.
    upper = values[min(n // 2 + 1, n - 1)]
    total = values[n // 2 - 1] + upper
    return Quantity(quo_round_down(total.value, 2, 0), QuantityFormat.DECIMAL_SI)


STAT_FUNCTIONS: list[StatFunction] = [
    sum_quantities,
    mean_quantities,
    median_quantities,
]


@dataclass(frozen=True)
class StatColumn:
    description: str
    column: Column
    as_bytes: bool


STAT_COLUMNS = [
    StatColumn(
        "CPU Recommendations (# cores)",
        lambda row: row.recommendations.cpu,
        as_bytes=False,
    ),
    StatColumn(
        "CPU Requests (# cores)",
        lambda row: row.requests.cpu,
        as_bytes=False,
    ),
    StatColumn(
        "MEM Recommendations (IEC/SI)",
        lambda row: row.recommendations.memory,
        as_bytes=True,
    ),
    StatColumn(
        "MEM Requests (IEC/SI)",
        lambda row: row.requests.memory,
        as_bytes=True,
    ),
]


def natural_bytes(size: int, binary: bool = False) -> str:
    """
    Size with one decimal below ten units and none above, e.g. 1.5GiB or
    12GiB. Sizes under one kilo unit are whole bytes: 512B.
    """
    base = 1024 if binary else 1000
    if abs(size) < base:
        return f"{size}B"
    scaled = float(abs(size))
    while scaled >= base:
        scaled /= base
    fmt = "%.1f" if scaled < 10 else "%.0f"
    return humanize.naturalsize(size, binary=binary, format=fmt).replace(" ", "")


def format_bytes(q: Quantity) -> str:
    size = q.round_up()
    return f"{natural_bytes(size, binary=True)}/{natural_bytes(size)}"


def format_aggregate(q: Quantity | None, as_bytes: bool) -> str:
    if q is None:
        return UNSET_CELL
    if as_bytes:
        return format_bytes(q)
    return q.as_plain_string()


def stats_rows(table: Sequence[Row]) -> list[list[str]]:
    return [
        [stat.description]
        + [
            format_aggregate(fn(table, stat.column), stat.as_bytes)
            for fn in STAT_FUNCTIONS
        ]
        for stat in STAT_COLUMNS
    ]
