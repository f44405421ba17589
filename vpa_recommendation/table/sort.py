import functools
import logging
from collections.abc import Callable, Iterable
from enum import StrEnum
from typing import Self

from vpa_recommendation.exceptions import SortOrderError
from vpa_recommendation.table.compare import (
    compare_float,
    compare_quantities,
    compare_strings,
)
from vpa_recommendation.table.model import Row, Table

Comparator = Callable[[Row, Row], int]


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: str) -> Self:
        try:
            return cls(value)
        except ValueError:
            raise SortOrderError(
                f'must be either "{cls.ASC}" or "{cls.DESC}"'
            ) from None


class ColumnKey(StrEnum):
    NAME = "name"
    NAMESPACE = "namespace"
    TARGET = "target"
    CPU_DIFF = "cpu-diff"
    MEM_DIFF = "mem-diff"
    CPU_REQ = "cpu-req"
    MEM_REQ = "mem-req"
    CPU_REC = "cpu-rec"
    MEM_REC = "mem-rec"


COLUMN_COMPARATORS: dict[ColumnKey, Comparator] = {
    ColumnKey.NAME: lambda r1, r2: compare_strings(r1.name, r2.name),
    ColumnKey.NAMESPACE: lambda r1, r2: compare_strings(r1.namespace, r2.namespace),
    ColumnKey.TARGET: lambda r1, r2: compare_strings(r1.target_name, r2.target_name),
    ColumnKey.CPU_DIFF: lambda r1, r2: compare_float(
        r1.cpu_difference, r2.cpu_difference
    ),
    ColumnKey.MEM_DIFF: lambda r1, r2: compare_float(
        r1.memory_difference, r2.memory_difference
    ),
    ColumnKey.CPU_REQ: lambda r1, r2: compare_quantities(
        r1.requests.cpu, r2.requests.cpu
    ),
    ColumnKey.MEM_REQ: lambda r1, r2: compare_quantities(
        r1.requests.memory, r2.requests.memory
    ),
    ColumnKey.CPU_REC: lambda r1, r2: compare_quantities(
        r1.recommendations.cpu, r2.recommendations.cpu
    ),
    ColumnKey.MEM_REC: lambda r1, r2: compare_quantities(
        r1.recommendations.memory, r2.recommendations.memory
    ),
}


def column_comparators(columns: Iterable[str]) -> list[Comparator]:
    comparators = []
    for column in columns:
        try:
            key = ColumnKey(column)
        except ValueError:
            logging.debug(f"ignoring unknown sort column {column!r}")
            continue
        comparators.append(COLUMN_COMPARATORS[key])
    return comparators


def with_order(before: bool, order: SortOrder) -> bool:
    if order == SortOrder.DESC:
        return not before
    return before


class MultiColumnSorter:
    """
    Orders rows by a chain of column comparators. The first comparator that
    tells two rows apart decides; the order is applied to that decision,
    never to the individual comparator results.
    """

    def __init__(self, comparators: Iterable[Comparator], order: SortOrder) -> None:
        self.comparators = list(comparators)
        self.order = order

    def less(self, r1: Row, r2: Row) -> bool:
        for comparator in self.comparators:
            match comparator(r1, r2):
                case -1:
                    return with_order(True, self.order)
                case 1:
                    return with_order(False, self.order)
        return False

    def compare(self, r1: Row, r2: Row) -> int:
        if self.less(r1, r2):
            return -1
        if self.less(r2, r1):
            return 1
        return 0

    def sort(self, table: Table) -> None:
        # list.sort is stable, rows comparing equal keep their input order
        table.sort(key=functools.cmp_to_key(self.compare))


def sort_table(table: Table, order: SortOrder, *columns: str) -> None:
    """Sort the top level rows of the table in place."""
    MultiColumnSorter(column_comparators(columns), order).sort(table)
