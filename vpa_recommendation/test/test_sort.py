import pytest

from vpa_recommendation.exceptions import SortOrderError
from vpa_recommendation.table.model import Row
from vpa_recommendation.table.sort import (
    ColumnKey,
    MultiColumnSorter,
    SortOrder,
    column_comparators,
    sort_table,
    with_order,
)
from vpa_recommendation.test.conftest import build_row

NAN = float("nan")


def names(table: list[Row]) -> list[str]:
    return [row.name for row in table]


def test_sort_order_parse() -> None:
    assert SortOrder.parse("asc") == SortOrder.ASC
    assert SortOrder.parse("desc") == SortOrder.DESC


def test_sort_order_parse_error_names_both_values() -> None:
    with pytest.raises(SortOrderError) as e:
        SortOrder.parse("up")
    assert '"asc"' in str(e.value)
    assert '"desc"' in str(e.value)


def test_with_order() -> None:
    assert with_order(True, SortOrder.ASC) is True
    assert with_order(False, SortOrder.ASC) is False
    assert with_order(True, SortOrder.DESC) is False
    assert with_order(False, SortOrder.DESC) is True


def test_column_comparators_skip_unknown_columns() -> None:
    comparators = column_comparators(["bogus", "name", "", "cpu-diff"])
    assert len(comparators) == 2


def test_every_column_key_has_a_comparator() -> None:
    assert len(column_comparators(list(ColumnKey))) == len(ColumnKey)


def test_sort_by_name() -> None:
    table = [build_row("b"), build_row("c"), build_row("a")]
    sort_table(table, SortOrder.ASC, "name")
    assert names(table) == ["a", "b", "c"]


@pytest.mark.parametrize(
    "column, rows",
    [
        ("name", [build_row("b"), build_row("c"), build_row("a")]),
        (
            "namespace",
            [
                build_row("x", namespace="n2"),
                build_row("y", namespace="n3"),
                build_row("z", namespace="n1"),
            ],
        ),
        (
            "target",
            [
                build_row("x", target_name="t2"),
                build_row("y", target_name="t1"),
                build_row("z", target_name="t3"),
            ],
        ),
        (
            "cpu-diff",
            [
                build_row("x", cpu_difference=5.0),
                build_row("y", cpu_difference=-20.0),
                build_row("z", cpu_difference=80.0),
            ],
        ),
        (
            "mem-diff",
            [
                build_row("x", memory_difference=5.0),
                build_row("y", memory_difference=-20.0),
                build_row("z", memory_difference=80.0),
            ],
        ),
        (
            "cpu-req",
            [
                build_row("x", cpu_request="1"),
                build_row("y", cpu_request="100m"),
                build_row("z", cpu_request="1500m"),
            ],
        ),
        (
            "mem-req",
            [
                build_row("x", memory_request="1Gi"),
                build_row("y", memory_request="1G"),
                build_row("z", memory_request="2G"),
            ],
        ),
        (
            "cpu-rec",
            [
                build_row("x", cpu_recommendation="25m"),
                build_row("y", cpu_recommendation="2"),
                build_row("z", cpu_recommendation="1"),
            ],
        ),
        (
            "mem-rec",
            [
                build_row("x", memory_recommendation="128Mi"),
                build_row("y", memory_recommendation="64Mi"),
                build_row("z", memory_recommendation="1Gi"),
            ],
        ),
    ],
)
def test_sort_descending_reverses_ascending(column: str, rows: list[Row]) -> None:
    ascending = list(rows)
    sort_table(ascending, SortOrder.ASC, column)
    descending = list(rows)
    sort_table(descending, SortOrder.DESC, column)
    assert names(descending) == list(reversed(names(ascending)))


@pytest.mark.parametrize("order", [SortOrder.ASC, SortOrder.DESC])
def test_sort_is_stable(order: SortOrder) -> None:
    table = [
        build_row("first", namespace="ns"),
        build_row("second", namespace="ns"),
        build_row("third", namespace="ns"),
    ]
    sort_table(table, order, "namespace")
    assert names(table) == ["first", "second", "third"]


def test_sort_is_idempotent() -> None:
    table = [
        build_row("b", namespace="n1", cpu_difference=1.0),
        build_row("a", namespace="n1", cpu_difference=1.0),
        build_row("c", namespace="n0"),
    ]
    sort_table(table, SortOrder.DESC, "namespace", "cpu-diff")
    once = names(table)
    sort_table(table, SortOrder.DESC, "namespace", "cpu-diff")
    assert names(table) == once


def test_sort_by_multiple_columns() -> None:
    table = [
        build_row("b", namespace="n2"),
        build_row("a", namespace="n2"),
        build_row("c", namespace="n1"),
    ]
    sort_table(table, SortOrder.ASC, "namespace", "name")
    assert names(table) == ["c", "a", "b"]


def test_sort_unknown_columns_are_ignored() -> None:
    table = [build_row("b"), build_row("a")]
    sort_table(table, SortOrder.ASC, "bogus")
    assert names(table) == ["b", "a"]
    sort_table(table, SortOrder.ASC, "bogus", "name")
    assert names(table) == ["a", "b"]


def test_sort_unset_difference_last_ascending() -> None:
    table = [
        build_row("unset"),
        build_row("high", cpu_difference=5.0),
        build_row("low", cpu_difference=-3.0),
    ]
    sort_table(table, SortOrder.ASC, "cpu-diff")
    assert names(table) == ["low", "high", "unset"]
    sort_table(table, SortOrder.DESC, "cpu-diff")
    assert names(table) == ["unset", "high", "low"]


def test_sort_nan_difference_first_ascending() -> None:
    table = [
        build_row("number", cpu_difference=5.0),
        build_row("unset"),
        build_row("nan", cpu_difference=NAN),
    ]
    sort_table(table, SortOrder.ASC, "cpu-diff")
    assert names(table) == ["nan", "number", "unset"]


def test_sort_unset_quantity_last_ascending() -> None:
    table = [
        build_row("unset"),
        build_row("one", cpu_request="1"),
        build_row("half", cpu_request="500m"),
    ]
    sort_table(table, SortOrder.ASC, "cpu-req")
    assert names(table) == ["half", "one", "unset"]


def test_sort_keeps_children_with_parent() -> None:
    children = [build_row("z-container"), build_row("a-container")]
    table = [
        build_row("b", children=children),
        build_row("a"),
    ]
    sort_table(table, SortOrder.ASC, "name")
    assert names(table) == ["a", "b"]
    assert names(table[1].children) == ["z-container", "a-container"]


def test_multi_column_sorter_compare() -> None:
    sorter = MultiColumnSorter(column_comparators(["name"]), SortOrder.ASC)
    a, b = build_row("a"), build_row("b")
    assert sorter.less(a, b) is True
    assert sorter.less(b, a) is False
    assert sorter.compare(a, a) == 0
    assert sorter.compare(b, a) == 1
