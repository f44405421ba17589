import math

from vpa_recommendation.table.quantity import Quantity


def compare_strings(s1: str, s2: str) -> int:
    return (s1 > s2) - (s1 < s2)


def compare_float(f1: float | None, f2: float | None) -> int:
    """
    Unset values sort after any number, while NaN sorts before any
    number that is not NaN.
    """
    match (f1, f2):
        case (None, None):
            return 0
        case (None, _):
            return 1
        case (_, None):
            return -1
    if f1 == f2:
        return 0
    if f1 < f2 or (math.isnan(f1) and not math.isnan(f2)):  # type: ignore[operator, arg-type]
        return -1
    return 1


def compare_quantities(q1: Quantity | None, q2: Quantity | None) -> int:
    """Unset quantities sort after any set quantity."""
    if q1 is None and q2 is None:
        return 0
    if q1 is None:
        return 1
    if q2 is None:
        return -1
    return q1.cmp(q2)
