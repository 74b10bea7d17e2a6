"""Canonical unit ordering and display labels.

Units whose number is not an integer ("COND. AB", "SALÃO") come first, in
lexicographic order. Numeric units follow, grouped by block (A before B) and
ordered numerically inside a block.
"""

import re
from collections.abc import Iterable, Mapping
from functools import cmp_to_key

from condoflow.schemas.reading import ReadingResponse
from condoflow.schemas.unit import UnitResponse

_LEADING_INTEGER = re.compile(r"^\s*([+-]?\d+)")


def parse_unit_number(number: str) -> int | None:
    """Integer prefix of a unit number, or None when it does not start with one.

    "101" -> 101, "12B" -> 12, "COND. AB" -> None.
    """
    match = _LEADING_INTEGER.match(number or "")
    if not match:
        return None
    return int(match.group(1))


def is_numeric_unit(unit: UnitResponse) -> bool:
    return parse_unit_number(unit.number) is not None


def unit_label(unit: UnitResponse) -> str:
    """Display label: number and block for numeric units ("101 A"), else the number."""
    if is_numeric_unit(unit):
        return f"{unit.number} {unit.block}"
    return unit.number


def _cmp(a: object, b: object) -> int:
    return (a > b) - (a < b)  # type: ignore[operator]


def compare_units(a: UnitResponse, b: UnitResponse) -> int:
    """Three-way comparison implementing the canonical unit order."""
    num_a = parse_unit_number(a.number)
    num_b = parse_unit_number(b.number)

    if num_a is None and num_b is not None:
        return -1
    if num_a is not None and num_b is None:
        return 1
    if num_a is None and num_b is None:
        return _cmp(a.number, b.number)

    if a.block != b.block:
        return _cmp(a.block, b.block)
    return _cmp(num_a, num_b)


def sort_units(units: Iterable[UnitResponse]) -> list[UnitResponse]:
    """Stable sort in canonical order."""
    return sorted(units, key=cmp_to_key(compare_units))


def sort_readings_by_unit(
    readings: Iterable[ReadingResponse],
    units_by_id: Mapping[int, UnitResponse],
) -> list[ReadingResponse]:
    """Order readings by their unit; a reading with an unknown unit compares equal."""

    def compare(a: ReadingResponse, b: ReadingResponse) -> int:
        unit_a = units_by_id.get(a.unit_id)
        unit_b = units_by_id.get(b.unit_id)
        if unit_a is None or unit_b is None:
            return 0
        return compare_units(unit_a, unit_b)

    return sorted(readings, key=cmp_to_key(compare))
