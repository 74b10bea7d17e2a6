"""Monthly reading reconciliation.

Pure functions over already-fetched units and readings: per-unit completion
status, aggregate consumption, month-over-month change and top consumers.
Nothing here touches the record store; status is always derived from the
ledger passed in, never cached.
"""

from collections.abc import Iterable, Sequence
from datetime import date, datetime
from decimal import Decimal

from condoflow.models.enums import UtilityType
from condoflow.schemas.reading import ReadingResponse
from condoflow.schemas.reconciliation import (
    MonthSummary,
    RankingEntry,
    ReferenceMonth,
    UnitStatus,
    UnitStatusEntry,
    UtilitySummary,
)
from condoflow.schemas.unit import UnitResponse
from condoflow.services.ordering import sort_units, unit_label

RANKING_SIZE = 3
UNKNOWN_UNIT_LABEL = "?"


def readings_in_month(
    readings: Iterable[ReadingResponse],
    reference: ReferenceMonth,
) -> list[ReadingResponse]:
    """Readings whose date falls in the reference month."""
    return [r for r in readings if reference.contains(r.date)]


def unit_status(
    unit: UnitResponse,
    readings: Iterable[ReadingResponse],
    reference: ReferenceMonth,
) -> UnitStatus:
    """Completion of one unit: a utility counts once its reading has a current value."""
    recorded = {
        r.type
        for r in readings_in_month(readings, reference)
        if r.unit_id == unit.id and r.current_value is not None
    }
    return UnitStatus(
        has_water=UtilityType.WATER in recorded,
        has_gas=UtilityType.GAS in recorded,
    )


def reconcile_units(
    units: Iterable[UnitResponse],
    readings: Iterable[ReadingResponse],
    reference: ReferenceMonth,
) -> list[UnitStatusEntry]:
    """Status of every unit for the month, in canonical unit order."""
    month_readings = readings_in_month(readings, reference)
    return [
        UnitStatusEntry(
            unit=unit,
            label=unit_label(unit),
            status=unit_status(unit, month_readings, reference),
        )
        for unit in sort_units(units)
    ]


def completion_percent(entries: Sequence[UnitStatusEntry]) -> Decimal:
    """Share of complete units, 0 when there are no units."""
    if not entries:
        return Decimal("0")
    complete = sum(1 for entry in entries if entry.status.is_complete)
    return Decimal(100) * complete / len(entries)


def _counted(reading: ReadingResponse) -> bool:
    # A current value of 0 is falsy and is left out, same as an absent one.
    return bool(reading.current_value)


def total_consumption(
    readings: Iterable[ReadingResponse],
    utility_type: UtilityType,
    reference: ReferenceMonth,
) -> Decimal:
    """Sum of current - previous for the utility's readings in the month."""
    return sum(
        (
            r.current_value - r.previous_value  # type: ignore[operator]
            for r in readings_in_month(readings, reference)
            if r.type == utility_type and _counted(r)
        ),
        Decimal("0"),
    )


def change_percent(current: Decimal, previous: Decimal) -> Decimal:
    """Month-over-month change in percent.

    Defined as 0 when the previous total is 0, which also hides a real
    increase from a zero baseline.
    """
    if previous == 0:
        return Decimal("0")
    return (current - previous) / previous * 100


def rank_units(
    units: Iterable[UnitResponse],
    readings: Iterable[ReadingResponse],
    utility_type: UtilityType,
    reference: ReferenceMonth,
    limit: int = RANKING_SIZE,
) -> list[RankingEntry]:
    """Top consumers of a utility in the month, highest first.

    Ties keep the order in which the readings were given.
    """
    units_by_id = {unit.id: unit for unit in units}
    usage: list[RankingEntry] = []
    for r in readings_in_month(readings, reference):
        if r.type != utility_type or not _counted(r):
            continue
        unit = units_by_id.get(r.unit_id)
        usage.append(
            RankingEntry(
                unit_id=r.unit_id,
                unit_label=unit_label(unit) if unit else UNKNOWN_UNIT_LABEL,
                consumption=r.current_value - r.previous_value,  # type: ignore[operator]
            )
        )
    usage.sort(key=lambda entry: entry.consumption, reverse=True)
    return usage[:limit]


def summarize_utility(
    units: Sequence[UnitResponse],
    readings: Sequence[ReadingResponse],
    utility_type: UtilityType,
    reference: ReferenceMonth,
) -> UtilitySummary:
    """Totals, change against the previous month and ranking for one utility."""
    current = total_consumption(readings, utility_type, reference)
    previous = total_consumption(readings, utility_type, reference.previous())
    return UtilitySummary(
        type=utility_type,
        total=current,
        previous_total=previous,
        change_percent=change_percent(current, previous),
        ranking=rank_units(units, readings, utility_type, reference),
    )


def summarize_month(
    units: Sequence[UnitResponse],
    readings: Sequence[ReadingResponse],
    reference: ReferenceMonth,
) -> MonthSummary:
    """Full reconciliation of a reference month.

    ``readings`` must cover the reference month and the one before it for the
    change percentages to be meaningful.
    """
    entries = reconcile_units(units, readings, reference)
    return MonthSummary(
        reference=reference,
        water=summarize_utility(units, readings, UtilityType.WATER, reference),
        gas=summarize_utility(units, readings, UtilityType.GAS, reference),
        completion_percent=completion_percent(entries),
        units_total=len(entries),
        units_complete=sum(1 for e in entries if e.status.is_complete),
        units_partial=sum(1 for e in entries if e.status.is_partial),
        units_pending=sum(1 for e in entries if e.status.is_pending),
    )


def default_reference_month(
    readings: Iterable[ReadingResponse],
    today: date | datetime,
) -> ReferenceMonth:
    """Month of the most recent reading, or today's month with an empty ledger."""
    latest = max((r.date for r in readings), default=None)
    return ReferenceMonth.of(latest or today)


def previous_value_for(
    readings: Iterable[ReadingResponse],
    unit_id: int,
    utility_type: UtilityType,
    before: datetime,
) -> Decimal:
    """Starting value for a new reading: the latest earlier reading's meter value.

    Uses that reading's current value, falling back to its previous value,
    and 0 when the unit has no earlier reading of this utility.
    """
    earlier = [
        r
        for r in readings
        if r.unit_id == unit_id and r.type == utility_type and r.date < before
    ]
    if not earlier:
        return Decimal("0")
    latest = max(earlier, key=lambda r: r.date)
    return latest.current_value or latest.previous_value
