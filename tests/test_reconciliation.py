"""Tests for the reconciliation engine."""

from datetime import datetime
from decimal import Decimal

import pytest
from factories import reading_entity, unit_entity

from condoflow.models.enums import UtilityType
from condoflow.schemas.reconciliation import ReferenceMonth, UnitStatus
from condoflow.services.reconciliation import (
    change_percent,
    completion_percent,
    default_reference_month,
    previous_value_for,
    rank_units,
    reconcile_units,
    summarize_month,
    total_consumption,
    unit_status,
)

WATER = UtilityType.WATER
GAS = UtilityType.GAS
JAN_2026 = ReferenceMonth(month=1, year=2026)


class TestReferenceMonth:
    """Calendar arithmetic of the reference month."""

    def test_bounds(self) -> None:
        """Test the first instant and the exclusive end."""
        assert JAN_2026.start == datetime(2026, 1, 1)
        assert JAN_2026.end == datetime(2026, 2, 1)

    def test_previous_and_next_wrap_years(self) -> None:
        """Test December and January neighbours."""
        assert JAN_2026.previous() == ReferenceMonth(month=12, year=2025)
        assert ReferenceMonth(month=12, year=2025).next() == JAN_2026

    def test_label(self) -> None:
        """Test the Portuguese month label."""
        assert JAN_2026.label == "Janeiro de 2026"
        assert ReferenceMonth(month=3, year=2026).label == "Março de 2026"

    def test_contains(self) -> None:
        """Test membership of the last minute and the next month."""
        assert JAN_2026.contains(datetime(2026, 1, 31, 23, 59))
        assert not JAN_2026.contains(datetime(2026, 2, 1))


class TestUnitStatus:
    """Status is derived from the month's readings and is always exactly one state."""

    @pytest.mark.parametrize(
        ("has_water", "has_gas", "expected"),
        [
            (True, True, "complete"),
            (True, False, "partial"),
            (False, True, "partial"),
            (False, False, "pending"),
        ],
    )
    def test_states_are_exclusive_and_exhaustive(self, has_water, has_gas, expected) -> None:
        """Test each combination of water and gas readings."""
        status = UnitStatus(has_water=has_water, has_gas=has_gas)
        flags = [status.is_complete, status.is_partial, status.is_pending]
        assert flags.count(True) == 1
        assert status.status == expected

    def test_water_and_gas_recorded_is_complete(self) -> None:
        """Water 10 -> 12.5 and gas 3 -> 4.25 in the month."""
        unit = unit_entity(1, "101", "A")
        readings = [
            reading_entity(1, 1, WATER, "10", "12.5", datetime(2026, 1, 5)),
            reading_entity(2, 1, GAS, "3", "4.25", datetime(2026, 1, 5)),
        ]
        assert unit_status(unit, readings, JAN_2026).is_complete
        assert readings[0].consumption == Decimal("2.5")
        assert readings[1].consumption == Decimal("1.25")

    def test_other_months_are_ignored(self) -> None:
        """Test that readings from another month do not count."""
        unit = unit_entity(1, "101", "A")
        readings = [reading_entity(1, 1, WATER, "10", "12", datetime(2025, 12, 30))]
        assert unit_status(unit, readings, JAN_2026).is_pending

    def test_reading_without_current_value_does_not_count(self) -> None:
        """Test that a pending reading leaves its utility missing."""
        unit = unit_entity(1, "101", "A")
        readings = [
            reading_entity(1, 1, WATER, "10", None, datetime(2026, 1, 5)),
            reading_entity(2, 1, GAS, "3", "4", datetime(2026, 1, 5)),
        ]
        status = unit_status(unit, readings, JAN_2026)
        assert status.is_partial
        assert status.has_gas and not status.has_water

    def test_reconcile_units_in_canonical_order(self) -> None:
        """Test that entries follow the canonical unit order."""
        units = [unit_entity(1, "2", "A"), unit_entity(2, "COND"), unit_entity(3, "1", "B")]
        entries = reconcile_units(units, [], JAN_2026)
        assert [e.label for e in entries] == ["COND", "2 A", "1 B"]


class TestCompletionPercent:
    """Share of complete units in a month."""

    def test_no_units(self) -> None:
        """Test completion with no units."""
        assert completion_percent([]) == 0

    def test_share_of_complete_units(self) -> None:
        """Test completion as the share of complete units."""
        units = [unit_entity(i, str(100 + i), "A") for i in range(1, 5)]
        when = datetime(2026, 1, 10)
        readings = [
            reading_entity(1, 1, WATER, "0", "1", when),
            reading_entity(2, 1, GAS, "0", "1", when),
            reading_entity(3, 2, WATER, "0", "1", when),
        ]
        entries = reconcile_units(units, readings, JAN_2026)
        assert completion_percent(entries) == Decimal(25)


class TestConsumption:
    """Monthly consumption totals."""

    def test_total_sums_month_and_type(self) -> None:
        """Test the sum over one type within the month."""
        readings = [
            reading_entity(1, 1, WATER, "10", "12.5", datetime(2026, 1, 5)),
            reading_entity(2, 2, WATER, "20", "21", datetime(2026, 1, 6)),
            reading_entity(3, 1, GAS, "3", "4.25", datetime(2026, 1, 5)),
            reading_entity(4, 1, WATER, "5", "9", datetime(2025, 12, 5)),
        ]
        assert total_consumption(readings, WATER, JAN_2026) == Decimal("3.5")
        assert total_consumption(readings, GAS, JAN_2026) == Decimal("1.25")

    def test_zero_current_value_is_excluded(self) -> None:
        """A saved current value of 0 is left out of the aggregate like an absent one."""
        readings = [
            reading_entity(1, 1, WATER, "10", "0", datetime(2026, 1, 5)),
            reading_entity(2, 2, WATER, "10", "11", datetime(2026, 1, 5)),
        ]
        assert total_consumption(readings, WATER, JAN_2026) == Decimal("1")

    def test_empty_month(self) -> None:
        """Test the total of a month without readings."""
        assert total_consumption([], GAS, JAN_2026) == 0


class TestChangePercent:
    """Month over month change."""

    def test_increase(self) -> None:
        """Test a rise against the previous month."""
        assert change_percent(Decimal("15"), Decimal("10")) == Decimal("50")

    def test_decrease(self) -> None:
        """Test a drop against the previous month."""
        assert change_percent(Decimal("5"), Decimal("10")) == Decimal("-50")

    @pytest.mark.parametrize("current", [Decimal("0"), Decimal("5")])
    def test_zero_previous_is_zero(self, current) -> None:
        """Test that a zero baseline gives zero change."""
        assert change_percent(current, Decimal("0")) == 0


class TestRanking:
    """Top consumers of a utility."""

    def _readings(self):
        when = datetime(2026, 1, 10)
        return [
            reading_entity(1, 1, WATER, "0", "2", when),
            reading_entity(2, 2, WATER, "0", "5", when),
            reading_entity(3, 3, WATER, "0", "5", when),
            reading_entity(4, 4, WATER, "0", "1", when),
            reading_entity(5, 5, WATER, "0", "3", when),
            reading_entity(6, 1, GAS, "0", "9", when),
        ]

    def test_top_three_non_increasing(self) -> None:
        """Test that at most three units rank, highest first."""
        units = [unit_entity(i, str(100 + i), "A") for i in range(1, 6)]
        ranking = rank_units(units, self._readings(), WATER, JAN_2026)
        assert len(ranking) == 3
        assert [r.consumption for r in ranking] == [Decimal(5), Decimal(5), Decimal(3)]

    def test_ties_keep_input_order(self) -> None:
        """Test that tied units keep their input order."""
        units = [unit_entity(i, str(100 + i), "A") for i in range(1, 6)]
        ranking = rank_units(units, self._readings(), WATER, JAN_2026)
        assert [r.unit_id for r in ranking[:2]] == [2, 3]

    def test_only_units_with_readings_of_the_type(self) -> None:
        """Test that only units with readings of the type rank."""
        units = [unit_entity(i, str(100 + i), "A") for i in range(1, 6)]
        ranking = rank_units(units, self._readings(), GAS, JAN_2026)
        assert [(r.unit_label, r.consumption) for r in ranking] == [("101 A", Decimal(9))]

    def test_unknown_unit_gets_placeholder_label(self) -> None:
        """Test the label of a reading whose unit is gone."""
        readings = [reading_entity(1, 42, WATER, "0", "1", datetime(2026, 1, 10))]
        assert rank_units([], readings, WATER, JAN_2026)[0].unit_label == "?"


class TestSummarizeMonth:
    """Dashboard summary of a month."""

    def test_summary_against_previous_month(self) -> None:
        """Test a month summary against December."""
        units = [unit_entity(1, "101", "A"), unit_entity(2, "102", "A")]
        readings = [
            reading_entity(1, 1, WATER, "0", "10", datetime(2025, 12, 5)),
            reading_entity(2, 1, WATER, "10", "25", datetime(2026, 1, 5)),
            reading_entity(3, 1, GAS, "0", "2", datetime(2026, 1, 5)),
            reading_entity(4, 2, WATER, "0", None, datetime(2026, 1, 6)),
        ]
        summary = summarize_month(units, readings, JAN_2026)

        assert summary.water.total == Decimal("15")
        assert summary.water.previous_total == Decimal("10")
        assert summary.water.change_percent == Decimal("50")
        assert summary.gas.change_percent == 0  # zero baseline
        assert summary.units_total == 2
        assert summary.units_complete == 1
        assert summary.units_pending == 1
        assert summary.units_partial == 0
        assert summary.completion_percent == Decimal(50)


class TestDefaults:
    """Default month and carried-over previous values."""

    def test_default_month_is_latest_reading(self) -> None:
        """Test the month of the latest reading."""
        readings = [
            reading_entity(1, 1, WATER, "0", "1", datetime(2023, 9, 5)),
            reading_entity(2, 1, WATER, "1", "2", datetime(2026, 1, 18)),
        ]
        assert default_reference_month(readings, datetime(2026, 10, 1)) == JAN_2026

    def test_default_month_with_empty_ledger(self) -> None:
        """Test today's month for an empty ledger."""
        assert default_reference_month([], datetime(2026, 10, 19)) == ReferenceMonth(
            month=10, year=2026
        )

    def test_previous_value_from_latest_earlier_reading(self) -> None:
        """Test the current value of the latest earlier reading."""
        readings = [
            reading_entity(1, 1, WATER, "10", "12.5", datetime(2023, 9, 5)),
            reading_entity(2, 1, WATER, "12.5", "14.2", datetime(2023, 10, 2)),
            reading_entity(3, 1, GAS, "3", "4.25", datetime(2023, 10, 3)),
        ]
        assert previous_value_for(readings, 1, WATER, datetime(2023, 11, 1)) == Decimal("14.2")

    def test_previous_value_falls_back_to_previous(self) -> None:
        """Test the previous value of a pending earlier reading."""
        readings = [reading_entity(1, 1, GAS, "7", None, datetime(2023, 9, 5))]
        assert previous_value_for(readings, 1, GAS, datetime(2023, 10, 1)) == Decimal("7")

    def test_previous_value_without_history(self) -> None:
        """Test zero for a unit without history."""
        assert previous_value_for([], 1, GAS, datetime(2023, 10, 1)) == 0
