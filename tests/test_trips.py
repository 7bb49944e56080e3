"""Tests for trip settlement."""

import datetime as dt
from decimal import Decimal

import pytest

from household_ledger.config import LedgerSettings
from household_ledger.ledger import calculate_trip_settlement
from household_ledger.models import (
    Person,
    ProportionType,
    SettlementParty,
    Trip,
    TripDeposit,
    TripExpense,
    TripPayer,
)


def expense(value: str, paid_by: TripPayer, description: str = "") -> TripExpense:
    return TripExpense(description=description, value=Decimal(value), paid_by=paid_by, date=dt.date(2024, 7, 1))


def deposit(value: str, person: Person) -> TripDeposit:
    return TripDeposit(value=Decimal(value), person=person)


class TestTripSettlement:
    """Tests for calculate_trip_settlement."""

    def test_fund_trip(self):
        """Deposits count as given; the fund keeps what wasn't spent."""
        trip = Trip(
            name="Floripa",
            expenses=(expense("1500", TripPayer.PERSON1, "Hotel"), expense("500", TripPayer.FUND, "Food")),
            deposits=(deposit("1000", Person.PERSON1), deposit("1000", Person.PERSON2)),
        )

        result = calculate_trip_settlement(trip, Decimal("0.5"))

        assert result.total_expenses == Decimal("2000")
        assert result.fund_balance == Decimal("1500")
        assert result.total_paid_by_fund == Decimal("500")
        assert result.p1_balance == Decimal("-1500")
        assert result.p2_balance == 0
        assert result.who_owes is SettlementParty.NONE
        assert result.amount_to_settle == 0

    def test_custom_percentage_overrides_ratio(self):
        trip = Trip(
            proportion_type=ProportionType.CUSTOM,
            custom_percentage1=Decimal("70"),
            expenses=(expense("1000", TripPayer.PERSON1),),
        )

        result = calculate_trip_settlement(trip, Decimal("0.5"))

        assert result.p1_responsibility == Decimal("700")
        assert result.p2_responsibility == Decimal("300")
        assert result.who_owes is SettlementParty.PERSON2
        assert result.amount_to_settle == Decimal("300")

    def test_custom_without_percentage_uses_ratio(self):
        trip = Trip(proportion_type=ProportionType.CUSTOM, expenses=(expense("1000", TripPayer.PERSON2),))

        result = calculate_trip_settlement(trip, Decimal("0.6"))

        assert result.p1_responsibility == Decimal("600")
        assert result.who_owes is SettlementParty.PERSON1
        assert result.amount_to_settle == Decimal("600")

    @pytest.mark.parametrize("ratio", ["0", "0.3333", "0.5", "0.618", "1"])
    def test_responsibilities_add_up_to_total(self, ratio):
        trip = Trip(expenses=(expense("100.01", TripPayer.PERSON1), expense("33.33", TripPayer.FUND)))

        result = calculate_trip_settlement(trip, Decimal(ratio))

        assert result.p1_responsibility + result.p2_responsibility == result.total_expenses

    def test_one_cent_balance_is_settled(self):
        trip = Trip(expenses=(expense("0.03", TripPayer.PERSON1),))

        result = calculate_trip_settlement(trip, Decimal("0.5"))

        assert result.who_owes is SettlementParty.NONE

    def test_tolerance_from_settings(self):
        trip = Trip(expenses=(expense("0.03", TripPayer.PERSON1),))

        result = calculate_trip_settlement(trip, Decimal("0.5"), LedgerSettings(trip_tolerance=Decimal("0")))

        assert result.who_owes is SettlementParty.PERSON2

    def test_empty_trip(self):
        result = calculate_trip_settlement(Trip(), 0.5)

        assert result.total_expenses == 0
        assert result.fund_balance == 0
        assert result.who_owes is SettlementParty.NONE

    @pytest.mark.parametrize("ratio, expected", [(-0.1, "0"), (1.2, "1000")])
    def test_out_of_range_ratio_is_clamped(self, ratio, expected):
        trip = Trip(expenses=(expense("1000", TripPayer.PERSON1),))

        result = calculate_trip_settlement(trip, ratio)

        assert result.p1_responsibility == Decimal(expected)
        assert result.p1_responsibility + result.p2_responsibility == Decimal("1000")

    def test_custom_trip_ignores_out_of_range_ratio(self):
        """A custom trip never uses the salary ratio, so a bad one can't affect it."""
        trip = Trip(
            proportion_type=ProportionType.CUSTOM,
            custom_percentage1=Decimal("70"),
            expenses=(expense("1000", TripPayer.PERSON1),),
        )

        result = calculate_trip_settlement(trip, 1.2)

        assert result.p1_responsibility == Decimal("700")
        assert result.p2_responsibility == Decimal("300")
