"""
Unit Tests for dashboard display formatting.
"""

from decimal import Decimal

import pytest

from modules.kursverwaltung.services.formatting import (
    EMPTY,
    format_date,
    format_price,
    format_revenue,
)


class TestFormatDate:
    """Tests for format_date()."""

    @pytest.mark.parametrize("value,expected", [
        ("2024-03-01", "01.03.2024"),
        ("2024-03-01T09:30:00", "01.03.2024"),
        ("2024-12-24 18:00", "24.12.2024"),
    ])
    def test_iso_values(self, value, expected):
        assert format_date(value) == expected

    def test_empty(self):
        assert format_date(None) == EMPTY
        assert format_date("") == EMPTY

    def test_unparsable_returned_unchanged(self):
        assert format_date("nächste Woche") == "nächste Woche"


class TestFormatMoney:
    """Tests for price and revenue formatting."""

    def test_price_two_decimals(self):
        assert format_price(Decimal("299")) == "299.00 €"
        assert format_price(12.5) == "12.50 €"

    def test_price_missing(self):
        assert format_price(None) == EMPTY

    def test_revenue_whole_euros(self):
        assert format_revenue(Decimal("250.00")) == "250 €"
        assert format_revenue(Decimal("0")) == "0 €"

    @pytest.mark.parametrize("value,expected", [
        (Decimal("0.125"), "0.13 €"),
        (0.125, "0.13 €"),
        (Decimal("19.995"), "20.00 €"),
        (Decimal("0.124"), "0.12 €"),
    ])
    def test_price_ties_round_up(self, value, expected):
        assert format_price(value) == expected

    @pytest.mark.parametrize("value,expected", [
        (Decimal("24.5"), "25 €"),
        (Decimal("2.5"), "3 €"),
        (Decimal("24.49"), "24 €"),
    ])
    def test_revenue_ties_round_up(self, value, expected):
        assert format_revenue(value) == expected
