from decimal import Decimal

import pytest

from app.shared.services.currency_service import (
    Currency, convert, round_for_display, derive_missing_total,
    cart_total_usd, display_amounts, to_decimal, fits_storage
)


class TestConversion:
    """USD -> moneda local sin redondeo"""

    def test_convert_keeps_full_precision(self):
        assert convert(Decimal("1.2345"), Decimal("3650")) == Decimal("4505.9250")

    def test_convert_float_input_goes_through_str(self):
        assert convert(0.1, 3) == Decimal("0.3")

    def test_to_decimal_none_is_zero(self):
        assert to_decimal(None) == Decimal("0")


class TestDisplayRounding:

    def test_cop_has_no_decimals(self):
        assert round_for_display(Decimal("4505.5"), Currency.COP) == Decimal("4506")

    def test_usd_rounds_half_up(self):
        assert round_for_display(Decimal("1.005"), "USD") == Decimal("1.01")

    def test_unknown_currency_rejected(self):
        with pytest.raises(ValueError):
            round_for_display(Decimal("1"), "EUR")

    def test_display_amounts_returns_floats(self):
        shown = display_amounts(Decimal("1.095890"), Decimal("4000.4"), Decimal("569.8628"))
        assert shown == {"usd": 1.1, "cop": 4000.0, "ves": 569.86}


class TestDeriveMissingTotal:
    """Parche de presentación para ventas sin total local"""

    def test_zero_stored_total_is_derived(self):
        assert derive_missing_total(0, Decimal("2"), Decimal("3650")) == Decimal("7300")

    def test_stored_total_wins(self):
        assert derive_missing_total(Decimal("7000"), Decimal("2"), Decimal("3650")) == Decimal("7000")

    def test_zero_usd_stays_zero(self):
        assert derive_missing_total(0, 0, Decimal("3650")) == Decimal("0")


class TestStoragePrecision:

    def test_usd_keeps_two_places(self):
        assert fits_storage(Decimal("0.01"), Currency.USD)
        assert fits_storage(Decimal("2.500"), Currency.USD)
        assert not fits_storage(Decimal("0.004"), Currency.USD)

    def test_local_currencies_keep_four_places(self):
        assert fits_storage(Decimal("3650.1234"), "COP")
        assert not fits_storage(Decimal("3650.12345"), "VES")


def test_cart_total_usd():
    lines = [(Decimal("1.00"), 3), ("2.50", 2)]
    assert cart_total_usd(lines) == Decimal("8.00")
