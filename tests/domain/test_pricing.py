"""Tests for duka.domain.pricing pure functions."""

import pytest

from duka.domain.models import ItemName, Money, Quantity
from duka.domain.pricing import (
    VAT_RATE,
    PricedLine,
    TaxedLine,
    build_sale_line,
    calculate_change,
    calculate_sale_subtotal,
    calculate_sale_total,
    calculate_sale_totals,
    calculate_sale_vat_total,
    calculate_total_price,
    calculate_vat,
    format_money_display,
    parse_amount,
    parse_quantity,
    parse_sale_row,
    round_half_up,
)


class TestCalculateVat:
    """Tests for calculate_vat."""

    def test_default_rate_is_sixteen_percent(self) -> None:
        """Should charge 16% by default."""
        assert VAT_RATE == 0.16
        assert calculate_vat(100) == pytest.approx(16.0)

    def test_is_not_rounded(self) -> None:
        """Should keep fractional shillings."""
        assert calculate_vat(10) == pytest.approx(1.6)

    def test_zero_price(self) -> None:
        """Should be zero for a free item."""
        assert calculate_vat(0) == 0

    def test_negative_price_propagates(self) -> None:
        """Should not reject negative prices."""
        assert calculate_vat(-50) == pytest.approx(-8.0)

    def test_injected_rate(self) -> None:
        """Should use the rate passed in."""
        assert calculate_vat(100, vat_rate=0.08) == pytest.approx(8.0)
        assert calculate_vat(100, vat_rate=0.0) == 0


class TestRoundHalfUp:
    """Tests for round_half_up."""

    def test_halves_round_up(self) -> None:
        """Should round .5 upward, unlike banker's rounding."""
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(0.5) == 1

    def test_negative_halves_round_towards_positive(self) -> None:
        """Should round -2.5 up to -2."""
        assert round_half_up(-2.5) == -2

    def test_rounds_to_nearest(self) -> None:
        """Should round to the nearest whole shilling."""
        assert round_half_up(40.6) == 41
        assert round_half_up(2.4999) == 2
        assert round_half_up(7.0) == 7

    def test_returns_int(self) -> None:
        """Should return an int, not a float."""
        assert isinstance(round_half_up(40.6), int)


class TestCalculateTotalPrice:
    """Tests for calculate_total_price."""

    def test_adds_vat_and_rounds(self) -> None:
        """Should add VAT and round to whole shillings."""
        assert calculate_total_price(100) == 116
        assert calculate_total_price(10) == 12  # 11.6
        assert calculate_total_price(3) == 3  # 3.48

    def test_returns_int(self) -> None:
        """Should return whole shillings."""
        assert isinstance(calculate_total_price(250), int)
        assert calculate_total_price(250) == 290

    def test_zero_price(self) -> None:
        """Should be zero for a free item."""
        assert calculate_total_price(0) == 0

    def test_injected_rate(self) -> None:
        """Should use the rate passed in."""
        assert calculate_total_price(100, vat_rate=0.08) == 108
        assert calculate_total_price(100, vat_rate=0.0) == 100


class TestCalculateSaleSubtotal:
    """Tests for calculate_sale_subtotal."""

    def test_empty_sale(self) -> None:
        """Should be zero for no lines."""
        assert calculate_sale_subtotal([]) == 0

    def test_sums_price_times_quantity(self) -> None:
        """Should sum base_price * quantity."""
        items = [
            PricedLine(base_price=10, quantity=2),
            PricedLine(base_price=5, quantity=3),
        ]
        assert calculate_sale_subtotal(items) == 35

    def test_keeps_fractions(self) -> None:
        """Should not round the running sum."""
        items = [PricedLine(base_price=12.25, quantity=2)]
        assert calculate_sale_subtotal(items) == pytest.approx(24.5)

    def test_accepts_generator(self) -> None:
        """Should accept any iterable of lines."""
        items = (PricedLine(base_price=price, quantity=1) for price in (1, 2, 3))
        assert calculate_sale_subtotal(items) == 6


class TestCalculateSaleVatTotal:
    """Tests for calculate_sale_vat_total."""

    def test_empty_sale(self) -> None:
        """Should be zero for no lines."""
        assert calculate_sale_vat_total([]) == 0

    def test_sums_vat_times_quantity(self) -> None:
        """Should sum vat_amount * quantity."""
        items = [
            TaxedLine(vat_amount=1.6, quantity=2),
            TaxedLine(vat_amount=0.8, quantity=3),
        ]
        assert calculate_sale_vat_total(items) == pytest.approx(5.6)

    def test_uses_supplied_vat_amount(self) -> None:
        """Should not recompute VAT, so exempt lines can carry zero."""
        items = [
            TaxedLine(vat_amount=0, quantity=10),
            TaxedLine(vat_amount=16, quantity=1),
        ]
        assert calculate_sale_vat_total(items) == 16


class TestCalculateSaleTotal:
    """Tests for calculate_sale_total."""

    def test_rounds_to_whole_shillings(self) -> None:
        """Should round subtotal + VAT."""
        assert calculate_sale_total(35, 5.6) == 41

    def test_half_rounds_up(self) -> None:
        """Should round a half shilling up."""
        assert calculate_sale_total(40, 0.5) == 41

    def test_returns_int(self) -> None:
        """Should return an int."""
        assert isinstance(calculate_sale_total(35, 5.6), int)


class TestCalculateChange:
    """Tests for calculate_change."""

    def test_overpayment(self) -> None:
        """Should return the difference."""
        assert calculate_change(50, 41) == 9

    def test_exact_payment(self) -> None:
        """Should return zero for exact payment."""
        assert calculate_change(41, 41) == 0

    def test_short_payment_clamped(self) -> None:
        """Should never go negative."""
        assert calculate_change(30, 41) == 0

    def test_fractional_payment(self) -> None:
        """Should keep fractional change."""
        assert calculate_change(50.5, 41) == pytest.approx(9.5)


class TestBuildSaleLine:
    """Tests for build_sale_line."""

    def test_prices_line(self) -> None:
        """Should attach per-unit VAT and VAT-inclusive price."""
        line = build_sale_line(ItemName("Chapati"), Money(50), Quantity(2))

        assert line.name == "Chapati"
        assert line.base_price == 50
        assert line.quantity == 2
        assert line.vat_amount == pytest.approx(8.0)
        assert line.total_price == 58

    def test_injected_rate(self) -> None:
        """Should use the rate passed in."""
        line = build_sale_line(ItemName("Water"), Money(100), Quantity(1), vat_rate=0.0)

        assert line.vat_amount == 0
        assert line.total_price == 100


class TestCalculateSaleTotals:
    """Tests for calculate_sale_totals."""

    def test_totals_with_payment(self) -> None:
        """Should compose subtotal, VAT, total and change."""
        lines = [
            build_sale_line(ItemName("Chapati"), Money(50), Quantity(2)),
            build_sale_line(ItemName("Beef Stew"), Money(120), Quantity(1)),
        ]
        totals = calculate_sale_totals(lines, Money(300))

        assert totals.subtotal == pytest.approx(220)
        assert totals.vat_total == pytest.approx(35.2)
        assert totals.total == 255
        assert totals.amount_paid == 300
        assert totals.change == 45

    def test_totals_without_payment(self) -> None:
        """Should report no change when nothing has been paid."""
        lines = [build_sale_line(ItemName("Chai"), Money(30), Quantity(1))]
        totals = calculate_sale_totals(lines)

        assert totals.total == 35  # 34.8
        assert totals.amount_paid is None
        assert totals.change == 0

    def test_short_payment(self) -> None:
        """Should clamp change to zero when underpaid."""
        lines = [build_sale_line(ItemName("Chai"), Money(30), Quantity(1))]
        totals = calculate_sale_totals(lines, Money(20))

        assert totals.change == 0

    def test_empty_sale(self) -> None:
        """Should total zero for an empty cart."""
        totals = calculate_sale_totals([])

        assert totals.subtotal == 0
        assert totals.vat_total == 0
        assert totals.total == 0


class TestParseSaleRow:
    """Tests for parse_sale_row."""

    def test_parses_row(self) -> None:
        """Should parse name, price and quantity."""
        line = parse_sale_row({"name": "Pilau", "price": "KSH 1,000", "quantity": "3"})

        assert line is not None
        assert line.name == "Pilau"
        assert line.base_price == 1000
        assert line.quantity == 3
        assert line.total_price == 1160

    def test_quantity_defaults_to_one(self) -> None:
        """Should assume a single unit when quantity is missing."""
        line = parse_sale_row({"name": "Soda", "price": "60"})

        assert line is not None
        assert line.quantity == 1

    def test_missing_name_uses_unknown(self) -> None:
        """Should default to 'Unknown' for empty name."""
        line = parse_sale_row({"name": "", "price": "60", "quantity": "1"})

        assert line is not None
        assert line.name == "Unknown"

    def test_uses_injected_rate(self) -> None:
        """Should price with the rate passed in."""
        line = parse_sale_row({"name": "Bread", "price": "100", "quantity": "1"}, vat_rate=0.0)

        assert line is not None
        assert line.total_price == 100

    def test_skips_missing_price(self) -> None:
        """Should return None when price is empty."""
        assert parse_sale_row({"name": "Soda", "price": "", "quantity": "1"}) is None
        assert parse_sale_row({"name": "Soda"}) is None

    def test_skips_invalid_numbers(self) -> None:
        """Should return None for non-numeric price or quantity."""
        assert parse_sale_row({"name": "Soda", "price": "free", "quantity": "1"}) is None
        assert parse_sale_row({"name": "Soda", "price": "60", "quantity": "many"}) is None

    def test_skips_non_finite_price(self) -> None:
        """Should return None for an infinite or NaN price."""
        assert parse_sale_row({"name": "Soda", "price": "inf", "quantity": "1"}) is None
        assert parse_sale_row({"name": "Soda", "price": "nan", "quantity": "1"}) is None
        assert parse_sale_row({"name": "Soda", "price": "1e400", "quantity": "1"}) is None

    def test_skips_non_finite_quantity(self) -> None:
        """Should return None for an infinite or NaN quantity."""
        assert parse_sale_row({"name": "Soda", "price": "60", "quantity": "inf"}) is None
        assert parse_sale_row({"name": "Soda", "price": "60", "quantity": "-inf"}) is None
        assert parse_sale_row({"name": "Soda", "price": "60", "quantity": "nan"}) is None


class TestParseAmount:
    """Tests for parse_amount."""

    def test_strips_currency_and_separators(self) -> None:
        """Should accept KSH/KES labels and thousands separators."""
        assert parse_amount("KSH 1,250.50") == 1250.5
        assert parse_amount("kes 40") == 40

    def test_rejects_non_finite(self) -> None:
        """Should raise ValueError for infinity and NaN."""
        for raw in ("inf", "-inf", "nan", "Infinity"):
            with pytest.raises(ValueError):
                parse_amount(raw)


class TestParseQuantity:
    """Tests for parse_quantity."""

    def test_whole_and_decimal_counts(self) -> None:
        """Should truncate decimal counts to whole units."""
        assert parse_quantity("3") == 3
        assert parse_quantity(" 2.0 ") == 2

    def test_rejects_non_finite(self) -> None:
        """Should raise ValueError rather than OverflowError for infinity."""
        for raw in ("inf", "-inf", "nan"):
            with pytest.raises(ValueError):
                parse_quantity(raw)

    def test_rejects_text(self) -> None:
        """Should raise ValueError for text that is not a number."""
        with pytest.raises(ValueError):
            parse_quantity("many")


class TestFormatMoneyDisplay:
    """Tests for format_money_display."""

    def test_whole_shillings(self) -> None:
        """Should drop decimals for whole amounts."""
        assert format_money_display(41) == "KSH 41"
        assert format_money_display(116.0) == "KSH 116"

    def test_fractional_amount(self) -> None:
        """Should show two decimals with thousands separators."""
        assert format_money_display(1234.5) == "KSH 1,234.50"

    def test_custom_currency(self) -> None:
        """Should use the currency label passed in."""
        assert format_money_display(1000, "KES") == "KES 1,000"
