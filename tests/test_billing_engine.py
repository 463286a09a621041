"""
Billing engine tests: per-job pricing, display rounding and bill assembly.
"""
from unittest.mock import Mock

import pytest

from xerox_billing.engine import billing_engine
from xerox_billing.engine import Customer, LineItem, PricingPreset, format_amount, format_price
from xerox_billing.exceptions import InvalidPresetError


def test_price_bw_job(engine):
    """5 pages × 2 sets at 1 page/sheet, 1.00/sheet."""
    assert engine.calculate_price("A4 B/W", 5, 2) == 10.0


def test_price_color_job(engine):
    assert engine.calculate_price("A3 Color", 7, 1) == 70.0


def test_unknown_type_prices_zero(engine, monkeypatch):
    logger = Mock()
    monkeypatch.setattr(billing_engine, "logger", logger)

    assert engine.calculate_price("Unknown", 10, 1) == 0
    logger.warning.assert_called_once()


def test_sets_default_to_one(engine):
    assert engine.calculate_price("A4 B/W", 3) == 3.0
    assert engine.calculate_price("A4 B/W", 3, None) == 3.0


def test_partial_sheet_rounds_up(engine, catalog):
    """Duplex-style preset: 3 pages need 2 sheets."""
    catalog.add(PricingPreset("A4 Duplex", pages_per_sheet=2, price_per_sheet=1.5))
    assert engine.calculate_price("A4 Duplex", 3, 1) == 3.0
    assert engine.calculate_price("A4 Duplex", 4, 2) == 6.0


def test_zero_pages_per_sheet_is_rejected():
    with pytest.raises(InvalidPresetError):
        PricingPreset("Broken", pages_per_sheet=0, price_per_sheet=1.0)


def test_corrupted_preset_is_not_divided(engine, catalog):
    """A preset mutated past validation still never divides by zero."""
    catalog.get("A4 B/W").pages_per_sheet = 0
    with pytest.raises(InvalidPresetError):
        engine.calculate_price("A4 B/W", 5, 1)


def test_format_price():
    assert format_price(10.256, False) == "10.26"
    assert format_price(10.256, True) == "11"
    assert format_price(10.0, True) == "10"
    assert format_price(0, False) == "0.00"


def test_format_amount():
    assert format_amount(5) == "5"
    assert format_amount(12.5) == "12.5"
    assert format_amount(None) == "0"


def test_total_applies_tax_after_discount(engine, customer):
    """(10 + 70 - 5) × 1.10"""
    assert engine.calculate_total(customer) == pytest.approx(82.5)

    bill = engine.price_customer(customer)
    assert bill.subtotal == pytest.approx(80.0)
    assert bill.total == pytest.approx(82.5)

    customer.round_total = True
    assert engine.price_customer(customer).formatted_total == "83"


def test_bill_text_template(engine, customer):
    customer.round_total = True
    expected = (
        "Customer: Customer 1\n\n"
        "Notes (A4 B/W, 5 pages, 2 sets): ₹10.00\n"
        "Poster (A3 Color, 7 pages, 1 sets): ₹70.00\n\n"
        "Discount: ₹5\n"
        "Tax: 10%\n"
        "Total: ₹83"
    )
    assert engine.generate_bill_text(customer) == expected


def test_bill_text_is_idempotent(engine, customer):
    assert engine.generate_bill_text(customer) == engine.generate_bill_text(customer)


def test_empty_customer_bill(engine):
    text = engine.generate_bill_text(Customer(name="Walk-in"))
    assert text == "Customer: Walk-in\n\n\n\nDiscount: ₹0\nTax: 0%\nTotal: ₹0.00"


def test_total_uses_unrounded_items(engine, catalog):
    """Rounded items need not add up to the exact total."""
    catalog.add(PricingPreset("Half", pages_per_sheet=1, price_per_sheet=0.4))
    c = Customer(name="Mixed", round_individual=True, round_total=False)
    c.add_item(LineItem(name="a", type="Half", pages=1))
    c.add_item(LineItem(name="b", type="Half", pages=1))

    bill = engine.price_customer(c)
    assert [line.formatted_price for line in bill.lines] == ["1", "1"]
    assert bill.formatted_total == "0.80"


def test_unknown_type_adds_bill_warning(engine):
    c = Customer(name="Odd")
    c.add_item(LineItem(name="Banner", type="Vinyl", pages=3))

    bill = engine.price_customer(c)
    assert bill.total == 0
    assert not bill.lines[0].matched
    assert bill.warnings == ["Unknown job type 'Vinyl' priced at 0"]


def test_catalog_edit_reprices_existing_items(engine, catalog, customer):
    before = engine.calculate_total(customer)
    catalog.update("A3 Color", price_per_sheet=20.0)
    after = engine.calculate_total(customer)
    assert after - before == pytest.approx(70.0 * 1.1)


def test_trace_records_steps(engine, customer):
    bill = engine.price_customer(customer)
    steps = [t.step for t in bill.trace]
    assert steps == ["Line", "Line", "Subtotal", "Discount", "Tax", "Total"]
    assert "Subtotal" in bill.get_trace_text()


def test_export_rows(engine, customer):
    rows = engine.export_rows([customer])
    assert rows == [
        ["Customer 1", "Notes", "A4 B/W", 5, 2, 10.0],
        ["Customer 1", "Poster", "A3 Color", 7, 1, 70.0],
    ]


def test_half_cent_rounds_up(engine, catalog):
    """0.625 is exact in binary and rounds up, like toFixed."""
    assert format_price(0.125, False) == "0.13"
    assert format_price(10.125, False) == "10.13"

    catalog.add(PricingPreset("Eighths", pages_per_sheet=1, price_per_sheet=0.625))
    c = Customer(name="Small")
    c.add_item(LineItem(name="Slip", type="Eighths", pages=1))
    assert engine.generate_bill_text(c).endswith("Total: ₹0.63")
