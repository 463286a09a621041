"""
Billing Engine - Prices print jobs and assembles customer bills.

Pricing pipeline per line item:
1. Look up the job type in the pricing catalog (exact name)
2. Sheets = ceil(pages / pages_per_sheet)
3. Price = price_per_sheet × sheets × sets

Bill total:
    subtotal (unrounded) → minus discount → plus tax % of the discounted amount
"""
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from ..config.settings import Settings, get_settings
from ..exceptions import InvalidPresetError
from ..logging_config import get_logger
from .catalog import PricingCatalog
from .models import Bill, BillLine, Customer, LineItem

logger = get_logger(__name__)


def format_price(price: float, round_up: bool) -> str:
    """
    Render a price for display.

    Rounded prices are the ceiling, shown without decimals ("11").
    Otherwise exactly two decimals ("10.26"), with exact halves of a cent
    rounded up ("0.63" for 0.625).
    """
    if round_up:
        return str(math.ceil(price))
    # Decimal(float) keeps the exact binary value; only true halves go up
    return str(Decimal(price).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def format_amount(value: float) -> str:
    """Plain number rendering for discount and tax lines (5, 12.5)."""
    value = float(value or 0)
    if value.is_integer():
        return str(int(value))
    return str(value)


class BillingEngine:
    """
    Core billing engine bound to a pricing catalog.

    The engine keeps no state of its own beyond the catalog reference, so
    every result is a pure function of its inputs and the catalog at call time.
    """

    def __init__(self, catalog: PricingCatalog, settings: Optional[Settings] = None):
        self.catalog = catalog
        self.settings = settings or get_settings()

    @property
    def currency(self) -> str:
        return self.settings.currency_symbol

    def calculate_price(self, job_type: str, pages: int, sets: int = 1) -> float:
        """
        Price one print job.

        Args:
            job_type: Preset name
            pages: Number of pages in one set
            sets: Number of copies of the whole job (blank means 1)

        Returns:
            Unrounded price; 0.0 when the job type is not in the catalog
        """
        preset = self.catalog.get(job_type)
        if preset is None:
            logger.warning(f"Unknown job type '{job_type}', pricing at 0")
            return 0.0

        if preset.pages_per_sheet <= 0:
            raise InvalidPresetError(
                f"Pages per sheet must be positive for preset '{preset.name}'",
                details={"pages_per_sheet": preset.pages_per_sheet},
            )

        sheets = math.ceil((pages or 0) / preset.pages_per_sheet)
        return preset.price_per_sheet * sheets * (sets or 1)

    def price_item(self, item: LineItem) -> float:
        return self.calculate_price(item.type, item.pages, item.sets)

    def calculate_total(self, customer: Customer) -> float:
        """Unrounded grand total: items, minus discount, plus tax."""
        subtotal = sum(self.price_item(item) for item in customer.item_list())
        total = subtotal - (customer.discount or 0)
        total += total * (customer.tax or 0) / 100
        return total

    def price_customer(self, customer: Customer) -> Bill:
        """
        Price every line item of a customer with full traceability.

        The grand total is always computed from unrounded item prices,
        regardless of the per-item rounding flag.
        """
        bill = Bill(
            customer_id=customer.customer_id,
            customer_name=customer.name,
            discount=customer.discount or 0.0,
            tax=customer.tax or 0.0,
        )

        for item in customer.item_list():
            matched = item.type in self.catalog
            price = self.price_item(item)
            line = BillLine(
                item=item,
                price=price,
                formatted_price=format_price(price, customer.round_individual),
                matched=matched,
            )
            bill.lines.append(line)
            bill.subtotal += price

            if matched:
                bill.add_trace("Line", f"{item.name} ({item.type} × {item.sets})", f"{self.currency}{price:.2f}")
            else:
                bill.add_trace("Line", f"{item.name}: unknown type '{item.type}'", f"{self.currency}0.00")
                bill.add_warning(f"Unknown job type '{item.type}' priced at 0")

        bill.add_trace("Subtotal", "Sum of unrounded item prices", f"{self.currency}{bill.subtotal:.2f}")

        after_discount = bill.subtotal - bill.discount
        if bill.discount:
            bill.add_trace("Discount", f"Minus {self.currency}{format_amount(bill.discount)}", f"{self.currency}{after_discount:.2f}")

        bill.total = after_discount + after_discount * bill.tax / 100
        if bill.tax:
            bill.add_trace("Tax", f"Plus {format_amount(bill.tax)}% of discounted amount", f"{self.currency}{bill.total:.2f}")

        bill.formatted_total = format_price(bill.total, customer.round_total)
        bill.add_trace("Total", "Rounded up" if customer.round_total else "Exact", f"{self.currency}{bill.formatted_total}")
        return bill

    def render_bill(self, bill: Bill) -> str:
        """Render a priced bill with the fixed text template."""
        items_text = "\n".join(
            f"{line.item.name} ({line.item.type}, {line.item.pages} pages, {line.item.sets} sets): "
            f"{self.currency}{line.formatted_price}"
            for line in bill.lines
        )
        return (
            f"Customer: {bill.customer_name}\n\n"
            f"{items_text}\n\n"
            f"Discount: {self.currency}{format_amount(bill.discount)}\n"
            f"Tax: {format_amount(bill.tax)}%\n"
            f"Total: {self.currency}{bill.formatted_total}"
        )

    def generate_bill_text(self, customer: Customer) -> str:
        return self.render_bill(self.price_customer(customer))

    def export_rows(self, customers: Iterable[Customer]) -> list[list]:
        """
        Flatten every customer's items into export rows.

        Row: [customer name, item name, type, pages, sets, unrounded price]
        """
        rows = []
        for customer in customers:
            for item in customer.item_list():
                rows.append([
                    customer.name,
                    item.name,
                    item.type,
                    item.pages,
                    item.sets,
                    self.price_item(item),
                ])
        return rows
