"""
Billing Service - Application state and CRUD operations for a billing session.

Holds the pricing catalog, the customer store, the dark-mode flag and the
bill history. Customers and line items are keyed by generated ids so that
deleting one never shifts the identity of another.
"""
from typing import Optional

from ..config.settings import Settings, get_settings
from ..engine.billing_engine import BillingEngine
from ..engine.catalog import PricingCatalog
from ..engine.models import Bill, BillSnapshot, Customer, LineItem, PricingPreset
from ..exceptions import CustomerNotFoundError, LineItemNotFoundError
from ..logging_config import get_logger

logger = get_logger(__name__)

CUSTOMER_FIELDS = ('name', 'round_individual', 'round_total', 'discount', 'tax', 'show_rounding_options')
ITEM_FIELDS = ('name', 'type', 'pages', 'sets')


class BillingSession:
    """
    Single owner of the mutable billing state.

    Every operation completes synchronously; prices are never stored, they
    are recomputed from the current catalog whenever a bill is requested.
    """

    def __init__(self, settings: Optional[Settings] = None, catalog: Optional[PricingCatalog] = None):
        self.settings = settings or get_settings()
        self.catalog = catalog or self._load_catalog()
        self.engine = BillingEngine(self.catalog, self.settings)
        self.customers: dict[str, Customer] = {}
        self.dark_mode = False
        self._history: list[BillSnapshot] = []

    def _load_catalog(self) -> PricingCatalog:
        if self.settings.presets_csv and self.settings.presets_csv.exists():
            return PricingCatalog.from_csv(self.settings.presets_csv)
        return PricingCatalog.from_records(self.settings.presets)

    @classmethod
    def start(cls, settings: Optional[Settings] = None) -> 'BillingSession':
        """A fresh session with one empty customer, as on page load."""
        session = cls(settings)
        session.add_customer()
        return session

    # ------------------------------------------------------------------
    # Presets
    # ------------------------------------------------------------------

    def add_preset(self, name: str, pages_per_sheet: int = 1, price_per_sheet: float = 0.0) -> PricingPreset:
        preset = self.catalog.add(PricingPreset(name, pages_per_sheet, price_per_sheet))
        logger.info(f"Preset '{name}' added")
        return preset

    def update_preset(self, preset_name: str, /, **fields) -> PricingPreset:
        return self.catalog.update(preset_name, **fields)

    def remove_preset(self, name: str) -> PricingPreset:
        return self.catalog.remove(name)

    def replace_presets(self, records: list[dict]) -> None:
        """Apply a full settings-table edit in one step."""
        self.catalog.replace_all(PricingPreset(**record) for record in records)

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    def list_customers(self) -> list[Customer]:
        return list(self.customers.values())

    def get_customer(self, customer_id: str) -> Customer:
        customer = self.customers.get(customer_id)
        if customer is None:
            raise CustomerNotFoundError(customer_id)
        return customer

    def add_customer(self, name: Optional[str] = None) -> Customer:
        """
        Add a customer at the end of the tab order.

        The default name counts the current customers, so it can repeat an
        existing name after a deletion.
        """
        customer = Customer(name=name or f"Customer {len(self.customers) + 1}")
        self.customers[customer.customer_id] = customer
        logger.info(f"Customer '{customer.name}' added ({customer.customer_id})")
        return customer

    def update_customer(self, customer_id: str, **fields) -> Customer:
        customer = self.get_customer(customer_id)
        for key, value in fields.items():
            if key not in CUSTOMER_FIELDS:
                raise ValueError(f"Unknown customer field '{key}'")
            if key in ('discount', 'tax'):
                value = float(value or 0)
            setattr(customer, key, value)
        return customer

    def delete_customer(self, customer_id: str) -> Customer:
        customer = self.customers.pop(customer_id, None)
        if customer is None:
            raise CustomerNotFoundError(customer_id)
        logger.info(f"Customer '{customer.name}' deleted ({customer_id})")
        return customer

    def delete_customer_at(self, index: int) -> Customer:
        """Delete by tab position; the remaining customers keep their order."""
        customers = self.list_customers()
        if not 0 <= index < len(customers):
            raise CustomerNotFoundError(f"#{index}")
        return self.delete_customer(customers[index].customer_id)

    # ------------------------------------------------------------------
    # Line items
    # ------------------------------------------------------------------

    def add_item(self, customer_id: str, name: str, type: str, pages: int, sets: int = 1) -> LineItem:
        customer = self.get_customer(customer_id)
        item = customer.add_item(LineItem(name=name, type=type, pages=pages, sets=sets))
        if item.type not in self.catalog:
            logger.warning(f"Item '{name}' uses unknown type '{type}' and will price at 0")
        return item

    def get_item(self, customer_id: str, item_id: str) -> LineItem:
        customer = self.get_customer(customer_id)
        item = customer.items.get(item_id)
        if item is None:
            raise LineItemNotFoundError(customer_id, item_id)
        return item

    def update_item(self, customer_id: str, item_id: str, **fields) -> LineItem:
        item = self.get_item(customer_id, item_id)
        for key, value in fields.items():
            if key not in ITEM_FIELDS:
                raise ValueError(f"Unknown item field '{key}'")
            if key == 'sets':
                value = int(value or 1)
            elif key == 'pages':
                value = int(value or 0)
            setattr(item, key, value)
        return item

    def delete_item(self, customer_id: str, item_id: str) -> LineItem:
        self.get_item(customer_id, item_id)
        return self.get_customer(customer_id).items.pop(item_id)

    def clear_items(self, customer_id: str) -> int:
        """Remove every item of one customer; returns how many were removed."""
        customer = self.get_customer(customer_id)
        count = len(customer.items)
        customer.items.clear()
        logger.info(f"Cleared {count} items for '{customer.name}'")
        return count

    # ------------------------------------------------------------------
    # Bills & history
    # ------------------------------------------------------------------

    def price_customer(self, customer_id: str) -> Bill:
        return self.engine.price_customer(self.get_customer(customer_id))

    def bill_text(self, customer_id: str) -> str:
        return self.engine.generate_bill_text(self.get_customer(customer_id))

    def record_bill(self, customer_id: str) -> BillSnapshot:
        """Append an immutable snapshot of the customer's current bill."""
        bill = self.price_customer(customer_id)
        snapshot = BillSnapshot(
            customer_id=bill.customer_id,
            customer_name=bill.customer_name,
            bill_text=self.engine.render_bill(bill),
            total=bill.total,
            formatted_total=bill.formatted_total,
        )
        self._history.append(snapshot)
        logger.info(f"Bill recorded for '{bill.customer_name}': {self.settings.currency_symbol}{bill.formatted_total}")
        return snapshot

    @property
    def history(self) -> tuple[BillSnapshot, ...]:
        return tuple(self._history)

    def toggle_dark_mode(self) -> bool:
        self.dark_mode = not self.dark_mode
        return self.dark_mode

    def export_rows(self) -> list[list]:
        return self.engine.export_rows(self.list_customers())
