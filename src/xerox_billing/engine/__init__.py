"""Engine subpackage - core pricing and bill assembly."""
from .billing_engine import BillingEngine, format_price, format_amount
from .catalog import PricingCatalog
from .models import PricingPreset, LineItem, Customer, Bill, BillLine, BillSnapshot

__all__ = [
    'BillingEngine', 'PricingCatalog', 'PricingPreset', 'LineItem', 'Customer',
    'Bill', 'BillLine', 'BillSnapshot', 'format_price', 'format_amount',
]
