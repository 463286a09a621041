import os
import sys
from pathlib import Path

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from xerox_billing.config.settings import Settings
from xerox_billing.engine import BillingEngine, Customer, LineItem, PricingCatalog


@pytest.fixture
def settings(tmp_path):
    """Settings with built-in presets only (no presets.csv on disk)."""
    return Settings(project_root=Path(tmp_path))


@pytest.fixture
def catalog(settings):
    return PricingCatalog.from_records(settings.presets)


@pytest.fixture
def engine(catalog, settings):
    return BillingEngine(catalog, settings)


@pytest.fixture
def customer():
    """Customer with a 10.00 job and a 70.00 job, discount 5, tax 10%."""
    c = Customer(name="Customer 1", discount=5, tax=10)
    c.add_item(LineItem(name="Notes", type="A4 B/W", pages=5, sets=2))
    c.add_item(LineItem(name="Poster", type="A3 Color", pages=7, sets=1))
    return c
