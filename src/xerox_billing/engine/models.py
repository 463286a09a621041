"""
Data models for the billing engine.

Uses dataclasses for structured, type-safe data representation.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..exceptions import InvalidPresetError


def new_id() -> str:
    """Generate a short opaque identifier for store keys."""
    return uuid.uuid4().hex[:12]


@dataclass
class TraceStep:
    """A single step in the bill calculation trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class PricingPreset:
    """A named pricing rule: how many pages fit a sheet and what a sheet costs."""
    name: str
    pages_per_sheet: int = 1
    price_per_sheet: float = 0.0

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Reject presets that would make sheet counting undefined."""
        if not self.name or not str(self.name).strip():
            raise InvalidPresetError("Preset name is required")
        if int(self.pages_per_sheet) <= 0:
            raise InvalidPresetError(
                f"Pages per sheet must be positive for preset '{self.name}'",
                details={"pages_per_sheet": self.pages_per_sheet},
            )
        if float(self.price_per_sheet) < 0:
            raise InvalidPresetError(
                f"Price per sheet cannot be negative for preset '{self.name}'",
                details={"price_per_sheet": self.price_per_sheet},
            )


@dataclass
class LineItem:
    """One print job recorded for a customer."""
    name: str
    type: str
    pages: int = 0
    sets: int = 1
    item_id: str = field(default_factory=new_id)

    def __post_init__(self):
        # Blank sets fall back to a single set
        self.sets = int(self.sets or 1)
        self.pages = int(self.pages or 0)


@dataclass
class Customer:
    """A customer tab: adjustment settings plus an ordered store of line items."""
    name: str
    round_individual: bool = False
    round_total: bool = False
    discount: float = 0.0
    tax: float = 0.0
    items: dict[str, LineItem] = field(default_factory=dict)
    show_rounding_options: bool = False
    customer_id: str = field(default_factory=new_id)

    def __post_init__(self):
        self.discount = float(self.discount or 0)
        self.tax = float(self.tax or 0)

    def add_item(self, item: LineItem) -> LineItem:
        self.items[item.item_id] = item
        return item

    def item_list(self) -> list[LineItem]:
        """Items in entry order."""
        return list(self.items.values())


@dataclass
class BillLine:
    """A single priced line on a bill."""
    item: LineItem
    price: float
    formatted_price: str
    matched: bool = True


@dataclass
class Bill:
    """Complete result of pricing one customer."""
    customer_id: str
    customer_name: str
    lines: list[BillLine] = field(default_factory=list)
    subtotal: float = 0.0
    discount: float = 0.0
    tax: float = 0.0
    total: float = 0.0
    formatted_total: str = ""
    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the bill-level trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def add_warning(self, warning: str):
        if warning not in self.warnings:
            self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable bill trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)


@dataclass(frozen=True)
class BillSnapshot:
    """An immutable record of a bill at the moment it was issued."""
    customer_id: str
    customer_name: str
    bill_text: str
    total: float
    formatted_total: str
    created_at: datetime = field(default_factory=datetime.now)
