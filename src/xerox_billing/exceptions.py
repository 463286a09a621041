"""
Custom exceptions for the billing calculator.

Exception Hierarchy:
    BillingError (base)
    ├── InvalidPresetError     - Preset would make pricing undefined
    ├── DuplicatePresetError   - Preset name already in the catalog
    ├── PresetNotFoundError    - No preset with the given name
    ├── CustomerNotFoundError  - No customer with the given id
    └── LineItemNotFoundError  - No line item with the given id

Unknown job types are NOT errors: they price at zero and are reported
as warnings on the bill.
"""
from typing import Any, Dict, Optional


class BillingError(Exception):
    """
    Base exception for all billing errors.

    Callers (API routes, UI handlers) catch this to turn any domain failure
    into a user-facing message.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidPresetError(BillingError):
    """A preset with non-positive pages per sheet or a negative price."""


class DuplicatePresetError(BillingError):
    """Preset names are lookup keys and must stay unique."""

    def __init__(self, name: str):
        super().__init__(f"Preset '{name}' already exists", {"name": name})
        self.name = name


class PresetNotFoundError(BillingError):

    def __init__(self, name: str):
        super().__init__(f"Preset '{name}' not found", {"name": name})
        self.name = name


class CustomerNotFoundError(BillingError):

    def __init__(self, customer_id: str):
        super().__init__(f"Customer '{customer_id}' not found", {"customer_id": customer_id})
        self.customer_id = customer_id


class LineItemNotFoundError(BillingError):

    def __init__(self, customer_id: str, item_id: str):
        super().__init__(
            f"Line item '{item_id}' not found",
            {"customer_id": customer_id, "item_id": item_id},
        )
        self.customer_id = customer_id
        self.item_id = item_id
