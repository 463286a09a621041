"""
Process-wide billing session shared by the API routers.
"""
from typing import Optional

from ..services.billing_service import BillingSession

_session: Optional[BillingSession] = None


def get_session() -> BillingSession:
    """Get the live session, starting one on first use."""
    global _session
    if _session is None:
        _session = BillingSession.start()
    return _session


def reset_session(session: Optional[BillingSession] = None) -> BillingSession:
    """Replace the live session (a fresh one by default)."""
    global _session
    _session = session or BillingSession.start()
    return _session
