"""
Share Service - Delivers bill text to the clipboard or a native share surface.

Backends are plain callables supplied by the hosting UI. Every outcome is
reported as a notification string; failures never propagate.
"""
from dataclasses import dataclass
from typing import Callable, Optional

from ..logging_config import get_logger

logger = get_logger(__name__)

ClipboardWriter = Callable[[str], None]
ShareHandler = Callable[[str, str], None]

COPY_OK = "Bill copied to clipboard!"
COPY_FAILED = "Failed to copy bill."
SHARE_OK = "Bill shared!"
SHARE_UNSUPPORTED = "Sharing not supported on this device."
SHARE_FAILED = "Failed to share bill."


@dataclass
class Notification:
    """User-facing outcome of a clipboard or share action."""
    message: str
    success: bool


class ShareService:

    def __init__(
        self,
        clipboard: Optional[ClipboardWriter] = None,
        share: Optional[ShareHandler] = None,
        title: str = "SR XEROX Bill",
    ):
        self.clipboard = clipboard
        self.share = share
        self.title = title

    def copy_bill(self, bill_text: str) -> Notification:
        """
        Write the bill to the host clipboard.

        Only hosts that supply a clipboard backend use this; the Streamlit UI
        copies through the code block's own copy button instead.
        """
        if self.clipboard is None:
            logger.warning("No clipboard backend available")
            return Notification(COPY_FAILED, False)
        try:
            self.clipboard(bill_text)
        except Exception as e:
            logger.warning(f"Clipboard write failed: {e}")
            return Notification(COPY_FAILED, False)
        return Notification(COPY_OK, True)

    def share_bill(self, bill_text: str) -> Notification:
        if self.share is None:
            return Notification(SHARE_UNSUPPORTED, False)
        try:
            self.share(self.title, bill_text)
        except Exception as e:
            logger.warning(f"Share failed: {e}")
            return Notification(SHARE_FAILED, False)
        return Notification(SHARE_OK, True)
