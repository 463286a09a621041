"""
Clipboard/share boundary tests: every outcome becomes a notification.
"""
from unittest.mock import Mock

from xerox_billing.services.share_service import (
    COPY_FAILED, COPY_OK, SHARE_FAILED, SHARE_OK, SHARE_UNSUPPORTED, ShareService,
)


def test_copy_delivers_text_verbatim():
    clipboard = Mock()
    note = ShareService(clipboard=clipboard).copy_bill("Customer: A\nTotal: ₹5")

    clipboard.assert_called_once_with("Customer: A\nTotal: ₹5")
    assert note.success
    assert note.message == COPY_OK


def test_copy_failure_is_reported_not_raised():
    clipboard = Mock(side_effect=RuntimeError("denied"))
    note = ShareService(clipboard=clipboard).copy_bill("text")
    assert not note.success
    assert note.message == COPY_FAILED


def test_copy_without_backend():
    assert ShareService().copy_bill("text").message == COPY_FAILED


def test_share_uses_title():
    share = Mock()
    note = ShareService(share=share, title="SR XEROX Bill").share_bill("text")
    share.assert_called_once_with("SR XEROX Bill", "text")
    assert note.message == SHARE_OK


def test_share_unsupported():
    note = ShareService().share_bill("text")
    assert not note.success
    assert note.message == SHARE_UNSUPPORTED


def test_share_failure():
    note = ShareService(share=Mock(side_effect=OSError("cancelled"))).share_bill("text")
    assert note.message == SHARE_FAILED
