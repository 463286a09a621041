"""
Xerox Billing Package

Billing calculator for a photocopy/printing shop.
Prices print jobs from per-sheet presets and assembles customer bills
with optional rounding, discount and tax.
"""

__version__ = "1.0.0"
