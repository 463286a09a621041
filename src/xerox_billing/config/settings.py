"""
Centralized settings and path configuration for the billing calculator.
"""
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    # Walk up from this file to find the project root
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'presets.csv').exists() or (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


def default_presets() -> list[dict]:
    """Presets a fresh session starts with."""
    return [
        {"name": "A4 B/W", "pages_per_sheet": 1, "price_per_sheet": 1.0},
        {"name": "A3 Color", "pages_per_sheet": 1, "price_per_sheet": 10.0},
    ]


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path

    # Optional preset override file (name, pages_per_sheet, price_per_sheet)
    presets_csv: Optional[Path] = None

    # Bill rendering
    shop_name: str = "SR XEROX"
    currency_symbol: str = "₹"
    share_title: str = "SR XEROX Bill"

    # Export
    csv_filename: str = "sr_xerox_bill.csv"
    csv_mime: str = "text/csv;charset=utf-8"
    excel_filename: str = "sr_xerox_bill.xlsx"
    excel_mime: str = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    export_columns: tuple = ('Customer', 'Item', 'Type', 'Pages', 'Sets', 'Price')

    presets: list[dict] = field(default_factory=default_presets)

    log_level: int = logging.INFO

    # API server
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure."""
        root = project_root or get_project_root()

        presets_path = root / 'presets.csv'

        return cls(
            project_root=root,
            presets_csv=presets_path if presets_path.exists() else None,
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
