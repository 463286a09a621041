"""
Pricing Catalog - Ordered, name-keyed collection of pricing presets.

Loaded from the built-in defaults or from a presets CSV with columns
`name, pages_per_sheet, price_per_sheet`.
"""
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from ..exceptions import DuplicatePresetError, PresetNotFoundError
from ..logging_config import get_logger
from .models import PricingPreset

logger = get_logger(__name__)

PRESET_COLUMNS = ['name', 'pages_per_sheet', 'price_per_sheet']


class PricingCatalog:
    """
    Ordered list of pricing presets, looked up by exact name.

    Edits apply immediately: anything priced after an edit uses the new
    values, including items entered earlier.
    """

    def __init__(self, presets: Optional[Iterable[PricingPreset]] = None):
        self._presets: list[PricingPreset] = []
        for preset in presets or []:
            self.add(preset)

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> 'PricingCatalog':
        """Build a catalog from plain dicts (e.g. settings defaults)."""
        return cls(PricingPreset(**record) for record in records)

    @classmethod
    def from_csv(cls, path: Path) -> 'PricingCatalog':
        """Load presets from a CSV file."""
        if not path.exists():
            raise FileNotFoundError(f"Presets file not found at {path}.")

        df = pd.read_csv(path, dtype={'name': str})
        missing = [c for c in PRESET_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"Presets file {path} is missing columns: {', '.join(missing)}")

        df['name'] = df['name'].str.strip()
        df = df.dropna(subset=['name'])

        catalog = cls()
        for row in df[PRESET_COLUMNS].to_dict(orient='records'):
            catalog.add(PricingPreset(
                name=row['name'],
                pages_per_sheet=int(row['pages_per_sheet']),
                price_per_sheet=float(row['price_per_sheet']),
            ))
        logger.info(f"Loaded {len(catalog)} presets from {path}")
        return catalog

    def __len__(self) -> int:
        return len(self._presets)

    def __iter__(self):
        return iter(list(self._presets))

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def names(self) -> list[str]:
        return [p.name for p in self._presets]

    def get(self, name: str) -> Optional[PricingPreset]:
        """Exact-name lookup; None when the type is not configured."""
        for preset in self._presets:
            if preset.name == name:
                return preset
        return None

    def require(self, name: str) -> PricingPreset:
        preset = self.get(name)
        if preset is None:
            raise PresetNotFoundError(name)
        return preset

    def add(self, preset: PricingPreset) -> PricingPreset:
        if self.get(preset.name) is not None:
            raise DuplicatePresetError(preset.name)
        self._presets.append(preset)
        return preset

    def update(self, preset_name: str, /, **fields) -> PricingPreset:
        """
        Update a preset in place, keeping its position.

        A rename must not collide with another preset.
        """
        preset = self.require(preset_name)
        fields = {k: v for k, v in fields.items() if v is not None}
        new_name = fields.get('name', preset.name)
        if new_name != preset_name and self.get(new_name) is not None:
            raise DuplicatePresetError(new_name)

        # Validate on a copy so a bad edit leaves the catalog untouched
        candidate = PricingPreset(
            name=new_name,
            pages_per_sheet=int(fields.get('pages_per_sheet', preset.pages_per_sheet)),
            price_per_sheet=float(fields.get('price_per_sheet', preset.price_per_sheet)),
        )
        index = self._presets.index(preset)
        self._presets[index] = candidate
        logger.info(f"Preset '{preset_name}' updated: {candidate}")
        return candidate

    def remove(self, name: str) -> PricingPreset:
        preset = self.require(name)
        self._presets.remove(preset)
        logger.info(f"Preset '{name}' removed")
        return preset

    def replace_all(self, presets: Iterable[PricingPreset]) -> None:
        """Swap in a whole new preset list; nothing changes if any preset is rejected."""
        staged = PricingCatalog(presets)
        self._presets = staged._presets
        logger.info(f"Catalog replaced with {len(self._presets)} presets")

    def to_dataframe(self) -> pd.DataFrame:
        """Presets as a DataFrame, in catalog order."""
        return pd.DataFrame(
            [[p.name, p.pages_per_sheet, p.price_per_sheet] for p in self._presets],
            columns=PRESET_COLUMNS,
        )
