"""
Export Service - Renders all customers' line items as CSV or Excel.
"""
import io
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from ..config.settings import Settings, get_settings
from ..engine.billing_engine import format_amount
from ..logging_config import get_logger
from .billing_service import BillingSession

logger = get_logger(__name__)


@dataclass
class ExportFile:
    """A rendered export ready to hand to a download surface."""
    filename: str
    mime: str
    data: str | bytes


class ExportService:
    """Flattens a session into one row per line item."""

    def __init__(self, session: BillingSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or session.settings or get_settings()

    def to_dataframe(self) -> pd.DataFrame:
        rows = self.session.export_rows()
        df = pd.DataFrame(rows, columns=list(self.settings.export_columns))

        text_cols = ['Customer', 'Item', 'Type']
        if any(',' in str(value) for col in text_cols for value in df[col]):
            logger.warning("Export contains names with commas; those fields will be quoted")
        return df

    def to_csv(self) -> ExportFile:
        """
        CSV with header Customer,Item,Type,Pages,Sets,Price.

        Prices print as plain numbers (10, 12.5) and the last row has no
        line terminator.
        """
        df = self.to_dataframe()
        csv_df = df.assign(Price=df["Price"].map(format_amount))
        data = csv_df.to_csv(index=False, lineterminator="\n").removesuffix("\n")
        logger.info(f"CSV export: {len(df)} rows")
        return ExportFile(
            filename=self.settings.csv_filename,
            mime=self.settings.csv_mime,
            data=data,
        )

    def to_excel(self) -> ExportFile:
        """Same rows as the CSV, in a single worksheet."""
        df = self.to_dataframe()
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name='Bill')
        logger.info(f"Excel export: {len(df)} rows")
        return ExportFile(
            filename=self.settings.excel_filename,
            mime=self.settings.excel_mime,
            data=buffer.getvalue(),
        )
