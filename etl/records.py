"""Typed price records and the CSV column orders for each transfer direction."""

from dataclasses import dataclass
from decimal import Decimal
from typing import List

# Uploads put price before the date; downloads lead with the date.
UPLOAD_COLUMNS = ["id", "name", "category", "price", "created_date"]
DOWNLOAD_COLUMNS = ["id", "created_date", "name", "category", "price"]


@dataclass(frozen=True)
class PriceRecord:
    id: int
    created_date: str  # YYYY-MM-DD
    name: str
    category: str
    price: Decimal

    def to_download_row(self) -> List[str]:
        """Render the record in download column order with a 2-digit price."""
        return [
            str(self.id),
            self.created_date,
            self.name,
            self.category,
            f"{self.price:.2f}",
        ]

    def to_upload_row(self) -> List[str]:
        return [
            str(self.id),
            self.name,
            self.category,
            f"{self.price:.2f}",
            self.created_date,
        ]
