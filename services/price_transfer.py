# WORKFLOW: Price transfer service that runs the import and export pipelines.
# Used by: Prices router (POST/GET /prices), tests
# Functions:
# 1. import_archive() - ZIP upload -> CSV rows -> validate+insert per row -> summary
# 2. export_archive() - Stored records -> CSV rows -> single-entry ZIP
# 3. create_price_transfer_service() - Build a service around the shared store
#
# Import flow: extract data.csv -> read header -> BEGIN -> (validate row -> insert row)* -> summarize -> COMMIT
# Any failure after BEGIN rolls the whole batch back before the error reaches the router.
# Export flow: query_all (lazy) -> CSV chunks -> build_entry -> archive bytes

import io
import logging
from itertools import islice
from typing import Optional

from api.schemas.response import ImportSummary
from core.config import settings
from core.errors import EntryNotFound
from db.gateway import PriceStore
from etl.archive import build_entry, extract_entry, list_entries
from etl.csv_table import TableReader, TableWriter
from etl.records import DOWNLOAD_COLUMNS
from etl.validators import to_record

logger = logging.getLogger(__name__)


class PriceTransferService:
    """Moves price records between ZIP/CSV archives and the price store."""

    def __init__(
        self,
        store: PriceStore,
        entry_name: str = "data.csv",
        export_batch_size: int = 500,
        table_chunk_size: int = 1000,
    ):
        self.store = store
        self.entry_name = entry_name
        self.export_batch_size = export_batch_size
        self.table_chunk_size = table_chunk_size

    def import_archive(self, payload: bytes) -> ImportSummary:
        """
        Import every row of the archive's CSV entry in a single transaction.

        A missing CSV entry is an empty import, not an error.

        Args:
            payload: Uploaded archive bytes

        Returns:
            ImportSummary for the committed batch
        """
        logger.info(f"Starting import of {len(payload)} byte archive")

        reader: Optional[TableReader] = None
        try:
            content = extract_entry(payload, self.entry_name)
        except EntryNotFound:
            logger.info(f"No {self.entry_name} in upload {list_entries(payload)}, importing zero rows")
        else:
            reader = TableReader(content, chunk_size=self.table_chunk_size)
            header = reader.read_header()
            logger.info(f"CSV header: {header}")

        tx = self.store.begin_import()
        try:
            if reader is not None:
                for fields in reader:
                    record = to_record(fields, reader.line_number)
                    self.store.insert(tx, record)

            total_items, total_categories, total_price = self.store.summarize(tx)
            summary = ImportSummary(
                total_items=total_items,
                total_categories=total_categories,
                total_price=float(round(total_price, 2)),
            )
            self.store.commit(tx)
        except Exception as e:
            logger.error(f"Import aborted after {tx.items} rows: {e}")
            self.store.rollback(tx)
            raise
        finally:
            tx.close()

        logger.info(
            f"Upload completed successfully: {summary.total_items} items, "
            f"{summary.total_categories} categories, total price: {summary.total_price:.2f}"
        )
        return summary

    def export_archive(self) -> bytes:
        """
        Export every stored record as a single-entry archive.

        Returns:
            Archive bytes holding the CSV entry with a header row
        """
        logger.info("Starting data download...")

        buffer = io.StringIO()
        writer = TableWriter(buffer)
        writer.write_header(DOWNLOAD_COLUMNS)

        records = self.store.query_all(batch_size=self.export_batch_size)
        try:
            while True:
                chunk = [record.to_download_row() for record in islice(records, self.export_batch_size)]
                if not chunk:
                    break
                writer.write_rows(chunk)
        finally:
            records.close()

        archive = build_entry(self.entry_name, buffer.getvalue())
        logger.info(f"Download completed successfully: {writer.rows_written} rows")
        return archive


def create_price_transfer_service(store: PriceStore) -> PriceTransferService:
    """Factory function to create a service configured from settings."""
    return PriceTransferService(
        store,
        entry_name=settings.csv_entry_name,
        export_batch_size=settings.export_batch_size,
        table_chunk_size=settings.table_chunk_size,
    )
