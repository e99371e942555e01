# WORKFLOW: Persistence gateway between the price pipeline and the database.
# Used by: Price transfer service (import/export), health checks, tests
# Functions:
# 1. begin_import() - Open one transaction for a whole import request
# 2. insert() - Insert one validated record and update the batch running totals
# 3. summarize() - Batch totals plus the distinct category count of the store
# 4. commit() / rollback() - Terminal transaction boundaries
# 5. query_all() - Lazy single-pass scan of every stored record for export
# 6. count() / ping() - Row count and connectivity check
#
# Import lifecycle: OPEN -> insert* -> summarize -> COMMITTED
#                   OPEN -> any failure -> ROLLED_BACK
# Nothing from a rolled back batch is ever visible to other sessions.

from datetime import date
from decimal import Decimal
from enum import Enum
import logging
from typing import Iterator, Tuple

from sqlalchemy import distinct, func, insert, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from core.errors import PersistenceError
from db.models import Price
from etl.records import PriceRecord

logger = logging.getLogger(__name__)


def _describe(error: SQLAlchemyError) -> str:
    """Prefer the driver's message over SQLAlchemy's statement dump."""
    return str(getattr(error, "orig", None) or error)


class TransactionState(str, Enum):
    OPEN = "open"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class ImportTransaction:
    """One import's session, state and batch running totals."""

    def __init__(self, session: Session):
        self.session = session
        self.state = TransactionState.OPEN
        self.items = 0
        self.total_price = Decimal("0")

    @property
    def is_open(self) -> bool:
        return self.state is TransactionState.OPEN

    def ensure_open(self) -> None:
        if not self.is_open:
            raise PersistenceError(f"Transaction is already {self.state.value}")

    def close(self) -> None:
        self.session.close()


class PriceStore:
    """Transactional access to the prices table."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def begin_import(self) -> ImportTransaction:
        """
        Open the transaction that scopes a whole import.

        Returns:
            An open ImportTransaction

        Raises:
            PersistenceError: The database cannot be reached
        """
        session = self.session_factory()
        try:
            session.begin()
            session.connection()
        except SQLAlchemyError as e:
            session.close()
            logger.error(f"Failed to start transaction: {e}")
            raise PersistenceError(f"Failed to start transaction: {_describe(e)}") from e
        return ImportTransaction(session)

    def insert(self, tx: ImportTransaction, record: PriceRecord) -> None:
        """
        Insert one record inside the open transaction.

        Args:
            tx: Open import transaction
            record: Validated record

        Raises:
            PersistenceError: Bad date, constraint violation or lost connection
        """
        tx.ensure_open()
        try:
            created_date = date.fromisoformat(record.created_date)
        except (TypeError, ValueError) as e:
            raise PersistenceError(
                f"Failed to insert data: invalid date {record.created_date!r} for id {record.id}"
            ) from e

        try:
            tx.session.execute(
                insert(Price),
                {
                    "id": record.id,
                    "created_date": created_date,
                    "name": record.name,
                    "category": record.category,
                    "price": record.price,
                },
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to insert id {record.id}: {_describe(e)}")
            raise PersistenceError(f"Failed to insert data for id {record.id}: {_describe(e)}") from e

        tx.items += 1
        tx.total_price += record.price

    def summarize(self, tx: ImportTransaction) -> Tuple[int, int, Decimal]:
        """
        Compute the import totals.

        total_items and total_price cover this batch only; total_categories counts
        distinct categories across the whole store as this transaction sees it.

        Returns:
            (total_items, total_categories, total_price)
        """
        tx.ensure_open()
        try:
            total_categories = tx.session.execute(
                select(func.count(distinct(Price.category)))
            ).scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Failed to calculate totals: {e}")
            raise PersistenceError(f"Failed to calculate totals: {_describe(e)}") from e
        return tx.items, total_categories, tx.total_price

    def commit(self, tx: ImportTransaction) -> None:
        tx.ensure_open()
        try:
            tx.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to commit transaction: {e}")
            self.rollback(tx)
            raise PersistenceError(f"Failed to commit transaction: {_describe(e)}") from e
        tx.state = TransactionState.COMMITTED
        logger.info(f"Committed {tx.items} rows")

    def rollback(self, tx: ImportTransaction) -> None:
        """Roll back an open transaction; terminal transactions are left alone."""
        if not tx.is_open:
            return
        tx.state = TransactionState.ROLLED_BACK
        try:
            tx.session.rollback()
        except SQLAlchemyError as e:
            logger.error(f"Failed to roll back transaction: {e}")
            raise PersistenceError(f"Failed to roll back transaction: {_describe(e)}") from e
        logger.info(f"Rolled back transaction after {tx.items} inserted rows")

    def query_all(self, batch_size: int = 500) -> Iterator[PriceRecord]:
        """
        Stream every stored record, in no particular order.

        The generator owns its session and closes it when exhausted or closed.

        Args:
            batch_size: Rows fetched from the database per round trip
        """
        session = self.session_factory()
        try:
            result = session.execute(
                select(Price.id, Price.created_date, Price.name, Price.category, Price.price)
                .execution_options(yield_per=batch_size)
            )
            for row in result:
                yield PriceRecord(
                    id=row.id,
                    created_date=row.created_date.isoformat(),
                    name=row.name,
                    category=row.category,
                    price=Decimal(row.price),
                )
        except SQLAlchemyError as e:
            logger.error(f"Failed to query database: {e}")
            raise PersistenceError(f"Failed to query database: {_describe(e)}") from e
        finally:
            session.close()

    def count(self) -> int:
        with self.session_factory() as session:
            try:
                return session.execute(select(func.count()).select_from(Price)).scalar_one()
            except SQLAlchemyError as e:
                raise PersistenceError(f"Failed to count rows: {_describe(e)}") from e

    def ping(self) -> bool:
        try:
            with self.session_factory() as session:
                session.execute(text("SELECT 1")).fetchone()
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database connection check failed: {e}")
            return False
