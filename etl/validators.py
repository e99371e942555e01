# WORKFLOW: Row validation for price uploads.
# Used by: Price transfer service, once per CSV row right before its insert
# Functions:
# 1. validate_id() - Parse the integer record id
# 2. validate_price() - Parse a finite, non-negative decimal price
# 3. to_record() - Convert a raw upload row into a PriceRecord
#
# Validation flow: CSV row (strings) -> id/price parsing -> PriceRecord -> persistence gateway
# Name, category and created date pass through verbatim; the database's date
# conversion is the only check the date ever gets.

"""
Row validation for price uploads.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence

from core.errors import InvalidID, InvalidPrice, MalformedTable
from etl.records import UPLOAD_COLUMNS, PriceRecord

logger = logging.getLogger(__name__)

MAX_PRICE_INTEGER_DIGITS = 10
MAX_PRICE = Decimal(10) ** MAX_PRICE_INTEGER_DIGITS
CENT = Decimal("0.01")


def validate_id(value: str, line_number: Optional[int] = None) -> int:
    """
    Parse a record id.

    Args:
        value: Raw id field
        line_number: Row number for error messages

    Returns:
        Integer id
    """
    try:
        return int(value.strip())
    except (ValueError, AttributeError) as e:
        logger.warning(f"Invalid id format: {value!r}")
        raise InvalidID(f"Invalid id format: {value}", line_number) from e


def validate_price(value: str, line_number: Optional[int] = None) -> Decimal:
    """
    Parse a price as a finite, non-negative decimal.

    Args:
        value: Raw price field
        line_number: Row number for error messages

    Returns:
        Decimal price
    """
    try:
        price = Decimal(value.strip())
    except (InvalidOperation, AttributeError) as e:
        logger.warning(f"Invalid price format: {value!r}")
        raise InvalidPrice(f"Invalid price format: {value}", line_number) from e

    if not price.is_finite():
        raise InvalidPrice(f"Price must be a finite number: {value}", line_number)
    if price < 0:
        raise InvalidPrice(f"Price must not be negative: {value}", line_number)
    # prices column is NUMERIC(12, 2): at most 10 integer digits after rounding to cents
    if price.adjusted() >= MAX_PRICE_INTEGER_DIGITS or price.quantize(CENT) >= MAX_PRICE:
        raise InvalidPrice(f"Price out of range: {value}", line_number)
    return price


def to_record(fields: Sequence[str], line_number: Optional[int] = None) -> PriceRecord:
    """
    Convert an upload row into a PriceRecord.

    Args:
        fields: Row in upload order (id, name, category, price, created_date)
        line_number: Row number for error messages

    Returns:
        Typed PriceRecord
    """
    if len(fields) < len(UPLOAD_COLUMNS):
        raise MalformedTable(
            f"Expected {len(UPLOAD_COLUMNS)} fields, got {len(fields)}", line_number
        )

    return PriceRecord(
        id=validate_id(fields[0], line_number),
        name=fields[1],
        category=fields[2],
        price=validate_price(fields[3], line_number),
        created_date=fields[4],
    )
