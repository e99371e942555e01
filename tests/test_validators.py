"""Tests for upload row validation."""

from decimal import Decimal

import pytest

from core.errors import InvalidID, InvalidPrice, MalformedTable
from etl.records import PriceRecord
from etl.validators import to_record, validate_id, validate_price


def test_to_record_maps_upload_order():
    record = to_record(["1", "Milk", "Dairy", "2.50", "2024-01-01"])

    assert record == PriceRecord(
        id=1,
        created_date="2024-01-01",
        name="Milk",
        category="Dairy",
        price=Decimal("2.50"),
    )


def test_to_record_passes_text_fields_through_verbatim():
    record = to_record(["7", "", " Dairy ", "0", "not-a-date"])

    assert record.name == ""
    assert record.category == " Dairy "
    assert record.created_date == "not-a-date"


@pytest.mark.parametrize("value", ["", "abc", "1.5", "0x10"])
def test_validate_id_rejects_non_integers(value):
    with pytest.raises(InvalidID):
        validate_id(value)


def test_validate_id_accepts_surrounding_spaces():
    assert validate_id(" 42 ") == 42


@pytest.mark.parametrize(
    "value",
    ["", "abc", "1,50", "NaN", "Infinity", "-inf", "-0.01", "1e30", "1e400", "10000000000", "9999999999.999"],
)
def test_validate_price_rejects_bad_values(value):
    with pytest.raises(InvalidPrice):
        validate_price(value)


@pytest.mark.parametrize(
    "value,expected",
    [("2.50", "2.50"), ("0", "0"), ("1e2", "100"), ("10.005", "10.005"), ("9999999999.99", "9999999999.99")],
)
def test_validate_price_parses_decimals(value, expected):
    assert validate_price(value) == Decimal(expected)


def test_to_record_reports_row_number():
    with pytest.raises(InvalidPrice) as excinfo:
        to_record(["1", "Milk", "Dairy", "cheap", "2024-01-01"], line_number=3)

    assert excinfo.value.line_number == 3
    assert "row 3" in str(excinfo.value)


def test_to_record_rejects_short_rows():
    with pytest.raises(MalformedTable):
        to_record(["1", "Milk", "Dairy"])


def test_to_record_checks_id_before_price():
    with pytest.raises(InvalidID):
        to_record(["x", "Milk", "Dairy", "cheap", "2024-01-01"])


def test_record_renders_both_column_orders():
    record = PriceRecord(id=1, created_date="2024-01-01", name="Milk", category="Dairy", price=Decimal("2.5"))

    assert record.to_download_row() == ["1", "2024-01-01", "Milk", "Dairy", "2.50"]
    assert record.to_upload_row() == ["1", "Milk", "Dairy", "2.50", "2024-01-01"]
