"""Tests for CSV table reading and writing."""

import io

import pytest

from core.errors import MalformedTable
from etl.csv_table import TableReader, TableWriter


def test_reader_returns_header_then_rows_then_end_of_table():
    reader = TableReader(b"id,name,category,price,created_date\n1,Milk,Dairy,2.50,2024-01-01\n")

    assert reader.read_header() == ["id", "name", "category", "price", "created_date"]
    assert reader.read_row() == ["1", "Milk", "Dairy", "2.50", "2024-01-01"]
    assert reader.read_row() is None
    assert reader.read_row() is None
    assert reader.line_number == 1


def test_reader_keeps_cells_as_text():
    reader = TableReader(b"h1,h2,h3\n007,1e3,\n")
    reader.read_header()

    assert reader.read_row() == ["007", "1e3", ""]


def test_reader_crosses_chunk_boundaries():
    lines = "".join(f"{i},n{i}\n" for i in range(1, 8))
    reader = TableReader(("id,name\n" + lines).encode(), chunk_size=3)
    reader.read_header()

    rows = list(reader)
    assert [row[0] for row in rows] == [str(i) for i in range(1, 8)]
    assert reader.line_number == 7


def test_reader_header_only_table_has_no_rows():
    reader = TableReader(b"id,name,category,price,created_date\n")

    reader.read_header()
    assert list(reader) == []


@pytest.mark.parametrize("content", [b"", b"\n\n"])
def test_reader_rejects_table_without_header(content):
    with pytest.raises(MalformedTable):
        TableReader(content).read_header()


def test_reader_rejects_unbalanced_quotes():
    reader = TableReader(b'id,name,category\n1,"Milk,Dairy\n2,Bread,Bakery\n')

    with pytest.raises(MalformedTable):
        reader.read_header()
        list(reader)


def test_reader_rejects_rows_with_extra_fields():
    reader = TableReader(b"a,b\n1,2\n1,2,3\n")

    with pytest.raises(MalformedTable):
        reader.read_header()
        list(reader)


def test_reader_rejects_invalid_utf8():
    with pytest.raises(MalformedTable):
        reader = TableReader(b"id,name\n1,\xff\xfe\n")
        reader.read_header()
        list(reader)


def test_writer_quotes_only_when_needed():
    sink = io.StringIO()
    writer = TableWriter(sink)
    writer.write_header(["id", "name"])
    writer.write_row(["1", "plain"])
    writer.write_rows([["2", "with, comma"], ["3", 'with "quote"'], ["4", "two\nlines"]])

    assert sink.getvalue() == (
        "id,name\n"
        "1,plain\n"
        '2,"with, comma"\n'
        '3,"with ""quote"""\n'
        '4,"two\nlines"\n'
    )
    assert writer.rows_written == 4


def test_writer_ignores_empty_chunk():
    sink = io.StringIO()
    TableWriter(sink).write_rows([])

    assert sink.getvalue() == ""


def test_quoted_fields_survive_write_then_read():
    fields = ["1", 'Milk, "whole"', "Dairy, fresh", "2.50", "2024-01-01"]
    sink = io.StringIO()
    writer = TableWriter(sink)
    writer.write_header(["id", "name", "category", "price", "created_date"])
    writer.write_row(fields)

    reader = TableReader(sink.getvalue().encode("utf-8"))
    reader.read_header()
    assert reader.read_row() == fields
