"""
Tests for bulk-upload CSV parsing.
"""

from orderdesk.models import ErrorKind
from orderdesk.services.csv_import import EXAMPLE_CSV, PARSE_FAILURE_MESSAGE, parse_product_csv


def test_parse_example_csv():
    result = parse_product_csv(EXAMPLE_CSV)

    assert result.success
    assert result.value[0] == {
        "name": "Tomates",
        "unit": "kg",
        "category": "Verduras",
        "qty_window_a": "5",
        "qty_window_b": "8",
        "qty_window_c": "10",
    }
    assert [row["name"] for row in result.value] == ["Tomates", "Lechuga", "Pan"]


def test_spanish_headers_and_unknown_columns():
    text = "Nombre, Unidad, Categoría, Precio, Proveedor\nLeche, litros, Lácteos, 950, La Serenísima"

    result = parse_product_csv(text)

    assert result.value == [
        {"name": "Leche", "unit": "litros", "category": "Lácteos", "price": "950"}
    ]


def test_rows_with_wrong_column_count_are_skipped():
    text = "name,unit,category\nPan,barras,Panadería\nsolo,dos\nLeche,litros,Lácteos,extra"

    result = parse_product_csv(text)

    assert [row["name"] for row in result.value] == ["Pan"]


def test_quoted_values():
    text = 'name,unit,category\n"Queso, rallado",kg,Lácteos'
    assert parse_product_csv(text).value[0]["name"] == "Queso, rallado"


def test_header_only_or_empty_text_yields_no_rows():
    assert parse_product_csv("").value == []
    assert parse_product_csv("name,unit,category").value == []


def test_missing_required_header_is_a_parse_failure():
    result = parse_product_csv("name,unit\nPan,barras")

    assert not result.success
    assert result.error == ErrorKind.PARSE_FAILURE
    assert result.messages == [PARSE_FAILURE_MESSAGE]


def test_parsed_rows_feed_bulk_create(catalog):
    rows = parse_product_csv(EXAMPLE_CSV).value

    result = catalog.bulk_create(rows, created_by="1")

    assert result.success
    assert [p.qty_window_b for p in catalog.list()] == [8, 5, 15]
