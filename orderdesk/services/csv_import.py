"""
CSV parsing for product bulk uploads.

Turns pasted or uploaded CSV text into rows keyed by the catalog's field
names, ready for ProductCatalog.bulk_create.
"""

import csv
import io
from typing import Dict, List

from ..models import ErrorKind, OperationResult
from ..utils import get_logger

PARSE_FAILURE_MESSAGE = "Error al procesar el archivo. Verifique el formato."

# Accepted header names (English and Spanish) per catalog field
HEADER_ALIASES = {
    "name": "name",
    "nombre": "name",
    "unit": "unit",
    "unidad": "unit",
    "category": "category",
    "categoria": "category",
    "categoría": "category",
    "price": "price",
    "precio": "price",
    "qty_dom_mie": "qty_window_a",
    "cantidad_dom_mie": "qty_window_a",
    "qty_jue": "qty_window_b",
    "cantidad_jue": "qty_window_b",
    "qty_vie": "qty_window_c",
    "cantidad_vie": "qty_window_c",
}

REQUIRED_FIELDS = ("name", "unit", "category")

EXAMPLE_CSV = """name,unit,category,qty_dom_mie,qty_jue,qty_vie
Tomates,kg,Verduras,5,8,10
Lechuga,unidades,Verduras,3,5,7
Pan,barras,Panadería,10,15,20"""


def parse_product_csv(text: str) -> OperationResult:
    """
    Parse bulk-upload CSV text.

    The first line is the header. Data lines whose column count differs
    from the header are skipped. Unknown columns are ignored. Any
    structural problem yields a single generic parse failure.

    Args:
        text: Raw CSV text

    Returns:
        Result holding a list of rows (dicts with canonical keys and raw
        string values), or PARSE_FAILURE
    """
    logger = get_logger("csv_import")

    try:
        reader = csv.reader(io.StringIO(text.strip()), skipinitialspace=True)
        lines = [line for line in reader if line]
    except csv.Error as e:
        logger.warning(f"CSV parse failed: {e}")
        return OperationResult.fail(ErrorKind.PARSE_FAILURE, PARSE_FAILURE_MESSAGE)

    if len(lines) < 2:
        return OperationResult.ok([])

    headers = [HEADER_ALIASES.get(h.strip().lower()) for h in lines[0]]
    if any(field not in headers for field in REQUIRED_FIELDS):
        logger.warning(f"CSV header missing required columns: {lines[0]}")
        return OperationResult.fail(ErrorKind.PARSE_FAILURE, PARSE_FAILURE_MESSAGE)

    rows: List[Dict[str, str]] = []
    for values in lines[1:]:
        if len(values) != len(headers):
            continue
        row = {}
        for field, value in zip(headers, values):
            if field is not None and field not in row:
                row[field] = value.strip()
        rows.append(row)

    logger.info(f"Parsed {len(rows)} CSV row(s)")
    return OperationResult.ok(rows)
