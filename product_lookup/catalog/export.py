"""Spreadsheet export.

Renders product rows into a single-sheet XLSX workbook.
"""

import io
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from product_lookup.domain.models import PRODUCT_COLUMN_NAMES, ProductRecord

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
EXPORT_FILENAME = "produtos.xlsx"
SHEET_TITLE = "Produtos"


def _as_mapping(row: ProductRecord | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(row, ProductRecord):
        return row.to_dict()
    return row


def _cell_value(value: Any) -> Any:
    # Excel cannot store timezone-aware datetimes
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.replace(tzinfo=None)
    return value


def build_workbook(
    rows: Sequence[ProductRecord | Mapping[str, Any]],
    sheet_title: str = SHEET_TITLE,
) -> bytes:
    """Render rows into an XLSX file.

    The columns are the first row's keys: every record field for full
    records, or the projected subset for projected rows. Headers use the
    lookup column names (``EAN``, ``CODIGO_PRODUTO``, ...).

    Args:
        rows: Records or projected dicts, all with the same keys.
        sheet_title: Worksheet name (Excel limits it to 31 characters).

    Returns:
        XLSX file contents.
    """
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = sheet_title[:31]

    mappings = [_as_mapping(row) for row in rows]
    keys = list(mappings[0]) if mappings else []
    headers = [PRODUCT_COLUMN_NAMES.get(key, key) for key in keys]

    worksheet.append(headers)
    header_font = Font(bold=True)
    for col_num in range(1, len(headers) + 1):
        worksheet.cell(row=1, column=col_num).font = header_font

    for mapping in mappings:
        worksheet.append([_cell_value(mapping.get(key)) for key in keys])

    for col_num, header in enumerate(headers, start=1):
        worksheet.column_dimensions[get_column_letter(col_num)].width = max(12, len(header) + 2)

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
