"""Column projection for exports.

Reduces product records to the columns a caller marked visible, always
keeping the identifying core fields.
"""

from collections.abc import Iterable, Sequence
from typing import Any

from product_lookup.domain.models import ProductRecord

# Caller column identifiers -> ProductRecord field names
COLUMN_MAP: dict[str, str] = {
    "col-ean": "barcode",
    "col-codigo": "product_code",
    "col-familia": "family_code",
    "col-descricao": "description",
    "col-estoque": "stock_quantity",
    "col-empresa": "company_number",
    "col-icms": "icms_rate",
    "col-pis": "pis_percent",
    "col-cofins": "cofins_percent",
    "col-uf": "billing_state",
    "col-embalagem": "package_quantity",
    "col-fornecedor": "supplier_name",
    "col-inclusao": "included_at",
    "col-pesavel": "weighable",
    "col-usuario": "registered_by",
    "col-numero-usuario": "registered_by_number",
    "col-nome-usuario": "registered_by_name",
}

MANDATORY_FIELDS: tuple[str, ...] = ("barcode", "product_code", "description")


def resolve_fields(visible_columns: Iterable[str]) -> list[str]:
    """Translate caller identifiers to field names.

    Mandatory fields come first, then requested fields in request order.
    Duplicates and unknown identifiers are dropped.
    """
    selected = dict.fromkeys(MANDATORY_FIELDS)
    for column in visible_columns:
        field_name = COLUMN_MAP.get(column)
        if field_name is not None:
            selected.setdefault(field_name)
    return list(selected)


def project(
    records: Sequence[ProductRecord],
    visible_columns: Iterable[str] | None = None,
) -> list[ProductRecord] | list[dict[str, Any]]:
    """Project records onto the visible columns.

    Args:
        records: Records to reduce.
        visible_columns: Caller column identifiers; empty or None keeps
            every record unchanged.

    Returns:
        The original records, or one dict per record holding exactly the
        mandatory and requested fields.
    """
    requested = list(visible_columns or ())
    if not requested:
        return list(records)

    field_names = resolve_fields(requested)
    return [
        {name: getattr(record, name) for name in field_names}
        for record in records
    ]
