"""Tests for export column projection."""

from product_lookup.catalog.projection import (
    COLUMN_MAP,
    MANDATORY_FIELDS,
    project,
    resolve_fields,
)
from product_lookup.domain.models import ProductRecord


def make_record(product_code: int = 4521, **overrides) -> ProductRecord:
    data = {
        "barcode": "7891000000011",
        "product_code": product_code,
        "family_code": 10,
        "description": "ARROZ TIPO 1 5KG",
        "company_number": 2,
        "stock_quantity": 100,
        "supplier_name": "Fornecedor Alfa",
    }
    data.update(overrides)
    return ProductRecord.from_row(data)


class TestResolveFields:
    """Tests for identifier translation."""

    def test_mandatory_fields_first(self) -> None:
        """Mandatory fields lead, requested fields follow."""
        assert resolve_fields(["col-fornecedor"]) == [
            "barcode",
            "product_code",
            "description",
            "supplier_name",
        ]

    def test_unknown_identifiers_dropped(self) -> None:
        """Identifiers without a mapping are ignored."""
        assert resolve_fields(["col-nao-existe", "descricao"]) == list(MANDATORY_FIELDS)

    def test_duplicates_removed(self) -> None:
        """Repeated and mandatory identifiers appear once."""
        fields = resolve_fields(["col-estoque", "col-ean", "col-estoque"])
        assert fields == ["barcode", "product_code", "description", "stock_quantity"]

    def test_every_mapping_targets_a_record_field(self) -> None:
        """The column map only names real ProductRecord fields."""
        record_fields = set(make_record().to_dict())
        assert set(COLUMN_MAP.values()) <= record_fields


class TestProject:
    """Tests for project()."""

    def test_empty_request_passes_records_through(self) -> None:
        """No requested columns means no transformation."""
        records = [make_record(), make_record(4522)]
        assert project(records, []) == records
        assert project(records, None) == records

    def test_requested_ean_and_description(self) -> None:
        """col-ean + col-descricao yields exactly the mandatory core."""
        rows = project([make_record(), make_record(4522)], ["col-ean", "col-descricao"])
        assert all(set(row) == {"barcode", "product_code", "description"} for row in rows)
        assert [row["product_code"] for row in rows] == [4521, 4522]

    def test_mandatory_fields_kept_for_unrelated_request(self) -> None:
        """Core fields are present whatever was requested."""
        (row,) = project([make_record()], ["col-estoque"])
        assert set(row) == {"barcode", "product_code", "description", "stock_quantity"}
        assert row["stock_quantity"] == 100

    def test_only_unknown_identifiers(self) -> None:
        """Unknown-only requests still produce the mandatory core."""
        (row,) = project([make_record()], ["col-xyz"])
        assert set(row) == set(MANDATORY_FIELDS)
