"""Tests for domain value objects."""

from datetime import datetime

import pytest

from product_lookup.domain.exceptions import ValidationError
from product_lookup.domain.models import FilterCriteria, ProductRecord


class TestFilterCriteriaLookup:
    """Tests for FilterCriteria.for_lookup."""

    def test_requires_a_lookup_key(self) -> None:
        """Empty criteria are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            FilterCriteria.for_lookup()
        assert "pelo menos um parâmetro" in exc_info.value.message

    def test_family_and_company_alone_are_not_enough(self) -> None:
        """Family code and company number only narrow a search."""
        with pytest.raises(ValidationError):
            FilterCriteria.for_lookup(family_code=10, company_number=2)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"product_code": 4521},
            {"barcode": "7891000000011"},
            {"description": "arroz"},
        ],
    )
    def test_any_lookup_key_is_accepted(self, kwargs: dict) -> None:
        """Product code, barcode or description each satisfy the rule."""
        criteria = FilterCriteria.for_lookup(**kwargs)
        assert criteria.has_lookup_key
        assert criteria.limit == 100

    def test_parses_numeric_strings(self) -> None:
        """Query-string values are converted to integers."""
        criteria = FilterCriteria.for_lookup(
            product_code="4521",
            family_code=" 10 ",
            company_number="2",
            limit="5",
        )
        assert criteria.product_code == 4521
        assert criteria.family_code == 10
        assert criteria.company_number == 2
        assert criteria.limit == 5

    def test_invalid_product_code(self) -> None:
        """Non-numeric product code has a specific message."""
        with pytest.raises(ValidationError) as exc_info:
            FilterCriteria.for_lookup(product_code="abc")
        assert exc_info.value.field == "codigo_produto"
        assert "Código do produto" in exc_info.value.message

    def test_invalid_family_code(self) -> None:
        """Non-numeric family code has a specific message."""
        with pytest.raises(ValidationError) as exc_info:
            FilterCriteria.for_lookup(description="arroz", family_code="x1")
        assert exc_info.value.field == "codigo_familia"

    @pytest.mark.parametrize("limit", [0, -1, 1001, "abc", "1001"])
    def test_limit_out_of_range(self, limit: int | str) -> None:
        """Limits outside 1..1000 are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            FilterCriteria.for_lookup(description="arroz", limit=limit)
        assert exc_info.value.field == "limit"

    @pytest.mark.parametrize("limit", [1, 1000])
    def test_limit_bounds_are_inclusive(self, limit: int) -> None:
        """Both ends of the range are valid."""
        assert FilterCriteria.for_lookup(description="arroz", limit=limit).limit == limit

    def test_blank_strings_are_absent(self) -> None:
        """Whitespace-only text does not count as a lookup key."""
        with pytest.raises(ValidationError):
            FilterCriteria.for_lookup(barcode="  ", description="", product_code="")

    def test_criteria_are_immutable(self) -> None:
        """Criteria cannot be modified after creation."""
        criteria = FilterCriteria.for_lookup(product_code=1)
        with pytest.raises(AttributeError):
            criteria.limit = 5  # type: ignore[misc]

    @pytest.mark.parametrize("product_code", [4521.0, True, b"4521", [4521]])
    def test_non_integer_types_rejected(self, product_code: object) -> None:
        """Only integers and numeric strings parse; bools and floats do not."""
        with pytest.raises(ValidationError) as exc_info:
            FilterCriteria.for_lookup(product_code=product_code)
        assert exc_info.value.field == "codigo_produto"

    def test_boolean_limit_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            FilterCriteria.for_lookup(description="arroz", limit=True)
        assert exc_info.value.field == "limit"


class TestFilterCriteriaInvariants:
    """Direct construction enforces the same field rules."""

    @pytest.mark.parametrize("limit", [0, -1, 2.5, True, "10"])
    def test_limit_must_be_positive_integer(self, limit: object) -> None:
        with pytest.raises(ValidationError) as exc_info:
            FilterCriteria(limit=limit, description="a")  # type: ignore[arg-type]
        assert exc_info.value.field == "limit"

    @pytest.mark.parametrize(
        ("kwargs", "field"),
        [
            ({"product_code": "4521"}, "codigo_produto"),
            ({"family_code": 1.5}, "codigo_familia"),
            ({"company_number": False}, "nroEmpresa"),
            ({"barcode": ""}, "ean"),
            ({"description": "   "}, "descricao"),
            ({"description": 42}, "descricao"),
        ],
    )
    def test_field_types_enforced(self, kwargs: dict, field: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            FilterCriteria(limit=5, **kwargs)
        assert exc_info.value.field == field

    def test_keyless_criteria_can_be_built(self) -> None:
        """A lookup key is only required when searching interactively."""
        criteria = FilterCriteria(limit=5, family_code=10)
        assert not criteria.has_lookup_key


class TestFilterCriteriaExport:
    """Tests for FilterCriteria.for_export."""

    def test_no_lookup_key_required(self) -> None:
        """Exports may run without any filter."""
        criteria = FilterCriteria.for_export()
        assert criteria.limit == 1000
        assert not criteria.has_lookup_key

    def test_larger_limit_allowed(self) -> None:
        """Exports accept limits above the interactive maximum."""
        assert FilterCriteria.for_export(limit=5000).limit == 5000

    def test_limit_still_bounded(self) -> None:
        """Exports have their own upper bound."""
        with pytest.raises(ValidationError):
            FilterCriteria.for_export(limit=10001)

    def test_to_filters_uses_public_names(self) -> None:
        """Applied filters are echoed with request parameter names."""
        criteria = FilterCriteria.for_export(family_code=10, barcode="789")
        assert criteria.to_filters() == {
            "codigo_produto": None,
            "codigo_familia": 10,
            "ean": "789",
            "descricao": None,
            "nroEmpresa": None,
            "limit": 1000,
        }


class TestProductRecord:
    """Tests for ProductRecord row mapping."""

    def test_from_row_is_case_insensitive(self) -> None:
        """Upper-case column aliases map onto record fields."""
        included = datetime(2024, 3, 10, 10, 0)
        record = ProductRecord.from_row(
            {
                "BARCODE": "7891000000011",
                "PRODUCT_CODE": 4521,
                "FAMILY_CODE": 10,
                "DESCRIPTION": "ARROZ TIPO 1 5KG",
                "COMPANY_NUMBER": 2,
                "INCLUDED_AT": included,
            }
        )
        assert record.product_code == 4521
        assert record.barcode == "7891000000011"
        assert record.included_at == included
        assert record.supplier_name is None

    def test_to_dict_keeps_field_order(self) -> None:
        """to_dict starts with the identifying fields."""
        record = ProductRecord.from_row({"product_code": 1, "family_code": 2, "company_number": 3})
        keys = list(record.to_dict())
        assert keys[:4] == ["barcode", "product_code", "family_code", "description"]
        assert len(keys) == 17
