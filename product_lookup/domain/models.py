"""Value objects for the lookup domain.

Filter criteria and the read-only records produced by catalog queries.
Records are transient: they exist only as the result of one query.
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields
from datetime import datetime
from typing import Any, Self

from product_lookup.domain.exceptions import ValidationError

# Bounds for interactive lookups
DEFAULT_LIMIT = 100
MAX_LIMIT = 1000

# Bounds for spreadsheet exports
DEFAULT_EXPORT_LIMIT = 1000
MAX_EXPORT_LIMIT = 10000

LOOKUP_KEY_REQUIRED = (
    "Erro: É necessário informar pelo menos um parâmetro de pesquisa "
    "(código do produto, EAN ou descrição)."
)


def _parse_int(value: int | str | None, message: str, field: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValidationError(message, field=field)
    if isinstance(value, int):
        return value
    value = value.strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError as e:
        raise ValidationError(message, field=field) from e


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


# ============================================================================
# Filter Criteria
# ============================================================================


@dataclass(frozen=True)
class FilterCriteria:
    """Normalized, validated product search parameters.

    Build instances through ``for_lookup`` (interactive queries) or
    ``for_export`` (spreadsheet downloads); both raise ``ValidationError``
    before any storage is touched.

    Attributes:
        limit: Maximum number of rows to return.
        product_code: Exact internal product code (seqproduto).
        family_code: Exact family code (seqfamilia).
        barcode: Exact EAN / access code.
        description: Case-insensitive, unanchored description substring.
        company_number: Exact company (store) number.
    """

    limit: int
    product_code: int | None = None
    family_code: int | None = None
    barcode: str | None = None
    description: str | None = None
    company_number: int | None = None

    def __post_init__(self) -> None:
        """Validate field types and the lower limit bound."""
        if not _is_int(self.limit) or self.limit < 1:
            raise ValidationError("Limite deve ser um número positivo", field="limit")
        for name, field_name in (
            ("product_code", "codigo_produto"),
            ("family_code", "codigo_familia"),
            ("company_number", "nroEmpresa"),
        ):
            value = getattr(self, name)
            if value is not None and not _is_int(value):
                raise ValidationError(f"{field_name} deve ser um número inteiro", field=field_name)
        for name, field_name in (("barcode", "ean"), ("description", "descricao")):
            value = getattr(self, name)
            if value is not None and (not isinstance(value, str) or not value.strip()):
                raise ValidationError(f"{field_name} não pode ser vazio", field=field_name)

    @property
    def has_lookup_key(self) -> bool:
        """Check whether a product code, barcode or description is set."""
        return any(
            value is not None
            for value in (self.product_code, self.barcode, self.description)
        )

    @classmethod
    def _build(
        cls,
        limit: int | str | None,
        default_limit: int,
        max_limit: int,
        product_code: int | str | None,
        family_code: int | str | None,
        barcode: str | None,
        description: str | None,
        company_number: int | str | None,
    ) -> Self:
        parsed_limit = _parse_int(
            limit,
            f"Limite deve ser um número entre 1 e {max_limit}",
            "limit",
        )
        if parsed_limit is None:
            parsed_limit = default_limit
        if not 1 <= parsed_limit <= max_limit:
            raise ValidationError(
                f"Limite deve ser um número entre 1 e {max_limit}",
                field="limit",
            )

        return cls(
            limit=parsed_limit,
            product_code=_parse_int(
                product_code,
                "Código do produto deve ser um número válido",
                "codigo_produto",
            ),
            family_code=_parse_int(
                family_code,
                "Código da família deve ser um número válido",
                "codigo_familia",
            ),
            barcode=_clean(barcode),
            description=_clean(description),
            company_number=_parse_int(
                company_number,
                "Número da empresa deve ser um número válido",
                "nroEmpresa",
            ),
        )

    @classmethod
    def for_lookup(
        cls,
        product_code: int | str | None = None,
        family_code: int | str | None = None,
        barcode: str | None = None,
        description: str | None = None,
        company_number: int | str | None = None,
        limit: int | str | None = None,
        max_limit: int = MAX_LIMIT,
        default_limit: int = DEFAULT_LIMIT,
    ) -> Self:
        """Create criteria for an interactive lookup.

        At least one of product code, barcode or description is required.

        Raises:
            ValidationError: If no lookup key is given, a numeric field
                does not parse, or the limit is out of range.
        """
        criteria = cls._build(
            limit,
            default_limit,
            max_limit,
            product_code,
            family_code,
            barcode,
            description,
            company_number,
        )
        if not criteria.has_lookup_key:
            raise ValidationError(LOOKUP_KEY_REQUIRED)
        return criteria

    @classmethod
    def for_export(
        cls,
        product_code: int | str | None = None,
        family_code: int | str | None = None,
        barcode: str | None = None,
        description: str | None = None,
        company_number: int | str | None = None,
        limit: int | str | None = None,
        max_limit: int = MAX_EXPORT_LIMIT,
        default_limit: int = DEFAULT_EXPORT_LIMIT,
    ) -> Self:
        """Create criteria for an export; no lookup key is required."""
        return cls._build(
            limit,
            default_limit,
            max_limit,
            product_code,
            family_code,
            barcode,
            description,
            company_number,
        )

    def to_filters(self) -> dict[str, Any]:
        """Echo the applied filters using the public parameter names."""
        return {
            "codigo_produto": self.product_code,
            "codigo_familia": self.family_code,
            "ean": self.barcode,
            "descricao": self.description,
            "nroEmpresa": self.company_number,
            "limit": self.limit,
        }


# ============================================================================
# Records
# ============================================================================


def _lower_keys(row: Mapping[str, Any]) -> dict[str, Any]:
    # Oracle reports unquoted aliases upper-cased
    return {str(key).lower(): value for key, value in row.items()}


@dataclass(frozen=True)
class ProductRecord:
    """One fully joined product row.

    Attributes:
        barcode: EAN / access code (codacesso).
        product_code: Internal product code (seqproduto).
        family_code: Family code (seqfamilia).
        description: Short description (descreduzida).
        stock_quantity: Store stock (estqloja).
        company_number: Company / store number (nroempresa).
        icms_rate: ICMS tax rate.
        pis_percent: PIS percentage.
        cofins_percent: COFINS percentage.
        billing_state: Billing state (UF).
        package_quantity: Units per supplier package.
        supplier_name: Supplier legal name.
        included_at: When the product was registered.
        weighable: Weighable flag ('S' / 'N').
        registered_by: Code of the user who registered the product.
        registered_by_number: Sequence number of that user.
        registered_by_name: Name of that user.
    """

    barcode: str | None
    product_code: int
    family_code: int
    description: str | None
    stock_quantity: float | None
    company_number: int
    icms_rate: float | None
    pis_percent: float | None
    cofins_percent: float | None
    billing_state: str | None
    package_quantity: float | None
    supplier_name: str | None
    included_at: datetime | None
    weighable: str | None
    registered_by: str | None
    registered_by_number: int | None
    registered_by_name: str | None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Self:
        """Create a record from a result row keyed by column alias."""
        data = _lower_keys(row)
        return cls(**{f.name: data.get(f.name) for f in fields(cls)})

    def to_dict(self) -> dict[str, Any]:
        """Return the record as a plain dict in field order."""
        return asdict(self)


# Column names of the lookup query; used as JSON keys and export headers
PRODUCT_COLUMN_NAMES = {
    "barcode": "EAN",
    "product_code": "CODIGO_PRODUTO",
    "family_code": "CODIGO_FAMILIA",
    "description": "DESCRICAO",
    "stock_quantity": "ESTOQUE",
    "company_number": "NRO_EMPRESA",
    "icms_rate": "ALIQUOTA_ICMS",
    "pis_percent": "PERCENT_PIS",
    "cofins_percent": "PERCENT_COFINS",
    "billing_state": "ESTADO_FATUR",
    "package_quantity": "EMBALAGEM",
    "supplier_name": "FORNECEDOR",
    "included_at": "DIA_DA_INCLUSAO",
    "weighable": "ITEM_PESAVEL",
    "registered_by": "QUEM_CADASTROU",
    "registered_by_number": "NUMERO_USUARIO",
    "registered_by_name": "NOME_DE_QUEM_CADASTROU",
}


@dataclass(frozen=True)
class FamilyRecord:
    """Product family."""

    family_code: int
    description: str | None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Self:
        data = _lower_keys(row)
        return cls(family_code=data["family_code"], description=data.get("description"))


@dataclass(frozen=True)
class UserRecord:
    """ERP user."""

    user_code: str
    name: str | None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Self:
        data = _lower_keys(row)
        return cls(user_code=data["user_code"], name=data.get("name"))


@dataclass(frozen=True)
class StatisticsSummary:
    """Catalog-wide counts.

    Attributes:
        total_products: Rows in map_produto.
        total_families: Rows in map_familia.
        total_users: Rows in ge_usuario.
        last_inclusion: Most recent product inclusion, None if empty.
    """

    total_products: int
    total_families: int
    total_users: int
    last_inclusion: datetime | None
