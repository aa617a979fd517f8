"""API schemas for the product lookup API.

Pydantic models for response serialization. Product fields serialize
under the upper-case column names clients of the lookup screen expect.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from product_lookup.domain.models import (
    FamilyRecord,
    ProductRecord,
    StatisticsSummary,
    UserRecord,
)


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    success: bool = Field(default=False)
    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    error: str | None = Field(
        default=None,
        description="Underlying error detail, withheld in production",
    )
    details: dict[str, Any] = Field(default_factory=dict)
    request_id: str | None = Field(default=None, description="Request ID for correlation")
    timestamp: datetime


# ============================================================================
# Catalog Schemas
# ============================================================================


class ProductSchema(BaseModel):
    """Product lookup row."""

    model_config = ConfigDict(populate_by_name=True)

    barcode: str | None = Field(serialization_alias="EAN")
    product_code: int = Field(serialization_alias="CODIGO_PRODUTO")
    family_code: int = Field(serialization_alias="CODIGO_FAMILIA")
    description: str | None = Field(serialization_alias="DESCRICAO")
    stock_quantity: float | None = Field(serialization_alias="ESTOQUE")
    company_number: int = Field(serialization_alias="NRO_EMPRESA")
    icms_rate: float | None = Field(serialization_alias="ALIQUOTA_ICMS")
    pis_percent: float | None = Field(serialization_alias="PERCENT_PIS")
    cofins_percent: float | None = Field(serialization_alias="PERCENT_COFINS")
    billing_state: str | None = Field(serialization_alias="ESTADO_FATUR")
    package_quantity: float | None = Field(serialization_alias="EMBALAGEM")
    supplier_name: str | None = Field(serialization_alias="FORNECEDOR")
    included_at: datetime | str | None = Field(serialization_alias="DIA_DA_INCLUSAO")
    weighable: str | None = Field(serialization_alias="ITEM_PESAVEL")
    registered_by: str | None = Field(serialization_alias="QUEM_CADASTROU")
    registered_by_number: int | None = Field(serialization_alias="NUMERO_USUARIO")
    registered_by_name: str | None = Field(serialization_alias="NOME_DE_QUEM_CADASTROU")

    @classmethod
    def from_record(cls, record: ProductRecord) -> "ProductSchema":
        return cls(**record.to_dict())


class ProductFilters(BaseModel):
    """Filters echoed back with a lookup."""

    codigo_produto: int | None = None
    codigo_familia: int | None = None
    ean: str | None = None
    descricao: str | None = None
    nroEmpresa: int | None = None
    limit: int


class ProductListResponse(BaseModel):
    """Product lookup response."""

    success: bool = True
    data: list[ProductSchema]
    total: int
    filtros: ProductFilters
    timestamp: datetime


class FamilySchema(BaseModel):
    """Product family."""

    CODIGO_FAMILIA: int
    DESCRICAO: str | None

    @classmethod
    def from_record(cls, record: FamilyRecord) -> "FamilySchema":
        return cls(CODIGO_FAMILIA=record.family_code, DESCRICAO=record.description)


class FamilyListResponse(BaseModel):
    """Family list response."""

    success: bool = True
    data: list[FamilySchema]
    total: int
    timestamp: datetime


class UserSchema(BaseModel):
    """ERP user."""

    CODUSUARIO: str
    NOME: str | None

    @classmethod
    def from_record(cls, record: UserRecord) -> "UserSchema":
        return cls(CODUSUARIO=str(record.user_code), NOME=record.name)


class UserListResponse(BaseModel):
    """User list response."""

    success: bool = True
    data: list[UserSchema]
    total: int
    timestamp: datetime


class StatisticsSchema(BaseModel):
    """Catalog statistics."""

    totalProdutos: int
    totalFamilias: int
    totalUsuarios: int
    ultimaAtualizacao: datetime | str | None

    @classmethod
    def from_summary(cls, summary: StatisticsSummary) -> "StatisticsSchema":
        return cls(
            totalProdutos=summary.total_products,
            totalFamilias=summary.total_families,
            totalUsuarios=summary.total_users,
            ultimaAtualizacao=summary.last_inclusion,
        )


class StatisticsResponse(BaseModel):
    """Statistics response."""

    success: bool = True
    data: StatisticsSchema
    timestamp: datetime


# ============================================================================
# Diagnostic Schemas
# ============================================================================


class DiagnosticQueryRequest(BaseModel):
    """Raw SQL execution request (development only)."""

    sql: str | None = Field(default=None, description="Statement to execute")
    params: list[Any] | dict[str, Any] = Field(
        default_factory=list,
        description="Positional (:1, :2, ...) or named parameters",
    )


class DiagnosticQueryResponse(BaseModel):
    """Raw SQL execution result."""

    success: bool = True
    data: list[dict[str, Any]]
    total: int
    sql: str
    params: list[Any] | dict[str, Any]
    timestamp: datetime


# ============================================================================
# Info / Health Schemas
# ============================================================================


class InfoResponse(BaseModel):
    """Service description and endpoint index."""

    message: str
    version: str
    status: str
    timestamp: datetime
    endpoints: dict[str, str]


class DatabaseHealth(BaseModel):
    """Database part of a health report."""

    status: str
    timestamp: datetime


class AppHealth(BaseModel):
    """Application part of a health report."""

    name: str
    version: str
    environment: str


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    timestamp: datetime
    uptime: float
    database: DatabaseHealth
    app: AppHealth
