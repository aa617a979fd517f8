"""Parameterized SQL for catalog lookups.

The product query is a fixed base join plus optional predicates taken
from a FilterCriteria. Caller values only ever travel as bound
parameters; the statement text is built from constant templates.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import TextClause, bindparam, text

from product_lookup.domain.models import FilterCriteria

PRODUCT_BASE_QUERY = """
SELECT DISTINCT
    e.codacesso AS barcode,
    a.seqproduto AS product_code,
    a.seqfamilia AS family_code,
    a.descreduzida AS description,
    i.estqloja AS stock_quantity,
    i.nroempresa AS company_number,
    h.aliquotaicms AS icms_rate,
    h.perpis AS pis_percent,
    h.percofins AS cofins_percent,
    h.uffaturamento AS billing_state,
    g.qtdembalagem AS package_quantity,
    g.nomerazao AS supplier_name,
    a.dtahorinclusao AS included_at,
    d.pesavel AS weighable,
    a.usuarioinclusao AS registered_by,
    b.sequsuario AS registered_by_number,
    b.nome AS registered_by_name
FROM map_produto a
JOIN ge_usuario b ON a.usuarioinclusao = b.codusuario
JOIN map_familia d ON a.seqfamilia = d.seqfamilia
JOIN map_prodcodigo e ON e.seqfamilia = a.seqfamilia
JOIN map_famdivcateg f ON f.seqfamilia = a.seqfamilia
JOIN mlo_prodcodfornec g ON a.seqproduto = g.seqproduto
JOIN macv_custocomprauf h ON h.seqfamilia = a.seqfamilia AND g.seqpessoa = h.seqfornecedor
JOIN mrl_produtoempresa i ON a.seqproduto = i.seqproduto
WHERE e.indutilvenda = 'S'
  AND e.tipcodigo IN ('B', 'E')"""

EXCLUDED_COMPANIES_CLAUSE = "AND i.nroempresa NOT IN :empresasExcluidas"

PRODUCT_ORDER_CLAUSE = "ORDER BY a.dtahorinclusao DESC"

# Row-limit syntax per dialect; anything not listed uses LIMIT
LIMIT_CLAUSES = {
    "oracle": "FETCH FIRST :limite ROWS ONLY",
}
DEFAULT_LIMIT_CLAUSE = "LIMIT :limite"

FAMILIES_QUERY = """
SELECT DISTINCT seqfamilia AS family_code, descricao AS description
FROM map_familia
ORDER BY description"""

USERS_QUERY = """
SELECT DISTINCT codusuario AS user_code, nome AS name
FROM ge_usuario
ORDER BY name"""

PRODUCT_COUNT_QUERY = "SELECT COUNT(*) AS total FROM map_produto"
FAMILY_COUNT_QUERY = "SELECT COUNT(*) AS total FROM map_familia"
USER_COUNT_QUERY = "SELECT COUNT(*) AS total FROM ge_usuario"
LAST_INCLUSION_QUERY = "SELECT MAX(dtahorinclusao) AS last_inclusion FROM map_produto"


@dataclass(frozen=True)
class Predicate:
    """One optional filter: a constant clause and the value it binds.

    Attributes:
        clause: Clause text referencing ``:parameter``.
        parameter: Bind parameter name.
        value: Value bound to the parameter.
    """

    clause: str
    parameter: str
    value: Any


@dataclass(frozen=True)
class BuiltQuery:
    """Statement text with its bound parameter mapping.

    Attributes:
        sql: Statement text containing only named placeholders.
        params: Placeholder name to bound value.
        expanding: Parameters bound as lists (rendered as IN lists).
    """

    sql: str
    params: dict[str, Any]
    expanding: tuple[str, ...] = field(default=())

    def to_statement(self) -> TextClause:
        """Convert to an executable SQLAlchemy text clause."""
        statement = text(self.sql)
        if self.expanding:
            statement = statement.bindparams(
                *(bindparam(name, expanding=True) for name in self.expanding)
            )
        return statement


LIKE_ESCAPE = "\\"


def like_pattern(value: str) -> str:
    """Wrap text as an unanchored LIKE pattern matching it literally."""
    for char in (LIKE_ESCAPE, "%", "_"):
        value = value.replace(char, LIKE_ESCAPE + char)
    return f"%{value}%"


def product_predicates(criteria: FilterCriteria) -> tuple[Predicate, ...]:
    """Collect the optional predicates for criteria, in fixed order.

    Order: product code, family code, barcode, description, company.
    """
    candidates = (
        Predicate("AND a.seqproduto = :codigoProduto", "codigoProduto", criteria.product_code),
        Predicate("AND a.seqfamilia = :codigoFamilia", "codigoFamilia", criteria.family_code),
        Predicate("AND e.codacesso = :ean", "ean", criteria.barcode),
        Predicate(
            f"AND UPPER(a.descreduzida) LIKE UPPER(:descricao) ESCAPE '{LIKE_ESCAPE}'",
            "descricao",
            like_pattern(criteria.description) if criteria.description is not None else None,
        ),
        Predicate("AND i.nroempresa = :nroEmpresa", "nroEmpresa", criteria.company_number),
    )
    return tuple(p for p in candidates if p.value is not None)


def limit_clause(dialect: str) -> str:
    """Return the row-limit clause for a dialect."""
    return LIMIT_CLAUSES.get(dialect, DEFAULT_LIMIT_CLAUSE)


def build_product_query(
    criteria: FilterCriteria,
    excluded_companies: Sequence[int] = (),
    dialect: str = "oracle",
) -> BuiltQuery:
    """Compose the product lookup statement.

    Pure function: identical arguments always give identical output.

    Args:
        criteria: Validated filter criteria.
        excluded_companies: Company numbers never returned.
        dialect: Database dialect name, selects the row-limit syntax.

    Returns:
        Statement text and parameter bindings.
    """
    clauses = [PRODUCT_BASE_QUERY]
    params: dict[str, Any] = {}
    expanding: tuple[str, ...] = ()

    if excluded_companies:
        clauses.append(EXCLUDED_COMPANIES_CLAUSE)
        params["empresasExcluidas"] = list(excluded_companies)
        expanding = ("empresasExcluidas",)

    for predicate in product_predicates(criteria):
        clauses.append(predicate.clause)
        params[predicate.parameter] = predicate.value

    clauses.append(PRODUCT_ORDER_CLAUSE)
    clauses.append(limit_clause(dialect))
    params["limite"] = criteria.limit

    return BuiltQuery(sql="\n  ".join(clauses), params=params, expanding=expanding)
