"""Shared fixtures.

Builds a file-backed SQLite copy of the ERP catalog tables so the real
query builder, executor and pool run end to end.
"""

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy import create_engine, text

from product_lookup.catalog.executor import QueryExecutor
from product_lookup.catalog.repository import ProductRepository
from product_lookup.infrastructure.config import Settings
from product_lookup.infrastructure.database import ConnectionPool

# ============================================================================
# Catalog Schema and Data
# ============================================================================

CATALOG_DDL = [
    """CREATE TABLE map_produto (
        seqproduto INTEGER, seqfamilia INTEGER, descreduzida TEXT,
        dtahorinclusao TEXT, usuarioinclusao TEXT)""",
    "CREATE TABLE ge_usuario (codusuario TEXT, sequsuario INTEGER, nome TEXT)",
    "CREATE TABLE map_familia (seqfamilia INTEGER, descricao TEXT, pesavel TEXT)",
    """CREATE TABLE map_prodcodigo (
        seqfamilia INTEGER, codacesso TEXT, indutilvenda TEXT, tipcodigo TEXT)""",
    "CREATE TABLE map_famdivcateg (seqfamilia INTEGER)",
    """CREATE TABLE mlo_prodcodfornec (
        seqproduto INTEGER, seqpessoa INTEGER, qtdembalagem REAL, nomerazao TEXT)""",
    """CREATE TABLE macv_custocomprauf (
        seqfamilia INTEGER, seqfornecedor INTEGER, aliquotaicms REAL,
        perpis REAL, percofins REAL, uffaturamento TEXT)""",
    """CREATE TABLE mrl_produtoempresa (
        seqproduto INTEGER, nroempresa INTEGER, estqloja REAL)""",
]

CATALOG_ROWS: dict[str, list[dict]] = {
    "ge_usuario": [
        {"codusuario": "BRUNO", "sequsuario": 2, "nome": "Bruno Lima"},
        {"codusuario": "ANA", "sequsuario": 1, "nome": "Ana Souza"},
    ],
    "map_familia": [
        {"seqfamilia": 10, "descricao": "ARROZ BRANCO", "pesavel": "N"},
        {"seqfamilia": 11, "descricao": "ARROZ PARBOILIZADO", "pesavel": "N"},
        {"seqfamilia": 12, "descricao": "ARROZ INTEGRAL", "pesavel": "N"},
        {"seqfamilia": 20, "descricao": "FEIJAO", "pesavel": "N"},
        {"seqfamilia": 30, "descricao": "CARNES", "pesavel": "S"},
        {"seqfamilia": 40, "descricao": "DIVERSOS", "pesavel": "N"},
    ],
    "map_produto": [
        {"seqproduto": 4521, "seqfamilia": 10, "descreduzida": "ARROZ TIPO 1 5KG",
         "dtahorinclusao": "2024-03-10 10:00:00", "usuarioinclusao": "ANA"},
        {"seqproduto": 4522, "seqfamilia": 11, "descreduzida": "Arroz Parboilizado 1kg",
         "dtahorinclusao": "2024-05-01 08:30:00", "usuarioinclusao": "BRUNO"},
        {"seqproduto": 4523, "seqfamilia": 12, "descreduzida": "arroz integral 1kg",
         "dtahorinclusao": "2024-01-15 14:00:00", "usuarioinclusao": "ANA"},
        {"seqproduto": 5001, "seqfamilia": 20, "descreduzida": "FEIJAO CARIOCA 1KG",
         "dtahorinclusao": "2023-12-01 09:00:00", "usuarioinclusao": "BRUNO"},
        {"seqproduto": 6001, "seqfamilia": 30, "descreduzida": "PICANHA KG",
         "dtahorinclusao": "2024-06-01 07:00:00", "usuarioinclusao": "ANA"},
        # No supplier row: dropped by the inner joins
        {"seqproduto": 7001, "seqfamilia": 40, "descreduzida": "PRODUTO SEM FORNECEDOR",
         "dtahorinclusao": "2024-07-01 07:00:00", "usuarioinclusao": "ANA"},
    ],
    "map_prodcodigo": [
        {"seqfamilia": 10, "codacesso": "7891000000011", "indutilvenda": "S", "tipcodigo": "B"},
        {"seqfamilia": 10, "codacesso": "INTERNO-10", "indutilvenda": "N", "tipcodigo": "B"},
        {"seqfamilia": 11, "codacesso": "7891000000028", "indutilvenda": "S", "tipcodigo": "E"},
        {"seqfamilia": 12, "codacesso": "7891000000035", "indutilvenda": "S", "tipcodigo": "B"},
        {"seqfamilia": 20, "codacesso": "7891000000042", "indutilvenda": "S", "tipcodigo": "B"},
        {"seqfamilia": 20, "codacesso": "F20", "indutilvenda": "S", "tipcodigo": "I"},
        {"seqfamilia": 30, "codacesso": "2000000000015", "indutilvenda": "S", "tipcodigo": "B"},
        {"seqfamilia": 40, "codacesso": "7891000000059", "indutilvenda": "S", "tipcodigo": "B"},
    ],
    "map_famdivcateg": [{"seqfamilia": f} for f in (10, 11, 12, 20, 30, 40)],
    "mlo_prodcodfornec": [
        {"seqproduto": 4521, "seqpessoa": 900, "qtdembalagem": 10, "nomerazao": "Fornecedor Alfa"},
        {"seqproduto": 4522, "seqpessoa": 900, "qtdembalagem": 12, "nomerazao": "Fornecedor Alfa"},
        {"seqproduto": 4523, "seqpessoa": 900, "qtdembalagem": 12, "nomerazao": "Fornecedor Alfa"},
        {"seqproduto": 5001, "seqpessoa": 901, "qtdembalagem": 20, "nomerazao": "Fornecedor Beta"},
        {"seqproduto": 6001, "seqpessoa": 901, "qtdembalagem": 1, "nomerazao": "Fornecedor Beta"},
    ],
    "macv_custocomprauf": [
        {"seqfamilia": 10, "seqfornecedor": 900, "aliquotaicms": 7.0,
         "perpis": 1.65, "percofins": 7.6, "uffaturamento": "CE"},
        {"seqfamilia": 11, "seqfornecedor": 900, "aliquotaicms": 7.0,
         "perpis": 1.65, "percofins": 7.6, "uffaturamento": "CE"},
        {"seqfamilia": 12, "seqfornecedor": 900, "aliquotaicms": 7.0,
         "perpis": 1.65, "percofins": 7.6, "uffaturamento": "CE"},
        {"seqfamilia": 20, "seqfornecedor": 901, "aliquotaicms": 12.0,
         "perpis": 1.65, "percofins": 7.6, "uffaturamento": "PE"},
        {"seqfamilia": 30, "seqfornecedor": 901, "aliquotaicms": 18.0,
         "perpis": 0.0, "percofins": 0.0, "uffaturamento": "PE"},
    ],
    "mrl_produtoempresa": [
        {"seqproduto": 4521, "nroempresa": 2, "estqloja": 100},
        # Company 38 is in the default exclusion list
        {"seqproduto": 4521, "nroempresa": 38, "estqloja": 5},
        {"seqproduto": 4522, "nroempresa": 2, "estqloja": 40},
        {"seqproduto": 4523, "nroempresa": 3, "estqloja": 15},
        {"seqproduto": 5001, "nroempresa": 2, "estqloja": 70},
        {"seqproduto": 6001, "nroempresa": 3, "estqloja": 8.5},
    ],
}


def seed_catalog(path: Path) -> None:
    """Create and fill the catalog tables in a SQLite file."""
    engine = create_engine(f"sqlite:///{path}")
    with engine.begin() as conn:
        for ddl in CATALOG_DDL:
            conn.execute(text(ddl))
        for table, rows in CATALOG_ROWS.items():
            columns = list(rows[0])
            insert = text(
                f"INSERT INTO {table} ({', '.join(columns)}) "
                f"VALUES ({', '.join(':' + c for c in columns)})"
            )
            conn.execute(insert, rows)
    engine.dispose()


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def catalog_url(tmp_path: Path) -> str:
    """Async URL of a seeded SQLite catalog."""
    path = tmp_path / "catalog.db"
    seed_catalog(path)
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def test_settings(catalog_url: str) -> Settings:
    """Settings pointing at the seeded catalog."""
    return Settings(
        _env_file=None,
        database_url=catalog_url,
        environment="development",
        enable_diagnostic_query=True,
        db_pool_min=1,
        db_pool_max=3,
        db_pool_timeout=1.0,
        query_timeout=5.0,
        startup_check_attempts=1,
        startup_check_timeout=5.0,
        startup_check_backoff=0.0,
        log_json=False,
    )


@pytest_asyncio.fixture
async def pool(test_settings: Settings) -> AsyncIterator[ConnectionPool]:
    """Initialized pool over the seeded catalog."""
    pool = ConnectionPool.from_settings(test_settings)
    await pool.initialize()
    yield pool
    await pool.shutdown()


@pytest.fixture
def executor(pool: ConnectionPool) -> QueryExecutor:
    """Executor bound to the test pool."""
    return QueryExecutor(pool, timeout=5.0)


@pytest.fixture
def repository(executor: QueryExecutor, test_settings: Settings) -> ProductRepository:
    """Repository with the default company exclusions."""
    return ProductRepository(executor, test_settings.excluded_companies)
