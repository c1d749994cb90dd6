"""
tests/conftest.py
Shared fixtures for the smartcrud test suite.

No external mocking libraries are used; real file I/O is performed
inside temporary directories managed by pytest's tmp_path fixtures, and
schema introspection runs against real SQLite databases.
"""

from __future__ import annotations

import logging
import pathlib
from typing import Dict, Iterator, List, Optional

import pytest
import yaml
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    create_engine,
)

from smartcrud.config import SmartCrudConfig
from smartcrud.exceptions import StorageUnreachableError
from smartcrud.introspection import RawColumn
from smartcrud.models import ColumnDescriptor, ColumnType, NamingVariants
from smartcrud.utils import derive_names


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_smartcrud_logger() -> Iterator[None]:
    """The CLI reconfigures the package logger; undo that after each test."""
    yield
    package_logger: logging.Logger = logging.getLogger("smartcrud")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


# ---------------------------------------------------------------------------
# Project & configuration fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def project_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    """An empty Laravel project root."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture()
def config(project_dir: pathlib.Path) -> SmartCrudConfig:
    """Default configuration rooted at ``project_dir``."""
    return SmartCrudConfig(base_path=project_dir)


@pytest.fixture()
def invoice_names() -> NamingVariants:
    return derive_names("Invoice")


@pytest.fixture()
def config_yaml_path(tmp_path: pathlib.Path, project_dir: pathlib.Path) -> pathlib.Path:
    """A YAML config file pointing at the project with a relative base path."""
    data = {
        "base_path": "project",
        "default_api_version": "V2",
        "api": {"per_page": 25, "middleware": ["api", "auth:sanctum"]},
        "database": {"searchable_columns": ["customer_name", "reference"]},
    }
    path = tmp_path / "smart-crud.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(data, fh, default_flow_style=False)
    return path


# ---------------------------------------------------------------------------
# Column fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def invoice_columns() -> List[ColumnDescriptor]:
    """Columns of an ``invoices`` table, as the introspector would report them."""
    return [
        ColumnDescriptor(name="id", inferred_type=ColumnType.INTEGER, is_default_excluded=True),
        ColumnDescriptor(name="name", inferred_type=ColumnType.TEXT, max_length=255),
        ColumnDescriptor(
            name="email", inferred_type=ColumnType.TEXT, nullable=True, max_length=255
        ),
        ColumnDescriptor(name="total", inferred_type=ColumnType.FLOAT),
        ColumnDescriptor(name="is_paid", inferred_type=ColumnType.BOOLEAN),
        ColumnDescriptor(name="password", inferred_type=ColumnType.TEXT, nullable=True),
        ColumnDescriptor(
            name="created_at",
            inferred_type=ColumnType.TEXT,
            nullable=True,
            is_default_excluded=True,
        ),
    ]


# ---------------------------------------------------------------------------
# Storage backends
# ---------------------------------------------------------------------------


class StubBackend:
    """
    In-memory ``StorageBackend``.

    ``tables`` maps a table name to its columns. The ``fail_*`` flags make
    the corresponding query raise, to exercise each failure policy.
    """

    def __init__(
        self,
        tables: Optional[Dict[str, Dict[str, RawColumn]]] = None,
        fail_has_table: bool = False,
        fail_column_names: bool = False,
        fail_describe: bool = False,
    ) -> None:
        self.tables: Dict[str, Dict[str, RawColumn]] = tables or {}
        self.fail_has_table = fail_has_table
        self.fail_column_names = fail_column_names
        self.fail_describe = fail_describe
        self.calls: List[str] = []

    def has_table(self, table: str) -> bool:
        self.calls.append(f"has_table:{table}")
        if self.fail_has_table:
            raise StorageUnreachableError("connection refused")
        return table in self.tables

    def column_names(self, table: str) -> List[str]:
        self.calls.append(f"column_names:{table}")
        if self.fail_column_names:
            raise StorageUnreachableError("connection lost")
        return list(self.tables[table])

    def describe_columns(self, table: str) -> Dict[str, RawColumn]:
        self.calls.append(f"describe_columns:{table}")
        if self.fail_describe:
            raise NotImplementedError("describe not supported")
        return dict(self.tables[table])


@pytest.fixture()
def backend_factory() -> type:
    """The ``StubBackend`` class, for tests that need a custom table set."""
    return StubBackend


@pytest.fixture()
def stub_backend() -> StubBackend:
    return StubBackend(
        tables={
            "invoices": {
                "id": RawColumn(type="bigint unsigned", nullable=False),
                "reference": RawColumn(type="varchar(50)", nullable=False),
                "email": RawColumn(type="varchar(255)", nullable=False),
                "amount": RawColumn(type="decimal(10,2)", nullable=False),
                "is_paid": RawColumn(type="tinyint(1)", nullable=False),
                "notes": RawColumn(type="text", nullable=True),
                "created_at": RawColumn(type="timestamp", nullable=True),
                "updated_at": RawColumn(type="timestamp", nullable=True),
            }
        }
    )


@pytest.fixture()
def sqlite_url(tmp_path: pathlib.Path) -> str:
    """A SQLite database holding an ``invoices`` table."""
    db_path = tmp_path / "shop.sqlite"
    url = f"sqlite:///{db_path}"
    metadata = MetaData()
    Table(
        "invoices",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("customer_name", String(120), nullable=False),
        Column("reference", String(50), nullable=False),
        Column("email", String(255), nullable=True),
        Column("total", Numeric(10, 2), nullable=False),
        Column("is_paid", Boolean, nullable=False),
        Column("notes", Text, nullable=True),
        Column("created_at", DateTime, nullable=True),
        Column("updated_at", DateTime, nullable=True),
    )
    engine = create_engine(url)
    metadata.create_all(engine)
    engine.dispose()
    return url
