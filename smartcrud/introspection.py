# File: smartcrud/introspection.py
"""
SmartCRUD - Schema Introspection
=================================

Reads the column layout of the entity's table so that DTOs, validation
rules and resources can follow the real schema.

The storage backend is a collaborator with three read-only queries::

    has_table(table)         -> bool
    column_names(table)      -> List[str]
    describe_columns(table)  -> Dict[str, RawColumn]

``SQLAlchemyBackend`` answers them for any database SQLAlchemy can
reflect. Failure policy:

- Backend unreachable while checking that the table exists → empty
  column list (generation falls back to the default field set).
- Table missing → empty column list.
- Failure while listing column names → ``StorageUnreachableError``.
- Failure while describing columns → names only, no metadata.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.engine.reflection import Inspector
from sqlalchemy.exc import SQLAlchemyError

from smartcrud.config import SmartCrudConfig
from smartcrud.exceptions import StorageUnreachableError
from smartcrud.models import ColumnDescriptor, NamingVariants
from smartcrud.typemap import build_descriptor

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("smartcrud.introspection")


@dataclass(frozen=True)
class RawColumn:
    """Backend-reported metadata for one column."""

    type: str
    nullable: bool


class StorageBackend(Protocol):
    """Read-only schema queries needed by the introspector."""

    def has_table(self, table: str) -> bool:
        ...

    def column_names(self, table: str) -> List[str]:
        ...

    def describe_columns(self, table: str) -> Dict[str, RawColumn]:
        ...


# ---------------------------------------------------------------------------
# SQLAlchemy backend
# ---------------------------------------------------------------------------


class SQLAlchemyBackend:
    """
    Storage backend over a SQLAlchemy ``Engine``.

    Type strings are compiled for the engine's own dialect, so MySQL
    reports ``VARCHAR(255)`` / ``TINYINT(1)`` and PostgreSQL reports
    ``CHARACTER VARYING(255)`` / ``BOOLEAN``.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine: Engine = engine

    @classmethod
    def from_url(cls, url: str, **engine_kwargs: Any) -> "SQLAlchemyBackend":
        try:
            engine: Engine = create_engine(url, **engine_kwargs)
        except (SQLAlchemyError, ImportError, ValueError) as exc:
            raise StorageUnreachableError(
                f"Cannot create engine for {url!r}: {exc}"
            ) from exc
        return cls(engine)

    @property
    def engine(self) -> Engine:
        return self._engine

    def _inspector(self) -> Inspector:
        try:
            return inspect(self._engine)
        except SQLAlchemyError as exc:
            raise StorageUnreachableError(
                f"Cannot connect to {self._engine.url!r}: {exc}"
            ) from exc

    def has_table(self, table: str) -> bool:
        inspector: Inspector = self._inspector()
        try:
            return bool(inspector.has_table(table))
        except SQLAlchemyError as exc:
            raise StorageUnreachableError(
                f"Table lookup for '{table}' failed: {exc}"
            ) from exc

    def column_names(self, table: str) -> List[str]:
        inspector: Inspector = self._inspector()
        try:
            return [column["name"] for column in inspector.get_columns(table)]
        except SQLAlchemyError as exc:
            raise StorageUnreachableError(
                f"Column listing for '{table}' failed: {exc}"
            ) from exc

    def describe_columns(self, table: str) -> Dict[str, RawColumn]:
        """
        Describe every column of ``table``.

        Raises ``sqlalchemy.exc.CompileError`` for reflected types the
        dialect cannot render (e.g. ``NullType`` from an unknown SQLite
        type); the introspector treats that as missing metadata.
        """
        inspector: Inspector = self._inspector()
        described: Dict[str, RawColumn] = {}
        for column in inspector.get_columns(table):
            raw_type: str = column["type"].compile(dialect=self._engine.dialect)
            described[column["name"]] = RawColumn(
                type=raw_type,
                nullable=bool(column.get("nullable", True)),
            )
        return described

    def close(self) -> None:
        self._engine.dispose()


# ---------------------------------------------------------------------------
# Introspector
# ---------------------------------------------------------------------------


class SchemaIntrospector:
    """
    Turns the entity's table into a list of ``ColumnDescriptor``.

    Usage::

        backend = SQLAlchemyBackend.from_url("mysql+pymysql://...")
        columns = SchemaIntrospector(backend, config).introspect(names)
    """

    def __init__(
        self,
        backend: Optional[StorageBackend],
        config: SmartCrudConfig,
    ) -> None:
        self._backend: Optional[StorageBackend] = backend
        self._excluded: frozenset = frozenset(config.database.excluded_columns)

    def introspect(self, names: NamingVariants) -> List[ColumnDescriptor]:
        """Return the table's columns, or ``[]`` when no schema is available."""
        if self._backend is None:
            logger.info("No storage backend configured; using default fields.")
            return []

        table: str = names.table

        try:
            exists: bool = self._backend.has_table(table)
        except StorageUnreachableError as exc:
            logger.warning(
                "Storage backend unreachable (%s); using default fields for %s.",
                exc,
                names.model,
            )
            return []

        if not exists:
            logger.info("Table '%s' not found; using default fields.", table)
            return []

        column_names: List[str] = self._backend.column_names(table)
        metadata: Dict[str, RawColumn] = self._describe(table)

        columns: List[ColumnDescriptor] = []
        for name in column_names:
            raw: Optional[RawColumn] = metadata.get(name)
            columns.append(
                build_descriptor(
                    name=name,
                    raw_type=raw.type if raw is not None else None,
                    nullable=raw.nullable if raw is not None else False,
                    excluded=name in self._excluded,
                )
            )

        logger.info(
            "Introspected '%s': %d column(s), metadata for %d.",
            table,
            len(columns),
            len(metadata),
        )
        return columns

    def _describe(self, table: str) -> Dict[str, RawColumn]:
        assert self._backend is not None
        try:
            return self._backend.describe_columns(table)
        except (SQLAlchemyError, NotImplementedError, StorageUnreachableError) as exc:
            logger.warning(
                "Column metadata unavailable for '%s' (%s); using names only.",
                table,
                exc,
            )
            return {}


__all__: List[str] = [
    "RawColumn",
    "StorageBackend",
    "SQLAlchemyBackend",
    "SchemaIntrospector",
]
