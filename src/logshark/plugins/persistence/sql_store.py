# src/logshark/plugins/persistence/sql_store.py
"""SQL destination store for output records.

Writes records to a database table using SQLAlchemy Core.

The table is derived from the record type: its name from ``__tablename__``
and its columns from the pydantic model fields. create_or_migrate() creates
the table when it is absent and adds any columns the existing table lacks,
so a record type can gain fields between releases without a manual migration.
"""

from __future__ import annotations

import types
import typing
import uuid
from collections.abc import Sequence
from datetime import datetime
from typing import Any

import structlog
from pydantic import BaseModel
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    Integer,
    MetaData,
    Table,
    Text,
    create_engine,
    insert,
    inspect,
    text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.types import TypeEngine

from logshark.core.logging import get_logger

# Map record field annotations to SQLAlchemy column types.
# Text (not String) is used for string columns because String() without a length
# argument causes truncation or errors on MySQL/MSSQL.
PYTHON_TYPE_TO_SQLALCHEMY: dict[type, TypeEngine[Any]] = {
    str: Text(),
    int: Integer(),
    float: Float(),
    bool: Boolean(),
    datetime: DateTime(timezone=True),
    uuid.UUID: Text(),
}


def table_name_for(record_type: type[BaseModel]) -> str:
    """Table name for a record type: ``__tablename__`` or the snake-cased class name."""
    explicit = getattr(record_type, "__tablename__", None)
    if isinstance(explicit, str) and explicit:
        return explicit
    name = record_type.__name__
    return "".join(f"_{ch.lower()}" if ch.isupper() and i else ch.lower() for i, ch in enumerate(name))


def _column_type(annotation: Any) -> tuple[TypeEngine[Any], bool]:
    """Resolve a field annotation to (column type, nullable).

    ``X | None`` is unwrapped to X and marked nullable. Anything not in the
    mapping falls back to Text.
    """
    nullable = False
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        nullable = len(args) != len(typing.get_args(annotation))
        annotation = args[0] if len(args) == 1 else Any
    if isinstance(annotation, type) and issubclass(annotation, bool):
        return Boolean(), nullable
    return PYTHON_TYPE_TO_SQLALCHEMY.get(annotation, Text()), nullable


def columns_for(record_type: type[BaseModel]) -> list[Column[Any]]:
    """Build SQLAlchemy columns from a record type's fields, in declaration order."""
    columns: list[Column[Any]] = []
    for field_name, field_info in record_type.model_fields.items():
        sql_type, nullable = _column_type(field_info.annotation)
        columns.append(Column(field_name, sql_type, nullable=nullable))
    return columns


def _to_row(record: BaseModel) -> dict[str, Any]:
    row = record.model_dump()
    return {key: str(value) if isinstance(value, uuid.UUID) else value for key, value in row.items()}


class SqlDestinationStore:
    """Destination store backed by any SQLAlchemy-supported database.

    Usage:
        store = SqlDestinationStore("postgresql://user@host/logshark")
        store.create_or_migrate(FilestoreEvent)
        store.write_batch(records)
        store.close()

    Each write_batch() runs in its own transaction (``engine.begin()``), so a
    batch is either fully committed or not at all.
    """

    def __init__(
        self,
        url: str,
        *,
        engine: Engine | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._url = url
        self._engine = engine if engine is not None else create_engine(url)
        self._metadata = MetaData()
        self._tables: dict[type[BaseModel], Table] = {}
        self._log = logger if logger is not None else get_logger(__name__)

    @property
    def engine(self) -> Engine:
        return self._engine

    def create_or_migrate(self, record_type: type[BaseModel]) -> None:
        """Ensure the table for record_type exists with every field as a column."""
        name = table_name_for(record_type)
        columns = columns_for(record_type)

        inspector = inspect(self._engine)
        if not inspector.has_table(name):
            table = Table(name, self._metadata, *columns)
            self._metadata.create_all(self._engine, tables=[table], checkfirst=True)
            self._log.info("destination_table_created", table=name, columns=len(columns))
        else:
            existing = {col["name"] for col in inspector.get_columns(name)}
            missing = [column for column in columns if column.name not in existing]
            if missing:
                self._add_columns(name, missing)
            table = Table(name, self._metadata, *columns_for(record_type), extend_existing=True)

        self._tables[record_type] = table

    def _add_columns(self, table_name: str, columns: list[Column[Any]]) -> None:
        """Add columns to an existing table.

        Added columns are always nullable: existing rows have no value for them.
        """
        preparer = self._engine.dialect.identifier_preparer
        quoted_table = preparer.quote(table_name)
        with self._engine.begin() as conn:
            for column in columns:
                column_type = column.type.compile(dialect=self._engine.dialect)
                conn.execute(text(f"ALTER TABLE {quoted_table} ADD COLUMN {preparer.quote(column.name)} {column_type}"))
        self._log.info(
            "destination_table_migrated",
            table=table_name,
            added_columns=[column.name for column in columns],
        )

    def write_batch(self, records: Sequence[BaseModel]) -> None:
        """Insert a batch of records in a single transaction.

        Raises:
            RuntimeError: If create_or_migrate() was not called for the record type.
            sqlalchemy.exc.SQLAlchemyError: If the insert fails.
        """
        if not records:
            return
        record_type = type(records[0])
        table = self._tables.get(record_type)
        if table is None:
            raise RuntimeError(
                f"write_batch() called for {record_type.__name__} before create_or_migrate(); "
                "the destination table has not been prepared"
            )
        with self._engine.begin() as conn:
            conn.execute(insert(table), [_to_row(record) for record in records])

    def close(self) -> None:
        """Dispose of the connection pool."""
        self._engine.dispose()
