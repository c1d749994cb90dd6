# File: smartcrud/typemap.py
"""
SmartCRUD - Column Type Mapper
===============================

Pure functions that turn a backend column-type string (``varchar(255)``,
``tinyint(1)``, ``DECIMAL(10, 2)``, ``TIMESTAMP`` ...) into one of the
four normalised :class:`~smartcrud.models.ColumnType` values, plus its
maximum length.

Matching is substring based on the lower-cased type string, so it works
across dialects without a per-dialect table.
"""

from __future__ import annotations

import re
from typing import FrozenSet, List, Optional, Tuple

from smartcrud.models import ColumnDescriptor, ColumnType

_MAX_LENGTH_RE: re.Pattern[str] = re.compile(r"\((\d+)\)")

# Single-bit flag types that behave as booleans
_FLAG_TYPES: FrozenSet[str] = frozenset({"tinyint(1)", "bit", "bit(1)"})

# Type names containing "int" that are not integers
_INT_LOOKALIKES: Tuple[str, ...] = ("interval", "point")

_FLOAT_MARKERS: Tuple[str, ...] = ("decimal", "float", "double", "numeric", "real")

def map_type(raw_type: str) -> ColumnType:
    """
    Map a raw backend type string to a normalised column type.

    Examples:
        >>> map_type("varchar(255)")
        <ColumnType.TEXT: 'text'>
        >>> map_type("tinyint(1)")
        <ColumnType.BOOLEAN: 'boolean'>
        >>> map_type("BIGINT UNSIGNED")
        <ColumnType.INTEGER: 'integer'>
    """
    lowered: str = raw_type.strip().lower()

    if lowered in _FLAG_TYPES or "bool" in lowered:
        return ColumnType.BOOLEAN
    if "int" in lowered and not any(word in lowered for word in _INT_LOOKALIKES):
        return ColumnType.INTEGER
    if any(marker in lowered for marker in _FLOAT_MARKERS):
        return ColumnType.FLOAT
    return ColumnType.TEXT


def parse_max_length(raw_type: str) -> Optional[int]:
    """Return the parenthesised size of a type string, or ``None``."""
    match: Optional[re.Match[str]] = _MAX_LENGTH_RE.search(raw_type)
    if match is None:
        return None
    size: int = int(match.group(1))
    return size if size > 0 else None


def build_descriptor(
    name: str,
    raw_type: Optional[str],
    nullable: bool,
    excluded: bool = False,
) -> ColumnDescriptor:
    """
    Build a :class:`ColumnDescriptor` from raw column metadata.

    ``raw_type`` of ``None`` means the backend gave no metadata for the
    column: it is treated as required text with no size.
    """
    if raw_type is None:
        return ColumnDescriptor(
            name=name,
            inferred_type=ColumnType.TEXT,
            nullable=False,
            max_length=None,
            is_default_excluded=excluded,
        )

    return ColumnDescriptor(
        name=name,
        inferred_type=map_type(raw_type),
        nullable=nullable,
        max_length=parse_max_length(raw_type),
        is_default_excluded=excluded,
    )


__all__: List[str] = [
    "map_type",
    "parse_max_length",
    "build_descriptor",
]
