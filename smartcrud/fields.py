# File: smartcrud/fields.py
"""
SmartCRUD - Field-Derivation Engine
====================================

Builds the column-dependent code blocks that are substituted into stubs:

    constructorProperties   DTO constructor promotion list
    fromRequestProperties   named arguments read from the request payload
    toArrayProperties       DTO -> array mapping
    validationRules         form-request rule map
    searchFields            repository LIKE clauses
    sortableFields          allowed sort columns
    resourceFields          API resource serialisation

Each block is derived from the introspected columns. With no columns (no
schema available) every block returns a fixed two-field default built
around ``name`` and ``description``.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from smartcrud.config import SmartCrudConfig
from smartcrud.models import ColumnDescriptor, ColumnType

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("smartcrud.fields")

CREATE: str = "create"
UPDATE: str = "update"
VARIANTS: tuple = (CREATE, UPDATE)

_PROPERTY_INDENT: str = " " * 8
_ENTRY_INDENT: str = " " * 12
_CLAUSE_INDENT: str = " " * 16
_SEPARATOR: str = ",\n"

_TIMESTAMP_COLUMNS: frozenset = frozenset({"created_at", "updated_at"})
_TIMESTAMP_FORMAT: str = "Y-m-d H:i:s"

# ---------------------------------------------------------------------------
# Fixed blocks used when no schema is available
# ---------------------------------------------------------------------------

_DEFAULT_CONSTRUCTOR: Dict[str, str] = {
    CREATE: (
        "        public readonly string $name,\n"
        "        public readonly ?string $description = null"
    ),
    UPDATE: (
        "        public readonly ?string $name = null,\n"
        "        public readonly ?string $description = null"
    ),
}

_DEFAULT_FROM_REQUEST: str = (
    "            name: $data['name'] ?? '',\n"
    "            description: $data['description'] ?? null"
)

_DEFAULT_TO_ARRAY: str = (
    "            'name' => $this->name,\n"
    "            'description' => $this->description"
)

_DEFAULT_RULES: Dict[str, str] = {
    CREATE: (
        "            'name' => 'required|string|max:255',\n"
        "            'description' => 'nullable|string'"
    ),
    UPDATE: (
        "            'name' => 'sometimes|string|max:255',\n"
        "            'description' => 'sometimes|string'"
    ),
}

_DEFAULT_SEARCH: str = "                $q->where('id', '>', 0); // Add searchable fields"

_DEFAULT_SORTABLE: str = "'id', 'created_at', 'updated_at'"

_DEFAULT_RESOURCE: str = (
    "            'id' => $this->id,\n"
    "            'name' => $this->name,\n"
    "            'description' => $this->description,\n"
    "            'created_at' => $this->created_at?->format('Y-m-d H:i:s'),\n"
    "            'updated_at' => $this->updated_at?->format('Y-m-d H:i:s')"
)

_TYPE_RULES: Dict[ColumnType, str] = {
    ColumnType.INTEGER: "integer",
    ColumnType.FLOAT: "numeric",
    ColumnType.BOOLEAN: "boolean",
    ColumnType.TEXT: "string",
}


def _check_variant(variant: str) -> str:
    if variant not in VARIANTS:
        raise ValueError(f"Unknown variant {variant!r}; expected one of {VARIANTS}.")
    return variant


class FieldDeriver:
    """
    Derives stub blocks from one table's columns.

    Args:
        columns: Introspected columns, possibly empty.
        table: Table identifier used by uniqueness rules.
        config: Supplies the searchable and hidden column lists.
    """

    def __init__(
        self,
        columns: Sequence[ColumnDescriptor],
        table: str,
        config: SmartCrudConfig,
    ) -> None:
        self._columns: List[ColumnDescriptor] = list(columns)
        self._table: str = table
        self._searchable: frozenset = frozenset(config.database.searchable_columns)
        self._hidden: frozenset = frozenset(config.database.hidden_columns)

    @property
    def has_schema(self) -> bool:
        return bool(self._columns)

    @property
    def columns(self) -> List[ColumnDescriptor]:
        return list(self._columns)

    @property
    def fillable(self) -> List[ColumnDescriptor]:
        """Columns that take part in DTOs and validation."""
        return [c for c in self._columns if not c.is_default_excluded]

    @property
    def visible(self) -> List[ColumnDescriptor]:
        """Columns outside the hidden blocklist."""
        return [c for c in self._columns if c.name not in self._hidden]

    # ------------------------------------------------------------------
    # DTO blocks
    # ------------------------------------------------------------------

    def constructor_properties(self, variant: str) -> str:
        _check_variant(variant)
        if not self.has_schema:
            return _DEFAULT_CONSTRUCTOR[variant]

        lines: List[str] = []
        for column in self.fillable:
            if variant == UPDATE or column.nullable:
                declaration: str = (
                    f"public readonly ?{column.php_type} ${column.name} = null"
                )
            else:
                declaration = f"public readonly {column.php_type} ${column.name}"
            lines.append(_PROPERTY_INDENT + declaration)
        return _SEPARATOR.join(lines)

    def from_request_properties(self) -> str:
        if not self.has_schema:
            return _DEFAULT_FROM_REQUEST

        lines: List[str] = []
        for column in self.fillable:
            fallback: str = "null" if column.nullable else column.default_literal
            lines.append(
                f"{_ENTRY_INDENT}{column.name}: $data['{column.name}'] ?? {fallback}"
            )
        return _SEPARATOR.join(lines)

    def to_array_properties(self) -> str:
        if not self.has_schema:
            return _DEFAULT_TO_ARRAY
        return _SEPARATOR.join(
            f"{_ENTRY_INDENT}'{c.name}' => $this->{c.name}" for c in self.fillable
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def rule_list(self, column: ColumnDescriptor, variant: str) -> List[str]:
        """
        Ordered rules for one column.

        For the update variant the uniqueness rule ends with a trailing
        comma; the rendered line appends the current record id to it.

        Examples:
            required|string|max:255|email|unique:users,email
        """
        _check_variant(variant)
        rules: List[str] = []

        if variant == CREATE and not column.nullable:
            rules.append("required")
        else:
            rules.append("sometimes")

        rules.append(_TYPE_RULES[column.inferred_type])
        if column.inferred_type is ColumnType.TEXT and column.max_length:
            rules.append(f"max:{column.max_length}")

        if "email" in column.name:
            rules.append("email")
            unique: str = f"unique:{self._table},{column.name}"
            rules.append(unique + "," if variant == UPDATE else unique)

        return rules

    def validation_rules(self, variant: str) -> str:
        _check_variant(variant)
        if not self.has_schema:
            return _DEFAULT_RULES[variant]

        lines: List[str] = []
        for column in self.fillable:
            rules: List[str] = self.rule_list(column, variant)
            line: str = f"{_ENTRY_INDENT}'{column.name}' => '{'|'.join(rules)}'"
            if variant == UPDATE and rules[-1].startswith("unique:"):
                line += " . $this->route('id')"
            lines.append(line)
        return _SEPARATOR.join(lines)

    # ------------------------------------------------------------------
    # Repository & resource blocks
    # ------------------------------------------------------------------

    def search_fields(self) -> str:
        clauses: List[str] = [
            f"{_CLAUSE_INDENT}$q->orWhere('{c.name}', 'like', '%' . $filters->search . '%');"
            for c in self._columns
            if c.name in self._searchable
        ]
        return "\n".join(clauses) if clauses else _DEFAULT_SEARCH

    def sortable_fields(self) -> str:
        if not self.has_schema:
            return _DEFAULT_SORTABLE
        return ", ".join(f"'{c.name}'" for c in self.visible)

    def resource_fields(self) -> str:
        if not self.has_schema:
            return _DEFAULT_RESOURCE

        lines: List[str] = []
        for column in self.visible:
            value: str = f"$this->{column.name}"
            if column.name in _TIMESTAMP_COLUMNS:
                value += f"?->format('{_TIMESTAMP_FORMAT}')"
            lines.append(f"{_ENTRY_INDENT}'{column.name}' => {value}")
        return _SEPARATOR.join(lines)

    # ------------------------------------------------------------------
    # Substitutions
    # ------------------------------------------------------------------

    def substitutions(self, variant: str = CREATE) -> Dict[str, str]:
        """All blocks for ``variant``, keyed by their stub placeholder."""
        return {
            "constructorProperties": self.constructor_properties(variant),
            "fromRequestProperties": self.from_request_properties(),
            "toArrayProperties": self.to_array_properties(),
            "validationRules": self.validation_rules(variant),
            "searchFields": self.search_fields(),
            "sortableFields": self.sortable_fields(),
            "resourceFields": self.resource_fields(),
        }


__all__: List[str] = [
    "CREATE",
    "UPDATE",
    "VARIANTS",
    "FieldDeriver",
]
