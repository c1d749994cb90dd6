"""
tests/test_fields.py
Tests for smartcrud.fields: the column-dependent stub blocks and the
no-schema fallback.
"""

from __future__ import annotations

from typing import List

import pytest

from smartcrud.config import SmartCrudConfig
from smartcrud.fields import CREATE, UPDATE, FieldDeriver
from smartcrud.models import ColumnDescriptor, ColumnType
from smartcrud.typemap import build_descriptor


@pytest.fixture()
def deriver(
    invoice_columns: List[ColumnDescriptor], config: SmartCrudConfig
) -> FieldDeriver:
    return FieldDeriver(invoice_columns, "invoices", config)


@pytest.fixture()
def empty_deriver(config: SmartCrudConfig) -> FieldDeriver:
    return FieldDeriver([], "invoices", config)


# ===========================================================================
# DTO blocks
# ===========================================================================


class TestConstructorProperties:
    def test_create_variant(self, deriver: FieldDeriver) -> None:
        assert deriver.constructor_properties(CREATE).split(",\n") == [
            "        public readonly string $name",
            "        public readonly ?string $email = null",
            "        public readonly float $total",
            "        public readonly bool $is_paid",
            "        public readonly ?string $password = null",
        ]

    def test_update_variant_makes_everything_optional(self, deriver: FieldDeriver) -> None:
        lines = deriver.constructor_properties(UPDATE).split(",\n")
        assert lines[0] == "        public readonly ?string $name = null"
        assert lines[2] == "        public readonly ?float $total = null"
        assert all(line.endswith("= null") for line in lines)

    def test_excluded_columns_left_out(self, deriver: FieldDeriver) -> None:
        block = deriver.constructor_properties(CREATE)
        assert "$id" not in block
        assert "$created_at" not in block

    def test_unknown_variant(self, deriver: FieldDeriver) -> None:
        with pytest.raises(ValueError):
            deriver.constructor_properties("patch")


class TestFromRequestAndToArray:
    def test_from_request_defaults(self, deriver: FieldDeriver) -> None:
        assert deriver.from_request_properties().split(",\n") == [
            "            name: $data['name'] ?? ''",
            "            email: $data['email'] ?? null",
            "            total: $data['total'] ?? 0.0",
            "            is_paid: $data['is_paid'] ?? false",
            "            password: $data['password'] ?? null",
        ]

    def test_to_array(self, deriver: FieldDeriver) -> None:
        block = deriver.to_array_properties()
        assert block.startswith("            'name' => $this->name,\n")
        assert "'created_at'" not in block


# ===========================================================================
# Validation rules
# ===========================================================================


class TestValidationRules:
    def test_email_column_create(self, config: SmartCrudConfig) -> None:
        email = build_descriptor("email", "varchar(255)", nullable=False)
        rules = FieldDeriver([email], "users", config).rule_list(email, CREATE)
        assert "|".join(rules) == "required|string|max:255|email|unique:users,email"

    def test_email_column_update_excludes_current_record(
        self, config: SmartCrudConfig
    ) -> None:
        email = build_descriptor("email", "varchar(255)", nullable=False)
        block = FieldDeriver([email], "users", config).validation_rules(UPDATE)
        assert block == (
            "            'email' => 'sometimes|string|max:255|email|unique:users,email,'"
            " . $this->route('id')"
        )

    def test_create_block(self, deriver: FieldDeriver) -> None:
        assert deriver.validation_rules(CREATE).split(",\n") == [
            "            'name' => 'required|string|max:255'",
            "            'email' => 'sometimes|string|max:255|email|unique:invoices,email'",
            "            'total' => 'required|numeric'",
            "            'is_paid' => 'required|boolean'",
            "            'password' => 'sometimes|string'",
        ]

    def test_update_block_uses_sometimes(self, deriver: FieldDeriver) -> None:
        for line in deriver.validation_rules(UPDATE).split(",\n"):
            assert "=> 'sometimes|" in line

    def test_integer_column(self, config: SmartCrudConfig) -> None:
        column = ColumnDescriptor(name="quantity", inferred_type=ColumnType.INTEGER)
        assert FieldDeriver([column], "lines", config).rule_list(column, CREATE) == [
            "required",
            "integer",
        ]


# ===========================================================================
# Repository & resource blocks
# ===========================================================================


class TestRepositoryBlocks:
    def test_search_fields(self, deriver: FieldDeriver) -> None:
        assert deriver.search_fields().split("\n") == [
            "                $q->orWhere('name', 'like', '%' . $filters->search . '%');",
            "                $q->orWhere('email', 'like', '%' . $filters->search . '%');",
        ]

    def test_search_fallback_without_searchable_columns(
        self, config: SmartCrudConfig
    ) -> None:
        column = ColumnDescriptor(name="total", inferred_type=ColumnType.FLOAT)
        block = FieldDeriver([column], "invoices", config).search_fields()
        assert block == "                $q->where('id', '>', 0); // Add searchable fields"

    def test_sortable_fields_skip_hidden(self, deriver: FieldDeriver) -> None:
        assert deriver.sortable_fields() == (
            "'id', 'name', 'email', 'total', 'is_paid', 'created_at'"
        )

    def test_resource_fields(self, deriver: FieldDeriver) -> None:
        lines = deriver.resource_fields().split(",\n")
        assert lines[0] == "            'id' => $this->id"
        assert lines[-1] == (
            "            'created_at' => $this->created_at?->format('Y-m-d H:i:s')"
        )
        assert not any("password" in line for line in lines)


# ===========================================================================
# No-schema fallback
# ===========================================================================


class TestDefaultFieldSet:
    """With no columns every block is the fixed name/description default."""

    def test_constructor(self, empty_deriver: FieldDeriver) -> None:
        assert empty_deriver.has_schema is False
        assert empty_deriver.constructor_properties(CREATE) == (
            "        public readonly string $name,\n"
            "        public readonly ?string $description = null"
        )
        assert empty_deriver.constructor_properties(UPDATE) == (
            "        public readonly ?string $name = null,\n"
            "        public readonly ?string $description = null"
        )

    def test_rules(self, empty_deriver: FieldDeriver) -> None:
        assert empty_deriver.validation_rules(CREATE) == (
            "            'name' => 'required|string|max:255',\n"
            "            'description' => 'nullable|string'"
        )
        assert empty_deriver.validation_rules(UPDATE) == (
            "            'name' => 'sometimes|string|max:255',\n"
            "            'description' => 'sometimes|string'"
        )

    def test_other_blocks(self, empty_deriver: FieldDeriver) -> None:
        assert empty_deriver.from_request_properties() == (
            "            name: $data['name'] ?? '',\n"
            "            description: $data['description'] ?? null"
        )
        assert empty_deriver.to_array_properties() == (
            "            'name' => $this->name,\n"
            "            'description' => $this->description"
        )
        assert empty_deriver.sortable_fields() == "'id', 'created_at', 'updated_at'"
        assert "$q->where('id', '>', 0);" in empty_deriver.search_fields()
        assert "'description' => $this->description" in empty_deriver.resource_fields()

    def test_substitution_keys(self, empty_deriver: FieldDeriver) -> None:
        assert set(empty_deriver.substitutions(UPDATE)) == {
            "constructorProperties",
            "fromRequestProperties",
            "toArrayProperties",
            "validationRules",
            "searchFields",
            "sortableFields",
            "resourceFields",
        }
