"""
tests/test_utils.py
Unit tests for smartcrud.utils: case conversion, pluralisation, entity
naming variants and small formatting helpers.
"""

from __future__ import annotations

import pytest

from smartcrud.utils import (
    Timer,
    count_lines,
    derive_names,
    format_php_list,
    php_quote,
    sha256_hex,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_plural,
    to_singular,
    to_snake_case,
    to_title_human,
)


# ===========================================================================
# Case conversion
# ===========================================================================


class TestCaseConversion:
    """Tests for the cached case-conversion helpers."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("InvoiceLine", "invoice_line"),
            ("invoiceLine", "invoice_line"),
            ("getHTTPResponse", "get_http_response"),
            ("invoice-line", "invoice_line"),
            ("", ""),
        ],
    )
    def test_snake_case(self, value: str, expected: str) -> None:
        assert to_snake_case(value) == expected

    def test_pascal_case(self) -> None:
        assert to_pascal_case("invoice_line") == "InvoiceLine"
        assert to_pascal_case("invoice") == "Invoice"
        assert to_pascal_case("InvoiceLine") == "InvoiceLine"

    def test_camel_case(self) -> None:
        assert to_camel_case("invoice_line") == "invoiceLine"
        assert to_camel_case("Invoice") == "invoice"
        assert to_camel_case("") == ""

    def test_kebab_case(self) -> None:
        assert to_kebab_case("InvoiceLines") == "invoice-lines"

    def test_title_human(self) -> None:
        assert to_title_human("InvoiceLine") == "Invoice Line"


# ===========================================================================
# Pluralisation
# ===========================================================================


class TestPluralisation:
    @pytest.mark.parametrize(
        "singular, plural",
        [
            ("Invoice", "Invoices"),
            ("Category", "Categories"),
            ("Box", "Boxes"),
            ("Person", "People"),
            ("Status", "Statuses"),
            ("Knife", "Knives"),
            ("Day", "Days"),
            ("Sheep", "Sheep"),
        ],
    )
    def test_plural(self, singular: str, plural: str) -> None:
        assert to_plural(singular) == plural

    @pytest.mark.parametrize(
        "plural, singular",
        [
            ("Invoices", "Invoice"),
            ("Categories", "Category"),
            ("People", "Person"),
            ("Boxes", "Box"),
            ("Status", "Status"),
        ],
    )
    def test_singular(self, plural: str, singular: str) -> None:
        assert to_singular(plural) == singular


# ===========================================================================
# Entity naming
# ===========================================================================


class TestDeriveNames:
    """Tests for the naming variants computed once per entity."""

    def test_single_word_entity(self) -> None:
        names = derive_names("Invoice")
        assert names.model == "Invoice"
        assert names.model_variable == "invoice"
        assert names.model_plural == "Invoices"
        assert names.model_plural_variable == "invoices"
        assert names.model_kebab == "invoice"
        assert names.model_plural_kebab == "invoices"
        assert names.model_snake == "invoice"
        assert names.table == "invoices"
        assert names.model_title == "Invoice"
        assert names.model_plural_title == "Invoices"
        assert names.model_upper == "INVOICE"

    def test_compound_entity_pluralises_last_word(self) -> None:
        names = derive_names("InvoiceLine")
        assert names.model_plural == "InvoiceLines"
        assert names.model_plural_kebab == "invoice-lines"
        assert names.table == "invoice_lines"
        assert names.model_plural_title == "Invoice Lines"
        assert names.model_plural_variable == "invoiceLines"

    def test_snake_input_is_normalised(self) -> None:
        assert derive_names("invoice_line").model == "InvoiceLine"

    def test_irregular_last_word(self) -> None:
        names = derive_names("SalesPerson")
        assert names.model_plural == "SalesPeople"
        assert names.table == "sales_people"

    def test_substitution_keys(self) -> None:
        subs = derive_names("Invoice").as_substitutions()
        assert subs["model"] == "Invoice"
        assert subs["modelPluralKebab"] == "invoices"
        assert subs["table"] == "invoices"
        assert all(isinstance(value, str) for value in subs.values())

    def test_empty_entity_rejected(self) -> None:
        with pytest.raises(ValueError):
            derive_names("___")


# ===========================================================================
# Formatting helpers
# ===========================================================================


class TestFormattingHelpers:
    def test_php_quote_escapes(self) -> None:
        assert php_quote("api") == "'api'"
        assert php_quote("it's") == "'it\\'s'"

    def test_format_php_list(self) -> None:
        assert format_php_list(["api", "auth:sanctum"]) == "['api', 'auth:sanctum']"
        assert format_php_list([]) == "[]"

    def test_count_lines(self) -> None:
        assert count_lines("") == 0
        assert count_lines("a\nb\n") == 2
        assert count_lines("a\nb") == 2

    def test_sha256_hex(self) -> None:
        digest = sha256_hex("<?php\n")
        assert len(digest) == 64
        assert digest == sha256_hex("<?php\n")

    def test_timer_measures(self) -> None:
        with Timer("noop") as timer:
            pass
        assert timer.elapsed >= 0.0
        assert "noop" in repr(timer)
