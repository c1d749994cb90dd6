"""
tests/test_templates.py
Tests for smartcrud.templates: placeholder substitution and stub lookup.
"""

from __future__ import annotations

import pathlib

import pytest

from smartcrud.exceptions import TemplateNotFoundError
from smartcrud.templates import DEFAULT_STUBS_DIR, TemplateRenderer, replace_placeholders


# ===========================================================================
# Placeholder substitution
# ===========================================================================


class TestReplacePlaceholders:
    def test_both_spellings(self) -> None:
        out = replace_placeholders(
            "class {{ model }}Controller extends {{base}}",
            {"model": "Invoice", "base": "Controller"},
        )
        assert out == "class InvoiceController extends Controller"

    def test_unknown_key_left_in_place(self) -> None:
        assert replace_placeholders("{{ unknown }} {{ model }}", {"model": "A"}) == (
            "{{ unknown }} A"
        )

    def test_values_are_not_rescanned(self) -> None:
        out = replace_placeholders(
            "{{ first }}", {"first": "{{ second }}", "second": "nope"}
        )
        assert out == "{{ second }}"

    def test_blade_expressions_untouched(self) -> None:
        blade = "{{ $invoice->id }} {{ route('{{ route }}.index') }} {{-- note --}}"
        out = replace_placeholders(blade, {"route": "invoices"})
        assert out == "{{ $invoice->id }} {{ route('invoices.index') }} {{-- note --}}"

    def test_nested_in_blade_echo(self) -> None:
        out = replace_placeholders("{{ ${{ modelVariable }}->id }}", {"modelVariable": "invoice"})
        assert out == "{{ $invoice->id }}"

    def test_multiline_value_inserted_verbatim(self) -> None:
        block = "        'name' => 'required',\n        'total' => 'numeric'"
        out = replace_placeholders("[\n{{ validationRules }}\n]", {"validationRules": block})
        assert out == f"[\n{block}\n]"


# ===========================================================================
# Renderer
# ===========================================================================


class TestTemplateRenderer:
    def test_packaged_stub(self) -> None:
        renderer = TemplateRenderer()
        content = renderer.render("Common/exception.stub", {"namespace": "App\\X", "class": "Y"})
        assert "namespace App\\X;" in content
        assert renderer.resolve("Common/exception.stub") == (
            DEFAULT_STUBS_DIR / "Common" / "exception.stub"
        )

    def test_override_takes_precedence(self, tmp_path: pathlib.Path) -> None:
        override = tmp_path / "overrides"
        (override / "Common").mkdir(parents=True)
        (override / "Common" / "service.stub").write_text(
            "<?php // custom {{ model }}\n", encoding="utf-8"
        )
        renderer = TemplateRenderer(override_root=override)
        assert renderer.render("Common/service.stub", {"model": "Invoice"}) == (
            "<?php // custom Invoice\n"
        )
        # anything not overridden still comes from the package
        assert renderer.resolve("Common/dto-create.stub").parent.parent == DEFAULT_STUBS_DIR

    def test_missing_template(self, tmp_path: pathlib.Path) -> None:
        renderer = TemplateRenderer(
            override_root=tmp_path / "a", default_root=tmp_path / "b"
        )
        with pytest.raises(TemplateNotFoundError) as exc_info:
            renderer.load("Api/nothing.stub")
        assert exc_info.value.template_id == "Api/nothing.stub"
        assert exc_info.value.searched == [
            str(tmp_path / "a" / "Api/nothing.stub"),
            str(tmp_path / "b" / "Api/nothing.stub"),
        ]

    def test_stub_text_is_cached(self, tmp_path: pathlib.Path) -> None:
        (tmp_path / "x.stub").write_text("first", encoding="utf-8")
        renderer = TemplateRenderer(default_root=tmp_path)
        assert renderer.load("x.stub") == "first"
        (tmp_path / "x.stub").write_text("second", encoding="utf-8")
        assert renderer.load("x.stub") == "first"
        assert TemplateRenderer(default_root=tmp_path).load("x.stub") == "second"

    def test_every_configured_stub_is_packaged(self) -> None:
        from smartcrud.config import StubConfig

        stubs = StubConfig()
        for category in ("common", "api", "web"):
            for template_id in stubs.for_category(category).values():
                assert (DEFAULT_STUBS_DIR / template_id).is_file(), template_id
