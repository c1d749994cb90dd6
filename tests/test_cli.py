"""
tests/test_cli.py
Tests for the smartcrud command-line interface (cli_main).
"""

from __future__ import annotations

import pathlib
from typing import List

import pytest

from smartcrud.cli import (
    EXIT_GENERATION_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    cli_main,
)
from smartcrud.exceptions import StorageUnreachableError
from smartcrud.introspection import SQLAlchemyBackend


def _run(argv: List[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        cli_main(argv)
    return exc_info.value.code


class TestCliMain:
    def test_default_is_api_only(
        self, project_dir: pathlib.Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = _run(["Invoice", "--base-path", str(project_dir), "-q"])
        assert code == EXIT_SUCCESS
        assert "SmartCRUD Generation Report" in capsys.readouterr().out
        assert (project_dir / "routes/api.php").is_file()
        assert not (project_dir / "routes/web.php").exists()

    def test_web_only(self, project_dir: pathlib.Path) -> None:
        assert _run(["Invoice", "--web", "--base-path", str(project_dir), "-q"]) == EXIT_SUCCESS
        assert (project_dir / "routes/web.php").is_file()
        assert not (project_dir / "routes/api.php").exists()
        assert (project_dir / "resources/views/invoices/show.blade.php").is_file()

    def test_both_categories(self, project_dir: pathlib.Path) -> None:
        code = _run(["invoice_line", "--api", "--web", "--base-path", str(project_dir), "-q"])
        assert code == EXIT_SUCCESS
        assert (project_dir / "app/Http/Controllers/Api/V1/InvoiceLine").is_dir()
        assert (project_dir / "resources/views/invoice-lines/index.blade.php").is_file()

    def test_api_version_and_skip_common(self, project_dir: pathlib.Path) -> None:
        code = _run(
            [
                "Invoice",
                "--api-version",
                "V2",
                "--skip-common",
                "--skip-routes",
                "--base-path",
                str(project_dir),
                "-q",
            ]
        )
        assert code == EXIT_SUCCESS
        assert (project_dir / "app/Http/Controllers/Api/V2/Invoice/InvoiceController.php").is_file()
        assert not (project_dir / "app/Services").exists()
        assert not (project_dir / "routes").exists()

    def test_force_overwrites(self, project_dir: pathlib.Path) -> None:
        args = ["Invoice", "--skip-routes", "--base-path", str(project_dir), "-q"]
        _run(args)
        dto = project_dir / "app/DTOs/Invoice/InvoiceCreateDTO.php"
        dto.write_text("edited", encoding="utf-8")
        _run(args)
        assert dto.read_text(encoding="utf-8") == "edited"
        _run(args + ["--force"])
        assert dto.read_text(encoding="utf-8") != "edited"

    def test_database_url(self, project_dir: pathlib.Path, sqlite_url: str) -> None:
        code = _run(
            ["Invoice", "--base-path", str(project_dir), "--database-url", sqlite_url, "-q"]
        )
        assert code == EXIT_SUCCESS
        dto = (project_dir / "app/DTOs/Invoice/InvoiceCreateDTO.php").read_text(encoding="utf-8")
        assert "$customer_name" in dto


class TestCliConfig:
    def test_yaml_config(self, config_yaml_path: pathlib.Path, project_dir: pathlib.Path) -> None:
        assert _run(["Invoice", "--config", str(config_yaml_path), "-q"]) == EXIT_SUCCESS
        controller = project_dir / "app/Http/Controllers/Api/V2/Invoice/InvoiceController.php"
        assert "['per_page' => 25]" in controller.read_text(encoding="utf-8")
        routes = (project_dir / "routes/api.php").read_text(encoding="utf-8")
        assert "Route::middleware(['api', 'auth:sanctum'])->prefix('api/v2')" in routes

    def test_base_path_flag_overrides_config(
        self, config_yaml_path: pathlib.Path, tmp_path: pathlib.Path
    ) -> None:
        other = tmp_path / "other"
        other.mkdir()
        code = _run(
            ["Invoice", "--config", str(config_yaml_path), "--base-path", str(other), "-q"]
        )
        assert code == EXIT_SUCCESS
        assert (other / "routes/api.php").is_file()

    def test_missing_config_file(
        self, tmp_path: pathlib.Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = _run(["Invoice", "--config", str(tmp_path / "nope.yaml"), "-q"])
        assert code == EXIT_INPUT_ERROR
        assert "Config file not found" in capsys.readouterr().err

    def test_invalid_yaml(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("api: [unclosed\n", encoding="utf-8")
        assert _run(["Invoice", "--config", str(path), "-q"]) == EXIT_INPUT_ERROR

    def test_unknown_key(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "extra.yaml"
        path.write_text("colour: blue\n", encoding="utf-8")
        assert _run(["Invoice", "--config", str(path), "-q"]) == EXIT_INPUT_ERROR

    def test_top_level_list(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        assert _run(["Invoice", "--config", str(path), "-q"]) == EXIT_INPUT_ERROR


class TestCliFailures:
    def test_validation_error(self, project_dir: pathlib.Path) -> None:
        assert _run(["9lives", "--base-path", str(project_dir), "-q"]) == EXIT_VALIDATION_ERROR
        assert list(project_dir.iterdir()) == []

    def test_generation_error(self, project_dir: pathlib.Path) -> None:
        routes = project_dir / "routes" / "api.php"
        routes.parent.mkdir()
        routes.write_text("not php\n", encoding="utf-8")
        assert _run(["Invoice", "--base-path", str(project_dir), "-q"]) == EXIT_GENERATION_ERROR

    def test_schema_failure_is_a_generation_error(
        self,
        project_dir: pathlib.Path,
        sqlite_url: str,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        def _fail(self: SQLAlchemyBackend, table: str) -> List[str]:
            raise StorageUnreachableError(f"cannot list columns of {table}")

        monkeypatch.setattr(SQLAlchemyBackend, "column_names", _fail)
        code = _run(
            ["Invoice", "--base-path", str(project_dir), "--database-url", sqlite_url, "-q"]
        )
        assert code == EXIT_GENERATION_ERROR
        assert "cannot list columns of invoices" in capsys.readouterr().err
        assert list(project_dir.iterdir()) == []

    def test_version_flag(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run(["--version"]) == 0
        assert "smartcrud 1.0.0" in capsys.readouterr().out

    def test_verbose_and_quiet_are_exclusive(self) -> None:
        assert _run(["Invoice", "-v", "-q"]) == 2
