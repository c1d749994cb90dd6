# File: smartcrud/config.py
"""
SmartCRUD - Configuration
==========================

Typed, validated configuration for the scaffold pipeline. Defaults
mirror a conventional Laravel layout, so an empty configuration file (or
no file at all) generates into ``app/``, ``resources/views`` and
``routes/``.

A ``SmartCrudConfig`` value is created once by the caller and passed
explicitly to every component. There is no module-level instance, so two
configurations can be used side by side in the same process.

Loading from YAML::

    config = load_config(Path("smart-crud.yaml"))
    config = config.model_copy(update={"base_path": Path("/srv/app")})
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from smartcrud.exceptions import ConfigError

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("smartcrud.config")

_SECTION_CONFIG: ConfigDict = ConfigDict(
    populate_by_name=True,
    validate_assignment=True,
    extra="forbid",
)


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


class CategoryPair(BaseModel):
    """A value that differs between the API and Web categories."""

    model_config = _SECTION_CONFIG

    api: str
    web: str


class NamespaceConfig(BaseModel):
    """Base namespaces per artifact family."""

    model_config = _SECTION_CONFIG

    controllers: CategoryPair = Field(
        default_factory=lambda: CategoryPair(
            api="App\\Http\\Controllers\\Api",
            web="App\\Http\\Controllers\\Web",
        )
    )
    requests: CategoryPair = Field(
        default_factory=lambda: CategoryPair(
            api="App\\Http\\Requests\\Api",
            web="App\\Http\\Requests\\Web",
        )
    )
    resources: str = "App\\Http\\Resources\\Api"
    services: str = "App\\Services"
    repositories: str = "App\\Repositories"
    dtos: str = "App\\DTOs"
    exceptions: str = "App\\Exceptions"
    models: str = "App\\Models"


class PathConfig(BaseModel):
    """
    Base paths per artifact family.

    Class paths are relative to ``app_dir``; ``views`` and ``routes`` are
    relative to the project base path.
    """

    model_config = _SECTION_CONFIG

    controllers: CategoryPair = Field(
        default_factory=lambda: CategoryPair(
            api="Http/Controllers/Api",
            web="Http/Controllers/Web",
        )
    )
    requests: CategoryPair = Field(
        default_factory=lambda: CategoryPair(
            api="Http/Requests/Api",
            web="Http/Requests/Web",
        )
    )
    resources: str = "Http/Resources/Api"
    services: str = "Services"
    repositories: str = "Repositories"
    dtos: str = "DTOs"
    exceptions: str = "Exceptions"
    views: str = "resources/views"
    routes: CategoryPair = Field(
        default_factory=lambda: CategoryPair(
            api="routes/api.php",
            web="routes/web.php",
        )
    )


class StubConfig(BaseModel):
    """Template identifiers per category and artifact kind."""

    model_config = _SECTION_CONFIG

    api: Dict[str, str] = Field(
        default_factory=lambda: {
            "controller": "Api/controller.api.stub",
            "store_request": "Api/request-store.api.stub",
            "update_request": "Api/request-update.api.stub",
            "resource": "Api/resource.api.stub",
            "collection": "Api/collection.api.stub",
            "routes": "Routes/api-routes.stub",
        }
    )
    web: Dict[str, str] = Field(
        default_factory=lambda: {
            "controller": "Web/controller.web.stub",
            "store_request": "Web/request-store.web.stub",
            "update_request": "Web/request-update.web.stub",
            "view_index": "Web/view-index.stub",
            "view_create": "Web/view-create.stub",
            "view_edit": "Web/view-edit.stub",
            "view_show": "Web/view-show.stub",
            "routes": "Routes/web-routes.stub",
        }
    )
    common: Dict[str, str] = Field(
        default_factory=lambda: {
            "service": "Common/service.stub",
            "repository": "Common/repository.stub",
            "repository_interface": "Common/repository-interface.stub",
            "create_dto": "Common/dto-create.stub",
            "update_dto": "Common/dto-update.stub",
            "filter_dto": "Common/dto-filter.stub",
            "exception": "Common/exception.stub",
        }
    )

    def for_category(self, category: str) -> Dict[str, str]:
        return getattr(self, category)


class DatabaseConfig(BaseModel):
    """Column lists that steer field derivation."""

    model_config = _SECTION_CONFIG

    excluded_columns: List[str] = Field(
        default_factory=lambda: ["id", "created_at", "updated_at", "deleted_at"],
        description="Left out of DTOs and validation rules.",
    )
    searchable_columns: List[str] = Field(
        default_factory=lambda: ["name", "title", "description", "email", "reference"],
        description="Columns that get a LIKE clause in repository search.",
    )
    hidden_columns: List[str] = Field(
        default_factory=lambda: ["password", "remember_token", "deleted_at"],
        description="Never sortable and never serialised.",
    )


class ResponseKeys(BaseModel):
    """Envelope key names used by generated API responses."""

    model_config = _SECTION_CONFIG

    success: str = "success"
    message: str = "message"
    data: str = "data"
    errors: str = "errors"
    meta: str = "meta"


class ApiConfig(BaseModel):
    model_config = _SECTION_CONFIG

    route_prefix: str = "api"
    middleware: List[str] = Field(default_factory=lambda: ["api"])
    per_page: int = Field(default=15, ge=1, le=1000)
    response_keys: ResponseKeys = Field(default_factory=ResponseKeys)


class WebConfig(BaseModel):
    model_config = _SECTION_CONFIG

    route_prefix: str = ""
    middleware: List[str] = Field(default_factory=lambda: ["web"])
    layout: str = "layouts.app"
    per_page: int = Field(default=15, ge=1, le=1000)


# ---------------------------------------------------------------------------
# Root configuration
# ---------------------------------------------------------------------------


class SmartCrudConfig(BaseModel):
    """
    Root configuration value.

    Consumed as plain attribute lookups; the pipeline never mutates it.
    """

    model_config = _SECTION_CONFIG

    base_path: Path = Field(default=Path("."), description="Project root.")
    app_dir: str = Field(default="app", description="Application source dir.")
    database_url: Optional[str] = Field(
        default=None,
        description="SQLAlchemy URL used for schema introspection.",
    )
    default_api_version: str = Field(default="V1", min_length=1)
    stubs_override_dir: str = Field(
        default="resources/stubs/smart-crud",
        description="Custom stubs, checked before the packaged ones.",
    )

    namespaces: NamespaceConfig = Field(default_factory=NamespaceConfig)
    paths: PathConfig = Field(default_factory=PathConfig)
    stubs: StubConfig = Field(default_factory=StubConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    web: WebConfig = Field(default_factory=WebConfig)

    @field_validator("default_api_version")
    @classmethod
    def _strip_version(cls, v: str) -> str:
        return v.strip()

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def app_path(self) -> Path:
        return self.base_path / self.app_dir

    @property
    def stubs_override_path(self) -> Path:
        return self.base_path / self.stubs_override_dir


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def config_from_dict(data: Dict[str, Any]) -> SmartCrudConfig:
    """Validate a raw mapping into a ``SmartCrudConfig``."""
    try:
        return SmartCrudConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Config validation failed: {exc}") from exc


def load_config(path: Path) -> SmartCrudConfig:
    """
    Load a YAML configuration file.

    An empty file yields the defaults. A relative ``base_path`` in the
    file is resolved against the file's directory.

    Raises:
        ConfigError: If the file is missing, unparsable or invalid.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}."
        )

    config: SmartCrudConfig = config_from_dict(data)

    if "base_path" in data and not config.base_path.is_absolute():
        config = config.model_copy(
            update={"base_path": path.parent / config.base_path}
        )

    logger.info("Loaded config from %s (base_path=%s).", path, config.base_path)
    return config


__all__: List[str] = [
    "CategoryPair",
    "NamespaceConfig",
    "PathConfig",
    "StubConfig",
    "DatabaseConfig",
    "ResponseKeys",
    "ApiConfig",
    "WebConfig",
    "SmartCrudConfig",
    "config_from_dict",
    "load_config",
]
