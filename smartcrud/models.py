# File: smartcrud/models.py
"""
SmartCRUD - Core Data Models
=============================
Pydantic V2 models and enums shared by every stage of the scaffold
pipeline: Introspection → Field Derivation → Rendering → Writing.

Everything here is transient: a fresh set of values is computed for each
generation run and nothing is persisted between runs except the generated
artifacts themselves.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("smartcrud.models")

# ---------------------------------------------------------------------------
# Enums: fixed sets used across the project
# ---------------------------------------------------------------------------


class ColumnType(str, Enum):
    """Normalised column types inferred from a backend type string."""

    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    TEXT = "text"


class ArtifactCategory(str, Enum):
    """Grouping that selects base paths and namespaces."""

    COMMON = "common"
    API = "api"
    WEB = "web"


class ArtifactKind(str, Enum):
    """Generated file roles."""

    SERVICE = "service"
    REPOSITORY = "repository"
    REPOSITORY_INTERFACE = "repository_interface"
    CREATE_DTO = "create_dto"
    UPDATE_DTO = "update_dto"
    FILTER_DTO = "filter_dto"
    EXCEPTION = "exception"
    CONTROLLER = "controller"
    STORE_REQUEST = "store_request"
    UPDATE_REQUEST = "update_request"
    RESOURCE = "resource"
    COLLECTION = "collection"
    VIEWS = "views"
    ROUTES = "routes"


class WriteStatus(str, Enum):
    """Outcome of a single file write."""

    WRITTEN = "written"
    SKIPPED = "skipped"


class MergeStatus(str, Enum):
    """Outcome of a route registration merge."""

    INSERTED = "inserted"
    ALREADY_PRESENT = "already_present"


class ArtifactStatus(str, Enum):
    """Per-artifact outcome reported back to the caller."""

    CREATED = "created"
    SKIPPED = "skipped"
    FAILED = "failed"


# Closed set of kinds per category, in generation order.
CATEGORY_KINDS: Dict[ArtifactCategory, Tuple[ArtifactKind, ...]] = {
    ArtifactCategory.COMMON: (
        ArtifactKind.SERVICE,
        ArtifactKind.REPOSITORY,
        ArtifactKind.REPOSITORY_INTERFACE,
        ArtifactKind.CREATE_DTO,
        ArtifactKind.UPDATE_DTO,
        ArtifactKind.FILTER_DTO,
        ArtifactKind.EXCEPTION,
    ),
    ArtifactCategory.API: (
        ArtifactKind.CONTROLLER,
        ArtifactKind.STORE_REQUEST,
        ArtifactKind.UPDATE_REQUEST,
        ArtifactKind.RESOURCE,
        ArtifactKind.COLLECTION,
        ArtifactKind.ROUTES,
    ),
    ArtifactCategory.WEB: (
        ArtifactKind.CONTROLLER,
        ArtifactKind.STORE_REQUEST,
        ArtifactKind.UPDATE_REQUEST,
        ArtifactKind.VIEWS,
        ArtifactKind.ROUTES,
    ),
}

# PHP type and default literal per normalised column type
_PHP_TYPES: Dict[ColumnType, str] = {
    ColumnType.INTEGER: "int",
    ColumnType.FLOAT: "float",
    ColumnType.BOOLEAN: "bool",
    ColumnType.TEXT: "string",
}

_PHP_DEFAULTS: Dict[ColumnType, str] = {
    ColumnType.INTEGER: "0",
    ColumnType.FLOAT: "0.0",
    ColumnType.BOOLEAN: "false",
    ColumnType.TEXT: "''",
}

# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_FROZEN_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    frozen=True,
    extra="forbid",
)


# ---------------------------------------------------------------------------
# Column model
# ---------------------------------------------------------------------------


class ColumnDescriptor(BaseModel):
    """
    One column of the introspected table, after type mapping.

    An empty list of descriptors is a valid state meaning "no schema
    available"; downstream components fall back to a default field set.
    """

    model_config = _FROZEN_CONFIG

    name: str = Field(..., min_length=1, description="Column name.")
    inferred_type: ColumnType = Field(
        default=ColumnType.TEXT, description="Normalised type."
    )
    nullable: bool = Field(default=False, description="Column accepts NULL.")
    max_length: Optional[int] = Field(
        default=None, ge=1, description="Parenthesised size, e.g. varchar(255)."
    )
    is_default_excluded: bool = Field(
        default=False,
        description="Column is left out of DTOs and validation rules.",
    )

    @computed_field  # type: ignore[misc]
    @property
    def php_type(self) -> str:
        return _PHP_TYPES[self.inferred_type]

    @computed_field  # type: ignore[misc]
    @property
    def default_literal(self) -> str:
        """Canonical default value, rendered as a PHP literal."""
        return _PHP_DEFAULTS[self.inferred_type]

    def __repr__(self) -> str:
        null: str = "?" if self.nullable else ""
        return f"<ColumnDescriptor {self.name}: {null}{self.inferred_type.value}>"


# ---------------------------------------------------------------------------
# Naming variants
# ---------------------------------------------------------------------------


class NamingVariants(BaseModel):
    """All spellings of an entity name used by paths, namespaces and stubs."""

    model_config = _FROZEN_CONFIG

    model: str
    model_variable: str
    model_plural: str
    model_plural_variable: str
    model_kebab: str
    model_plural_kebab: str
    model_snake: str
    model_plural_snake: str
    model_title: str
    model_plural_title: str
    model_lower: str
    model_plural_lower: str
    model_upper: str
    model_plural_upper: str

    @computed_field  # type: ignore[misc]
    @property
    def table(self) -> str:
        """Table identifier: pluralised snake case."""
        return self.model_plural_snake

    def as_substitutions(self) -> Dict[str, str]:
        return {
            "model": self.model,
            "modelVariable": self.model_variable,
            "modelPlural": self.model_plural,
            "modelPluralVariable": self.model_plural_variable,
            "modelKebab": self.model_kebab,
            "modelPluralKebab": self.model_plural_kebab,
            "modelSnake": self.model_snake,
            "modelPluralSnake": self.model_plural_snake,
            "modelTitle": self.model_title,
            "modelPluralTitle": self.model_plural_title,
            "modelLower": self.model_lower,
            "modelPluralLower": self.model_plural_lower,
            "modelUpper": self.model_upper,
            "modelPluralUpper": self.model_plural_upper,
            "table": self.table,
        }


# ---------------------------------------------------------------------------
# Generation options & resolved targets
# ---------------------------------------------------------------------------


class GenerationOptions(BaseModel):
    """
    Flags for one invocation. Immutable; the pipeline only reads them.

    ``api_version`` of ``None`` means "use the configured default".
    """

    model_config = _FROZEN_CONFIG

    force: bool = Field(default=False, description="Overwrite existing files.")
    api_version: Optional[str] = Field(
        default=None, description="API version segment, e.g. 'V2'."
    )
    skip_common: bool = Field(default=False)
    skip_routes: bool = Field(default=False)
    skip_views: bool = Field(default=False)
    api: bool = Field(default=True, description="Generate API artifacts.")
    web: bool = Field(default=False, description="Generate Web artifacts.")

    @field_validator("api_version")
    @classmethod
    def _strip_version(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        stripped: str = v.strip()
        return stripped or None

    def planned_artifacts(self) -> List[Tuple[ArtifactCategory, ArtifactKind]]:
        """Ordered (category, kind) pairs requested by these flags."""
        planned: List[Tuple[ArtifactCategory, ArtifactKind]] = []

        if not self.skip_common:
            planned.extend(
                (ArtifactCategory.COMMON, kind)
                for kind in CATEGORY_KINDS[ArtifactCategory.COMMON]
            )

        for category, enabled in (
            (ArtifactCategory.API, self.api),
            (ArtifactCategory.WEB, self.web),
        ):
            if not enabled:
                continue
            for kind in CATEGORY_KINDS[category]:
                if kind is ArtifactKind.ROUTES and self.skip_routes:
                    continue
                if kind is ArtifactKind.VIEWS and self.skip_views:
                    continue
                planned.append((category, kind))

        return planned


class ResolvedTarget(BaseModel):
    """Where an artifact goes and which namespace it declares."""

    model_config = _FROZEN_CONFIG

    file_path: Path
    namespace: str
    class_name: str = ""

    @computed_field  # type: ignore[misc]
    @property
    def fqcn(self) -> str:
        """Fully-qualified class name (namespace + class)."""
        if not self.class_name:
            return self.namespace
        return f"{self.namespace}\\{self.class_name}"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ColumnType",
    "ArtifactCategory",
    "ArtifactKind",
    "WriteStatus",
    "MergeStatus",
    "ArtifactStatus",
    "CATEGORY_KINDS",
    "ColumnDescriptor",
    "NamingVariants",
    "GenerationOptions",
    "ResolvedTarget",
]

logger.debug("smartcrud.models loaded.")
