# File: smartcrud/__init__.py
"""
SmartCRUD - Laravel CRUD Scaffold Generator
============================================

Generates a coherent set of Laravel artifacts for one entity: service,
repository and contract, DTOs, exception, API and web controllers, form
requests, API resources, Blade views and route registrations. When a
database is reachable, DTO properties, validation rules and resource
fields follow the entity's table.

Architecture overview::

    ┌──────────────┐     ┌───────────────────┐     ┌──────────────────┐
    │  CLI / Entry │────▶│ ScaffoldGenerator │────▶│ TemplateRenderer │
    │   (cli.py)   │     │  (generator.py)   │     │  (templates.py)  │
    └──────────────┘     └─────────┬─────────┘     └──────────────────┘
                                   │
          ┌──────────────┬─────────┼──────────┬──────────────┐
          ▼              ▼         ▼          ▼              ▼
    ┌─────────────┐ ┌─────────┐ ┌────────┐ ┌───────────┐ ┌─────────┐
    │introspection│ │ fields  │ │registry│ │ exporters │ │ routes  │
    │  + typemap  │ │  (.py)  │ │ (.py)  │ │   (.py)   │ │  (.py)  │
    └─────────────┘ └─────────┘ └────────┘ └───────────┘ └─────────┘

Usage::

    # As a library
    from smartcrud import GenerationOptions, ScaffoldGenerator, SmartCrudConfig
    config = SmartCrudConfig(base_path=Path("/srv/shop"))
    report = ScaffoldGenerator(config).generate("Invoice", GenerationOptions(web=True))
    print(report.status_map())

    # From the command line
    python -m smartcrud Invoice --api --web -v
"""

from __future__ import annotations

__version__: str = "1.0.0"
__license__: str = "MIT"

from smartcrud.config import SmartCrudConfig, load_config
from smartcrud.exceptions import (
    ConfigError,
    RouteFileCorruptError,
    SmartCrudError,
    StorageUnreachableError,
    TemplateNotFoundError,
    UnsupportedArtifactKindError,
)
from smartcrud.models import (
    ArtifactCategory,
    ArtifactKind,
    ArtifactStatus,
    ColumnDescriptor,
    ColumnType,
    GenerationOptions,
    MergeStatus,
    NamingVariants,
    ResolvedTarget,
    WriteStatus,
)
from smartcrud.utils import derive_names
from smartcrud.typemap import map_type
from smartcrud.introspection import SchemaIntrospector, SQLAlchemyBackend, StorageBackend
from smartcrud.registry import ArtifactRegistry
from smartcrud.templates import TemplateRenderer
from smartcrud.fields import FieldDeriver
from smartcrud.exporters import ArtifactWriter, FileRecord
from smartcrud.routes import RouteMerger
from smartcrud.validators import ValidationResult, validate_request
from smartcrud.generator import ArtifactResult, GenerationReport, ScaffoldGenerator

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__license__",
    # Core orchestrator
    "ScaffoldGenerator",
    "GenerationReport",
    "ArtifactResult",
    # Configuration
    "SmartCrudConfig",
    "load_config",
    # Models
    "ArtifactCategory",
    "ArtifactKind",
    "ArtifactStatus",
    "ColumnDescriptor",
    "ColumnType",
    "GenerationOptions",
    "MergeStatus",
    "NamingVariants",
    "ResolvedTarget",
    "WriteStatus",
    # Pipeline components
    "derive_names",
    "map_type",
    "StorageBackend",
    "SQLAlchemyBackend",
    "SchemaIntrospector",
    "ArtifactRegistry",
    "TemplateRenderer",
    "FieldDeriver",
    "ArtifactWriter",
    "FileRecord",
    "RouteMerger",
    # Validation
    "ValidationResult",
    "validate_request",
    # Errors
    "SmartCrudError",
    "ConfigError",
    "TemplateNotFoundError",
    "UnsupportedArtifactKindError",
    "StorageUnreachableError",
    "RouteFileCorruptError",
]
