# File: smartcrud/generator.py
"""
SmartCRUD - Scaffold Generation Pipeline (Orchestrator)
========================================================

Connects every phase for one entity:

    Validation → Naming → Introspection → Field Derivation
        → (Registry → Renderer → Writer | Merger) per artifact

Workflow::

    1. Validate entity name, options and configuration (validators.py).
    2. Derive naming variants (utils.py).
    3. Introspect the entity's table when a backend is available
       (introspection.py), falling back to the default field set.
    4. For each planned (category, kind), dispatch to its handler:
         class files  → render one stub, write one file
         views        → render and write index/create/edit/show
         routes       → render the route block, merge into the route file
    5. Return a ``GenerationReport`` with one result per artifact.

Error handling strategy:
    - Validation errors abort the run before any file is touched.
    - Artifact failures are isolated: a ``SmartCrudError`` or ``OSError``
      is recorded as ``failed:<reason>`` and the next artifact proceeds.
    - ``UnsupportedArtifactKindError`` is a programming error and
      propagates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

from smartcrud.config import ResponseKeys, SmartCrudConfig
from smartcrud.exceptions import (
    SmartCrudError,
    StorageUnreachableError,
    UnsupportedArtifactKindError,
)
from smartcrud.exporters import ArtifactWriter, WriteResult
from smartcrud.fields import CREATE, UPDATE, FieldDeriver
from smartcrud.introspection import SchemaIntrospector, SQLAlchemyBackend, StorageBackend
from smartcrud.models import (
    ArtifactCategory,
    ArtifactKind,
    ArtifactStatus,
    ColumnDescriptor,
    GenerationOptions,
    MergeStatus,
    NamingVariants,
    ResolvedTarget,
)
from smartcrud.registry import VIEW_NAMES, ArtifactRegistry
from smartcrud.routes import API_BOILERPLATE, WEB_BOILERPLATE, RouteMerger, route_group_opening
from smartcrud.templates import TemplateRenderer
from smartcrud.utils import Timer, derive_names, format_php_list, to_camel_case
from smartcrud.validators import ValidationResult, validate_request

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("smartcrud.generator")

# Placeholder prefix per class artifact kind, e.g. serviceNamespace / serviceClass
_KIND_KEYS: Dict[ArtifactKind, str] = {
    ArtifactKind.SERVICE: "service",
    ArtifactKind.REPOSITORY: "repository",
    ArtifactKind.REPOSITORY_INTERFACE: "repositoryInterface",
    ArtifactKind.CREATE_DTO: "createDTO",
    ArtifactKind.UPDATE_DTO: "updateDTO",
    ArtifactKind.FILTER_DTO: "filterDTO",
    ArtifactKind.EXCEPTION: "exception",
    ArtifactKind.CONTROLLER: "controller",
    ArtifactKind.STORE_REQUEST: "storeRequest",
    ArtifactKind.UPDATE_REQUEST: "updateRequest",
    ArtifactKind.RESOURCE: "resource",
    ArtifactKind.COLLECTION: "collection",
}

# Field variant per class artifact; everything else uses the create blocks
_UPDATE_KINDS: frozenset = frozenset({ArtifactKind.UPDATE_DTO, ArtifactKind.UPDATE_REQUEST})

_BOILERPLATES: Dict[ArtifactCategory, str] = {
    ArtifactCategory.API: API_BOILERPLATE,
    ArtifactCategory.WEB: WEB_BOILERPLATE,
}


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ArtifactResult:
    """Outcome of one (category, kind) artifact."""

    category: ArtifactCategory
    kind: ArtifactKind
    status: ArtifactStatus
    paths: List[str] = field(default_factory=list)
    reason: str = ""

    @property
    def label(self) -> str:
        return f"{self.category.value}.{self.kind.value}"

    @property
    def display(self) -> str:
        if self.status is ArtifactStatus.FAILED:
            return f"failed:{self.reason}"
        return self.status.value


@dataclass(slots=True)
class GenerationReport:
    """
    Report produced by ``ScaffoldGenerator.generate()``.

    ``results`` is ordered by generation order and keyed by
    ``<category>.<kind>``.
    """

    entity: str = ""
    table: str = ""
    schema_detected: bool = False
    column_count: int = 0
    results: Dict[str, ArtifactResult] = field(default_factory=dict)
    validation_errors: List[str] = field(default_factory=list)
    validation_warnings: List[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def failed(self) -> List[ArtifactResult]:
        return [r for r in self.results.values() if r.status is ArtifactStatus.FAILED]

    @property
    def success(self) -> bool:
        return not self.validation_errors and not self.failed

    def count(self, status: ArtifactStatus) -> int:
        return sum(1 for r in self.results.values() if r.status is status)

    def status_map(self) -> Dict[str, str]:
        return {label: result.display for label, result in self.results.items()}

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "SUCCESS" if self.success else "FAILED"
        schema: str = (
            f"{self.column_count} column(s)" if self.schema_detected else "default fields"
        )
        lines.append(f"{'=' * 60}")
        lines.append("  SmartCRUD Generation Report")
        lines.append(f"{'=' * 60}")
        lines.append(f"  Status:     {status}")
        lines.append(f"  Entity:     {self.entity}")
        lines.append(f"  Table:      {self.table}")
        lines.append(f"  Schema:     {schema}")
        lines.append(
            f"  Artifacts:  {self.count(ArtifactStatus.CREATED)} created, "
            f"{self.count(ArtifactStatus.SKIPPED)} skipped, "
            f"{self.count(ArtifactStatus.FAILED)} failed"
        )
        lines.append(f"  Total time: {self.elapsed_seconds:.3f}s")

        if self.results:
            lines.append(f"{'-' * 60}")
            for label, result in self.results.items():
                icon: str = {
                    ArtifactStatus.CREATED: "+",
                    ArtifactStatus.SKIPPED: "=",
                    ArtifactStatus.FAILED: "x",
                }[result.status]
                lines.append(f"    {icon} {label:<28s} {result.display}")

        if self.validation_errors:
            lines.append(f"{'-' * 60}")
            lines.append(f"  Validation Errors ({len(self.validation_errors)}):")
            for err in self.validation_errors:
                lines.append(f"    x {err}")

        if self.validation_warnings:
            lines.append(f"{'-' * 60}")
            lines.append(f"  Validation Warnings ({len(self.validation_warnings)}):")
            for warn in self.validation_warnings:
                lines.append(f"    ! {warn}")

        lines.append(f"{'=' * 60}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Per-run state
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class _RunContext:
    names: NamingVariants
    options: GenerationOptions
    version: str
    deriver: FieldDeriver
    base: Dict[str, str]


_Handler = Callable[[_RunContext, ArtifactCategory, ArtifactKind], ArtifactResult]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class ScaffoldGenerator:
    """
    Master pipeline orchestrator.

    Usage::

        generator = ScaffoldGenerator(config)
        report = generator.generate("Invoice", GenerationOptions(web=True))
        print(report.summary())

    Collaborators default to the real implementations and can be
    replaced, e.g. a stub ``StorageBackend`` in tests. When no backend is
    given and ``config.database_url`` is set, a ``SQLAlchemyBackend`` is
    created on first use and disposed by ``close()``.
    """

    def __init__(
        self,
        config: SmartCrudConfig,
        backend: Optional[StorageBackend] = None,
        renderer: Optional[TemplateRenderer] = None,
        writer: Optional[ArtifactWriter] = None,
        merger: Optional[RouteMerger] = None,
    ) -> None:
        self._config: SmartCrudConfig = config
        self._backend: Optional[StorageBackend] = backend
        self._owned_backend: Optional[SQLAlchemyBackend] = None
        self._registry: ArtifactRegistry = ArtifactRegistry(config)
        self._renderer: TemplateRenderer = renderer or TemplateRenderer(
            override_root=config.stubs_override_path
        )
        self._writer: ArtifactWriter = writer or ArtifactWriter()
        self._merger: RouteMerger = merger or RouteMerger()

        self._handlers: Dict[ArtifactKind, _Handler] = {
            kind: self._generate_class_file for kind in _KIND_KEYS
        }
        self._handlers[ArtifactKind.VIEWS] = self._generate_views
        self._handlers[ArtifactKind.ROUTES] = self._generate_routes

    @property
    def registry(self) -> ArtifactRegistry:
        return self._registry

    @property
    def writer(self) -> ArtifactWriter:
        return self._writer

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def generate(
        self,
        entity: str,
        options: Optional[GenerationOptions] = None,
    ) -> GenerationReport:
        options = options or GenerationOptions()
        report: GenerationReport = GenerationReport(entity=entity)

        with Timer("generate") as timer:
            validation: ValidationResult = validate_request(entity, options, self._config)
            report.validation_errors = [str(e) for e in validation.errors]
            report.validation_warnings = [str(w) for w in validation.warnings]

            if validation.has_errors:
                logger.error("Generation aborted for '%s': invalid request.", entity)
            else:
                self._run_pipeline(entity.strip(), options, report)

        report.elapsed_seconds = timer.elapsed
        logger.info(
            "Generation for '%s' finished in %.3fs (%s).",
            report.entity,
            report.elapsed_seconds,
            "success" if report.success else "failed",
        )
        return report

    def close(self) -> None:
        if self._owned_backend is not None:
            self._owned_backend.close()
            self._owned_backend = None
            self._backend = None

    # -----------------------------------------------------------------
    # Internal: pipeline
    # -----------------------------------------------------------------

    def _run_pipeline(
        self,
        entity: str,
        options: GenerationOptions,
        report: GenerationReport,
    ) -> None:
        names: NamingVariants = derive_names(entity)
        report.entity = names.model
        report.table = names.table

        columns: List[ColumnDescriptor] = SchemaIntrospector(
            self._storage_backend(), self._config
        ).introspect(names)
        report.schema_detected = bool(columns)
        report.column_count = len(columns)

        version: str = self._registry.version(options.api_version)
        context: _RunContext = _RunContext(
            names=names,
            options=options,
            version=version,
            deriver=FieldDeriver(columns, names.table, self._config),
            base=self._base_substitutions(names, version),
        )

        for category, kind in options.planned_artifacts():
            handler: Optional[_Handler] = self._handlers.get(kind)
            if handler is None:
                raise UnsupportedArtifactKindError(category.value, kind.value)

            try:
                result: ArtifactResult = handler(context, category, kind)
            except UnsupportedArtifactKindError:
                raise
            except (SmartCrudError, OSError) as exc:
                logger.error(
                    "Failed to generate %s.%s for %s: %s",
                    category.value,
                    kind.value,
                    names.model,
                    exc,
                )
                result = ArtifactResult(
                    category, kind, ArtifactStatus.FAILED, reason=str(exc)
                )
            report.results[result.label] = result

    def _storage_backend(self) -> Optional[StorageBackend]:
        if self._backend is None and self._config.database_url:
            try:
                self._owned_backend = SQLAlchemyBackend.from_url(self._config.database_url)
            except StorageUnreachableError as exc:
                logger.warning("Schema introspection disabled: %s", exc)
                return None
            self._backend = self._owned_backend
        return self._backend

    # -----------------------------------------------------------------
    # Internal: substitutions
    # -----------------------------------------------------------------

    def _base_substitutions(self, names: NamingVariants, version: str) -> Dict[str, str]:
        config: SmartCrudConfig = self._config
        keys: ResponseKeys = config.api.response_keys
        base: Dict[str, str] = names.as_substitutions()
        base.update(
            {
                "version": version,
                "versionLower": version.lower(),
                "modelNamespace": config.namespaces.models,
                "modelClass": f"{config.namespaces.models}\\{names.model}",
                "repositoryVariable": to_camel_case(names.model) + "Repository",
                "serviceVariable": to_camel_case(names.model) + "Service",
                "route": names.model_plural_kebab,
                "viewPrefix": names.model_plural_kebab,
                "layout": config.web.layout,
                "apiPerPage": str(config.api.per_page),
                "webPerPage": str(config.web.per_page),
                "successKey": keys.success,
                "messageKey": keys.message,
                "dataKey": keys.data,
                "errorsKey": keys.errors,
                "metaKey": keys.meta,
            }
        )
        base.update(self._namespace_substitutions(names, ArtifactCategory.COMMON, version))
        return base

    def _namespace_substitutions(
        self,
        names: NamingVariants,
        category: ArtifactCategory,
        version: str,
    ) -> Dict[str, str]:
        subs: Dict[str, str] = {}
        targets: Dict[ArtifactKind, ResolvedTarget] = self._registry.namespaces(
            names, category, version
        )
        for kind, target in targets.items():
            key: str = _KIND_KEYS[kind]
            subs[f"{key}Namespace"] = target.namespace
            subs[f"{key}Class"] = target.class_name
        return subs

    def _category_substitutions(
        self, context: _RunContext, category: ArtifactCategory
    ) -> Dict[str, str]:
        subs: Dict[str, str] = dict(context.base)
        if category is not ArtifactCategory.COMMON:
            subs.update(
                self._namespace_substitutions(context.names, category, context.version)
            )
            subs["perPage"] = subs["apiPerPage" if category is ArtifactCategory.API else "webPerPage"]
        return subs

    # -----------------------------------------------------------------
    # Handlers
    # -----------------------------------------------------------------

    def _generate_class_file(
        self,
        context: _RunContext,
        category: ArtifactCategory,
        kind: ArtifactKind,
    ) -> ArtifactResult:
        target: ResolvedTarget = self._registry.resolve(
            context.names, category, kind, context.version
        )
        variant: str = UPDATE if kind in _UPDATE_KINDS else CREATE

        subs: Dict[str, str] = self._category_substitutions(context, category)
        subs.update(context.deriver.substitutions(variant))
        subs["namespace"] = target.namespace
        subs["class"] = target.class_name

        content: str = self._renderer.render(
            self._registry.template_id(category, kind), subs
        )
        written: WriteResult = self._writer.write(
            target.file_path, content, context.options.force
        )
        if written.written:
            return ArtifactResult(category, kind, ArtifactStatus.CREATED, [written.path])
        return ArtifactResult(
            category, kind, ArtifactStatus.SKIPPED, [written.path], reason="exists"
        )

    def _generate_views(
        self,
        context: _RunContext,
        category: ArtifactCategory,
        kind: ArtifactKind,
    ) -> ArtifactResult:
        target: ResolvedTarget = self._registry.resolve(
            context.names, category, kind, context.version
        )
        subs: Dict[str, str] = self._category_substitutions(context, category)
        subs.update(context.deriver.substitutions(CREATE))

        written_paths: List[str] = []
        skipped_paths: List[str] = []
        for view in VIEW_NAMES:
            subs["viewType"] = view
            content: str = self._renderer.render(
                self._registry.template_id(category, kind, view=view), subs
            )
            path: Path = target.file_path / f"{view}.blade.php"
            written: WriteResult = self._writer.write(path, content, context.options.force)
            (written_paths if written.written else skipped_paths).append(written.path)

        if written_paths:
            return ArtifactResult(
                category, kind, ArtifactStatus.CREATED, written_paths + skipped_paths
            )
        return ArtifactResult(
            category, kind, ArtifactStatus.SKIPPED, skipped_paths, reason="exists"
        )

    def _generate_routes(
        self,
        context: _RunContext,
        category: ArtifactCategory,
        kind: ArtifactKind,
    ) -> ArtifactResult:
        target: ResolvedTarget = self._registry.resolve(
            context.names, category, kind, context.version
        )
        subs: Dict[str, str] = self._category_substitutions(context, category)
        subs.update(self._route_substitutions(context, category, target))

        block: str = self._renderer.render(self._registry.template_id(category, kind), subs)
        status: MergeStatus = self._merger.merge(
            target.file_path,
            context.names,
            block,
            target.fqcn,
            _BOILERPLATES[category],
        )
        if status is MergeStatus.INSERTED:
            return ArtifactResult(
                category, kind, ArtifactStatus.CREATED, [str(target.file_path)]
            )
        return ArtifactResult(
            category,
            kind,
            ArtifactStatus.SKIPPED,
            [str(target.file_path)],
            reason="already registered",
        )

    def _route_substitutions(
        self,
        context: _RunContext,
        category: ArtifactCategory,
        target: ResolvedTarget,
    ) -> Dict[str, str]:
        if category is ArtifactCategory.API:
            middleware: List[str] = list(self._config.api.middleware)
            prefix: str = "/".join(
                part.strip("/")
                for part in (self._config.api.route_prefix, context.version.lower())
                if part.strip("/")
            )
        else:
            middleware = list(self._config.web.middleware)
            prefix = self._config.web.route_prefix.strip("/")

        return {
            "controller": target.class_name,
            "controllerNamespace": target.namespace,
            "controllerFqcn": target.fqcn,
            "routePrefix": prefix,
            "middleware": format_php_list(middleware),
            "routeGroup": route_group_opening(middleware, prefix),
        }


__all__: List[str] = [
    "ArtifactResult",
    "GenerationReport",
    "ScaffoldGenerator",
]
