# File: smartcrud/registry.py
"""
SmartCRUD - Artifact Registry
==============================

Static table mapping ``(category, kind)`` to where an artifact lives and
which namespace/class it declares. Resolution is pure string
interpolation over the configuration and the entity's naming variants;
nothing here touches the filesystem.

Template placeholders used in the table:

    {model}         PascalCase entity name
    {version}       API version segment (``V1``)
    {plural_kebab}  pluralised kebab-case entity name
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from smartcrud.config import SmartCrudConfig
from smartcrud.exceptions import UnsupportedArtifactKindError
from smartcrud.models import (
    ArtifactCategory,
    ArtifactKind,
    CATEGORY_KINDS,
    NamingVariants,
    ResolvedTarget,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("smartcrud.registry")


@dataclass(frozen=True)
class RegistryEntry:
    """One row of the registry table."""

    path_key: str
    path_template: str
    namespace_key: str
    namespace_template: str
    class_template: str = ""
    under_app: bool = True


_C = ArtifactCategory
_K = ArtifactKind

_REGISTRY: Dict[Tuple[ArtifactCategory, ArtifactKind], RegistryEntry] = {
    # -- Common ------------------------------------------------------------
    (_C.COMMON, _K.SERVICE): RegistryEntry(
        "services", "{model}/{model}Service.php",
        "services", "{model}", "{model}Service",
    ),
    (_C.COMMON, _K.REPOSITORY): RegistryEntry(
        "repositories", "{model}/{model}Repository.php",
        "repositories", "{model}", "{model}Repository",
    ),
    (_C.COMMON, _K.REPOSITORY_INTERFACE): RegistryEntry(
        "repositories", "{model}/Contracts/{model}RepositoryInterface.php",
        "repositories", "{model}\\Contracts", "{model}RepositoryInterface",
    ),
    (_C.COMMON, _K.CREATE_DTO): RegistryEntry(
        "dtos", "{model}/{model}CreateDTO.php",
        "dtos", "{model}", "{model}CreateDTO",
    ),
    (_C.COMMON, _K.UPDATE_DTO): RegistryEntry(
        "dtos", "{model}/{model}UpdateDTO.php",
        "dtos", "{model}", "{model}UpdateDTO",
    ),
    (_C.COMMON, _K.FILTER_DTO): RegistryEntry(
        "dtos", "{model}/{model}FilterDTO.php",
        "dtos", "{model}", "{model}FilterDTO",
    ),
    (_C.COMMON, _K.EXCEPTION): RegistryEntry(
        "exceptions", "{model}/{model}Exception.php",
        "exceptions", "{model}", "{model}Exception",
    ),
    # -- Api ---------------------------------------------------------------
    (_C.API, _K.CONTROLLER): RegistryEntry(
        "controllers.api", "{version}/{model}/{model}Controller.php",
        "controllers.api", "{version}\\{model}", "{model}Controller",
    ),
    (_C.API, _K.STORE_REQUEST): RegistryEntry(
        "requests.api", "{version}/{model}/Store{model}Request.php",
        "requests.api", "{version}\\{model}", "Store{model}Request",
    ),
    (_C.API, _K.UPDATE_REQUEST): RegistryEntry(
        "requests.api", "{version}/{model}/Update{model}Request.php",
        "requests.api", "{version}\\{model}", "Update{model}Request",
    ),
    (_C.API, _K.RESOURCE): RegistryEntry(
        "resources", "{version}/{model}/{model}Resource.php",
        "resources", "{version}\\{model}", "{model}Resource",
    ),
    (_C.API, _K.COLLECTION): RegistryEntry(
        "resources", "{version}/{model}/{model}Collection.php",
        "resources", "{version}\\{model}", "{model}Collection",
    ),
    (_C.API, _K.ROUTES): RegistryEntry(
        "routes.api", "",
        "controllers.api", "{version}\\{model}", "{model}Controller",
        under_app=False,
    ),
    # -- Web ---------------------------------------------------------------
    (_C.WEB, _K.CONTROLLER): RegistryEntry(
        "controllers.web", "{model}/{model}Controller.php",
        "controllers.web", "{model}", "{model}Controller",
    ),
    (_C.WEB, _K.STORE_REQUEST): RegistryEntry(
        "requests.web", "{model}/Store{model}Request.php",
        "requests.web", "{model}", "Store{model}Request",
    ),
    (_C.WEB, _K.UPDATE_REQUEST): RegistryEntry(
        "requests.web", "{model}/Update{model}Request.php",
        "requests.web", "{model}", "Update{model}Request",
    ),
    (_C.WEB, _K.VIEWS): RegistryEntry(
        "views", "{plural_kebab}",
        "", "{plural_kebab}",
        under_app=False,
    ),
    (_C.WEB, _K.ROUTES): RegistryEntry(
        "routes.web", "",
        "controllers.web", "{model}", "{model}Controller",
        under_app=False,
    ),
}

# Kinds that produce one class file each
_CLASS_KINDS: frozenset = frozenset(
    kind for kind in ArtifactKind if kind not in (ArtifactKind.VIEWS, ArtifactKind.ROUTES)
)

VIEW_NAMES: Tuple[str, ...] = ("index", "create", "edit", "show")


def _lookup(section: Any, dotted: str) -> str:
    """Follow a dotted key (``controllers.api``) through a config section."""
    value: Any = section
    for part in dotted.split("."):
        value = getattr(value, part)
    return str(value)


class ArtifactRegistry:
    """
    Resolves artifact locations for one configuration.

    Usage::

        registry = ArtifactRegistry(config)
        target = registry.resolve(names, ArtifactCategory.API, ArtifactKind.CONTROLLER)
        target.file_path   # .../app/Http/Controllers/Api/V1/Invoice/InvoiceController.php
        target.fqcn        # App\\Http\\Controllers\\Api\\V1\\Invoice\\InvoiceController
    """

    def __init__(self, config: SmartCrudConfig) -> None:
        self._config: SmartCrudConfig = config

    def entry(self, category: ArtifactCategory, kind: ArtifactKind) -> RegistryEntry:
        try:
            return _REGISTRY[(ArtifactCategory(category), ArtifactKind(kind))]
        except (KeyError, ValueError):
            raise UnsupportedArtifactKindError(str(category), str(kind)) from None

    def version(self, version: Optional[str] = None) -> str:
        """Requested API version, or the configured default."""
        return version or self._config.default_api_version

    def resolve(
        self,
        names: NamingVariants,
        category: ArtifactCategory,
        kind: ArtifactKind,
        version: Optional[str] = None,
    ) -> ResolvedTarget:
        entry: RegistryEntry = self.entry(category, kind)
        fields: Dict[str, str] = {
            "model": names.model,
            "version": self.version(version),
            "plural_kebab": names.model_plural_kebab,
        }

        root: Path = self._config.app_path if entry.under_app else self._config.base_path
        file_path: Path = root / _lookup(self._config.paths, entry.path_key)
        relative: str = entry.path_template.format(**fields)
        if relative:
            file_path = file_path / relative

        suffix: str = entry.namespace_template.format(**fields)
        if entry.namespace_key:
            base_namespace: str = _lookup(self._config.namespaces, entry.namespace_key)
            namespace: str = f"{base_namespace}\\{suffix}" if suffix else base_namespace
        else:
            namespace = suffix

        return ResolvedTarget(
            file_path=file_path,
            namespace=namespace,
            class_name=entry.class_template.format(**fields),
        )

    def template_id(
        self,
        category: ArtifactCategory,
        kind: ArtifactKind,
        view: Optional[str] = None,
    ) -> str:
        """
        Configured template id for an artifact.

        Views have one template per view name, selected with ``view``.
        """
        self.entry(category, kind)
        stubs: Dict[str, str] = self._config.stubs.for_category(
            ArtifactCategory(category).value
        )
        key: str = f"view_{view}" if kind is ArtifactKind.VIEWS else ArtifactKind(kind).value
        try:
            return stubs[key]
        except KeyError:
            raise UnsupportedArtifactKindError(str(category), key) from None

    def namespaces(
        self,
        names: NamingVariants,
        category: ArtifactCategory,
        version: Optional[str] = None,
    ) -> Dict[ArtifactKind, ResolvedTarget]:
        """Every class artifact of ``category``, resolved."""
        resolved: Dict[ArtifactKind, ResolvedTarget] = {}
        for kind in CATEGORY_KINDS[ArtifactCategory(category)]:
            if kind in _CLASS_KINDS:
                resolved[kind] = self.resolve(names, category, kind, version)
        return resolved


__all__: List[str] = [
    "RegistryEntry",
    "ArtifactRegistry",
    "VIEW_NAMES",
]
