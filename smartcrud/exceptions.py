# File: smartcrud/exceptions.py
"""
SmartCRUD - Exception Hierarchy
================================

All library errors inherit from :class:`SmartCrudError`, so callers can
``except SmartCrudError`` to handle any generation failure without
catching unrelated exceptions.

Skipped files and routes that are already registered are normal outcomes
and are reported through result objects, never raised.

Example::

    from smartcrud.exceptions import SmartCrudError, TemplateNotFoundError

    try:
        renderer.render("Api/controller.api.stub", substitutions)
    except TemplateNotFoundError as exc:
        print(f"Publish the stubs first: {exc}")
"""

from __future__ import annotations

from typing import List


class SmartCrudError(Exception):
    """Base exception for all SmartCRUD errors."""


class ConfigError(SmartCrudError):
    """Raised when a configuration file cannot be read or fails validation."""


class TemplateNotFoundError(SmartCrudError):
    """Raised when neither a custom override nor a packaged stub exists."""

    def __init__(self, template_id: str, searched: List[str]) -> None:
        self.template_id: str = template_id
        self.searched: List[str] = list(searched)
        super().__init__(
            f"Template not found: {template_id} (searched: {', '.join(searched)})"
        )


class UnsupportedArtifactKindError(SmartCrudError, LookupError):
    """
    Raised by the registry for an unknown (category, kind) pair.

    Every pair enumerated in ``CATEGORY_KINDS`` resolves, so this only
    fires on a programming error and is never recorded as a per-artifact
    failure.
    """

    def __init__(self, category: str, kind: str) -> None:
        self.category: str = category
        self.kind: str = kind
        super().__init__(f"Unsupported artifact kind: {category}.{kind}")


class StorageUnreachableError(SmartCrudError):
    """Raised when the storage backend cannot answer a schema query."""


class RouteFileCorruptError(SmartCrudError):
    """
    Raised when an existing route file does not follow the conventional
    layout (marker, optional declare directives, imports, then statements), so the import cannot
    be placed safely. The file is left untouched.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path: str = path
        self.reason: str = reason
        super().__init__(f"Route file {path} cannot be merged safely: {reason}")


__all__: List[str] = [
    "SmartCrudError",
    "ConfigError",
    "TemplateNotFoundError",
    "UnsupportedArtifactKindError",
    "StorageUnreachableError",
    "RouteFileCorruptError",
]
