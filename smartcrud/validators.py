# File: smartcrud/validators.py
"""
SmartCRUD - Request & Configuration Validators
===============================================
Semantic checks that run before any file is touched.

Pydantic already guarantees the structural shape of ``SmartCrudConfig``
and ``GenerationOptions``. This module adds the checks pydantic cannot
express: the entity name must become a usable PHP class name, the API
version must be a namespace segment, configured namespaces must be valid
PHP namespaces, and the flag combination must request something.

Usage:
    from smartcrud.validators import validate_request
    result = validate_request("Invoice", options, config)
    if result.has_errors:
        print(result.format_report())
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional

from smartcrud.config import SmartCrudConfig
from smartcrud.models import GenerationOptions
from smartcrud.utils import to_pascal_case, to_singular

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("smartcrud.validators")

# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationError:
    """Lightweight error descriptor (no Pydantic overhead)."""

    __slots__ = ("level", "code", "message", "context")

    def __init__(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.level: str = level  # "error" | "warning" | "info"
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    @property
    def is_warning(self) -> bool:
        return self.level == "warning"

    def __repr__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()


class ValidationResult:
    """Accumulates ``ValidationError`` items from the checks below."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationError] = []

    def add_error(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("error", code, message, context))

    def add_warning(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("warning", code, message, context))

    def add_info(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("info", code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    @property
    def errors(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_error]

    @property
    def warnings(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_warning]

    @property
    def codes(self) -> List[str]:
        return [e.code for e in self._items]

    @property
    def has_errors(self) -> bool:
        return any(e.is_error for e in self._items)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    def summary(self) -> str:
        return (
            f"Validation: {len(self.errors)} error(s), "
            f"{len(self.warnings)} warning(s)."
        )

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __bool__(self) -> bool:
        """Truthy when there are NO errors (i.e. valid)."""
        return self.is_valid

    def __len__(self) -> int:
        return len(self._items)

    def format_report(self, include_info: bool = False) -> str:
        """Human-readable multi-line report."""
        lines: List[str] = [self.summary()]
        for item in self._items:
            if not include_info and item.level == "info":
                continue
            lines.append(f"  [{item.level.upper()}] {item.code}: {item.message}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_ENTITY_RE: re.Pattern[str] = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")
_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_NAMESPACE_RE: re.Pattern[str] = re.compile(
    r"^[A-Za-z_][A-Za-z0-9_]*(\\[A-Za-z_][A-Za-z0-9_]*)*$"
)

# Reserved words that cannot be used as a PHP class name
_PHP_RESERVED_WORDS: FrozenSet[str] = frozenset(
    {
        "abstract", "and", "array", "as", "break", "callable", "case",
        "catch", "class", "clone", "const", "continue", "declare",
        "default", "do", "echo", "else", "elseif", "empty", "enddeclare",
        "endfor", "endforeach", "endif", "endswitch", "endwhile", "enum",
        "eval", "exit", "extends", "final", "finally", "fn", "for",
        "foreach", "function", "global", "goto", "if", "implements",
        "include", "instanceof", "insteadof", "interface", "isset",
        "list", "match", "namespace", "new", "or", "print", "private",
        "protected", "public", "readonly", "require", "return", "static",
        "switch", "throw", "trait", "try", "unset", "use", "var",
        "while", "xor", "yield", "bool", "false", "float", "int",
        "iterable", "mixed", "never", "null", "object", "parent",
        "self", "string", "true", "void",
    }
)


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def validate_entity_name(entity: str) -> ValidationResult:
    """
    The entity name must be an identifier that is not a PHP reserved word.

    A plural-looking name is only a warning: ``Invoices`` still generates,
    but the table becomes ``invoiceses``-style nonsense for some words.
    """
    result: ValidationResult = ValidationResult()
    stripped: str = entity.strip() if entity else ""

    if not stripped:
        result.add_error("ENTITY_EMPTY", "Entity name must not be empty.")
        return result

    if not _ENTITY_RE.match(stripped):
        result.add_error(
            "ENTITY_INVALID",
            f"Entity name '{stripped}' must start with a letter and contain "
            f"only letters, digits and underscores.",
            {"entity": stripped},
        )
        return result

    model: str = to_pascal_case(stripped)
    if model.lower() in _PHP_RESERVED_WORDS:
        result.add_error(
            "ENTITY_RESERVED",
            f"'{model}' is a reserved word in PHP and cannot be a class name.",
            {"entity": stripped},
        )

    if to_singular(model) != model:
        result.add_warning(
            "ENTITY_PLURAL",
            f"Entity name '{model}' looks plural; entities are usually singular "
            f"('{to_singular(model)}').",
            {"entity": stripped},
        )

    if model != stripped:
        result.add_info(
            "ENTITY_NORMALISED",
            f"Entity name '{stripped}' is used as '{model}'.",
        )

    return result


def validate_api_version(version: Optional[str]) -> ValidationResult:
    """The version becomes a namespace and path segment (``V1``)."""
    result: ValidationResult = ValidationResult()
    if version is None:
        return result

    if not _IDENTIFIER_RE.match(version):
        result.add_error(
            "API_VERSION_INVALID",
            f"API version '{version}' is not a valid namespace segment.",
            {"version": version},
        )
    elif not version.startswith("V"):
        result.add_warning(
            "API_VERSION_UNCONVENTIONAL",
            f"API version '{version}' does not follow the 'V<n>' convention.",
            {"version": version},
        )
    return result


def validate_options(options: GenerationOptions) -> ValidationResult:
    result: ValidationResult = ValidationResult()

    if not options.planned_artifacts():
        result.add_error(
            "NOTHING_TO_GENERATE",
            "The selected flags leave no artifact to generate.",
        )

    if options.skip_views and not options.web:
        result.add_warning(
            "SKIP_VIEWS_UNUSED",
            "Views are only generated for the web category; skip_views has no effect.",
        )

    result.merge(validate_api_version(options.api_version))
    return result


def validate_config(config: SmartCrudConfig) -> ValidationResult:
    """Namespaces must be PHP namespaces and paths must stay under the project."""
    result: ValidationResult = ValidationResult()

    namespaces: Dict[str, str] = {
        "controllers.api": config.namespaces.controllers.api,
        "controllers.web": config.namespaces.controllers.web,
        "requests.api": config.namespaces.requests.api,
        "requests.web": config.namespaces.requests.web,
        "resources": config.namespaces.resources,
        "services": config.namespaces.services,
        "repositories": config.namespaces.repositories,
        "dtos": config.namespaces.dtos,
        "exceptions": config.namespaces.exceptions,
        "models": config.namespaces.models,
    }
    for key, namespace in namespaces.items():
        if not _NAMESPACE_RE.match(namespace):
            result.add_error(
                "NAMESPACE_INVALID",
                f"namespaces.{key} '{namespace}' is not a valid PHP namespace.",
                {"key": key, "namespace": namespace},
            )

    paths: Dict[str, str] = {
        "app_dir": config.app_dir,
        "paths.controllers.api": config.paths.controllers.api,
        "paths.controllers.web": config.paths.controllers.web,
        "paths.requests.api": config.paths.requests.api,
        "paths.requests.web": config.paths.requests.web,
        "paths.resources": config.paths.resources,
        "paths.services": config.paths.services,
        "paths.repositories": config.paths.repositories,
        "paths.dtos": config.paths.dtos,
        "paths.exceptions": config.paths.exceptions,
        "paths.views": config.paths.views,
        "paths.routes.api": config.paths.routes.api,
        "paths.routes.web": config.paths.routes.web,
    }
    for key, value in paths.items():
        if Path(value).is_absolute() or ".." in Path(value).parts:
            result.add_error(
                "PATH_OUTSIDE_PROJECT",
                f"{key} '{value}' must be a relative path inside the project.",
                {"key": key, "path": value},
            )

    for key in ("api", "web"):
        route_path: str = getattr(config.paths.routes, key)
        if not route_path.endswith(".php"):
            result.add_warning(
                "ROUTE_FILE_EXTENSION",
                f"paths.routes.{key} '{route_path}' is not a .php file.",
            )

    version_check: ValidationResult = validate_api_version(config.default_api_version)
    result.merge(version_check)

    if not config.base_path.is_dir():
        result.add_warning(
            "BASE_PATH_MISSING",
            f"Project base path '{config.base_path}' does not exist; it will be created.",
        )

    return result


def validate_request(
    entity: str,
    options: GenerationOptions,
    config: SmartCrudConfig,
) -> ValidationResult:
    """
    **Master validation entry point**, called by the generator before any
    artifact is produced.
    """
    result: ValidationResult = ValidationResult()
    result.merge(validate_entity_name(entity))
    result.merge(validate_options(options))
    result.merge(validate_config(config))

    if result.has_errors:
        logger.error("Validation FAILED for '%s'. %s", entity, result.summary())
    else:
        logger.info("Validation PASSED for '%s'. %s", entity, result.summary())
    return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ValidationError",
    "ValidationResult",
    "validate_entity_name",
    "validate_api_version",
    "validate_options",
    "validate_config",
    "validate_request",
]
