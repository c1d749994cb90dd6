# File: smartcrud/routes.py
"""
SmartCRUD - Route Registration Merger
======================================

Appends a rendered route block to a shared, hand-edited route file.

The file is parsed into a line-tagged ``RouteDocument``:

    MARKER     the leading ``<?php`` line
    DIRECTIVE  ``declare(...)`` lines ahead of the first statement
    IMPORT     ``use ...;`` declarations
    BODY       every other non-empty line (statements, comments)
    BLANK      empty or whitespace-only lines

and edited structurally: the controller import goes in front of the first
BODY line, the block goes at the end. The whole read-modify-write is one
atomic write; a file that does not follow the layout (marker, directives,
imports, statements) raises ``RouteFileCorruptError`` and is left untouched.

Duplicate detection looks for the entity's plural kebab token as a quoted
literal (``'invoices'`` or ``"invoices"``) anywhere in the file.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from smartcrud.exceptions import RouteFileCorruptError
from smartcrud.exporters import atomic_write_text
from smartcrud.models import MergeStatus, NamingVariants
from smartcrud.utils import format_php_list, php_quote

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("smartcrud.routes")

PHP_OPEN_TAG: str = "<?php"
GENERATED_MARKER: str = "// ===== Smart CRUD Generated Routes ====="

# declare(...) directives such as strict_types may precede the imports
_DIRECTIVE_RE: re.Pattern[str] = re.compile(r"^declare\s*\(")

API_BOILERPLATE: str = (
    "<?php\n"
    "\n"
    "use Illuminate\\Support\\Facades\\Route;\n"
    "\n"
    "Route::get('/health', fn () => ['status' => 'ok']);\n"
    "\n"
    f"{GENERATED_MARKER}\n"
)

WEB_BOILERPLATE: str = (
    "<?php\n"
    "\n"
    "use Illuminate\\Support\\Facades\\Route;\n"
    "\n"
    "Route::get('/', function () {\n"
    "    return view('welcome');\n"
    "});\n"
    "\n"
    f"{GENERATED_MARKER}\n"
)


# ---------------------------------------------------------------------------
# Route group formatting
# ---------------------------------------------------------------------------


def format_middleware(middleware: Sequence[str]) -> str:
    """
    Format a middleware list as a route-group call.

    Examples:
        >>> format_middleware(["web"])
        "middleware('web')"
        >>> format_middleware(["api", "auth:sanctum"])
        "middleware(['api', 'auth:sanctum'])"
        >>> format_middleware([])
        ''
    """
    if not middleware:
        return ""
    if len(middleware) == 1:
        return f"middleware({php_quote(middleware[0])})"
    return f"middleware({format_php_list(middleware)})"


def route_group_opening(middleware: Sequence[str], prefix: str = "") -> str:
    """
    Opening line of a route group.

    Examples:
        >>> route_group_opening(["api"], "api/v1")
        "Route::middleware('api')->prefix('api/v1')->group(function () {"
        >>> route_group_opening([], "")
        'Route::group([], function () {'
    """
    calls: List[str] = []
    formatted: str = format_middleware(middleware)
    if formatted:
        calls.append(formatted)
    cleaned: str = prefix.strip("/")
    if cleaned:
        calls.append(f"prefix({php_quote(cleaned)})")
    if not calls:
        return "Route::group([], function () {"
    return "Route::" + "->".join(calls) + "->group(function () {"


# ---------------------------------------------------------------------------
# Line-tagged document
# ---------------------------------------------------------------------------


class LineTag(str, Enum):
    MARKER = "marker"
    DIRECTIVE = "directive"
    IMPORT = "import"
    BODY = "body"
    BLANK = "blank"


@dataclass(slots=True)
class RouteLine:
    text: str
    tag: LineTag


def _is_import(stripped: str) -> bool:
    return stripped.startswith("use ")


def _is_directive(stripped: str) -> bool:
    return _DIRECTIVE_RE.match(stripped) is not None


class RouteDocument:
    """
    Route file as an ordered list of tagged lines.

    Usage::

        doc = RouteDocument.parse(text, path)
        doc.add_import("use App\\Http\\Controllers\\Web\\Invoice\\InvoiceController;")
        doc.append_block(block)
        new_text = doc.render()
    """

    def __init__(self, lines: List[RouteLine]) -> None:
        self.lines: List[RouteLine] = lines

    @classmethod
    def parse(cls, text: str, path: str = "<memory>") -> "RouteDocument":
        lines: List[RouteLine] = []
        seen_marker: bool = False
        seen_body: bool = False

        for number, raw in enumerate(text.split("\n"), start=1):
            stripped: str = raw.strip()
            if not stripped:
                lines.append(RouteLine(raw, LineTag.BLANK))
                continue

            if not seen_marker:
                if not stripped.startswith(PHP_OPEN_TAG):
                    raise RouteFileCorruptError(
                        path, f"line {number}: expected '{PHP_OPEN_TAG}' first"
                    )
                seen_marker = True
                lines.append(RouteLine(raw, LineTag.MARKER))
                continue

            if not seen_body and _is_directive(stripped):
                lines.append(RouteLine(raw, LineTag.DIRECTIVE))
                continue

            if _is_import(stripped):
                if seen_body:
                    raise RouteFileCorruptError(
                        path, f"line {number}: import after the first statement"
                    )
                lines.append(RouteLine(raw, LineTag.IMPORT))
                continue

            seen_body = True
            lines.append(RouteLine(raw, LineTag.BODY))

        if not seen_marker:
            raise RouteFileCorruptError(path, f"no '{PHP_OPEN_TAG}' marker")

        # text ending in "\n" splits into a trailing empty string
        if lines and lines[-1].tag is LineTag.BLANK and lines[-1].text == "":
            lines.pop()

        return cls(lines)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def imports(self) -> List[str]:
        return [line.text.strip() for line in self.lines if line.tag is LineTag.IMPORT]

    def first_body_index(self) -> Optional[int]:
        for index, line in enumerate(self.lines):
            if line.tag is LineTag.BODY:
                return index
        return None

    def last_header_index(self) -> int:
        """Index of the last marker, directive or import line."""
        last: int = 0
        for index, line in enumerate(self.lines):
            if line.tag in (LineTag.MARKER, LineTag.DIRECTIVE, LineTag.IMPORT):
                last = index
        return last

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def add_import(self, statement: str) -> bool:
        """Insert ``statement`` before the first body line. False if present."""
        if statement.strip() in self.imports():
            return False
        position: Optional[int] = self.first_body_index()
        if position is None:
            position = self.last_header_index() + 1
        self.lines.insert(position, RouteLine(statement, LineTag.IMPORT))
        return True

    def append_block(self, block: str) -> None:
        """Append ``block`` minus its imports and blank lines, after one blank line."""
        kept: List[str] = [
            raw
            for raw in block.split("\n")
            if raw.strip() and not _is_import(raw.strip())
        ]
        while self.lines and self.lines[-1].tag is LineTag.BLANK:
            self.lines.pop()
        self.lines.append(RouteLine("", LineTag.BLANK))
        self.lines.extend(RouteLine(raw, LineTag.BODY) for raw in kept)

    def render(self) -> str:
        return "\n".join(line.text for line in self.lines) + "\n"


# ---------------------------------------------------------------------------
# Merger
# ---------------------------------------------------------------------------


def contains_route_token(text: str, token: str) -> bool:
    return f"'{token}'" in text or f'"{token}"' in text


class RouteMerger:
    """Merges rendered route blocks into route files."""

    def merge(
        self,
        route_file: Path,
        names: NamingVariants,
        rendered_block: str,
        controller_fqcn: str,
        boilerplate: str,
    ) -> MergeStatus:
        if route_file.exists():
            text: str = route_file.read_text(encoding="utf-8")
        else:
            logger.info("Route file %s missing; starting from boilerplate.", route_file)
            text = boilerplate

        if not text.strip():
            text = boilerplate

        document: RouteDocument = RouteDocument.parse(text, str(route_file))

        if contains_route_token(text, names.model_plural_kebab):
            logger.info(
                "Routes for %s already registered in %s.", names.model, route_file
            )
            return MergeStatus.ALREADY_PRESENT

        document.add_import(f"use {controller_fqcn};")
        document.append_block(rendered_block)
        atomic_write_text(route_file, document.render())

        logger.info("Registered %s routes in %s.", names.model, route_file)
        return MergeStatus.INSERTED


__all__: List[str] = [
    "PHP_OPEN_TAG",
    "GENERATED_MARKER",
    "API_BOILERPLATE",
    "WEB_BOILERPLATE",
    "format_middleware",
    "route_group_opening",
    "LineTag",
    "RouteLine",
    "RouteDocument",
    "contains_route_token",
    "RouteMerger",
]
