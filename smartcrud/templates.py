# File: smartcrud/templates.py
"""
SmartCRUD - Template Renderer
==============================

Locates stub files and fills their placeholders.

Lookup order for a template id such as ``Api/controller.api.stub``:
    1. ``<override_root>/Api/controller.api.stub`` (project-published stubs)
    2. ``<default_root>/Api/controller.api.stub`` (stubs shipped with the package)

Placeholders are written ``{{ key }}`` or ``{{key}}``. Substitution is a
single pass over the stub: values are inserted verbatim and never scanned
again, and placeholders with no mapped value stay in the output as-is.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from smartcrud.exceptions import TemplateNotFoundError

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("smartcrud.templates")

DEFAULT_STUBS_DIR: Path = Path(__file__).resolve().parent / "stubs"

_PLACEHOLDER_RE: re.Pattern[str] = re.compile(
    r"\{\{ ([A-Za-z_][A-Za-z0-9_]*) \}\}|\{\{([A-Za-z_][A-Za-z0-9_]*)\}\}"
)


def replace_placeholders(content: str, substitutions: Mapping[str, str]) -> str:
    """
    Replace ``{{ key }}`` / ``{{key}}`` occurrences with mapped values.

    Examples:
        >>> replace_placeholders("class {{ model }}Controller", {"model": "Invoice"})
        'class InvoiceController'
        >>> replace_placeholders("{{ unknown }}", {})
        '{{ unknown }}'
    """

    def _substitute(match: "re.Match[str]") -> str:
        key: str = match.group(1) or match.group(2)
        if key in substitutions:
            return str(substitutions[key])
        return match.group(0)

    return _PLACEHOLDER_RE.sub(_substitute, content)


class TemplateRenderer:
    """
    Resolves template ids to files and renders them.

    Loaded stub text is cached per renderer instance, so rendering the
    same stub for several artifacts reads it once.
    """

    def __init__(
        self,
        override_root: Optional[Path] = None,
        default_root: Path = DEFAULT_STUBS_DIR,
    ) -> None:
        self._override_root: Optional[Path] = override_root
        self._default_root: Path = default_root
        self._cache: Dict[Path, str] = {}

    @property
    def override_root(self) -> Optional[Path]:
        return self._override_root

    @property
    def default_root(self) -> Path:
        return self._default_root

    def resolve(self, template_id: str) -> Path:
        searched: List[str] = []
        for root in (self._override_root, self._default_root):
            if root is None:
                continue
            candidate: Path = root / template_id
            searched.append(str(candidate))
            if candidate.is_file():
                logger.debug("Template %s resolved to %s.", template_id, candidate)
                return candidate
        raise TemplateNotFoundError(template_id, searched)

    def load(self, template_id: str) -> str:
        path: Path = self.resolve(template_id)
        if path not in self._cache:
            self._cache[path] = path.read_text(encoding="utf-8")
        return self._cache[path]

    def render(self, template_id: str, substitutions: Mapping[str, str]) -> str:
        return replace_placeholders(self.load(template_id), substitutions)


__all__: List[str] = [
    "DEFAULT_STUBS_DIR",
    "replace_placeholders",
    "TemplateRenderer",
]
