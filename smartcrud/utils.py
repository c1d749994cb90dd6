# File: smartcrud/utils.py
"""
SmartCRUD - Utility Functions & Helpers
========================================
Name derivation, string formatting and small measurement helpers used
throughout the scaffold pipeline.

Performance strategy:
- String-conversion functions are decorated with ``@lru_cache(maxsize=None)``;
  every artifact of a run asks for the same handful of spellings, so
  repeated calls are O(1) after the first.
"""

from __future__ import annotations

import functools
import hashlib
import logging
import re
import time
from typing import Dict, List, Optional, Sequence, Tuple

from smartcrud.models import NamingVariants

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("smartcrud.utils")

# ---------------------------------------------------------------------------
# Pre-compiled regex patterns (compiled once at module load)
# ---------------------------------------------------------------------------

_CAMEL_TO_SNAKE_RE1: re.Pattern[str] = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_TO_SNAKE_RE2: re.Pattern[str] = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALPHANUM_RE: re.Pattern[str] = re.compile(r"[^a-zA-Z0-9]")
_MULTI_UNDERSCORE_RE: re.Pattern[str] = re.compile(r"_{2,}")
_LEADING_TRAILING_UNDERSCORE_RE: re.Pattern[str] = re.compile(r"^_+|_+$")
_SPLIT_WORDS_RE: re.Pattern[str] = re.compile(
    r"[A-Z]?[a-z]+|[A-Z]+(?=[A-Z][a-z]|\d|\b)|[A-Z]|\d+"
)

# Irregular nouns that show up as entity names
_IRREGULAR_PLURALS: Dict[str, str] = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
    "mouse": "mice",
    "goose": "geese",
    "tooth": "teeth",
    "foot": "feet",
    "datum": "data",
    "index": "indices",
    "matrix": "matrices",
    "vertex": "vertices",
    "axis": "axes",
    "crisis": "crises",
    "analysis": "analyses",
    "status": "statuses",
    "address": "addresses",
}

_IRREGULAR_SINGULARS: Dict[str, str] = {v: k for k, v in _IRREGULAR_PLURALS.items()}

# Nouns with identical singular and plural forms
_UNCOUNTABLE: frozenset = frozenset(
    {"equipment", "information", "rice", "money", "species", "series", "fish", "sheep", "news"}
)


# ---------------------------------------------------------------------------
# Cached string transformation functions
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def to_snake_case(name: str) -> str:
    """
    Convert any string to snake_case.

    Examples:
        >>> to_snake_case("InvoiceLine")
        'invoice_line'
        >>> to_snake_case("getHTTPResponse")
        'get_http_response'
    """
    if not name:
        return ""
    s: str = _CAMEL_TO_SNAKE_RE1.sub(r"\1_\2", name)
    s = _CAMEL_TO_SNAKE_RE2.sub(r"\1_\2", s)
    s = _NON_ALPHANUM_RE.sub("_", s)
    s = _MULTI_UNDERSCORE_RE.sub("_", s)
    s = _LEADING_TRAILING_UNDERSCORE_RE.sub("", s)
    return s.lower()


@functools.lru_cache(maxsize=None)
def to_pascal_case(name: str) -> str:
    """
    Convert any string to PascalCase.

    Examples:
        >>> to_pascal_case("invoice_line")
        'InvoiceLine'
        >>> to_pascal_case("invoice")
        'Invoice'
    """
    if not name:
        return ""
    return "".join(word.capitalize() for word in _extract_words(name))


@functools.lru_cache(maxsize=None)
def to_camel_case(name: str) -> str:
    """
    Convert any string to camelCase.

    Examples:
        >>> to_camel_case("invoice_line")
        'invoiceLine'
    """
    words: Tuple[str, ...] = _extract_words(name) if name else ()
    if not words:
        return ""
    return words[0].lower() + "".join(w.capitalize() for w in words[1:])


@functools.lru_cache(maxsize=None)
def to_kebab_case(name: str) -> str:
    """Convert any string to kebab-case (used in URL paths and view dirs)."""
    if not name:
        return ""
    return "-".join(w.lower() for w in _extract_words(name))


@functools.lru_cache(maxsize=None)
def to_title_human(name: str) -> str:
    """
    Convert identifier to human-readable title.

    Examples:
        >>> to_title_human("InvoiceLine")
        'Invoice Line'
    """
    if not name:
        return ""
    return " ".join(w.capitalize() for w in _extract_words(name))


@functools.lru_cache(maxsize=None)
def to_plural(name: str) -> str:
    """
    Naive English pluralisation of a single word, sufficient for code
    generation. Casing of the first character is preserved.
    """
    if not name:
        return ""

    lower: str = name.lower()

    if lower in _UNCOUNTABLE:
        return name

    if lower in _IRREGULAR_PLURALS:
        plural: str = _IRREGULAR_PLURALS[lower]
        if name[0].isupper():
            return plural[0].upper() + plural[1:]
        return plural

    if lower in _IRREGULAR_SINGULARS:
        return name

    # Rules ordered by specificity
    if lower.endswith(("sh", "ch", "x", "z", "ss", "us")):
        return name + "es"
    if lower.endswith("s"):
        return name
    if lower.endswith("y") and len(name) > 1 and lower[-2] not in "aeiou":
        return name[:-1] + "ies"
    if lower.endswith("fe"):
        return name[:-2] + "ves"
    if lower.endswith("f") and not lower.endswith("ff"):
        return name[:-1] + "ves"
    if lower.endswith("o") and len(name) > 1 and lower[-2] not in "aeiou":
        return name + "es"

    return name + "s"


@functools.lru_cache(maxsize=None)
def to_singular(name: str) -> str:
    """Naive English singularisation (reverse of to_plural)."""
    if not name:
        return ""

    lower: str = name.lower()

    if lower in _UNCOUNTABLE or lower in _IRREGULAR_PLURALS:
        return name

    if lower in _IRREGULAR_SINGULARS:
        singular: str = _IRREGULAR_SINGULARS[lower]
        if name[0].isupper():
            return singular[0].upper() + singular[1:]
        return singular

    if lower.endswith("ies") and len(name) > 3:
        return name[:-3] + "y"
    if lower.endswith("ves"):
        return name[:-3] + "f"
    if lower.endswith(("ches", "shes", "sses", "xes", "zes", "uses")):
        return name[:-2]
    if lower.endswith("s") and not lower.endswith("ss"):
        return name[:-1]

    return name


@functools.lru_cache(maxsize=None)
def _extract_words(name: str) -> Tuple[str, ...]:
    """
    Extract individual words from any casing style.

    Returns a tuple (hashable for LRU cache) of lowercase word strings.
    """
    cleaned: str = _NON_ALPHANUM_RE.sub(" ", name)
    words: List[str] = _SPLIT_WORDS_RE.findall(cleaned)
    return tuple(w.lower() for w in words if w)


# ---------------------------------------------------------------------------
# Entity naming
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def derive_names(entity: str) -> NamingVariants:
    """
    Derive every naming variant of an entity.

    Only the last word is pluralised, so ``InvoiceLine`` becomes
    ``InvoiceLines`` and ``SalesPerson`` becomes ``SalesPeople``.

    Examples:
        >>> derive_names("invoice").model_plural_kebab
        'invoices'
        >>> derive_names("InvoiceLine").table
        'invoice_lines'
    """
    model: str = to_pascal_case(entity)
    words: List[str] = list(_extract_words(model))
    if not words:
        raise ValueError(f"Cannot derive names from {entity!r}.")

    plural_words: List[str] = words[:-1] + [to_plural(words[-1])]
    model_plural: str = "".join(w.capitalize() for w in plural_words)

    return NamingVariants(
        model=model,
        model_variable=to_camel_case(model),
        model_plural=model_plural,
        model_plural_variable=to_camel_case(model_plural),
        model_kebab=to_kebab_case(model),
        model_plural_kebab=to_kebab_case(model_plural),
        model_snake=to_snake_case(model),
        model_plural_snake=to_snake_case(model_plural),
        model_title=to_title_human(model),
        model_plural_title=to_title_human(model_plural),
        model_lower=model.lower(),
        model_plural_lower=model_plural.lower(),
        model_upper=model.upper(),
        model_plural_upper=model_plural.upper(),
    )


# ---------------------------------------------------------------------------
# Code formatting helpers
# ---------------------------------------------------------------------------


def php_quote(value: str) -> str:
    """Wrap a value in PHP single quotes, escaping internals."""
    escaped: str = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def format_php_list(items: Sequence[str]) -> str:
    """Format a PHP array literal of quoted strings, e.g. ``['api', 'auth']``."""
    return "[" + ", ".join(php_quote(item) for item in items) + "]"


# ---------------------------------------------------------------------------
# Checksum & metrics
# ---------------------------------------------------------------------------


def sha256_hex(content: str) -> str:
    """Return SHA-256 hex digest of a string."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def count_lines(content: str) -> int:
    """Count the number of lines in a string."""
    if not content:
        return 0
    return content.count("\n") + (1 if not content.endswith("\n") else 0)


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Simple context-manager timer for profiling pipeline steps.

    Usage:
        with Timer("introspection") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.debug("Timer [%s]: %.4f seconds", self.label, self.elapsed)

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "to_snake_case",
    "to_pascal_case",
    "to_camel_case",
    "to_kebab_case",
    "to_title_human",
    "to_plural",
    "to_singular",
    "derive_names",
    "php_quote",
    "format_php_list",
    "sha256_hex",
    "count_lines",
    "Timer",
]
