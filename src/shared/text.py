"""Text helpers shared by every bounded context.

Payloads arrive as loosely typed maps (checkout metadata, form fields,
stored preferences). These helpers read and clean values from them
without caring where they came from.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_LIST_SPLIT_RE = re.compile(r"[,\n]+")
_SLUG_RE = re.compile(r"[^a-z0-9]+")
_WHITESPACE_RE = re.compile(r"\s+")

TRUTHY_FLAGS = {"true", "yes", "y", "1"}


def validate_email(value: str | None) -> bool:
    """Return True when value looks like a deliverable email address."""
    if not value:
        return False
    return bool(_EMAIL_RE.match(value.strip()))


def slugify(value: str, fallback: str = "item") -> str:
    slug = _SLUG_RE.sub("-", (value or "").lower()).strip("-")
    return slug or fallback


def collapse_whitespace(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value or "").strip()


def summarize(text: str, max_length: int = 240) -> str:
    """Collapse whitespace and truncate with an ellipsis."""
    clean = collapse_whitespace(text)
    if len(clean) <= max_length:
        return clean
    return clean[: max_length - 1].rstrip() + "…"


def split_name(full_name: str | None) -> tuple[str | None, str | None]:
    """Split a full name into (first, last). The last token is the last name."""
    parts = collapse_whitespace(full_name or "").split(" ")
    parts = [part for part in parts if part]
    if not parts:
        return None, None
    if len(parts) == 1:
        return parts[0], None
    return " ".join(parts[:-1]), parts[-1]


def split_list(value: Any) -> list[str]:
    """Split comma/newline separated text (or a list) into trimmed items."""
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        items: list[str] = []
        for entry in value:
            items.extend(split_list(entry))
        return items
    return [item.strip() for item in _LIST_SPLIT_RE.split(str(value)) if item.strip()]


def as_text(value: Any) -> str | None:
    """Return a stripped string for scalar values, None for blanks and containers."""
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return None
    text = str(value).strip()
    return text or None


def read_field(sources: Iterable[Mapping[str, Any] | None], *keys: str) -> str | None:
    """Return the first non-blank value found under any of keys, in source order."""
    for source in sources:
        if not source:
            continue
        for key in keys:
            text = as_text(source.get(key))
            if text:
                return text
    return None


def read_flag(sources: Iterable[Mapping[str, Any] | None], *keys: str) -> bool:
    value = read_field(sources, *keys)
    return bool(value) and value.lower() in TRUTHY_FLAGS


def camel_to_snake(key: str) -> str:
    key = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", key)
    return re.sub(r"[\s\-]+", "_", key).lower()


def unique(values: Iterable[str]) -> list[str]:
    """De-duplicate case-insensitively, keeping the first spelling and order."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        key = value.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(value)
    return result
