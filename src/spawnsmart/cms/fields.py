"""Field normalizer — flattens raw CMS field values into plain Python values.

A raw field value arrives in one of a closed set of shapes:

- ``TEXT``       a plain string
- ``LOCALIZED``  a wrapper keyed by locale code, e.g. ``{"en-US": value}``
- ``RICH_TEXT``  a document tree (``document`` → block nodes → ``text`` nodes)
- ``LINK``       a reference to another entry or asset (``{"sys": {"type": "Link", ...}}``)
- ``EMPTY``      ``None`` or an empty container
- ``UNKNOWN``    anything else

Every public function here is total: it never raises and never returns
``None`` where a string is promised.
"""

from __future__ import annotations

import json
import re
from enum import Enum
from typing import Any

DEFAULT_LOCALE = "en-US"
DEFAULT_IMAGE_PATH = "/images/default-mushroom.jpg"

# Longest best-effort rendering of an unrecognised value
_UNKNOWN_TEXT_LIMIT = 100
# Guard against pathological nesting (locale wrappers inside locale wrappers…)
_MAX_DEPTH = 32

# Region-qualified locale codes only, e.g. "en-US"
_LOCALE_KEY = re.compile(r"^[a-z]{2}-[A-Z]{2}$")


class FieldShape(str, Enum):
    EMPTY = "empty"
    TEXT = "text"
    LOCALIZED = "localized"
    RICH_TEXT = "rich_text"
    LINK = "link"
    UNKNOWN = "unknown"


def classify(value: Any) -> FieldShape:
    """Return the shape of a raw field value."""
    if value is None:
        return FieldShape.EMPTY
    if isinstance(value, str):
        return FieldShape.TEXT
    if isinstance(value, dict):
        if not value:
            return FieldShape.EMPTY
        if value.get("nodeType") == "document":
            return FieldShape.RICH_TEXT
        sys = value.get("sys")
        if isinstance(sys, dict) and sys.get("type") == "Link":
            return FieldShape.LINK
        if all(isinstance(k, str) and _LOCALE_KEY.match(k) for k in value):
            return FieldShape.LOCALIZED
        return FieldShape.UNKNOWN
    if isinstance(value, (list, tuple)) and not value:
        return FieldShape.EMPTY
    return FieldShape.UNKNOWN


def unwrap_locale(value: Any, locale: str = DEFAULT_LOCALE) -> Any:
    """Strip any number of locale wrappers, preferring ``locale``.

    When the preferred locale is missing the first available locale is used.
    Non-wrapped values are returned unchanged.
    """
    for _ in range(_MAX_DEPTH):
        if classify(value) is not FieldShape.LOCALIZED:
            return value
        if locale in value:
            value = value[locale]
        else:
            value = next(iter(value.values()))
    return None


# ----------------------------------------------------------------------
# Text
# ----------------------------------------------------------------------


def extract_text(value: Any) -> str:
    """Extract plain text from any raw field value ("" when unresolvable)."""
    return _text(value, 0)


def _text(value: Any, depth: int) -> str:
    if depth > _MAX_DEPTH:
        return ""
    match classify(value):
        case FieldShape.TEXT:
            return value
        case FieldShape.LOCALIZED:
            return _text(unwrap_locale(value), depth + 1)
        case FieldShape.RICH_TEXT:
            return rich_text_to_plain(value)
        case FieldShape.LINK | FieldShape.EMPTY:
            return ""
        case _:
            return _best_effort_text(value, depth)


def rich_text_to_plain(document: dict[str, Any]) -> str:
    """Join every text node of a rich-text document, in order, with single spaces."""
    values: list[str] = []
    _collect_text_nodes(document, values, 0)
    return " ".join(values)


def _collect_text_nodes(node: Any, out: list[str], depth: int) -> None:
    if depth > _MAX_DEPTH or not isinstance(node, dict):
        return
    if node.get("nodeType") == "text":
        value = node.get("value")
        if isinstance(value, str):
            out.append(value)
        return
    children = node.get("content")
    if isinstance(children, list):
        for child in children:
            _collect_text_nodes(child, out, depth + 1)


def _best_effort_text(value: Any, depth: int) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        parts = [_text(item, depth + 1) for item in value]
        text = ", ".join(p for p in parts if p)
    else:
        # Nesting deep enough to exhaust the encoder renders as "".
        try:
            text = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError, RecursionError):
            text = ""
    return text[:_UNKNOWN_TEXT_LIMIT]


# ----------------------------------------------------------------------
# Images
# ----------------------------------------------------------------------


def extract_image_url(value: Any, default: str = DEFAULT_IMAGE_PATH) -> str:
    """Resolve an image field to a URL, or ``default`` when there is none.

    Accepts a plain URL, an asset (``fields.file.url``), a bare file object
    (``file.url``) or anything with a ``url`` key. Protocol-relative URLs
    (``//host/path``) are upgraded to ``https://``.
    """
    url = _image_url(unwrap_locale(value))
    if not url:
        return default
    if url.startswith("//"):
        return "https:" + url
    return url


def _image_url(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    if not isinstance(value, dict):
        return ""
    candidates = []
    fields = value.get("fields")
    if isinstance(fields, dict):
        candidates.append(unwrap_locale(fields.get("file")))
    candidates.append(unwrap_locale(value.get("file")))
    candidates.append(value)
    for candidate in candidates:
        if isinstance(candidate, dict):
            url = unwrap_locale(candidate.get("url"))
            if isinstance(url, str) and url.strip():
                return url.strip()
    return ""


# ----------------------------------------------------------------------
# Links and scalars
# ----------------------------------------------------------------------


def extract_link_id(value: Any) -> str | None:
    """Return the target id of a single link, or None."""
    value = unwrap_locale(value)
    if classify(value) is FieldShape.LINK:
        target = value["sys"].get("id")
        if isinstance(target, str) and target:
            return target
        return None
    # A resolved entry carries its own sys.id.
    if isinstance(value, dict) and isinstance(value.get("sys"), dict):
        target = value["sys"].get("id")
        if isinstance(target, str) and target:
            return target
    return None


def extract_link_ids(value: Any) -> list[str]:
    """Return the target ids of a link or an array of links, in order."""
    value = unwrap_locale(value)
    if isinstance(value, (list, tuple)):
        ids = [extract_link_id(item) for item in value]
        return [i for i in ids if i]
    single = extract_link_id(value)
    return [single] if single else []


def extract_bool(value: Any, default: bool = False) -> bool:
    value = unwrap_locale(value)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "1"):
            return True
        if lowered in ("false", "no", "0"):
            return False
    return default


def extract_int(value: Any, default: int = 0) -> int:
    value = unwrap_locale(value)
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


def extract_list(value: Any) -> list[str]:
    """Return a list of strings from an array field (or a comma-separated string)."""
    value = unwrap_locale(value)
    if isinstance(value, (list, tuple)):
        items = [extract_text(item).strip() for item in value]
    elif isinstance(value, str):
        items = [part.strip() for part in value.split(",")]
    else:
        return []
    return [item for item in items if item]


def extract_mapping(value: Any) -> dict[str, str]:
    """Flatten an object field (or a JSON-encoded object string) to text values."""
    value = unwrap_locale(value)
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except (ValueError, RecursionError):
            return {}
    if not isinstance(value, dict) or classify(value) is FieldShape.RICH_TEXT:
        return {}
    out: dict[str, str] = {}
    for key, item in value.items():
        if isinstance(key, str):
            out[key] = extract_text(item)
    return out
