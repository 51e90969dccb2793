"""
Item filtering.

Every filterable item attribute is declared once in ``ITEM_FIELDS``
with a ``FieldKind`` that selects how a keyword is compared with it:

* ``NUMBER`` – the keyword is read as an integer (leading digits, so
  ``"5"`` and ``"5.7"`` both mean 5) and compared for equality;
* ``TEXT`` – case-insensitive substring;
* ``NESTED`` – every label, list element and mapping value inside the
  value is tried: strings by case-insensitive substring, numbers by
  integer equality.

Items are plain documents (dicts).  An item that lacks the requested
field, or holds a value of the wrong shape for its kind, never
matches.  A field name that is not declared matches nothing.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional


logger = logging.getLogger(__name__)

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_SEPARATORS = re.compile(r"[\s_\-]+")


class FieldKind(str, Enum):
    NUMBER = "number"
    TEXT = "text"
    NESTED = "nested"


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    kind: FieldKind
    # Keys inside a nested value that carry structure rather than data,
    # e.g. the ``kind`` tag of a size.
    skip_keys: tuple = ()


ITEM_FIELDS: Dict[str, FieldDescriptor] = {
    descriptor.name: descriptor
    for descriptor in (
        FieldDescriptor("rating", FieldKind.NUMBER),
        FieldDescriptor("condition", FieldKind.NUMBER),
        FieldDescriptor("purchase_price", FieldKind.NUMBER),
        FieldDescriptor("category", FieldKind.TEXT),
        FieldDescriptor("sub_category", FieldKind.TEXT),
        FieldDescriptor("type", FieldKind.TEXT),
        FieldDescriptor("fit", FieldKind.TEXT),
        FieldDescriptor("length", FieldKind.TEXT),
        FieldDescriptor("brand", FieldKind.TEXT),
        FieldDescriptor("description", FieldKind.TEXT),
        FieldDescriptor("purchase_location", FieldKind.TEXT),
        FieldDescriptor("purchase_date", FieldKind.TEXT),
        FieldDescriptor("color", FieldKind.NESTED),
        FieldDescriptor("material", FieldKind.NESTED),
        FieldDescriptor("size", FieldKind.NESTED, skip_keys=("kind",)),
        FieldDescriptor("styles", FieldKind.NESTED),
    )
}

# Fields scanned by the broad keyword search, in addition to the
# material labels and style tags.
BROAD_TEXT_FIELDS = (
    "description",
    "brand",
    "category",
    "type",
    "sub_category",
    "fit",
    "length",
    "purchase_location",
)


def normalize_field_name(name: str) -> str:
    """Map a display or camelCase field name onto a document key.

    ``"Purchase Location"``, ``"purchaseLocation"`` and
    ``"purchase-location"`` all become ``"purchase_location"``.
    """
    spaced = _CAMEL_BOUNDARY.sub(r"\1_\2", name.strip())
    return "_".join(word.lower() for word in _SEPARATORS.split(spaced) if word)


_LOOKUP = {name.replace("_", ""): descriptor for name, descriptor in ITEM_FIELDS.items()}


def resolve_field(name: str) -> Optional[FieldDescriptor]:
    """Return the descriptor for ``name`` or ``None`` if undeclared.

    Word boundaries are ignored, so ``"subcategory"`` resolves as well
    as ``"Sub Category"``.
    """
    return _LOOKUP.get(normalize_field_name(name).replace("_", ""))


def parse_int(keyword: str) -> Optional[int]:
    match = _INT_PREFIX.match(keyword)
    return int(match.group(1)) if match else None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _contains(value: str, keyword: str) -> bool:
    return keyword.lower() in value.lower()


def _leaves(value: Any, skip_keys: Iterable[str] = ()) -> Iterator[Any]:
    """Yield strings and numbers found anywhere inside ``value``."""
    if isinstance(value, dict):
        for key, inner in value.items():
            if key not in skip_keys:
                yield from _leaves(inner)
    elif isinstance(value, (list, tuple)):
        for inner in value:
            yield from _leaves(inner)
    elif isinstance(value, str) or _is_number(value):
        yield value


def _match_number(value: Any, target: Optional[int]) -> bool:
    return target is not None and _is_number(value) and value == target


def _match_text(value: Any, keyword: str) -> bool:
    return isinstance(value, str) and _contains(value, keyword)


def _match_nested(value: Any, keyword: str, target: Optional[int], skip_keys: tuple) -> bool:
    if value is None:
        return False
    for leaf in _leaves(value, skip_keys):
        if isinstance(leaf, str):
            if _contains(leaf, keyword):
                return True
        elif _match_number(leaf, target):
            return True
    return False


def filter_by_field(items: List[Dict[str, Any]], field_name: str, keyword: str) -> List[Dict[str, Any]]:
    """Return the items whose ``field_name`` matches ``keyword``."""
    descriptor = resolve_field(field_name)
    if descriptor is None:
        logger.warning("Filter requested on unknown field %r", field_name)
        return []
    target = parse_int(keyword)
    key = descriptor.name
    if descriptor.kind is FieldKind.NUMBER:
        return [item for item in items if _match_number(item.get(key), target)]
    if descriptor.kind is FieldKind.TEXT:
        return [item for item in items if _match_text(item.get(key), keyword)]
    return [
        item
        for item in items
        if _match_nested(item.get(key), keyword, target, descriptor.skip_keys)
    ]


def _broad_values(item: Dict[str, Any]) -> Iterator[Any]:
    for name in BROAD_TEXT_FIELDS:
        yield item.get(name)
    material = item.get("material")
    if isinstance(material, dict):
        yield from material.get("materials") or ()
    yield from item.get("styles") or ()


def search_broad(items: List[Dict[str, Any]], keyword: str) -> List[Dict[str, Any]]:
    """Case-insensitive keyword search over an item's descriptive text.

    Scans ``BROAD_TEXT_FIELDS``, the material labels and the style
    tags.  An empty keyword matches nothing.
    """
    if not keyword.strip():
        return []
    return [
        item
        for item in items
        if any(isinstance(value, str) and _contains(value, keyword) for value in _broad_values(item))
    ]
