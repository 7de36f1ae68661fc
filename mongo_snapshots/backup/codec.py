"""Conversion between BSON values and their JSON-safe rendering.

Capture writes documents in MongoDB Extended JSON (relaxed mode) via
``bson.json_util``: identifiers become ``{"$oid": "<24 hex>"}``, dates
``{"$date": ...}``, decimals ``{"$numberDecimal": ...}`` and binary data
``{"$binary": ...}``. Decoding turns those tagged mappings back into BSON
values.

Older artifacts (and tools that stringify documents naively) hold bare
24-character hex strings instead of tagged identifiers, so decoding also
recognises identifier-looking keys by name: ``_id`` and anything ending in
``Id``. A value under such a key that is not a valid ObjectId is left as it
was, and so is a tagged mapping that does not parse.
"""

from typing import Any, Dict, Iterable, Optional

from bson import ObjectId, json_util
from bson.errors import BSONError, InvalidId
from bson.json_util import RELAXED_JSON_OPTIONS

OID_KEY = "$oid"
OBJECT_ID_LENGTH = 24
JSON_OPTIONS = RELAXED_JSON_OPTIONS


def encode(value: ObjectId) -> Dict[str, str]:
    """Render an ObjectId as ``{"$oid": hex}``."""
    return {OID_KEY: str(value)}


def json_default(value: Any) -> Any:
    """``json.dumps`` fallback for BSON values found in captured documents."""
    if isinstance(value, ObjectId):
        return encode(value)
    return json_util.default(value, json_options=JSON_OPTIONS)


def is_identifier_key(key: str, id_fields: Optional[Iterable[str]] = None) -> bool:
    if id_fields is not None:
        return key in id_fields
    return key == "_id" or key.endswith("Id")


def _to_object_id(raw: str, fallback: Any) -> Any:
    try:
        return ObjectId(raw)
    except (InvalidId, TypeError):
        return fallback


def _is_tagged(mapping: Dict[str, Any]) -> bool:
    return any(isinstance(key, str) and key.startswith("$") for key in mapping)


def _from_extended_json(mapping: Dict[str, Any]) -> Any:
    try:
        return json_util.object_hook(mapping, json_options=JSON_OPTIONS)
    except (BSONError, TypeError, ValueError):
        return mapping


def decode(value: Any, id_fields: Optional[Iterable[str]] = None) -> Any:
    """Return a copy of ``value`` with serialized BSON values rebuilt.

    Children are decoded before their parent, the same order ``json_util.loads``
    applies its object hook in.

    Args:
        value: Parsed JSON tree (mapping, list or scalar)
        id_fields: Optional allowlist of keys whose bare 24-character strings
            are identifiers. When None the naming-convention heuristic applies.
            Tagged ``$oid`` mappings are decoded either way.

    Returns:
        Equivalent tree holding ``bson.ObjectId``, ``datetime`` and other
        BSON values where they were serialized
    """
    if id_fields is not None and not isinstance(id_fields, (set, frozenset)):
        id_fields = frozenset(id_fields)

    if isinstance(value, list):
        return [decode(item, id_fields) for item in value]

    if isinstance(value, dict):
        decoded = {}
        for key, item in value.items():
            if (
                is_identifier_key(key, id_fields)
                and isinstance(item, str)
                and len(item) == OBJECT_ID_LENGTH
            ):
                decoded[key] = _to_object_id(item, item)
            else:
                decoded[key] = decode(item, id_fields)

        if _is_tagged(decoded):
            return _from_extended_json(decoded)
        return decoded

    return value
