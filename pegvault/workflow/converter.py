"""Custom Temporal DataConverter for PegVault frozen-dataclass payloads.

Handles: large ints (wei amounts exceed 2**53 and would lose precision in
JSON consumers that use doubles), datetime, Enum, tuples, and nested frozen
dataclasses (receipts, positions, price samples) by adding __type__ tags
during encoding.
"""

from __future__ import annotations

import dataclasses
import importlib
import json
from datetime import datetime
from enum import Enum
from typing import Any, get_type_hints

from temporalio.converter import (
    CompositePayloadConverter,
    DataConverter,
    DefaultPayloadConverter,
    JSONPlainPayloadConverter,
    JSONTypeConverter,
)

# Largest magnitude every JSON reader represents exactly.
_SAFE_INT = 2**53

# ---------------------------------------------------------------------------
# Recursive serializer
# ---------------------------------------------------------------------------


def _to_json(obj: Any) -> Any:  # noqa: PLR0911
    """Recursively convert PegVault objects to JSON-compatible values."""
    if obj is None or isinstance(obj, (bool, str, float)):
        return obj
    if isinstance(obj, int):
        if abs(obj) >= _SAFE_INT:
            return {"__int__": str(obj)}
        return obj
    if isinstance(obj, datetime):
        return {"__datetime__": obj.isoformat()}
    if isinstance(obj, Enum):
        return obj.value
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        d: dict[str, Any] = {
            "__type__": f"{type(obj).__module__}.{type(obj).__qualname__}",
        }
        for field in dataclasses.fields(obj):
            d[field.name] = _to_json(getattr(obj, field.name))
        return d
    if isinstance(obj, (tuple, list)):
        return [_to_json(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): _to_json(v) for k, v in obj.items()}
    return str(obj)


class PegVaultJSONEncoder(json.JSONEncoder):
    """JSON encoder using _to_json for full PegVault type support."""

    def default(self, o: Any) -> Any:
        result = _to_json(o)
        if result is not o:
            return result
        return super().default(o)

    def encode(self, o: Any) -> str:
        # big ints are native JSON to the stdlib encoder, so tag them up front
        return super().encode(_to_json(o))


# ---------------------------------------------------------------------------
# Recursive deserializer
# ---------------------------------------------------------------------------

# Only resolve classes from these modules: crafted payloads cannot
# instantiate anything else.
_ALLOWED_MODULES: frozenset[str] = frozenset({
    "pegvault.core.types",
    "pegvault.ledger.events",
    "pegvault.ledger.position",
    "pegvault.oracle.price",
    "pegvault.workflow.types",
})

_CLASS_CACHE: dict[str, type] = {}


def _resolve_class(fqn: str) -> type | None:
    if fqn in _CLASS_CACHE:
        return _CLASS_CACHE[fqn]
    parts = fqn.rsplit(".", 1)
    if len(parts) != 2:
        return None
    module_name, class_name = parts
    if module_name not in _ALLOWED_MODULES:
        return None
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None
    cls = getattr(module, class_name, None)
    if isinstance(cls, type):
        _CLASS_CACHE[fqn] = cls
        return cls
    return None


def _from_json(hint: Any, value: Any) -> Any:  # noqa: PLR0911
    """Recursively convert JSON values back to PegVault types."""
    if value is None:
        return None

    if isinstance(value, dict) and "__type__" in value:
        cls = _resolve_class(value["__type__"])
        if cls is None or not dataclasses.is_dataclass(cls):
            raise TypeError(f"Refusing to decode type {value['__type__']!r}")
        hints = get_type_hints(cls)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(cls):
            if field.name in value:
                kwargs[field.name] = _from_json(hints.get(field.name, Any), value[field.name])
        return cls(**kwargs)

    if isinstance(value, dict) and "__int__" in value:
        return int(value["__int__"])
    if isinstance(value, dict) and "__datetime__" in value:
        return datetime.fromisoformat(value["__datetime__"])

    if isinstance(hint, type) and issubclass(hint, Enum) and not isinstance(value, Enum):
        return hint(value)

    if isinstance(value, list):
        return tuple(_from_json(Any, x) for x in value)

    return value


class PegVaultJSONTypeConverter(JSONTypeConverter):
    """Decode tagged JSON values back to PegVault types."""

    def to_typed_value(self, hint: type, value: Any) -> Any:
        if isinstance(value, dict) and (
            "__type__" in value or "__int__" in value or "__datetime__" in value
        ):
            return _from_json(hint, value)
        return JSONTypeConverter.Unhandled


# ---------------------------------------------------------------------------
# Wire up
# ---------------------------------------------------------------------------


class PegVaultPayloadConverter(CompositePayloadConverter):
    """Payload converter with PegVault-aware JSON handling."""

    def __init__(self) -> None:
        json_converter = JSONPlainPayloadConverter(
            encoder=PegVaultJSONEncoder,
            custom_type_converters=[PegVaultJSONTypeConverter()],
        )
        super().__init__(
            *(
                c
                for c in DefaultPayloadConverter.default_encoding_payload_converters
                if not isinstance(c, JSONPlainPayloadConverter)
            ),
            json_converter,
        )


PEGVAULT_DATA_CONVERTER = DataConverter(
    payload_converter_class=PegVaultPayloadConverter,
)
