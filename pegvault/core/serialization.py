"""Canonical JSON for vault notifications.

canonical_bytes(obj) -> Result[bytes, str]: deterministic JSON bytes.

Every int is written as a decimal string. Wei amounts routinely exceed
2**53, so consumers that parse JSON numbers as doubles would otherwise
round them. Dataclasses become objects tagged with "_type" (the class name)
and keys are sorted, so equal values always encode to equal bytes.
"""

from __future__ import annotations

import dataclasses
import json
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pegvault.core.result import Err, Ok
from pegvault.core.types import NonEmptyStr, UtcDatetime

type Json = None | bool | str | list[Json] | dict[str, Json]


class _Unencodable(Exception):
    pass


def _encode(obj: object) -> Json:  # noqa: PLR0911
    match obj:
        case None | bool() | str():
            return obj
        case int():
            return str(obj)
        case Decimal():
            return "0" if obj.is_zero() else str(obj.normalize())
        case NonEmptyStr(value=value):
            return value
        case UtcDatetime(value=value):
            return value.isoformat()
        case datetime() if obj.tzinfo is None:
            raise _Unencodable("naive datetime -- use UtcDatetime")
        case datetime():
            return obj.astimezone(UTC).isoformat()
        case Enum():
            return _encode(obj.value)
        case tuple() | list():
            return [_encode(item) for item in obj]
        case dict():
            return {str(k): _encode(v) for k, v in obj.items()}
        case _ if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            fields: dict[str, Json] = {"_type": type(obj).__name__}
            for f in dataclasses.fields(obj):
                fields[f.name] = _encode(getattr(obj, f.name))
            return fields
    raise _Unencodable(type(obj).__name__)


def canonical_bytes(obj: object) -> Ok[bytes] | Err[str]:
    """Encode a notification (or any plain value) as canonical JSON bytes. Never raises."""
    try:
        encoded: Any = _encode(obj)
    except _Unencodable as e:
        return Err(f"Cannot encode {e}")
    return Ok(json.dumps(encoded, sort_keys=True, separators=(",", ":")).encode("utf-8"))
