"""
Parse serialized columns at the store boundary.

Stored schedule and ping metadata are JSON text. Parsers return Parsed instead of raising so
callers can apply the fail-open policy explicitly: a bad schedule means "always on", bad
metadata means "no mode".
"""
import json
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from boothwatch.core.errors import MalformedScheduleData

T = TypeVar("T")


@dataclass(frozen=True)
class Parsed(Generic[T]):
    value: T | None = None
    error: MalformedScheduleData | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None) -> "Parsed[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, reason: str) -> "Parsed[T]":
        return cls(error=MalformedScheduleData(reason))


def parse_metadata(raw: str | None) -> Parsed[dict[str, Any]]:
    """Parse a health log's metadata column. Empty column -> success with None."""
    if not raw:
        return Parsed.success(None)
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        return Parsed.failure(f"metadata is not JSON: {e}")
    if not isinstance(data, dict):
        return Parsed.failure("metadata is not an object")
    return Parsed.success(data)


def serialize_metadata(metadata: dict[str, Any] | None) -> str | None:
    if metadata is None:
        return None
    return json.dumps(metadata, default=str)


def metadata_mode(raw: str | None) -> str | None:
    """Mode from a metadata column; None when absent or unparseable."""
    parsed = parse_metadata(raw)
    if not parsed.ok or not parsed.value:
        return None
    mode = parsed.value.get("mode")
    return mode if isinstance(mode, str) and mode else None
