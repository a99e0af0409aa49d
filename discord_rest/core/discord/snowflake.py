"""Discord Snowflake type - a 64-bit identifier that encodes its creation time."""

from __future__ import annotations

from datetime import datetime, timezone
from functools import total_ordering
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

# Discord epoch: 2015-01-01T00:00:00Z in milliseconds
_DISCORD_EPOCH_MS = 1420070400000


@total_ordering
class Snowflake:
    """Immutable, hashable Discord snowflake ID.

    Layout (most significant bit first): 42 bits of milliseconds since the
    Discord epoch, 5 bits worker id, 5 bits process id, 12 bits increment.
    """

    __slots__ = ("_value",)

    def __init__(self, value: int) -> None:
        if value < 0 or value >= 1 << 64:
            raise ValueError(f"Snowflake out of range: {value}")
        self._value = value

    @property
    def value(self) -> int:
        return self._value

    @property
    def worker_id(self) -> int:
        return (self._value >> 17) & 0x1F

    @property
    def process_id(self) -> int:
        return (self._value >> 12) & 0x1F

    @property
    def increment(self) -> int:
        return self._value & 0xFFF

    def to_date(self) -> datetime:
        """Extract the creation timestamp from this snowflake."""
        ms = (self._value >> 22) + _DISCORD_EPOCH_MS
        return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)

    @classmethod
    def try_parse(cls, value: str | None) -> Snowflake | None:
        if not value or not value.strip():
            return None
        try:
            return cls(int(value))
        except ValueError:
            return None

    @classmethod
    def parse(cls, value: str) -> Snowflake:
        """Parse a decimal string as a snowflake, raising on failure."""
        result = cls.try_parse(value)
        if result is None:
            raise ValueError(f"Invalid snowflake: {value!r}")
        return result

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Snowflake):
            return self._value == other._value
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, Snowflake):
            return self._value < other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"Snowflake({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __int__(self) -> int:
        return self._value

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._pydantic_validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda v: str(v._value), info_arg=False
            ),
        )

    @classmethod
    def _pydantic_validate(cls, value: Any) -> Snowflake:
        if isinstance(value, Snowflake):
            return value
        # bool is an int subclass; reject it explicitly
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        if isinstance(value, str):
            return cls.parse(value)
        raise ValueError(f"Cannot convert {type(value).__name__} to Snowflake")
