"""RGB color value as sent by Discord (a packed 24-bit integer)."""

from __future__ import annotations

from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

_MAX_VALUE = 0xFFFFFF


class Color:
    __slots__ = ("_value",)

    def __init__(self, value: int) -> None:
        if not 0 <= value <= _MAX_VALUE:
            raise ValueError(f"Color value out of range: {value:#x}")
        self._value = value

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> Color:
        for channel in (r, g, b):
            if not 0 <= channel <= 255:
                raise ValueError(f"Color channel out of range: {channel}")
        return cls((r << 16) | (g << 8) | b)

    @property
    def value(self) -> int:
        return self._value

    @property
    def r(self) -> int:
        return (self._value >> 16) & 0xFF

    @property
    def g(self) -> int:
        return (self._value >> 8) & 0xFF

    @property
    def b(self) -> int:
        return self._value & 0xFF

    def to_hex(self) -> str:
        return f"#{self._value:06x}"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Color):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"Color({self.to_hex()})"

    def __str__(self) -> str:
        return self.to_hex()

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._pydantic_validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda v: v._value, info_arg=False
            ),
        )

    @classmethod
    def _pydantic_validate(cls, value: Any) -> Color:
        if isinstance(value, Color):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        raise ValueError(f"Cannot convert {type(value).__name__} to Color")
