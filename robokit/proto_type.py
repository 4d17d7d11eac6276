"""Dynamically typed attribute values and their protobuf ``Value`` form."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any, Dict, Optional

from google.protobuf import struct_pb2

AttributeMap = Dict[str, "ProtoType"]


class ProtoKind(enum.Enum):
    """The kinds of value a ``ProtoType`` can hold."""

    NULL = 0
    BOOL = 1
    STRING = 2
    INT = 3
    DOUBLE = 4
    MAP = 5
    LIST = 6


def _wrap(item: Any) -> ProtoType:
    return item if isinstance(item, ProtoType) else ProtoType(item)


class ProtoType:
    """A null, bool, string, int, double, map or list value."""

    __slots__ = ("_kind", "_value")
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, value: Any = None) -> None:
        if value is None:
            self._kind, self._value = ProtoKind.NULL, None
        elif isinstance(value, bool):
            self._kind, self._value = ProtoKind.BOOL, value
        elif isinstance(value, str):
            self._kind, self._value = ProtoKind.STRING, value
        elif isinstance(value, int):
            self._kind, self._value = ProtoKind.INT, value
        elif isinstance(value, float):
            self._kind, self._value = ProtoKind.DOUBLE, value
        elif isinstance(value, Mapping):
            self._kind = ProtoKind.MAP
            self._value = {str(key): _wrap(item) for key, item in value.items()}
        elif isinstance(value, (list, tuple)):
            self._kind = ProtoKind.LIST
            self._value = [_wrap(item) for item in value]
        else:
            raise TypeError(f"unsupported value type: {type(value).__name__}")

    @property
    def kind(self) -> ProtoKind:
        return self._kind

    @property
    def value(self) -> Any:
        return self._value

    @classmethod
    def from_value(cls, value: struct_pb2.Value) -> ProtoType:
        """Build from a ``google.protobuf.Value``; numbers become doubles."""
        which = value.WhichOneof("kind")
        if which == "bool_value":
            return cls(value.bool_value)
        if which == "string_value":
            return cls(value.string_value)
        if which == "number_value":
            return cls(float(value.number_value))
        if which == "list_value":
            return cls([cls.from_value(item) for item in value.list_value.values])
        if which == "struct_value":
            return cls(struct_to_map(value.struct_value))
        return cls()

    def proto_value(self) -> struct_pb2.Value:
        """Return the value as a ``google.protobuf.Value``."""
        result = struct_pb2.Value()
        if self._kind is ProtoKind.NULL:
            result.null_value = struct_pb2.NULL_VALUE
        elif self._kind is ProtoKind.BOOL:
            result.bool_value = self._value
        elif self._kind is ProtoKind.STRING:
            result.string_value = self._value
        elif self._kind in (ProtoKind.INT, ProtoKind.DOUBLE):
            result.number_value = float(self._value)
        elif self._kind is ProtoKind.MAP:
            result.struct_value.SetInParent()
            result.struct_value.CopyFrom(map_to_struct(self._value))
        else:
            result.list_value.SetInParent()
            for item in self._value:
                result.list_value.values.add().CopyFrom(item.proto_value())
        return result

    def get(self, kind: ProtoKind) -> Any:
        """Return the held value if it is of ``kind``, otherwise ``None``."""
        return self._value if self._kind is kind else None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProtoType):
            return NotImplemented
        return self._kind is other._kind and self._value == other._value

    def __repr__(self) -> str:
        return f"ProtoType({self._kind.name}, {self._value!r})"


def map_to_struct(attributes: Optional[Mapping[str, ProtoType]]) -> struct_pb2.Struct:
    """Convert an attribute map to a ``google.protobuf.Struct``; ``None`` gives an empty one."""
    result = struct_pb2.Struct()
    if not attributes:
        return result
    for key, item in attributes.items():
        result.fields[key].CopyFrom(_wrap(item).proto_value())
    return result


def struct_to_map(struct: struct_pb2.Struct) -> AttributeMap:
    """Convert a ``google.protobuf.Struct`` to an attribute map."""
    return {key: ProtoType.from_value(item) for key, item in struct.fields.items()}