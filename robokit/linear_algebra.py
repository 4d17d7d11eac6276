"""Three-dimensional vectors and their protobuf form."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

_PACKAGE = "viam.common.v1"


def _message_class(pool: descriptor_pool.DescriptorPool, full_name: str) -> type:
    descriptor = pool.FindMessageTypeByName(full_name)
    get_class = getattr(message_factory, "GetMessageClass", None)
    if get_class is not None:
        return get_class(descriptor)
    return message_factory.MessageFactory(pool).GetPrototype(descriptor)


def _build_vector3_message() -> type:
    field_type = descriptor_pb2.FieldDescriptorProto
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="robokit/common/vector3.proto",
        package=_PACKAGE,
        syntax="proto3",
    )
    message = file_proto.message_type.add(name="Vector3")
    for number, name in enumerate("xyz", start=1):
        message.field.add(
            name=name,
            number=number,
            type=field_type.TYPE_DOUBLE,
            label=field_type.LABEL_OPTIONAL,
        )
    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(file_proto.SerializeToString())
    return _message_class(pool, f"{_PACKAGE}.Vector3")


_VECTOR3_MESSAGE = _build_vector3_message()


@dataclass
class Vector3:
    """A mutable vector of three doubles."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def to_proto(self) -> Any:
        """Return the vector as a ``viam.common.v1.Vector3`` message."""
        return _VECTOR3_MESSAGE(x=self.x, y=self.y, z=self.z)

    @classmethod
    def from_proto(cls, proto: Any) -> Vector3:
        """Build a vector from a ``viam.common.v1.Vector3`` message."""
        return cls(proto.x, proto.y, proto.z)