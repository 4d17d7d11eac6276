"""Time, duration and byte conversions shared by the resource modules."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from google.protobuf import (
    descriptor_pb2,
    descriptor_pool,
    duration_pb2,
    message_factory,
    timestamp_pb2,
)

COMPONENT = "component"
RESOURCE = "resource"
SERVICE = "service"
RDK = "rdk"
BUILTIN = "builtin"

_PACKAGE = "viam.common.v1"
_NANOS_PER_SECOND = 1_000_000_000
_MICROS_PER_SECOND = 1_000_000
_NANOS_PER_MICRO = 1_000


def _message_class(pool: descriptor_pool.DescriptorPool, full_name: str) -> type:
    descriptor = pool.FindMessageTypeByName(full_name)
    get_class = getattr(message_factory, "GetMessageClass", None)
    if get_class is not None:
        return get_class(descriptor)
    return message_factory.MessageFactory(pool).GetPrototype(descriptor)


def _build_response_metadata_message() -> type:
    field_type = descriptor_pb2.FieldDescriptorProto
    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(timestamp_pb2.DESCRIPTOR.serialized_pb)
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="robokit/common/response_metadata.proto",
        package=_PACKAGE,
        syntax="proto3",
        dependency=["google/protobuf/timestamp.proto"],
    )
    message = file_proto.message_type.add(name="ResponseMetadata")
    message.field.add(
        name="captured_at",
        number=1,
        type=field_type.TYPE_MESSAGE,
        type_name=".google.protobuf.Timestamp",
        label=field_type.LABEL_OPTIONAL,
    )
    pool.AddSerializedFile(file_proto.SerializeToString())
    return _message_class(pool, f"{_PACKAGE}.ResponseMetadata")


_RESPONSE_METADATA_MESSAGE = _build_response_metadata_message()


def _split_toward_zero(value: int, unit: int) -> tuple[int, int]:
    """Split ``value`` into a quotient truncated toward zero and its remainder."""
    quotient = abs(value) // unit
    if value < 0:
        quotient = -quotient
    return quotient, value - quotient * unit


def timestamp_to_time_ns(timestamp: Any) -> int:
    """Return a ``google.protobuf.Timestamp`` as nanoseconds since the epoch."""
    return timestamp.seconds * _NANOS_PER_SECOND + timestamp.nanos


def time_ns_to_timestamp(time_ns: int) -> timestamp_pb2.Timestamp:
    """Return nanoseconds since the epoch as a ``google.protobuf.Timestamp``.

    Seconds are truncated toward zero, so a negative time gives negative nanos.
    """
    seconds, nanos = _split_toward_zero(time_ns, _NANOS_PER_SECOND)
    return timestamp_pb2.Timestamp(seconds=seconds, nanos=nanos)


@dataclass
class ResponseMetadata:
    """Metadata attached to a response: when its data was captured."""

    captured_at: int = 0

    @classmethod
    def from_proto(cls, proto: Any) -> ResponseMetadata:
        """Build from a ``viam.common.v1.ResponseMetadata`` message."""
        return cls(timestamp_to_time_ns(proto.captured_at))

    def to_proto(self) -> Any:
        """Return a ``viam.common.v1.ResponseMetadata`` message."""
        message = _RESPONSE_METADATA_MESSAGE()
        stamp = time_ns_to_timestamp(self.captured_at)
        message.captured_at.seconds = stamp.seconds
        message.captured_at.nanos = stamp.nanos
        return message


def string_to_bytes(s: str) -> bytes:
    """Encode a string as bytes; ``bytes_to_string`` reverses it exactly."""
    return s.encode("utf-8", "surrogateescape")


def bytes_to_string(b: bytes) -> str:
    """Decode bytes into a string without losing any byte."""
    return bytes(b).decode("utf-8", "surrogateescape")


def duration_from_proto(proto: Any) -> int:
    """Return a ``google.protobuf.Duration`` in microseconds.

    Sub-microsecond nanoseconds are rounded away from zero.
    """
    nanos = proto.nanos
    micros = -(-abs(nanos) // _NANOS_PER_MICRO)
    if nanos < 0:
        micros = -micros
    return proto.seconds * _MICROS_PER_SECOND + micros


def duration_to_proto(microseconds: int) -> duration_pb2.Duration:
    """Return a number of microseconds as a ``google.protobuf.Duration``."""
    seconds, micros = _split_toward_zero(microseconds, _MICROS_PER_SECOND)
    return duration_pb2.Duration(seconds=seconds, nanos=micros * _NANOS_PER_MICRO)


def set_logger_severity_from_args(argv: Sequence[str]) -> int:
    """Set the root log level from a module's command line.

    The level is DEBUG when the third argument is ``--log-level=debug`` and
    INFO otherwise. The level that was set is returned.
    """
    args = list(argv)
    level = logging.DEBUG if len(args) >= 3 and args[2] == "--log-level=debug" else logging.INFO
    logging.getLogger().setLevel(level)
    return level