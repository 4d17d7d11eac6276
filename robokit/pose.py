"""Poses and poses expressed in a reference frame."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

_PACKAGE = "viam.common.v1"


def _message_class(pool: descriptor_pool.DescriptorPool, full_name: str) -> type:
    descriptor = pool.FindMessageTypeByName(full_name)
    get_class = getattr(message_factory, "GetMessageClass", None)
    if get_class is not None:
        return get_class(descriptor)
    return message_factory.MessageFactory(pool).GetPrototype(descriptor)


def _build_messages() -> tuple[type, type]:
    field_type = descriptor_pb2.FieldDescriptorProto
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="robokit/common/pose.proto",
        package=_PACKAGE,
        syntax="proto3",
    )
    pose = file_proto.message_type.add(name="Pose")
    for number, name in enumerate(("x", "y", "z", "o_x", "o_y", "o_z", "theta"), start=1):
        pose.field.add(
            name=name,
            number=number,
            type=field_type.TYPE_DOUBLE,
            label=field_type.LABEL_OPTIONAL,
        )
    in_frame = file_proto.message_type.add(name="PoseInFrame")
    in_frame.field.add(
        name="reference_frame",
        number=1,
        type=field_type.TYPE_STRING,
        label=field_type.LABEL_OPTIONAL,
    )
    in_frame.field.add(
        name="pose",
        number=2,
        type=field_type.TYPE_MESSAGE,
        type_name=f".{_PACKAGE}.Pose",
        label=field_type.LABEL_OPTIONAL,
    )
    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(file_proto.SerializeToString())
    return (
        _message_class(pool, f"{_PACKAGE}.Pose"),
        _message_class(pool, f"{_PACKAGE}.PoseInFrame"),
    )


_POSE_MESSAGE, _POSE_IN_FRAME_MESSAGE = _build_messages()


def _fmt(value: float) -> str:
    return f"{value:g}"


@dataclass
class Coordinates:
    """A position in space."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class PoseOrientation:
    """The orientation vector of a pose."""

    o_x: float = 0.0
    o_y: float = 0.0
    o_z: float = 0.0


@dataclass
class Pose:
    """A position together with an orientation vector and an angle about it."""

    coordinates: Coordinates = field(default_factory=Coordinates)
    orientation: PoseOrientation = field(default_factory=PoseOrientation)
    theta: float = 0.0

    def to_proto(self) -> Any:
        """Return the pose as a ``viam.common.v1.Pose`` message."""
        return _POSE_MESSAGE(
            x=self.coordinates.x,
            y=self.coordinates.y,
            z=self.coordinates.z,
            o_x=self.orientation.o_x,
            o_y=self.orientation.o_y,
            o_z=self.orientation.o_z,
            theta=self.theta,
        )

    @classmethod
    def from_proto(cls, proto: Any) -> Pose:
        """Build a pose from a ``viam.common.v1.Pose`` message."""
        return cls(
            Coordinates(proto.x, proto.y, proto.z),
            PoseOrientation(proto.o_x, proto.o_y, proto.o_z),
            proto.theta,
        )

    def __str__(self) -> str:
        c, o = self.coordinates, self.orientation
        return (
            f"{{ coordinates: {{ x: {_fmt(c.x)}, y: {_fmt(c.y)}, z: {_fmt(c.z)} }}, "
            f"orientation: {{ o_x: {_fmt(o.o_x)}, o_y: {_fmt(o.o_y)}, o_z: {_fmt(o.o_z)} }}, "
            f"theta: {_fmt(self.theta)} }}"
        )


@dataclass
class PoseInFrame:
    """A pose expressed relative to a named reference frame."""

    reference_frame: str = ""
    pose: Pose = field(default_factory=Pose)

    def to_proto(self) -> Any:
        """Return a ``viam.common.v1.PoseInFrame`` message."""
        message = _POSE_IN_FRAME_MESSAGE(reference_frame=self.reference_frame)
        message.pose.CopyFrom(self.pose.to_proto())
        return message

    @classmethod
    def from_proto(cls, proto: Any) -> PoseInFrame:
        """Build from a ``viam.common.v1.PoseInFrame`` message."""
        return cls(proto.reference_frame, Pose.from_proto(proto.pose))

    def __str__(self) -> str:
        return f"{{ pose: {self.pose},\n  reference_frame: {self.reference_frame}}}"