"""Request handling for the base component over its RPC message types."""

from __future__ import annotations

import enum
from collections.abc import Callable, MutableMapping
from typing import Any, Optional

from google.protobuf import any_pb2, descriptor_pb2, descriptor_pool, message_factory, struct_pb2
from google.protobuf.message import Message

from robokit.base import Base
from robokit.linear_algebra import Vector3
from robokit.proto_type import AttributeMap, map_to_struct, struct_to_map

_FIELD = descriptor_pb2.FieldDescriptorProto
_STRING = _FIELD.TYPE_STRING
_INT64 = _FIELD.TYPE_INT64
_DOUBLE = _FIELD.TYPE_DOUBLE
_BOOL = _FIELD.TYPE_BOOL
_STRUCT = ".google.protobuf.Struct"
_ANY = ".google.protobuf.Any"
_VECTOR = ".viam.common.v1.Vector3"

_COMMON_PACKAGE = "viam.common.v1"
_BASE_PACKAGE = "viam.component.base.v1"

_COMMON_MESSAGES = {
    "GetGeometriesRequest": [("name", 1, _STRING), ("extra", 99, _STRUCT)],
    "GetGeometriesResponse": [("geometries", 1, _ANY, True)],
    "DoCommandRequest": [("name", 1, _STRING), ("command", 2, _STRUCT)],
    "DoCommandResponse": [("result", 1, _STRUCT)],
}

_BASE_MESSAGES = {
    "MoveStraightRequest": [
        ("name", 1, _STRING),
        ("distance_mm", 2, _INT64),
        ("mm_per_sec", 3, _DOUBLE),
        ("extra", 99, _STRUCT),
    ],
    "MoveStraightResponse": [],
    "SpinRequest": [
        ("name", 1, _STRING),
        ("angle_deg", 2, _DOUBLE),
        ("degs_per_sec", 3, _DOUBLE),
        ("extra", 99, _STRUCT),
    ],
    "SpinResponse": [],
    "SetPowerRequest": [
        ("name", 1, _STRING),
        ("linear", 2, _VECTOR),
        ("angular", 3, _VECTOR),
        ("extra", 99, _STRUCT),
    ],
    "SetPowerResponse": [],
    "SetVelocityRequest": [
        ("name", 1, _STRING),
        ("linear", 2, _VECTOR),
        ("angular", 3, _VECTOR),
        ("extra", 99, _STRUCT),
    ],
    "SetVelocityResponse": [],
    "StopRequest": [("name", 1, _STRING), ("extra", 99, _STRUCT)],
    "StopResponse": [],
    "IsMovingRequest": [("name", 1, _STRING)],
    "IsMovingResponse": [("is_moving", 1, _BOOL)],
    "GetPropertiesRequest": [("name", 1, _STRING), ("extra", 99, _STRUCT)],
    "GetPropertiesResponse": [
        ("width_meters", 1, _DOUBLE),
        ("turning_radius_meters", 2, _DOUBLE),
        ("wheel_circumference_meters", 3, _DOUBLE),
    ],
}


def _message_class(pool: descriptor_pool.DescriptorPool, full_name: str) -> type:
    descriptor = pool.FindMessageTypeByName(full_name)
    get_class = getattr(message_factory, "GetMessageClass", None)
    if get_class is not None:
        return get_class(descriptor)
    return message_factory.MessageFactory(pool).GetPrototype(descriptor)


def _file(name: str, package: str, messages: dict, dependencies: list) -> bytes:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name=name, package=package, syntax="proto3", dependency=dependencies
    )
    for message_name, fields in messages.items():
        message = file_proto.message_type.add(name=message_name)
        for spec in fields:
            field_name, number, field_type = spec[:3]
            repeated = len(spec) > 3 and spec[3]
            label = _FIELD.LABEL_REPEATED if repeated else _FIELD.LABEL_OPTIONAL
            if isinstance(field_type, str):
                message.field.add(
                    name=field_name,
                    number=number,
                    type=_FIELD.TYPE_MESSAGE,
                    type_name=field_type,
                    label=label,
                )
            else:
                message.field.add(name=field_name, number=number, type=field_type, label=label)
    return file_proto.SerializeToString()


def _build_messages() -> dict[str, type]:
    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(struct_pb2.DESCRIPTOR.serialized_pb)
    pool.AddSerializedFile(any_pb2.DESCRIPTOR.serialized_pb)
    vector_file = Vector3().to_proto().DESCRIPTOR.file
    pool.AddSerializedFile(vector_file.serialized_pb)
    dependencies = [
        "google/protobuf/struct.proto",
        "google/protobuf/any.proto",
        vector_file.name,
    ]
    pool.AddSerializedFile(
        _file("robokit/common/rpc.proto", _COMMON_PACKAGE, _COMMON_MESSAGES, dependencies)
    )
    pool.AddSerializedFile(
        _file("robokit/component/base.proto", _BASE_PACKAGE, _BASE_MESSAGES, dependencies)
    )
    classes = {name: _message_class(pool, f"{_COMMON_PACKAGE}.{name}") for name in _COMMON_MESSAGES}
    classes.update(
        {name: _message_class(pool, f"{_BASE_PACKAGE}.{name}") for name in _BASE_MESSAGES}
    )
    return classes


_MESSAGES = _build_messages()

GetGeometriesRequest = _MESSAGES["GetGeometriesRequest"]
GetGeometriesResponse = _MESSAGES["GetGeometriesResponse"]
DoCommandRequest = _MESSAGES["DoCommandRequest"]
DoCommandResponse = _MESSAGES["DoCommandResponse"]
MoveStraightRequest = _MESSAGES["MoveStraightRequest"]
MoveStraightResponse = _MESSAGES["MoveStraightResponse"]
SpinRequest = _MESSAGES["SpinRequest"]
SpinResponse = _MESSAGES["SpinResponse"]
SetPowerRequest = _MESSAGES["SetPowerRequest"]
SetPowerResponse = _MESSAGES["SetPowerResponse"]
SetVelocityRequest = _MESSAGES["SetVelocityRequest"]
SetVelocityResponse = _MESSAGES["SetVelocityResponse"]
StopRequest = _MESSAGES["StopRequest"]
StopResponse = _MESSAGES["StopResponse"]
IsMovingRequest = _MESSAGES["IsMovingRequest"]
IsMovingResponse = _MESSAGES["IsMovingResponse"]
GetPropertiesRequest = _MESSAGES["GetPropertiesRequest"]
GetPropertiesResponse = _MESSAGES["GetPropertiesResponse"]


class StatusCode(enum.IntEnum):
    """RPC status codes."""

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16


class RpcError(Exception):
    """A failed RPC, carrying its status code and message."""

    def __init__(self, code: StatusCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


def fill_struct(target: Any, attributes: Optional[AttributeMap]) -> None:
    """Set a message's ``Struct`` field from an attribute map, marking it present."""
    target.SetInParent()
    target.MergeFromString(map_to_struct(attributes).SerializeToString())


def fill_vector(target: Any, vector: Vector3) -> None:
    """Set a message's ``Vector3`` field from a vector, marking it present."""
    target.SetInParent()
    target.MergeFromString(vector.to_proto().SerializeToString())


def _pack(geometry: Any) -> Any:
    message = geometry if isinstance(geometry, Message) else geometry.to_proto()
    packed = GetGeometriesResponse().geometries.add()
    packed.type_url = f"type.googleapis.com/{message.DESCRIPTOR.full_name}"
    packed.value = message.SerializeToString()
    return packed


def _extra(request: Any) -> Optional[AttributeMap]:
    return struct_to_map(request.extra) if request.HasField("extra") else None


class BaseServer:
    """Serves base requests against the bases held in its resource map."""

    def __init__(self, resources: Optional[MutableMapping[str, Any]] = None) -> None:
        self.resources: MutableMapping[str, Any] = {} if resources is None else resources

    def _base(self, request: Any, label: str) -> Base:
        if request is None:
            raise RpcError(StatusCode.INVALID_ARGUMENT, f"Called [{label}] without a request")
        resource = self.resources.get(request.name)
        if resource is None:
            raise RpcError(StatusCode.UNKNOWN, f"resource not found: {request.name}")
        if not isinstance(resource, Base):
            raise RpcError(StatusCode.UNKNOWN, f"resource is not a base: {request.name}")
        return resource

    def handle(self, method: str, request: Any) -> Any:
        """Dispatch ``request`` to the handler of the RPC named ``method``."""
        handlers: dict[str, Callable[[Any], Any]] = {
            "MoveStraight": self.move_straight,
            "Spin": self.spin,
            "SetPower": self.set_power,
            "SetVelocity": self.set_velocity,
            "Stop": self.stop,
            "IsMoving": self.is_moving,
            "GetGeometries": self.get_geometries,
            "GetProperties": self.get_properties,
            "DoCommand": self.do_command,
        }
        handler = handlers.get(method)
        if handler is None:
            raise RpcError(StatusCode.UNIMPLEMENTED, f"unknown method: {method}")
        return handler(request)

    def move_straight(self, request: Any) -> Any:
        base = self._base(request, "Base::MoveStraight")
        base.move_straight(request.distance_mm, request.mm_per_sec, _extra(request))
        return MoveStraightResponse()

    def spin(self, request: Any) -> Any:
        base = self._base(request, "Base::Spin")
        base.spin(request.angle_deg, request.degs_per_sec, _extra(request))
        return SpinResponse()

    def set_power(self, request: Any) -> Any:
        base = self._base(request, "Base::SetPower")
        base.set_power(
            Vector3.from_proto(request.linear),
            Vector3.from_proto(request.angular),
            _extra(request),
        )
        return SetPowerResponse()

    def set_velocity(self, request: Any) -> Any:
        base = self._base(request, "Base::SetVelocity")
        base.set_velocity(
            Vector3.from_proto(request.linear),
            Vector3.from_proto(request.angular),
            _extra(request),
        )
        return SetVelocityResponse()

    def stop(self, request: Any) -> Any:
        base = self._base(request, "Base::Stop")
        base.stop(_extra(request))
        return StopResponse()

    def is_moving(self, request: Any) -> Any:
        base = self._base(request, "Base::IsMoving")
        return IsMovingResponse(is_moving=bool(base.is_moving()))

    def get_geometries(self, request: Any) -> Any:
        base = self._base(request, "GetGeometries")
        response = GetGeometriesResponse()
        for geometry in base.get_geometries(_extra(request)):
            response.geometries.add().CopyFrom(_pack(geometry))
        return response

    def get_properties(self, request: Any) -> Any:
        base = self._base(request, "Encoder::GetProperties")
        result = base.get_properties(_extra(request))
        return GetPropertiesResponse(
            width_meters=result.width_meters,
            turning_radius_meters=result.turning_radius_meters,
            wheel_circumference_meters=result.wheel_circumference_meters,
        )

    def do_command(self, request: Any) -> Any:
        base = self._base(request, "Base::DoCommand")
        result = base.do_command(struct_to_map(request.command))
        response = DoCommandResponse()
        fill_struct(response.result, result)
        return response