"""A base component that forwards every call over an RPC channel."""

from __future__ import annotations

from typing import Any, Optional, Protocol

from robokit.base import Base, BaseProperties
from robokit.base_server import (
    DoCommandRequest,
    GetGeometriesRequest,
    GetGeometriesResponse,
    GetPropertiesRequest,
    GetPropertiesResponse,
    IsMovingRequest,
    MoveStraightRequest,
    RpcError,
    SetPowerRequest,
    SetVelocityRequest,
    SpinRequest,
    StopRequest,
    fill_struct,
    fill_vector,
)
from robokit.linear_algebra import Vector3
from robokit.proto_type import AttributeMap, struct_to_map


class Channel(Protocol):
    """Anything that answers a request for a named RPC method."""

    def handle(self, method: str, request: Any) -> Any: ...


class BaseClient(Base):
    """Client side of the base component."""

    def __init__(self, name: str, channel: Channel) -> None:
        super().__init__(name)
        self._channel = channel

    def _call(self, method: str, request: Any) -> Any:
        try:
            return self._channel.handle(method, request)
        except RpcError as error:
            raise RuntimeError(error.message) from error

    def _call_lenient(self, method: str, request: Any, response_type: type) -> Any:
        # These calls ignore the RPC status and fall back to an empty reply.
        try:
            return self._channel.handle(method, request)
        except RpcError:
            return response_type()

    def move_straight(
        self, distance_mm: int, mm_per_sec: float, extra: Optional[AttributeMap] = None
    ) -> None:
        request = MoveStraightRequest(
            name=self.name, distance_mm=int(distance_mm), mm_per_sec=mm_per_sec
        )
        fill_struct(request.extra, extra)
        self._call("MoveStraight", request)

    def spin(
        self, angle_deg: float, degs_per_sec: float, extra: Optional[AttributeMap] = None
    ) -> None:
        request = SpinRequest(name=self.name, angle_deg=angle_deg, degs_per_sec=degs_per_sec)
        fill_struct(request.extra, extra)
        self._call("Spin", request)

    def set_power(
        self, linear: Vector3, angular: Vector3, extra: Optional[AttributeMap] = None
    ) -> None:
        request = SetPowerRequest(name=self.name)
        fill_vector(request.linear, linear)
        fill_vector(request.angular, angular)
        fill_struct(request.extra, extra)
        self._call("SetPower", request)

    def set_velocity(
        self, linear: Vector3, angular: Vector3, extra: Optional[AttributeMap] = None
    ) -> None:
        request = SetVelocityRequest(name=self.name)
        fill_vector(request.linear, linear)
        fill_vector(request.angular, angular)
        fill_struct(request.extra, extra)
        self._call("SetVelocity", request)

    def stop(self, extra: Optional[AttributeMap] = None) -> None:
        request = StopRequest(name=self.name)
        fill_struct(request.extra, extra)
        self._call("Stop", request)

    def is_moving(self) -> bool:
        response = self._call("IsMoving", IsMovingRequest(name=self.name))
        return response.is_moving

    def get_properties(self, extra: Optional[AttributeMap] = None) -> BaseProperties:
        request = GetPropertiesRequest(name=self.name)
        fill_struct(request.extra, extra)
        response = self._call_lenient("GetProperties", request, GetPropertiesResponse)
        return BaseProperties.from_proto(response)

    def do_command(self, command: AttributeMap) -> AttributeMap:
        request = DoCommandRequest(name=self.name)
        fill_struct(request.command, command)
        response = self._call("DoCommand", request)
        return struct_to_map(response.result)

    def get_geometries(self, extra: Optional[AttributeMap] = None) -> list:
        """Return the base's geometries as packed ``google.protobuf.Any`` messages."""
        request = GetGeometriesRequest(name=self.name)
        fill_struct(request.extra, extra)
        response = self._call_lenient("GetGeometries", request, GetGeometriesResponse)
        return list(response.geometries)