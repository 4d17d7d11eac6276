"""The base component: the platform the other parts of a mobile robot attach to."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, NamedTuple, Optional

from robokit.linear_algebra import Vector3
from robokit.proto_type import AttributeMap
from robokit.utils import COMPONENT, RDK


class _Api(NamedTuple):
    namespace: str
    resource_type: str
    resource_subtype: str


def _fmt(value: float) -> str:
    return f"{value:g}"


@dataclass
class BaseProperties:
    """Physical properties of a base."""

    width_meters: float = 0.0
    turning_radius_meters: float = 0.0
    wheel_circumference_meters: float = 0.0

    @classmethod
    def from_proto(cls, proto: Any) -> BaseProperties:
        """Build from a base ``GetPropertiesResponse`` message."""
        return cls(
            proto.width_meters,
            proto.turning_radius_meters,
            proto.wheel_circumference_meters,
        )

    def __str__(self) -> str:
        return (
            f"{{ turning_radius_meters: {_fmt(self.turning_radius_meters)}, "
            f"wheel_circumference_meters: {_fmt(self.wheel_circumference_meters)}, "
            f"width_meters: {_fmt(self.width_meters)} }}"
        )


class Base(ABC):
    """Abstract base component; drivers for specific bases subclass it."""

    def __init__(self, name: str) -> None:
        self.name = name

    @classmethod
    def static_api(cls) -> _Api:
        """The API triple served by every base."""
        return _Api(RDK, COMPONENT, "base")

    def dynamic_api(self) -> _Api:
        """The API of this instance, which is that of every base."""
        return self.static_api()

    @abstractmethod
    def move_straight(
        self, distance_mm: int, mm_per_sec: float, extra: Optional[AttributeMap] = None
    ) -> None:
        """Move in a straight line by ``distance_mm`` at ``mm_per_sec``, blocking until done."""

    @abstractmethod
    def spin(
        self, angle_deg: float, degs_per_sec: float, extra: Optional[AttributeMap] = None
    ) -> None:
        """Spin by ``angle_deg`` at ``degs_per_sec``, blocking until done."""

    @abstractmethod
    def set_power(
        self, linear: Vector3, angular: Vector3, extra: Optional[AttributeMap] = None
    ) -> None:
        """Set linear and angular power, each component between -1 and 1."""

    @abstractmethod
    def set_velocity(
        self, linear: Vector3, angular: Vector3, extra: Optional[AttributeMap] = None
    ) -> None:
        """Set linear velocity in mm/s and angular velocity in degrees/s."""

    @abstractmethod
    def stop(self, extra: Optional[AttributeMap] = None) -> None:
        """Stop the base."""

    @abstractmethod
    def is_moving(self) -> bool:
        """Report whether the base is in motion."""

    @abstractmethod
    def get_properties(self, extra: Optional[AttributeMap] = None) -> BaseProperties:
        """Return the width, turning radius and wheel circumference of the base."""

    @abstractmethod
    def do_command(self, command: AttributeMap) -> AttributeMap:
        """Execute an arbitrary command and return its result."""

    @abstractmethod
    def get_geometries(self, extra: Optional[AttributeMap] = None) -> list:
        """Return the geometries associated with the base."""