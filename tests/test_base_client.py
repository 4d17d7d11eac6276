import pytest

from robokit.base import Base, BaseProperties
from robokit.base_client import BaseClient
from robokit.base_server import BaseServer
from robokit.linear_algebra import Vector3
from robokit.proto_type import ProtoType


class MockBase(Base):
    def __init__(self, name):
        super().__init__(name)
        self.calls = []
        self.moving = False
        self.properties = BaseProperties(0.3, 0.7, 0.9)
        self.geometries = [Vector3(4.0, 5.0, 6.0), Vector3(7.0, 8.0, 9.0)]

    def move_straight(self, distance_mm, mm_per_sec, extra=None):
        self.calls.append(("move_straight", distance_mm, mm_per_sec, extra))
        self.moving = True

    def spin(self, angle_deg, degs_per_sec, extra=None):
        self.calls.append(("spin", angle_deg, degs_per_sec, extra))

    def set_power(self, linear, angular, extra=None):
        self.calls.append(("set_power", linear, angular, extra))

    def set_velocity(self, linear, angular, extra=None):
        self.calls.append(("set_velocity", linear, angular, extra))

    def stop(self, extra=None):
        self.calls.append(("stop", extra))
        self.moving = False

    def is_moving(self):
        return self.moving

    def get_properties(self, extra=None):
        return self.properties

    def do_command(self, command):
        return command

    def get_geometries(self, extra=None):
        return self.geometries


def fake_map():
    return {"test": ProtoType("hello")}


@pytest.fixture
def mock():
    return MockBase("mock_base")


@pytest.fixture
def client(mock):
    return BaseClient("mock_base", BaseServer({"mock_base": mock}))


def test_move_straight(client, mock):
    client.move_straight(100, 30.0, fake_map())
    assert mock.calls == [("move_straight", 100, 30.0, fake_map())]
    assert client.is_moving() is True


def test_extra_defaults_to_empty_map(client, mock):
    client.spin(45.0, 15.0)
    assert mock.calls == [("spin", 45.0, 15.0, {})]
    assert client.is_moving() is False


def test_set_power_and_velocity(client, mock):
    linear, angular = Vector3(0.1, 0.2, 0.3), Vector3(-0.1, -0.2, -0.3)
    client.set_power(linear, angular)
    client.set_velocity(angular, linear)
    assert mock.calls == [
        ("set_power", linear, angular, {}),
        ("set_velocity", angular, linear, {}),
    ]


def test_stop(client, mock):
    client.move_straight(10, 1.0)
    client.stop()
    assert mock.calls[-1] == ("stop", {})
    assert client.is_moving() is False


def test_get_properties(client, mock):
    assert client.get_properties() == mock.properties


def test_get_geometries_round_trip(client, mock):
    packed = client.get_geometries()
    message_type = type(Vector3().to_proto())
    decoded = [Vector3.from_proto(message_type.FromString(item.value)) for item in packed]
    assert decoded == mock.geometries


def test_do_command(client):
    expected = fake_map()
    result = client.do_command(fake_map())
    assert result["test"] == expected["test"]


def test_missing_resource_raises():
    client = BaseClient("absent", BaseServer({}))
    with pytest.raises(RuntimeError, match="resource not found: absent"):
        client.move_straight(1, 1.0)


def test_properties_of_missing_resource_are_empty():
    client = BaseClient("absent", BaseServer({}))
    assert client.get_properties() == BaseProperties()
    assert client.get_geometries() == []