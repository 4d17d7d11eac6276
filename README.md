# robokit

Building blocks for talking to robots with protobuf messages:

- **`robokit.linear_algebra`** – `Vector3`, a three-component vector (a
  dataclass with `x`, `y`, `z`) that converts to and from a
  `viam.common.v1.Vector3` message (`to_proto` / `from_proto`) and can be
  unpacked by iteration.
- **`robokit.pose`** – `Coordinates`, `PoseOrientation`, `Pose` and
  `PoseInFrame`, with protobuf conversion and readable `str()` output.
- **`robokit.proto_type`** – `ProtoType`, a typed wrapper for the values a
  `google.protobuf.Value` can carry (null, bool, string, int, float, nested
  maps and lists); `ProtoType.get(kind)` returns the held value when it is of
  the given `ProtoKind` and `None` otherwise. `struct_to_map` and
  `map_to_struct` convert between a protobuf `Struct` and a plain dictionary
  of `ProtoType` values – the "attribute map" passed as `extra` and `command`
  throughout the package.
- **`robokit.utils`** – conversions between protobuf `Timestamp`/`Duration`
  and integer nanoseconds/microseconds, `ResponseMetadata`, byte/string
  helpers and `set_logger_severity_from_args` for module command lines.
- **`robokit.base`** – the abstract `Base` component: the platform a mobile
  robot's other parts attach to. Subclass it and implement `move_straight`,
  `spin`, `set_power`, `set_velocity`, `stop`, `is_moving`, `get_properties`,
  `get_geometries` and `do_command`. `BaseProperties` describes width,
  turning radius and wheel circumference.
- **`robokit.base_server`** – the base request and response message types and
  `BaseServer`, which holds a mapping of resource names to `Base` instances
  and answers requests with `handle(method, request)` (methods such as
  `"MoveStraight"`, `"IsMoving"`, `"DoCommand"`). Failures are raised as
  `RpcError` carrying a `StatusCode`: a missing resource gives `UNKNOWN`, an
  unknown method `UNIMPLEMENTED`.
- **`robokit.base_client`** – `BaseClient`, a `Base` that builds a request for
  every call, passes it to any object with a `handle(method, request)` method
  (a `BaseServer`, for instance) and turns the reply back into Python values.
  An `RpcError` becomes a `RuntimeError`, except for `get_properties` and
  `get_geometries`, which fall back to an empty reply.

## Working with attribute maps

```python
from google.protobuf import struct_pb2

from robokit.proto_type import map_to_struct, struct_to_map

struct = struct_pb2.Struct()
struct.update({"speed": 0.5, "label": "left", "enabled": True})

attributes = struct_to_map(struct)       # dict[str, ProtoType]
assert map_to_struct(attributes) == struct
```

Numbers read from a `Struct` become floats. Two `ProtoType` values compare
equal when they hold the same kind of value and the same contents,
recursively for maps and lists.

## A base in process

```python
from robokit.base_client import BaseClient
from robokit.base_server import BaseServer

server = BaseServer({"base1": my_base})   # my_base: a Base subclass instance
client = BaseClient("base1", server)
client.spin(90.0, 45.0)
moving = client.is_moving()
```

## Vectors and poses

```python
from robokit.linear_algebra import Vector3

linear = Vector3(0.0, 1.0, 0.0)
x, y, z = linear
message = linear.to_proto()
assert Vector3.from_proto(message) == linear
```

`Pose.from_proto` / `Pose.to_proto` and `PoseInFrame.from_proto` /
`PoseInFrame.to_proto` do the same for poses.

## Time helpers

`timestamp_to_time_ns` and `time_ns_to_timestamp` move between a protobuf
`Timestamp` and nanoseconds since the epoch. `duration_from_proto` turns a
protobuf `Duration` into whole microseconds, rounding any fractional
microsecond away from zero; `duration_to_proto` goes the other way.

## Audio classification helper

The package installs one command, `robokit-audio-classification`. With
`--generate` it prints a robot configuration that serves a yamnet
classification TensorFlow Lite model through an ML model service module:

```
robokit-audio-classification --generate --model-path /models/yamnet.tflite --tflite-module-path /modules/mlmodelservice_tflite
```

Both paths must name existing regular files; they are written into the
configuration as absolute paths. `--robot-host` and `--robot-secret` are
rejected in this mode. Run `robokit-audio-classification --help` for the full
list of options. The command exits with status 0 on success and 1 after
printing a message on any failure.

The pieces used for reporting results are available on their own:
`read_labels(path)` reads a label file line by line, `top_scores(scores,
labels, count)` pairs scores with labels and returns the highest `count` in
descending order (raising `ValueError` when the lengths differ), and
`format_score_line(rank, label, score)` renders one line of the report with
the score starting at column 40.

## What the package does not do

There is no network transport. `BaseServer` answers requests handed to it in
process; it does not listen on a socket, and `BaseClient` only reaches a
server through an object passed to it. The audio classification command's
classification mode (`--robot-host`, `--robot-secret`, `--model-label-path`)
therefore cannot connect to a robot: it checks its options and then reports
that no transport is available, exiting with status 1. The package has no
ML model service or TensorFlow Lite runtime of its own.

## Tests

The test suite uses pytest; the `test` extra lists what it needs.