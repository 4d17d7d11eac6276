"""Vectors, poses, protobuf attribute maps and a mobile base component."""

__version__ = "0.1.0"

__all__ = [
    "audio_classification",
    "base",
    "base_client",
    "base_server",
    "linear_algebra",
    "pose",
    "proto_type",
    "utils",
]