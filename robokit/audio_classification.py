"""Command line tool for the yamnet audio classification model service.

In ``--generate`` mode it prints a robot configuration that serves the
yamnet/classification TensorFlow Lite model through an ML model service
module. Otherwise it classifies a noise signal with a running service and
reports the top scores and the inference latency.
"""

from __future__ import annotations

import argparse
import os
import random
import sys
import time
from collections.abc import Mapping, Sequence
from typing import Any, Optional, TextIO

_PROG = "audio_classification"
_SERVICE_NAME = "yamnet_classification_tflite"
_INPUT_NAME = "sample"
_OUTPUT_NAME = "categories"
_SAMPLE_COUNT = 15600
_TOP_COUNT = 5
_LATENCY_ROUNDS = 100
_SCORE_COLUMN = 40

_ROBOT_CONFIG_TEMPLATE = """
{
  "services": [
    {
      "name": "yamnet_classification_tflite",
      "namespace": "rdk",
      "type": "mlmodel",
      "attributes": {
        "num_threads": 1,
        "model_path": "%s",
        "tensor_name_remappings": {
          "outputs": {
            "tower0/network/layer32/final_output": "categories"
          },
          "inputs": {
            "waveform_binary": "sample"
          }
        }
      },
      "model": "viam:mlmodelservice:example_mlmodelservice_tflite"
    }
  ],
  "modules": [
    {
      "name": "mlms_tflite_module",
      "executable_path": "%s"
    }
  ],
  "components": []
}
"""


class _UsageError(ValueError):
    """Raised when the command line cannot be parsed."""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise _UsageError(message)


def _build_parser() -> _Parser:
    parser = _Parser(prog=_PROG, add_help=False, description="options")
    parser.add_argument("--help", action="store_true", help="Produce this help message")
    parser.add_argument(
        "--generate",
        action="store_true",
        help="Generate a robot configuration for the yamnet tflite mlmodel service "
        "modular resource",
    )
    parser.add_argument(
        "--model-path",
        help="Path to the yamnet/classification model file to include in the generated config",
    )
    parser.add_argument(
        "--tflite-module-path",
        help="Path to a mlmodelservice modular resource that provides "
        "viam:mlmodelservice:example_mlmodelservice_tflite",
    )
    parser.add_argument(
        "--model-label-path",
        help="Path to the yamnet/classification label file for interpreting the output tensor",
    )
    parser.add_argument(
        "--robot-host",
        help="Hostname of robot (e.g. foobar.zvzzzvzzvz.viam.cloud), including optional port",
    )
    parser.add_argument(
        "--robot-secret",
        help="Secret for accessing the robot running at `--robot-host`",
    )
    return parser


def render_config(model_path: str, module_path: str) -> str:
    """Return the robot configuration with the absolute forms of both paths filled in."""
    return _ROBOT_CONFIG_TEMPLATE % (os.path.abspath(model_path), os.path.abspath(module_path))


def read_labels(path: str) -> list[str]:
    """Read a label file, one label per line."""
    with open(path, encoding="utf-8", newline="") as stream:
        lines = stream.read().split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def top_scores(
    scores: Sequence[float], labels: Sequence[str], count: int = _TOP_COUNT
) -> list[tuple[str, float]]:
    """Pair labels with scores and return the ``count`` highest, best first."""
    if len(scores) != len(labels):
        raise ValueError("Size mismatch between category scores and label files")
    ranked = sorted(zip(labels, scores), key=lambda pair: pair[1], reverse=True)
    return ranked[: max(count, 0)]


def format_score_line(rank: int, label: str, score: float) -> str:
    """Format one ranked result, with the score starting at column 40 where it fits."""
    return f"{rank}: {label} ".ljust(_SCORE_COLUMN) + f"{score:g}"


def _is_float_tensor(tensor: Any) -> bool:
    if isinstance(tensor, (str, bytes)) or not isinstance(tensor, Sequence):
        return False
    return all(isinstance(value, float) for value in tensor)


def _noise(count: int) -> list[float]:
    rng = random.Random()
    return [rng.uniform(-1.0, 1.0) for _ in range(count)]


def _classify(service: Any, label_path: Optional[str], out: TextIO) -> int:
    """Classify a noise signal with ``service`` and report scores and latency."""
    inputs = {_INPUT_NAME: _noise(_SAMPLE_COUNT)}

    result: Mapping[str, Any] = service.infer(inputs)
    if _OUTPUT_NAME not in result:
        print(f"{_PROG}: Failed: a `categories` tensor was not returned", file=out)
        return 1
    categories = result[_OUTPUT_NAME]
    if not _is_float_tensor(categories):
        print(
            f"{_PROG}: Failed: a `categories` tensor was returned, "
            "but it was not of type `float`",
            file=out,
        )
        return 1

    if label_path is None:
        for value in categories:
            print(f"{value:g}", file=out)
    else:
        if not os.path.isfile(label_path):
            print(
                f"{_PROG}: Failed: The path `{label_path}` provided for `--model-label-path` "
                "is not an existing regular file",
                file=out,
            )
            return 1
        try:
            labels = read_labels(label_path)
        except OSError:
            print(f"{_PROG}: Failed: Unable to open label path `{label_path}`", file=out)
            return 1
        if len(labels) != len(categories):
            print(
                f"{_PROG}: Failed: Size mismatch between category scores and label files",
                file=out,
            )
            return 1
        for rank, (label, score) in enumerate(top_scores(categories, labels)):
            print(format_score_line(rank, label, score), file=out)
        out.flush()

    print("\nMeasuring inference latency ...", file=out)
    elapsed = []
    for _ in range(_LATENCY_ROUNDS):
        start = time.perf_counter()
        service.infer(inputs)
        elapsed.append(time.perf_counter() - start)
    mean = sum(elapsed) / len(elapsed)
    second_moment = sum(value * value for value in elapsed) / len(elapsed)
    print(f"Inference latency (seconds), Mean: {mean:g}", file=out)
    print(f"Inference latency (seconds), Var : {second_moment:g}", file=out)
    return 0


def _connect(host: str, secret: str) -> Any:
    """Return the yamnet model service of the robot at ``host``."""
    raise ConnectionError(
        f"no transport is available to reach the `{_SERVICE_NAME}` service at {host}"
    )


def _generate(options: argparse.Namespace, out: TextIO) -> int:
    if options.robot_host is not None or options.robot_secret is not None:
        print(f"{_PROG}: With `--generate`, do not provide `--robot-{{host,secret}}`", file=out)
        return 1
    if options.model_path is None:
        print(f"{_PROG}: With `--generate`, a `--model-path` is required", file=out)
        return 1
    if not os.path.isfile(options.model_path):
        print(
            f"{_PROG}: The path `{options.model_path}` provided for `--model-path` "
            "is not an existing regular file",
            file=out,
        )
        return 1
    if options.tflite_module_path is None:
        print(f"{_PROG}: With `--generate`, a `--tflite-module-path` is required", file=out)
        return 1
    if not os.path.isfile(options.tflite_module_path):
        print(
            f"{_PROG}: The path `{options.tflite_module_path}` provided for "
            "`--tflite-module-path` is not an existing regular file",
            file=out,
        )
        return 1
    print(render_config(options.model_path, options.tflite_module_path), file=out)
    return 0


def _run(args: list[str], out: TextIO) -> int:
    parser = _build_parser()
    options = parser.parse_args(args)
    if options.help:
        print(_PROG + parser.format_help(), file=out)
        return 0
    if options.generate:
        return _generate(options, out)

    if options.model_path is not None or options.tflite_module_path is not None:
        print(f"{_PROG}: Without `--generate`, do not provide `--*path*` arguments", file=out)
        return 1
    if options.robot_host is None:
        print(
            f"{_PROG}: The `--robot-host` argument is required when connecting to a robot",
            file=out,
        )
        return 1
    if options.robot_secret is None:
        print(
            f"{_PROG}: The `--robot-secret` argument is required when connecting to a robot",
            file=out,
        )
        return 1

    service = _connect(options.robot_host, options.robot_secret)
    if service is None:
        print(
            f"{_PROG}: Failed: did not find the `{_SERVICE_NAME}` resource, cannot continue",
            file=out,
        )
        return 1
    return _classify(service, options.model_label_path, out)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the tool with ``argv`` (the arguments after the program name)."""
    args = list(sys.argv[1:] if argv is None else argv)
    out = sys.stdout
    try:
        return _run(args, out)
    except Exception as error:  # noqa: BLE001 - every failure is reported the same way
        print(f"{_PROG}: Failed: an exception was thrown: `{error}`", file=out)
        return 1


if __name__ == "__main__":
    sys.exit(main())