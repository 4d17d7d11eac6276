import io
import json
import os

import pytest

from robokit import audio_classification as ac


class FakeService:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def infer(self, inputs):
        self.calls.append(inputs)
        return self.result


@pytest.fixture
def model_files(tmp_path):
    model = tmp_path / "model.tflite"
    model.write_bytes(b"\x00\x01")
    module = tmp_path / "module_bin"
    module.write_bytes(b"\x7fELF")
    return str(model), str(module)


def test_render_config_uses_absolute_paths(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = json.loads(ac.render_config("model.tflite", "bin/module"))
    service = config["services"][0]
    assert service["name"] == "yamnet_classification_tflite"
    assert service["model"] == "viam:mlmodelservice:example_mlmodelservice_tflite"
    assert service["attributes"]["model_path"] == os.path.abspath("model.tflite")
    assert config["modules"][0]["executable_path"] == os.path.abspath("bin/module")
    remap = service["attributes"]["tensor_name_remappings"]
    assert remap["inputs"]["waveform_binary"] == "sample"
    assert remap["outputs"]["tower0/network/layer32/final_output"] == "categories"
    assert config["components"] == []


def test_read_labels_with_and_without_trailing_newline(tmp_path):
    with_newline = tmp_path / "a.txt"
    with_newline.write_text("Speech\nMusic\nSilence\n")
    without_newline = tmp_path / "b.txt"
    without_newline.write_text("Speech\nMusic\nSilence")
    assert ac.read_labels(str(with_newline)) == ["Speech", "Music", "Silence"]
    assert ac.read_labels(str(without_newline)) == ac.read_labels(str(with_newline))


def test_read_labels_empty_file(tmp_path):
    empty = tmp_path / "empty.txt"
    empty.write_text("")
    assert ac.read_labels(str(empty)) == []


def test_top_scores_orders_descending_and_limits():
    scores = [0.1, 0.9, 0.5, 0.3]
    labels = ["a", "b", "c", "d"]
    assert ac.top_scores(scores, labels, 2) == [("b", 0.9), ("c", 0.5)]
    full = ac.top_scores(scores, labels)
    assert len(full) == 4
    assert [score for _, score in full] == sorted(scores, reverse=True)


def test_top_scores_default_count_is_five():
    scores = [float(i) for i in range(8)]
    labels = [str(i) for i in range(8)]
    result = ac.top_scores(scores, labels)
    assert len(result) == 5
    assert result[0] == ("7", 7.0)


def test_top_scores_size_mismatch():
    with pytest.raises(ValueError):
        ac.top_scores([0.1, 0.2], ["only"])


def test_format_score_line_aligns_score_at_column_40():
    line = ac.format_score_line(0, "Speech", 0.5)
    assert line.startswith("0: Speech ")
    assert line[40:] == "0.5"
    assert line[:40].rstrip() == "0: Speech"


def test_format_score_line_long_label_not_padded():
    label = "x" * 50
    line = ac.format_score_line(3, label, 0.25)
    assert line == f"3: {label} 0.25"


def test_main_help(capsys):
    assert ac.main(["--help"]) == 0
    assert "--generate" in capsys.readouterr().out


def test_main_generate_requires_model_path(capsys):
    assert ac.main(["--generate"]) == 1
    assert "a `--model-path` is required" in capsys.readouterr().out


def test_main_generate_rejects_robot_options(capsys, model_files):
    model, module = model_files
    args = ["--generate", "--model-path", model, "--tflite-module-path", module,
            "--robot-host", "localhost"]
    assert ac.main(args) == 1
    assert "do not provide `--robot-{host,secret}`" in capsys.readouterr().out


def test_main_generate_missing_model_file(capsys, tmp_path):
    missing = str(tmp_path / "nope.tflite")
    assert ac.main(["--generate", "--model-path", missing]) == 1
    assert "is not an existing regular file" in capsys.readouterr().out


def test_main_generate_requires_module_path(capsys, model_files):
    model, _ = model_files
    assert ac.main(["--generate", "--model-path", model]) == 1
    assert "a `--tflite-module-path` is required" in capsys.readouterr().out


def test_main_generate_prints_config(capsys, model_files):
    model, module = model_files
    assert ac.main(["--generate", "--model-path", model, "--tflite-module-path", module]) == 0
    config = json.loads(capsys.readouterr().out)
    assert config["services"][0]["attributes"]["model_path"] == os.path.abspath(model)
    assert config["modules"][0]["executable_path"] == os.path.abspath(module)


def test_main_classification_rejects_paths(capsys, model_files):
    model, _ = model_files
    assert ac.main(["--model-path", model]) == 1
    assert "Without `--generate`" in capsys.readouterr().out


def test_main_classification_requires_host(capsys):
    assert ac.main([]) == 1
    assert "`--robot-host` argument is required" in capsys.readouterr().out


def test_main_classification_requires_secret(capsys):
    assert ac.main(["--robot-host", "localhost:8080"]) == 1
    assert "`--robot-secret` argument is required" in capsys.readouterr().out


def test_main_connection_failure_reported(capsys):
    assert ac.main(["--robot-host", "localhost:8080", "--robot-secret", "secret"]) == 1
    assert "Failed" in capsys.readouterr().out


def test_main_unknown_option_fails(capsys):
    assert ac.main(["--bogus"]) == 1
    assert "Failed" in capsys.readouterr().out


def test_classify_raw_scores():
    service = FakeService({"categories": [0.25, 0.5]})
    out = io.StringIO()
    assert ac._classify(service, None, out) == 0
    lines = out.getvalue().splitlines()
    assert lines[:2] == ["0.25", "0.5"]
    assert any(line.startswith("Inference latency (seconds), Mean: ") for line in lines)
    assert any(line.startswith("Inference latency (seconds), Var : ") for line in lines)
    assert len(service.calls) == 101
    samples = service.calls[0]["sample"]
    assert len(samples) == 15600
    assert all(-1.0 <= value <= 1.0 for value in samples)


def test_classify_with_labels(tmp_path):
    labels = tmp_path / "labels.txt"
    labels.write_text("Speech\nMusic\nDog\n")
    service = FakeService({"categories": [0.1, 0.7, 0.2]})
    out = io.StringIO()
    assert ac._classify(service, str(labels), out) == 0
    lines = out.getvalue().splitlines()
    assert lines[0] == ac.format_score_line(0, "Music", 0.7)
    assert lines[1] == ac.format_score_line(1, "Dog", 0.2)
    assert lines[2] == ac.format_score_line(2, "Speech", 0.1)


def test_classify_missing_categories():
    out = io.StringIO()
    assert ac._classify(FakeService({"other": [0.1]}), None, out) == 1
    assert "a `categories` tensor was not returned" in out.getvalue()


def test_classify_non_float_categories():
    out = io.StringIO()
    assert ac._classify(FakeService({"categories": [1, 2]}), None, out) == 1
    assert "not of type `float`" in out.getvalue()


def test_classify_label_count_mismatch(tmp_path):
    labels = tmp_path / "labels.txt"
    labels.write_text("Speech\n")
    out = io.StringIO()
    assert ac._classify(FakeService({"categories": [0.1, 0.2]}), str(labels), out) == 1
    assert "Size mismatch" in out.getvalue()


def test_classify_missing_label_file(tmp_path):
    out = io.StringIO()
    missing = str(tmp_path / "missing.txt")
    assert ac._classify(FakeService({"categories": [0.1]}), missing, out) == 1
    assert "`--model-label-path`" in out.getvalue()