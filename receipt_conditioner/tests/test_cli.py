"""Tests for the command line interface."""

import numpy as np
import pytest
from PIL import Image

from ..infrastructure.plugin_registry import PluginRegistry
from ..interfaces.cli.main import collect_files, create_parser, main
from .fakes import FakeRectangleDetector, FakeTextRecognizer


@pytest.fixture(autouse=True)
def fake_adapters(monkeypatch):
    """Swap the registry's adapters for in-memory doubles."""
    recognizer = FakeTextRecognizer(by_width={
        52: (5, ["TOTAL 12.00"]),
        50: (4, ["Milk"]),
    })
    monkeypatch.setattr(PluginRegistry, "create_detector", lambda name: FakeRectangleDetector())
    monkeypatch.setattr(PluginRegistry, "create_recognizer", lambda name: recognizer)
    return recognizer


def _write_image(path, width=60, height=80, value=180):
    Image.fromarray(np.full((height, width, 3), value, dtype=np.uint8)).save(path)
    return path


class TestParser:
    """Test argument parsing."""

    def test_defaults(self):
        parsed = create_parser().parse_args(["single", "a.jpg", "-o", "out"])
        assert parsed.detector == "opencv"
        assert parsed.recognizer == "paddleocr"
        assert parsed.type == "camera"
        assert not parsed.strict

    def test_command_required(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args([])

    def test_invalid_type(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["single", "a.jpg", "-o", "out", "--type", "fax"])


class TestCollectFiles:
    def test_expands_folder(self, tmp_path):
        _write_image(tmp_path / "b.png")
        _write_image(tmp_path / "a.jpg")
        (tmp_path / "notes.txt").write_text("x")
        assert [f.name for f in collect_files([tmp_path])] == ["a.jpg", "b.png"]


class TestMain:
    """Test end-to-end commands."""

    def test_single(self, tmp_path):
        source = _write_image(tmp_path / "shop.png")
        out = tmp_path / "out"
        assert main(["single", str(source), "-o", str(out)]) == 0
        written = out / "conditioned_shop.jpg"
        assert written.exists()
        assert Image.open(written).size == (60, 80)

    def test_single_for_transmission(self, tmp_path):
        source = _write_image(tmp_path / "shop.png")
        out = tmp_path / "out"
        assert main(["single", str(source), "-o", str(out), "--for-transmission"]) == 0
        assert (out / "conditioned_shop.jpg").exists()

    def test_single_missing_input(self, tmp_path):
        assert main(["single", str(tmp_path / "nope.png"), "-o", str(tmp_path)]) == 1

    def test_batch_stitches(self, tmp_path):
        first = _write_image(tmp_path / "1.png", width=52, height=100)
        second = _write_image(tmp_path / "2.png", width=50, height=100)
        out = tmp_path / "out"
        assert main(["batch", str(first), str(second), "-o", str(out)]) == 0
        stitched = out / "stitched_receipt.jpg"
        assert stitched.exists()
        assert Image.open(stitched).size == (52, 200)

    def test_batch_skips_undecodable(self, tmp_path):
        good = _write_image(tmp_path / "good.png")
        bad = tmp_path / "bad.jpg"
        bad.write_bytes(b"not an image")
        out = tmp_path / "out"
        assert main(["batch", str(good), str(bad), "-o", str(out)]) == 0
        assert (out / "conditioned_good.jpg").exists()

    def test_batch_strict_fails_on_undecodable(self, tmp_path):
        good = _write_image(tmp_path / "good.png")
        bad = tmp_path / "bad.jpg"
        bad.write_bytes(b"not an image")
        assert main(["--strict", "batch", str(good), str(bad), "-o", str(tmp_path)]) == 1

    def test_batch_nothing_decodable(self, tmp_path):
        bad = tmp_path / "bad.jpg"
        bad.write_bytes(b"not an image")
        assert main(["batch", str(bad), "-o", str(tmp_path / "out")]) == 1

    def test_quality_prints(self, tmp_path, capsys):
        source = _write_image(tmp_path / "shop.png")
        assert main(["quality", str(source)]) == 0
        output = capsys.readouterr().out
        assert "shop.png: confidence" in output
        assert "Could not detect document boundaries" in output

    def test_unknown_plugin(self, tmp_path, monkeypatch):
        monkeypatch.undo()
        source = _write_image(tmp_path / "shop.png")
        assert main(["--detector", "lidar", "single", str(source), "-o", str(tmp_path)]) == 1
