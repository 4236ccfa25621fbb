from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

import pytest

from alchemy_engine.invocation import magick
from alchemy_engine.invocation.magick import EngineError, EngineJob, MagickRunner
from alchemy_engine.raster import RawImage

_PIXELS = bytes(range(16))


def _job(command: str = "-negate", export: bool = False) -> EngineJob:
    return EngineJob(command=command, image=RawImage(2, 2, _PIXELS), export=export)


def _fake_run(calls: list[list[str]], payload: bytes | None = None, returncode: int = 0, stderr: bytes = b""):
    def run(argv: list[str], cwd: Path, **kwargs: Any) -> subprocess.CompletedProcess:
        calls.append(list(argv))
        workdir = Path(cwd)
        if payload is not None:
            (workdir / argv[-1]).write_bytes(payload)
        elif returncode == 0:
            (workdir / argv[-1]).write_bytes((workdir / "source.rgba").read_bytes())
        return subprocess.CompletedProcess(argv, returncode, stdout=b"", stderr=stderr)

    return run


def test_preview_round_trip(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(magick.subprocess, "run", _fake_run(calls))
    result = MagickRunner(binary="/opt/im/convert").run(_job("-blur 3"))
    assert result.data == _PIXELS
    assert (result.width, result.height, result.export) == (2, 2, False)
    argv = calls[0]
    assert argv[0] == "/opt/im/convert"
    assert argv[1:6] == ["-size", "2x2", "-depth", "8", "source.rgba"]
    assert argv[-1] == "out.rgba"
    assert result.args[0] == "convert"


def test_export_returns_jpeg_bytes(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(magick.subprocess, "run", _fake_run(calls, payload=b"\xff\xd8jpeg"))
    result = MagickRunner().run(_job(export=True))
    assert result.data == b"\xff\xd8jpeg"
    assert calls[0][-1] == "out.jpg"


def test_nonzero_exit_raises_with_stderr(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(magick.subprocess, "run", _fake_run([], returncode=1, stderr=b"unrecognized option"))
    with pytest.raises(EngineError) as excinfo:
        MagickRunner().run(_job())
    assert "unrecognized option" in excinfo.value.stderr


def test_missing_output_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    def run(argv: list[str], cwd: Path, **kwargs: Any) -> subprocess.CompletedProcess:
        return subprocess.CompletedProcess(argv, 0, stdout=b"", stderr=b"")

    monkeypatch.setattr(magick.subprocess, "run", run)
    with pytest.raises(EngineError, match="no output"):
        MagickRunner().run(_job())


def test_wrong_preview_size_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(magick.subprocess, "run", _fake_run([], payload=b"abc"))
    with pytest.raises(EngineError, match="Unexpected output size"):
        MagickRunner().run(_job())


def test_missing_binary_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    def run(argv: list[str], cwd: Path, **kwargs: Any) -> subprocess.CompletedProcess:
        raise FileNotFoundError(argv[0])

    monkeypatch.setattr(magick.subprocess, "run", run)
    with pytest.raises(EngineError, match="not found"):
        MagickRunner(binary="nope").run(_job())
