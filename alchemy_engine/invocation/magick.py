"""External engine adapter (ImageMagick ``convert``)."""

from __future__ import annotations

import subprocess
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path

from ..raster import RawImage
from .sanitizer import EXPORT_FILE, INPUT_FILE, OUTPUT_FILE, build_invocation


class EngineError(RuntimeError):
    """Opaque failure of the external engine; stderr is carried, not interpreted."""

    def __init__(self, message: str, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr = stderr


@dataclass
class EngineJob:
    command: str
    image: RawImage
    export: bool = False


@dataclass
class EngineResult:
    data: bytes
    width: int
    height: int
    export: bool
    args: list[str] = field(default_factory=list)
    elapsed_s: float = 0.0


class MagickRunner:
    def __init__(self, binary: str = "convert", timeout_s: float = 60.0) -> None:
        self.binary = binary
        self.timeout_s = timeout_s

    def run(self, job: EngineJob) -> EngineResult:
        image = job.image
        args = build_invocation(job.command, image.width, image.height, export=job.export)
        argv = [self.binary, *args[1:]]
        start = time.monotonic()
        with tempfile.TemporaryDirectory(prefix="alchemy-") as tmp:
            workdir = Path(tmp)
            (workdir / INPUT_FILE).write_bytes(image.data)
            try:
                proc = subprocess.run(
                    argv,
                    cwd=workdir,
                    capture_output=True,
                    check=False,
                    timeout=self.timeout_s,
                )
            except FileNotFoundError as exc:
                raise EngineError(f"Engine binary not found: {self.binary}") from exc
            except subprocess.TimeoutExpired as exc:
                raise EngineError(f"Engine timed out after {self.timeout_s}s") from exc
            stderr = (proc.stderr or b"").decode("utf-8", errors="replace")
            if proc.returncode != 0:
                raise EngineError(f"Engine exited with code {proc.returncode}", stderr=stderr)
            output = workdir / (EXPORT_FILE if job.export else OUTPUT_FILE)
            if not output.exists():
                raise EngineError("Engine produced no output", stderr=stderr)
            data = output.read_bytes()
        if not job.export and len(data) != image.width * image.height * 4:
            raise EngineError(
                f"Unexpected output size {len(data)} for {image.width}x{image.height} RGBA",
                stderr=stderr,
            )
        return EngineResult(
            data=data,
            width=image.width,
            height=image.height,
            export=job.export,
            args=args,
            elapsed_s=time.monotonic() - start,
        )
