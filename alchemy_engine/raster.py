"""Decode images to raw RGBA buffers and encode them back."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from PIL import Image, UnidentifiedImageError

DEFAULT_MAX_DIMENSION = 1280


@dataclass
class RawImage:
    width: int
    height: int
    data: bytes

    def __post_init__(self) -> None:
        expected = self.width * self.height * 4
        if len(self.data) != expected:
            raise ValueError(f"RGBA buffer has {len(self.data)} bytes, expected {expected}")


def fit_within(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    max_dim = max(1, int(max_dimension))
    scale = min(1.0, max_dim / max(1, max(width, height)))
    return max(1, int(round(width * scale))), max(1, int(round(height * scale)))


def image_to_raw(image: Image.Image, max_dimension: int = DEFAULT_MAX_DIMENSION, retro: bool = True) -> RawImage:
    rgba = image.convert("RGBA")
    size = fit_within(rgba.width, rgba.height, max_dimension)
    if size != rgba.size:
        # retro mode keeps hard pixel edges
        rgba = rgba.resize(size, Image.NEAREST if retro else Image.LANCZOS)
    return RawImage(width=rgba.width, height=rgba.height, data=rgba.tobytes())


def load_raw_image(path: Path, max_dimension: int = DEFAULT_MAX_DIMENSION, retro: bool = True) -> RawImage:
    try:
        with Image.open(path) as image:
            return image_to_raw(image, max_dimension=max_dimension, retro=retro)
    except (UnidentifiedImageError, OSError) as exc:
        raise ValueError(f"Failed to decode image: {path}") from exc


def raw_to_image(raw: RawImage) -> Image.Image:
    return Image.frombytes("RGBA", (raw.width, raw.height), raw.data)


def save_raw_image(raw: RawImage, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    image = raw_to_image(raw)
    if path.suffix.lower() in {".jpg", ".jpeg"}:
        image = image.convert("RGB")
    image.save(path)
    return path
