"""Data models for decoded images.

Principles:
- SRP: plain data only, no decoding logic.
- Immutability (`frozen=True`) keeps the values predictable once built.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from PIL import Image

from iconkit.models.icns_model import IcnsType


class OutputFormat(Enum):
    """Target raster formats; values are Pillow format names."""
    PNG = "PNG"
    ICO = "ICO"

    @classmethod
    def from_name(cls, name: str) -> "OutputFormat":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"unsupported output format: {name!r}") from None

    @classmethod
    def from_path(cls, path: str | Path) -> "OutputFormat":
        """Guesses the format from the file suffix (`.png`, `.ico`)."""
        suffix = Path(path).suffix.lstrip(".")
        if not suffix:
            raise ValueError(f"cannot infer output format from {path!s}")
        return cls.from_name(suffix)


@dataclass(frozen=True)
class ImageData:
    """Decoded image and its metadata.

    Fields:
        path: Source file.
        pil_image: Fully loaded PIL image.
        width: Width, px.
        height: Height, px.
        mode: PIL mode, e.g. "RGBA".
        format: Format of the decoded payload ("PNG", "ICO", "JPEG2000"...).
        sub_image: ICNS entry the image came from, None for plain files.
        size_bytes: Size of the source file, if available.
    """
    path: Path
    pil_image: Image.Image
    width: int
    height: int
    mode: str
    format: Optional[str]
    sub_image: Optional[IcnsType]
    size_bytes: Optional[int]


@dataclass(frozen=True)
class ImageHeader:
    width: int
    height: int
    mode: str
    format: Optional[str]
