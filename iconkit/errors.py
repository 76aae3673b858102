"""Error types raised by iconkit.

I/O failures are not wrapped: they surface as the built-in `OSError` family.
The classes below describe data that was read fine but cannot be used.
"""
from __future__ import annotations

from pathlib import Path
from typing import Sequence

ERR_ICON_UNKNOWN_FORMAT = "ERR_ICON_UNKNOWN_FORMAT"
ERR_ICON_TRUNCATED = "ERR_ICON_TRUNCATED"
ERR_ICNS_CORRUPTED = "ERR_ICNS_CORRUPTED"
ERR_ICON_TOO_SMALL = "ERR_ICON_TOO_SMALL"


class IconError(Exception):
    """Base class for iconkit errors."""


class ImageFormatError(IconError, ValueError):
    """The file is readable but is not a recognised (or intact) image.

    Attributes:
        path: Source file.
        code: Stable diagnostic code, e.g. `ERR_ICON_UNKNOWN_FORMAT`.
    """

    def __init__(self, path: str | Path, code: str = ERR_ICON_UNKNOWN_FORMAT) -> None:
        self.path = Path(path)
        self.code = code
        super().__init__(f"{self.path}: {code}")


class ImageSizeError(IconError, ValueError):
    """An ICNS container holds no sub-image of a usable size.

    Attributes:
        path: Source file.
        min_size: Smallest acceptable edge, px.
        available: Edges of the recognised sub-images that were found, px.
    """

    code = ERR_ICON_TOO_SMALL

    def __init__(self, path: str | Path, min_size: int, available: Sequence[int] = ()) -> None:
        self.path = Path(path)
        self.min_size = min_size
        self.available = tuple(available)
        found = ", ".join(f"{size}x{size}" for size in self.available) or "none"
        super().__init__(
            f"{self.path}: {self.code}, icon must contain an image of at least "
            f"{min_size}x{min_size} (found: {found})"
        )


class ConfigError(IconError, ValueError):
    pass
