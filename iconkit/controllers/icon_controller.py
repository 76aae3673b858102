"""Controller for icon conversion: wires settings and services together.

SOLID:
- SRP: the controller orchestrates; decoding and file handling stay in the
  services.
- DIP: services are built from `Settings` once and can be replaced in tests.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from iconkit.config import Settings
from iconkit.models.image_model import ImageData, ImageHeader, OutputFormat
from iconkit.services.fs_service import FileService
from iconkit.services.image_service import ImageService

logger = logging.getLogger(__name__)


@dataclass
class IconController:
    """Entry point for the command line and for callers embedding the tool.

    Responsibilities:
    - Convert an icon source into PNG or ICO.
    - Inspect image headers.
    - Prepare and clean output directories.
    """
    settings: Settings = field(default_factory=Settings)
    files: Optional[FileService] = None
    images: Optional[ImageService] = None

    def __post_init__(self) -> None:
        if self.files is None:
            self.files = FileService(self.settings.dir_mode)
        if self.images is None:
            self.images = ImageService(self.settings, self.files)

    def convert(
        self,
        source: str | Path,
        destination: str | Path,
        fmt: Optional[OutputFormat] = None,
    ) -> ImageData:
        """Loads `source` and writes it to `destination`.

        When `fmt` is omitted it is taken from the destination suffix.
        """
        if fmt is None:
            fmt = OutputFormat.from_path(destination)

        image = self.images.load_image(source)
        self.images.save_image(image.pil_image, destination, fmt)
        logger.info("Converted %s (%dx%d) to %s", image.path, image.width, image.height, destination)
        return image

    def inspect(self, source: str | Path) -> ImageHeader:
        return self.images.decode_image_header(source)

    def prepare_output_dir(self, path: str | Path) -> None:
        self.files.ensure_empty_dir(path)

    def clean(self, pattern: str | Path) -> None:
        self.files.remove_by_glob(pattern)
