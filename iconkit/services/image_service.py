"""Loading icon source images from disk and writing them back out.

Principles:
- SRP: the class resolves, decodes and encodes; container parsing lives in
  `icns_service`, file creation in `FileService`.
- Every stream is closed exactly once on every path. When an operation has
  already failed, its error is raised and a later close error is only logged.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from iconkit.config import Settings
from iconkit.errors import ERR_ICNS_CORRUPTED, ERR_ICON_TRUNCATED, ImageFormatError
from iconkit.models.icns_model import IcnsType
from iconkit.models.image_model import ImageData, ImageHeader, OutputFormat
from iconkit.services.fs_service import FileService
from iconkit.services.icns_service import PeekBuffer, is_icns, read_icns_table, select_best_sub_image

logger = logging.getLogger(__name__)

# shorter files cannot carry the header of any supported format
MIN_HEADER_SIZE = 8


class ImageService:
    def __init__(self, settings: Optional[Settings] = None, files: Optional[FileService] = None) -> None:
        self.settings = settings or Settings()
        self.files = files or FileService(self.settings.dir_mode)

    def load_image(self, file_path: str | Path) -> ImageData:
        """Loads an image from disk, picking the best sub-image of ICNS files.

        Args:
            file_path: Path to a PNG, ICO or ICNS file.

        Returns:
            `ImageData` with the decoded `PIL.Image.Image` and its metadata.

        Raises:
            OSError: if the file cannot be opened or read.
            ImageFormatError: if the payload is not a recognised image or the
                ICNS container is damaged.
            ImageSizeError: if an ICNS file has no sub-image of a usable size.
        """
        path = Path(file_path)
        stream = path.open("rb")
        try:
            reader, sub_image = self._resolve(stream, path)
            pil_image = self._decode(reader, path)
        except Exception:
            self._close_after_error(stream)
            raise
        stream.close()

        try:
            size_bytes: Optional[int] = path.stat().st_size
        except OSError:
            size_bytes = None

        width, height = pil_image.size
        return ImageData(
            path=path,
            pil_image=pil_image,
            width=width,
            height=height,
            mode=pil_image.mode,
            format=pil_image.format,
            sub_image=sub_image,
            size_bytes=size_bytes,
        )

    def decode_image_header(self, file_path: str | Path) -> ImageHeader:
        """Reads dimensions and mode without decoding pixel data.

        Raises:
            ImageFormatError: `ERR_ICON_TRUNCATED` for files too short to hold
                a header, `ERR_ICON_UNKNOWN_FORMAT` for unrecognised ones.
        """
        path = Path(file_path)
        stream = path.open("rb")
        try:
            header = self._read_header(stream, path)
        except Exception:
            self._close_after_error(stream)
            raise
        stream.close()
        return header

    def decode_image(self, stream: BinaryIO, source: str | Path = "<stream>") -> Image.Image:
        """Decodes a stream and closes it.

        The stream is closed whether decoding succeeds or not. A failing close
        is reported after a successful decode; after a failed one the decode
        error wins.
        """
        try:
            pil_image = self._decode(stream, source)
        except Exception:
            self._close_after_error(stream)
            raise
        stream.close()
        return pil_image

    def save_image(self, image: Image.Image, output_path: str | Path, fmt: OutputFormat) -> None:
        """Encodes `image` into `output_path`, creating missing directories."""
        out_file = self.files.create_file(output_path)
        self.save_image_to(image, out_file, fmt)

    def save_image_to(self, image: Image.Image, out_file: BinaryIO, fmt: OutputFormat) -> None:
        """Encodes `image` into an open destination and closes it.

        The image is encoded into memory first. If encoding fails nothing is
        written and the destination is closed. Otherwise the data is written
        and flushed before closing; the first error of those steps is raised.
        """
        buffer = io.BytesIO()
        try:
            image.save(buffer, format=fmt.value, **self._encoder_options(fmt))
        except Exception:
            self._close_after_error(out_file)
            raise

        try:
            out_file.write(buffer.getvalue())
            out_file.flush()
        except OSError:
            self._close_after_error(out_file)
            raise

        out_file.close()
        logger.debug("Wrote %s image (%d bytes)", fmt.value, buffer.tell())

    def _resolve(self, stream: BinaryIO, path: Path) -> Tuple[BinaryIO, Optional[IcnsType]]:
        """Returns the stream to decode from and the ICNS entry it holds."""
        if not is_icns(stream):
            return stream, None

        table = read_icns_table(stream, path)
        sub_image = select_best_sub_image(table, path)

        stream.seek(sub_image.offset)
        payload = stream.read(sub_image.size)
        if len(payload) < sub_image.size:
            raise ImageFormatError(path, ERR_ICNS_CORRUPTED)
        return io.BytesIO(payload), sub_image.type

    @staticmethod
    def _read_header(stream: BinaryIO, path: Path) -> ImageHeader:
        peek = PeekBuffer(stream, MIN_HEADER_SIZE)
        if len(peek.head) < MIN_HEADER_SIZE:
            raise ImageFormatError(path, ERR_ICON_TRUNCATED)

        try:
            pil_image = Image.open(peek.rewind())
        except UnidentifiedImageError as exc:
            raise ImageFormatError(path) from exc

        width, height = pil_image.size
        return ImageHeader(width=width, height=height, mode=pil_image.mode, format=pil_image.format)

    @staticmethod
    def _decode(reader: BinaryIO, source: str | Path) -> Image.Image:
        try:
            pil_image = Image.open(reader)
        except UnidentifiedImageError as exc:
            raise ImageFormatError(source) from exc

        # pixel data must be read while the backing stream is still open
        pil_image.load()
        return pil_image

    def _encoder_options(self, fmt: OutputFormat) -> dict:
        if fmt is OutputFormat.ICO:
            return {"sizes": list(self.settings.ico_sizes)}
        return {}

    @staticmethod
    def _close_after_error(stream: BinaryIO) -> None:
        try:
            stream.close()
        except OSError as exc:
            logger.debug("Closing stream after a failed operation also failed: %s", exc)
