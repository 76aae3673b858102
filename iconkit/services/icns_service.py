"""ICNS container handling: sniffing, table reading and sub-image selection.

Block parsing is Pillow's `IcnsImagePlugin.IcnsFile`; this module turns its
raw `{tag: (offset, size)}` table into `SubImage` records and picks one.
"""
from __future__ import annotations

import logging
import struct
from pathlib import Path
from typing import BinaryIO, Dict, Mapping

from PIL import IcnsImagePlugin

from iconkit.errors import ERR_ICNS_CORRUPTED, ImageFormatError, ImageSizeError
from iconkit.models.icns_model import (
    ICNS_MAGIC,
    MIN_ICON_SIZE,
    SUITABILITY_ORDER,
    IcnsType,
    SubImage,
)

logger = logging.getLogger(__name__)

# magic + 32-bit big-endian container length
HEADER_SIZE = 8


class PeekBuffer:
    """Reads a fixed-size prefix of a seekable stream without consuming it.

    `head` holds the bytes read (fewer than requested near EOF) and `start`
    the position reading began at; `rewind()` returns the stream there.
    """

    def __init__(self, stream: BinaryIO, size: int) -> None:
        self.stream = stream
        self.start = stream.tell()
        self.head = stream.read(size)

    def rewind(self) -> BinaryIO:
        self.stream.seek(self.start)
        return self.stream


def is_icns(stream: BinaryIO) -> bool:
    """Tells whether the stream holds an ICNS container.

    The stream is left at the position it had on entry. Anything that does
    not start with the ICNS magic counts as a plain image.
    """
    peek = PeekBuffer(stream, len(ICNS_MAGIC))
    peek.rewind()
    return peek.head == ICNS_MAGIC


def read_icns_table(stream: BinaryIO, source: str | Path) -> Dict[IcnsType, SubImage]:
    """Builds the sub-image table of the container at the current position.

    Offsets are absolute positions in `stream`. Blocks with tags outside
    `IcnsType` are skipped.

    Raises:
        ImageFormatError: with `ERR_ICNS_CORRUPTED` if a header is short or a
            block does not fit inside the declared container length.
    """
    peek = PeekBuffer(stream, HEADER_SIZE)
    if len(peek.head) < HEADER_SIZE:
        raise ImageFormatError(source, ERR_ICNS_CORRUPTED)
    total = int.from_bytes(peek.head[4:], "big")

    try:
        blocks = IcnsImagePlugin.IcnsFile(peek.rewind()).dct
    except (SyntaxError, struct.error, ValueError) as exc:
        raise ImageFormatError(source, ERR_ICNS_CORRUPTED) from exc

    table: Dict[IcnsType, SubImage] = {}
    for tag, (offset, size) in blocks.items():
        if size < 0 or offset + size > total:
            raise ImageFormatError(source, ERR_ICNS_CORRUPTED)

        icns_type = IcnsType.from_tag(tag)
        if icns_type is None:
            logger.debug("Skipping unknown ICNS block %r in %s", tag, source)
            continue
        table[icns_type] = SubImage(icns_type, peek.start + offset, size)

    return table


def select_best_sub_image(table: Mapping[IcnsType, SubImage], source: str | Path) -> SubImage:
    """Picks the most suitable entry of an ICNS table.

    Only the types listed in `SUITABILITY_ORDER` are considered, the first one
    present wins.

    Raises:
        ImageSizeError: if the table has none of them.
    """
    for icns_type in SUITABILITY_ORDER:
        sub_image = table.get(icns_type)
        if sub_image is not None:
            logger.debug("Using ICNS sub-image %s (%dpx) of %s", icns_type.value, icns_type.pixels, source)
            return sub_image

    available = sorted({t.pixels for t in table if t.pixels is not None})
    logger.debug("No usable ICNS sub-image in %s, available sizes: %s", source, available)
    raise ImageSizeError(source, MIN_ICON_SIZE, available)
