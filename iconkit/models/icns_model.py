"""ICNS container model: block type tags and the sub-image table."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

ICNS_MAGIC = b"icns"


class IcnsType(Enum):
    """Known ICNS block tags. Values are the four-character OSType codes."""
    ICON_16 = "icp4"
    ICON_32 = "icp5"
    ICON_64 = "icp6"
    ICON_128 = "ic07"
    ICON_256 = "ic08"
    ICON_512 = "ic09"
    ICON_1024 = "ic10"
    ICON_32_RETINA = "ic11"
    ICON_64_RETINA = "ic12"
    ICON_256_RETINA = "ic13"
    ICON_512_RETINA = "ic14"
    TABLE_OF_CONTENTS = "TOC "
    VERSION = "icnV"

    @classmethod
    def from_tag(cls, tag: bytes) -> Optional["IcnsType"]:
        """Returns the member for a raw 4-byte tag, None for unknown tags."""
        try:
            return cls(tag.decode("latin-1"))
        except ValueError:
            return None

    @property
    def pixels(self) -> Optional[int]:
        return _PIXELS.get(self)


_PIXELS: Dict[IcnsType, int] = {
    IcnsType.ICON_16: 16,
    IcnsType.ICON_32: 32,
    IcnsType.ICON_64: 64,
    IcnsType.ICON_128: 128,
    IcnsType.ICON_256: 256,
    IcnsType.ICON_512: 512,
    IcnsType.ICON_1024: 1024,
    IcnsType.ICON_32_RETINA: 32,
    IcnsType.ICON_64_RETINA: 64,
    IcnsType.ICON_256_RETINA: 256,
    IcnsType.ICON_512_RETINA: 512,
}

# sorted by suitability
SUITABILITY_ORDER: Tuple[IcnsType, ...] = (
    IcnsType.ICON_256,
    IcnsType.ICON_256_RETINA,
    IcnsType.ICON_512,
    IcnsType.ICON_512_RETINA,
    IcnsType.ICON_1024,
)

# smallest sub-image edge the tool can build icons from
MIN_ICON_SIZE = min(t.pixels for t in SUITABILITY_ORDER)


@dataclass(frozen=True)
class SubImage:
    """Location of one embedded image.

    Fields:
        type: Block tag.
        offset: Absolute offset of the payload (block header excluded).
        size: Payload length in bytes.
    """
    type: IcnsType
    offset: int
    size: int


SubImageTable = Dict[IcnsType, SubImage]
