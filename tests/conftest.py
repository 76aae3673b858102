from __future__ import annotations

import io
import struct
from pathlib import Path
from typing import Callable, Dict, Sequence, Tuple

import pytest
from PIL import Image


def png_bytes(size: int, color=(200, 40, 40, 255)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGBA", (size, size), color).save(buffer, format="PNG")
    return buffer.getvalue()


def icns_bytes(blocks: Sequence[Tuple[bytes, bytes]]) -> bytes:
    """Packs (tag, payload) pairs into an ICNS container."""
    body = bytearray()
    for tag, payload in blocks:
        body += tag + struct.pack(">I", 8 + len(payload)) + payload
    return b"icns" + struct.pack(">I", 8 + len(body)) + bytes(body)


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, bytes], Path]:
    def _write(name: str, data: bytes) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    return _write


@pytest.fixture
def png_file(write_file) -> Path:
    return write_file("source.png", png_bytes(64))


@pytest.fixture
def icns_factory(write_file) -> Callable[[Dict[bytes, int]], Path]:
    """Builds an ICNS file with one PNG block per tag, sized as given."""
    def _make(sizes: Dict[bytes, int], name: str = "source.icns") -> Path:
        blocks = [(tag, png_bytes(size)) for tag, size in sizes.items()]
        return write_file(name, icns_bytes(blocks))

    return _make


@pytest.fixture
def make_png() -> Callable[..., bytes]:
    return png_bytes


@pytest.fixture
def make_icns() -> Callable[[Sequence[Tuple[bytes, bytes]]], bytes]:
    return icns_bytes
