from __future__ import annotations

import io
import itertools

import pytest

from iconkit.errors import ERR_ICNS_CORRUPTED, ImageFormatError, ImageSizeError
from iconkit.models.icns_model import MIN_ICON_SIZE, SUITABILITY_ORDER, IcnsType, SubImage
from iconkit.services.icns_service import PeekBuffer, is_icns, read_icns_table, select_best_sub_image


def test_peek_buffer_rewinds_to_start():
    stream = io.BytesIO(b"0123456789")
    stream.seek(3)

    peek = PeekBuffer(stream, 4)

    assert peek.head == b"3456"
    assert peek.start == 3
    assert peek.rewind() is stream
    assert stream.tell() == 3


def test_peek_buffer_short_read():
    peek = PeekBuffer(io.BytesIO(b"ab"), 8)
    assert peek.head == b"ab"


def test_is_icns_detects_magic_and_keeps_position(make_icns, make_png):
    stream = io.BytesIO(make_icns([(b"ic08", make_png(8))]))

    assert is_icns(stream) is True
    assert stream.tell() == 0


@pytest.mark.parametrize("data", [b"", b"icn", b"\x89PNG\r\n\x1a\n", b"garbage data"])
def test_is_icns_plain(data):
    stream = io.BytesIO(data)

    assert is_icns(stream) is False
    assert stream.tell() == 0


def test_read_icns_table_offsets(make_icns):
    data = make_icns([(b"ic07", b"a" * 10), (b"ic08", b"b" * 20)])

    table = read_icns_table(io.BytesIO(data), "x.icns")

    assert table == {
        IcnsType.ICON_128: SubImage(IcnsType.ICON_128, 16, 10),
        IcnsType.ICON_256: SubImage(IcnsType.ICON_256, 34, 20),
    }
    assert data[34:54] == b"b" * 20


def test_read_icns_table_skips_unknown_tags(make_icns):
    data = make_icns([(b"it32", b"x" * 4), (b"ic09", b"y" * 4)])

    table = read_icns_table(io.BytesIO(data), "x.icns")

    assert list(table) == [IcnsType.ICON_512]
    assert table[IcnsType.ICON_512].offset == 8 + 12 + 8


def test_read_icns_table_offsets_are_absolute(make_icns):
    data = make_icns([(b"ic08", b"z" * 5)])
    stream = io.BytesIO(b"PAD" + data)
    stream.seek(3)

    table = read_icns_table(stream, "x.icns")

    assert table[IcnsType.ICON_256].offset == 3 + 16


@pytest.mark.parametrize(
    "data",
    [
        b"icns",
        b"icns\x00\x00\x00\x20ic08",
        b"icns\x00\x00\x00\x10ic08\x00\x00\x00\x04",
        b"icns\x00\x00\x00\x10ic08\x00\x00\x00\x40" + b"\x00" * 56,
    ],
    ids=["short-header", "short-block-header", "block-too-small", "block-past-end"],
)
def test_read_icns_table_corrupted(data):
    with pytest.raises(ImageFormatError) as info:
        read_icns_table(io.BytesIO(data), "bad.icns")

    assert info.value.code == ERR_ICNS_CORRUPTED
    assert info.value.path.name == "bad.icns"


def test_suitability_order_is_fixed():
    assert [t.value for t in SUITABILITY_ORDER] == ["ic08", "ic13", "ic09", "ic14", "ic10"]


@pytest.mark.parametrize("present", [
    combo
    for count in range(1, len(SUITABILITY_ORDER) + 1)
    for combo in itertools.combinations(SUITABILITY_ORDER, count)
])
def test_select_best_sub_image_prefers_earliest(present):
    expected = min(present, key=SUITABILITY_ORDER.index)
    extra = {IcnsType.ICON_128: SubImage(IcnsType.ICON_128, 1, 1)}
    entries = {t: SubImage(t, 100 + i, 10) for i, t in enumerate(present)}

    for ordered in (dict(entries), dict(reversed(list(entries.items())))):
        table = {**extra, **ordered}
        assert select_best_sub_image(table, "x.icns").type is expected


def test_select_best_sub_image_without_suitable_entry():
    table = {
        IcnsType.ICON_128: SubImage(IcnsType.ICON_128, 16, 10),
        IcnsType.ICON_32_RETINA: SubImage(IcnsType.ICON_32_RETINA, 34, 10),
    }

    with pytest.raises(ImageSizeError) as info:
        select_best_sub_image(table, "small.icns")

    assert info.value.min_size == MIN_ICON_SIZE == 256
    assert info.value.available == (32, 128)
    assert info.value.path.name == "small.icns"
    assert "found: 32x32, 128x128" in str(info.value)


def test_icns_type_from_tag():
    assert IcnsType.from_tag(b"ic10") is IcnsType.ICON_1024
    assert IcnsType.from_tag(b"TOC ") is IcnsType.TABLE_OF_CONTENTS
    assert IcnsType.from_tag(b"it32") is None
    assert IcnsType.ICON_512_RETINA.pixels == 512
    assert IcnsType.VERSION.pixels is None


def test_min_icon_size_follows_suitability_order():
    assert [t.pixels for t in SUITABILITY_ORDER] == [256, 256, 512, 512, 1024]
    assert MIN_ICON_SIZE == 256


def test_read_icns_table_real_png_payloads(make_icns, make_png):
    small, large = make_png(128), make_png(256)
    data = make_icns([(b"ic07", small), (b"ic08", large)])

    table = read_icns_table(io.BytesIO(data), "x.icns")

    entry = table[IcnsType.ICON_256]
    assert data[entry.offset:entry.offset + entry.size] == large
    assert table[IcnsType.ICON_128].size == len(small)
