import io

import pytest

from hsmotion.frames import (
    SequenceNotFoundError,
    frame_stride,
    luma_to_pixel,
    open_sequence,
    output_filename,
    read_frame,
    write_frame,
)


def _sequence(rows, cols, lumas, chroma=128):
    data = bytearray()
    for luma in lumas:
        data.extend([luma] * (rows * cols))
        data.extend([chroma] * (frame_stride(rows, cols) - rows * cols))
    return bytes(data)


def test_frame_stride_is_one_and_a_half_planes():
    assert frame_stride(4, 4) == 24
    assert frame_stride(6, 8) == 6 * 8 + 2 * (6 * 8 // 4)


def test_frame_stride_rejects_negative():
    with pytest.raises(ValueError):
        frame_stride(-1, 4)


def test_luma_black_level_maps_to_zero():
    assert luma_to_pixel(16) == 0


def test_luma_clips_at_255():
    assert luma_to_pixel(255) == 255
    assert luma_to_pixel(240) == 255


def test_luma_is_monotonic_in_studio_range():
    values = [luma_to_pixel(v) for v in range(16, 236)]
    assert values == sorted(values)
    assert all(0 <= v <= 255 for v in values)


def test_luma_below_black_wraps_to_byte():
    for value in range(0, 16):
        assert 0 <= luma_to_pixel(value) <= 255
    assert luma_to_pixel(15) > luma_to_pixel(16)


def test_read_frame_selects_frame_by_offset():
    rows, cols = 4, 4
    stream = io.BytesIO(_sequence(rows, cols, [16, 255]))
    first = read_frame(stream, 0, rows, cols)
    second = read_frame(stream, 1, rows, cols)
    assert first == bytes([luma_to_pixel(16)] * 16)
    assert second == bytes([luma_to_pixel(255)] * 16)


def test_read_frame_ignores_chroma():
    rows, cols = 2, 4
    stream = io.BytesIO(_sequence(rows, cols, [100], chroma=0))
    frame = read_frame(stream, 0, rows, cols)
    assert len(frame) == rows * cols
    assert set(frame) == {luma_to_pixel(100)}


def test_read_frame_past_end_uses_end_of_file_value():
    rows, cols = 2, 2
    stream = io.BytesIO(_sequence(rows, cols, [50]))
    frame = read_frame(stream, 5, rows, cols)
    assert frame == bytes([luma_to_pixel(-1)] * 4)


def test_read_frame_negative_number_reads_from_current_position():
    rows, cols = 2, 2
    data = _sequence(rows, cols, [40, 80])
    fresh = read_frame(io.BytesIO(data), 0, rows, cols)
    assert read_frame(io.BytesIO(data), -1, rows, cols) == fresh


def test_open_sequence_missing_file(tmp_path):
    missing = tmp_path / "absent.yuv"
    with pytest.raises(SequenceNotFoundError) as info:
        open_sequence(missing)
    assert isinstance(info.value, FileNotFoundError)
    assert str(missing) in str(info.value)


def test_open_sequence_reads_file(tmp_path):
    path = tmp_path / "clip.yuv"
    path.write_bytes(_sequence(2, 2, [16, 255]))
    with open_sequence(path) as stream:
        assert read_frame(stream, 1, 2, 2) == bytes([luma_to_pixel(255)] * 4)


def test_output_filename_carries_dimensions():
    name = output_filename(2, 3)
    assert "2x3" in name
    assert name.endswith(".raw")


def test_write_frame_round_trip(tmp_path):
    frame = bytes(range(6))
    path = write_frame(frame, 2, 3, tmp_path)
    assert path.name == output_filename(2, 3)
    assert path.read_bytes() == frame


def test_write_frame_writes_only_frame_size(tmp_path):
    path = write_frame(list(range(10)), 2, 2, tmp_path)
    assert path.read_bytes() == bytes([0, 1, 2, 3])


def test_write_frame_too_short(tmp_path):
    with pytest.raises(ValueError):
        write_frame(b"\x00\x01", 2, 2, tmp_path)