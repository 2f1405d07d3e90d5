"""Reading luma frames from raw 4:2:0 YUV sequences and writing raw frames."""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO, Sequence

# A byte that could not be read; a short file yields this value for each missing byte.
_END_OF_FILE = -1


class SequenceNotFoundError(FileNotFoundError):
    """The video sequence file could not be opened."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        super().__init__(f"video sequence {os.fspath(path)} doesn't exist")
        self.path = os.fspath(path)


def frame_stride(rows: int, cols: int) -> int:
    """Bytes taken by one 4:2:0 frame: the luma plane plus two quarter-size chroma planes."""
    if rows < 0 or cols < 0:
        raise ValueError(f"frame dimensions must not be negative, got {rows}x{cols}")
    return (rows * cols * 3) // 2


def luma_to_pixel(value: int) -> int:
    """Expand a studio-range luma byte to a full-range 8-bit pixel.

    The scaled value is truncated toward zero, clipped at 255 and then
    stored as an unsigned byte, so values below 16 wrap around. ``-1``
    stands for a byte past the end of the file.
    """
    scaled = int(1.164 * (value - 16))
    if scaled > 255:
        scaled = 255
    return scaled & 0xFF


def open_sequence(path: str | os.PathLike[str]) -> BinaryIO:
    """Open a video sequence for binary reading."""
    try:
        return open(path, "rb")
    except OSError as error:
        raise SequenceNotFoundError(path) from error


def read_frame(stream: BinaryIO, frame_number: int, rows: int, cols: int) -> bytes:
    """Read the luma plane of frame ``frame_number`` as ``rows * cols`` pixels.

    The pixels are returned row-major. A negative frame offset leaves the
    stream where it is and reads from there. Bytes missing at the end of
    the file are treated as end-of-file markers.
    """
    offset = frame_stride(rows, cols) * frame_number
    if offset >= 0:
        stream.seek(offset, os.SEEK_SET)
    size = rows * cols
    raw = stream.read(size)
    pixels = bytearray(luma_to_pixel(byte) for byte in raw)
    if len(raw) < size:
        pixels.extend([luma_to_pixel(_END_OF_FILE)] * (size - len(raw)))
    return bytes(pixels)


def output_filename(rows: int, cols: int) -> str:
    """Name of the raw file a frame of the given size is saved under."""
    return f"hsTEST_{rows}x{cols}.raw"


def write_frame(
    frame: Sequence[int] | bytes,
    rows: int,
    cols: int,
    directory: str | os.PathLike[str] = ".",
) -> Path:
    """Write ``rows * cols`` pixels of ``frame`` as a raw file and return its path."""
    size = rows * cols
    if len(frame) < size:
        raise ValueError(
            f"frame holds {len(frame)} pixels, {size} needed for {rows}x{cols}"
        )
    target = Path(directory) / output_filename(rows, cols)
    target.write_bytes(bytes(frame[:size]))
    return target