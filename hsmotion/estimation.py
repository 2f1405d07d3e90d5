"""Hierarchical block-matching motion estimation.

Each block of the current frame is matched against the previous frame on
three levels of a resolution pyramid. The search starts on the
quarter-resolution frames and refines the result on the half-resolution
and full-resolution frames.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from itertools import product
from typing import Sequence

from hsmotion.config import SearchConfig

# Every subsampled pixel is the window sum divided by this, whatever the factor.
_SUBSAMPLE_DIVISOR = 4
_FACTORS = (2, 4)


class SearchMode(Enum):
    """How the blocks and the pyramid levels are scheduled.

    Every mode yields the same motion field; they differ only in the order
    in which the work is carried out.
    """

    SERIAL = "serial"
    """Each block runs through all three levels before the next block starts."""

    STAGED = "staged"
    """Each level is completed for every block before the next level starts."""

    PARALLEL = "parallel"
    """Blocks are searched concurrently by a pool of worker threads."""


@dataclass(frozen=True)
class MotionField:
    """One motion vector per block, stored row-major by block."""

    blocks_down: int
    blocks_across: int
    vectors_x: tuple[int, ...]
    vectors_y: tuple[int, ...]

    def __post_init__(self) -> None:
        count = self.blocks_down * self.blocks_across
        if len(self.vectors_x) != count or len(self.vectors_y) != count:
            raise ValueError(
                f"a {self.blocks_down}x{self.blocks_across} field needs {count} vectors"
            )

    def vector(self, block_row: int, block_col: int) -> tuple[int, int]:
        """Displacement ``(rows, cols)`` of the block at the given block position."""
        if not (0 <= block_row < self.blocks_down and 0 <= block_col < self.blocks_across):
            raise IndexError(
                f"block ({block_row},{block_col}) outside a "
                f"{self.blocks_down}x{self.blocks_across} field"
            )
        index = block_row * self.blocks_across + block_col
        return self.vectors_x[index], self.vectors_y[index]


def subsample(
    frame: Sequence[int] | bytes, rows: int, cols: int, factor: int
) -> bytes:
    """Reduce a frame by ``factor`` (2 or 4) in both directions.

    Each output pixel is the sum of its ``factor x factor`` window divided
    by four and stored as an unsigned byte, so a factor of 4 wraps around
    for bright windows. The result has ``(rows // factor) * (cols // factor)``
    pixels, row-major.
    """
    if factor not in _FACTORS:
        raise ValueError(f"subsampling factor must be 2 or 4, got {factor}")
    if rows < 0 or cols < 0:
        raise ValueError(f"frame dimensions must not be negative, got {rows}x{cols}")
    if len(frame) < rows * cols:
        raise ValueError(
            f"frame holds {len(frame)} pixels, {rows * cols} needed for {rows}x{cols}"
        )
    out_rows, out_cols = rows // factor, cols // factor
    result = bytearray()
    for out_row, out_col in product(range(out_rows), range(out_cols)):
        top, left = out_row * factor, out_col * factor
        total = sum(
            frame[(top + k) * cols + left + l]
            for k, l in product(range(factor), repeat=2)
        )
        result.append((total // _SUBSAMPLE_DIVISOR) & 0xFF)
    return bytes(result)


@dataclass(frozen=True)
class _Plane:
    pixels: Sequence[int] | bytes
    rows: int
    cols: int

    def at(self, row: int, col: int) -> int:
        """Pixel value, zero outside the plane."""
        if 0 <= row < self.rows and 0 <= col < self.cols:
            return self.pixels[row * self.cols + col]
        return 0


@dataclass(frozen=True)
class _Level:
    current: _Plane
    previous: _Plane
    edge: int
    # Subsampled levels repeat the last pixel read for block pixels that fall
    # outside the plane; the full level reads the flat buffer instead.
    hold_last: bool

    def block_pixels(self, top: int, left: int) -> list[tuple[int, int, int]]:
        pixels = []
        last = 0
        plane = self.current
        for k, l in product(range(self.edge), repeat=2):
            row, col = top + k, left + l
            if self.hold_last:
                if row < plane.rows and col < plane.cols:
                    last = plane.pixels[row * plane.cols + col]
                value = last
            else:
                index = row * plane.cols + col
                value = plane.pixels[index] if index < len(plane.pixels) else 0
            pixels.append((k, l, value))
        return pixels

    def best_match(
        self, block_row: int, block_col: int, centre: tuple[int, int], radius: int
    ) -> tuple[int, int]:
        """Offset with the smallest sum of absolute differences around ``centre``.

        Ties keep the first offset found; an offset only wins when it beats
        the largest possible difference of the block. Without a winner the
        result is ``(0, 0)``.
        """
        top, left = self.edge * block_row, self.edge * block_col
        block = self.block_pixels(top, left)
        best_dist = 255 * self.edge * self.edge
        best = (0, 0)
        centre_row, centre_col = centre
        for i in range(centre_row - radius, centre_row + radius + 1):
            for j in range(centre_col - radius, centre_col + radius + 1):
                dist = sum(
                    abs(value - self.previous.at(top + i + k, left + j + l))
                    for k, l, value in block
                )
                if dist < best_dist:
                    best_dist = dist
                    best = (i, j)
        return best


@dataclass(frozen=True)
class _Pyramid:
    quarter: _Level
    half: _Level
    full: _Level
    radius: int

    def coarse(self, block: tuple[int, int]) -> tuple[int, int]:
        return self.quarter.best_match(*block, (0, 0), self.radius)

    def middle(self, block: tuple[int, int], coarse: tuple[int, int]) -> tuple[int, int]:
        return self.half.best_match(*block, (2 * coarse[0], 2 * coarse[1]), 1)

    def fine(self, block: tuple[int, int], middle: tuple[int, int]) -> tuple[int, int]:
        return self.full.best_match(*block, (2 * middle[0], 2 * middle[1]), 1)

    def search(self, block: tuple[int, int]) -> tuple[int, int]:
        return self.fine(block, self.middle(block, self.coarse(block)))


def _build_pyramid(
    current: Sequence[int] | bytes,
    previous: Sequence[int] | bytes,
    config: SearchConfig,
) -> _Pyramid:
    rows, cols, edge = config.rows, config.cols, config.block_size

    def level(factor: int) -> _Level:
        if factor == 1:
            return _Level(
                _Plane(current, rows, cols), _Plane(previous, rows, cols), edge, False
            )
        shape = (rows // factor, cols // factor)
        return _Level(
            _Plane(subsample(current, rows, cols, factor), *shape),
            _Plane(subsample(previous, rows, cols, factor), *shape),
            edge // factor,
            True,
        )

    return _Pyramid(level(4), level(2), level(1), config.search_range // 4)


def hierarchical_search(
    current: Sequence[int] | bytes,
    previous: Sequence[int] | bytes,
    config: SearchConfig,
    mode: SearchMode = SearchMode.SERIAL,
) -> MotionField:
    """Estimate one motion vector per block of ``current`` against ``previous``.

    Both frames are row-major with ``config.rows * config.cols`` pixels. A
    vector ``(dx, dy)`` means the block at ``(row, col)`` in the current frame
    matches the area at ``(row + dx, col + dy)`` in the previous frame.
    """
    size = config.rows * config.cols
    if len(current) < size or len(previous) < size:
        raise ValueError(
            f"both frames need {size} pixels for {config.rows}x{config.cols}"
        )
    mode = SearchMode(mode)
    pyramid = _build_pyramid(current, previous, config)
    down, across = config.blocks_down(), config.blocks_across()
    blocks = list(product(range(down), range(across)))

    if mode is SearchMode.SERIAL:
        vectors = [pyramid.search(block) for block in blocks]
    elif mode is SearchMode.STAGED:
        coarse = [pyramid.coarse(block) for block in blocks]
        middle = [pyramid.middle(block, c) for block, c in zip(blocks, coarse)]
        vectors = [pyramid.fine(block, m) for block, m in zip(blocks, middle)]
    else:
        with ThreadPoolExecutor() as pool:
            vectors = list(pool.map(pyramid.search, blocks))

    return MotionField(
        down,
        across,
        tuple(dx for dx, _ in vectors),
        tuple(dy for _, dy in vectors),
    )