"""Rebuilding a frame from the previous frame and a motion field."""

from __future__ import annotations

from itertools import product
from typing import Sequence

from hsmotion.config import SearchConfig
from hsmotion.estimation import MotionField


def motion_compensation(
    previous: Sequence[int] | bytes,
    field: MotionField,
    config: SearchConfig,
) -> bytes:
    """Predict the current frame by moving each block of ``previous`` by its vector.

    A block pixel whose displaced position falls above, left of, below or
    right of the frame is taken from the block's own first row, first
    column, last row or last column instead, checked in that order. The
    frame is treated as one row-major buffer: pixels of a partial block
    that fall past its end are dropped, and reads past it give zero.
    """
    rows, cols, edge = config.rows, config.cols, config.block_size
    size = rows * cols
    if len(previous) < size:
        raise ValueError(
            f"frame holds {len(previous)} pixels, {size} needed for {rows}x{cols}"
        )
    if (field.blocks_down, field.blocks_across) != (
        config.blocks_down(),
        config.blocks_across(),
    ):
        raise ValueError(
            f"motion field is {field.blocks_down}x{field.blocks_across} blocks, "
            f"configuration needs {config.blocks_down()}x{config.blocks_across()}"
        )

    def pixel(row: int, col: int) -> int:
        index = row * cols + col
        return previous[index] if 0 <= index < size else 0

    output = bytearray(size)
    for block_row, block_col in product(
        range(field.blocks_down), range(field.blocks_across)
    ):
        dx, dy = field.vector(block_row, block_col)
        top, left = edge * block_row, edge * block_col
        for k, l in product(range(edge), repeat=2):
            row, col = top + k, left + l
            if row + dx < 0:
                value = pixel(top, col)
            elif col + dy < 0:
                value = pixel(row, left)
            elif row + dx > rows - 1:
                value = pixel(top + edge - 1, col)
            elif col + dy > cols - 1:
                value = pixel(row, left + edge - 1)
            else:
                value = pixel(row + dx, col + dy)
            index = row * cols + col
            if index < size:
                output[index] = value
    return bytes(output)