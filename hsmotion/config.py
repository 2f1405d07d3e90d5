"""Search parameters shared by the motion estimation stages."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SearchConfig:
    """Frame geometry and search settings for hierarchical block matching.

    ``rows`` and ``cols`` are the frame dimensions (N and M), ``block_size``
    is the edge of a square block (B) and ``search_range`` is the search
    area (p) around each block.
    """

    rows: int
    cols: int
    block_size: int
    search_range: int

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(
                f"frame dimensions must be positive, got {self.rows}x{self.cols}"
            )
        if self.block_size <= 0:
            raise ValueError(f"block size must be positive, got {self.block_size}")
        if self.search_range < 0:
            raise ValueError(
                f"search range must not be negative, got {self.search_range}"
            )

    def blocks_down(self) -> int:
        """Number of block rows, counting a partial block at the bottom."""
        full, rest = divmod(self.rows, self.block_size)
        return full + (1 if rest else 0)

    def blocks_across(self) -> int:
        """Number of block columns, counting a partial block at the right."""
        full, rest = divmod(self.cols, self.block_size)
        return full + (1 if rest else 0)

    def fits_exactly(self) -> bool:
        """True when both frame dimensions are whole multiples of the block size."""
        return self.rows % self.block_size == 0 and self.cols % self.block_size == 0