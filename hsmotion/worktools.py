"""Helpers for splitting work between processes and dumping flat arrays."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import product
from typing import Sequence


@dataclass(frozen=True)
class WorkRange:
    """Half-open range ``[start, end)`` of jobs given to one process."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


def _check_work(maxjobs: int, nprocs: int) -> None:
    if nprocs <= 0:
        raise ValueError(f"number of processes must be positive, got {nprocs}")
    if maxjobs < 0:
        raise ValueError(f"amount of work must not be negative, got {maxjobs}")


def compute_work_effort(maxjobs: int, nprocs: int) -> list[WorkRange]:
    """Split ``maxjobs`` jobs into ``nprocs`` contiguous ranges.

    Every process gets ``maxjobs // nprocs`` jobs; the remainder goes one
    extra job each to the first processes.
    """
    _check_work(maxjobs, nprocs)
    chunk, rest = divmod(maxjobs, nprocs)
    ranges = []
    position = 0
    for index in range(nprocs):
        size = chunk + (1 if index < rest else 0)
        ranges.append(WorkRange(position, position + size))
        position += size
    return ranges


def describe_work_effort(maxjobs: int, nprocs: int) -> str:
    """Report line describing how ``maxjobs`` is split across ``nprocs``."""
    _check_work(maxjobs, nprocs)
    rest = maxjobs % nprocs
    head = f"ComputeWorkEffor: TotalProcesses: {nprocs} TotalWork {maxjobs} "
    if rest:
        return f"{head} and remain to be distributed {rest}.\n"
    return f"{head} and nothing remain to be distributed.\n"


def zeros(xdim: int, ydim: int) -> list[int]:
    """Flat row-major array of ``xdim * ydim`` zeros."""
    if xdim < 0 or ydim < 0:
        raise ValueError(f"dimensions must not be negative, got {xdim}x{ydim}")
    return [0] * (xdim * ydim)


def _cells(values: Sequence[int], xdim: int, ydim: int):
    if xdim < 0 or ydim < 0:
        raise ValueError(f"dimensions must not be negative, got {xdim}x{ydim}")
    if len(values) < xdim * ydim:
        raise ValueError(
            f"array holds {len(values)} values, {xdim * ydim} needed for {xdim}x{ydim}"
        )
    for y, x in product(range(ydim), range(xdim)):
        index = y * xdim + x
        yield x, y, index, int(values[index])


def format_array(values: Sequence[int], xdim: int, ydim: int) -> str:
    """One line per element: coordinates, flat index and value."""
    return "".join(
        f"array (x,y)=({x},{y})[{index}]={value}\n"
        for x, y, index, value in _cells(values, xdim, ydim)
    )


def format_array_table(values: Sequence[int], xdim: int, ydim: int) -> str:
    """Elements laid out as a table, one text line per array row."""
    lines = []
    row: list[str] = []
    for x, y, index, value in _cells(values, xdim, ydim):
        row.append(f" \t({x},{y})[{index}]={value} ")
        if x == xdim - 1:
            lines.append("".join(row) + "\n")
            row = []
    return "".join(lines)