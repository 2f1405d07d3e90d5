"""Command that runs hierarchical motion estimation over a raw 4:2:0 sequence."""

from __future__ import annotations

import os
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from hsmotion.compensation import motion_compensation
from hsmotion.config import SearchConfig
from hsmotion.estimation import MotionField, SearchMode, hierarchical_search
from hsmotion.frames import (
    SequenceNotFoundError,
    open_sequence,
    read_frame,
    write_frame,
)
from hsmotion.snr import psnr

_USAGE = (
    "7 variables are required: N M B p startingframe number_frames_to_process "
    "sequence [mode]\n"
    "Example: hsmotion 720 576 16 7 0 1 barb.yuv"
)
_USAGE_STATUS = 3
_FAILURE_STATUS = 1
_NANOSECONDS_PER_SECOND = 1_000_000_000


@dataclass(frozen=True)
class _Arguments:
    config: SearchConfig
    start_frame: int
    frame_count: int
    path: str
    mode: SearchMode


@dataclass(frozen=True)
class RunResult:
    """Outcome of processing a sequence: last motion field and its reconstruction."""

    field: MotionField
    output: bytes
    snr: float
    elapsed_ns: int
    output_path: Path

    @property
    def elapsed_text(self) -> str:
        """Elapsed search time as seconds with nine decimal places."""
        seconds, nanoseconds = divmod(self.elapsed_ns, _NANOSECONDS_PER_SECOND)
        return f"{seconds}.{nanoseconds:09d}"


def parse_arguments(argv: Sequence[str]) -> _Arguments:
    """Parse ``N M B p startingframe number_frames_to_process sequence [mode]``.

    Raises ``ValueError`` carrying the usage text when the arguments are
    missing or invalid.
    """
    args = list(argv)
    if len(args) < 7:
        raise ValueError(_USAGE)
    try:
        rows, cols, block, search, start, count = (int(value) for value in args[:6])
    except ValueError as error:
        raise ValueError(
            "N, M, B, p, startingframe and number_frames_to_process must be "
            f"integers\n{_USAGE}"
        ) from error
    try:
        config = SearchConfig(rows, cols, block, search)
    except ValueError as error:
        raise ValueError(f"{error}\n{_USAGE}") from error
    mode = SearchMode.SERIAL
    if len(args) > 7:
        try:
            mode = SearchMode(args[7])
        except ValueError as error:
            choices = ", ".join(item.value for item in SearchMode)
            raise ValueError(
                f"unknown mode {args[7]!r}, expected one of: {choices}\n{_USAGE}"
            ) from error
    return _Arguments(config, start, count, args[6], mode)


def run_sequence(
    config: SearchConfig,
    path: str | os.PathLike[str],
    start_frame: int,
    frame_count: int,
    mode: SearchMode = SearchMode.SERIAL,
    directory: str | os.PathLike[str] = ".",
) -> RunResult:
    """Estimate motion for ``frame_count`` frames starting at ``start_frame``.

    Each frame is matched against the one before it and a dot is printed
    per frame. The last previous frame is then compensated with the last
    motion field, compared with the last current frame, and saved.
    """
    rows, cols = config.rows, config.cols
    size = rows * cols
    down, across = config.blocks_down(), config.blocks_across()
    current = bytes(size)
    previous = bytes(size)
    field = MotionField(down, across, (0,) * (down * across), (0,) * (down * across))

    started = time.monotonic_ns()
    with open_sequence(path) as stream:
        for number in range(start_frame, start_frame + frame_count):
            current = read_frame(stream, number, rows, cols)
            previous = read_frame(stream, number - 1, rows, cols)
            field = hierarchical_search(current, previous, config, mode)
            print(".", end="", flush=True)
    elapsed = time.monotonic_ns() - started

    output = motion_compensation(previous, field, config)
    snr = psnr(current, output, rows, cols)
    target = write_frame(output, rows, cols, directory)
    return RunResult(field, output, snr, elapsed, target)


def main(argv: list[str] | None = None) -> int:
    """Command entry point."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        parsed = parse_arguments(args)
    except ValueError as error:
        print(error)
        return _USAGE_STATUS

    config = parsed.config
    if config.rows % config.block_size:
        print("Warning: N Not fully divided. Fixing it")
    if config.cols % config.block_size:
        print("Warning: M Not fully divided. Fixing it")
    print(
        f"Arguments: N={config.rows}, M={config.cols}, B={config.block_size}, "
        f"p={config.search_range}, sframe={parsed.start_frame}, "
        f"nframes={parsed.frame_count}, sequence={parsed.path}, "
        f"N_B={config.blocks_down()}, M_B={config.blocks_across()}"
    )

    try:
        result = run_sequence(
            config, parsed.path, parsed.start_frame, parsed.frame_count, parsed.mode
        )
        print(f"\nTime: {result.elapsed_text} secs ")
        print(f"Frame {result.output_path} was extracted and saved")
        print(f"SNR = {result.snr:f}")
    except SequenceNotFoundError as error:
        print(error)
        return _FAILURE_STATUS
    except OSError:
        print("Cannot write video sequence")
        return _FAILURE_STATUS
    finally:
        print("***Exiting Program***")
    return 0