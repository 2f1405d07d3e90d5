"""Extract one luma frame from a raw 4:2:0 sequence into a raw file."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from hsmotion.frames import (
    SequenceNotFoundError,
    open_sequence,
    read_frame,
    write_frame,
)

_USAGE = (
    "Extracting a frame from 4:2:0.\n"
    "4 variables are required: N M frameNR sequence\n"
    "Example: hsmotion-extract 720 576 10 barb.yuv"
)
_USAGE_STATUS = 3
_FAILURE_STATUS = 1


def extract_frame(
    path: str | os.PathLike[str],
    rows: int,
    cols: int,
    frame_number: int,
    directory: str | os.PathLike[str] = ".",
) -> Path:
    """Save the luma plane of frame ``frame_number`` of ``path`` and return the file written."""
    with open_sequence(path) as stream:
        frame = read_frame(stream, frame_number, rows, cols)
    return write_frame(frame, rows, cols, directory)


def main(argv: list[str] | None = None) -> int:
    """Command entry point: ``N M frameNR sequence``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) < 4:
        print(_USAGE)
        return _USAGE_STATUS
    try:
        rows, cols, frame_number = (int(value) for value in args[:3])
    except ValueError:
        print(f"N, M and frameNR must be integers\n{_USAGE}")
        return _USAGE_STATUS
    path = args[3]
    print(f"Arguments: N={rows}, M={cols}, sframe={frame_number}, sequence={path}")
    try:
        target = extract_frame(path, rows, cols, frame_number)
    except SequenceNotFoundError as error:
        print(error)
        return _FAILURE_STATUS
    except OSError:
        print("Cannot write video sequence")
        return _FAILURE_STATUS
    finally:
        print("***Exiting Program***")
    print(f"Frame {target} was extracted and saved")
    return 0