# hsmotion

Hierarchical-search block-matching motion estimation for raw YUV 4:2:0
video sequences.

Each block of the current frame is searched for in three stages:

1. on copies of both frames subsampled by 4,
2. then refined on copies subsampled by 2,
3. then refined at full resolution.

The resulting motion field rebuilds the current frame from the previous one
by motion compensation. The reconstruction is scored by its peak
signal-to-noise ratio (PSNR).

Only the luma (Y) plane of each frame is used. Frames are stored one after
another in the file, and each occupies `rows * cols * 3 // 2` bytes. Luma
bytes are expanded from studio range with `int(1.164 * (value - 16))`. The
result is clipped at 255 and stored as an unsigned byte, so values below 16
wrap around.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Command line

### Motion estimation over a sequence

```
hsmotion N M B p start_frame frame_count sequence.yuv [mode]
```

The arguments are:

- `N`, `M`: frame height and width in pixels.
- `B`: block size.
- `p`: search range. The coarse stage searches `p // 4` positions each way.
- `start_frame`: the first frame to process. Each frame is estimated against
  the frame before it. For frame 0 there is no earlier frame, and the
  previous-frame data is read from wherever the file position happens to be.
  Start at 1 or later for a meaningful comparison.
- `frame_count`: how many frames to process.
- `sequence.yuv`: the raw YUV 4:2:0 input file.
- `mode` (optional): `serial` (the default), `staged` or `parallel`. All
  three modes give the same result; they differ only in scheduling.

Example:

```
hsmotion 720 576 16 7 1 1 barb.yuv
```

If `N` or `M` is not a multiple of `B`, a warning is printed and one more
row or column of blocks is added. The program prints its arguments, then
one dot per processed frame, then the elapsed time.

After the loop it takes the last previous frame and compensates it with the
last motion field. It writes the reconstruction to `hsTEST_<N>x<M>.raw` in
the working directory, then prints the PSNR against the last current frame.

Exit status:

| Status | Meaning |
| --- | --- |
| 0 | success |
| 3 | missing or invalid arguments; the usage text is printed |
| 1 | the sequence cannot be opened or the output cannot be written |

### Extracting a single frame

```
hsmotion-extract N M frame_number sequence.yuv
```

This reads the luma plane of one frame and converts it to pixel values. It
writes the result as a raw `N × M` byte file, `hsTEST_<N>x<M>.raw`, in the
working directory. The exit statuses are the same as for `hsmotion`.

## Library

### `hsmotion.config`

`SearchConfig(rows, cols, block_size, search_range)` holds the frame
geometry and search settings. Dimensions and block size must be positive,
and the search range must not be negative; otherwise `ValueError` is raised.

- `blocks_down()` and `blocks_across()` count the blocks, a partial block
  included.
- `fits_exactly()` tells whether the frame divides evenly into blocks.

### `hsmotion.frames`

- `open_sequence(path)` opens a sequence for binary reading. If the file
  cannot be opened it raises `SequenceNotFoundError`, a subclass of
  `FileNotFoundError`.
- `read_frame(stream, frame_number, rows, cols)` returns one frame's luma
  pixels as `bytes`. Bytes missing at the end of the file are converted as
  an end-of-file value.
- `write_frame(frame, rows, cols, directory=".")` writes a frame as raw
  bytes and returns the `Path` written.
- `output_filename(rows, cols)` gives the name of that file.
- `frame_stride(rows, cols)` gives the size of one 4:2:0 frame in bytes.
- `luma_to_pixel(value)` converts a single luma byte.

### `hsmotion.estimation`

- `hierarchical_search(current, previous, config, mode=SearchMode.SERIAL)`
  returns a `MotionField`.
  - `MotionField.vector(block_row, block_col)` gives the displacement
    `(rows, cols)` of one block.
  - `vectors_x` and `vectors_y` hold all vectors, row-major by block.
- `subsample(frame, rows, cols, factor)` reduces a frame by 2 or 4. Each
  output pixel is its window's sum divided by four, stored as a byte.
- `SearchMode` has three members:
  - `SERIAL`: one block at a time through all stages.
  - `STAGED`: each stage is finished for every block before the next stage.
  - `PARALLEL`: blocks are searched on a thread pool.

### `hsmotion.compensation`

`motion_compensation(previous, field, config)` rebuilds a frame by moving
each block of `previous` by its vector. A displaced pixel may fall outside
the frame. It is then taken from the block's own edge row or column instead.

### `hsmotion.snr`

`psnr(current, output, rows, cols)` returns the PSNR in decibels. Identical
frames give `math.inf`.

### `hsmotion.worktools`

- `compute_work_effort(maxjobs, nprocs)` splits a number of jobs into
  contiguous `WorkRange`s (`start`, `end`, `length`), one per worker. When
  the split is uneven, the first workers get one extra job each.
- `describe_work_effort(maxjobs, nprocs)` returns a line describing that
  split.
- `zeros(xdim, ydim)` creates a flat row-major array of zeros.
- `format_array(values, xdim, ydim)` and `format_array_table(values, xdim,
  ydim)` render a flat row-major array as text.

### `hsmotion.cli` and `hsmotion.extract`

- `hsmotion.cli.run_sequence(config, path, start_frame, frame_count,
  mode=SearchMode.SERIAL, directory=".")` runs the whole pipeline.
  - It returns a `RunResult` with `field`, `output`, `snr`, `elapsed_ns`,
    `elapsed_text` and `output_path`.
  - It prints one dot per frame.
- `hsmotion.cli.parse_arguments(argv)` parses the command's arguments.
- `hsmotion.extract.extract_frame(path, rows, cols, frame_number,
  directory=".")` saves one frame and returns the path written.

## What it does not do

- Chroma planes are skipped, not processed.
- Nothing is encoded, decoded or displayed.
- Only the last reconstructed frame of a run is saved, as headerless raw
  luma bytes. Individual motion vectors can be read through the library but
  are not written out by the command.