from pathlib import Path

import pytest

from hsmotion.extract import extract_frame, main
from hsmotion.frames import (
    SequenceNotFoundError,
    frame_stride,
    luma_to_pixel,
    output_filename,
)

ROWS, COLS = 2, 2


@pytest.fixture
def sequence(tmp_path):
    stride = frame_stride(ROWS, COLS)
    data = bytes(range(20, 20 + 3 * stride))
    path = tmp_path / "clip.yuv"
    path.write_bytes(data)
    return path, data, stride


def _expected(data, stride, frame_number):
    start = stride * frame_number
    return bytes(luma_to_pixel(b) for b in data[start : start + ROWS * COLS])


def test_extract_frame_writes_luma_plane(sequence, tmp_path):
    path, data, stride = sequence
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    target = extract_frame(path, ROWS, COLS, 1, out_dir)
    assert target == out_dir / output_filename(ROWS, COLS)
    assert target.read_bytes() == _expected(data, stride, 1)


def test_extract_first_frame(sequence, tmp_path):
    path, data, stride = sequence
    target = extract_frame(path, ROWS, COLS, 0, tmp_path)
    assert target.read_bytes() == _expected(data, stride, 0)


def test_extract_missing_sequence_raises(tmp_path):
    with pytest.raises(SequenceNotFoundError):
        extract_frame(tmp_path / "missing.yuv", ROWS, COLS, 0, tmp_path)


def test_main_extracts_into_working_directory(sequence, tmp_path, monkeypatch, capsys):
    path, data, stride = sequence
    monkeypatch.chdir(tmp_path)
    status = main([str(ROWS), str(COLS), "2", str(path)])
    out = capsys.readouterr().out
    assert status == 0
    assert f"Arguments: N=2, M=2, sframe=2, sequence={path}" in out
    assert "was extracted and saved" in out
    written = Path(tmp_path) / output_filename(ROWS, COLS)
    assert written.read_bytes() == _expected(data, stride, 2)


def test_main_requires_four_arguments(capsys):
    status = main(["2", "2", "0"])
    out = capsys.readouterr().out
    assert status > 0
    assert "4 variables are required: N M frameNR sequence" in out


def test_main_reports_missing_sequence(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    status = main(["2", "2", "0", "nothing.yuv"])
    out = capsys.readouterr().out
    assert status > 0
    assert "video sequence nothing.yuv doesn't exist" in out
    assert not (tmp_path / output_filename(2, 2)).exists()


def test_main_rejects_non_integer_dimensions(capsys):
    status = main(["wide", "2", "0", "clip.yuv"])
    out = capsys.readouterr().out
    assert status > 0
    assert "must be integers" in out