import pytest

from hsmotion.compensation import motion_compensation
from hsmotion.config import SearchConfig
from hsmotion.estimation import MotionField


CONFIG = SearchConfig(rows=4, cols=4, block_size=2, search_range=0)
PREVIOUS = bytes(range(16))


def _field(vectors):
    """Field of a 2x2-block frame; ``vectors`` maps block -> (dx, dy)."""
    xs, ys = [], []
    for block in [(0, 0), (0, 1), (1, 0), (1, 1)]:
        dx, dy = vectors.get(block, (0, 0))
        xs.append(dx)
        ys.append(dy)
    return MotionField(2, 2, tuple(xs), tuple(ys))


def _block(frame, top, left):
    return [frame[(top + k) * 4 + left + l] for k in range(2) for l in range(2)]


def test_zero_vectors_copy_previous_frame():
    assert motion_compensation(PREVIOUS, _field({}), CONFIG) == PREVIOUS


def test_inner_vector_moves_block():
    out = motion_compensation(PREVIOUS, _field({(0, 0): (1, 1)}), CONFIG)
    assert _block(out, 0, 0) == [5, 6, 9, 10]
    assert _block(out, 2, 2) == _block(PREVIOUS, 2, 2)


def test_vector_above_frame_uses_first_block_row():
    out = motion_compensation(PREVIOUS, _field({(0, 0): (-1, 0)}), CONFIG)
    assert _block(out, 0, 0) == [0, 1, 0, 1]


def test_vector_below_frame_uses_last_block_row():
    out = motion_compensation(PREVIOUS, _field({(1, 0): (1, 0)}), CONFIG)
    assert _block(out, 2, 0) == [12, 13, 12, 13]


def test_vector_left_of_frame_uses_first_block_column():
    out = motion_compensation(PREVIOUS, _field({(0, 0): (0, -1)}), CONFIG)
    assert _block(out, 0, 0) == [PREVIOUS[0], PREVIOUS[0], PREVIOUS[4], PREVIOUS[4]]


def test_vector_right_of_frame_uses_last_block_column():
    out = motion_compensation(PREVIOUS, _field({(0, 1): (0, 1)}), CONFIG)
    assert _block(out, 0, 2) == [PREVIOUS[3], PREVIOUS[3], PREVIOUS[7], PREVIOUS[7]]


def test_partial_blocks_keep_frame_size():
    config = SearchConfig(rows=3, cols=4, block_size=2, search_range=0)
    previous = bytes(range(12))
    field = MotionField(2, 2, (0, 0, 0, 0), (0, 0, 0, 0))
    out = motion_compensation(previous, field, config)
    assert len(out) == 12
    assert out == previous


def test_field_shape_mismatch_raises():
    field = MotionField(1, 1, (0,), (0,))
    with pytest.raises(ValueError):
        motion_compensation(PREVIOUS, field, CONFIG)


def test_short_previous_frame_raises():
    with pytest.raises(ValueError):
        motion_compensation(PREVIOUS[:10], _field({}), CONFIG)