import pytest

from funscriptkit.action import FunscriptAction, FunscriptArray
from funscriptkit.heatmap import (
    MAX_RESOLUTION,
    SPEED_TEXTURE_RESOLUTION,
    FunscriptHeatmap,
    ramp_color,
    speed_buffer,
)


def _actions(*points):
    return FunscriptArray(FunscriptAction(at, pos) for at, pos in points)


def test_speed_buffer_empty_is_zero():
    buffer = speed_buffer(10.0, _actions(), 16)
    assert buffer == [0.0] * 16


def test_speed_buffer_single_stroke():
    buffer = speed_buffer(4.0, _actions((0.0, 0), (2.0, 100)), 4)
    assert buffer == [0.125, 0.125, 0.0, 0.0]


def test_speed_buffer_is_clamped():
    buffer = speed_buffer(4.0, _actions((0.0, 0), (0.1, 100), (3.0, 0)), 4)
    assert all(0.0 <= value <= 1.0 for value in buffer)
    assert buffer[0] == 1.0


def test_speed_buffer_default_resolution():
    buffer = speed_buffer(10.0, _actions((1.0, 0), (2.0, 50)))
    assert len(buffer) == SPEED_TEXTURE_RESOLUTION


def test_speed_buffer_non_positive_duration_is_zero():
    buffer = speed_buffer(0.0, _actions((1.0, 0), (2.0, 50)), 8)
    assert buffer == [0.0] * 8


def test_ramp_color_endpoints():
    assert ramp_color(0.0) == (0.0, 0.0, 0.0)
    assert ramp_color(1.0) == (1.0, 0.0, 0.0)
    assert ramp_color(0.2) == pytest.approx((30 / 255, 144 / 255, 1.0))


def test_ramp_color_clamps_input():
    assert ramp_color(5.0) == ramp_color(1.0)
    assert ramp_color(-1.0) == ramp_color(0.0)


def test_bitmap_size_and_alpha():
    heatmap = FunscriptHeatmap()
    bitmap = heatmap.render_to_bitmap(8, 3)
    assert len(bitmap) == 8 * 3 * 4
    assert all(a == 255 for a in bitmap[3::4])


def test_bitmap_without_actions_is_black():
    heatmap = FunscriptHeatmap()
    heatmap.update(10.0, _actions())
    bitmap = heatmap.render_to_bitmap(4, 4)
    rgb = [b for i, b in enumerate(bitmap) if i % 4 != 3]
    assert set(rgb) == {0}


def test_bitmap_fades_towards_top():
    heatmap = FunscriptHeatmap()
    heatmap.update(1.0, _actions((0.0, 0), (0.5, 100), (0.99, 0)))
    width, height = 4, 6
    bitmap = heatmap.render_to_bitmap(width, height)
    row = width * 4
    first, last = bitmap[:row], bitmap[-row:]
    assert sum(first) > sum(last)


def test_bitmap_dimensions_are_capped():
    heatmap = FunscriptHeatmap()
    bitmap = heatmap.render_to_bitmap(MAX_RESOLUTION + 100, 1)
    assert len(bitmap) == MAX_RESOLUTION * 4


@pytest.mark.parametrize("width,height", [(0, 4), (4, 0), (-1, 2)])
def test_bitmap_rejects_bad_dimensions(width, height):
    with pytest.raises(ValueError):
        FunscriptHeatmap().render_to_bitmap(width, height)