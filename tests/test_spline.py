import pytest

from funscriptkit.action import FunscriptAction, FunscriptArray
from funscriptkit.spline import FunscriptSpline, catmull_rom_spline, sample_at_index


def make(points):
    return FunscriptArray(FunscriptAction(t, p) for t, p in points)


WAVE = make([(0.0, 0), (1.0, 80), (2.0, 10), (3.0, 100), (4.0, 30)])


def test_empty_and_single():
    spline = FunscriptSpline()
    assert spline.sample(FunscriptArray(), 1.0) == 0.0
    assert spline.sample(make([(1.0, 40)]), 5.0) == pytest.approx(0.4)
    assert sample_at_index(FunscriptArray(), 0, 1.0) == 0.0


def test_sample_hits_nodes():
    spline = FunscriptSpline()
    for action in WAVE:
        assert spline.sample(WAVE, action.at_s) == pytest.approx(action.pos / 100.0)


def test_outside_range_returns_end_positions():
    spline = FunscriptSpline()
    assert spline.sample(WAVE, -5.0) == pytest.approx(WAVE[0].pos / 100.0)
    assert spline.sample(WAVE, 50.0) == pytest.approx(WAVE[-1].pos / 100.0)


def test_flat_segment_is_constant():
    actions = make([(0.0, 0), (1.0, 60), (2.0, 60), (3.0, 0)])
    spline = FunscriptSpline()
    for t in (1.1, 1.5, 1.9):
        assert spline.sample(actions, t) == pytest.approx(0.6)


def test_linear_data_is_reproduced():
    actions = make([(0.0, 0), (1.0, 20), (2.0, 40), (3.0, 60)])
    value = catmull_rom_spline(actions, 1, 1.5)
    assert value == pytest.approx((actions[1].pos + actions[2].pos) / 200.0)


def test_cache_does_not_change_results():
    times = [0.2, 3.7, 1.4, 1.6, 2.5, 0.9, 3.1, 2.0]
    cached = FunscriptSpline()
    for t in times:
        fresh = FunscriptSpline()
        assert cached.sample(WAVE, t) == pytest.approx(fresh.sample(WAVE, t))


def test_sequential_sampling_advances_cache():
    spline = FunscriptSpline()
    spline.sample(WAVE, 0.5)
    spline.sample(WAVE, 1.5)
    assert spline.cache_idx == 1
    spline.sample(WAVE, 3.5)
    assert spline.cache_idx == 3


def test_sample_at_index_matches_segment():
    assert sample_at_index(WAVE, 2, 2.4) == pytest.approx(catmull_rom_spline(WAVE, 2, 2.4))
    assert sample_at_index(WAVE, 1, 1.0) == pytest.approx(WAVE[1].pos / 100.0)


def test_sample_at_index_outside_segment_returns_last():
    assert sample_at_index(WAVE, 0, 3.5) == pytest.approx(WAVE[-1].pos / 100.0)
    assert sample_at_index(WAVE, 4, 4.0) == pytest.approx(WAVE[-1].pos / 100.0)