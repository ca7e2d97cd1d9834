import math

import pytest

from gizmo3d.core import SnapAccumulator, SnapConfig, snap_value


def test_snap_value_rounds_half_up() -> None:
    assert snap_value(2.5, 1.0) == 3.0
    assert snap_value(-2.5, 1.0) == -2.0
    assert snap_value(37.5, 15.0) == 45.0
    assert snap_value(44.0, 15.0) == 45.0
    assert snap_value(0.24, 0.1) == pytest.approx(0.2)


@pytest.mark.parametrize("increment", [None, 0.0, -1.0, math.nan, math.inf])
def test_invalid_increment_leaves_value_untouched(increment) -> None:
    assert snap_value(1.37, increment) == 1.37
    assert not SnapConfig(enabled=True, increment=increment).active


def test_disabled_snap_passes_raw_value_through() -> None:
    accumulator = SnapAccumulator()
    assert accumulator.update(1.37, SnapConfig(enabled=False)) == (1.37, False)


def test_absolute_snap_is_relative_to_origin() -> None:
    config = SnapConfig(enabled=True, increment=0.1, to_absolute=True)
    accumulator = SnapAccumulator(origin=1.0)
    value, active = accumulator.update(1.26, config)
    assert active
    assert value == pytest.approx(1.3)


def test_relative_snap_commits_whole_steps() -> None:
    config = SnapConfig(enabled=True, increment=1.0, to_absolute=False)
    accumulator = SnapAccumulator()
    assert accumulator.update(0.4, config) == (0.0, True)
    assert accumulator.update(0.6, config) == (1.0, True)
    assert accumulator.update(0.9, config) == (1.0, True)
    assert accumulator.update(1.7, config) == (2.0, True)
    assert accumulator.committed == 2.0


def test_relative_snap_carries_rounding_remainder() -> None:
    config = SnapConfig(enabled=True, increment=1.0, to_absolute=False)
    accumulator = SnapAccumulator()
    values = [accumulator.update(raw, config)[0] for raw in (0.5, 1.0, 1.5, 2.0, 2.5, 3.0)]
    assert values == [1.0, 1.0, 2.0, 2.0, 3.0, 3.0]


def test_relative_snap_tracks_raw_total_over_long_drags() -> None:
    config = SnapConfig(enabled=True, increment=1.0, to_absolute=False)
    accumulator = SnapAccumulator()
    for step in range(1, 201):
        raw = step * 0.3
        value, _ = accumulator.update(raw, config)
        assert abs(value - raw) <= 0.5 + 1e-9
