from __future__ import annotations

import pytest

from dynisland.features.system_monitor.delta import CpuDeltaCalculator, compute_utilization
from dynisland.features.system_monitor.domain import CoreTicks, CpuSnapshot


def _snap(*cores: tuple[int, int, int, int]) -> CpuSnapshot:
    return CpuSnapshot(cores=tuple(CoreTicks(*c) for c in cores))


def test_busy_share_of_elapsed_ticks() -> None:
    prev = _snap((100, 50, 0, 850))
    curr = _snap((150, 60, 0, 890))

    util = compute_utilization(prev, curr)

    assert util.per_core == pytest.approx((60.0,))


def test_nice_ticks_count_as_busy() -> None:
    util = compute_utilization(_snap((0, 0, 0, 0)), _snap((10, 10, 30, 50)))
    assert util.per_core == pytest.approx((50.0,))


def test_zero_elapsed_ticks_gives_zero_not_division_error() -> None:
    same = _snap((5, 5, 0, 90), (1, 1, 1, 1))
    util = compute_utilization(same, same)
    assert util.per_core == (0.0, 0.0)


def test_missing_previous_snapshot_is_a_cold_start() -> None:
    util = compute_utilization(None, _snap((1, 2, 3, 4), (5, 6, 7, 8)))
    assert util.per_core == (0.0, 0.0)


def test_core_count_mismatch_yields_zeros_sized_to_current() -> None:
    util = compute_utilization(_snap((1, 1, 1, 1)), _snap((2, 2, 2, 2), (3, 3, 3, 3), (4, 4, 4, 4)))
    assert util.per_core == (0.0, 0.0, 0.0)


def test_counter_reset_never_leaves_0_100_range() -> None:
    prev = _snap((1000, 1000, 0, 1000), (10, 10, 0, 10))
    curr = _snap((5, 5, 0, 2000), (20, 30, 0, 10))

    util = compute_utilization(prev, curr)

    assert util.per_core[0] == 0.0  # busy counters went backwards
    assert util.per_core[1] == pytest.approx(100.0)
    assert all(0.0 <= v <= 100.0 for v in util.per_core)


def test_calculator_stores_baseline_even_on_mismatch() -> None:
    calc = CpuDeltaCalculator()
    first = _snap((100, 50, 0, 850))
    assert calc.update(first).per_core == (0.0,)
    assert calc.baseline is first

    grown = _snap((100, 50, 0, 850), (0, 0, 0, 0))
    assert calc.update(grown).per_core == (0.0, 0.0)
    assert calc.baseline is grown

    nxt = _snap((150, 60, 0, 890), (10, 0, 0, 10))
    assert calc.update(nxt).per_core == pytest.approx((60.0, 50.0))


def test_reset_forgets_baseline() -> None:
    calc = CpuDeltaCalculator()
    calc.update(_snap((1, 1, 1, 1)))
    calc.reset()
    assert calc.baseline is None
    assert calc.update(_snap((9, 9, 9, 9))).per_core == (0.0,)
