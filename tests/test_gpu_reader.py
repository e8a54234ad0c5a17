from __future__ import annotations

import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from dynisland.core.errors import ProbeUnavailable
from dynisland.services.gpu_metrics import (
    GpuReader,
    NvidiaSmiProbe,
    PowermetricsProbe,
    parse_powermetrics_output,
)

from conftest import InlineExecutor


class _Clock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class _Probe:
    def __init__(self, name: str, values: list[object]) -> None:
        self.name = name
        self._values = list(values)
        self.calls = 0

    def read(self) -> float | None:
        self.calls += 1
        value = self._values.pop(0) if self._values else None
        if isinstance(value, Exception):
            raise value
        return value  # type: ignore[return-value]


def test_two_reads_within_cache_window_are_identical() -> None:
    clock = _Clock()
    probe = _Probe("nvml", [42.0, 77.0])
    reader = GpuReader([probe], clock=clock, executor=InlineExecutor())

    first = reader.read()
    clock.now += 1.9
    second = reader.read()

    assert second is first
    assert probe.calls == 1


def test_read_after_cache_window_probes_again() -> None:
    clock = _Clock()
    probe = _Probe("nvml", [42.0, 77.0])
    reader = GpuReader([probe], clock=clock, executor=InlineExecutor())

    reader.read()
    clock.now += 2.0
    second = reader.read()

    assert probe.calls == 2
    assert second.percent == 77.0
    assert second.source == "nvml"


def test_falls_back_to_estimate_correlated_with_cpu() -> None:
    reader = GpuReader(
        [_Probe("nvml", [None])], jitter=0.0, clock=_Clock(), executor=InlineExecutor()
    )

    sample = reader.read(cpu_average=50.0)

    assert sample.is_estimate
    assert sample.percent == pytest.approx(20.0)


def test_estimate_stays_in_range_with_jitter() -> None:
    reader = GpuReader([], jitter=5.0, rng=random.Random(7), clock=_Clock())
    for cpu in (0.0, 1.0, 99.0, 100.0, 250.0):
        assert 0.0 <= reader.estimate(cpu) <= 100.0
        # jitter is bounded around the 40% correlation
        assert abs(reader.estimate(cpu) - min(cpu, 100.0) * 0.4) <= 5.0 + 1e-9


def test_unavailable_probe_is_dropped_and_next_probe_used() -> None:
    clock = _Clock()
    dead = _Probe("nvml", [ProbeUnavailable("no driver")])
    smi = _Probe("nvidia-smi", [33.0, 34.0])
    reader = GpuReader([dead, smi], clock=clock, executor=InlineExecutor())

    assert reader.read().source == "nvidia-smi"
    assert reader.active_probes == ["nvidia-smi"]

    clock.now += 5
    reader.read()
    assert dead.calls == 1


def test_transient_probe_error_keeps_probe() -> None:
    clock = _Clock()
    flaky = _Probe("nvml", [RuntimeError("busy"), 12.0])
    reader = GpuReader([flaky], jitter=0.0, clock=clock, executor=InlineExecutor())

    assert reader.read(cpu_average=10.0).is_estimate
    clock.now += 3
    assert reader.read().percent == 12.0
    assert reader.active_probes == ["nvml"]


def test_real_reading_is_clamped() -> None:
    reader = GpuReader([_Probe("nvml", [180.0])], clock=_Clock(), executor=InlineExecutor())
    assert reader.read().percent == 100.0


def test_invalidate_forces_fresh_read() -> None:
    probe = _Probe("nvml", [1.0, 2.0])
    reader = GpuReader([probe], clock=_Clock(), executor=InlineExecutor())
    reader.read()
    reader.invalidate()
    assert reader.read().percent == 2.0


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("**** GPU usage ****\nGPU HW active frequency: 389 MHz\nGPU HW active residency:  12.34% (389 MHz: 12%)", 12.34),
        ("GPU Active: 7%\n", 7.0),
        ("GPU idle residency: 90.1%\n", None),
        ("", None),
    ],
)
def test_parse_powermetrics_output(text: str, expected: float | None) -> None:
    assert parse_powermetrics_output(text) == expected


def test_powermetrics_probe_is_unavailable_off_macos(monkeypatch) -> None:
    monkeypatch.setattr("dynisland.services.gpu_metrics.sys.platform", "linux")
    with pytest.raises(ProbeUnavailable):
        PowermetricsProbe().read()


def test_nvidia_smi_probe_is_unavailable_without_binary(monkeypatch) -> None:
    monkeypatch.setattr("dynisland.services.gpu_metrics.shutil.which", lambda _name: None)
    with pytest.raises(ProbeUnavailable):
        NvidiaSmiProbe().read()


def test_nvidia_smi_probe_parses_first_gpu(monkeypatch) -> None:
    class _Result:
        returncode = 0
        stdout = "37\n5\n"

    monkeypatch.setattr("dynisland.services.gpu_metrics.shutil.which", lambda _name: "/usr/bin/nvidia-smi")
    monkeypatch.setattr("dynisland.services.gpu_metrics.subprocess.run", lambda *a, **k: _Result())
    assert NvidiaSmiProbe().read() == 37.0


class _BlockingProbe:
    name = "powermetrics"

    def __init__(self, value: float) -> None:
        self.value = value
        self.release = threading.Event()

    def read(self) -> float | None:
        self.release.wait(timeout=5)
        return self.value


def test_slow_gpu_backend_does_not_block_read() -> None:
    clock = _Clock()
    probe = _BlockingProbe(64.0)
    pool = ThreadPoolExecutor(max_workers=1)
    reader = GpuReader([probe], jitter=0.0, clock=clock, executor=pool)
    try:
        started = time.perf_counter()
        first = reader.read(cpu_average=50.0)
        elapsed = time.perf_counter() - started

        assert elapsed < 0.5
        assert first.is_estimate
        assert first.percent == pytest.approx(20.0)

        probe.release.set()
        pool.shutdown(wait=True)
        clock.now += 0.5

        fresh = reader.read()
        assert fresh.source == "powermetrics"
        assert fresh.percent == 64.0
    finally:
        probe.release.set()
        pool.shutdown(wait=True)


def test_stale_value_is_kept_while_refresh_runs() -> None:
    clock = _Clock()
    probe = _BlockingProbe(64.0)
    pool = ThreadPoolExecutor(max_workers=1)
    reader = GpuReader([probe], clock=clock, executor=pool)
    try:
        probe.release.set()
        reader.read()
        pool.submit(lambda: None).result()
        clock.now += 0.1
        real = reader.read()
        assert real.percent == 64.0

        probe.release.clear()
        clock.now += 5
        assert reader.read() is real
    finally:
        probe.release.set()
        pool.shutdown(wait=True)


def test_close_shuts_down_owned_worker() -> None:
    reader = GpuReader([_Probe("nvml", [10.0])], clock=_Clock())
    reader.read()
    reader.close()
    assert reader.cached is not None
