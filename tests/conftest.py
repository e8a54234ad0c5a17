from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Executor, Future

import pytest


class FakeTimer:
    """Timer port double: fires only when the test says so."""

    def __init__(self, callback: Callable[[], None], single_shot: bool) -> None:
        self.callback = callback
        self.single_shot = single_shot
        self.active = False
        self.interval_ms: int | None = None
        self.starts = 0

    def start(self, interval_ms: int) -> None:
        self.active = True
        self.interval_ms = interval_ms
        self.starts += 1

    def stop(self) -> None:
        self.active = False

    def is_active(self) -> bool:
        return self.active

    def fire(self) -> None:
        if self.single_shot:
            self.active = False
        self.callback()


class FakeTimerFactory:
    def __init__(self) -> None:
        self.created: list[FakeTimer] = []

    def __call__(self, callback: Callable[[], None], *, single_shot: bool = False) -> FakeTimer:
        timer = FakeTimer(callback, single_shot)
        self.created.append(timer)
        return timer

    def active(self) -> list[FakeTimer]:
        return [t for t in self.created if t.active]


@pytest.fixture
def timer_factory() -> FakeTimerFactory:
    return FakeTimerFactory()


class FakeCounterReader:
    """Scripted CPU snapshots; memory and disk are fixed."""

    def __init__(self, snapshots=None, core_count: int = 2) -> None:
        from dynisland.features.system_monitor.domain import CpuSnapshot, DiskSample, MemorySample

        self.core_count = core_count
        self._snapshots = list(snapshots or [])
        self._last = CpuSnapshot.zeros(core_count)
        self.memory = MemorySample.from_bytes(4 * 1024**3, 12 * 1024**3, 16 * 1024**3)
        self.disk = DiskSample.from_bytes(250 * 1024**3, 500 * 1024**3)
        self.cpu_reads = 0
        self.fail = False
        self.unreadable = False

    def read_cpu(self):
        self.cpu_reads += 1
        if self.fail:
            raise RuntimeError("counter source went away")
        if self.unreadable:
            return None
        if self._snapshots:
            self._last = self._snapshots.pop(0)
        return self._last

    def read_memory(self):
        return self.memory

    def read_disk(self):
        return self.disk


class FakeGpuSource:
    def __init__(self, percent: float = 25.0) -> None:
        self.percent = percent
        self.calls: list[float] = []
        self.closed = False

    def read(self, cpu_average: float = 0.0):
        from dynisland.features.system_monitor.domain import GpuSample

        self.calls.append(cpu_average)
        return GpuSample(percent=self.percent, source="nvml", measured_at=float(len(self.calls)))

    def close(self) -> None:
        self.closed = True


class FakePanel:
    def __init__(self) -> None:
        self.visible = False
        self.position: tuple[int, int] | None = None
        self.rendered: list[object] = []
        self.moves: list[tuple[int, int]] = []

    def show(self) -> None:
        self.visible = True

    def hide(self) -> None:
        self.visible = False

    def move_to(self, x: int, y: int) -> None:
        self.position = (x, y)
        self.moves.append((x, y))

    def is_visible(self) -> bool:
        return self.visible

    def show_sample(self, sample) -> None:
        self.rendered.append(sample)


@pytest.fixture
def reader() -> FakeCounterReader:
    return FakeCounterReader()


@pytest.fixture
def gpu() -> FakeGpuSource:
    return FakeGpuSource()


@pytest.fixture
def panel() -> FakePanel:
    return FakePanel()


class InlineExecutor(Executor):
    """Runs submitted work immediately on the calling thread."""

    def submit(self, fn, /, *args, **kwargs):
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future
