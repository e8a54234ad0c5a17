"""GPU utilization with a short cache and a CPU-correlated estimate as fallback.

Direct readings come from NVML (nvidia-ml-py), ``nvidia-smi`` or, on macOS,
``powermetrics``. When none of them answers, the reader estimates a value
from the current CPU average so the display never goes blank.
"""
from __future__ import annotations

import logging
import random
import re
import shutil
import subprocess
import sys
import time
import warnings
from collections.abc import Callable, Sequence
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import NamedTuple, Protocol

from dynisland.config import (
    GPU_CACHE_SECONDS,
    GPU_ESTIMATE_CPU_WEIGHT,
    GPU_ESTIMATE_JITTER,
    GPU_PROBE_TIMEOUT_S,
)
from dynisland.core.errors import ProbeUnavailable
from dynisland.core.observability.timing import time_block
from dynisland.features.system_monitor.domain import GpuSample, clamp_percent

log = logging.getLogger(__name__)

_POWERMETRICS_RE = re.compile(
    r"GPU\s+(?:HW\s+)?active(?:\s+residency)?:\s*([0-9]+(?:\.[0-9]+)?)\s*%",
    re.IGNORECASE,
)


class GpuProbe(Protocol):
    name: str

    def read(self) -> float | None:
        """Utilization 0-100, None when this attempt produced nothing.

        Raises ProbeUnavailable when the backend can never work here.
        """


class NvmlProbe:
    name = "nvml"

    def __init__(self, device_index: int = 0) -> None:
        self._device_index = device_index
        self._nvml = None
        self._handle = None

    def _ensure(self):
        if self._handle is not None:
            return self._nvml, self._handle
        try:
            with warnings.catch_warnings():
                warnings.simplefilter("ignore", FutureWarning)
                import pynvml
        except ImportError as e:
            raise ProbeUnavailable("nvidia-ml-py is not installed", cause=e) from e
        try:
            pynvml.nvmlInit()
            handle = pynvml.nvmlDeviceGetHandleByIndex(self._device_index)
        except Exception as e:
            raise ProbeUnavailable("NVML could not open a GPU", cause=e) from e
        self._nvml, self._handle = pynvml, handle
        return pynvml, handle

    def read(self) -> float | None:
        nvml, handle = self._ensure()
        util = nvml.nvmlDeviceGetUtilizationRates(handle)
        return float(util.gpu)

    def close(self) -> None:
        if self._nvml is None:
            return
        try:
            self._nvml.nvmlShutdown()
        except Exception:
            log.debug("nvmlShutdown failed", exc_info=True)
        self._nvml = None
        self._handle = None


class NvidiaSmiProbe:
    name = "nvidia-smi"

    def __init__(self, timeout_s: float = GPU_PROBE_TIMEOUT_S) -> None:
        self._timeout_s = timeout_s

    def read(self) -> float | None:
        exe = shutil.which("nvidia-smi")
        if exe is None:
            raise ProbeUnavailable("nvidia-smi not found on PATH")
        r = subprocess.run(
            [exe, "--query-gpu=utilization.gpu", "--format=csv,noheader,nounits"],
            capture_output=True,
            text=True,
            timeout=self._timeout_s,
        )
        if r.returncode != 0 or not r.stdout.strip():
            return None
        first = r.stdout.strip().splitlines()[0].strip()
        try:
            return float(first.split()[0])
        except (ValueError, IndexError):
            return None


def parse_powermetrics_output(text: str) -> float | None:
    """Extract the GPU active percentage from ``powermetrics`` output."""
    m = _POWERMETRICS_RE.search(text or "")
    if m is None:
        return None
    try:
        return float(m.group(1))
    except ValueError:
        return None


class PowermetricsProbe:
    """macOS only; needs passwordless sudo for powermetrics."""

    name = "powermetrics"

    def __init__(self, timeout_s: float = GPU_PROBE_TIMEOUT_S) -> None:
        self._timeout_s = timeout_s

    def read(self) -> float | None:
        if sys.platform != "darwin":
            raise ProbeUnavailable("powermetrics exists on macOS only")
        if shutil.which("powermetrics") is None or shutil.which("sudo") is None:
            raise ProbeUnavailable("powermetrics/sudo not available")
        r = subprocess.run(
            ["sudo", "-n", "powermetrics", "--samplers", "gpu_power", "-n", "1", "-i", "200"],
            capture_output=True,
            text=True,
            timeout=self._timeout_s,
        )
        if r.returncode != 0:
            if "password" in (r.stderr or "").lower():
                raise ProbeUnavailable("powermetrics requires interactive sudo")
            return None
        return parse_powermetrics_output(r.stdout)


def default_probes() -> list[GpuProbe]:
    return [NvmlProbe(), NvidiaSmiProbe(), PowermetricsProbe()]


class _ProbeRound(NamedTuple):
    value: float | None
    source: str
    unavailable: tuple[str, ...]


def _run_probes(probes: Sequence[GpuProbe]) -> _ProbeRound:
    """One pass over the probe chain; runs on the probe worker thread."""
    unavailable: list[str] = []
    for probe in probes:
        try:
            with time_block(f"gpu probe {probe.name}", logger=log, slow_ms=250.0):
                value = probe.read()
        except ProbeUnavailable as e:
            log.info("GPU probe disabled: %s", e, extra={"probe": probe.name})
            unavailable.append(probe.name)
            continue
        except Exception:
            log.debug("GPU probe %s failed", probe.name, exc_info=True)
            continue
        if value is not None:
            return _ProbeRound(value, probe.name, tuple(unavailable))
    return _ProbeRound(None, "estimate", tuple(unavailable))


class GpuReader:
    """Throttled, non-blocking GPU reads.

    Probes (NVML, nvidia-smi, powermetrics) run on a single worker thread;
    ``read()`` never waits for them. A finished probe round is collected by
    the next ``read()``, so the cache and the probe list are only changed on
    the caller's (timer) thread. A reading is reused for ``cache_seconds``;
    until the first round finishes, the CPU-correlated estimate is shown.
    Never raises.
    """

    def __init__(
        self,
        probes: Sequence[GpuProbe] | None = None,
        *,
        cache_seconds: float = GPU_CACHE_SECONDS,
        jitter: float = GPU_ESTIMATE_JITTER,
        cpu_weight: float = GPU_ESTIMATE_CPU_WEIGHT,
        clock: Callable[[], float] = time.monotonic,
        rng: random.Random | None = None,
        executor: Executor | None = None,
    ) -> None:
        self._probes: list[GpuProbe] = list(default_probes() if probes is None else probes)
        self._cache_seconds = cache_seconds
        self._jitter = abs(jitter)
        self._cpu_weight = cpu_weight
        self._clock = clock
        self._rng = rng or random.Random()
        self._executor = executor
        self._owns_executor = executor is None
        self._pending: Future[_ProbeRound] | None = None
        self._cached: GpuSample | None = None

    @property
    def active_probes(self) -> list[str]:
        return [p.name for p in self._probes]

    @property
    def cached(self) -> GpuSample | None:
        return self._cached

    def read(self, cpu_average: float = 0.0) -> GpuSample:
        now = self._clock()
        self._collect(now, cpu_average)
        cached = self._cached
        if cached is not None and (now - cached.measured_at) < self._cache_seconds:
            return cached

        self._refresh()
        self._collect(now, cpu_average)
        if self._cached is not cached:
            return self._cached
        if self._pending is not None and cached is not None:
            # Probe round still running: keep showing the last value.
            return cached
        sample = GpuSample(percent=self.estimate(cpu_average), source="estimate", measured_at=now)
        self._cached = sample
        return sample

    def estimate(self, cpu_average: float) -> float:
        base = clamp_percent(cpu_average) * self._cpu_weight
        return clamp_percent(base + self._rng.uniform(-self._jitter, self._jitter))

    def invalidate(self) -> None:
        self._cached = None

    def close(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        if self._executor is not None and self._owns_executor:
            self._executor.shutdown(wait=True, cancel_futures=True)
            self._executor = None
        for probe in self._probes:
            close = getattr(probe, "close", None)
            if close is not None:
                close()

    def _refresh(self) -> None:
        if self._pending is not None or not self._probes:
            return
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="gpu-probe")
            self._owns_executor = True
        self._pending = self._executor.submit(_run_probes, tuple(self._probes))

    def _collect(self, now: float, cpu_average: float) -> None:
        pending = self._pending
        if pending is None or not pending.done():
            return
        self._pending = None
        if pending.cancelled():
            return
        try:
            result = pending.result()
        except Exception:
            log.debug("GPU probe round failed", exc_info=True)
            result = _ProbeRound(None, "estimate", ())
        if result.unavailable:
            self._probes = [p for p in self._probes if p.name not in result.unavailable]
        value, source = result.value, result.source
        if value is None:
            value, source = self.estimate(cpu_average), "estimate"
        self._cached = GpuSample(percent=clamp_percent(value), source=source, measured_at=now)
