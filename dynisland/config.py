"""Application configuration and constants.

Holds the project root plus the sampler cadence, memory-pressure thresholds,
GPU cache window and the notch/panel geometry used by the island controller.
"""

from pathlib import Path

# Base paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SETTINGS_FILE_NAME = "dynisland.yaml"

# Sampler
SAMPLE_INTERVAL_MS = 1000
GPU_CACHE_SECONDS = 2.0
CPU_TICKS_PER_SECOND = 100  # psutil reports seconds; counters are kept as integer ticks
DEFAULT_DISK_PATH = "/"
HISTORY_POINTS = 60  # one minute of samples at the default cadence

# Memory pressure: ratio of used/total, both boundaries inclusive
PRESSURE_YELLOW_RATIO = 0.70
PRESSURE_RED_RATIO = 0.85

# GPU fallback estimate (placeholder heuristic, not a measurement)
GPU_ESTIMATE_CPU_WEIGHT = 0.4
GPU_ESTIMATE_JITTER = 5.0
GPU_PROBE_TIMEOUT_S = 2.0

# Notch / panel geometry, in logical pixels with a top-left origin
NOTCH_WIDTH = 200
NOTCH_HEIGHT = 32
PANEL_WIDTH = 320
PANEL_HEIGHT = 140
PANEL_TOP_OFFSET = 40
DETACH_SNAP_DISTANCE = 60
POINTER_POLL_MS = 100  # global cursor sampling for notch hover/click

# Island auto-hide
AUTO_HIDE_S = 3.0
COMPLETION_AUTO_HIDE_S = 8.0
