"""Error types shared by the counter readers and the settings loader.

None of them reach the display: readers turn them into zeros or estimates,
and the settings loader falls back to defaults.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False)
class AppError(Exception):
    message: str
    cause: Exception | None = None

    def __str__(self) -> str:
        return self.message if self.cause is None else f"{self.message} (cause: {self.cause})"


class ValidationError(AppError):
    """Settings file or override that cannot be interpreted."""


class InfrastructureError(AppError):
    """OS, driver or subprocess failure."""


class ProbeUnavailable(InfrastructureError):
    """A counter backend cannot work on this machine (missing driver, binary or permission)."""
