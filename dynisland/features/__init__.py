"""Feature modules: system monitor domain and notch geometry.

This package does not import Qt at import-time so it stays usable headless
(tests, the JSON-lines mode, CI).
"""

from __future__ import annotations

__all__: list[str] = []
