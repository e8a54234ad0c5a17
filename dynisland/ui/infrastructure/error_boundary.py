from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Callable

log = logging.getLogger(__name__)


def install_error_boundary(on_error: Callable[[str], None] | None = None) -> Callable[[], None]:
    """Route unhandled exceptions (Qt slots, stray threads) to the log.

    ``on_error`` gets a one-line summary, e.g. for a tray balloon. Ctrl+C is
    passed through untouched. Returns a callable that restores the previous hooks.
    """
    prev_sys_hook = sys.excepthook
    prev_thread_hook = threading.excepthook

    def _report(exc_type, exc, tb, where: str) -> None:  # type: ignore[no-untyped-def]
        log.error("Unhandled exception in %s", where, exc_info=(exc_type, exc, tb))
        if on_error is None:
            return
        try:
            on_error(f"{exc_type.__name__}: {exc}")
        except Exception:
            log.debug("Error notification failed", exc_info=True)

    def _sys_hook(exc_type, exc, tb) -> None:  # type: ignore[no-untyped-def]
        if issubclass(exc_type, KeyboardInterrupt):
            prev_sys_hook(exc_type, exc, tb)
            return
        _report(exc_type, exc, tb, "main thread")

    def _thread_hook(args: threading.ExceptHookArgs) -> None:
        if issubclass(args.exc_type, SystemExit):
            return
        name = args.thread.name if args.thread is not None else "unknown"
        _report(args.exc_type, args.exc_value, args.exc_traceback, f"thread {name}")

    sys.excepthook = _sys_hook
    threading.excepthook = _thread_hook

    def _uninstall() -> None:
        sys.excepthook = prev_sys_hook
        threading.excepthook = prev_thread_hook

    return _uninstall
