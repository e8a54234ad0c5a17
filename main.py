"""
Entry point for the Dynamic Island panel.

Run: python main.py               (tray icon + floating panel)
     python main.py --headless    (one JSON line per sample on stdout)
"""
from __future__ import annotations

import argparse
import json
import logging
import signal
import sys
from dataclasses import replace

from dynisland.core.observability.logging_config import setup_logging
from dynisland.core.version import get_version_string
from dynisland.features.settings_schema import load_settings

log = logging.getLogger("dynisland")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="dynisland", description="Notch panel with live system stats.")
    p.add_argument("--headless", action="store_true", help="print samples as JSON lines, no GUI")
    p.add_argument("--count", type=int, default=0, help="headless: stop after N samples (0 = forever)")
    p.add_argument("--interval-ms", type=int, default=None, help="override the sampling interval")
    p.add_argument("--version", action="version", version=get_version_string())
    return p.parse_args(argv)


def run_headless(count: int, interval_ms: int | None) -> int:
    from dynisland.application.container import Container
    from dynisland.core.events import StatsSampled
    from dynisland.ui.infrastructure.application import create_core_application
    from dynisland.ui.infrastructure.qt_timer import qt_timer_factory

    app = create_core_application()
    settings = load_settings()
    if interval_ms:
        settings = replace(settings, interval_ms=max(100, interval_ms))
    container = Container(settings=settings, timer_factory=qt_timer_factory)
    sampler = container.sampler

    def _emit(ev: StatsSampled) -> None:
        sys.stdout.write(json.dumps(ev.sample.to_dict()) + "\n")
        sys.stdout.flush()
        if count and sampler.ticks >= count:
            sampler.stop()
            app.quit()

    container.event_bus.subscribe(StatsSampled, _emit)
    signal.signal(signal.SIGINT, lambda *_: app.quit())
    app.aboutToQuit.connect(container.shutdown)
    log.info("Sampling every %d ms", settings.interval_ms)
    sampler.start()
    if count and sampler.ticks >= count:
        # --count 1: the immediate sample already satisfied it.
        container.shutdown()
        return 0
    return app.exec()


def run_gui() -> int:
    from dynisland.ui.infrastructure import (
        Container,
        create_application,
        install_error_boundary,
    )
    from dynisland.ui.island.tray import install_tray

    app = create_application()
    container = Container()
    controller = container.island_controller
    tray = install_tray(app, container.event_bus)
    container.pointer_poller.start()

    def _notify(text: str) -> None:
        if tray is not None:
            tray.notify(text)

    install_error_boundary(_notify)
    app.aboutToQuit.connect(container.shutdown)
    signal.signal(signal.SIGINT, lambda *_: app.quit())

    if tray is None:
        log.warning("No system tray available; showing the panel once")
    controller.show()
    return app.exec()


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    # Headless mode owns stdout for JSON lines; logs go to stderr.
    setup_logging(stream=sys.stderr if args.headless else None)
    log.info("Dynamic Island %s", get_version_string())
    if args.headless:
        return run_headless(args.count, args.interval_ms)
    return run_gui()


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(0)
