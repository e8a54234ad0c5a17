"""Where the app keeps its logs and settings file."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from dynisland.config import PROJECT_ROOT

APP_DIR_NAME = "dynisland"
ENV_STATE_DIR = "DYNISLAND_STATE_DIR"

log = logging.getLogger(__name__)


def _user_data_dir() -> Path:
    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA") or Path.home() / "AppData" / "Roaming")
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.environ.get("XDG_DATA_HOME") or Path.home() / ".local" / "share")
    return (base / APP_DIR_NAME).resolve()


def _is_writable(directory: Path) -> bool:
    try:
        directory.mkdir(parents=True, exist_ok=True)
        probe = directory / ".write_test"
        probe.write_text("ok", encoding="utf-8")
        probe.unlink(missing_ok=True)
    except OSError:
        return False
    return True


def get_app_state_dir(app_folder_name: str = ".app_state") -> Path:
    """Writable directory for logs and ``dynisland.yaml``.

    DYNISLAND_STATE_DIR wins when set. Otherwise a project-local
    ``.app_state`` is used when writable (running from a checkout), and the
    OS user data dir after that.
    """
    override = os.environ.get(ENV_STATE_DIR)
    if override:
        return Path(override).expanduser().resolve()
    local = PROJECT_ROOT / app_folder_name
    if _is_writable(local):
        return local
    log.debug("%s is not writable; using the user data dir", local)
    return _user_data_dir()
