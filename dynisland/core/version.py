"""Build/version metadata for ``--version`` and the log banner."""

from __future__ import annotations

import os
from importlib import metadata

DIST_NAME = "dynisland"


def _installed_version() -> str:
    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0-dev"


def get_build_info() -> dict[str, str]:
    """Return build metadata.

    DYNISLAND_VERSION and DYNISLAND_GIT_SHA (set by release builds) take
    precedence over the installed distribution's version.
    """
    return {
        "version": os.getenv("DYNISLAND_VERSION", "").strip() or _installed_version(),
        "git_sha": os.getenv("DYNISLAND_GIT_SHA", "").strip() or "dev",
    }


def get_version_string() -> str:
    info = get_build_info()
    return f"v{info['version']} ({info['git_sha']})"
