# -*- coding: utf-8 -*-
"""Application version detection utilities.

Provides a single public function, ``get_app_version()``, which reads the
installed distribution metadata. Running from a source checkout without an
install yields ``vdev``.
"""

from __future__ import annotations

from importlib import metadata
from typing import Optional

_CACHED_VERSION: Optional[str] = None


def get_app_version() -> str:
    """Return the application version string (e.g., ``v1.2.3``)."""
    global _CACHED_VERSION
    if _CACHED_VERSION:
        return _CACHED_VERSION

    try:
        text = metadata.version("officify").strip()
    except metadata.PackageNotFoundError:
        text = ""

    if text:
        _CACHED_VERSION = text if text.startswith("v") else f"v{text}"
    else:
        _CACHED_VERSION = "vdev"
    return _CACHED_VERSION
