from __future__ import annotations

"""Locate the ``soffice`` executable.

Priority:

1. explicit path argument
2. ``OFFICIFY_SOFFICE_PATH`` from the environment mapping handed in
3. well-known install locations for the current platform
4. bare ``soffice``, left to the search path

The environment is an argument rather than a global lookup so resolution is
deterministic under test. Nothing is cached; each call checks the candidates again.
"""

import logging
import os
import shutil
import stat
import sys
from typing import List, Mapping, Optional

from officify.core.exceptions import ConverterNotFoundError

logger = logging.getLogger(__name__)

__all__ = [
    "SOFFICE_ENV_VAR",
    "SOFFICE_BARE_NAME",
    "platform_candidates",
    "is_executable",
    "resolve_soffice_path",
]

SOFFICE_ENV_VAR = "OFFICIFY_SOFFICE_PATH"
SOFFICE_BARE_NAME = "soffice"

_WINDOWS_CANDIDATES = [
    "C:\\Program Files\\LibreOffice\\program\\soffice.exe",
    "C:\\Program Files (x86)\\LibreOffice\\program\\soffice.exe",
]
_MACOS_CANDIDATES = [
    "/Applications/LibreOffice.app/Contents/MacOS/soffice",
    "/usr/local/bin/soffice",
]
_UNIX_CANDIDATES = [
    "/usr/bin/soffice",
    "/usr/local/bin/soffice",
    "/snap/bin/soffice",
]


def platform_candidates(platform: Optional[str] = None) -> List[str]:
    """Return the well-known install locations for *platform* (``sys.platform`` style)."""
    platform = platform or sys.platform
    if platform.startswith("win"):
        return list(_WINDOWS_CANDIDATES)
    if platform == "darwin":
        return list(_MACOS_CANDIDATES)
    return list(_UNIX_CANDIDATES)


def is_executable(path: str) -> bool:
    """True if *path* is a regular file with any executable bit set."""
    try:
        st = os.stat(path)
    except (OSError, ValueError):
        return False
    return stat.S_ISREG(st.st_mode) and bool(st.st_mode & 0o111)


def resolve_soffice_path(
    explicit_path: Optional[str] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
    strict: bool = False,
) -> str:
    """Return the converter executable to invoke.

    Parameters
    ----------
    explicit_path
        Caller override; wins over everything else when it is executable.
    env
        Environment mapping consulted for ``OFFICIFY_SOFFICE_PATH``. When
        *None* no environment override is considered.
    platform
        ``sys.platform`` style identifier selecting the install locations.
    strict
        When True and no candidate passes, the bare name must be found on
        ``PATH``; otherwise :class:`ConverterNotFoundError` is raised.
        When False the bare name is returned unconditionally.
    """
    candidates: List[str] = []
    if explicit_path:
        candidates.append(explicit_path)
    env_path = (env or {}).get(SOFFICE_ENV_VAR)
    if env_path:
        candidates.append(env_path)
    candidates.extend(platform_candidates(platform))

    for candidate in candidates:
        if is_executable(candidate):
            logger.debug("Resolved soffice: %s", candidate)
            return candidate
        logger.debug("soffice candidate rejected: %s", candidate)

    if strict:
        search_path = (env or {}).get("PATH")
        found = shutil.which(SOFFICE_BARE_NAME, path=search_path)
        if found is None:
            raise ConverterNotFoundError(
                f"Could not locate '{SOFFICE_BARE_NAME}'. Tried: {', '.join(candidates)} "
                f"and the search path. Set {SOFFICE_ENV_VAR} or pass an explicit path."
            )
        return found

    logger.debug("No soffice candidate found; relying on PATH")
    return SOFFICE_BARE_NAME
