from __future__ import annotations

"""Input extension selection for the converter.

The converter picks its import filter from the file extension, so the staged
input file must carry the right one. Priority: explicit hint, then the MIME
type declared in the manifest, then ``.odt``.
"""

import logging
from typing import Optional

from officify.core.models import OdfArchive

logger = logging.getLogger(__name__)

__all__ = [
    "MANIFEST_MEMBER",
    "DEFAULT_EXTENSION",
    "normalize_extension",
    "guess_extension_from_manifest",
    "resolve_input_extension",
]

MANIFEST_MEMBER = "META-INF/manifest.xml"
DEFAULT_EXTENSION = ".odt"

# Checked in order; the first marker found in the manifest wins.
_MANIFEST_MARKERS = (
    ("vnd.oasis.opendocument.text", ".odt"),
    ("vnd.oasis.opendocument.spreadsheet", ".ods"),
    ("vnd.oasis.opendocument.presentation", ".odp"),
)


def normalize_extension(ext: Optional[str]) -> Optional[str]:
    """Return *ext* with a leading dot, or None when empty."""
    if not ext:
        return None
    ext = ext.strip()
    if not ext:
        return None
    return ext if ext.startswith(".") else f".{ext}"


def guess_extension_from_manifest(archive: OdfArchive) -> Optional[str]:
    content = archive.read(MANIFEST_MEMBER)
    if content is None:
        return None
    text = content.decode("utf-8", "replace")
    for marker, ext in _MANIFEST_MARKERS:
        if marker in text:
            return ext
    return None


def resolve_input_extension(archive: OdfArchive, hint: Optional[str] = None) -> str:
    ext = normalize_extension(hint)
    source = "hint"
    if ext is None:
        ext = guess_extension_from_manifest(archive)
        source = "manifest"
    if ext is None:
        ext = DEFAULT_EXTENSION
        source = "default"
    logger.debug("Input extension %s (from %s)", ext, source)
    return ext
