from __future__ import annotations

"""Zip container loading and serialization.

The archive is treated as an opaque bag of members: nothing here looks at the
ODF schema. The only packaging rule honoured on write is that the ``mimetype``
member goes first and uncompressed, which office suites rely on to sniff the
document type.
"""

import io
import logging
import zipfile
import zlib

from officify.core.exceptions import CorruptArchiveError
from officify.core.models import OdfArchive

logger = logging.getLogger(__name__)

__all__ = ["load_archive", "serialize_archive", "MIMETYPE_MEMBER"]

MIMETYPE_MEMBER = "mimetype"

# Fixed entry timestamp so identical archives serialize to identical bytes.
_ENTRY_DATE_TIME = (1980, 1, 1, 0, 0, 0)


def load_archive(data: bytes) -> OdfArchive:
    """Read zip *data* into an :class:`OdfArchive`.

    Raises
    ------
    CorruptArchiveError
        If *data* is not a valid zip stream.
    """
    try:
        with zipfile.ZipFile(io.BytesIO(data), "r") as zf:
            members = {}
            for info in zf.infolist():
                if info.is_dir():
                    members[info.filename] = b""
                else:
                    members[info.filename] = zf.read(info)
    except (zipfile.BadZipFile, zipfile.LargeZipFile, zlib.error, EOFError, ValueError,
            RuntimeError, NotImplementedError) as exc:
        # RuntimeError: encrypted member; NotImplementedError: unsupported compression
        logger.error("Archive load failed: %s", exc)
        raise CorruptArchiveError(f"Input is not a valid zip archive: {exc}", exc) from exc

    logger.debug("Archive loaded: members=%d bytes=%d", len(members), len(data))
    return OdfArchive(members=members)


def serialize_archive(archive: OdfArchive) -> bytes:
    """Return *archive* as deflate-compressed zip bytes."""
    ordered = list(archive.members.items())
    if MIMETYPE_MEMBER in archive.members:
        ordered.sort(key=lambda item: item[0] != MIMETYPE_MEMBER)

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, data in ordered:
            info = zipfile.ZipInfo(name, date_time=_ENTRY_DATE_TIME)
            if name.endswith("/"):
                info.external_attr = 0o40755 << 16 | 0x10
                zf.writestr(info, b"")
                continue
            info.external_attr = 0o644 << 16
            if name == MIMETYPE_MEMBER:
                info.compress_type = zipfile.ZIP_STORED
            else:
                info.compress_type = zipfile.ZIP_DEFLATED
            zf.writestr(info, data)

    payload = buffer.getvalue()
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Archive serialized: members=%d bytes=%d", len(ordered), len(payload))
    return payload
