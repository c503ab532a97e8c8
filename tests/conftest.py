"""Test configuration and fixtures for Officify.

Provides in-memory ODF archives, a fake ``soffice`` executable and an
isolated configuration directory so tests never read the developer's own
overrides.
"""

import io
import logging
import os
import stat
import zipfile
from pathlib import Path
from typing import Dict, Optional

import pytest

from officify.config import ConfigManager

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

TEXT_MIMETYPE = "application/vnd.oasis.opendocument.text"
SPREADSHEET_MIMETYPE = "application/vnd.oasis.opendocument.spreadsheet"

CONTENT_XML = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    '<office:document-content xmlns:office="urn:oasis:names:tc:opendocument:xmlns:office:1.0" '
    'xmlns:text="urn:oasis:names:tc:opendocument:xmlns:text:1.0">'
    '<office:body><office:text><text:p>Hello {{NAME}}</text:p></office:text></office:body>'
    '</office:document-content>'
)

STYLES_XML = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    '<office:document-styles xmlns:office="urn:oasis:names:tc:opendocument:xmlns:office:1.0"/>'
)


def manifest_xml(mimetype: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<manifest:manifest xmlns:manifest="urn:oasis:names:tc:opendocument:xmlns:manifest:1.0" '
        'manifest:version="1.2">'
        f'<manifest:file-entry manifest:full-path="/" manifest:media-type="{mimetype}"/>'
        '<manifest:file-entry manifest:full-path="content.xml" manifest:media-type="text/xml"/>'
        '</manifest:manifest>'
    )


def build_odf(members: Dict[str, bytes | str], mimetype: Optional[str] = TEXT_MIMETYPE) -> bytes:
    """Zip *members* into an ODF-like package, ``mimetype`` first and stored."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        if mimetype is not None:
            zf.writestr("mimetype", mimetype, compress_type=zipfile.ZIP_STORED)
        for name, data in members.items():
            zf.writestr(name, data, compress_type=zipfile.ZIP_DEFLATED)
    return buffer.getvalue()


def read_members(data: bytes) -> Dict[str, bytes]:
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return {name: zf.read(name) for name in zf.namelist()}


@pytest.fixture
def odt_bytes() -> bytes:
    """A small text document whose content.xml reads ``Hello {{NAME}}``."""
    return build_odf({
        "content.xml": CONTENT_XML,
        "styles.xml": STYLES_XML,
        "META-INF/manifest.xml": manifest_xml(TEXT_MIMETYPE),
        "Pictures/logo.png": b"\x89PNG\r\n\x1a\nold-logo",
        "Thumbnails/thumbnail.png": b"\x89PNG\r\n\x1a\nthumb",
    })


@pytest.fixture
def ods_bytes() -> bytes:
    return build_odf({
        "content.xml": CONTENT_XML,
        "META-INF/manifest.xml": manifest_xml(SPREADSHEET_MIMETYPE),
    }, mimetype=SPREADSHEET_MIMETYPE)


@pytest.fixture
def png_bytes() -> bytes:
    """A real 4x4 PNG produced with Pillow."""
    from PIL import Image

    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def config_dir(tmp_path, monkeypatch) -> Path:
    """Empty user config directory, also exported as OFFICIFY_CONFIG_DIR."""
    path = tmp_path / "user-config"
    path.mkdir()
    monkeypatch.setenv("OFFICIFY_CONFIG_DIR", str(path))
    return path


@pytest.fixture
def config(config_dir) -> ConfigManager:
    return ConfigManager(user_config_dir=config_dir)


def _write_script(path: Path, body: str) -> Path:
    path.write_text("#!/bin/sh\n" + body, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


# Arguments: --headless --convert-to <spec> --outdir <dir> <input>
_FAKE_SOFFICE_OK = r'''
outdir="$5"
input="$6"
base=$(basename "$input")
stem="${base%.*}"
printf '%%PDF-1.4 fake %s %s' "$base" "$3" > "$outdir/$stem.pdf"
echo "convert $input -> $outdir/$stem.pdf"
'''

_FAKE_SOFFICE_FAIL = r'''
echo "starting"
echo "Error: source file could not be loaded" >&2
exit 2
'''

_FAKE_SOFFICE_NO_OUTPUT = r'''
echo "nothing to do"
exit 0
'''

posix_only = pytest.mark.skipif(os.name == "nt", reason="fake soffice is a POSIX shell script")


@pytest.fixture
def fake_soffice(tmp_path) -> Path:
    """Executable that mimics a successful headless PDF conversion."""
    return _write_script(tmp_path / "soffice-ok", _FAKE_SOFFICE_OK)


@pytest.fixture
def failing_soffice(tmp_path) -> Path:
    return _write_script(tmp_path / "soffice-fail", _FAKE_SOFFICE_FAIL)


@pytest.fixture
def silent_soffice(tmp_path) -> Path:
    """Exits 0 without writing any PDF."""
    return _write_script(tmp_path / "soffice-silent", _FAKE_SOFFICE_NO_OUTPUT)


@pytest.fixture
def scratch_root(tmp_path, monkeypatch) -> Path:
    """Redirect tempfile to a private directory so scratch dirs can be inspected."""
    import tempfile

    root = tmp_path / "tmp"
    root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(root))
    return root


@pytest.fixture
def restore_logging():
    """Undo dictConfig side effects on the ``officify`` logger tree."""
    yield
    logger = logging.getLogger("officify")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
