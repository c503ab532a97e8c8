from __future__ import annotations

"""PDF export through a headless ``soffice`` process.

One call stages the document in its own scratch directory, runs the converter
once and reads back ``<input stem>.pdf``. The scratch directory is removed on
every exit path. There is no timeout: a converter that never exits blocks the
caller.
"""

import json
import logging
import os
import secrets
import shutil
import subprocess
import tempfile
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from officify.core.exceptions import (
    ConverterExitError,
    ConverterNotFoundError,
    ConverterSpawnError,
)
from officify.core.models import ConversionOutcome, ConversionRequest

logger = logging.getLogger(__name__)

__all__ = [
    "scratch_directory",
    "build_format_spec",
    "build_convert_command",
    "staged_input_name",
    "run_converter",
    "convert_to_pdf",
]


@contextmanager
def scratch_directory(prefix: str = "officify-") -> Iterator[Path]:
    """Yield a fresh private directory and delete it recursively afterwards.

    Removal is best effort; errors are dropped so they never replace the
    result or the exception of the managed block.
    """
    path = Path(tempfile.mkdtemp(prefix=prefix))
    logger.debug("Scratch directory created: %s", path)
    try:
        yield path
    finally:
        try:
            shutil.rmtree(path)
            logger.debug("Scratch directory removed: %s", path)
        except OSError as exc:
            logger.debug("Scratch cleanup ignored error on %s: %s", path, exc)


def build_format_spec(page_range: Optional[str] = None) -> str:
    """Return the ``--convert-to`` argument, with a page range filter if given."""
    if not page_range:
        return "pdf"
    filter_options = {"PageRange": {"type": "string", "value": str(page_range)}}
    return "pdf:writer_pdf_Export:" + json.dumps(filter_options, separators=(",", ":"))


def build_convert_command(soffice_path: str, input_file: Path | str, outdir: Path | str,
                          page_range: Optional[str] = None) -> List[str]:
    return [
        soffice_path,
        "--headless",
        "--convert-to",
        build_format_spec(page_range),
        "--outdir",
        str(outdir),
        str(input_file),
    ]


def staged_input_name(extension: str) -> str:
    """Collision-resistant file name for the staged converter input."""
    return f"input-{int(time.time() * 1000)}-{secrets.token_hex(8)}{extension}"


def _write_private(path: Path, data: bytes) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL | getattr(os, "O_BINARY", 0), 0o600)
    with os.fdopen(fd, "wb") as fh:
        fh.write(data)


def run_converter(command: List[str], expected_output: Path) -> ConversionOutcome:
    """Run *command* to completion and check for *expected_output*.

    Raises
    ------
    ConverterNotFoundError
        The executable does not exist.
    ConverterSpawnError
        The process could not be started for another reason.
    ConverterExitError
        Non-zero exit, termination by signal, or no output file.
    """
    soffice_path = command[0]
    outcome = ConversionOutcome()
    logger.debug("Converter command: %s", command)
    try:
        proc = subprocess.run(command, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
    except FileNotFoundError as exc:
        logger.error("Failed to start soffice (%s): %s", soffice_path, exc)
        raise ConverterNotFoundError(
            f"Failed to start soffice ({soffice_path}): {exc}", soffice_path, exc
        ) from exc
    except OSError as exc:
        logger.error("Failed to start soffice (%s): %s", soffice_path, exc)
        raise ConverterSpawnError(
            f"Failed to start soffice ({soffice_path}): {exc}", soffice_path, exc
        ) from exc

    outcome.mark_exited(
        proc.returncode,
        (proc.stdout or b"").decode("utf-8", "replace"),
        (proc.stderr or b"").decode("utf-8", "replace"),
    )
    if not outcome.exited_cleanly:
        logger.error("Converter failed: code=%s signal=%s stderr=%s",
                     outcome.exit_code, outcome.signal, outcome.stderr.strip())
        raise ConverterExitError(
            "LibreOffice conversion failed",
            exit_code=outcome.exit_code,
            signal=outcome.signal,
            stdout=outcome.stdout,
            stderr=outcome.stderr,
            soffice_path=soffice_path,
        )

    outcome.mark_output(expected_output.is_file())
    if not outcome.succeeded:
        logger.error("Converter exited with code 0 but produced no %s", expected_output.name)
        raise ConverterExitError(
            "LibreOffice finished with code 0 but no output",
            exit_code=outcome.exit_code,
            stdout=outcome.stdout,
            stderr=outcome.stderr,
            soffice_path=soffice_path,
        )
    return outcome


def convert_to_pdf(request: ConversionRequest) -> bytes:
    """Convert the staged document in *request* and return the PDF bytes."""
    with scratch_directory(request.scratch_prefix) as workdir:
        input_file = workdir / staged_input_name(request.extension)
        _write_private(input_file, request.document)
        output_file = input_file.with_suffix(".pdf")

        command = build_convert_command(request.soffice_path, input_file, workdir, request.page_range)
        run_converter(command, output_file)

        pdf = output_file.read_bytes()
        logger.info("PDF export OK: size_bytes=%d pages=%s", len(pdf), request.page_range or "all")
        return pdf
