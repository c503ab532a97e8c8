from __future__ import annotations

"""Templating façade over the archive, substitution and export modules.

Entry-point for any front-end (CLI, web handler, script) that fills an ODF
template and optionally renders it to PDF::

    doc = Officify(template_bytes, OfficifyOptions(input_extension_hint="odt"))
    doc.load()
    doc.replace_placeholders({"{{NAME}}": "World"})
    doc.replace_images({"logo.png": png_bytes})
    pdf = doc.export_pdf(pages="1-2")
"""

import logging
import os
from typing import List, Mapping, Optional

from officify.config import ConfigManager
from officify.core.archive import load_archive, serialize_archive
from officify.core.converter.pdf_export import convert_to_pdf
from officify.core.converter.resolver import SOFFICE_BARE_NAME, resolve_soffice_path
from officify.core.exceptions import ConverterNotFoundError, NotLoadedError
from officify.core.extension import resolve_input_extension
from officify.core.images import replace_images
from officify.core.models import (
    ConversionRequest,
    ImageMap,
    OdfArchive,
    OfficifyOptions,
    PlaceholderMap,
)
from officify.core.placeholders import replace_placeholders

logger = logging.getLogger(__name__)

__all__ = ["Officify"]


class Officify:
    """Fill placeholders and images in an ODF archive, export it to PDF."""

    def __init__(
        self,
        input_buffer: bytes,
        options: Optional[OfficifyOptions] = None,
        *,
        config: Optional[ConfigManager] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._input_buffer = input_buffer
        self.options = options or OfficifyOptions()
        self.config = config or ConfigManager()
        self._archive: Optional[OdfArchive] = None

        # A strict lookup failure only matters for export; templating keeps working.
        self._resolution_error: Optional[ConverterNotFoundError] = None
        explicit = self.options.soffice_path or self.config.soffice_path
        try:
            self.soffice_path = resolve_soffice_path(
                explicit,
                env=os.environ if env is None else env,
                strict=self.config.strict_resolution,
            )
        except ConverterNotFoundError as exc:
            logger.warning("soffice not found; PDF export will fail: %s", exc)
            self._resolution_error = exc
            self.soffice_path = SOFFICE_BARE_NAME
        logger.debug("Officify created: input_bytes=%d soffice=%s", len(input_buffer), self.soffice_path)

    # ---------------------------------------------------------------------
    # PUBLIC API
    # ---------------------------------------------------------------------
    def load(self) -> None:
        """Parse the input buffer. Raises CorruptArchiveError on invalid zip data."""
        self._archive = load_archive(self._input_buffer)

    @property
    def is_loaded(self) -> bool:
        return self._archive is not None

    @property
    def archive(self) -> OdfArchive:
        return self._ensure_loaded()

    def member_names(self) -> List[str]:
        return self._ensure_loaded().names()

    def replace_placeholders(self, placeholders: PlaceholderMap) -> None:
        archive = self._ensure_loaded()
        replace_placeholders(archive, placeholders)

    def replace_images(self, images: ImageMap) -> None:
        archive = self._ensure_loaded()
        replace_images(archive, images)

    def get_buffer(self) -> bytes:
        """Return the current archive as zip bytes."""
        return serialize_archive(self._ensure_loaded())

    def export_pdf(self, pages: Optional[str] = None) -> bytes:
        """Render the current archive to PDF through ``soffice``.

        The input extension comes from ``options.input_extension_hint``, then
        the manifest MIME type, then ``.odt``.

        Raises
        ------
        NotLoadedError
            ``load()`` has not been called.
        ConverterNotFoundError
            Strict resolution is enabled and no converter was found.
        ConverterSpawnError
            The converter could not be started.
        ConverterExitError
            The converter failed or produced no PDF.
        """
        archive = self._ensure_loaded()
        if self._resolution_error is not None:
            raise self._resolution_error
        request = ConversionRequest(
            document=serialize_archive(archive),
            extension=resolve_input_extension(archive, self.options.input_extension_hint),
            soffice_path=self.soffice_path,
            page_range=pages,
            scratch_prefix=self.config.scratch_prefix,
        )
        logger.info("Export: converting %s document to PDF", request.extension)
        return convert_to_pdf(request)

    # ---------------------------------------------------------------------
    # Internals
    # ---------------------------------------------------------------------
    def _ensure_loaded(self) -> OdfArchive:
        if self._archive is None:
            raise NotLoadedError()
        return self._archive
