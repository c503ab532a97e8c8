"""External converter integration: executable resolution and PDF export."""

from .resolver import SOFFICE_ENV_VAR, resolve_soffice_path  # noqa: F401
from .pdf_export import convert_to_pdf, scratch_directory  # noqa: F401

__all__: list[str] = [
    "SOFFICE_ENV_VAR",
    "resolve_soffice_path",
    "convert_to_pdf",
    "scratch_directory",
]
