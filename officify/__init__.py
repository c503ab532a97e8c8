"""Top-level package for Officify.

Front-ends should depend on the public API exposed here rather than importing
internal modules directly.
"""

from .core.exceptions import (  # noqa: F401
    ConverterError,
    ConverterExitError,
    ConverterNotFoundError,
    ConverterSpawnError,
    CorruptArchiveError,
    NotLoadedError,
    OfficifyError,
)
from .core.models import OdfArchive, OfficifyOptions  # re-export for convenience
from .core.services import Officify

__all__: list[str] = [
    "Officify",
    "OfficifyOptions",
    "OdfArchive",
    "OfficifyError",
    "NotLoadedError",
    "CorruptArchiveError",
    "ConverterError",
    "ConverterSpawnError",
    "ConverterNotFoundError",
    "ConverterExitError",
]
