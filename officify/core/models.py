from __future__ import annotations

"""Shared data structures used across the Officify core.

This module is intentionally free of I/O code so that the contained objects
can be reused in any context (unit-tests, CLI, services).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

__all__ = [
    "OdfArchive",
    "OfficifyOptions",
    "PlaceholderMap",
    "ImageMap",
    "ConversionRequest",
    "ConversionState",
    "ConversionOutcome",
]

PlaceholderMap = Mapping[str, Any]
ImageMap = Mapping[str, bytes]


@dataclass
class OdfArchive:
    """In-memory representation of an ODF zip container.

    Attributes
    ----------
    members
        Ordered mapping of member path (forward slashes) to raw content.
        Directory entries end with ``/`` and carry empty content.
    """

    members: Dict[str, bytes] = field(default_factory=dict)

    def names(self) -> list[str]:
        return list(self.members)

    def read(self, name: str) -> Optional[bytes]:
        return self.members.get(name)

    def write(self, name: str, data: bytes) -> None:
        self.members[name] = data

    def __contains__(self, name: object) -> bool:
        return name in self.members

    def __len__(self) -> int:
        return len(self.members)


@dataclass
class OfficifyOptions:
    """User-facing options accepted by :class:`~officify.Officify`.

    Attributes
    ----------
    input_extension_hint
        Extension used for the converter input file (``.odt``, ``ods``...).
        A missing leading dot is added.
    soffice_path
        Explicit converter executable, overriding every other source.
    """

    input_extension_hint: Optional[str] = None
    soffice_path: Optional[str] = None


@dataclass(frozen=True)
class ConversionRequest:
    """Everything needed for one converter run."""

    document: bytes
    extension: str
    soffice_path: str
    page_range: Optional[str] = None
    scratch_prefix: str = "officify-"


class ConversionState(Enum):
    STARTED = "started"
    EXITED = "exited"
    OUTPUT_VERIFIED = "output_verified"
    OUTPUT_MISSING = "output_missing"


@dataclass
class ConversionOutcome:
    """Trace of a single converter process.

    A run moves ``STARTED -> EXITED`` when the process terminates, then to
    ``OUTPUT_VERIFIED`` or ``OUTPUT_MISSING`` once the output file has been
    checked. Only ``OUTPUT_VERIFIED`` counts as success.
    """

    state: ConversionState = ConversionState.STARTED
    exit_code: Optional[int] = None
    signal: Optional[int] = None
    stdout: str = ""
    stderr: str = ""

    def mark_exited(self, returncode: int, stdout: str, stderr: str) -> None:
        # subprocess reports a terminating signal as a negative return code
        if returncode < 0:
            self.exit_code = None
            self.signal = -returncode
        else:
            self.exit_code = returncode
            self.signal = None
        self.stdout = stdout
        self.stderr = stderr
        self.state = ConversionState.EXITED

    def mark_output(self, present: bool) -> None:
        if self.state is not ConversionState.EXITED:
            raise RuntimeError(f"Cannot verify output from state {self.state.value}")
        self.state = ConversionState.OUTPUT_VERIFIED if present else ConversionState.OUTPUT_MISSING

    @property
    def exited_cleanly(self) -> bool:
        return self.exit_code == 0 and self.signal is None

    @property
    def succeeded(self) -> bool:
        return self.state is ConversionState.OUTPUT_VERIFIED
