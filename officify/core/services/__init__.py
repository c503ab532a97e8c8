from __future__ import annotations

"""High-level orchestration services (templating, export)."""

from .templating_service import Officify  # noqa: F401

__all__: list[str] = [
    "Officify",
]
