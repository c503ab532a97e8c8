from __future__ import annotations

"""Literal placeholder substitution over the text members of an archive."""

import logging
import re
from typing import Any, List, Tuple

from officify.core.models import OdfArchive, PlaceholderMap

logger = logging.getLogger(__name__)

__all__ = ["TEXT_MEMBER_PATTERN", "is_text_member", "compile_placeholders", "replace_placeholders"]

TEXT_MEMBER_PATTERN = re.compile(r"\.(xml|opf|rels|html|htm|xhtml|svg|css|txt)$", re.IGNORECASE)

# surrogateescape keeps bytes that are not valid UTF-8 intact across decode/encode
_TEXT_ENCODING = "utf-8"
_TEXT_ERRORS = "surrogateescape"


def is_text_member(name: str) -> bool:
    """Return True when *name* has one of the text-like suffixes."""
    return TEXT_MEMBER_PATTERN.search(name) is not None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def compile_placeholders(placeholders: PlaceholderMap) -> List[Tuple[re.Pattern, str]]:
    """Turn *placeholders* into ``(pattern, value)`` pairs, keys escaped."""
    return [(re.compile(re.escape(key)), _as_text(value)) for key, value in placeholders.items()]


def replace_placeholders(archive: OdfArchive, placeholders: PlaceholderMap) -> int:
    """Replace every placeholder key with its value in the text members.

    Keys are matched literally and applied in the iteration order of
    *placeholders*; each key re-scans the output of the previous one.
    Members that end up unchanged keep their original bytes.

    Returns the number of members that were modified.
    """
    if not placeholders:
        return 0

    compiled = compile_placeholders(placeholders)
    changed = 0
    for name in list(archive.members):
        if name.endswith("/") or not is_text_member(name):
            continue
        original = archive.members[name]
        text = original.decode(_TEXT_ENCODING, _TEXT_ERRORS)
        for pattern, value in compiled:
            # callable replacement keeps backslashes in the value literal
            text = pattern.sub(lambda _m, v=value: v, text)
        updated = text.encode(_TEXT_ENCODING, _TEXT_ERRORS)
        if updated != original:
            archive.members[name] = updated
            changed += 1
            logger.debug("Placeholders replaced in %s", name)

    logger.info("Placeholder substitution: keys=%d members_changed=%d", len(compiled), changed)
    return changed
