# -*- coding: utf-8 -*-

"""
Command line entry point: fill an ODF template and write it out or as PDF.

    officify invoice.odt -o out.pdf --set "{{NAME}}=Ada" --values values.yml --image logo.png=./logo.png
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import yaml

from officify.core.exceptions import OfficifyError
from officify.core.models import OfficifyOptions
from officify.core.services import Officify
from officify.logging_config import setup_logging
from officify.version import get_app_version

logger = logging.getLogger(__name__)


def _split_pair(raw: str, option: str) -> tuple[str, str]:
    if "=" not in raw:
        raise argparse.ArgumentTypeError(f"{option} expects KEY=VALUE, got {raw!r}")
    key, value = raw.split("=", 1)
    if not key:
        raise argparse.ArgumentTypeError(f"{option} has an empty key in {raw!r}")
    return key, value


def _parse_set(raw: str) -> tuple[str, str]:
    return _split_pair(raw, "--set")


def _parse_image(raw: str) -> tuple[str, str]:
    return _split_pair(raw, "--image")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="officify",
        description="Replace placeholders and images in an ODF document, optionally exporting to PDF.",
    )
    parser.add_argument("template", type=Path, help="Input .odt/.ods/.odp file")
    parser.add_argument("-o", "--output", type=Path, required=True, help="Output document or PDF path")
    parser.add_argument("--set", dest="pairs", action="append", default=[], type=_parse_set,
                        metavar="KEY=VALUE", help="Placeholder replacement (repeatable)")
    parser.add_argument("--values", type=Path, help="YAML mapping of placeholder -> value")
    parser.add_argument("--image", dest="images", action="append", default=[], type=_parse_image,
                        metavar="NAME=PATH", help="Store PATH as Pictures/NAME (repeatable)")
    parser.add_argument("--pdf", action="store_true", help="Export to PDF (implied by a .pdf output)")
    parser.add_argument("--pages", help="Page range for PDF export, e.g. 1-3 (PDF output only)")
    parser.add_argument("--ext", dest="extension", help="Input extension hint (.odt, .ods, .odp)")
    parser.add_argument("--soffice", help="Path to the soffice executable")
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_app_version()}")
    return parser


def load_values(path: Optional[Path], pairs: List[tuple[str, str]]) -> Dict[str, str]:
    """Merge the YAML values file with ``--set`` pairs; ``--set`` wins."""
    values: Dict[str, str] = {}
    if path is not None:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a mapping of placeholder -> value")
        values.update({str(k): v for k, v in data.items()})
    values.update(dict(pairs))
    return values


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    to_pdf = args.pdf or args.output.suffix.lower() == ".pdf"
    if args.pages and not to_pdf:
        parser.error("--pages requires PDF output (--pdf or a .pdf output path)")
    # The rotating log file is only written when a log directory is given.
    setup_logging(log_to_file="OFFICIFY_LOG_DIR" in os.environ)

    try:
        placeholders = load_values(args.values, args.pairs)
        images = {name: Path(src).read_bytes() for name, src in args.images}

        doc = Officify(
            args.template.read_bytes(),
            OfficifyOptions(input_extension_hint=args.extension, soffice_path=args.soffice),
        )
        doc.load()
        doc.replace_placeholders(placeholders)
        doc.replace_images(images)

        if to_pdf:
            payload = doc.export_pdf(args.pages)
        else:
            payload = doc.get_buffer()
        args.output.write_bytes(payload)
    except (OfficifyError, OSError, ValueError, yaml.YAMLError) as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"officify: error: {exc}", file=sys.stderr)
        return 1

    logger.info("Wrote %s (%d bytes)", args.output, len(payload))
    return 0


if __name__ == "__main__":
    sys.exit(main())
