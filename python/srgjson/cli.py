from __future__ import annotations

import argparse
import io
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from srgjson import Mappings, load_mappings
from srgjson.binary import BinaryMappingsError
from srgjson.json import encode_class_entries
from srgjson.srg import SrgMappingsError

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(levelname)s] %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="srgjson",
        description="Convert SRG or SuperSrg binary mappings into a JSON mapping file.",
    )
    parser.add_argument(
        "input_path",
        type=Path,
        help="Path to an SRG text file or a SuperSrg binary mappings file.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        metavar="PATH",
        help="Where to write the JSON mappings (default: stdout).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug information about the decoded mappings.",
    )
    return parser


def write_mappings(output: TextIO, mappings: Mappings) -> int:
    """Write the mappings as a complete JSON document, returning the number of classes."""
    output.write("{\n")
    count = encode_class_entries(output, mappings.class_entries())
    if count:
        output.write("\n")
    output.write("}\n")
    return count


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    input_path: Path = args.input_path
    output_path: Path | None = args.output

    logging.basicConfig(
        format=LOG_FORMAT,
        level=logging.DEBUG if args.verbose else logging.WARNING,
    )

    try:
        mappings = load_mappings(input_path)
    except (BinaryMappingsError, SrgMappingsError) as e:
        logger.error("Invalid mappings in %s: %s", input_path, e)
        return 1
    except OSError as e:
        logger.error("Unable to read %s: %s", input_path, e)
        return 1

    if output_path is None:
        # Match the -o output regardless of the locale's encoding
        if isinstance(sys.stdout, io.TextIOWrapper):
            sys.stdout.reconfigure(encoding="utf-8")
        count = write_mappings(sys.stdout, mappings)
    else:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as output:
            count = write_mappings(output, mappings)

    logger.info("Wrote %d classes to %s", count, output_path or "stdout")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
