"""
cfmeta Command Line

Usage:
    cfmeta path/to/functions.ts [--output functions.json] [--indent 2]

Exit status:
    0  functions.json written
    1  the source has errors; nothing was written
    2  usage, configuration, input or output failure
"""

import argparse
import sys
from typing import Optional, Sequence

from cfmeta import __version__
from cfmeta.ast.extractor import extract_file
from cfmeta.ast.models import ExtractionResult
from cfmeta.configs.logging import get_logger, setup_logging
from cfmeta.configs.runtime import get_full_config
from cfmeta.exceptions import CfmetaError, ConfigurationError
from cfmeta.manifest import write_manifest

logger = get_logger("cli")

EXIT_OK = 0
EXIT_SOURCE_ERRORS = 1
EXIT_FAILURE = 2


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cfmeta",
        description="Generate functions.json metadata for @customfunction declarations",
    )
    parser.add_argument("source", help="TypeScript or JavaScript file to scan")
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Manifest path (default: functions.json)",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Indent the JSON output by this many spaces (default: compact)",
    )
    parser.add_argument("--config", default=None, help="Path to a cfmeta.yaml file")
    parser.add_argument("--debug", action="store_true", default=None, help="Enable debug logging")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def report(result: ExtractionResult) -> None:
    """Print the end-of-run summary for a result."""
    if not result.ok:
        print(f"There was one or more errors. We couldn't parse your file: {result.source_path}")
        for error in result.errors:
            print(error)
        return

    print(f"functions.json created for file: {result.source_path}")
    if result.skipped:
        print("The following functions were skipped.")
        for name in result.skipped:
            print(name)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the extractor; returns the process exit status."""
    args = build_arg_parser().parse_args(argv)

    try:
        config = get_full_config(
            config_path=args.config,
            overrides={
                "output": args.output,
                "indent": args.indent,
                "debug": args.debug,
                "log_file": args.log_file,
            },
        )
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        setup_logging(debug=config["debug"], log_file=config["log_file"])
    except OSError as e:
        print(f"Cannot open log file: {e}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        result = extract_file(args.source)
    except CfmetaError as e:
        logger.error(str(e))
        return EXIT_FAILURE

    if not result.ok:
        report(result)
        return EXIT_SOURCE_ERRORS

    try:
        write_manifest(result, config["output"], indent=config["indent"])
    except CfmetaError as e:
        logger.error(str(e))
        return EXIT_FAILURE

    report(result)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
