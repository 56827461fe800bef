import argparse
import sys
from typing import List, Optional

from minifold import __version__
from minifold.api import default_registry, run
from minifold.core.config import MinifySettings
from minifold.core.errors import BatchExecutionError, MinifyError
from minifold.utils.format import format_reduction, format_size, parse_options
from minifold.utils.logger import get_logger


DEFAULT_COMPRESSOR = "rjsmin"


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser."""
    compressors = "\n".join(f"  - {name}" for name in default_registry().names())
    parser = argparse.ArgumentParser(
        prog="minifold",
        description="Minify JavaScript, CSS and HTML with the compressor of your choice.",
        epilog=f"List of compressors:\n{compressors}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-c", "--compressor", help=f"use the specified compressor (default: {DEFAULT_COMPRESSOR})"
    )
    parser.add_argument("-i", "--input", nargs="+", help="input file path(s); wildcards allowed")
    parser.add_argument("-o", "--output", help="output file path; $1 is replaced by each input's base name")
    parser.add_argument("-s", "--silence", action="store_true", help="no output will be printed")
    parser.add_argument("-O", "--option", default="", help="options for the compressor as a JSON object")
    parser.add_argument("--public-folder", help="folder prepended to relative input and output paths")
    parser.add_argument(
        "--replace-in-place", action="store_true", help="write each output next to its input"
    )
    parser.add_argument("--type", choices=["js", "css"], help="content type for compressors handling both")
    parser.add_argument("--executable", help="path to the compressor binary or JAR")
    parser.add_argument("--timeout", type=float, help="seconds before a compressor process is killed")
    parser.add_argument("--config", help="JSON file with settings; command-line values take precedence")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "NOTICE", "WARNING", "ERROR", "CRITICAL"],
        help="console log level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="also write detailed logs to this file")
    return parser


def build_settings(args: argparse.Namespace) -> MinifySettings:
    """Turn parsed arguments into settings."""
    overrides = {
        "compressor": args.compressor,
        "input": args.input[0] if args.input and len(args.input) == 1 else args.input,
        "output": args.output,
        "public_folder": args.public_folder,
        "replace_in_place": args.replace_in_place or None,
        "type": args.type,
        "executable": args.executable,
        "timeout": args.timeout,
    }
    options = parse_options(args.option)
    if options:
        overrides["options"] = options

    if args.config:
        return MinifySettings.from_json_file(args.config, **overrides)
    return MinifySettings.from_dict({key: value for key, value in overrides.items() if value is not None})


def print_report(report) -> None:
    for info in report.files:
        source = ", ".join(info["inputs"])
        if not info["status"].startswith("success"):
            print(f"  ✗ {source}: {info['status']}")
            continue
        print(
            f"  ✓ {source} → {info['output']} "
            f"({format_size(info['original_size'])} → {format_size(info['minified_size'])}, "
            f"{format_reduction(info['original_size'], info['minified_size'])})"
        )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logger = get_logger()
    logger.configure(log_level=args.log_level, log_file=args.log_file)

    try:
        settings = build_settings(args)
    except (MinifyError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not settings.compressor:
        settings.compressor = DEFAULT_COMPRESSOR

    if not settings.input or not settings.output:
        parser.print_help()
        return 1

    try:
        report = run(settings)
    except BatchExecutionError as e:
        if not args.silence and e.report is not None:
            print_report(e.report)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except MinifyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not args.silence:
        print_report(report)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
