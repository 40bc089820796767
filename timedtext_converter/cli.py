"""Command-line interface for the Timed-Text Converter.

WHY: Users need a simple way to turn a saved model response into caption
files from the terminal. The CLI wires together the full pipeline: input
reading, JSON repair, timing normalization, optional translation merge,
pluggable formatter output, and file saving, behind a single command.

HOW: Uses argparse to accept an input file (or "-" for stdin), the
granularity, output format selection, text kind, an optional
translation response, and an output directory. Status messages go to
stderr; output files are saved next to the source (or to --output-dir).
With --stdout a single format is printed instead of saved.

RULES:
- Positional argument: raw response file path, or "-" for stdin
- --formats: comma-separated formatter keys (default: all registered)
- Output naming: {stem}{suffix}, numeric suffix for conflicts (clip-2.srt)
- Status output goes to stderr (not stdout)
- Exit code 1 on any user-facing error (missing file, unknown format,
  unrepairable response)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from timedtext_converter import config
from timedtext_converter.core.ir import Segment
from timedtext_converter.core.pipeline import load_segments, merge_translations
from timedtext_converter.core.repair import RepairError, repair_json
from timedtext_converter.formatters import FORMATTERS, create_formatter
from timedtext_converter.formatters.base import FormatterOutput

# Output stem used when the response is read from stdin
_STDIN_STEM = "transcript"


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        level = logging.DEBUG
    elif config.LOG_LEVEL:
        level = getattr(logging, config.LOG_LEVEL, logging.WARNING)
    else:
        return
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _resolve_output_path(
    stem: str,
    suffix: str,
    output_dir: Path,
) -> Path:
    """Resolve the output file path, adding numeric suffix on conflict.

    WHY: Users may run the converter multiple times on the same response.
    Overwriting previous output would lose work. Numeric suffixes
    (clip-2.srt) prevent data loss.

    HOW: Check if {stem}{suffix} exists. If so, increment a counter
    and insert it before the file extension until a free name is found.

    RULES:
    - First attempt: {stem}{suffix} (e.g. clip.srt)
    - Conflict: counter inserted before the extension (e.g. clip-2.srt)
    - Counter starts at 2 and increments
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx >= 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: FormatterOutput, stem: str, output_dir: Path) -> Path:
    """Write one formatter output as UTF-8 text and return its path."""
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _read_input(input_arg: str) -> str:
    if input_arg == "-":
        return sys.stdin.read()
    path = Path(input_arg)
    if not path.is_file():
        _fail("File not found: {}".format(path.resolve()))
    return path.read_text(encoding="utf-8")


def _parse_format_keys(formats: Optional[str]) -> List[str]:
    if not formats:
        return list(FORMATTERS.keys())
    keys = [f.strip() for f in formats.split(",") if f.strip()]
    for key in keys:
        if key not in FORMATTERS:
            _fail("Unknown format '{}'. Available formats: {}".format(
                key, ", ".join(sorted(FORMATTERS.keys()))
            ))
    return keys


def _load_translations(path_arg: str, segments: List[Segment]) -> List[Segment]:
    path = Path(path_arg)
    if not path.is_file():
        _fail("Translations file not found: {}".format(path.resolve()))
    records = repair_json(path.read_text(encoding="utf-8"))
    _status("  Merged {} translations".format(min(len(records), len(segments))))
    return merge_translations(segments, records)


def _run(args: argparse.Namespace) -> None:
    try:
        granularity = config.parse_granularity(args.granularity)
        text_kind = config.parse_text_kind(args.text_kind)
    except ValueError as e:
        _fail(str(e))
    format_keys = _parse_format_keys(args.formats)
    if args.stdout and len(format_keys) != 1:
        _fail("--stdout needs exactly one format in --formats")

    raw_text = _read_input(args.input_file)
    if args.input_file == "-":
        stem = _STDIN_STEM
        default_dir = Path.cwd()
    else:
        input_path = Path(args.input_file).resolve()
        stem = input_path.stem
        default_dir = input_path.parent

    output_dir = Path(args.output_dir).resolve() if args.output_dir else default_dir
    if not args.stdout and not output_dir.is_dir():
        _fail("Output directory does not exist: {}".format(output_dir))

    try:
        _status("Repairing response ({} chars)...".format(len(raw_text)))
        segments = load_segments(raw_text, granularity)
        _status("  {} {} segments".format(len(segments), granularity.value))
        if args.translations:
            segments = _load_translations(args.translations, segments)
    except RepairError as e:
        _fail(str(e))

    options = {"granularity": granularity, "language": args.language}

    if args.stdout:
        formatter = create_formatter(format_keys[0], **options)
        sys.stdout.write(formatter.render(segments, text_kind))
        return

    _status("Formatting output...")
    saved_files: List[Path] = []
    for key in format_keys:
        formatter = create_formatter(key, **options)
        _status("  Running {} formatter...".format(formatter.name))
        for output in formatter.format(segments, text_kind):
            saved_path = _save_output(output, stem, output_dir)
            saved_files.append(saved_path)
            _status("  Saved: {}".format(saved_path.name))

    _status("")
    _status("Done! Saved {} file(s) to {}".format(len(saved_files), output_dir))


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable; tests can inspect the parser without running the pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="timedtext-convert",
        description="Repair a generative model's timed-text response and export "
                    "it as captions, lyrics, or plain text.",
    )

    parser.add_argument(
        "input_file",
        help="Path to the raw model response, or '-' to read stdin.",
    )

    parser.add_argument(
        "--granularity",
        default=config.DEFAULT_GRANULARITY,
        help="Segment granularity: line or word (default: %(default)s).",
    )

    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS.keys()))),
    )

    parser.add_argument(
        "--text-kind",
        default=config.DEFAULT_TEXT_KIND,
        help="Text to render: original or translated (default: %(default)s).",
    )

    parser.add_argument(
        "--translations",
        default=None,
        help="Path to a translation response, paired with segments by position.",
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as input file).",
    )

    parser.add_argument(
        "--language",
        default=None,
        help="xml:lang for TTML output (default: {}).".format(config.TTML_LANGUAGE),
    )

    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the single selected format to stdout instead of saving.",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log repair details to stderr.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    _run(args)


if __name__ == "__main__":
    main()
