"""Remove duplicate lines from a file or from every file under a directory."""
from __future__ import annotations

import argparse
import fnmatch
import logging
import sys
import time
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from dotenv import load_dotenv
from tqdm import tqdm

from .config import load_settings, setup_logging
from .dedup import dedup_bytes, render_lines
from .models import DedupStats
from .rules import FALLBACK_ENCODING, OUTPUT_ENCODING

logger = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="line-dedup", description=__doc__)
    source = parser.add_mutually_exclusive_group()
    source.add_argument("file", nargs="?", type=Path, help="Input file to process")
    source.add_argument(
        "-d", "--directory", type=Path,
        help="Directory to process; each file found is deduplicated on its own",
    )
    parser.add_argument(
        "-o", "--output", type=Path,
        help="Output file (or directory with -d). Prints to stdout when omitted",
    )
    parser.add_argument("--stat", action="store_true", help="Show execution statistics")
    parser.add_argument(
        "--ignore", action="append", default=[], metavar="GLOB",
        help="Glob of files/directories to skip. Can be given multiple times",
    )
    parser.add_argument(
        "--trim-trailing-whitespace", action="store_true",
        help="Strip trailing whitespace from each line before comparing",
    )
    return parser.parse_args(list(argv))


def _is_ignored(rel: Path, patterns: Sequence[str]) -> bool:
    candidates = [rel.as_posix(), *rel.parts]
    return any(fnmatch.fnmatch(c, p) for p in patterns for c in candidates)


def iter_files(root: Path, ignore: Sequence[str] = ()) -> Iterable[Path]:
    """Regular files under ``root`` in sorted order, hidden ones included."""
    for path in sorted(root.rglob("*")):
        if not path.is_file():
            continue
        if _is_ignored(path.relative_to(root), ignore):
            logger.debug("Ignoring %s", path)
            continue
        yield path


def process_file(
    input_path: Path,
    output_path: Optional[Path] = None,
    trim_trailing_whitespace: bool = False,
    fallback_encoding: str = FALLBACK_ENCODING,
) -> DedupStats:
    """Deduplicate one file into ``output_path`` or stdout. Raises OSError on I/O failure."""
    raw = input_path.read_bytes()
    result = dedup_bytes(
        raw,
        trim_trailing_whitespace=trim_trailing_whitespace,
        fallback_encoding=fallback_encoding,
    )
    logger.info(
        "%s: encoding=%s method=%s read=%d removed=%d",
        input_path, result.encoding.decode_used, result.encoding.method,
        result.stats.lines_read, result.stats.duplicates_removed,
    )

    out = render_lines(result.lines)
    if output_path is None:
        sys.stdout.flush()
        sys.stdout.buffer.write(out.encode(OUTPUT_ENCODING))
        sys.stdout.buffer.flush()
    else:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(out, encoding=OUTPUT_ENCODING, newline="")
    return result.stats


def print_stats(stats: DedupStats) -> None:
    print(f"  Total lines read: {stats.lines_read}")
    print(f"  Duplicate lines found: {stats.duplicates_removed}")
    print(f"  Lines written: {stats.lines_written}")
    print(f"  Duration: {stats.elapsed_seconds:.2f}s")


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv()
    settings = load_settings()
    setup_logging(settings.log_level)

    args = _parse_args(sys.argv[1:] if argv is None else argv)
    start = time.perf_counter()
    total = DedupStats()
    failures = 0

    if args.directory is not None:
        files: List[Path] = list(iter_files(args.directory, args.ignore))
        print(f"Found {len(files)} files to process in directory.")

        for path in tqdm(files, desc="dedup", unit="file"):
            output_path = None
            if args.output is not None:
                output_path = args.output / path.relative_to(args.directory)
            try:
                stats = process_file(
                    path, output_path,
                    trim_trailing_whitespace=args.trim_trailing_whitespace,
                    fallback_encoding=settings.fallback_encoding,
                )
            except OSError as e:
                logger.error("Error processing file %s: %s", path, e)
                failures += 1
                continue
            if args.stat:
                print(f"\nStats for {path}:")
                print_stats(stats)
            total = total.merge(stats)
    elif args.file is not None:
        try:
            total = process_file(
                args.file, args.output,
                trim_trailing_whitespace=args.trim_trailing_whitespace,
                fallback_encoding=settings.fallback_encoding,
            )
        except OSError as e:
            logger.error("Error processing file %s: %s", args.file, e)
            failures += 1
    else:
        print("Error: You must specify an input file or a directory with -d.", file=sys.stderr)
        return 1

    total.elapsed_seconds = time.perf_counter() - start
    if args.stat:
        print("\n--- Total Execution Stats ---")
        print_stats(total)

    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
