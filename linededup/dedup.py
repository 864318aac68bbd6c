"""
Line deduplication: first occurrence wins, order is preserved.

Each call owns its own seen-set, so concurrent calls on different inputs
share nothing.
"""

from __future__ import annotations

import re
import time
from typing import Iterable, List, Tuple

from .models import DedupResult, DedupStats
from .normalize import decode_bytes
from .rules import CANONICAL_NEWLINE, FALLBACK_ENCODING

# CRLF must be tried before its single-character halves
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> List[str]:
    """Split on CRLF, CR or LF. A trailing terminator adds no empty line."""
    if not text:
        return []
    lines = _LINE_BREAK.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


def dedup_lines(
    lines: Iterable[str],
    trim_trailing_whitespace: bool = False,
) -> Tuple[List[str], DedupStats]:
    seen: set[str] = set()
    kept: list[str] = []
    read = removed = 0

    for line in lines:
        if trim_trailing_whitespace:
            line = line.rstrip()
        read += 1
        if line in seen:
            removed += 1
            continue
        seen.add(line)
        kept.append(line)

    return kept, DedupStats(lines_read=read, duplicates_removed=removed, lines_written=len(kept))


def dedup_text(text: str, trim_trailing_whitespace: bool = False) -> Tuple[List[str], DedupStats]:
    start = time.perf_counter()
    kept, stats = dedup_lines(split_lines(text), trim_trailing_whitespace=trim_trailing_whitespace)
    stats.elapsed_seconds = time.perf_counter() - start
    return kept, stats


def dedup_bytes(
    raw: bytes,
    trim_trailing_whitespace: bool = False,
    fallback_encoding: str = FALLBACK_ENCODING,
) -> DedupResult:
    """Decode ``raw`` with encoding detection, then deduplicate its lines."""
    start = time.perf_counter()
    text, encoding = decode_bytes(raw, fallback=fallback_encoding)
    kept, stats = dedup_text(text, trim_trailing_whitespace=trim_trailing_whitespace)
    stats.elapsed_seconds = time.perf_counter() - start
    return DedupResult(lines=kept, stats=stats, encoding=encoding)


def render_lines(lines: Iterable[str]) -> str:
    """Every output line ends with the canonical newline, whatever the input used."""
    return "".join(line + CANONICAL_NEWLINE for line in lines)
