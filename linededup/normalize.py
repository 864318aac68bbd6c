"""
Encoding normalization: arbitrary bytes in, valid Unicode text out.

Rules:
- A byte-order mark wins over any heuristic and is never part of the text.
- UTF-16 without a BOM is recognized by its NUL-byte pattern.
- Valid UTF-8 is decoded as UTF-8.
- Anything else is a best-effort guess via charset-normalizer. A single-byte
  guess yields to the configured fallback code page when that decodes cleanly.
- Decoding always uses replacement characters, so it never fails.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from charset_normalizer import from_bytes
from charset_normalizer.utils import is_multi_byte_encoding

from .models import EncodingReport
from .rules import (
    BOMS,
    FALLBACK_ENCODING,
    OUTPUT_ENCODING,
    UTF16_NUL_RATIO,
    UTF16_OTHER_PARITY_MAX,
)

logger = logging.getLogger(__name__)

REPLACEMENT_CHAR = "\ufffd"


def _sniff_bom(raw: bytes) -> Optional[Tuple[bytes, str]]:
    for bom, encoding in BOMS:
        if raw.startswith(bom):
            return bom, encoding
    return None


def _sniff_utf16(raw: bytes) -> Optional[str]:
    if len(raw) < 2 or len(raw) % 2:
        return None

    even = raw[0::2]
    odd = raw[1::2]
    nul_even = even.count(0) / len(even)
    nul_odd = odd.count(0) / len(odd)

    # ASCII-range text in UTF-16 has its zero high byte on one parity only
    if nul_odd >= UTF16_NUL_RATIO and nul_even <= UTF16_OTHER_PARITY_MAX:
        return "utf-16-le"
    if nul_even >= UTF16_NUL_RATIO and nul_odd <= UTF16_OTHER_PARITY_MAX:
        return "utf-16-be"
    return None


def _strictly_decodes(raw: bytes, encoding: str) -> bool:
    try:
        raw.decode(encoding)
    except (UnicodeDecodeError, LookupError):
        return False
    return True


def _is_utf8(raw: bytes) -> bool:
    return _strictly_decodes(raw, "utf-8")


def detect_encoding(raw: bytes, fallback: str = FALLBACK_ENCODING) -> Tuple[str, str]:
    """
    Pick a codec for ``raw`` without decoding it for real.

    Returns ``(encoding, method)`` where method is one of
    ``empty``, ``bom``, ``utf-16-heuristic``, ``utf-8``, ``detector``, ``fallback``.
    """
    if not raw:
        return OUTPUT_ENCODING, "empty"

    sniffed = _sniff_bom(raw)
    if sniffed is not None:
        return sniffed[1], "bom"

    utf16 = _sniff_utf16(raw)
    if utf16 is not None:
        return utf16, "utf-16-heuristic"

    if _is_utf8(raw):
        return OUTPUT_ENCODING, "utf-8"

    matches = from_bytes(raw)
    match = matches.best()
    if match is None or not match.encoding:
        return fallback, "fallback"

    # Single-byte code pages are hard to tell apart; keep the configured one
    # when the detector found it plausible or it decodes the bytes cleanly.
    if match.encoding != fallback and _strictly_decodes(raw, fallback):
        plausible = any(
            m.encoding == fallback or fallback in m.could_be_from_charset for m in matches
        )
        if plausible or not is_multi_byte_encoding(match.encoding):
            logger.debug("Detector guessed %s, keeping %s", match.encoding, fallback)
            return fallback, "detector"

    return match.encoding, "detector"


def _decode(payload: bytes, encoding: str, fallback: str) -> Tuple[str, str]:
    for candidate in (encoding, fallback):
        try:
            return payload.decode(candidate, errors="replace"), candidate
        except LookupError:
            logger.warning("Unknown codec %r, trying next candidate", candidate)
    return payload.decode(OUTPUT_ENCODING, errors="replace"), OUTPUT_ENCODING


def decode_bytes(raw: bytes, fallback: str = FALLBACK_ENCODING) -> Tuple[str, EncodingReport]:
    """
    Decode ``raw`` into text, replacing invalid sequences with U+FFFD.

    Never raises for any ``bytes`` input.
    """
    detected, method = detect_encoding(raw, fallback=fallback)

    payload = raw
    has_bom = False
    if method == "bom":
        bom, _ = _sniff_bom(raw)
        payload = raw[len(bom):]
        has_bom = True

    text, decode_used = _decode(payload, detected, fallback)

    report = EncodingReport(
        detected=None if method in ("empty", "fallback") else detected,
        decode_used=decode_used,
        method=method,
        bom=has_bom,
        replacements=text.count(REPLACEMENT_CHAR),
    )
    logger.debug(
        "Decoded %d bytes as %s (method=%s, replacements=%d)",
        len(raw), decode_used, method, report.replacements,
    )
    return text, report
