"""
Fixed conventions for decoding input and rendering deduplicated output.
"""

OUTPUT_ENCODING = "utf-8"
CANONICAL_NEWLINE = "\n"
FALLBACK_ENCODING = "cp1252"  # Windows-1252, the usual legacy single-byte guess

# The BOM is sliced off before decoding. UTF-32LE must precede UTF-16LE.
BOMS = (
    (b"\xff\xfe\x00\x00", "utf-32-le"),
    (b"\x00\x00\xfe\xff", "utf-32-be"),
    (b"\xef\xbb\xbf", "utf-8"),
    (b"\xff\xfe", "utf-16-le"),
    (b"\xfe\xff", "utf-16-be"),
)

# UTF-16 without BOM: share of NUL bytes required on one byte parity.
UTF16_NUL_RATIO = 0.4
UTF16_OTHER_PARITY_MAX = 0.05
