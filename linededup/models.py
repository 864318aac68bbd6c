from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field


class DedupStats(BaseModel):
    lines_read: int = 0
    duplicates_removed: int = 0
    lines_written: int = 0
    elapsed_seconds: float = 0.0

    def merge(self, other: "DedupStats") -> "DedupStats":
        return DedupStats(
            lines_read=self.lines_read + other.lines_read,
            duplicates_removed=self.duplicates_removed + other.duplicates_removed,
            lines_written=self.lines_written + other.lines_written,
            elapsed_seconds=self.elapsed_seconds + other.elapsed_seconds,
        )


class EncodingReport(BaseModel):
    detected: Optional[str] = Field(default=None, examples=["cp1252"])
    decode_used: str = "utf-8"
    method: str = Field(default="utf-8", examples=["bom", "utf-8", "detector"])
    bom: bool = False
    replacements: int = 0


class DedupResult(BaseModel):
    lines: List[str] = Field(default_factory=list)
    stats: DedupStats = Field(default_factory=DedupStats)
    encoding: EncodingReport = Field(default_factory=EncodingReport)


class DedupedContent(BaseModel):
    sha256: str
    encoding: str = Field(default="utf-8")
    content_b64: str


class DedupResponse(BaseModel):
    deduplicated: DedupedContent
    stats: DedupStats
    encoding: EncodingReport


class HealthResponse(BaseModel):
    ok: bool = True
