import base64
import hashlib
import logging

from dotenv import load_dotenv
from fastapi import FastAPI, UploadFile, File, HTTPException

from .config import load_settings, setup_logging
from .dedup import dedup_bytes, render_lines
from .models import DedupResponse, HealthResponse
from .rules import OUTPUT_ENCODING

load_dotenv()
settings = load_settings()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="line-dedup",
    description="Encoding-tolerant duplicate line removal",
    version="0.1.0",
)

@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}

@app.post("/dedup", response_model=DedupResponse)
async def dedup_file(file: UploadFile = File(...), trim_trailing_whitespace: bool = False):
    limit = settings.max_upload_bytes
    if file.size is not None and file.size > limit:
        raise HTTPException(status_code=413, detail=f"Upload exceeds {limit} bytes")

    raw = await file.read(limit + 1)
    if len(raw) > limit:
        raise HTTPException(
            status_code=413,
            detail=f"Upload exceeds {limit} bytes",
        )

    result = dedup_bytes(
        raw,
        trim_trailing_whitespace=trim_trailing_whitespace,
        fallback_encoding=settings.fallback_encoding,
    )
    out = render_lines(result.lines).encode(OUTPUT_ENCODING)
    logger.info(
        "Deduplicated %s: read=%d removed=%d encoding=%s",
        file.filename, result.stats.lines_read, result.stats.duplicates_removed,
        result.encoding.decode_used,
    )

    return {
        "deduplicated": {
            "sha256": hashlib.sha256(out).hexdigest(),
            "encoding": OUTPUT_ENCODING,
            "content_b64": base64.b64encode(out).decode("ascii"),
        },
        "stats": result.stats,
        "encoding": result.encoding,
    }
