"""
FastAPI Endpoints for the Menh Scoring Engine
=============================================
HTTP API around the analysis core. The API owns all I/O, the core only
sees a text blob and a configuration record.

Base URL: http://localhost:8000

Endpoints:
- GET  /                          - API info
- GET  /api/health                - Health check
- GET  /api/config/defaults       - Default configuration for a menh
- POST /api/analyze               - Rank a list of numbers
- POST /api/analyze/export        - Ranked list as a plain-text export
- POST /api/quick-check           - Verdict for a single number
"""

from datetime import datetime
from typing import Any, Dict

import structlog
from dotenv import load_dotenv
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field

# Load environment variables
load_dotenv()

from .. import __version__
from ..engine import NumberAnalysisEngine, format_results
from ..errors import ConfigError
from ..models.analysis_config import create_default_analysis_config
from ..models.schemas import Mode

logger = structlog.get_logger(__name__)


# =============================================================================
# FastAPI App Initialization
# =============================================================================

app = FastAPI(
    title="Menh Scoring Engine API",
    description="""
## Ngu Hanh Phone Number Analysis

Rank phone numbers by how well their digits' elements suit a user's menh.

### Features:
- **3-Stage Pipeline**: Parse → Score → Filter
- **Two Modes**: Compatibility (against the user's menh) or AbsoluteBalance
- **Quick Check**: Verdict and first violated rule for a single number

### Quick Start:
1. `GET /api/config/defaults?user_menh=Kim` for a starting configuration
2. `POST /api/analyze` with the numbers (one per line) and the configuration
3. `POST /api/quick-check` to test a single number
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware - Allow all origins for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Request Models
# =============================================================================

class AnalyzeRequest(BaseModel):
    """Numbers to rank plus the analysis configuration"""
    raw_text: str = Field(..., description="Phone numbers, one per line")
    config: Dict[str, Any] = Field(..., description="Analysis configuration")

    class Config:
        json_schema_extra = {
            "example": {
                "raw_text": "0912345678\n0987654321\n",
                "config": {
                    "mode": "Compatibility",
                    "user_menh": "Kim",
                    "score_sinh": 3,
                    "score_cung": 2,
                    "score_bi_khac": 1,
                    "score_sinh_xuat": -1,
                    "score_khac": -3,
                    "filter_khac_max": 1,
                    "filter_bi_khac_max": 2,
                    "filter_sinh_min": 2,
                    "filter_cung_min": 2,
                    "filter_tong_max": 3,
                    "filter_any_max": 4,
                    "toggle_static_balance": False,
                    "toggle_completeness": False,
                    "toggle_prefix_filter": False,
                    "prefix_value": "",
                    "toggle_suffix_filter": False,
                    "suffix_value": "",
                    "toggle_blacklist_filter": False,
                    "blacklist_digits": "",
                },
            }
        }


class QuickCheckRequest(BaseModel):
    """A single number plus the analysis configuration"""
    number: str = Field(..., description="Phone number to check")
    config: Dict[str, Any] = Field(..., description="Analysis configuration")


# =============================================================================
# Health & Info Endpoints
# =============================================================================

@app.get("/", tags=["Info"])
async def root():
    """API information and available endpoints"""
    return {
        "service": "Menh Scoring Engine",
        "version": __version__,
        "status": "running",
        "docs": "/docs",
        "endpoints": {
            "Analyze": "POST /api/analyze",
            "Export": "POST /api/analyze/export",
            "Quick Check": "POST /api/quick-check",
            "Defaults": "GET /api/config/defaults",
            "Health": "GET /api/health",
        },
    }


@app.get("/api/health", tags=["Info"])
async def health_check():
    """Health check endpoint for monitoring"""
    return {
        "status": "healthy",
        "service": "Menh Scoring Engine",
        "version": __version__,
        "timestamp": datetime.utcnow().isoformat(),
    }


@app.get("/api/config/defaults", tags=["Configuration"])
async def default_config(
    user_menh: str = Query("Kim", description="User's menh (Kim, Moc, Thuy, Hoa, Tho)"),
    mode: str = Query(Mode.COMPATIBILITY.value, description="Compatibility or AbsoluteBalance"),
):
    """Default weights and thresholds for a menh"""
    config = create_default_analysis_config(user_menh=user_menh, mode=mode)
    return config.model_dump(mode="json")


# =============================================================================
# Analysis Endpoints
# =============================================================================

@app.post("/api/analyze", tags=["Analysis"])
def analyze_numbers(request: AnalyzeRequest):
    """
    Rank numbers against the configuration

    - Malformed lines are skipped
    - Rejected numbers are counted per reason
    - Results sorted by score, ties in input order
    """
    engine = NumberAnalysisEngine(request.config)
    batch = engine.analyze_batch(request.raw_text)

    return {
        "total_processed": batch.processed,
        "parsed": batch.parsed,
        "passed": batch.passed,
        "rejected": batch.rejected,
        "rejected_by": batch.rejected_by,
        "processing_time_ms": batch.processing_time_ms,
        "results": [{"number": r.number, "score": r.score} for r in batch.results],
    }


@app.post("/api/analyze/export", tags=["Analysis"], response_class=PlainTextResponse)
def export_numbers(request: AnalyzeRequest):
    """Ranked numbers as `<number>  score=<score>` lines"""
    engine = NumberAnalysisEngine(request.config)
    results = engine.analyze(request.raw_text)
    filename = f"ket_qua_{datetime.now().strftime('%Y%m%d_%H%M%S')}.txt"
    return PlainTextResponse(
        format_results(results),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.post("/api/quick-check", tags=["Analysis"])
def quick_check(request: QuickCheckRequest):
    """
    Check a single number

    Returns `{"Valid": {"score": ...}}` or `{"Invalid": {"reason": ...}}`
    where reason is `format` or the first violated filter.
    """
    engine = NumberAnalysisEngine(request.config)
    return engine.quick_check(request.number).to_wire()


# =============================================================================
# Error Handlers
# =============================================================================

@app.exception_handler(ConfigError)
async def config_error_handler(request, exc: ConfigError):
    logger.warning("invalid_config", path=request.url.path, detail=str(exc))
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid configuration",
            "detail": str(exc),
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.error("unhandled_error", path=request.url.path, error=str(exc), exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc),
            "type": type(exc).__name__,
        },
    )
