"""HTTP entry point for the browser extension.

Usage:
    uvicorn factcheck_aggregator.main_api:app
"""

from typing import List

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from .errors import AllBackendsFailed, NoCredentialsConfigured
from .log import setup_logging, get_logger
from .pipeline.run import fact_check_service
from .rendering.plain_text import format_for_clipboard, truth_color
from .schemas.report import Source

setup_logging()
logger = get_logger("api")

app = FastAPI(title="Fact Check Aggregator")


class FactCheckRequest(BaseModel):
    selection: str = Field(..., min_length=1)
    page_context: str = ""
    page_url: str = ""


class FactCheckResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    truth_percentage: str = Field(..., alias="truthPercentage")
    fact_check: str = Field(..., alias="factCheck")
    context: str
    sources: List[Source]
    truth_color: str = Field(..., alias="truthColor")
    clipboard_text: str = Field(..., alias="clipboardText")


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/fact-check", response_model=FactCheckResponse, response_model_by_alias=True)
async def fact_check(body: FactCheckRequest):
    try:
        report = await fact_check_service.run(body.selection, body.page_context, body.page_url)
    except NoCredentialsConfigured as e:
        raise HTTPException(status_code=400, detail=e.user_message)
    except AllBackendsFailed as e:
        # Per-backend reasons stay in the log
        logger.error(f"Fact check failed: {e}")
        raise HTTPException(status_code=502, detail=e.user_message)

    return FactCheckResponse(
        truth_percentage=report.truth_percentage,
        fact_check=report.fact_check,
        context=report.context,
        sources=report.sources,
        truth_color=truth_color(report.truth_percentage),
        clipboard_text=format_for_clipboard(report),
    )
