"""FastAPI application entrypoint for docwatch service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from ..logging import get_logger
from ..models import AnalysisResult, InvalidTimestampError
from ..orchestrator import Orchestrator

_LOGGER = get_logger("service")


class ChangedFilePayload(BaseModel):
    filename: str
    status: str = "modified"
    additions: int = 0
    deletions: int = 0
    patch: Optional[str] = None


class RecentChangePayload(BaseModel):
    sha: str
    date: str
    author: str = ""
    message: str = ""
    files: List[ChangedFilePayload] = Field(default_factory=list)
    pr_number: Optional[int] = None
    pr_title: Optional[str] = None


class DocReferencePayload(BaseModel):
    docPath: str
    references: List[str] = Field(default_factory=list)
    lastModified: Optional[str] = None


class AnalyzeRequest(BaseModel):
    docReferences: List[DocReferencePayload] = Field(default_factory=list)
    recentChanges: List[RecentChangePayload] = Field(default_factory=list)
    scanPeriodDays: int = Field(default=7, gt=0)


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing docwatch analysis."""
    app = FastAPI(title="DocWatch Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        # Lazy-instantiate per request to keep state predictable.
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/analyze")
    async def analyze(
        payload: AnalyzeRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> Dict[str, Any]:
        def _run_analyze() -> AnalysisResult:
            return orchestrator.run_analyze(
                payload.model_dump(exclude_none=True),
                scan_period_days=payload.scanPeriodDays,
            )

        try:
            loop = asyncio.get_running_loop()
            result = await loop.run_in_executor(None, _run_analyze)
        except InvalidTimestampError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return result.to_dict()

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    _LOGGER.info("Starting docwatch service on %s:%d", host, port)
    uvicorn.run(create_app(), host=host, port=port)
