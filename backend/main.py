"""FastAPI application for the ROI calculator: research and recalculation endpoints."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from backend.channel_library.registry import get_all_channels
from backend.config.settings import Settings
from backend.engine.calculator import compute_roi
from backend.engine.options import EngineOptions
from backend.models.enums import DealValueMode, WarmBaseline
from backend.models.params import PARAM_SPECS, Params, validate_params
from backend.providers.base import ResearchProvider
from backend.providers.errors import ERROR_KIND_HEADER, ResearchError
from backend.providers.perplexity_provider import PerplexityProvider

settings = Settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="ROI Calculator API", version="0.1.0")

# CORS for the front-end dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_research_provider() -> ResearchProvider:
    """Singleton provider shared by all requests."""
    return PerplexityProvider(settings=settings)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed research bodies get the same 400 shape as an empty domain."""
    if request.url.path != "/api/research":
        return await request_validation_exception_handler(request, exc)
    malformed_json = any(error.get("type") == "json_invalid" for error in exc.errors())
    message = "Invalid request body" if malformed_json else "Domain is required"
    logger.warning(f"Rejected research request: {message}")
    return JSONResponse(
        status_code=400,
        content={"error": message},
        headers={ERROR_KIND_HEADER: "invalid_identifier"},
    )


class ResearchRequest(BaseModel):
    domain: Optional[str] = None


class EngineOptionsPayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    warm_baseline: WarmBaseline = WarmBaseline.WARM_ACCOUNTS
    floor_uplift: bool = False
    reactivation_demo_to_deal: bool = True
    deal_value_mode: DealValueMode = DealValueMode.SPLIT

    def to_options(self) -> EngineOptions:
        return EngineOptions(
            warm_baseline=self.warm_baseline,
            floor_uplift=self.floor_uplift,
            reactivation_demo_to_deal=self.reactivation_demo_to_deal,
            deal_value_mode=self.deal_value_mode,
        )


class ROIRequest(BaseModel):
    params: dict[str, Any]
    options: EngineOptionsPayload = Field(default_factory=EngineOptionsPayload)


@app.post("/api/research")
async def research_company(
    body: ResearchRequest,
    provider: ResearchProvider = Depends(get_research_provider),
):
    """Research a company domain and return its metrics with citations."""
    try:
        record = await provider.research(body.domain or "")
    except ResearchError as e:
        logger.warning(f"Research failed for {body.domain!r}: {e.message}")
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_payload(),
            headers={ERROR_KIND_HEADER: e.kind},
        )
    return record.to_wire()


@app.post("/api/roi")
async def calculate_roi(body: ROIRequest):
    """Recalculate ROI for a full parameter snapshot. Stateless."""
    params = Params.from_wire(body.params)
    result = compute_roi(params, body.options.to_options())
    return {
        "params": params.to_wire(),
        "result": result.to_dict(),
        "issues": [
            {"key": PARAM_SPECS[issue.key].alias, "message": issue.message}
            for issue in validate_params(params)
        ],
    }


@app.get("/api/params")
async def list_params():
    """Field metadata for building the parameter form."""
    return [
        {
            "key": spec.alias,
            "label": spec.label,
            "unit": spec.unit.value,
            "group": spec.group.value,
            "note": spec.note,
            "default": spec.default,
        }
        for spec in PARAM_SPECS.values()
    ]


@app.get("/api/channels")
async def list_channels():
    """Registered value channels and the inputs each one depends on."""
    return [
        {
            "id": definition.id,
            "label": definition.label,
            "description": definition.description,
            "kind": definition.kind.value,
            "params": [PARAM_SPECS[name].alias for name in definition.required_params],
        }
        for definition in get_all_channels().values()
    ]


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}
