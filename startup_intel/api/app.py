"""HTTP API: company catalog and website enrichment."""

import re
from datetime import datetime, timezone
from functools import lru_cache
from typing import List, Optional

import structlog
from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field

from .. import __version__
from ..catalog.companies import ALL_INDUSTRIES, CompanyCatalog, CompanyQuery
from ..enrichment.interfaces import PipelineError
from ..enrichment.pipeline import GENERIC_ENRICH_ERROR, EnrichmentPipeline

logger = structlog.get_logger()

app = FastAPI(title="Startup Intel", version=__version__)


class EnrichRequest(BaseModel):
    url: Optional[str] = None


class ExportRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = "companies"
    company_ids: List[str] = Field(default_factory=list, alias="companyIds")


@lru_cache(maxsize=1)
def get_catalog() -> CompanyCatalog:
    return CompanyCatalog.load()


def get_pipeline() -> EnrichmentPipeline:
    """A fresh pipeline per request; nothing is shared between requests."""
    return EnrichmentPipeline()


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{location}: {err.get('msg')}" if location else err.get("msg", ""))
    message = "Invalid request: " + "; ".join(messages) if messages else "Invalid request"
    logger.warning("request_invalid", path=request.url.path, error=message)
    return error_response(400, message)


async def _run_enrichment(pipeline: EnrichmentPipeline, url: Optional[str]):
    try:
        result = await pipeline.run(url)
    except PipelineError as e:
        return error_response(e.status_code, e.message)
    except Exception as e:
        logger.exception("enrich_unexpected_error", url=url, error=str(e))
        return error_response(500, GENERIC_ENRICH_ERROR)
    return result.to_dict()


# ===== HEALTH CHECK ENDPOINT =====
@app.get("/health")
async def health_check(catalog: CompanyCatalog = Depends(get_catalog)):
    """Health check endpoint for load balancers."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "companies": len(catalog),
    }


# ===== ENRICHMENT =====
@app.post("/api/enrich")
async def enrich(body: EnrichRequest, pipeline: EnrichmentPipeline = Depends(get_pipeline)):
    """Fetch a website, extract its text and summarize it with the LLM."""
    return await _run_enrichment(pipeline, body.url)


@app.post("/api/companies/{company_id}/enrich")
async def enrich_company(
    company_id: str,
    catalog: CompanyCatalog = Depends(get_catalog),
    pipeline: EnrichmentPipeline = Depends(get_pipeline),
):
    """Enrich a catalog company from its listed website."""
    company = catalog.get(company_id)
    if company is None:
        return error_response(404, "Company not found")
    return await _run_enrichment(pipeline, company.website)


# ===== CATALOG =====
@app.get("/api/companies")
async def list_companies(
    search: str = "",
    industry: str = ALL_INDUSTRIES,
    sort: Optional[str] = Query(None, pattern="^(name|industry|stage)$"),
    direction: str = Query("asc", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    catalog: CompanyCatalog = Depends(get_catalog),
):
    """Search, filter, sort and page the company table."""
    result = catalog.query(CompanyQuery(
        search=search,
        industry=industry,
        sort_field=sort,
        sort_direction=direction,
        page=page,
    ))
    return result.to_dict()


@app.get("/api/companies/{company_id}")
async def get_company(company_id: str, catalog: CompanyCatalog = Depends(get_catalog)):
    company = catalog.get(company_id)
    if company is None:
        return error_response(404, "Company not found")
    return company.to_dict()


@app.get("/api/industries")
async def list_industries(catalog: CompanyCatalog = Depends(get_catalog)):
    return {"industries": catalog.industries()}


@app.post("/api/lists/export")
async def export_list(body: ExportRequest, catalog: CompanyCatalog = Depends(get_catalog)):
    """Download a curated list's companies as CSV."""
    filename = re.sub(r"\s+", "-", body.name.strip()).replace('"', "") or "companies"
    content = catalog.export_csv(body.company_ids)
    logger.info("list_exported", name=body.name, companies=len(body.company_ids))
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}.csv"'},
    )
