"""
Web API

FastAPI app exposing the scrape and upload pipeline to the browser UI.

    POST /api/scrape   {storeUrl}
    POST /api/upload   {storeUrl, adminToken, products?, collections?,
                        priceMultiplier, prefixKeyword, descriptionPrefixKeyword?}
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..common.config_loader import load_settings
from ..models import Collection, Product
from ..pipeline import orchestrator

logger = logging.getLogger(__name__)

app = FastAPI(title="Shopify Store Copy API", version="0.1.0")
SETTINGS = load_settings()


class ScrapeRequest(BaseModel):
    storeUrl: Optional[str] = None


class UploadRequest(BaseModel):
    storeUrl: Optional[str] = None
    adminToken: Optional[str] = None
    products: List[Dict[str, Any]] = []
    collections: List[Dict[str, Any]] = []
    priceMultiplier: Optional[Any] = 1
    prefixKeyword: Optional[str] = ""
    descriptionPrefixKeyword: Optional[str] = ""


def _respond(response: orchestrator.PipelineResponse) -> JSONResponse:
    return JSONResponse(status_code=response.status_code, content=response.body)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/api/scrape")
def scrape(request: ScrapeRequest) -> JSONResponse:
    return _respond(orchestrator.scrape_store(request.storeUrl, settings=SETTINGS))


@app.post("/api/upload")
def upload(request: UploadRequest) -> JSONResponse:
    try:
        products = [Product.from_dict(p) for p in request.products]
        collections = [Collection.from_dict(c) for c in request.collections]
    except (AttributeError, TypeError, ValueError) as e:
        logger.error("Malformed upload payload: %s", e)
        return JSONResponse(status_code=500, content={"success": False, "error": f"Malformed upload payload: {e}"})
    logger.info("Upload request: %d products, %d collections", len(products), len(collections))

    return _respond(orchestrator.upload_catalog(
        request.storeUrl,
        request.adminToken,
        products=products,
        collections=collections,
        price_multiplier=request.priceMultiplier,
        prefix_keyword=request.prefixKeyword,
        description_prefix_keyword=request.descriptionPrefixKeyword,
        settings=SETTINGS,
    ))
