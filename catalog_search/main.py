"""FastAPI application wiring the catalog search service."""
from __future__ import annotations

import asyncio
import logging

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .cache import build_cache
from .config import settings
from .models import (
    FiltersResponse,
    MessageResponse,
    MetadataUpdate,
    MetadataUpdated,
    ProductCreate,
    ProductCreated,
    ProductListResponse,
    ProductResponse,
    SearchResponse,
    SuggestionResponse,
)
from .search_service import SearchService, product_payload
from .store import CatalogError, CatalogStore

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVEL = logging.getLevelName(settings.log_level.upper())

# ``force=True`` replaces uvicorn's default handlers so pipeline timing lines
# share one format.
logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, force=True)
for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
    logging.getLogger(name).setLevel(LOG_LEVEL)

logger = logging.getLogger(__name__)
logger.info("Logging configured at %s", settings.log_level.upper())

app = FastAPI(title="Catalog Search Service")


@app.on_event("startup")
async def startup_event() -> None:
    if getattr(app.state, "service", None) is not None:
        return
    service = SearchService(CatalogStore(), cache=build_cache(settings))
    if settings.load_on_startup:
        report = await asyncio.to_thread(service.load)
        logger.info("Service initialized with %s products", report.total)
    app.state.service = service


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": {"message": exc.detail}},
    )


def get_service(request: Request) -> SearchService:
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Catalog is not initialized")
    return service


@app.get("/health")
async def health(service: SearchService = Depends(get_service)) -> dict:
    count = await asyncio.to_thread(service.store.count)
    return {
        "success": True,
        "products": count,
        "catalogVersion": service.store.version,
    }


@app.get("/api/v1/search/product", response_model=SearchResponse)
async def search(
    query: str = Query("", max_length=200, description="Search query"),
    limit: int = Query(settings.default_results, ge=1, le=100),
    service: SearchService = Depends(get_service),
) -> SearchResponse:
    if not query.strip():
        raise HTTPException(status_code=400, detail="Query parameter is required")
    payload = await asyncio.to_thread(service.search_payload, query, limit)
    return SearchResponse(data=payload["data"], count=payload["count"])


@app.get("/api/v1/search/suggestions", response_model=SuggestionResponse)
async def suggestions(
    query: str = Query(""),
    limit: int = Query(10, ge=1, le=100),
    service: SearchService = Depends(get_service),
) -> SuggestionResponse:
    data = await asyncio.to_thread(service.suggestions, query, limit)
    return SuggestionResponse(data=data)


@app.get("/api/v1/search/filters", response_model=FiltersResponse)
async def search_filters(service: SearchService = Depends(get_service)) -> FiltersResponse:
    facets = await asyncio.to_thread(service.filter_facets)
    return FiltersResponse(data=facets)


@app.post("/api/v1/product", response_model=ProductCreated, status_code=201)
async def create_product(
    body: ProductCreate, service: SearchService = Depends(get_service)
) -> ProductCreated:
    data = body.model_dump(exclude_none=True)
    try:
        product = await asyncio.to_thread(service.create_product, data)
    except CatalogError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return ProductCreated(productId=product.product_id)


@app.put("/api/v1/product/meta-data", response_model=MetadataUpdated)
async def update_metadata(
    body: MetadataUpdate, service: SearchService = Depends(get_service)
) -> MetadataUpdated:
    product = await asyncio.to_thread(service.update_metadata, body.productId, body.metadata)
    if product is None:
        raise HTTPException(status_code=404, detail=f"Product with ID {body.productId} not found")
    return MetadataUpdated(productId=product.product_id, metadata=product.metadata)


@app.get("/api/v1/product/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, service: SearchService = Depends(get_service)) -> ProductResponse:
    product = await asyncio.to_thread(service.get_product, product_id)
    if product is None:
        raise HTTPException(status_code=404, detail=f"Product with ID {product_id} not found")
    return ProductResponse(data=product_payload(product))


@app.delete("/api/v1/product/{product_id}", response_model=MessageResponse)
async def delete_product(product_id: int, service: SearchService = Depends(get_service)) -> MessageResponse:
    deleted = await asyncio.to_thread(service.delete_product, product_id)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Product with ID {product_id} not found")
    return MessageResponse(message=f"Product {product_id} deleted successfully")


@app.get("/api/v1/products", response_model=ProductListResponse)
async def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    service: SearchService = Depends(get_service),
) -> ProductListResponse:
    result = await asyncio.to_thread(service.list_products, page, limit)
    return ProductListResponse(
        data=[product_payload(product) for product in result["products"]],
        pagination={
            "page": result["page"],
            "limit": result["limit"],
            "total": result["total"],
            "totalPages": result["totalPages"],
        },
    )
