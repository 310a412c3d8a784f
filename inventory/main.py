# inventory/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .core import (
    list_products_logic, get_product_logic, create_product_logic,
    update_product_logic, delete_product_logic,
)
from .database import Store
from .errors import InventoryError, StorageError
from .models import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)

_store: Optional[Store] = None


def get_store() -> Store:
    global _store
    if _store is None:
        _store = Store(settings.data_path)
    return _store


def configure_logging(level: str = settings.log_level) -> None:
    logging.basicConfig(level=level, format="%(asctime)s [%(name)s] %(levelname)s: %(message)s")


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    store = app.dependency_overrides.get(get_store, get_store)()
    await store.load()
    logger.info("product store ready at %s", store.path)
    yield


app = FastAPI(title="Inventory Tracker API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("[req] %s %s - origin: %s", request.method, request.url.path, request.headers.get("origin"))
    return await call_next(request)


# ---------------------------
# Error responses: always {"error": "..."}
# ---------------------------
@app.exception_handler(InventoryError)
async def inventory_error_handler(request: Request, exc: InventoryError):
    if isinstance(exc, StorageError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{loc}: {first.get('msg')}" if loc else first.get("msg", "invalid request")
    else:
        message = "invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("%s %s failed", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Server error"})


# ---------------------------
# Product endpoints
# ---------------------------
@app.get("/products")
async def list_products(q: Optional[str] = None, sort: Optional[str] = None, store: Store = Depends(get_store)):
    return await list_products_logic(store, q, sort)


@app.get("/products/{product_id}")
async def get_product(product_id: str, store: Store = Depends(get_store)):
    return await get_product_logic(store, product_id)


@app.post("/products", status_code=201)
async def create_product(payload: ProductCreate, store: Store = Depends(get_store)):
    return await create_product_logic(store, payload)


@app.put("/products/{product_id}")
async def update_product(product_id: str, payload: ProductUpdate, store: Store = Depends(get_store)):
    return await update_product_logic(store, product_id, payload)


@app.delete("/products/{product_id}")
async def delete_product(product_id: str, store: Store = Depends(get_store)):
    await delete_product_logic(store, product_id)
    return {"success": True}


if __name__ == "__main__":
    uvicorn.run("inventory.main:app", host=settings.host, port=settings.port)
