"""
Beauty Shop - Backend API
Storefront catalog, order intake, admin dashboard and report exports
"""
import time
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from app.api import auth, banners, notifications, orders, products
from app.core.config import settings
from app.core.database import get_db_connection_dict_with_retry
from app.core.exceptions import (
    RenderFailure,
    ShopError,
    TransactionFailure,
)

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Refuse to start without a token signing secret
    settings.get_jwt_secret()
    yield


# Crear aplicación FastAPI
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


# ============================================================================
# Error responses
# ============================================================================

@app.exception_handler(ShopError)
async def shop_error_handler(request: Request, exc: ShopError):
    if isinstance(exc, TransactionFailure):
        content = {"error": exc.message, "details": exc.details}
    elif isinstance(exc, RenderFailure):
        content = {"error": exc.message}
    elif exc.status_code >= 500:
        content = {"error": exc.message}
    else:
        content = {"msg": exc.message}
    return JSONResponse(status_code=exc.status_code, content=content)


def _first_error(errors) -> str:
    if not errors:
        return "Invalid request"
    error = errors[0]
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    return f"{location}: {error.get('msg')}" if location else error.get("msg", "Invalid request")


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"msg": _first_error(exc.errors())})


@app.exception_handler(PydanticValidationError)
async def model_validation_handler(request: Request, exc: PydanticValidationError):
    return JSONResponse(status_code=400, content={"msg": _first_error(exc.errors())})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Server error", "details": str(exc)})


# Include API routers
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(products.router, prefix="/api/products", tags=["Products"])
app.include_router(banners.router, prefix="/api/banners", tags=["Banners"])
app.include_router(orders.router, prefix="/api/orders", tags=["Orders"])
app.include_router(notifications.router, tags=["Notifications"])


@app.get("/")
async def root():
    """Endpoint raíz - Verificación de estado de la API"""
    return {
        "message": settings.API_TITLE,
        "status": "online",
        "version": settings.API_VERSION,
    }


@app.get("/health")
async def health():
    """Health check endpoint para monitoreo - tests database connectivity"""
    start_time = time.time()

    db_status = "unknown"
    db_latency_ms = None
    db_error = None

    try:
        # Fast check: single attempt
        conn = get_db_connection_dict_with_retry(max_retries=1, retry_delay=0.5)
        cursor = conn.cursor()

        db_start = time.time()
        cursor.execute("SELECT 1")
        cursor.fetchone()
        db_latency_ms = round((time.time() - db_start) * 1000, 2)

        cursor.close()
        conn.close()
        db_status = "connected"
    except Exception as e:
        db_status = "disconnected"
        db_error = str(e)

    total_latency_ms = round((time.time() - start_time) * 1000, 2)

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "service": "beauty-shop-api",
        "version": settings.API_VERSION,
        "database": {
            "status": db_status,
            "latency_ms": db_latency_ms,
            "error": db_error,
        },
        "total_latency_ms": total_latency_ms
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
