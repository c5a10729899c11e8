from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from product_service.core.config import get_settings
from product_service.core.exceptions import ProductServiceError
from product_service.core.lifespan import lifespan
from product_service.api.v1.routers.health import router as health_router
from product_service.api.v1.routers.products import router as products_router
from product_service.api.v1.routers.recommendations import router as recommendations_router
from product_service.api.v1.routers.categories import router as categories_router
from product_service.api.v1.routers.interactions import router as interactions_router
from product_service.core.logging import configure_logging

from fastapi.middleware.cors import CORSMiddleware
import logging

settings = get_settings()
configure_logging(level=logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# ------- CORS -------
# ALLOWED_ORIGINS is a CSV, e.g. "https://shop.example.com,http://localhost:3000"
allowed_origins = [o.strip() for o in settings.ALLOWED_ORIGINS.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Recommendation-Status"],
    max_age=86400,
)


# ------- Errors -------
@app.exception_handler(ProductServiceError)
async def product_service_error_handler(request: Request, exc: ProductServiceError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": exc.message,
            "error_code": exc.error_code,
            "details": exc.details,
        },
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error", "error_code": "INTERNAL_ERROR"},
    )


# ------- Routes -------
app.include_router(health_router)
app.include_router(products_router, prefix=settings.API_PREFIX)
app.include_router(recommendations_router, prefix=settings.API_PREFIX)
app.include_router(categories_router, prefix=settings.API_PREFIX)
app.include_router(interactions_router, prefix=settings.API_PREFIX)
