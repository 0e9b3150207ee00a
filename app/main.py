from fastapi import FastAPI, Request
from contextlib import asynccontextmanager
from starlette.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware
from app.api import quotes
from app.core.config import settings
from app.core.metrics import request_count, request_duration, get_metrics_text
from app.services.pricing_table import PricingTableError, get_pricing_table
import time
import logging

logger = logging.getLogger(__name__)


UNMATCHED_ENDPOINT = "unmatched"


def _endpoint_label(request: Request) -> str:
    # route template keeps label cardinality bounded
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ENDPOINT


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        try:
            response = await call_next(request)
            duration = time.time() - start_time

            request_count.labels(
                method=request.method,
                endpoint=_endpoint_label(request),
                status=response.status_code
            ).inc()

            request_duration.labels(
                method=request.method,
                endpoint=_endpoint_label(request)
            ).observe(duration)

            return response
        except Exception:
            duration = time.time() - start_time
            request_count.labels(
                method=request.method,
                endpoint=_endpoint_label(request),
                status=500
            ).inc()
            request_duration.labels(
                method=request.method,
                endpoint=_endpoint_label(request)
            ).observe(duration)
            raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Application starting...")

    try:
        table = get_pricing_table()
    except PricingTableError as e:
        logger.error(f"Pricing table could not be loaded: {e}")
        raise
    logger.info(
        f"Pricing table ready: graphic base {table.graphic.base_price:g}, "
        f"video base {table.video.base_price:g} {table.currency}"
    )

    yield

    logger.info("Application shutting down...")


app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan
)

app.add_middleware(MetricsMiddleware)

app.include_router(quotes.router)


@app.get("/metrics", tags=["monitoring"])
async def metrics():
    return Response(
        content=get_metrics_text(),
        media_type="text/plain; version=0.0.4; charset=utf-8"
    )


@app.get("/health", tags=["monitoring"])
async def health_check():
    return {
        "status": "healthy",
        "service": settings.API_TITLE,
        "version": settings.API_VERSION,
        "pricing_table": "custom" if settings.PRICING_TABLE_PATH else "default",
    }


@app.get("/", tags=["root"])
async def root():
    return {
        "message": settings.API_TITLE,
        "version": settings.API_VERSION,
        "docs": "/docs",
        "health": "/health",
        "metrics": "/metrics"
    }
