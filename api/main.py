from fastapi import FastAPI, Request
from typing import Optional
import logging
import time

from api.errors import register_exception_handlers
from api.orders import router as orders_router
from stores import OrderStore, build_order_store
from utils.config import Settings, get_settings
from utils.feature_flags import EnvFeatureFlags, FeatureFlagSource

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    handlers = [logging.StreamHandler()]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file))
    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[OrderStore] = None,
    feature_flags: Optional[FeatureFlagSource] = None,
) -> FastAPI:
    """Builds the API. A store passed in is used as-is instead of the configured one."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Order Tax Middleware",
        description="Receives orders from the source system, applies tax and serves them to consumers.",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.order_store = store
    app.state.feature_flags = feature_flags or EnvFeatureFlags()

    app.include_router(orders_router, prefix="/api/orders", tags=["orders"])
    register_exception_handlers(app)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # The 500 body is rendered outside this middleware by the catch-all handler
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(f"{request.method} {request.url.path} responded 500 in {elapsed_ms:.1f} ms")
            raise
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"{request.method} {request.url.path} responded {response.status_code} in {elapsed_ms:.1f} ms")
        return response

    @app.on_event("startup")
    async def startup_event():
        if app.state.order_store is None:
            app.state.order_store = build_order_store(settings)
        logger.info("Order Tax Middleware started")

    @app.on_event("shutdown")
    async def shutdown_event():
        if app.state.order_store is not None:
            await app.state.order_store.close()

    return app


settings = get_settings()
configure_logging(settings)
app = create_app(settings)


if __name__ == "__main__":
    import uvicorn
    # Use reload=True for development convenience
    uvicorn.run("api.main:app", host=settings.api_host, port=settings.api_port, reload=True)
