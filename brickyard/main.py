from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from .config import settings
from .errors import register_error_handlers
from .logging import setup_logging, RequestIdMiddleware
from .storage.factory import build_store
from .storage.provider import EntityStore
from .routes.bricks import router as bricks_router
from .routes.tractors import router as tractors_router
from .routes.laborers import router as laborers_router
from .routes.orders import router as orders_router
from .routes.invoices import router as invoices_router
from .routes.settings import router as settings_router
from .routes.statistics import router as statistics_router


def create_app(store: Optional[EntityStore] = None) -> FastAPI:
    setup_logging()
    app = FastAPI(title=settings.app_name)

    # One store per process, reached through the get_store dependency
    owns_store = store is None
    app.state.store = store if store is not None else build_store(settings)

    # Middlewares
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    register_error_handlers(app)

    # Routers
    app.include_router(bricks_router)
    app.include_router(tractors_router)
    app.include_router(laborers_router)
    app.include_router(orders_router)
    app.include_router(invoices_router)
    app.include_router(settings_router)
    app.include_router(statistics_router)

    @app.get("/health")
    def health():
        return {"ok": True}

    # Metrics
    if settings.enable_metrics:
        Instrumentator().instrument(app).expose(app)

    @app.on_event("shutdown")
    def _shutdown():
        if owns_store:
            app.state.store.close()

    return app


app = create_app()
