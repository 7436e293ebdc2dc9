from fastapi import FastAPI

from gitgraph.api.routes.preview import router
from gitgraph.core.middleware import GraphicRateLimitMiddleware
from gitgraph.core.observability import configure_logging
from gitgraph.core.observability import init_sentry
from gitgraph.settings import Settings


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build the preview application with logging, Sentry and rate limiting."""

    app_settings = app_settings or Settings()
    configure_logging(app_settings)
    init_sentry(app_settings)

    application = FastAPI(title="gitgraph")
    application.state.settings = app_settings
    application.add_middleware(
        GraphicRateLimitMiddleware,
        requests_per_window=app_settings.rate_limit_per_minute,
        window_seconds=app_settings.rate_limit_window_seconds,
    )
    application.include_router(router)
    return application


app = create_app()
