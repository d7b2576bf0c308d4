import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
import sentry_sdk

from careercompass.api.v1 import analytics, chat, health, matches, opportunities, users
from careercompass.core.config import settings
from careercompass.core.cors import cors_options
from careercompass.core.lifespan import lifespan
from careercompass.core.rate_limit import limiter

load_dotenv()

_ROUTERS = (
    (health.router, "Health"),
    (users.router, "Users"),
    (opportunities.router, "Opportunities"),
    (matches.router, "Matches"),
    (chat.router, "Chat"),
    (analytics.router, "Analytics"),
)


def _configure_observability() -> None:
    logging.basicConfig(level=settings.log_level, format="%(message)s")
    if settings.sentry_dsn:
        sentry_sdk.init(dsn=settings.sentry_dsn, send_default_pii=False)


def create_app() -> FastAPI:
    _configure_observability()

    application = FastAPI(
        title="CareerCompass API",
        description="Profile extraction, opportunity matching and career advice.",
        version="0.1.0",
        lifespan=lifespan,
    )
    application.add_middleware(CORSMiddleware, **cors_options())

    application.state.limiter = limiter
    application.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    application.add_middleware(SlowAPIMiddleware)

    for router, tag in _ROUTERS:
        application.include_router(router, prefix="/v1", tags=[tag])
    return application


app = create_app()
