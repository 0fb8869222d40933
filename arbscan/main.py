import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from arbscan.core.config import settings
from arbscan.core.exceptions import ArbitrageError
from arbscan.api.routes.arbitrage import router as arbitrage_router
from arbscan.api.routes.health import router as health_router
from arbscan.services.arbitrage import ArbitrageCalculator, ForexRateProvider
from arbscan.services.arbitrage_service import ArbitrageService
from arbscan.services.rate_limiting import RateLimiter, RateLimitMiddleware
from arbscan.services.scanner import QuoteFetcher, QuoteScanner
from arbscan.services.venues import VenueRegistry, build_ccxt_registry

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
)

logger = logging.getLogger(__name__)


def create_app(
    registry: Optional[VenueRegistry] = None,
    rate_provider: Optional[ForexRateProvider] = None,
    limiter: Optional[RateLimiter] = None,
) -> FastAPI:
    """
    Build the API app.

    Without a registry, one ccxt client per settings.VENUE_IDS is created
    at startup and closed at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        venues = registry if registry is not None else build_ccxt_registry(settings.VENUE_IDS)
        scanner = QuoteScanner(QuoteFetcher(venues))
        app.state.arbitrage_service = ArbitrageService(
            scanner=scanner,
            rate_provider=rate_provider or ForexRateProvider(),
            calculator=ArbitrageCalculator(),
        )
        logger.info(
            "%s ready: %d venues, %.1fs quote timeout",
            settings.PROJECT_NAME,
            len(venues),
            scanner.fetcher.timeout_sec,
        )
        yield
        await venues.close()

    app = FastAPI(title=settings.PROJECT_NAME, debug=settings.DEBUG, lifespan=lifespan)

    app.add_middleware(
        RateLimitMiddleware,
        limiter=limiter
        or RateLimiter(settings.RATE_LIMIT_MAX_REQUESTS, settings.RATE_LIMIT_WINDOW_SEC),
        prefix="/api/",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ArbitrageError, _arbitrage_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    app.include_router(arbitrage_router, prefix="/api/v1")
    app.include_router(health_router)

    return app


async def _arbitrage_error_handler(request: Request, exc: ArbitrageError) -> JSONResponse:
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "request"
        message = f"Invalid {field}: {first.get('msg', 'invalid value')}"
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s crashed", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": str(exc)})


app = create_app()
