"""
FastAPI application factory.
Creates the app with CORS, the shared OrderStore and router registration.
Swagger UI available at /docs, ReDoc at /redoc.
"""
import sys
from pathlib import Path
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Ensure src/ is on the path
_src_dir = str(Path(__file__).parent.parent)
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic for the FastAPI app."""
    import config
    from utils.logger import get_logger

    logger = get_logger()

    if getattr(app.state, "order_store", None) is None:
        from sheets.order_store import OrderStore

        logger.info(
            f"Connecting to sheet {config.GOOGLE_SHEET_ID} (tab '{config.ORDERS_SHEET_NAME}')",
            component="API",
        )
        try:
            app.state.order_store = OrderStore()
        except Exception as e:
            # Keep serving; handlers answer with error envelopes and /health reports degraded
            logger.error(f"Could not connect to the order sheet: {e}", component="API", exc_info=True)

    logger.info(f"Swagger UI: http://localhost:{config.API_PORT}/docs", component="API")

    yield

    logger.info("Shutting down API server", component="API")


def create_app(order_store=None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        order_store: Optional pre-built OrderStore; when omitted one is
            connected to GOOGLE_SHEET_ID at startup.
    """
    import config

    app = FastAPI(
        title="Sheet Order Tracker API",
        description=(
            "Order tracking backed by a Google Sheet. Each order is stored as "
            "one row per line item; every endpoint answers with a "
            "`{success, data, message}` envelope."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.order_store = order_store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.API_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Unparseable bodies get the same envelope as every other failure
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        from api.handlers import invalid_request
        return JSONResponse(status_code=200, content=invalid_request(exc.errors()))

    from api.routes.order_routes import router as order_router
    from api.routes.health_routes import router as health_router

    app.include_router(order_router, prefix="/api", tags=["Orders"])
    app.include_router(health_router, prefix="/health", tags=["Health"])

    @app.get("/", tags=["Root"])
    async def root():
        """API root - service descriptor."""
        return {
            "service": "Sheet Order Tracker API",
            "version": "1.0.0",
            "docs": "/docs",
            "redoc": "/redoc",
            "health": "/health",
        }

    return app
