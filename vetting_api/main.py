import logging
import platform
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.chain import ChainClient, SuiClient
from .core.config import Settings, get_settings
from .core.keys import Ed25519Keypair
from .core.results import error_body, utc_timestamp
from .routers import vetting_table
from .schemas.vetting_table import HealthResponse
from .services.vetting_service import VettingTableService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = [
    "GET /health",
    "POST /api/vetting-table/initialize",
    "GET /api/vetting-table/:tableId",
]


def build_signer(settings: Settings) -> Optional[Ed25519Keypair]:
    """
    Derive the master keypair once per process.

    A missing mnemonic is reported per request by the create endpoint; a
    malformed one raises here and stops the service from starting.
    """
    mnemonic = settings.mnemonic
    if mnemonic is None:
        logger.warning("MASTER_MNEMONIC is not set, initialize requests will be rejected")
        return None
    signer = Ed25519Keypair.derive_keypair(mnemonic)
    logger.info(f"Master keypair loaded for address {signer.sui_address()}")
    return signer


def create_app(
    settings: Optional[Settings] = None,
    chain_client: Optional[ChainClient] = None,
    signer: Optional[Ed25519Keypair] = None,
) -> FastAPI:
    """Build the API with its chain client and signing identity."""
    settings = settings or get_settings()
    if chain_client is None:
        chain_client = SuiClient(
            settings.rpc_url,
            timeout=settings.SUI_RPC_TIMEOUT,
            gas_budget=settings.SUI_GAS_BUDGET,
        )
    if signer is None:
        signer = build_signer(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        logger.info(f"🚀 Vetting Table API listening on port {settings.PORT}")
        logger.info(f"Sui RPC: {settings.rpc_url}")
        for endpoint in AVAILABLE_ENDPOINTS:
            logger.info(f"   {endpoint}")
        logger.info(f"Python version: {platform.python_version()}")

        yield

        logger.info("Shutting down vetting table API...")
        await chain_client.close()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="API service for creating and reading vetting tables on Sui",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.vetting_service = VettingTableService(chain_client, signer, settings)

    # Registered before CORS so the CORS layer wraps it and 500s keep their headers
    @app.middleware("http")
    async def catch_unhandled_errors(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
            return JSONResponse(status_code=500, content=error_body("Internal server error"))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health_check():
        """Liveness check; does not touch the chain or the configuration."""
        health = HealthResponse(
            message="Vetting Table API is running",
            timestamp=utc_timestamp(),
            runtime_version=platform.python_version(),
        )
        return health.model_dump(by_alias=True)

    app.include_router(vetting_table.router, prefix="/api/vetting-table", tags=["vetting-table"])

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Unknown paths and unsupported methods both count as unrouted
        if exc.status_code in (404, 405):
            return JSONResponse(
                status_code=404,
                content={
                    "success": False,
                    "error": "Endpoint not found",
                    "availableEndpoints": AVAILABLE_ENDPOINTS,
                },
            )
        return JSONResponse(status_code=exc.status_code, content=error_body(str(exc.detail)))

    return app


def run():
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
