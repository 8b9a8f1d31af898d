"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from runcaster.config import Config
from runcaster.datasources import (
    ChallengeStore,
    PayoutSplitter,
    SupabaseDataSource,
    SplitsRelaySplitter,
)
from runcaster.errors import (
    ChallengeNotFoundError,
    DistributionError,
    ParticipantNotFoundError,
)
from runcaster.api import router
from runcaster.api.dependencies import set_datasources

logger = logging.getLogger(__name__)


def create_app(
    config: Config | None = None,
    store: ChallengeStore | None = None,
    splitter: PayoutSplitter | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.
    
    Args:
        config: Application configuration. If None, loads from environment.
        store: Challenge store. If None, uses Supabase from the config.
        splitter: Payout splitter. If None, uses the splits relay from the config.
        
    Returns:
        Configured FastAPI application
    """
    if config is None:
        config = Config.from_env()
    
    if store is None:
        store = SupabaseDataSource(
            supabase_url=config.supabase_url,
            service_key=config.supabase_service_key,
        )
    if splitter is None:
        splitter = SplitsRelaySplitter(
            relay_url=config.splits_relay_url,
            api_key=config.splits_api_key,
        )
    
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown."""
        # Startup
        logger.info("Starting Runcaster rewards API")
        missing = config.missing_settings()
        if missing:
            logger.warning(f"Missing settings, distribution will fail: {', '.join(missing)}")
        
        set_datasources(config, store, splitter)
        
        yield
        
        # Shutdown
        logger.info("Shutting down...")
        await store.close()
        await splitter.close()
    
    app = FastAPI(
        title="Runcaster Rewards API",
        description="Challenges, reward tier allocation and payouts for Runcaster",
        version="1.0.0",
        lifespan=lifespan,
    )
    
    @app.exception_handler(ChallengeNotFoundError)
    @app.exception_handler(ParticipantNotFoundError)
    async def not_found_handler(request: Request, exc: Exception):
        return JSONResponse(status_code=404, content={"detail": str(exc)})
    
    @app.exception_handler(DistributionError)
    async def distribution_error_handler(request: Request, exc: DistributionError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})
    
    # Include API routes
    app.include_router(router)
    
    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}
    
    return app
