"""
Axis Ledger API Application Factory
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from .. import __version__
from ..config import LedgerConfig, get_config
from ..logging_config import setup_logging
from .auth import LedgerSystem
from .login import router as login_router
from .accounts import router as accounts_router


def create_app(config: Optional[LedgerConfig] = None,
               system: Optional[LedgerSystem] = None) -> FastAPI:
    """Create and configure the FastAPI application"""
    config = config or (system.config if system else get_config())
    setup_logging(level=config.log_level, fmt=config.log_format)

    app = FastAPI(
        title=config.api_title,
        description="Admin login, account creation, deposits, withdrawals and balance reads",
        version=__version__,
        docs_url=config.docs_url,
        redoc_url=None
    )
    app.state.ledger = system or LedgerSystem(config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(login_router, tags=["Auth"])
    app.include_router(accounts_router, prefix="/accounts", tags=["Accounts"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "axis_ledger",
            "version": __version__
        }

    @app.get("/")
    async def get_api_info():
        """Get API information"""
        return {
            "name": config.api_title,
            "version": __version__,
            "endpoints": {
                "docs": config.docs_url,
                "health": "/health",
                "login": "/login",
                "accounts": "/accounts",
            }
        }

    return app


app = create_app()


def run_server(host: Optional[str] = None, port: Optional[int] = None, debug: bool = False):
    """Run the FastAPI server"""
    config = get_config()
    uvicorn.run(
        "axis_ledger.api:app",
        host=host or config.api_host,
        port=port or config.api_port,
        reload=debug,
        log_level=config.log_level.lower()
    )
