"""
CBS Simulator API Application Factory
"""

from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import get_config
from ..logging_config import get_logger, setup_logging
from ..error_handlers import register_exception_handlers
from ..models import format_timestamp
from .accounts import router as accounts_router
from .customers import router as customers_router
from .system import SimulatorSystem
from .transactions import router as transactions_router
from .transfers import router as transfers_router


def create_app(system: Optional[SimulatorSystem] = None) -> FastAPI:
    """Create and configure the FastAPI application"""
    config = get_config()
    app = FastAPI(
        title="CBS Simulator API",
        description="Mock core banking system with in-memory customers, accounts and history",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.system = system or SimulatorSystem(config=config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(customers_router, prefix="/cbs", tags=["Customers"])
    app.include_router(accounts_router, prefix="/cbs", tags=["Accounts"])
    app.include_router(transfers_router, prefix="/cbs", tags=["Transactions"])
    app.include_router(transactions_router, prefix="/api", tags=["Transactions"])

    @app.get("/", tags=["Monitoring"])
    async def get_service_info():
        """Service information, used as readiness probe"""
        return {
            "status": "OK",
            "service": "CBS Simulator",
            "version": __version__,
            "timestamp": format_timestamp(datetime.now(timezone.utc)),
            "uptime": app.state.system.uptime,
            "port": config.simulator_port,
            "environment": config.environment
        }

    @app.get("/health", tags=["Monitoring"])
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "CBS Simulator",
            "timestamp": format_timestamp(datetime.now(timezone.utc)),
            "uptime": app.state.system.uptime
        }

    return app


# Create the app instance for uvicorn
app = create_app()


def run_server(host: Optional[str] = None, port: Optional[int] = None, debug: bool = False):
    """Run the simulator with uvicorn"""
    config = get_config()
    setup_logging(config.log_level, "cbs", config.log_format)
    host = host or config.simulator_host
    port = port or config.simulator_port
    get_logger("cbs.api").info(f"CBS Simulator starting on {host}:{port} ({config.environment})")
    uvicorn.run(
        "cbs_simulator.api:app",
        host=host,
        port=port,
        reload=debug,
        log_level=config.log_level.lower()
    )
