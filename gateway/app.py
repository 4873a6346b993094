"""
Gateway Application Factory

Wires the proxy routes, the access log middleware and the monitoring
endpoints around one CBSClient.
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from cbs_simulator.config import get_config
from cbs_simulator.error_handlers import register_exception_handlers
from cbs_simulator.logging_config import (
    correlation_context, get_logger, log_action, setup_logging
)
from . import __version__
from .client import CBSClient
from .metrics import GatewayMetrics
from .routes import router

logger = get_logger("cbs.gateway.access")


def create_app(client: Optional[CBSClient] = None) -> FastAPI:
    """Create and configure the gateway application"""
    config = get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.cbs_client.aclose()

    app = FastAPI(
        title="CBS Middleware API",
        description="Gateway between the dashboard and the CBS simulator",
        version=__version__,
        docs_url="/api-docs",
        lifespan=lifespan
    )
    app.state.cbs_client = client or CBSClient(config.simulator_url, config.proxy_timeout)
    app.state.metrics = GatewayMetrics()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        """One structured line per request, tagged with its correlation id"""
        correlation_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        start = time.perf_counter()
        with correlation_context(correlation_id):
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - start) * 1000

            cbs_status = response.headers.get("x-cbs-status")
            cbs_time = response.headers.get("x-cbs-response-time")
            app.state.metrics.record_request(
                response.status_code,
                cbs_time_ms=float(cbs_time) if cbs_time else None,
                cbs_failed=cbs_status == "unreachable"
            )
            log_action(
                logger, "info",
                f"{request.method} {request.url.path} {response.status_code} | "
                f"CBS Status: {cbs_status or '-'} | CBS Time: {cbs_time + 'ms' if cbs_time else '-'}",
                action="http_request", resource=request.url.path,
                extra={
                    "method": request.method,
                    "status": response.status_code,
                    "duration_ms": round(elapsed_ms, 3),
                    "cbs_status": cbs_status,
                    "cbs_response_time_ms": cbs_time,
                }
            )
        response.headers["X-Request-ID"] = correlation_id
        return response

    register_exception_handlers(app)
    app.include_router(router)

    @app.get("/", tags=["Monitoring"])
    async def get_api_info():
        """Get API information"""
        return {
            "message": "CBS Middleware API",
            "version": __version__,
            "status": "running",
            "endpoints": {
                "health": "/health",
                "metrics": "/metrics",
                "customers": "/customers/:id",
                "accounts": "/accounts/:id",
                "history": "/accounts/:id/history",
                "transfer": "/transfer",
                "transactions": "/api/transactions",
                "balance": "/api/balance/:accountNumber"
            }
        }

    @app.get("/health", tags=["Monitoring"])
    async def health_check():
        """Health status of the gateway and its CBS upstream"""
        cbs_healthy = await app.state.cbs_client.health_check()
        return {
            "status": "OK",
            "version": __version__,
            "uptime": app.state.metrics.uptime,
            "cbs": "healthy" if cbs_healthy else "unreachable"
        }

    @app.get("/metrics", tags=["Monitoring"])
    async def get_metrics():
        """Service performance metrics"""
        return app.state.metrics.snapshot()

    return app


def run_server(host: Optional[str] = None, port: Optional[int] = None):
    """Run the gateway with uvicorn"""
    config = get_config()
    setup_logging(config.log_level, "cbs", config.log_format)
    host = host or config.gateway_host
    port = port or config.gateway_port
    get_logger("cbs.gateway").info(
        f"CBS Middleware starting on {host}:{port}, upstream {config.simulator_url}"
    )
    uvicorn.run(create_app(), host=host, port=port, log_level=config.log_level.lower())
