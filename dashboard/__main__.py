#!/usr/bin/env python3
"""Main entry point for the CBS Dashboard"""

import uvicorn

from cbs_simulator.config import get_config
from cbs_simulator.logging_config import setup_logging
from dashboard.app import create_app


def main():
    """Start the dashboard server"""
    config = get_config()
    setup_logging(config.log_level, "cbs", config.log_format)
    app = create_app()

    print("🏦 CBS Supervision Dashboard")
    print(f"💻 Starting on http://{config.dashboard_host}:{config.dashboard_port}")
    print(f"🔌 Gateway: {config.gateway_url}")
    print("🛑 Press Ctrl+C to stop")

    uvicorn.run(
        app,
        host=config.dashboard_host,
        port=config.dashboard_port,
        reload=False,
        access_log=False
    )


if __name__ == "__main__":
    main()
