#!/usr/bin/env python3
"""
CBS Demo Stack Entry Point

Starts one tier of the stack:

    python run.py simulator   # CBS simulator on port 30001
    python run.py gateway     # middleware gateway on port 3000
    python run.py dashboard   # supervision dashboard on port 3001
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from cbs_simulator.config import get_config


def main(argv):
    tier = argv[1] if len(argv) > 1 else "simulator"
    config = get_config()

    if tier == "simulator":
        from cbs_simulator.api import run_server
        print("🏦 Starting CBS Simulator...")
        print("💰 All financial calculations use Decimal precision")
        print(f"🌐 API available at: http://localhost:{config.simulator_port}")
        print(f"📚 Documentation at: http://localhost:{config.simulator_port}/docs")
        run_server()
    elif tier == "gateway":
        from gateway.app import run_server
        print("🔌 Starting CBS Middleware...")
        print(f"🌐 API available at: http://localhost:{config.gateway_port}")
        print(f"📚 Documentation at: http://localhost:{config.gateway_port}/api-docs")
        run_server()
    elif tier == "dashboard":
        from dashboard.__main__ import main as run_dashboard
        run_dashboard()
    else:
        print(f"❌ Unknown tier '{tier}', expected simulator, gateway or dashboard")
        sys.exit(2)


if __name__ == "__main__":
    try:
        main(sys.argv)
    except KeyboardInterrupt:
        print("\n👋 Shutting down...")
    except Exception as e:
        print(f"❌ Error starting server: {e}")
        sys.exit(1)
