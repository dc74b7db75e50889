#!/usr/bin/env python3
"""
Axis Ledger Entry Point

Starts the FastAPI server with the ledger API on the configured host and port.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from axis_ledger.api import run_server
from axis_ledger.config import get_config


if __name__ == "__main__":
    config = get_config()
    print("🏦 Starting Axis Ledger...")
    print("🔒 Bearer-token authentication on all account operations")
    print(f"🌐 API available at: http://localhost:{config.api_port}")
    print(f"📚 Documentation at: http://localhost:{config.api_port}{config.docs_url}")
    print()

    try:
        run_server()
    except KeyboardInterrupt:
        print("\n👋 Shutting down Axis Ledger...")
    except Exception as e:
        print(f"❌ Error starting server: {e}")
        sys.exit(1)
