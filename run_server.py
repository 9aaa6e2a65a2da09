#!/usr/bin/env python3
"""FastAPI server entry point for the NTI agent."""

import uvicorn
from dotenv import load_dotenv

load_dotenv()

if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="NTI Agent FastAPI Server")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument(
        "--timeout-keep-alive",
        type=int,
        default=5,
        help="Seconds to hold idle keep-alive connections",
    )

    args = parser.parse_args()

    uvicorn.run(
        "server.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        timeout_keep_alive=args.timeout_keep_alive,
        log_level="info",
    )
