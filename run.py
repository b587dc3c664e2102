#!/usr/bin/env python3
"""
Wayfinder Engine Runner Script.

This script starts the FastAPI application with uvicorn.

Usage:
    python run.py                    # Development mode (auto-reload)
    python run.py --production       # Production mode

Environment Variables:
    PORT: Server port (default: 8002)
    HOST: Server host (default: 0.0.0.0)
    STORE_BACKEND: Trip/photo store, "csv" or "mongo" (default: csv)
"""

import argparse
import os

import uvicorn


def main():
    """Run the Wayfinder Engine server."""
    parser = argparse.ArgumentParser(description="Wayfinder Engine Server")
    parser.add_argument(
        "--production",
        action="store_true",
        help="Run in production mode (no auto-reload)"
    )
    parser.add_argument(
        "--host",
        default=os.getenv("HOST", "0.0.0.0"),
        help="Host to bind to (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("PORT", 8002)),
        help="Port to bind to (default: 8002)"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of worker processes (production only)"
    )
    args = parser.parse_args()

    config = {
        "app": "wayfinder.main:app",
        "host": args.host,
        "port": args.port,
        "log_level": "info",
    }

    if args.production:
        config["workers"] = args.workers
        config["reload"] = False
        print("Starting Wayfinder Engine in PRODUCTION mode...")
        print(f"Workers: {args.workers}")
    else:
        config["reload"] = True
        config["reload_dirs"] = ["wayfinder"]
        print("Starting Wayfinder Engine in DEVELOPMENT mode...")
        print("Auto-reload enabled")

    print(f"Server: http://{args.host}:{args.port}")
    print(f"API Docs: http://{args.host}:{args.port}/docs")
    print(f"Health Check: http://{args.host}:{args.port}/api/v1/health")
    print("-" * 50)

    uvicorn.run(**config)


if __name__ == "__main__":
    main()
