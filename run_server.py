#!/usr/bin/env python
"""
Production Server Entry Point

Starts the dashboard API.
Usage:
    Development:  python run_server.py --dev
    Offline data: python run_server.py --dev --csv data/generated
    Production:   python run_server.py

    Or with Gunicorn:
    gunicorn showroom.main:app -c gunicorn.conf.py
"""

import argparse
import os
import subprocess


def run_dev_server(port: int):
    """Run development server with auto-reload."""
    import uvicorn

    uvicorn.run(
        "showroom.main:app",
        host="127.0.0.1",
        port=port,
        reload=True,
        reload_dirs=["showroom"],
        log_level="debug",
    )


def run_prod_server(port: int):
    """Run production server with Uvicorn directly."""
    import uvicorn

    from showroom.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "showroom.main:app",
        host=settings.api_host,
        port=port,
        workers=settings.api_workers,
        log_level=settings.monitoring.log_level.lower(),
        proxy_headers=True,
        forwarded_allow_ips="*",
        server_header=False,
    )


def run_gunicorn():
    """Run with Gunicorn (recommended for production)."""
    subprocess.run(["gunicorn", "showroom.main:app", "-c", "gunicorn.conf.py"], check=True)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Showroom Dashboard API Server")
    parser.add_argument("--dev", action="store_true", help="Run in development mode with auto-reload")
    parser.add_argument("--gunicorn", action="store_true", help="Run with Gunicorn (production)")
    parser.add_argument("--port", type=int, default=8000, help="Port to run on (default: 8000)")
    parser.add_argument("--csv", metavar="DIR", help="Read the dashboard from CSV files in DIR")

    args = parser.parse_args()

    # Settings are read from the environment, also by reloaded/forked workers
    if args.csv:
        os.environ["DASHBOARD_SOURCE"] = "csv"
        os.environ["DASHBOARD_CSV_DIR"] = args.csv
    os.environ["BIND"] = f"0.0.0.0:{args.port}"

    if args.dev:
        print("🚀 Starting development server...")
        run_dev_server(args.port)
    elif args.gunicorn:
        print("🚀 Starting production server with Gunicorn...")
        run_gunicorn()
    else:
        print("🚀 Starting production server with Uvicorn...")
        run_prod_server(args.port)
