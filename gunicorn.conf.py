"""
Production Server Configuration

Run FastAPI with Uvicorn workers under Gunicorn for production deployment.
"""

import multiprocessing
import os

# Server socket
bind = os.getenv("BIND", "0.0.0.0:8000")
backlog = 2048

# Worker processes. Each worker holds its own dashboard state and runs
# its own initial refresh, so keep the count small
workers = int(os.getenv("WORKERS", min(multiprocessing.cpu_count(), 4)))
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 1000
max_requests = 10000
max_requests_jitter = 1000
# Must exceed the per-fetch timeout of the initial refresh
timeout = 120
keepalive = 5
graceful_timeout = 30

# Process naming
proc_name = "showroom-dashboard-api"

# Server mechanics
daemon = False
pidfile = "/tmp/gunicorn.pid"
user = None
group = None
tmp_upload_dir = None

# Logging
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info")
accesslog = "-"
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Hooks
def when_ready(server):
    """Called when server is ready to receive connections."""
    server.log.info("Showroom dashboard API ready on %s", bind)


def worker_abort(worker):
    """Called when worker receives SIGABRT signal."""
    worker.log.warning("Worker %s aborted, likely a refresh exceeded the timeout", worker.pid)
