"""
Gunicorn configuration for the Student Pulse API.

Env vars that override defaults:
  PORT     — TCP port to bind
  WORKERS  — number of worker processes (default: 2)
  TIMEOUT  — worker timeout in seconds (default: 60)
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

workers = int(os.environ.get("WORKERS", "2"))

# Uvicorn's ASGI event loop inside Gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5

# Must stay above AI_TIMEOUT_SECONDS so a slow gateway call ends in a fallback, not a killed worker.
timeout = int(os.environ.get("TIMEOUT", "60"))

# stdout only; the platform captures it.
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'

graceful_timeout = 30
