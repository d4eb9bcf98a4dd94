"""
Gunicorn configuration for the Scoreboard Sync server.

Env vars that override defaults:
  PORT     — TCP port to bind
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# The snapshot cache and the scheduler live in the worker process: more than
# one worker would mean duplicated fetches and duplicated notifications.
workers = 1

# Each worker runs Uvicorn's ASGI event loop inside Gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5

# A cold start fetches the whole month before serving.
timeout = 120

# stdout only
loglevel = "info"
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'

# Wait for cancel_all() on shutdown.
graceful_timeout = 30

wsgi_app = "scoreboard.main:app"
