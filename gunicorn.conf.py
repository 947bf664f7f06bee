# gunicorn.conf.py
import os
import logging
import sys
import multiprocessing

# Application factory; each worker builds its own engine and store
wsgi_app = "app:create_app()"

# Configure logging to stdout
accesslog = '-'
errorlog = '-'
loglevel = os.getenv('LOG_LEVEL', 'info').lower()

# Get PORT from environment or use default
port = os.getenv('PORT', '3000')
bind = f"0.0.0.0:{port}"

# Read-only corpus queries are I/O bound; keep the worker count conservative
cores = multiprocessing.cpu_count()
workers = min(cores * 2 + 1, 6)
threads = 4


def on_starting(server):
    logger = logging.getLogger('gunicorn.error')
    logger.setLevel(logging.INFO)
    logger.addHandler(logging.StreamHandler(sys.stdout))
    logger.info(f"Starting gunicorn with {workers} workers on port {port}")
    logger.info(f"Worker timeout set to {timeout} seconds")


timeout = 60
keepalive = 5
worker_class = "gthread"

# Process naming
proc_name = "eden_bible_api"
default_proc_name = "eden_bible_api"

# Graceful server restart
graceful_timeout = 30
