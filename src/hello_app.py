# Minimal greeting web app for container deployment smoke tests
import logging
import os
import signal
import sys
import time

from flask import Flask, g, request
from prometheus_client import Counter, Histogram, start_http_server
from werkzeug.serving import make_server

GREETING = 'Hello from the Dockerized Node.js app!'

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when an environment variable holds an unusable value."""


def get_env_int(var_name, default=None):
    """Read an integer environment variable, falling back to default when unset."""
    value = os.getenv(var_name)
    if value is None or value == '':
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(
            f"Environment variable {var_name} must be an integer, got: {value}"
        ) from e


# Environment configuration
HOST = os.getenv('HOST', '0.0.0.0')
PORT = get_env_int('PORT', 3001)
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
METRICS_PORT = get_env_int('METRICS_PORT')

app = Flask(__name__)

# Prometheus metrics
REQUEST_COUNT = Counter(
    'hello_http_requests_total',
    'Total number of HTTP requests processed by the greeting service',
    ['method', 'endpoint', 'status']
)
REQUEST_LATENCY = Histogram(
    'hello_http_request_latency_seconds',
    'Latency of HTTP requests processed by the greeting service',
    ['endpoint']
)


@app.before_request
def start_timer():
    """Remember when the request started so the latency can be observed."""
    g.request_start_time = time.time()


@app.after_request
def record_request_metrics(response):
    """Record request count and latency for every response."""
    elapsed = time.time() - getattr(g, 'request_start_time', time.time())
    # unmatched paths share one label
    endpoint = request.endpoint or 'unmatched'
    REQUEST_LATENCY.labels(endpoint=endpoint).observe(elapsed)
    REQUEST_COUNT.labels(
        method=request.method,
        endpoint=endpoint,
        status=response.status_code
    ).inc()
    return response


@app.route('/')
def home():
    return GREETING


def resolve_log_level(name):
    """Map a level name such as "DEBUG" to its number, INFO when unknown."""
    level = logging.getLevelName(str(name).upper())
    if not isinstance(level, int):
        return logging.INFO
    return level


def configure_logging(level=None):
    """Send log records to stdout using the service-wide format."""
    logging.basicConfig(
        level=resolve_log_level(level or LOG_LEVEL),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stdout,
    )


def create_server(host=None, port=None):
    """Bind the HTTP listener and announce the address it serves on.

    Werkzeug exits the process with status 1 when the port cannot be bound,
    so returning at all means the listener is up.
    """
    host = HOST if host is None else host
    port = PORT if port is None else port

    server = make_server(host, port, app, threaded=True)
    bound_port = server.socket.getsockname()[1]
    logger.info('Server is running on http://localhost:%d', bound_port)
    return server


def start_metrics_server(port):
    """Expose Prometheus metrics on their own port, away from the app routes."""
    start_http_server(port)
    logger.info('Metrics available on http://localhost:%d/metrics', port)


def _handle_sigterm(signum, frame):
    # PID 1 in a container ignores SIGTERM unless a handler is installed
    logger.info('Received signal %d, shutting down', signum)
    sys.exit(0)


def main():
    configure_logging()
    server = create_server()

    signal.signal(signal.SIGTERM, _handle_sigterm)
    try:
        if METRICS_PORT is not None:
            start_metrics_server(METRICS_PORT)
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info('Interrupted, shutting down')
    finally:
        server.server_close()


if __name__ == '__main__':
    main()
