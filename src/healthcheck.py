# Container health probe: checks that the greeting endpoint answers correctly
import logging
import os
import sys

import requests

from hello_app import GREETING, PORT, configure_logging

logger = logging.getLogger(__name__)

DEFAULT_URL = f'http://localhost:{PORT}/'
DEFAULT_TIMEOUT = 3


def probe(url=DEFAULT_URL, timeout=DEFAULT_TIMEOUT):
    """Return True when url answers 200 with the expected greeting."""
    try:
        response = requests.get(url, timeout=timeout)
    except requests.exceptions.RequestException as e:
        logger.warning('Health probe to %s failed: %s', url, e)
        return False

    if response.status_code != 200:
        logger.warning('Health probe to %s returned status %d', url, response.status_code)
        return False
    if response.text != GREETING:
        logger.warning('Health probe to %s returned unexpected body: %r', url, response.text[:100])
        return False
    return True


def main():
    configure_logging()
    url = os.getenv('HEALTHCHECK_URL', DEFAULT_URL)
    sys.exit(0 if probe(url) else 1)


if __name__ == '__main__':
    main()
