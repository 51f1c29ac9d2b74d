"""Download of original media bytes."""

import logging

import requests

logger = logging.getLogger(__name__)


def fetch_bytes(url: str) -> bytes:
    """Download the full body at ``url``.

    Raises:
        requests.HTTPError: If the server answers with an error status
    """
    logger.debug("Fetching %s", url)
    response = requests.get(url)
    response.raise_for_status()
    return response.content
