"""
HTTP utilities for bdrss.
"""
import logging
from typing import Any, Dict

import requests

from bdrss.exceptions import FetchError

# Configure logging
logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 65  # seconds
JSON_HEADERS = {'Content-Type': 'application/json'}


def post_json(url: str, payload: Dict[str, Any], timeout: float = REQUEST_TIMEOUT) -> Dict[str, Any]:
    """
    POST a JSON payload and decode the JSON response.

    Args:
        url: Endpoint to post to
        payload: JSON-serializable request body
        timeout: Client timeout in seconds

    Returns:
        The decoded response object

    Raises:
        FetchError: On transport errors, non-2xx responses or a non-JSON body
    """
    try:
        response = requests.post(url, json=payload, headers=JSON_HEADERS, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        if getattr(e, 'response', None) is not None:
            logger.debug(f"Status code: {e.response.status_code}")
        raise FetchError(str(e)) from e

    try:
        body = response.json()
    except ValueError as e:
        raise FetchError(f"Invalid JSON from {url}: {e}") from e

    if not isinstance(body, dict):
        raise FetchError(f"Unexpected response from {url}: {type(body).__name__}")
    return body
