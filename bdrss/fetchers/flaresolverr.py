"""
FlareSolverr page fetcher for bdrss.
"""
import logging

from bdrss.exceptions import FetchError
from bdrss.utils.http import REQUEST_TIMEOUT, post_json

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_PROXY_URL = 'http://localhost:8191'
MAX_TIMEOUT_MS = 60000

class FlareSolverrFetcher:
    """
    Fetches fully rendered pages through a FlareSolverr proxy.
    """
    def __init__(self, proxy_url: str = DEFAULT_PROXY_URL,
                 max_timeout_ms: int = MAX_TIMEOUT_MS,
                 timeout: float = REQUEST_TIMEOUT):
        """
        Initialize the FlareSolverrFetcher.

        Args:
            proxy_url: Base URL of the FlareSolverr service
            max_timeout_ms: Time the proxy may spend solving the challenge
            timeout: Client timeout for the call to the proxy, in seconds
        """
        self.proxy_url = proxy_url.rstrip('/')
        self.max_timeout_ms = max_timeout_ms
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{self.proxy_url}/v1"

    def fetch(self, url: str) -> str:
        """
        Fetch a page through the proxy. One attempt, no retries.

        Args:
            url: The page to fetch

        Returns:
            The rendered HTML of the page

        Raises:
            FetchError: If the proxy is unreachable or returns no solution
        """
        logger.info(f"Fetching {url} via FlareSolverr...")
        payload = {
            'cmd': 'request.get',
            'url': url,
            'maxTimeout': self.max_timeout_ms,
        }

        try:
            data = post_json(self.endpoint, payload, timeout=self.timeout)

            solution = data.get('solution')
            if not solution:
                message = "proxy returned no solution"
                if data.get('status') and data.get('status') != 'ok':
                    message += f" (status: {data.get('status')}, message: {data.get('message')})"
                raise FetchError(message)

            html = solution.get('response') if isinstance(solution, dict) else None
            if not isinstance(html, str):
                raise FetchError("proxy solution has no response body")
        except FetchError as e:
            logger.error(f"FlareSolverr error: {e}")
            raise

        logger.info("FlareSolverr successfully bypassed protection")
        return html
