import logging
from typing import Optional

import requests
import urllib3
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from src.settings import DEFAULT_USER_AGENT, RetryPolicy


class FetchError(Exception):
    """Raised when a page cannot be downloaded or answers with a non-success status"""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class PageFetcher:
    def __init__(self, retry_policy: Optional[RetryPolicy] = None, timeout: float = 30.0,
                 verify_tls: bool = True, pool_size: int = 4, user_agent: str = DEFAULT_USER_AGENT):
        self.retry_policy = retry_policy or RetryPolicy()
        self.timeout = timeout
        self.verify_tls = verify_tls
        self.logger = self._setup_logger()
        self.session = self._build_session(pool_size, user_agent)

        if not verify_tls:
            # Some university servers ship broken certificate chains
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def _setup_logger(self):
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        return logging.getLogger(__name__)

    def _build_session(self, pool_size: int, user_agent: str) -> requests.Session:
        session = requests.Session()
        session.headers.update({'User-Agent': user_agent})
        # Retries are done through tenacity, not urllib3
        adapter = requests.adapters.HTTPAdapter(
            pool_connections=pool_size,
            pool_maxsize=pool_size,
            max_retries=0,
        )
        session.mount('http://', adapter)
        session.mount('https://', adapter)
        return session

    def fetch(self, url: str) -> str:
        """Return the page markup, retrying according to the retry policy"""
        retrying = Retrying(
            reraise=True,
            stop=stop_after_attempt(self.retry_policy.max_attempts),
            wait=wait_exponential(
                multiplier=self.retry_policy.backoff_seconds,
                min=self.retry_policy.backoff_seconds,
                max=self.retry_policy.max_backoff_seconds,
            ),
            retry=retry_if_exception_type(FetchError),
            before_sleep=self._log_retry,
        )
        return retrying(self._fetch_once, url)

    def _fetch_once(self, url: str) -> str:
        try:
            response = self.session.get(url, timeout=self.timeout, verify=self.verify_tls)
        except requests.RequestException as e:
            raise FetchError(url, f"Request to {url} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise FetchError(url, f"HTTP {response.status_code} for {url}", response.status_code)

        return response.text

    def _log_retry(self, retry_state) -> None:
        exc = retry_state.outcome.exception()
        self.logger.warning(
            f"Attempt {retry_state.attempt_number}/{self.retry_policy.max_attempts} failed: {exc}. Retrying..."
        )

    def close(self) -> None:
        self.session.close()
