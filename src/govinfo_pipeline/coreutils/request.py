import re
import time
from dataclasses import dataclass
from urllib3.util.retry import Retry
import requests
from requests.adapters import HTTPAdapter
from typing import Any, Callable, Dict, Optional, Tuple
import logging

from ..errors import FetchExhaustedError, MalformedResponseError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)

# Attempt counting belongs to RetryPolicy, so the transport adapter never retries
# on its own; otherwise one logical attempt could turn into several requests.
TRANSPORT_RETRY_STRATEGY = Retry(
    total=0,
    raise_on_status=False,
    respect_retry_after_header=False,
)

_API_KEY_PATTERN = re.compile(r"(api_key=)[^&#]*", re.IGNORECASE)


def new_session(user_agent: str = "govinfo-pipeline/1.0") -> requests.Session:
    """Create a new requests session for the govInfo API"""
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=TRANSPORT_RETRY_STRATEGY)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    # Set default headers
    session.headers.update({"User-Agent": user_agent, "Accept": "application/json"})

    return session


def redact_url(url: str) -> str:
    """Mask the api_key query parameter so URLs are safe to log"""
    return _API_KEY_PATTERN.sub(r"\1***", url)


def prepared_url(url: str, params: Optional[Dict[str, Any]] = None) -> str:
    """Full request URL (query string included) exactly as requests would send it"""
    return requests.Request("GET", url, params=params).prepare().url


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry with exponential backoff.

    Attempt n (1-based) that fails is followed by a sleep of
    ``backoff_factor * 2 ** (n - 1)`` seconds, capped at ``max_backoff``.
    A numeric Retry-After header on a retryable response overrides the
    computed delay (still capped).
    """

    max_attempts: int = 10
    backoff_factor: float = 1.0
    max_backoff: float = 60.0
    status_forcelist: Tuple[int, ...] = RETRYABLE_STATUS_CODES

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

    def is_retryable(self, error: requests.RequestException) -> bool:
        response = getattr(error, "response", None)
        if isinstance(error, requests.HTTPError) and response is not None:
            return response.status_code in self.status_forcelist
        return True

    def wait_time(
        self, attempt: int, response: Optional[requests.Response] = None
    ) -> float:
        retry_after = _retry_after_seconds(response)
        if retry_after is not None:
            return min(retry_after, self.max_backoff)
        if self.backoff_factor <= 0:
            return 0.0
        return min(self.backoff_factor * (2 ** (attempt - 1)), self.max_backoff)


def _retry_after_seconds(response: Optional[requests.Response]) -> Optional[float]:
    if response is None or response.headers is None:
        return None
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return max(float(value), 0.0)
    except (TypeError, ValueError):
        # HTTP-date form is not worth parsing here
        return None


def request_with_retry(
    session: requests.Session,
    url: str,
    policy: RetryPolicy,
    params: Optional[Dict[str, Any]] = None,
    timeout: float = 30,
    sleep: Callable[[float], None] = time.sleep,
) -> requests.Response:
    """GET a URL, retrying transient failures according to policy.

    Args:
        session: HTTP session to use
        url: URL to fetch
        policy: Retry policy (attempt budget, backoff, retryable statuses)
        params: Optional query parameters
        timeout: Request timeout in seconds
        sleep: Sleep function used between attempts

    Returns:
        The successful response

    Raises:
        FetchExhaustedError: When every attempt failed, or a non-retryable
            HTTP status was returned
    """
    safe_url = redact_url(url)
    last_error: Optional[requests.RequestException] = None

    for attempt in range(1, policy.max_attempts + 1):
        try:
            start = time.time()
            response = session.get(url, params=params, timeout=timeout)
            response.raise_for_status()

            logger.debug(f"Fetched from {safe_url}: {time.time() - start:.2f} seconds")
            return response

        except requests.RequestException as e:
            last_error = e

            if not policy.is_retryable(e):
                logger.error(f"Non-retryable error for {safe_url}: {e}")
                raise FetchExhaustedError(safe_url, attempt, e) from e

            if attempt == policy.max_attempts:
                break

            wait_time = policy.wait_time(attempt, getattr(e, "response", None))
            logger.warning(
                f"Attempt {attempt}/{policy.max_attempts} failed for {safe_url} "
                f"({e}), retrying in {wait_time:.1f}s..."
            )
            sleep(wait_time)

    logger.error(f"Giving up on {safe_url} after {policy.max_attempts} attempts")
    raise FetchExhaustedError(safe_url, policy.max_attempts, last_error) from last_error


def get_json(
    session: requests.Session,
    url: str,
    policy: RetryPolicy,
    params: Optional[Dict[str, Any]] = None,
    timeout: float = 30,
    sleep: Callable[[float], None] = time.sleep,
) -> Any:
    """GET with retries and parse the JSON body.

    Raises:
        FetchExhaustedError: See request_with_retry
        MalformedResponseError: If the body is not valid JSON (not retried)
    """
    response = request_with_retry(session, url, policy, params, timeout, sleep)
    try:
        return response.json()
    except ValueError as e:
        raise MalformedResponseError(
            f"Invalid JSON response from {redact_url(url)}: {e}"
        ) from e


def get_text(
    session: requests.Session,
    url: str,
    policy: RetryPolicy,
    params: Optional[Dict[str, Any]] = None,
    timeout: float = 30,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """GET with retries and return the decoded body"""
    response = request_with_retry(session, url, policy, params, timeout, sleep)
    return response.text
