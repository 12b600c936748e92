"""Exceptions raised while talking to the govInfo API."""

from typing import Optional


class GovInfoError(Exception):
    """Base class for all govinfo-pipeline errors"""


class MissingParameterError(GovInfoError, ValueError):
    """A required query parameter (e.g. start or end date) was not supplied"""

    def __init__(self, parameter: str):
        self.parameter = parameter
        super().__init__(f"Missing required parameter: {parameter}")


class FetchExhaustedError(GovInfoError):
    """No successful response could be obtained for a request"""

    def __init__(
        self, url: str, attempts: int, last_error: Optional[BaseException] = None
    ):
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Failed to fetch {url} after {attempts} attempt(s): {last_error}"
        )


class MalformedResponseError(GovInfoError):
    """The response body is not JSON or does not have the expected shape"""
