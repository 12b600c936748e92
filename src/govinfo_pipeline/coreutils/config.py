"""
Pipeline configuration

A single GovInfoConfig object carries the API key, endpoint and tuning knobs.
It is passed explicitly to the client and pipeline; nothing reads credentials
from module-level globals.
"""

from dataclasses import dataclass, replace
from typing import Any, Optional
import logging

from .env import env_get, env_get_float, env_get_int
from .request import RetryPolicy

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.govinfo.gov"
DEFAULT_API_KEY = "DEMO_KEY"
DEFAULT_PAGE_SIZE = 100
DEFAULT_TIMEOUT = 30
DEFAULT_MAX_ATTEMPTS = 10
DEFAULT_CACHE_TTL = 3600.0


def _cache_ttl_from_env() -> Optional[float]:
    # An empty GOVINFO_CACHE_TTL means entries never expire
    value = env_get("GOVINFO_CACHE_TTL")
    if value is not None and value.strip() == "":
        return None
    return env_get_float("GOVINFO_CACHE_TTL", DEFAULT_CACHE_TTL)


@dataclass(frozen=True)
class GovInfoConfig:
    """Settings for talking to govInfo and writing outputs"""

    api_key: str = DEFAULT_API_KEY
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    page_size: int = DEFAULT_PAGE_SIZE
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    backoff_factor: float = 1.0
    max_backoff: float = 60.0
    cache_max_entries: int = 256
    cache_ttl_seconds: Optional[float] = DEFAULT_CACHE_TTL
    output_dir: str = "output"
    user_agent: str = "govinfo-pipeline/1.0"

    def __repr__(self) -> str:
        return (
            f"GovInfoConfig(base_url={self.base_url!r}, api_key='***', "
            f"page_size={self.page_size}, max_attempts={self.max_attempts}, "
            f"output_dir={self.output_dir!r})"
        )

    @classmethod
    def from_env(cls, **overrides: Any) -> "GovInfoConfig":
        """Build config from GOVINFO_* environment variables (and .env).

        Keyword overrides with a value other than None take precedence.
        """
        config = cls(
            api_key=env_get("GOVINFO_API_KEY") or DEFAULT_API_KEY,
            base_url=env_get("GOVINFO_BASE_URL", DEFAULT_BASE_URL),
            timeout=env_get_float("GOVINFO_TIMEOUT", DEFAULT_TIMEOUT),
            page_size=env_get_int("GOVINFO_PAGE_SIZE", DEFAULT_PAGE_SIZE),
            max_attempts=env_get_int("GOVINFO_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
            backoff_factor=env_get_float("GOVINFO_BACKOFF_FACTOR", 1.0),
            cache_max_entries=env_get_int("GOVINFO_CACHE_SIZE", 256),
            cache_ttl_seconds=_cache_ttl_from_env(),
            output_dir=env_get("GOVINFO_OUTPUT_DIR", "output"),
        )
        config = config.with_overrides(**overrides)

        if config.api_key == DEFAULT_API_KEY:
            logger.warning(
                "GOVINFO_API_KEY is not set, using DEMO_KEY (heavily rate limited)"
            )
        return config

    def with_overrides(self, **overrides: Any) -> "GovInfoConfig":
        """Copy of this config with the non-None overrides applied"""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.max_attempts,
            backoff_factor=self.backoff_factor,
            max_backoff=self.max_backoff,
        )
