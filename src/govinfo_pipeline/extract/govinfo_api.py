"""
govInfo API Client - Pure I/O Operations

This module handles all calls to the govInfo REST API with no business logic.
Every request goes through the configured RetryPolicy and the in-process
ResponseCache. Returns raw records or validated response envelopes.
"""

import time
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import quote
import logging

import requests

from ..coreutils.cache import ResponseCache
from ..coreutils.config import GovInfoConfig
from ..coreutils.request import (
    get_json,
    get_text,
    new_session,
    prepared_url,
    redact_url,
)
from ..coreutils.time import DateLike, format_date, format_datetime
from ..errors import MalformedResponseError
from .schemas import (
    CollectionsResponse,
    GranuleSummary,
    PackageSummary,
    RelatedResponse,
    parse_model,
)

logger = logging.getLogger(__name__)

# A (url, params) pair ready to be passed to get_json
Query = Tuple[str, Dict[str, Any]]


class GovInfoAPIClient:
    """API client for govInfo endpoints"""

    def __init__(
        self,
        config: Optional[GovInfoConfig] = None,
        session: Optional[requests.Session] = None,
        cache: Optional[ResponseCache] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config or GovInfoConfig.from_env()
        self.session = session or new_session(self.config.user_agent)
        self.cache = (
            cache
            if cache is not None
            else ResponseCache(
                max_entries=self.config.cache_max_entries,
                ttl_seconds=self.config.cache_ttl_seconds,
            )
        )
        self.retry_policy = self.config.retry_policy()
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Low-level request helpers
    # ------------------------------------------------------------------

    def _url(self, *segments: Any) -> str:
        path = "/".join(quote(str(s), safe=":") for s in segments)
        return f"{self.config.base_url.rstrip('/')}/{path}"

    def _with_api_key(
        self, url: str, params: Optional[Dict[str, Any]]
    ) -> Optional[Dict[str, Any]]:
        """Add the api_key unless the URL (e.g. a nextPage link) already carries one"""
        params = {k: v for k, v in (params or {}).items() if v is not None}
        if "api_key=" not in url and "api_key" not in params:
            params["api_key"] = self.config.api_key
        return params or None

    def get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        parse: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        """
        GET a JSON document, served from cache when the same request was made before

        Only bodies that parse are cached, so a malformed response is fetched
        again on the next call.

        Args:
            url: Absolute URL
            params: Optional query parameters (api_key added automatically)
            parse: Validates the decoded body and returns the parsed value;
                raises MalformedResponseError on a bad shape

        Returns:
            parse(body), or the decoded JSON body when no parser is given
        """
        params = self._with_api_key(url, params)
        cache_key = prepared_url(url, params)

        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit for {redact_url(cache_key)}")
            return parse(cached) if parse else cached

        logger.info(f"Fetching from {redact_url(cache_key)}")
        start_time = time.time()

        data = get_json(
            self.session,
            url,
            self.retry_policy,
            params=params,
            timeout=self.config.timeout,
            sleep=self._sleep,
        )

        logger.debug(
            f"Fetched from {redact_url(cache_key)}: {time.time() - start_time:.2f} seconds"
        )
        result = parse(data) if parse else data
        self.cache.set(cache_key, data)
        return result

    def download_text(self, url: str) -> str:
        """Download a content link (e.g. a package's txtLink) as text"""
        params = self._with_api_key(url, None)
        cache_key = prepared_url(url, params)

        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        logger.info(f"Downloading {redact_url(cache_key)}")
        text = get_text(
            self.session,
            url,
            self.retry_policy,
            params=params,
            timeout=self.config.timeout,
            sleep=self._sleep,
        )
        self.cache.set(cache_key, text)
        return text

    # ------------------------------------------------------------------
    # Paginated listing queries (first page); see extract.paginator
    # ------------------------------------------------------------------

    def published_query(
        self,
        collection: str,
        start_date: DateLike,
        end_date: DateLike,
        page_size: Optional[int] = None,
        offset: int = 0,
    ) -> Query:
        """GET /published/{startDate}/{endDate} - packages by publication date"""
        url = self._url("published", format_date(start_date), format_date(end_date))
        params = {
            "offset": offset,
            "pageSize": page_size or self.config.page_size,
            "collection": collection,
            "api_key": self.config.api_key,
        }
        return url, params

    def collection_query(
        self,
        collection: str,
        start_date: DateLike,
        end_date: Optional[DateLike] = None,
        page_size: Optional[int] = None,
        offset: int = 0,
    ) -> Query:
        """GET /collections/{collection}/{startDate}[/{endDate}] - packages modified since startDate"""
        segments = ["collections", collection, format_datetime(start_date)]
        if end_date:
            segments.append(format_datetime(end_date))
        params = {
            "offset": offset,
            "pageSize": page_size or self.config.page_size,
            "api_key": self.config.api_key,
        }
        return self._url(*segments), params

    def granules_query(
        self, package_id: str, page_size: Optional[int] = None, offset: int = 0
    ) -> Query:
        """GET /packages/{packageId}/granules - granules of one package"""
        params = {
            "offset": offset,
            "pageSize": page_size or self.config.page_size,
            "api_key": self.config.api_key,
        }
        return self._url("packages", package_id, "granules"), params

    # ------------------------------------------------------------------
    # Single-shot endpoints
    # ------------------------------------------------------------------

    def get_collections(self) -> CollectionsResponse:
        """GET /collections - every collection with package/granule counts"""
        return self.get_json(
            self._url("collections"), parse=partial(parse_model, CollectionsResponse)
        )

    def get_package_summary(self, package_id: str) -> PackageSummary:
        """GET /packages/{packageId}/summary"""
        return self.get_json(
            self._url("packages", package_id, "summary"),
            parse=partial(parse_model, PackageSummary),
        )

    def get_granule_summary(self, package_id: str, granule_id: str) -> GranuleSummary:
        """GET /packages/{packageId}/granules/{granuleId}/summary"""
        return self.get_json(
            self._url("packages", package_id, "granules", granule_id, "summary"),
            parse=partial(parse_model, GranuleSummary),
        )

    def get_related(self, access_id: str) -> RelatedResponse:
        """GET /related/{accessId} - relationship types available for an access id"""
        return self.get_json(
            self._url("related", access_id), parse=partial(parse_model, RelatedResponse)
        )

    def get_relationship_results(self, relationship_link: str) -> List[Dict[str, Any]]:
        """Follow a relationshipLink from get_related and return its results"""

        def results(data: Any) -> List[Dict[str, Any]]:
            if not isinstance(data, dict) or not isinstance(data.get("results"), list):
                raise MalformedResponseError(
                    f"Relationship response from {redact_url(relationship_link)} has no 'results' list"
                )
            return data["results"]

        return self.get_json(relationship_link, parse=results)

    def get_package_text(self, package_id: str) -> str:
        """Download the raw (HTML-wrapped) text rendition of a package"""
        summary = self.get_package_summary(package_id)
        if not summary.download.txt_link:
            raise MalformedResponseError(f"Package {package_id} has no txtLink")
        return self.download_text(summary.download.txt_link)

    def get_granule_text(self, package_id: str, granule_id: str) -> str:
        """Download the raw (HTML-wrapped) text rendition of a granule"""
        summary = self.get_granule_summary(package_id, granule_id)
        if not summary.download.txt_link:
            raise MalformedResponseError(f"Granule {granule_id} has no txtLink")
        return self.download_text(summary.download.txt_link)
