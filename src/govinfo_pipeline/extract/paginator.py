"""
Paginated Fetcher - Extract Layer

Follows the nextPage links of govInfo listing endpoints and accumulates every
page's records, in fetch order, into one list.
"""

from functools import partial
from typing import Any, Dict, Iterator, List, Optional
import logging

from ..coreutils.config import DEFAULT_PAGE_SIZE, GovInfoConfig
from ..coreutils.request import redact_url
from ..coreutils.time import DateLike
from ..errors import MissingParameterError
from .govinfo_api import GovInfoAPIClient
from .schemas import PageResponse, parse_page

logger = logging.getLogger(__name__)


def _require(name: str, value: Any) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingParameterError(name)


def iter_pages(
    client: GovInfoAPIClient,
    url: str,
    params: Optional[Dict[str, Any]] = None,
    records_key: str = "packages",
) -> Iterator[PageResponse]:
    """
    Yield each page of a listing, starting at url and following nextPage

    There is no page cap: iteration ends only when a page has no nextPage.

    Args:
        client: API client used for every request
        url: First page URL
        params: Query parameters for the first page only (nextPage links
            already embed their query)
        records_key: Name of the records array in each page

    Yields:
        PageResponse: One validated page at a time
    """
    next_url: Optional[str] = url
    next_params = params
    page_number = 0

    while next_url:
        page_number += 1
        page = client.get_json(
            next_url, next_params, parse=partial(parse_page, records_key=records_key)
        )

        logger.debug(
            f"Page {page_number} from {redact_url(next_url)}: "
            f"{len(page.records)} records (count={page.count})"
        )
        if page.message:
            logger.info(f"API message on page {page_number}: {page.message}")

        yield page

        next_url = page.next_page
        next_params = None


def paginate(
    client: GovInfoAPIClient,
    url: str,
    params: Optional[Dict[str, Any]] = None,
    records_key: str = "packages",
) -> List[Dict[str, Any]]:
    """
    Fetch every page of a listing and concatenate the records

    Any error aborts the whole call; records from earlier pages are discarded.

    Returns:
        List[Dict]: All records, in page-fetch order
    """
    records: List[Dict[str, Any]] = []
    pages = 0
    total: Optional[int] = None

    for page in iter_pages(client, url, params, records_key):
        records.extend(page.records)
        pages += 1
        total = page.count

    logger.info(f"Fetched {len(records)} {records_key} in {pages} page(s) (count={total})")
    return records


def _client_for(
    client: Optional[GovInfoAPIClient], api_key: Optional[str]
) -> GovInfoAPIClient:
    if client is not None:
        return client
    return GovInfoAPIClient(GovInfoConfig.from_env(api_key=api_key))


def fetch_all(
    collection: str,
    start_date: DateLike,
    end_date: DateLike,
    page_size: int = DEFAULT_PAGE_SIZE,
    api_key: Optional[str] = None,
    client: Optional[GovInfoAPIClient] = None,
) -> List[Dict[str, Any]]:
    """
    Fetch all packages of a collection published between two dates

    Args:
        collection: Collection code, e.g. "BILLS" (not validated locally)
        start_date: First publication date (required)
        end_date: Last publication date (required)
        page_size: Records per page
        api_key: govInfo API key (defaults to GOVINFO_API_KEY)
        client: Existing client to reuse (api_key is then ignored)

    Returns:
        List[Dict]: Package descriptors across all pages, in fetch order

    Raises:
        MissingParameterError: start_date or end_date missing (no request made)
        FetchExhaustedError: A page could not be fetched within the retry budget
        MalformedResponseError: A page was not a valid listing response
    """
    _require("start_date", start_date)
    _require("end_date", end_date)

    client = _client_for(client, api_key)
    url, params = client.published_query(collection, start_date, end_date, page_size)
    logger.info(
        f"Fetching published {collection} packages {start_date} -> {end_date} "
        f"(pageSize={params['pageSize']})"
    )
    return paginate(client, url, params, records_key="packages")


def fetch_collection_updates(
    collection: str,
    start_date: DateLike,
    end_date: Optional[DateLike] = None,
    page_size: int = DEFAULT_PAGE_SIZE,
    api_key: Optional[str] = None,
    client: Optional[GovInfoAPIClient] = None,
) -> List[Dict[str, Any]]:
    """
    Fetch all packages of a collection modified since start_date (optionally until end_date)

    Raises:
        MissingParameterError: start_date missing (no request made)
    """
    _require("start_date", start_date)

    client = _client_for(client, api_key)
    url, params = client.collection_query(collection, start_date, end_date, page_size)
    logger.info(f"Fetching {collection} packages modified since {start_date}")
    return paginate(client, url, params, records_key="packages")


def fetch_all_granules(
    package_id: str,
    page_size: int = DEFAULT_PAGE_SIZE,
    api_key: Optional[str] = None,
    client: Optional[GovInfoAPIClient] = None,
) -> List[Dict[str, Any]]:
    """
    Fetch every granule descriptor of a package

    Raises:
        MissingParameterError: package_id missing (no request made)
    """
    _require("package_id", package_id)

    client = _client_for(client, api_key)
    url, params = client.granules_query(package_id, page_size)
    logger.info(f"Fetching granules of {package_id}")
    return paginate(client, url, params, records_key="granules")
