"""
Shared fixtures: a mocked requests session and fake govInfo responses.
No test in this suite touches the network.
"""

from typing import Any, Dict, List, Optional
from unittest.mock import Mock

import pytest
import requests

from govinfo_pipeline.coreutils.config import GovInfoConfig
from govinfo_pipeline.extract.govinfo_api import GovInfoAPIClient

BASE_URL = "https://api.govinfo.gov"
API_KEY = "test-key"


def make_response(
    payload: Any = None,
    status_code: int = 200,
    text: str = "",
    headers: Optional[Dict[str, str]] = None,
    invalid_json: bool = False,
) -> Mock:
    """Fake requests.Response"""
    response = Mock()
    response.status_code = status_code
    response.headers = headers or {}
    response.text = text

    if invalid_json:
        response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    else:
        response.json.return_value = payload

    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Error", response=response
        )
    else:
        response.raise_for_status.return_value = None
    return response


def make_page(
    records: List[Dict[str, Any]],
    next_page: Optional[str] = None,
    count: Optional[int] = None,
    records_key: str = "packages",
) -> Dict[str, Any]:
    """Listing envelope as returned by /published, /collections and granules"""
    page = {
        "count": count if count is not None else len(records),
        "message": None,
        "nextPage": next_page,
        "previousPage": None,
        records_key: records,
    }
    return page


def package(package_id: str, **extra: Any) -> Dict[str, Any]:
    record = {
        "packageId": package_id,
        "lastModified": "2024-01-15T10:00:00Z",
        "packageLink": f"{BASE_URL}/packages/{package_id}/summary",
        "docClass": "hr",
        "title": f"Title of {package_id}",
        "congress": "118",
        "dateIssued": "2024-01-10",
    }
    record.update(extra)
    return record


@pytest.fixture
def config():
    """Fast config: no backoff, no cache"""
    return GovInfoConfig(
        api_key=API_KEY,
        base_url=BASE_URL,
        backoff_factor=0,
        cache_max_entries=0,
    )


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def sleep():
    return Mock()


@pytest.fixture
def client(config, session, sleep):
    return GovInfoAPIClient(config, session=session, sleep=sleep)
