"""
govinfo-pipeline - Extract, transform and store data from the govInfo API

Layers:
- coreutils: config, logging, HTTP session and retry policy, response cache
- extract: govInfo API client, response schemas, pagination
- transformation: records to tables, HTML to text
- load: local CSV / text storage
- orchestration: end-to-end pipeline runs
"""

from .errors import (
    GovInfoError,
    MissingParameterError,
    FetchExhaustedError,
    MalformedResponseError,
)

__version__ = "1.0.0"

__all__ = [
    "GovInfoError",
    "MissingParameterError",
    "FetchExhaustedError",
    "MalformedResponseError",
]
