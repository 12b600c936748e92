"""
Extract Layer Schemas

Response envelopes returned by the govInfo API. Record payloads (package and
granule descriptors) are owned by the API and kept as plain dicts; only the
fields the pipeline relies on are declared.
"""

from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import MalformedResponseError

ModelT = TypeVar("ModelT", bound=BaseModel)


class GovInfoModel(BaseModel):
    """Base model: accept camelCase API names, keep unknown fields"""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


# =============================================================================
# Paginated listings (/collections/{code}/..., /published/..., granules)
# =============================================================================


class PageResponse(GovInfoModel):
    """One page of a paginated listing"""

    count: int = Field(..., description="Total number of records across all pages")
    message: Optional[Union[str, List[str]]] = Field(
        None, description="Diagnostic message(s) from the API"
    )
    next_page: Optional[str] = Field(
        None, alias="nextPage", description="Absolute URL of the next page"
    )
    previous_page: Optional[str] = Field(
        None, alias="previousPage", description="Absolute URL of the previous page"
    )
    records: List[Dict[str, Any]] = Field(
        default_factory=list, description="Records on this page, API order"
    )

    @field_validator("next_page", "previous_page", mode="before")
    @classmethod
    def blank_link_is_none(cls, v):
        """Treat empty / whitespace-only links as absent"""
        if isinstance(v, str) and not v.strip():
            return None
        return v


def parse_page(payload: Any, records_key: str = "packages") -> PageResponse:
    """
    Validate a listing response and pull out its records array

    Args:
        payload: Decoded JSON body
        records_key: Name of the records array ("packages" or "granules")

    Returns:
        PageResponse: Validated page

    Raises:
        MalformedResponseError: If the body is not a listing envelope
    """
    if not isinstance(payload, dict):
        raise MalformedResponseError(
            f"Expected a JSON object, got {type(payload).__name__}"
        )
    if records_key not in payload:
        raise MalformedResponseError(
            f"Response is missing '{records_key}' (keys: {sorted(payload)})"
        )
    if not isinstance(payload[records_key], list):
        raise MalformedResponseError(f"'{records_key}' is not a list")

    envelope = {k: v for k, v in payload.items() if k != records_key}
    envelope["records"] = payload[records_key]
    return parse_model(PageResponse, envelope)


def parse_model(model: Type[ModelT], payload: Any) -> ModelT:
    """Validate payload against model, raising MalformedResponseError on mismatch"""
    if not isinstance(payload, dict):
        raise MalformedResponseError(
            f"Expected a JSON object for {model.__name__}, got {type(payload).__name__}"
        )
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise MalformedResponseError(
            f"Unexpected {model.__name__} response: {e.error_count()} error(s): {e}"
        ) from e


# =============================================================================
# Summaries (/packages/{id}/summary, /packages/{id}/granules/{gid}/summary)
# =============================================================================


class DownloadLinks(GovInfoModel):
    txt_link: Optional[str] = Field(None, alias="txtLink")
    pdf_link: Optional[str] = Field(None, alias="pdfLink")
    xml_link: Optional[str] = Field(None, alias="xmlLink")
    mods_link: Optional[str] = Field(None, alias="modsLink")
    premis_link: Optional[str] = Field(None, alias="premisLink")
    zip_link: Optional[str] = Field(None, alias="zipLink")


class PackageSummary(GovInfoModel):
    """Metadata and download links for one package"""

    package_id: str = Field(..., alias="packageId")
    title: Optional[str] = None
    collection_code: Optional[str] = Field(None, alias="collectionCode")
    date_issued: Optional[str] = Field(None, alias="dateIssued")
    last_modified: Optional[str] = Field(None, alias="lastModified")
    download: DownloadLinks = Field(default_factory=DownloadLinks)
    granules_link: Optional[str] = Field(None, alias="granulesLink")
    related_link: Optional[str] = Field(None, alias="relatedLink")


class GranuleSummary(GovInfoModel):
    """Metadata and download links for one granule of a package"""

    granule_id: str = Field(..., alias="granuleId")
    package_id: Optional[str] = Field(None, alias="packageId")
    title: Optional[str] = None
    granule_class: Optional[str] = Field(None, alias="granuleClass")
    date_issued: Optional[str] = Field(None, alias="dateIssued")
    download: DownloadLinks = Field(default_factory=DownloadLinks)
    related_link: Optional[str] = Field(None, alias="relatedLink")


# =============================================================================
# Collections (/collections)
# =============================================================================


class Collection(GovInfoModel):
    collection_code: str = Field(..., alias="collectionCode")
    collection_name: Optional[str] = Field(None, alias="collectionName")
    package_count: Optional[int] = Field(None, alias="packageCount")
    granule_count: Optional[int] = Field(None, alias="granuleCount")


class CollectionsResponse(GovInfoModel):
    collections: List[Collection]


# =============================================================================
# Related content (/related/{accessId})
# =============================================================================


class Relationship(GovInfoModel):
    relationship: Optional[str] = None
    collection: Optional[str] = None
    relationship_link: Optional[str] = Field(None, alias="relationshipLink")


class RelatedResponse(GovInfoModel):
    access_id: Optional[str] = Field(None, alias="accessId")
    relationships: List[Relationship] = Field(default_factory=list)
