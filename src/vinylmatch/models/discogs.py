"""Models for parsing Discogs API responses.

These are internal models used to parse and validate responses from
the Discogs REST API. They may change if the API changes.

Discogs is loose with types (search results report ``year`` as a string,
sometimes an empty one), so numeric fields are coerced leniently and
unparseable values become None instead of failing the whole response.
"""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

__all__ = [
    "ArtistRef",
    "BasicInformation",
    "CollectionRelease",
    "CollectionResponse",
    "IdentityResponse",
    "MasterResponse",
    "Pagination",
    "SearchCandidate",
    "SearchResponse",
    "WantItem",
    "WantsResponse",
]


def _lenient_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _object_list(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


LenientInt = Annotated[int | None, BeforeValidator(_lenient_int)]
StringList = Annotated[list[str], BeforeValidator(_string_list)]
ObjectList = BeforeValidator(_object_list)


class DiscogsModel(BaseModel):
    """Base model for Discogs API responses."""

    model_config = ConfigDict(extra="ignore", frozen=True)


class SearchCandidate(DiscogsModel):
    """One result of ``/database/search``.

    Transient: only the URL chosen from a candidate is ever persisted.
    """

    type: str | None = None
    title: str | None = None
    uri: str | None = None
    id: LenientInt = None
    year: LenientInt = None
    country: str | None = None
    format: StringList = Field(default_factory=list)
    thumb: str | None = None
    artist: str | None = None
    barcode: StringList = Field(default_factory=list)

    @property
    def is_master(self) -> bool:
        return (self.type or "").lower() == "master"

    @property
    def is_release(self) -> bool:
        return (self.type or "").lower() == "release"

    @property
    def is_linkable(self) -> bool:
        """Whether this result is a master or a release (not artist/label)."""
        return self.is_master or self.is_release


class SearchResponse(DiscogsModel):
    """Response of ``/database/search``."""

    results: Annotated[list[SearchCandidate], ObjectList] = Field(
        default_factory=list
    )


class ArtistRef(DiscogsModel):
    """Artist reference inside ``basic_information``."""

    name: str | None = None


class BasicInformation(DiscogsModel):
    """Release summary attached to wantlist and collection items."""

    id: LenientInt = None
    title: str | None = None
    year: LenientInt = None
    thumb: str | None = None
    uri: str | None = None
    resource_url: str | None = None
    artists: Annotated[list[ArtistRef], ObjectList] = Field(default_factory=list)


class WantItem(DiscogsModel):
    """Wantlist item."""

    basic_information: BasicInformation | None = None


class Pagination(DiscogsModel):
    """Pagination block of list endpoints."""

    items: LenientInt = None


class WantsResponse(DiscogsModel):
    """Response of ``/users/{username}/wants``."""

    pagination: Pagination = Field(default_factory=Pagination)
    wants: Annotated[list[WantItem], ObjectList] = Field(default_factory=list)


class CollectionRelease(DiscogsModel):
    """Collection folder item."""

    id: LenientInt = None


class CollectionResponse(DiscogsModel):
    """Response of ``/users/{username}/collection/folders/0/releases``."""

    releases: Annotated[list[CollectionRelease], ObjectList] = Field(
        default_factory=list
    )


class MasterResponse(DiscogsModel):
    """Response of ``/masters/{id}``."""

    main_release: LenientInt = None


class IdentityResponse(DiscogsModel):
    """Response of ``/oauth/identity``."""

    username: str | None = None
    name: str | None = None
