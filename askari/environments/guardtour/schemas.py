"""
Guard Tour Schemas - Data structures for guard-tour API payloads.

The remote service is loosely typed: the same concept may arrive under
alternate field names (``address`` / ``location``, ``phone`` /
``phoneNumber``) and unknown fields come and go. Models therefore keep
extra fields (``extra="allow"``) so the formatter can still see them
after a round trip through ``model_dump(by_alias=True)``.
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field


T = TypeVar("T")


class TokenResponse(BaseModel):
    """Response body of POST /auth/signin."""
    access_token: str = Field(..., min_length=1)

    model_config = ConfigDict(extra="allow")


class Site(BaseModel):
    """
    A monitored physical location.

    Identity is ``id``; ``name`` is what users type.
    """
    id: Any = None
    name: Optional[str] = None
    address: Optional[Any] = None
    location: Optional[Any] = None
    status: Optional[Any] = None
    is_active: Optional[bool] = Field(None, alias="isActive")
    description: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def matches_name(self, name: str) -> bool:
        """Exact, case-insensitive, whitespace-trimmed name comparison."""
        if not self.name:
            return False
        return self.name.strip().lower() == name.strip().lower()

    def to_payload(self) -> Dict[str, Any]:
        """Dump back to the API's camelCase shape, extras included."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Guard(BaseModel):
    """A security officer as returned by /users/security-guards."""
    id: Any = None
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    name: Optional[str] = None
    email: Optional[str] = None
    is_active: Optional[bool] = Field(None, alias="isActive")
    current_site: Optional[Any] = Field(None, alias="currentSite")

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @property
    def full_name(self) -> str:
        """First and last name joined by a space, or ``name`` if neither is set."""
        if self.first_name or self.last_name:
            return f"{self.first_name or ''} {self.last_name or ''}".strip()
        return (self.name or "").strip()

    def name_contains(self, query: str) -> bool:
        """Case-insensitive substring match against ``full_name``."""
        needle = query.strip().lower()
        return bool(needle) and needle in self.full_name.lower()

    def is_assigned_to(self, site: Site) -> bool:
        """Whether ``currentSite`` refers to the given site (by id or name)."""
        current = self.current_site
        if current is None:
            return False

        if isinstance(current, dict):
            if site.id is not None and current.get("id") is not None:
                return str(current.get("id")) == str(site.id)
            current = current.get("name")

        if site.id is not None and str(current) == str(site.id):
            return True
        return bool(site.name) and site.matches_name(str(current))

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass
class QueryResult(Generic[T]):
    """
    Outcome of a formatted guard-tour query.

    Attributes:
        message: Chat-ready text shown to the user
        has_data: False for "not found" / "no data" outcomes
        data: The raw payload the message was built from
        count: True number of records (patrol lists may show fewer)
    """
    message: str
    has_data: bool
    data: Optional[T] = None
    count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to the ``{message, hasData, data?, count?}`` shape."""
        result: Dict[str, Any] = {"message": self.message, "hasData": self.has_data}
        if self.data is not None:
            result["data"] = self.data
        if self.count is not None:
            result["count"] = self.count
        return result
