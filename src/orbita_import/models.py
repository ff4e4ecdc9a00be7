from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence, Union

AttributeValue = Union[str, int, float, bool]


@dataclass(frozen=True)
class Location:
    lat: float = 0.0
    lng: float = 0.0
    city: str = ""
    country: str = ""

    @staticmethod
    def from_mapping(payload: Dict[str, Any]) -> "Location":
        return Location(
            lat=float(payload.get("lat", 0) or 0),
            lng=float(payload.get("lng", 0) or 0),
            city=str(payload.get("city", "") or "").strip(),
            country=str(payload.get("country", "") or "").strip(),
        )

    @property
    def has_coordinates(self) -> bool:
        return not (self.lat == 0 and self.lng == 0)

    def to_dict(self) -> Dict[str, Any]:
        return {"lat": self.lat, "lng": self.lng, "city": self.city, "country": self.country}


@dataclass(frozen=True)
class SocialLink:
    platform: str
    url: str
    icon: Optional[str] = None

    @staticmethod
    def from_mapping(payload: Dict[str, Any]) -> "SocialLink":
        icon = payload.get("icon")
        return SocialLink(
            platform=str(payload.get("platform", "") or "").strip(),
            url=str(payload.get("url", "") or "").strip(),
            icon=str(icon) if icon else None,
        )

    def to_dict(self) -> Dict[str, str]:
        payload = {"platform": self.platform, "url": self.url}
        if self.icon is not None:
            payload["icon"] = self.icon
        return payload


@dataclass(frozen=True)
class PhotoCandidate:
    name: str
    url: str


@dataclass
class Contact:
    contact_id: str = ""
    first_name: str = ""
    last_name: str = ""
    location: Location = field(default_factory=Location)
    birth_year: Optional[int] = None
    tags: List[str] = field(default_factory=list)
    languages: List[str] = field(default_factory=list)
    bio: Optional[str] = None
    email: Optional[str] = None
    social_links: List[SocialLink] = field(default_factory=list)
    attributes: Dict[str, AttributeValue] = field(default_factory=dict)
    photo_url: Optional[str] = None

    @staticmethod
    def _ensure_link_list(values: Sequence[Any]) -> List[SocialLink]:
        return [
            value if isinstance(value, SocialLink) else SocialLink.from_mapping(value)
            for value in values
        ]

    @classmethod
    def from_mapping(cls, payload: Dict[str, Any]) -> "Contact":
        """Rebuild a contact from its wire shape (see ``to_dict``)."""
        location = payload.get("location") or {}
        birth_year = payload.get("birthYear")
        return cls(
            contact_id=str(payload.get("id", "") or "").strip(),
            first_name=str(payload.get("firstName", "") or "").strip(),
            last_name=str(payload.get("lastName", "") or "").strip(),
            location=(
                location if isinstance(location, Location) else Location.from_mapping(location)
            ),
            birth_year=int(birth_year) if birth_year is not None else None,
            tags=[str(tag) for tag in payload.get("tags", []) or []],
            languages=[str(lang) for lang in payload.get("languages", []) or []],
            bio=payload.get("bio"),
            email=payload.get("email"),
            social_links=cls._ensure_link_list(payload.get("socialLinks", []) or []),
            attributes=dict(payload.get("attributes", {}) or {}),
            photo_url=payload.get("photoUrl"),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.contact_id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "location": self.location.to_dict(),
            "tags": list(self.tags),
            "languages": list(self.languages),
            "socialLinks": [link.to_dict() for link in self.social_links],
            "attributes": dict(self.attributes),
        }
        optional = {
            "birthYear": self.birth_year,
            "bio": self.bio,
            "email": self.email,
            "photoUrl": self.photo_url,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        return payload

    def replace(self, **changes: Any) -> "Contact":
        return replace(self, **changes)


@dataclass
class ValidationResult:
    valid: bool
    contact: Optional[Contact] = None
    errors: List[str] = field(default_factory=list)


@dataclass
class ImportResult:
    success: bool
    contacts: List[Contact] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def failure(cls, *errors: str) -> "ImportResult":
        return cls(success=False, contacts=[], errors=list(errors), warnings=[])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "contacts": [contact.to_dict() for contact in self.contacts],
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }
