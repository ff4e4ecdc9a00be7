from __future__ import annotations

import math
import uuid
from typing import Any, Dict, List, Optional

from .models import AttributeValue, Contact, Location, SocialLink, ValidationResult
from .normalization import is_valid_birth_year


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _check_coordinate(
    location: Dict[str, Any], key: str, limit: float, prefix: str, errors: List[str]
) -> None:
    value = location.get(key)
    # ints are compared exactly; float() would overflow on huge JSON integers
    if not _is_number(value) or (isinstance(value, float) and not math.isfinite(value)):
        errors.append(f"{prefix}: location.{key} must be a number")
    elif abs(value) > limit:
        errors.append(f"{prefix}: location.{key} must be between -{limit:g} and {limit:g}")


def _required_field_errors(raw: Dict[str, Any], prefix: str) -> List[str]:
    errors: List[str] = []
    if not _is_non_empty_str(raw.get("firstName")):
        errors.append(f"{prefix}: firstName is required")
    if not isinstance(raw.get("lastName"), str):
        errors.append(f"{prefix}: lastName is required")

    location = raw.get("location")
    if not isinstance(location, dict):
        errors.append(f"{prefix}: location is required")
        return errors
    _check_coordinate(location, "lat", 90, prefix, errors)
    _check_coordinate(location, "lng", 180, prefix, errors)
    if not _is_non_empty_str(location.get("city")):
        errors.append(f"{prefix}: location.city is required")
    if not _is_non_empty_str(location.get("country")):
        errors.append(f"{prefix}: location.country is required")
    return errors


def validate_string_list(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, str)]


def validate_birth_year(raw: Any) -> Optional[int]:
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    return raw if is_valid_birth_year(raw) else None


def validate_social_links(raw: Any) -> List[SocialLink]:
    if not isinstance(raw, list):
        return []
    links: List[SocialLink] = []
    for link in raw:
        if not isinstance(link, dict):
            continue
        platform, url = link.get("platform"), link.get("url")
        if isinstance(platform, str) and isinstance(url, str):
            icon = _optional_str(link.get("icon"))
            links.append(SocialLink(platform=platform, url=url, icon=icon))
    return links


def validate_attributes(raw: Any) -> Dict[str, AttributeValue]:
    """Keep scalar attribute values only; nested objects, arrays and nulls are dropped."""
    if not isinstance(raw, dict):
        return {}
    return {
        str(key): value
        for key, value in raw.items()
        if isinstance(value, (str, int, float, bool))
    }


def validate_contact(raw: Any, index: int) -> ValidationResult:
    """
    Validate one element of a JSON import batch.

    Every required-field check runs before returning, so a single element can
    report several errors, all prefixed ``Contact <index + 1>:``. Optional
    fields are coerced to safe defaults instead of failing.
    """
    prefix = f"Contact {index + 1}"
    if not isinstance(raw, dict):
        return ValidationResult(valid=False, errors=[f"{prefix}: must be an object"])

    errors = _required_field_errors(raw, prefix)
    if errors:
        return ValidationResult(valid=False, errors=errors)

    location = raw["location"]
    raw_id = raw.get("id")
    contact = Contact(
        contact_id=raw_id if _is_non_empty_str(raw_id) else str(uuid.uuid4()),
        first_name=raw["firstName"],
        last_name=raw["lastName"],
        location=Location(
            lat=float(location["lat"]),
            lng=float(location["lng"]),
            city=location["city"],
            country=location["country"],
        ),
        birth_year=validate_birth_year(raw.get("birthYear")),
        tags=validate_string_list(raw.get("tags")),
        languages=validate_string_list(raw.get("languages")),
        bio=_optional_str(raw.get("bio")),
        email=_optional_str(raw.get("email")),
        social_links=validate_social_links(raw.get("socialLinks")),
        attributes=validate_attributes(raw.get("attributes")),
        photo_url=_optional_str(raw.get("photoUrl")),
    )
    return ValidationResult(valid=True, contact=contact, errors=[])
