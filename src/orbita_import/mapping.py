from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .calling_codes import CallingCodeLocation, location_from_phone
from .columns import ColumnMap
from .config_loader import ImportConfig
from .models import AttributeValue, Contact, Location, SocialLink
from .normalization import (
    extract_birth_year,
    first_non_empty,
    parse_birth_year,
    parse_coordinate_pair,
    parse_list,
    safe_cell,
    split_address_book_labels,
    validate_email_safe,
)

logger = logging.getLogger(__name__)

SOCIAL_PLATFORMS = ("linkedin", "instagram", "twitter", "github", "website")
PHONE_FIELDS = ("phone1", "phone2")

# column field -> attribute key
ATTRIBUTE_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("phone1", "phone"),
    ("phone2", "phone2"),
    ("organization", "company"),
    ("title", "role"),
    ("nickname", "nickname"),
)


@dataclass
class RowMappingSettings:
    phone_fallback: bool = True
    fill_city_from_phone: bool = False
    check_email_syntax: bool = True

    @classmethod
    def from_config(cls, config: ImportConfig) -> "RowMappingSettings":
        return cls(
            phone_fallback=config.location.phone_fallback,
            fill_city_from_phone=config.location.fill_city_from_phone,
            check_email_syntax=config.validation.email_syntax_check,
        )


class _RowReader:
    def __init__(self, row: Sequence[str], columns: ColumnMap):
        self.row = row
        self.columns = columns

    def __contains__(self, field: str) -> bool:
        return field in self.columns

    def get(self, field: str) -> str:
        return safe_cell(self.row, self.columns.get(field))


def _warn(warnings: Optional[List[str]], message: str) -> None:
    logger.warning(message)
    if warnings is not None:
        warnings.append(message)


def _resolve_names(cells: _RowReader) -> Tuple[str, str]:
    name_parts = cells.get("name").split()
    first_name = first_non_empty(cells.get("firstName"), name_parts[0] if name_parts else "")
    last_name = first_non_empty(cells.get("lastName"), " ".join(name_parts[1:]))
    middle_name = cells.get("middleName")
    if middle_name:
        last_name = f"{middle_name} {last_name}" if last_name else middle_name
    return first_name, last_name


def _resolve_coordinates(
    cells: _RowReader, row_number: int, warnings: Optional[List[str]]
) -> Tuple[float, float]:
    if "lat" not in cells or "lng" not in cells:
        return 0.0, 0.0
    lat_raw, lng_raw = cells.get("lat"), cells.get("lng")
    if not (lat_raw and lng_raw):
        return 0.0, 0.0
    pair = parse_coordinate_pair(lat_raw, lng_raw)
    if pair is None:
        _warn(warnings, f"Row {row_number}: invalid lat/lng, using defaults")
        return 0.0, 0.0
    return pair


def _phone_location(cells: _RowReader) -> Optional[CallingCodeLocation]:
    for field in PHONE_FIELDS:
        phone = cells.get(field)
        if not phone:
            continue
        found = location_from_phone(phone)
        if found is not None:
            return found
    return None


def _resolve_location(
    cells: _RowReader,
    row_number: int,
    settings: RowMappingSettings,
    warnings: Optional[List[str]],
) -> Location:
    city = first_non_empty(cells.get("city"), cells.get("address1City"))
    country = first_non_empty(cells.get("country"), cells.get("address1Country"))
    lat, lng = _resolve_coordinates(cells, row_number, warnings)
    location = Location(lat=lat, lng=lng, city=city, country=country)
    if location.has_coordinates or not settings.phone_fallback:
        return location

    fallback = _phone_location(cells)
    if fallback is None:
        return location
    logger.info(
        "Row %s: location inferred from phone calling code (%s)", row_number, fallback.country
    )
    return Location(
        lat=fallback.lat,
        lng=fallback.lng,
        city=(city or fallback.city) if settings.fill_city_from_phone else city,
        country=country or fallback.country,
    )


def _resolve_birth_year(cells: _RowReader) -> Optional[int]:
    return parse_birth_year(cells.get("birthYear")) or extract_birth_year(cells.get("birthday"))


def _resolve_email(
    cells: _RowReader,
    row_number: int,
    settings: RowMappingSettings,
    warnings: Optional[List[str]],
) -> Optional[str]:
    raw = cells.get("email")
    if not raw:
        return None
    if not settings.check_email_syntax:
        return raw
    normalized = validate_email_safe(raw)
    if not normalized:
        _warn(warnings, f"Row {row_number}: invalid email '{raw}' dropped")
        return None
    return normalized


def _social_links(cells: _RowReader) -> List[SocialLink]:
    links: List[SocialLink] = []
    for platform in SOCIAL_PLATFORMS:
        url = cells.get(platform)
        if url:
            links.append(SocialLink(platform=platform, url=url))
    return links


def _attributes(cells: _RowReader) -> Dict[str, AttributeValue]:
    attributes: Dict[str, AttributeValue] = {}
    for field, key in ATTRIBUTE_FIELDS:
        value = cells.get(field)
        if value:
            attributes[key] = value
    return attributes


def map_row(
    row: Sequence[str],
    columns: ColumnMap,
    row_number: int,
    settings: Optional[RowMappingSettings] = None,
    warnings: Optional[List[str]] = None,
) -> Optional[Contact]:
    """
    Turn one parsed CSV row into a contact, or None when the row has no first name.

    ``row_number`` is the 1-based position in the parsed grid (the header is
    row 1) and only appears in diagnostics. Field-level problems fall back to
    defaults and are reported through the logger and, when given, ``warnings``.
    """
    settings = settings or RowMappingSettings()
    cells = _RowReader(row, columns)

    first_name, last_name = _resolve_names(cells)
    if not first_name:
        logger.warning("Row %s: missing name, skipping", row_number)
        return None

    photo = cells.get("photo")
    return Contact(
        contact_id=str(uuid.uuid4()),
        first_name=first_name,
        last_name=last_name,
        location=_resolve_location(cells, row_number, settings, warnings),
        birth_year=_resolve_birth_year(cells),
        tags=split_address_book_labels(cells.get("labels")) + parse_list(cells.get("roles")),
        languages=parse_list(cells.get("languages")),
        bio=cells.get("bio") or None,
        email=_resolve_email(cells, row_number, settings, warnings),
        social_links=_social_links(cells),
        attributes=_attributes(cells),
        photo_url=photo if photo.startswith("http") else None,
    )
