from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

HEADER_NOISE_PATTERN = re.compile(r"[\s_]+")

ColumnMap = Dict[str, int]


def header_key(header: str) -> str:
    """``" First_Name "`` -> ``"firstname"``; hyphens are kept."""
    return HEADER_NOISE_PATTERN.sub("", (header or "").lower())


def _one_of(*keys: str) -> Callable[[str], bool]:
    accepted = frozenset(keys)
    return lambda key: key in accepted


@dataclass(frozen=True)
class HeaderRule:
    matches: Callable[[str], bool]
    field: str


# Evaluated in order; the first rule matching a header assigns its field.
HEADER_RULES: Tuple[HeaderRule, ...] = (
    # simple schema
    HeaderRule(_one_of("name", "fullname"), "name"),
    HeaderRule(_one_of("firstname", "first", "givenname"), "firstName"),
    HeaderRule(_one_of("lastname", "last", "familyname", "surname"), "lastName"),
    HeaderRule(_one_of("city"), "city"),
    HeaderRule(_one_of("country"), "country"),
    HeaderRule(_one_of("lat", "latitude"), "lat"),
    HeaderRule(_one_of("lng", "lon", "long", "longitude"), "lng"),
    HeaderRule(_one_of("roles", "role", "tags", "tag"), "roles"),
    HeaderRule(_one_of("languages", "language", "langs"), "languages"),
    HeaderRule(_one_of("birthyear", "year", "born"), "birthYear"),
    HeaderRule(_one_of("email", "mail", "e-mail", "e-mail1-value"), "email"),
    HeaderRule(_one_of("bio", "about", "description", "notes"), "bio"),
    HeaderRule(_one_of("linkedin"), "linkedin"),
    HeaderRule(_one_of("instagram", "insta"), "instagram"),
    HeaderRule(_one_of("twitter", "x"), "twitter"),
    HeaderRule(_one_of("github"), "github"),
    HeaderRule(_one_of("website", "web", "url", "website1-value"), "website"),
    # address-book export schema
    HeaderRule(_one_of("middlename", "additionalname"), "middleName"),
    HeaderRule(_one_of("nickname"), "nickname"),
    HeaderRule(_one_of("organizationname", "organization1-name", "company"), "organization"),
    HeaderRule(_one_of("organizationtitle", "organization1-title", "jobtitle"), "title"),
    HeaderRule(_one_of("birthday"), "birthday"),
    HeaderRule(_one_of("photo"), "photo"),
    HeaderRule(_one_of("labels", "groupmembership"), "labels"),
    HeaderRule(_one_of("phone1-value", "phone"), "phone1"),
    HeaderRule(_one_of("phone2-value"), "phone2"),
    HeaderRule(_one_of("address1-city"), "address1City"),
    HeaderRule(_one_of("address1-country"), "address1Country"),
)

NAME_FIELDS = ("name", "firstName")


def field_for_header(header: str, rules: Iterable[HeaderRule] = HEADER_RULES) -> Optional[str]:
    key = header_key(header)
    if not key:
        return None
    for rule in rules:
        if rule.matches(key):
            return rule.field
    return None


def detect_columns(headers: Sequence[str], rules: Iterable[HeaderRule] = HEADER_RULES) -> ColumnMap:
    rules = tuple(rules)
    columns: ColumnMap = {}
    ignored = []
    for index, header in enumerate(headers):
        target = field_for_header(header, rules)
        if target is None:
            if header:
                ignored.append(header)
            continue
        columns[target] = index
    if ignored:
        logger.debug("Ignoring unrecognized CSV headers: %s", ", ".join(ignored[:10]))
    return columns


def has_name_column(columns: ColumnMap) -> bool:
    return any(field in columns for field in NAME_FIELDS)
