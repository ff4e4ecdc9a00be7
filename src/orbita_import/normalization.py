from __future__ import annotations

import logging
import math
import re
import unicodedata
from typing import Any, List, Optional, Sequence, Tuple

from email_validator import EmailNotValidError, validate_email

logger = logging.getLogger(__name__)

BIRTH_YEAR_MIN = 1900
BIRTH_YEAR_MAX = 2100

ADDRESS_BOOK_LABEL_SEPARATOR = " ::: "
SYSTEM_LABEL = "* myContacts"

LEADING_INT_PATTERN = re.compile(r"^[+-]?\d+")
BIRTHDAY_YEAR_PATTERN = re.compile(r"\b(?:19|20)\d{2}\b")
NAME_SEPARATOR_PATTERN = re.compile(r"[\s_-]+")
NON_ALNUM_PATTERN = re.compile(r"[^a-z0-9]")
FILE_EXTENSION_PATTERN = re.compile(r"\.[^.]+$")
DECIMAL_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


def _strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_name(name: Optional[str]) -> str:
    """
    Build the comparison key used for photo matching.

    ``"José García"``, ``"jose-garcia"`` and ``"JoseGarcia"`` all become
    ``"josegarcia"``.
    """
    key = _strip_diacritics((name or "").lower())
    key = NAME_SEPARATOR_PATTERN.sub("", key)
    return NON_ALNUM_PATTERN.sub("", key)


def normalize_filename(filename: Optional[str]) -> str:
    return normalize_name(FILE_EXTENSION_PATTERN.sub("", filename or ""))


def safe_cell(row: Sequence[Any], index: Optional[int]) -> str:
    if index is None or index < 0 or index >= len(row):
        return ""
    value = row[index]
    return str(value).strip() if value is not None else ""


def first_non_empty(*values: Optional[str]) -> str:
    """Return the first candidate that is non-empty after trimming."""
    for value in values:
        candidate = (value or "").strip()
        if candidate:
            return candidate
    return ""


def parse_list(value: Optional[str], separator: str = ";") -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(separator) if part.strip()]


def split_address_book_labels(value: Optional[str]) -> List[str]:
    """Split a Google-style ``Labels`` cell, dropping system labels like ``* myContacts``."""
    labels = parse_list(value, separator=ADDRESS_BOOK_LABEL_SEPARATOR)
    return [label for label in labels if label != SYSTEM_LABEL and not label.startswith("*")]


def is_valid_birth_year(year: Any) -> bool:
    if isinstance(year, bool) or not isinstance(year, int):
        return False
    return BIRTH_YEAR_MIN < year < BIRTH_YEAR_MAX


def parse_birth_year(value: Optional[str]) -> Optional[int]:
    match = LEADING_INT_PATTERN.match((value or "").strip())
    if not match:
        return None
    year = int(match.group(0))
    return year if is_valid_birth_year(year) else None


def extract_birth_year(text: Optional[str]) -> Optional[int]:
    match = BIRTHDAY_YEAR_PATTERN.search(text or "")
    if not match:
        return None
    year = int(match.group(0))
    return year if is_valid_birth_year(year) else None


def parse_coordinate(value: Optional[str], limit: float) -> Optional[float]:
    """Plain decimal text within +/-limit; nan, inf and underscore literals are rejected."""
    text = (value or "").strip()
    if not DECIMAL_PATTERN.match(text):
        return None
    parsed = float(text)
    if not math.isfinite(parsed) or abs(parsed) > limit:
        return None
    return parsed


def parse_coordinate_pair(lat_raw: str, lng_raw: str) -> Optional[Tuple[float, float]]:
    lat = parse_coordinate(lat_raw, 90.0)
    lng = parse_coordinate(lng_raw, 180.0)
    if lat is None or lng is None:
        return None
    return lat, lng


def validate_email_safe(raw: Optional[str], check_deliverability: bool = False) -> str:
    candidate = (raw or "").strip()
    if not candidate:
        return ""
    try:
        validation_result = validate_email(candidate, check_deliverability=check_deliverability)
    except EmailNotValidError:
        logger.debug("email_validator rejected %s", candidate)
        return ""
    return validation_result.normalized
