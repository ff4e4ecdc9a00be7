from __future__ import annotations

import csv
import json
import logging
from typing import Any, Iterable, List, Optional

from .columns import detect_columns, has_name_column
from .mapping import RowMappingSettings, map_row
from .models import Contact, ImportResult, PhotoCandidate
from .photos import auto_map_photos
from .rows import parse_csv_rows
from .validation import validate_contact

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("csv", "json")


def import_contacts_from_csv(
    text: str, settings: Optional[RowMappingSettings] = None
) -> ImportResult:
    warnings: List[str] = []
    try:
        rows = parse_csv_rows(text, warnings=warnings)
    except csv.Error as exc:
        logger.warning("CSV parsing failed: %s", exc)
        return ImportResult.failure(f"Failed to parse CSV: {exc}")

    if len(rows) < 2:
        return ImportResult.failure("CSV must have a header row and at least one data row")

    columns = detect_columns(rows[0])
    if not has_name_column(columns):
        return ImportResult.failure('CSV must have a "name" or "firstName" column')
    logger.debug("Detected CSV columns: %s", columns)

    contacts: List[Contact] = []
    for index, row in enumerate(rows[1:], start=1):
        if not any(cell.strip() for cell in row):
            continue
        row_number = index + 1
        contact = map_row(row, columns, row_number, settings=settings, warnings=warnings)
        if contact is None:
            warnings.append(f"Row {row_number} skipped due to missing required fields")
            continue
        contacts.append(contact)

    logger.info(
        "CSV import produced %d contact(s) from %d data row(s), %d warning(s)",
        len(contacts),
        len(rows) - 1,
        len(warnings),
    )
    return ImportResult(success=bool(contacts), contacts=contacts, errors=[], warnings=warnings)


def import_contacts_from_json(data: Any) -> ImportResult:
    if not isinstance(data, list):
        return ImportResult.failure("JSON data must be an array of contacts")

    contacts: List[Contact] = []
    errors: List[str] = []
    for index, raw in enumerate(data):
        result = validate_contact(raw, index)
        if result.valid and result.contact is not None:
            contacts.append(result.contact)
        else:
            errors.extend(result.errors)

    # counts error messages, so one element can contribute several
    warnings = [f"{len(errors)} contact(s) failed validation"] if errors else []
    logger.info("JSON import accepted %d of %d contact(s)", len(contacts), len(data))
    return ImportResult(success=bool(contacts), contacts=contacts, errors=errors, warnings=warnings)


def import_contacts_from_json_text(text: str) -> ImportResult:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as exc:
        logger.warning("JSON decoding failed: %s", exc)
        return ImportResult.failure(f"Failed to parse JSON: {exc}")
    return import_contacts_from_json(data)


def import_contacts(
    text: str,
    fmt: str,
    settings: Optional[RowMappingSettings] = None,
    photos: Optional[Iterable[PhotoCandidate]] = None,
) -> ImportResult:
    """
    Run the CSV or JSON pipeline over ``text`` and optionally attach photos.

    Failures never raise; they are reported through ``errors``/``warnings``.
    """
    fmt = (fmt or "").strip().lower()
    if fmt == "csv":
        result = import_contacts_from_csv(text, settings=settings)
    elif fmt == "json":
        result = import_contacts_from_json_text(text)
    else:
        return ImportResult.failure(f"Unsupported import format: {fmt}")

    if photos is not None and result.success:
        result.contacts = auto_map_photos(result.contacts, photos)
    return result
