from __future__ import annotations

from typing import Any

from .calling_codes import CALLING_CODES, CallingCodeLocation, location_from_phone
from .columns import HEADER_RULES, detect_columns, has_name_column
from .config_loader import ImportConfig, load_import_config
from .importer import (
    import_contacts,
    import_contacts_from_csv,
    import_contacts_from_json,
    import_contacts_from_json_text,
)
from .mapping import RowMappingSettings, map_row
from .models import Contact, ImportResult, Location, PhotoCandidate, SocialLink, ValidationResult
from .normalization import normalize_filename, normalize_name
from .photos import auto_map_photos, generate_photo_filenames, match_photo_to_contact
from .rows import parse_csv_rows
from .validation import validate_contact

__all__ = [
    "CALLING_CODES",
    "CallingCodeLocation",
    "Contact",
    "HEADER_RULES",
    "ImportConfig",
    "ImportResult",
    "Location",
    "PhotoCandidate",
    "RowMappingSettings",
    "SocialLink",
    "ValidationResult",
    "auto_map_photos",
    "detect_columns",
    "generate_photo_filenames",
    "has_name_column",
    "import_contacts",
    "import_contacts_from_csv",
    "import_contacts_from_json",
    "import_contacts_from_json_text",
    "load_config",
    "load_import_config",
    "location_from_phone",
    "map_row",
    "match_photo_to_contact",
    "normalize_filename",
    "normalize_name",
    "parse_csv_rows",
    "validate_contact",
]


def load_config(args: Any) -> ImportConfig:
    return load_import_config(args)
