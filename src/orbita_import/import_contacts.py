from __future__ import annotations

import argparse
import csv
import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

import pandas as pd

from .common import (
    Contact,
    ImportResult,
    PhotoCandidate,
    RowMappingSettings,
    import_contacts,
    load_config,
)
from .config_loader import ImportConfig
from .logging_utils import configure_logging

logger = logging.getLogger(__name__)

PHOTO_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}

CONTACT_COLUMNS = [
    "contact_id",
    "first_name",
    "last_name",
    "city",
    "country",
    "lat",
    "lng",
    "birth_year",
    "tags",
    "languages",
    "email",
    "bio",
    "photo_url",
    "social_links_json",
    "attributes_json",
]


def _load_photo_candidates(photos_dir: Optional[str]) -> List[PhotoCandidate]:
    if not photos_dir:
        return []
    directory = Path(photos_dir)
    if not directory.is_dir():
        logger.warning("Photos directory missing: %s", photos_dir)
        return []
    return [
        PhotoCandidate(name=path.name, url=path.resolve().as_uri())
        for path in sorted(directory.iterdir())
        if path.is_file() and path.suffix.lower() in PHOTO_EXTENSIONS
    ]


def _resolve_input(config: ImportConfig) -> Tuple[str, str]:
    csv_path = config.inputs.get("csv")
    json_path = config.inputs.get("json")
    if csv_path and json_path:
        raise ValueError("pass either a CSV or a JSON input, not both")
    if csv_path:
        return csv_path, "csv"
    if json_path:
        return json_path, "json"
    raise ValueError("no input given; use --csv or --json (or inputs.csv / inputs.json)")


def contact_to_row(contact: Contact) -> dict:
    location = contact.location
    return {
        "contact_id": contact.contact_id,
        "first_name": contact.first_name,
        "last_name": contact.last_name,
        "city": location.city,
        "country": location.country,
        "lat": location.lat,
        "lng": location.lng,
        "birth_year": contact.birth_year if contact.birth_year is not None else "",
        "tags": "|".join(contact.tags),
        "languages": "|".join(contact.languages),
        "email": contact.email or "",
        "bio": contact.bio or "",
        "photo_url": contact.photo_url or "",
        "social_links_json": json.dumps(
            [link.to_dict() for link in contact.social_links], ensure_ascii=False
        ),
        "attributes_json": json.dumps(contact.attributes, ensure_ascii=False),
    }


def build(
    args: argparse.Namespace, config: Optional[ImportConfig] = None
) -> Tuple[pd.DataFrame, ImportResult]:
    config = config or load_config(args)
    settings = RowMappingSettings.from_config(config)

    path, fmt = _resolve_input(config)
    text = Path(path).read_text(encoding="utf-8-sig")
    photos = _load_photo_candidates(config.inputs.get("photos_dir"))

    result = import_contacts(text, fmt, settings=settings, photos=photos or None)
    for message in result.errors:
        logger.error(message)
    for message in result.warnings:
        logger.warning(message)

    contacts_df = pd.DataFrame(
        [contact_to_row(contact) for contact in result.contacts], columns=CONTACT_COLUMNS
    )
    if not contacts_df.empty:
        with_photo = int((contacts_df["photo_url"] != "").sum())
        located = int(((contacts_df["lat"] != 0) | (contacts_df["lng"] != 0)).sum())
        logger.info(
            "Imported %d contact(s): %d with coordinates, %d with a photo",
            len(contacts_df),
            located,
            with_photo,
        )
    return contacts_df, result


def main() -> int:
    parser = argparse.ArgumentParser(description="Import contacts from a CSV or JSON export.")
    parser.add_argument("--config", type=str, default=None, help="Path to YAML config.")
    parser.add_argument("--csv", type=str, default=None)
    parser.add_argument("--json", type=str, default=None)
    parser.add_argument("--photos-dir", type=str, default=None)
    parser.add_argument("--out-dir", type=str, default=None)
    parser.add_argument(
        "--phone-fallback",
        dest="phone_fallback",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Infer a coarse location from the phone calling code (default: on).",
    )
    parser.add_argument(
        "--fill-city-from-phone",
        dest="fill_city_from_phone",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Also take the capital city from the calling-code table (default: off).",
    )
    parser.add_argument(
        "--email-syntax-check",
        dest="email_syntax_check",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Drop CSV emails that fail syntax validation (default: on).",
    )
    parser.add_argument("--log-level", type=str, default=None, help="Override logging level")
    args = parser.parse_args()

    config = load_config(args)
    configure_logging(config, level_override=args.log_level)
    contacts_df, result = build(args, config=config)

    out_dir = config.outputs.dir
    out_dir.mkdir(parents=True, exist_ok=True)
    contacts_path = out_dir / "imported_contacts.csv"
    json_path = out_dir / "imported_contacts.json"
    contacts_df.to_csv(str(contacts_path), index=False, encoding="utf-8", quoting=csv.QUOTE_ALL)
    with open(json_path, "w", encoding="utf-8") as handle:
        json.dump(
            [contact.to_dict() for contact in result.contacts],
            handle,
            ensure_ascii=False,
            indent=2,
        )

    logger.info("Saved: %s", contacts_path)
    logger.info("Saved: %s", json_path)
    return 0 if result.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
