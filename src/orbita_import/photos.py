from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Iterable, List, Sequence

from .models import Contact, PhotoCandidate
from .normalization import normalize_filename, normalize_name

logger = logging.getLogger(__name__)

SUGGESTED_EXTENSIONS = ("jpg", "jpeg", "png", "webp")


def generate_photo_filenames(first_name: str, last_name: str) -> List[str]:
    """Filenames a user can give a photo so it is picked up for this contact."""
    full = normalize_name(f"{first_name} {last_name}")
    first = normalize_name(first_name)
    last = normalize_name(last_name)
    names = [f"{full}.{ext}" for ext in SUGGESTED_EXTENSIONS]
    if last:
        names.extend(f"{first}-{last}.{ext}" for ext in SUGGESTED_EXTENSIONS[:3])
        names.append(f"{last}-{first}.jpg")
    names.extend([f"{first}.jpg", f"{first}.png"])
    return list(OrderedDict.fromkeys(names))


def match_photo_to_contact(filename: str, first_name: str, last_name: str) -> bool:
    """
    True when the filename (extension aside) names the contact.

    Accepted forms are first+last, last+first and the first name alone, all
    compared as normalized keys; there is no partial or fuzzy matching.
    """
    key = normalize_filename(filename)
    if not key:
        return False
    candidates = (
        normalize_name(f"{first_name}{last_name}"),
        normalize_name(f"{last_name}{first_name}"),
        normalize_name(first_name),
    )
    return key in candidates


def auto_map_photos(
    contacts: Sequence[Contact], photos: Iterable[PhotoCandidate]
) -> List[Contact]:
    photos = list(photos)
    mapped: List[Contact] = []
    for contact in contacts:
        if contact.photo_url:
            mapped.append(contact)
            continue
        match = next(
            (
                photo
                for photo in photos
                if match_photo_to_contact(photo.name, contact.first_name, contact.last_name)
            ),
            None,
        )
        if match is None:
            mapped.append(contact)
            continue
        logger.debug(
            "Photo %s attached to %s %s", match.name, contact.first_name, contact.last_name
        )
        mapped.append(contact.replace(photo_url=match.url))
    return mapped
