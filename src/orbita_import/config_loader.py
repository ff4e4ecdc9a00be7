from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml  # type: ignore[import-untyped]


@dataclass
class OutputsConfig:
    dir: Path


@dataclass
class LocationConfig:
    phone_fallback: bool = True
    fill_city_from_phone: bool = False


@dataclass
class ValidationConfig:
    email_syntax_check: bool = True


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class ImportConfig:
    inputs: Dict[str, Optional[str]]
    outputs: OutputsConfig
    location: LocationConfig
    validation: ValidationConfig
    logging: LoggingConfig


def _load_yaml(path: Optional[str]) -> Dict[str, Any]:
    if not path:
        return {}
    with open(path, "r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def _flag(
    args: argparse.Namespace, name: str, section: Dict[str, Any], key: str, default: bool
) -> bool:
    value = getattr(args, name, None)
    if value is not None:
        return bool(value)
    return bool(section.get(key, default))


def load_import_config(args: argparse.Namespace) -> ImportConfig:
    config_data = _load_yaml(getattr(args, "config", None))
    inputs = config_data.get("inputs", {}) or {}
    outputs_cfg = config_data.get("outputs", {}) or {}
    location_cfg = config_data.get("location", {}) or {}
    validation_cfg = config_data.get("validation", {}) or {}
    logging_cfg = config_data.get("logging", {}) or {}

    outputs_dir = Path(getattr(args, "out_dir", None) or outputs_cfg.get("dir") or os.getcwd())

    location = LocationConfig(
        phone_fallback=_flag(args, "phone_fallback", location_cfg, "phone_fallback", True),
        fill_city_from_phone=_flag(
            args, "fill_city_from_phone", location_cfg, "fill_city_from_phone", False
        ),
    )

    validation = ValidationConfig(
        email_syntax_check=_flag(
            args, "email_syntax_check", validation_cfg, "email_syntax_check", True
        ),
    )

    arg_level = getattr(args, "log_level", None)
    effective_level = (arg_level or logging_cfg.get("level") or "WARNING").upper()

    resolved_inputs = {
        "csv": getattr(args, "csv", None) or inputs.get("csv"),
        "json": getattr(args, "json", None) or inputs.get("json"),
        "photos_dir": getattr(args, "photos_dir", None) or inputs.get("photos_dir"),
    }

    return ImportConfig(
        inputs=resolved_inputs,
        outputs=OutputsConfig(dir=outputs_dir),
        location=location,
        validation=validation,
        logging=LoggingConfig(level=effective_level),
    )
