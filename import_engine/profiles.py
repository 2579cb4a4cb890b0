"""
import_engine.profiles - Named import profiles loaded from YAML.

A profile selects the expected header set for an upload template
(Indonesia / expatriate, active / non-active) and the defaults applied
to fields a file leaves empty.

This module owns the in-memory copy of the profile table; load() is
called at startup, get_profile() loads lazily from config when needed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from import_engine.field_map import IDENTIFIER_FIELD, IDENTIFIER_LABEL, resolve
from db.models import SECTION_MODELS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportProfile:
    key: str
    label: str
    headers: tuple[str, ...]
    # (section, field) → value
    defaults: dict[tuple[str, str], Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "label": self.label,
            "headers": list(self.headers),
            "defaults": {f"{s}.{f}": v for (s, f), v in self.defaults.items()},
        }


# ── Module-level state (populated by load()) ──────────────────────────
_profiles: dict[str, ImportProfile] = {}


def load(path: str | Path) -> int:
    """Read the profile YAML, validate it and replace the table.  Returns profile count."""
    with open(path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}

    groups: dict[str, list[str]] = data.get("groups") or {}
    parsed: dict[str, ImportProfile] = {}

    for key, raw in (data.get("profiles") or {}).items():
        headers: list[str] = []
        for group in raw.get("groups", []):
            if group not in groups:
                raise ValueError(f"Profile {key!r}: unknown header group {group!r}")
            headers.extend(str(h) for h in groups[group])
        headers.extend(str(h) for h in raw.get("headers", []))

        for h in headers:
            if resolve(h) is None:
                raise ValueError(f"Profile {key!r}: header {h!r} maps to no field")

        # The identifier column is mandatory in every profile
        if not any(resolve(h).field == IDENTIFIER_FIELD for h in headers):
            headers.insert(0, IDENTIFIER_LABEL)

        parsed[key.lower()] = ImportProfile(
            key=key.lower(),
            label=str(raw.get("label", key)),
            headers=tuple(headers),
            defaults=_parse_defaults(key, raw.get("defaults") or {}),
        )

    if not parsed:
        raise ValueError(f"No import profiles defined in {path}")

    _profiles.clear()
    _profiles.update(parsed)
    logger.info(f"Loaded {len(_profiles)} import profiles from {path}")
    return len(_profiles)


def _parse_defaults(key: str, raw: dict) -> dict[tuple[str, str], Any]:
    out: dict[tuple[str, str], Any] = {}
    for name, value in raw.items():
        section, _, fname = str(name).partition(".")
        model = SECTION_MODELS.get(section)
        if model is None or fname not in model.FIELDS:
            raise ValueError(f"Profile {key!r}: unknown default field {name!r}")
        out[(section, fname)] = value
    return out


def _ensure_loaded() -> None:
    if not _profiles:
        import config
        load(config.PROFILES_PATH)


# ── Public helpers ────────────────────────────────────────────────────

def get_profile(key: str) -> ImportProfile:
    """Return the profile for *key* (case-insensitive) or raise ValueError."""
    _ensure_loaded()
    profile = _profiles.get(str(key or "").strip().lower())
    if profile is None:
        raise ValueError(
            f"Invalid profile. Use one of: {', '.join(profile_keys())}"
        )
    return profile


def profile_keys() -> list[str]:
    _ensure_loaded()
    return list(_profiles.keys())


def list_profiles() -> list[ImportProfile]:
    _ensure_loaded()
    return list(_profiles.values())
