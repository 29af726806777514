"""
Record adapter: turns a loosely keyed personal record (CMS custom fields) into the
structured inputs of the romanizer and the name-variant deriver, and flattens the
results into the string tokens a page template consumes.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Dict, Mapping, Optional, Tuple

from kana_names.kana_data import FULL, MASK_GLYPH, MASK_MAX, UNSET_PLACEHOLDER
from kana_names.name_variants import NameDisplay, NameFields, build_name_display
from kana_names.romanizer import LongVowelPreferences, resolve_policy

DEFAULT_NAME_KEYS = ("display_name", "name", "full_name", "fullName", "patient_name", "contact_name")

BIRTHDATE_KEYS = ("birthdate", "birthday", "birth_day", "dob")
BIRTH_YEAR_KEYS = ("birth_year", "birth_yyyy", "birthYear")
BIRTH_MONTH_KEYS = ("birth_month", "birth_mm", "birthMonth")
BIRTH_DAY_KEYS = ("birth_day", "birth_dd", "birthDay")

DISPLAY_FORMAT_KEYS = ("name_display_format", "display_name_format")

_DATE_SEPARATORS = re.compile(r"[/.]")
_DASHED_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_COMPACT_DATE = re.compile(r"^(\d{4})(\d{2})(\d{2})$")
_ID_LIKE_TITLE = re.compile(r"^\d{6}$")


# ════════════════════════════════════════════════════════════════════════════════
# CONFIGURATION
# ════════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class KanaNamesConfig:
    """Process-level settings handed explicitly to every record conversion."""

    long_vowel: LongVowelPreferences
    name_keys: Tuple[str, ...]
    unset_placeholder: str
    mask_glyph: str
    mask_max: int
    age_suffix: str

    @classmethod
    def create_default(cls) -> "KanaNamesConfig":
        return cls(
            long_vowel=LongVowelPreferences(),
            name_keys=DEFAULT_NAME_KEYS,
            unset_placeholder=UNSET_PLACEHOLDER,
            mask_glyph=MASK_GLYPH,
            mask_max=MASK_MAX,
            age_suffix=" 歳",
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "KanaNamesConfig":
        """Default configuration overridden by ROMAJI_LONG_O, ROMAJI_LONG_U and NAME_KEYS."""
        environ = os.environ if environ is None else environ
        config = cls.create_default().with_long_vowel(LongVowelPreferences.from_env(environ))
        raw_keys = environ.get("NAME_KEYS", "")
        name_keys = tuple(key.strip() for key in raw_keys.split(",") if key.strip())
        return config.with_name_keys(name_keys) if name_keys else config

    def with_long_vowel(self, long_vowel: LongVowelPreferences) -> "KanaNamesConfig":
        return replace(self, long_vowel=long_vowel)

    def with_name_keys(self, name_keys: Tuple[str, ...]) -> "KanaNamesConfig":
        return replace(self, name_keys=tuple(name_keys))


# ════════════════════════════════════════════════════════════════════════════════
# FIELD HELPERS
# ════════════════════════════════════════════════════════════════════════════════


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _first_text(record: Mapping[str, Any], keys: Tuple[str, ...]) -> str:
    for key in keys:
        value = _text(record.get(key))
        if value:
            return value
    return ""


def _composite(*parts: Any) -> str:
    return " ".join(text for text in (_text(part) for part in parts) if text)


def display_format_of(record: Mapping[str, Any]) -> str:
    return (_first_text(record, DISPLAY_FORMAT_KEYS) or FULL).lower()


def _is_id_like(title: str, record: Mapping[str, Any]) -> bool:
    id_code = _text(record.get("id_code"))
    return not title or bool(_ID_LIKE_TITLE.match(title)) or (bool(id_code) and title == id_code)


def pick_full_name(
    record: Mapping[str, Any],
    config: Optional[KanaNamesConfig] = None,
    title: Optional[str] = None,
) -> str:
    """
    Choose the single full name shown for a record.

    Order: configured name keys, then a post title that does not look like an ID,
    then "surname given" from kanji, hiragana, kana and Latin field pairs, then a
    lone surname or given name. Returns "" when nothing is available.
    """
    config = config or KanaNamesConfig.create_default()

    explicit = _first_text(record, config.name_keys)
    if explicit:
        return explicit

    title = _text(title)
    if not _is_id_like(title, record):
        return title

    pairs = (
        ("last_name_kanji", "first_name_kanji"),
        ("last_nameKanji", "first_nameKanji"),
        ("last_name_hira", "first_name_hira"),
        ("last_name_hiragana", "first_name_hiragana"),
        ("last_name_kana", "first_name_kana"),
        ("last_name_en", "first_name_en"),
        ("last_name", "first_name"),
    )
    for surname_key, given_key in pairs:
        name = _composite(record.get(surname_key), record.get(given_key))
        if name:
            return name
    return ""


# ════════════════════════════════════════════════════════════════════════════════
# BIRTHDATE / AGE
# ════════════════════════════════════════════════════════════════════════════════


def _safe_date(year: Any, month: Any, day: Any) -> Optional[date]:
    try:
        return date(int(year), int(month), int(day))
    except (TypeError, ValueError) as e:
        logging.debug(f"Ignoring invalid birthdate {year}-{month}-{day}: {e}")
        return None


def parse_birthdate(record: Mapping[str, Any]) -> Optional[date]:
    """Parse the record's birthdate from a single date field or year/month/day parts."""
    raw = _first_text(record, BIRTHDATE_KEYS)
    if raw:
        normalized = _DATE_SEPARATORS.sub("-", raw)
        match = _DASHED_DATE.match(normalized) or _COMPACT_DATE.match(normalized)
        if match:
            return _safe_date(*match.groups())
        logging.debug(f"Unrecognized birthdate format: {raw!r}")

    year = _first_text(record, BIRTH_YEAR_KEYS)
    month = _first_text(record, BIRTH_MONTH_KEYS)
    day = _first_text(record, BIRTH_DAY_KEYS)
    if year and month and day:
        return _safe_date(year, month, day)
    return None


def age_in_years(birthdate: Optional[date], today: Optional[date] = None) -> Optional[int]:
    """Completed years between `birthdate` and `today`; None if unknown or in the future."""
    if birthdate is None:
        return None
    today = today or date.today()
    age = today.year - birthdate.year
    if (today.month, today.day) < (birthdate.month, birthdate.day):
        age -= 1
    return age if age >= 0 else None


# ════════════════════════════════════════════════════════════════════════════════
# RECORD → DISPLAY
# ════════════════════════════════════════════════════════════════════════════════


def name_display_for(
    record: Mapping[str, Any],
    config: Optional[KanaNamesConfig] = None,
    title: Optional[str] = None,
) -> Tuple[str, NameDisplay]:
    """Return the record's full name ("" if none) and its derived display."""
    config = config or KanaNamesConfig.create_default()
    full_name = pick_full_name(record, config, title)
    policy = resolve_policy(LongVowelPreferences.from_record(record), config.long_vowel)
    display = build_name_display(
        NameFields.from_record(record),
        full_name,
        display_format_of(record),
        policy,
        mask_glyph=config.mask_glyph,
        mask_max=config.mask_max,
        placeholder=config.unset_placeholder,
    )
    return full_name, display


def build_name_tokens(
    record: Mapping[str, Any],
    config: Optional[KanaNamesConfig] = None,
    today: Optional[date] = None,
    title: Optional[str] = None,
) -> Dict[str, str]:
    """Flatten a record's name variants and age into template token strings."""
    config = config or KanaNamesConfig.create_default()
    full_name, display = name_display_for(record, config, title)
    variants = display.variants
    age = age_in_years(parse_birthdate(record), today)

    return {
        "name": full_name or config.unset_placeholder,
        "name_display": display.display,
        "name_romaji": variants.romaji_full,
        "name_initials_en": variants.initials_en,
        "name_surname_initial_en": variants.surname_initial_en,
        "name_initials_romaji": variants.initials_romaji,
        "name_surname_initial_romaji": variants.surname_initial_romaji,
        "name_masked": variants.masked,
        "age": f"{age}{config.age_suffix}" if age is not None else config.unset_placeholder,
        "age_years": str(age) if age is not None else "",
    }
