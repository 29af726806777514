"""
Name display variants.

Derives the privacy-graduated renderings of one person's name (romaji, initials,
surname + initial, masked) and picks the one a record asks to display.

Initials are taken per name in this priority order:

1. first letter of the Latin-script field
2. first letter of the romanized kana field
3. first Latin letter of the kanji field (it may hold a Latin name)
4. first character of the kanji field, verbatim
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from kana_names.kana_data import (
    INITIALS,
    MASK_GLYPH,
    MASK_MAX,
    MASKED,
    ROMAJI,
    ROMAJI_INITIALS,
    SURNAME_INITIAL,
    SURNAME_INITIAL_ROMAJI,
    UNSET_PLACEHOLDER,
)
from kana_names.romanizer import VowelLengthPolicy, romanize, romanize_pair

_LATIN_LETTER = re.compile(r"[A-Za-z]")

# Record keys tried in order for each name field
SURNAME_KANJI_KEYS = ("last_name_kanji", "last_nameKanji", "last_name")
GIVEN_KANJI_KEYS = ("first_name_kanji", "first_nameKanji", "first_name")
SURNAME_KANA_KEYS = ("last_name_hira", "last_name_hiragana", "last_name_kana")
GIVEN_KANA_KEYS = ("first_name_hira", "first_name_hiragana", "first_name_kana")
SURNAME_LATIN_KEYS = ("last_name_en",)
GIVEN_LATIN_KEYS = ("first_name_en",)

# Fallback chains per display format; anything else shows the full name
DISPLAY_CHAINS: Mapping[str, Tuple[str, ...]] = {
    INITIALS: ("initials_en_surnameFirst", "initials_en", "surname_initial_en"),
    SURNAME_INITIAL: ("surname_initial_en",),
    MASKED: ("masked",),
    ROMAJI: ("romaji_full",),
    ROMAJI_INITIALS: ("initials_romaji", "romaji_full"),
    SURNAME_INITIAL_ROMAJI: ("surname_initial_romaji", "romaji_full"),
}


def _first_present(record: Mapping[str, Any], keys: Tuple[str, ...]) -> str:
    for key in keys:
        value = record.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return ""


@dataclass(frozen=True)
class NameFields:
    """Surname and given name in each script; missing parts are empty strings."""

    surname_kanji: str = ""
    given_kanji: str = ""
    surname_kana: str = ""
    given_kana: str = ""
    surname_latin: str = ""
    given_latin: str = ""

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "NameFields":
        """Build from loosely keyed custom fields using the documented alias order."""
        return cls(
            surname_kanji=_first_present(record, SURNAME_KANJI_KEYS),
            given_kanji=_first_present(record, GIVEN_KANJI_KEYS),
            surname_kana=_first_present(record, SURNAME_KANA_KEYS),
            given_kana=_first_present(record, GIVEN_KANA_KEYS),
            surname_latin=_first_present(record, SURNAME_LATIN_KEYS),
            given_latin=_first_present(record, GIVEN_LATIN_KEYS),
        )


@dataclass(frozen=True)
class NameVariantSet:
    """Every display rendering of one name; built once and never mutated."""

    romaji_full: str = ""
    initials_en: str = ""
    initials_en_surnameFirst: str = ""
    surname_initial_en: str = ""
    initials_romaji: str = ""
    surname_initial_romaji: str = ""
    masked: str = UNSET_PLACEHOLDER


@dataclass(frozen=True)
class NameDisplay:
    """Variants of a name together with the string selected for display."""

    variants: NameVariantSet
    display: str


def latin_initial(text: str) -> str:
    """First ASCII letter anywhere in `text`, upper-cased."""
    match = _LATIN_LETTER.search(text or "")
    return match.group(0).upper() if match else ""


def romaji_initial(word: str) -> str:
    """First letter of a romanized word with any macron stripped (Ō -> O)."""
    for ch in word or "":
        base = unicodedata.normalize("NFKD", ch)[:1]
        if base.isascii() and base.isalpha():
            return base.upper()
    return ""


def first_char(text: str) -> str:
    return (text or "").strip()[:1]


def mask_name(
    full_name: str,
    glyph: str = MASK_GLYPH,
    max_masked: int = MASK_MAX,
    placeholder: str = UNSET_PLACEHOLDER,
) -> str:
    """
    Keep the first character of each word and mask up to `max_masked` more.

    "Taro Yamada" -> "T＊＊ Y＊＊"; an empty name gives `placeholder`.
    """
    words = (full_name or "").split()
    if not words:
        return placeholder
    return " ".join(word if len(word) <= 1 else word[0] + glyph * min(max_masked, len(word) - 1) for word in words)


def _with_initial(head: str, initial: str) -> str:
    return f"{head} {initial}." if initial else head


def derive_variants(
    fields: NameFields,
    full_name: str = "",
    policy: Optional[VowelLengthPolicy] = None,
    *,
    mask_glyph: str = MASK_GLYPH,
    mask_max: int = MASK_MAX,
    placeholder: str = UNSET_PLACEHOLDER,
) -> NameVariantSet:
    """
    Derive every display variant of one name.

    Args:
        fields: Surname/given name in kanji, kana and Latin script
        full_name: Already assembled display name; romanized when no kana is
            available and used for the masked variant
        policy: Long-vowel policy applied to every romanization

    Returns:
        NameVariantSet; members default to "" except `masked`
    """
    romaji_full = romanize_pair(fields.surname_kana, fields.given_kana, policy) or romanize(full_name, policy)

    given_initial = (
        latin_initial(fields.given_latin)
        or romaji_initial(romanize(fields.given_kana, policy))
        or latin_initial(fields.given_kanji)
        or first_char(fields.given_kanji)
    )
    surname_initial = (
        latin_initial(fields.surname_latin)
        or romaji_initial(romanize(fields.surname_kana, policy))
        or latin_initial(fields.surname_kanji)
        or first_char(fields.surname_kanji)
    )

    both = bool(given_initial and surname_initial)
    surname_any = (fields.surname_latin or fields.surname_kanji or fields.surname_kana).strip()

    romaji_parts = romaji_full.split(" ")
    romaji_surname = romaji_parts[0]
    romaji_given = romaji_parts[1] if len(romaji_parts) > 1 else ""
    romaji_given_initial = romaji_initial(romaji_given)
    romaji_surname_initial = romaji_initial(romaji_surname)

    return NameVariantSet(
        romaji_full=romaji_full,
        initials_en=f"{given_initial}.{surname_initial}." if both else "",
        initials_en_surnameFirst=f"{surname_initial}.{given_initial}." if both else "",
        surname_initial_en=_with_initial(surname_any, given_initial) if surname_any else "",
        initials_romaji=(
            f"{romaji_surname_initial}.{romaji_given_initial}."
            if romaji_surname_initial and romaji_given_initial
            else ""
        ),
        surname_initial_romaji=_with_initial(romaji_surname, romaji_given_initial) if romaji_surname else "",
        masked=mask_name(full_name, mask_glyph, mask_max, placeholder),
    )


def select_display(
    format_key: Optional[str],
    variants: NameVariantSet,
    fallback_full_name: str = "",
    placeholder: str = UNSET_PLACEHOLDER,
) -> str:
    """
    Pick the variant named by `format_key`, walking its fallback chain.

    Unknown or missing keys behave like "full". The result is never empty: the
    last resort is `placeholder`.
    """
    key = str(format_key or "").strip().lower()
    for attr in DISPLAY_CHAINS.get(key, ()):
        value = getattr(variants, attr)
        if value:
            return value
    return fallback_full_name or placeholder


def build_name_display(
    fields: NameFields,
    full_name: str = "",
    format_key: Optional[str] = None,
    policy: Optional[VowelLengthPolicy] = None,
    *,
    mask_glyph: str = MASK_GLYPH,
    mask_max: int = MASK_MAX,
    placeholder: str = UNSET_PLACEHOLDER,
) -> NameDisplay:
    """Derive all variants and the selected display string in one call."""
    variants = derive_variants(
        fields, full_name, policy, mask_glyph=mask_glyph, mask_max=mask_max, placeholder=placeholder
    )
    return NameDisplay(variants, select_display(format_key, variants, full_name, placeholder))
