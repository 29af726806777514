from kana_names.name_variants import (
    NameDisplay,
    NameFields,
    NameVariantSet,
    build_name_display,
    derive_variants,
    select_display,
)
from kana_names.records import KanaNamesConfig, build_name_tokens, pick_full_name
from kana_names.romanizer import LongVowelPreferences, VowelLengthPolicy, resolve_policy, romanize, romanize_pair

__version__ = "0.1.0"
