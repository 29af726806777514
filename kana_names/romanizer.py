"""
Kana Romanization Module

Converts Japanese names written in kana (hiragana or katakana, possibly mixed with
kanji or Latin fragments) into passport-style Hepburn romaji, with a selectable
convention for long "o" and "u" vowels.

## Pipeline

1. **Normalization**: half-width katakana is widened and all katakana folded to
   hiragana (jaconv), whitespace runs collapse to a single space
2. **Digraph Pre-scan**: base kana + small ゃ/ゅ/ょ pairs become single opaque
   tokens so the main pass never re-reads their letters
3. **Main Scan**: a fold over the tokens carrying (output so far, previous mora)
   that handles sokuon gemination, chōonpu and orthographic long vowels
4. **Nasal Resolution**: ん becomes "m" before b/m/p, "n'" before a vowel or y,
   "n" elsewhere
5. **Capitalization**: first letter of every space-delimited word is upper-cased

## Long vowels

`VowelLengthPolicy` carries one strategy per vowel:

- `omit`: Ono, Yuki (passport default)
- `oh`: Ohno
- `macron`: Ōno, Yūki
- `ou`: Ouno, Yuuki

The policy is resolved per call from record-level preferences, then process-level
preferences, then the `omit` default. Nothing in this module reads the environment;
process-level preferences are handed in by the caller (see `records.KanaNamesConfig`).

## Usage

```python
from kana_names.romanizer import romanize, resolve_policy, LongVowelPreferences

romanize("やまだ たろう")
# Returns: "Yamada Taro"

policy = resolve_policy(LongVowelPreferences(o="macron"))
romanize("おおの", policy)
# Returns: "Ōno"
```

All functions are pure and safe to call from multiple threads.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import reduce
from typing import Any, Mapping, Optional, Tuple

import jaconv

from kana_names.kana_data import (
    CHOONPU,
    DEFAULT_STRATEGY,
    DIGRAPHS,
    LONG_VOWEL_STRATEGIES,
    MACRON,
    MACRONS,
    MORA_TABLE,
    NASAL_PLACEHOLDER,
    O_ROW,
    O_VOWEL,
    OH,
    OU,
    SOKUON,
    U_VOWEL,
)

_WHITESPACE_PATTERN = re.compile(r"\s+")
_NASAL_BEFORE_LABIAL = re.compile(NASAL_PLACEHOLDER + r"(?=[bmpBMP])")
_NASAL_BEFORE_VOWEL = re.compile(NASAL_PLACEHOLDER + r"(?=[aiueoyāīūēōAIUEOYĀĪŪĒŌ])")
_VOWELS = frozenset("aiueo")

# Token kinds produced by the pre-scan
DIGRAPH = "digraph"
MORA = "mora"
GEMINATION = "gemination"
PROLONGATION = "prolongation"
OTHER = "other"


# ════════════════════════════════════════════════════════════════════════════════
# VOWEL-LENGTH POLICY
# ════════════════════════════════════════════════════════════════════════════════


def _valid_strategy(value: Any) -> Optional[str]:
    """Return the normalized strategy name, or None if `value` is not one."""
    if value is None:
        return None
    name = str(value).strip().lower()
    if name in LONG_VOWEL_STRATEGIES:
        return name
    if name:
        logging.debug(f"Ignoring unknown long-vowel strategy {value!r}")
    return None


@dataclass(frozen=True)
class LongVowelPreferences:
    """Unvalidated per-vowel preferences as they arrive from a record or the process."""

    o: Optional[str] = None
    u: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "LongVowelPreferences":
        """Read `romaji_long_o` / `romaji_long_u` from a record's custom fields."""
        return cls(o=record.get("romaji_long_o"), u=record.get("romaji_long_u"))

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "LongVowelPreferences":
        """Read `ROMAJI_LONG_O` / `ROMAJI_LONG_U` from an environment mapping."""
        return cls(o=environ.get("ROMAJI_LONG_O"), u=environ.get("ROMAJI_LONG_U"))


@dataclass(frozen=True)
class VowelLengthPolicy:
    """Resolved long-vowel strategy for each of "o" and "u"."""

    o: str = DEFAULT_STRATEGY
    u: str = DEFAULT_STRATEGY

    def strategy_for(self, vowel: str) -> str:
        return self.o if vowel == "o" else self.u

    def lengthen(self, vowel: str) -> str:
        """Render a long `vowel` under this policy."""
        strategy = self.strategy_for(vowel)
        if strategy == OH:
            return vowel + "h"
        if strategy == MACRON:
            return MACRONS[vowel]
        if strategy == OU:
            return vowel + "u"
        return vowel


def resolve_policy(
    record_prefs: Optional[LongVowelPreferences] = None,
    process_prefs: Optional[LongVowelPreferences] = None,
) -> VowelLengthPolicy:
    """
    Resolve the vowel-length policy for one conversion.

    Each vowel is resolved independently: a valid record-level value wins, then a
    valid process-level value, then `omit`. Invalid values count as absent.
    """
    record_prefs = record_prefs or LongVowelPreferences()
    process_prefs = process_prefs or LongVowelPreferences()

    def pick(record_value: Optional[str], process_value: Optional[str]) -> str:
        return _valid_strategy(record_value) or _valid_strategy(process_value) or DEFAULT_STRATEGY

    return VowelLengthPolicy(
        o=pick(record_prefs.o, process_prefs.o),
        u=pick(record_prefs.u, process_prefs.u),
    )


# ════════════════════════════════════════════════════════════════════════════════
# DIGRAPH PRE-SCAN
# ════════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class KanaToken:
    """One unit of pre-scanned input. `romaji` is empty for markers and non-kana."""

    source: str
    kind: str
    romaji: str = ""


def normalize_kana(text: str) -> str:
    """Widen half-width kana, fold katakana to hiragana and collapse whitespace."""
    text = jaconv.h2z(text, kana=True, ascii=False, digit=False)
    text = jaconv.kata2hira(text)
    return _WHITESPACE_PATTERN.sub(" ", text).strip()


def match_digraph(window: str) -> Optional[str]:
    """Return the digraph romanization for a two-character window, if defined."""
    if len(window) != 2:
        return None
    return DIGRAPHS.get(window)


def prescan(text: str) -> Tuple[KanaToken, ...]:
    """
    Split normalized input into tokens in a single left-to-right pass.

    Digraphs are emitted as opaque DIGRAPH tokens; everything else is one token per
    character. Vowel length is not resolved here.
    """
    tokens = []
    i = 0
    while i < len(text):
        digraph = match_digraph(text[i : i + 2])
        if digraph:
            tokens.append(KanaToken(text[i : i + 2], DIGRAPH, digraph))
            i += 2
            continue

        ch = text[i]
        if ch == SOKUON:
            tokens.append(KanaToken(ch, GEMINATION))
        elif ch == CHOONPU:
            tokens.append(KanaToken(ch, PROLONGATION))
        elif ch in MORA_TABLE:
            tokens.append(KanaToken(ch, MORA, MORA_TABLE[ch]))
        else:
            tokens.append(KanaToken(ch, OTHER))
        i += 1
    return tuple(tokens)


# ════════════════════════════════════════════════════════════════════════════════
# MAIN SCAN
# ════════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ScanState:
    """Immutable fold state: romaji produced so far and the previous source mora."""

    out: str = ""
    prev: str = ""

    def append(self, text: str, prev: str) -> "ScanState":
        return ScanState(self.out + text, prev)

    def ends_with(self, vowel: str) -> bool:
        return self.out[-1:].lower() == vowel

    def lengthen_last(self, vowel: str, policy: VowelLengthPolicy, prev: str) -> "ScanState":
        return ScanState(self.out[:-1] + policy.lengthen(vowel), prev)


def gemination_for(following: Optional[KanaToken]) -> str:
    """Consonant to double in front of `following`; "" when there is none."""
    if following is None or following.kind not in (MORA, DIGRAPH):
        return ""
    romaji = following.romaji
    if romaji.startswith("ch"):
        return "t"
    if romaji.startswith("sh"):
        return "s"
    head = romaji[:1]
    if head.isascii() and head.isalpha() and head not in _VOWELS:
        return head
    return ""


def _step(policy: VowelLengthPolicy, state: ScanState, pair: Tuple[KanaToken, Optional[KanaToken]]) -> ScanState:
    token, following = pair

    if token.kind == DIGRAPH:
        return state.append(token.romaji, prev="")

    if token.kind == GEMINATION:
        return state.append(gemination_for(following), prev=token.source)

    if token.kind == PROLONGATION:
        for vowel in ("o", "u"):
            if state.ends_with(vowel):
                return state.lengthen_last(vowel, policy, prev=token.source)
        return ScanState(state.out, token.source)

    if token.kind == MORA:
        if token.source in (U_VOWEL, O_VOWEL) and state.ends_with("o") and state.prev in O_ROW:
            return state.lengthen_last("o", policy, prev=token.source)
        if token.source == U_VOWEL and state.ends_with("u") and state.prev == U_VOWEL:
            return state.lengthen_last("u", policy, prev=token.source)
        return state.append(token.romaji, prev=token.source)

    return state.append(token.source, prev="")


def resolve_nasals(romaji: str) -> str:
    """Replace the ん placeholder with m / n' / n depending on what follows."""
    romaji = _NASAL_BEFORE_LABIAL.sub("m", romaji)
    romaji = _NASAL_BEFORE_VOWEL.sub("n'", romaji)
    return romaji.replace(NASAL_PLACEHOLDER, "n")


def capitalize_words(text: str) -> str:
    """Upper-case the first letter of each space-delimited word, leaving the rest."""
    return " ".join(word[:1].upper() + word[1:] for word in text.split(" "))


def romanize(kana: str, policy: Optional[VowelLengthPolicy] = None) -> str:
    """
    Romanize a kana string with passport-style Hepburn.

    Args:
        kana: Name fragment in hiragana/katakana; kanji and Latin pass through
        policy: Long-vowel policy; defaults to `omit` for both vowels

    Returns:
        Romanized string with each word capitalized, or "" for empty input
    """
    if not kana:
        return ""
    policy = policy or VowelLengthPolicy()

    tokens = prescan(normalize_kana(kana))
    pairs = zip(tokens, tokens[1:] + (None,))
    state = reduce(lambda acc, pair: _step(policy, acc, pair), pairs, ScanState())

    return capitalize_words(resolve_nasals(state.out))


def romanize_pair(surname_kana: str, given_kana: str, policy: Optional[VowelLengthPolicy] = None) -> str:
    """Romanize surname and given name separately and join them surname first."""
    surname = romanize(surname_kana, policy)
    given = romanize(given_kana, policy)
    return " ".join(part for part in (surname, given) if part)
