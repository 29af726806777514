# ═════════════════════════════════════════════════════════════════════════════════
# MORA TABLES FOR PASSPORT-STYLE HEPBURN ROMANIZATION
# ═════════════════════════════════════════════════════════════════════════════════
#
# All tables are keyed by hiragana only. Katakana input is folded to hiragana
# before lookup, so a single table covers both scripts.
#
# Two layers, applied in this order:
# 1. DIGRAPHS: base kana + small ゃ/ゅ/ょ, romanized as one unit
# 2. MORA_TABLE: single kana fallbacks (including markers)
# ═════════════════════════════════════════════════════════════════════════════════

from types import MappingProxyType

# Placeholder emitted for ん; resolved to m / n' / n after the main scan.
# Private-use code point so Latin "N" in the input is never confused with it.
NASAL_PLACEHOLDER = "\ue000"

SOKUON = "っ"
CHOONPU = "ー"
SMALL_Y = frozenset("ゃゅょ")

# fmt: off
# Layer 1: DIGRAPHS - palatalized mora
DIGRAPHS = {
    "きゃ": "kya", "きゅ": "kyu", "きょ": "kyo",
    "ぎゃ": "gya", "ぎゅ": "gyu", "ぎょ": "gyo",
    "しゃ": "sha", "しゅ": "shu", "しょ": "sho",
    "じゃ": "ja", "じゅ": "ju", "じょ": "jo",
    "ちゃ": "cha", "ちゅ": "chu", "ちょ": "cho",
    "ぢゃ": "ja", "ぢゅ": "ju", "ぢょ": "jo",
    "にゃ": "nya", "にゅ": "nyu", "にょ": "nyo",
    "ひゃ": "hya", "ひゅ": "hyu", "ひょ": "hyo",
    "びゃ": "bya", "びゅ": "byu", "びょ": "byo",
    "ぴゃ": "pya", "ぴゅ": "pyu", "ぴょ": "pyo",
    "みゃ": "mya", "みゅ": "myu", "みょ": "myo",
    "りゃ": "rya", "りゅ": "ryu", "りょ": "ryo",
}

# Layer 2: MORA_TABLE - single kana
MORA_TABLE = {
    "あ": "a", "い": "i", "う": "u", "え": "e", "お": "o",
    "か": "ka", "き": "ki", "く": "ku", "け": "ke", "こ": "ko",
    "さ": "sa", "し": "shi", "す": "su", "せ": "se", "そ": "so",
    "た": "ta", "ち": "chi", "つ": "tsu", "て": "te", "と": "to",
    "な": "na", "に": "ni", "ぬ": "nu", "ね": "ne", "の": "no",
    "は": "ha", "ひ": "hi", "ふ": "fu", "へ": "he", "ほ": "ho",
    "ま": "ma", "み": "mi", "む": "mu", "め": "me", "も": "mo",
    "や": "ya", "ゆ": "yu", "よ": "yo",
    "ら": "ra", "り": "ri", "る": "ru", "れ": "re", "ろ": "ro",
    "わ": "wa", "ゐ": "i", "ゑ": "e", "を": "o", "ん": NASAL_PLACEHOLDER,
    # dakuten / handakuten
    "が": "ga", "ぎ": "gi", "ぐ": "gu", "げ": "ge", "ご": "go",
    "ざ": "za", "じ": "ji", "ず": "zu", "ぜ": "ze", "ぞ": "zo",
    "だ": "da", "ぢ": "ji", "づ": "zu", "で": "de", "ど": "do",
    "ば": "ba", "び": "bi", "ぶ": "bu", "べ": "be", "ぼ": "bo",
    "ぱ": "pa", "ぴ": "pi", "ぷ": "pu", "ぺ": "pe", "ぽ": "po",
    "ゔ": "vu",
    # small kana on their own
    "ぁ": "a", "ぃ": "i", "ぅ": "u", "ぇ": "e", "ぉ": "o",
    "ゃ": "ya", "ゅ": "yu", "ょ": "yo",
}

# fmt: on

# Mora whose vowel is "o"; a following う/お spells a long o
O_ROW = frozenset("おこそとのほもよろを")

# Vowel kana that may lengthen the preceding mora
U_VOWEL = "う"
O_VOWEL = "お"

# ───────── Vowel-length strategies ─────────
OMIT = "omit"  # Ono, Yuki
OH = "oh"  # Ohno
MACRON = "macron"  # Ōno
OU = "ou"  # Ouno, Yuuki
LONG_VOWEL_STRATEGIES = frozenset({OMIT, OH, MACRON, OU})
DEFAULT_STRATEGY = OMIT

MACRONS = MappingProxyType({"o": "ō", "u": "ū"})

# ───────── Display ─────────
UNSET_PLACEHOLDER = "未設定"
MASK_GLYPH = "＊"
MASK_MAX = 2

FULL = "full"
INITIALS = "initials"
SURNAME_INITIAL = "surname_initial"
MASKED = "masked"
ROMAJI = "romaji"
ROMAJI_INITIALS = "romaji_initials"
SURNAME_INITIAL_ROMAJI = "surname_initial_romaji"
DISPLAY_FORMATS = frozenset(
    {FULL, INITIALS, SURNAME_INITIAL, MASKED, ROMAJI, ROMAJI_INITIALS, SURNAME_INITIAL_ROMAJI}
)

# ═════════════════════════════════════════════════════════════════════════════════
# VALIDATION AND IMMUTABLE CREATION
# ═════════════════════════════════════════════════════════════════════════════════

for _pair in DIGRAPHS:
    if len(_pair) != 2 or _pair[1] not in SMALL_Y or _pair[0] not in MORA_TABLE:
        raise ValueError(f"Malformed digraph entry: {_pair!r}")

for _kana in O_ROW:
    if not MORA_TABLE.get(_kana, "").endswith("o"):
        raise ValueError(f"O_ROW entry does not romanize to an o vowel: {_kana!r}")

DIGRAPHS = MappingProxyType(DIGRAPHS)
MORA_TABLE = MappingProxyType(MORA_TABLE)
