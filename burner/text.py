"""
Cue Text Transformations

Script-aware upper-casing and the optional emoji decoration applied to
words before they are written into a subtitle track.
"""

import logging
from typing import Dict, List, Sequence, Tuple

logger = logging.getLogger(__name__)

# Code point ranges treated as CJK; case folding is a no-op for them
CJK_RANGES: Tuple[Tuple[int, int], ...] = (
    (0x1100, 0x11FF),  # Hangul Jamo
    (0x2E80, 0x2FDF),  # CJK Radicals, Kangxi Radicals
    (0x3000, 0x303F),  # CJK Symbols and Punctuation
    (0x3040, 0x309F),  # Hiragana
    (0x30A0, 0x30FF),  # Katakana
    (0x3130, 0x318F),  # Hangul Compatibility Jamo
    (0x31F0, 0x31FF),  # Katakana Phonetic Extensions
    (0x3400, 0x4DBF),  # CJK Unified Ideographs Extension A
    (0x4E00, 0x9FFF),  # CJK Unified Ideographs
    (0xAC00, 0xD7AF),  # Hangul Syllables
    (0xF900, 0xFAFF),  # CJK Compatibility Ideographs
    (0xFF00, 0xFFEF),  # Halfwidth and Fullwidth Forms
    (0x20000, 0x2FA1F),  # CJK Unified Ideographs Extension B-F, Supplement
)

# Punctuation ignored when looking words up in the emoji table
_LOOKUP_STRIP = ".,!?;:…\"'«»()[]"

# Decorated forms keyed by upper-cased word or phrase
EMOJI_TABLE: Dict[str, str] = {
    "LOVE": "LOVE ❤️",
    "FIRE": "FIRE 🔥",
    "MONEY": "💰 MONEY",
    "WOW": "WOW 😮",
    "HAPPY": "HAPPY 😊",
    "SAD": "SAD 😢",
    "LAUGH": "LAUGH 😂",
    "MUSIC": "🎵 MUSIC",
    "IDEA": "💡 IDEA",
    "TIME": "⏰ TIME",
    "WIN": "WIN 🏆",
    "ROCKET": "ROCKET 🚀",
    "WORLD": "🌍 WORLD",
    "STAR": "STAR ⭐",
    "THANK YOU": "THANK YOU 🙏",
    "OH MY GOD": "OH MY GOD 😱",
    "ЛЮБОВЬ": "ЛЮБОВЬ ❤️",
    "ОГОНЬ": "ОГОНЬ 🔥",
    "ДЕНЬГИ": "💰 ДЕНЬГИ",
    "ВАУ": "ВАУ 😮",
    "МУЗЫКА": "🎵 МУЗЫКА",
    "ИДЕЯ": "💡 ИДЕЯ",
    "МИР": "🌍 МИР",
    "ПРИВЕТ": "ПРИВЕТ 👋",
    "СПАСИБО": "СПАСИБО 🙏",
}

MAX_PHRASE_WORDS = max(len(key.split()) for key in EMOJI_TABLE)


def is_cjk_char(char: str) -> bool:
    """Check whether a single character falls in a CJK range."""
    code = ord(char)
    return any(lo <= code <= hi for lo, hi in CJK_RANGES)


def contains_cjk(text: str) -> bool:
    """Check whether text contains at least one CJK code point."""
    return any(is_cjk_char(c) for c in text)


def fold_case(text: str) -> str:
    """
    Upper-case text for display.

    Latin and Cyrillic text is upper-cased. Text containing any CJK code
    point is returned unchanged, decided by range membership only.

    Args:
        text: Word or cue text

    Returns:
        Display text
    """
    if contains_cjk(text):
        return text
    return text.upper()


def _lookup_key(text: str) -> str:
    return text.strip(_LOOKUP_STRIP).upper()


def decorate_word(text: str) -> str:
    """
    Decorate a single word using the emoji table.

    Surrounding punctuation is ignored for the lookup but the decorated
    form replaces the whole word. Words absent from the table are
    returned unchanged.
    """
    key = _lookup_key(text)
    decorated = EMOJI_TABLE.get(key)
    if decorated is None:
        return text
    # Keep the caller's casing when upper-casing was disabled
    return decorated.replace(key, text.strip(_LOOKUP_STRIP), 1)


def decorate_words(texts: Sequence[str]) -> List[str]:
    """
    Decorate a sequence of word texts, matching phrases first.

    Longest phrase matches win. A decorated phrase replaces its words: the
    decorated text lands on the phrase's first word and the remaining
    words become empty strings, so the returned list stays aligned with
    the input (callers skip empty entries when joining).

    Args:
        texts: Word texts, already case-folded

    Returns:
        Decorated texts, same length as the input
    """
    result = list(texts)
    i = 0
    while i < len(result):
        matched = False
        for size in range(min(MAX_PHRASE_WORDS, len(result) - i), 1, -1):
            phrase = " ".join(_lookup_key(t) for t in texts[i:i + size])
            if phrase in EMOJI_TABLE:
                result[i] = EMOJI_TABLE[phrase]
                for j in range(i + 1, i + size):
                    result[j] = ""
                i += size
                matched = True
                break
        if not matched:
            result[i] = decorate_word(texts[i])
            i += 1
    return result


def prepare_words(texts: Sequence[str], uppercase: bool = True, emoji: bool = False) -> List[str]:
    """
    Apply case folding and, when enabled, emoji decoration.

    Args:
        texts: Raw word texts
        uppercase: Upper-case non-CJK words
        emoji: Enable emoji decoration

    Returns:
        Display texts aligned with the input
    """
    folded = [fold_case(t) if uppercase else t for t in texts]
    if emoji:
        folded = decorate_words(folded)
    return folded
