from __future__ import annotations

import re
from dataclasses import dataclass

ARABIC = "ar"
FRANCO = "franco"
ENGLISH = "en"
LANGUAGES = (ARABIC, FRANCO, ENGLISH)

_ARABIC_RE = re.compile(r"[\u0600-\u06FF]")

# Franco words swap sounds for digits: 3=ع, 2=ء, 7=ح, 5=خ, 8=ق, 9=ص, 6=ط
_FRANCO_DIGITS = "2356789"
_FRANCO_WORD_RE = re.compile(
    rf"(?<![A-Za-z0-9])(?=[A-Za-z{_FRANCO_DIGITS}]*[A-Za-z])(?=[A-Za-z{_FRANCO_DIGITS}]*[{_FRANCO_DIGITS}])"
    rf"[A-Za-z{_FRANCO_DIGITS}]+(?![A-Za-z0-9])"
)
_FRANCO_MARKERS = ("meen", "kam", "ay ", "el ", "eh ")


@dataclass(frozen=True)
class LanguageFlags:
    has_arabic_script: bool = False
    is_franco: bool = False

    @property
    def language(self) -> str:
        # Arabic script wins over Franco markers; English is the fallback
        if self.has_arabic_script:
            return ARABIC
        if self.is_franco:
            return FRANCO
        return ENGLISH


def has_arabic_script(text: str) -> bool:
    return bool(_ARABIC_RE.search(text or ""))


def is_franco(text: str) -> bool:
    # a lone digit ("top 3") is not Franco; it needs letters in the same word
    t = (text or "").lower()
    if _FRANCO_WORD_RE.search(t):
        return True
    return any(m in t for m in _FRANCO_MARKERS)


def detect(utterance: str) -> LanguageFlags:
    """Classify once per query; rules read the flags, they never re-detect."""
    return LanguageFlags(has_arabic_script=has_arabic_script(utterance),
                         is_franco=is_franco(utterance))
