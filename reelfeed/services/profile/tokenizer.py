import re
import unicodedata
from collections.abc import Callable, Iterable
from typing import Final

# Functional words (ja/en) plus generic media terms that carry no interest signal
STOP_WORDS: Final[frozenset[str]] = frozenset(
    {
        # Japanese particles / auxiliaries
        "の", "に", "は", "を", "が", "で", "です", "ます", "こと", "もの", "これ", "それ", "あれ",
        "いる", "する", "ある", "ない", "から", "まで", "と", "も", "や", "など", "さん", "ちゃん",
        # English
        "a", "about", "an", "and", "are", "as", "at", "be", "by", "for", "from", "how", "in", "is",
        "it", "of", "on", "or", "that", "the", "this", "to", "with", "you", "your", "my", "what",
        # Generic media terms
        "official", "channel", "video", "videos", "movie", "full", "ver",
        "公式", "動画", "チャンネル",
    }
)  # fmt: skip

# Unicode major categories that separate words: symbols, punctuation, separators, control.
# Combining marks (M*) stay inside the word they modify.
_SEPARATOR_CATEGORIES = frozenset("SPZC")
_WORD_CHAR_RE = re.compile(r"\w")
_DIGITS_RE = re.compile(r"^\d+$")
_SINGLE_ALNUM_RE = re.compile(r"^[a-z0-9]$")
_HASHTAG_RE = re.compile(r"#([^\s#]+)")
_BRACKET_RE = re.compile(r"\[([^\[\]]*)\]|【([^【】]*)】|「([^「」]*)」|『([^『』]*)』")
_BRACKET_CHARS = "[]【】「」『』 \t\r\n"

Segmenter = Callable[[str], Iterable[str]]


def split_words(text: str) -> list[str]:
    """Split on runs of symbol, punctuation, separator and control characters."""
    spaced = "".join(" " if unicodedata.category(ch)[0] in _SEPARATOR_CATEGORIES else ch for ch in text)
    return spaced.split()


class Tokenizer:
    """
    Turns free text (titles, channel names, search terms) into a set of keywords.

    A locale-aware segmenter can be plugged in; it receives lower-cased text and
    yields segments, of which only word-like ones are kept. Without one, text
    is split on runs of symbol, punctuation, separator and control characters.
    """

    def __init__(self, segmenter: Segmenter | None = None, stop_words: frozenset[str] = STOP_WORDS):
        self.segmenter = segmenter
        self.stop_words = stop_words

    def tokenize(self, text: str | None) -> set[str]:
        if not text:
            return set()

        lowered = text.lower()
        words = self._segment(lowered)
        words.extend(self._hashtags(lowered))
        words.extend(self._bracketed(lowered))

        return {w for w in words if self._keep(w)}

    def _segment(self, text: str) -> list[str]:
        if self.segmenter is not None:
            return [seg.strip() for seg in self.segmenter(text) if seg and _WORD_CHAR_RE.search(seg)]
        return split_words(text)

    @staticmethod
    def _hashtags(text: str) -> list[str]:
        return [tag.strip() for tag in _HASHTAG_RE.findall(text)]

    @staticmethod
    def _bracketed(text: str) -> list[str]:
        spans = []
        for groups in _BRACKET_RE.findall(text):
            inner = next((g for g in groups if g), "")
            inner = inner.strip(_BRACKET_CHARS)
            if inner:
                spans.append(inner)
        return spans

    def _keep(self, word: str) -> bool:
        if not word:
            return False
        if len(word) <= 1 and not _SINGLE_ALNUM_RE.match(word):
            return False
        if _DIGITS_RE.match(word):
            return False
        return word not in self.stop_words


default_tokenizer = Tokenizer()


def extract_keywords(text: str | None) -> set[str]:
    """Tokenize with the default (regex-split) tokenizer."""
    return default_tokenizer.tokenize(text)
