"""
Mochi card text format.

Cards are stored as ``# <annotated-text>\\n\\n---\\n\\n<meaning>`` where the
annotated text marks each kanji run with its reading: ``{漢}(かん){字}(じ)``.
Mochi renders that syntax as furigana.
"""

import re
from typing import Iterable, Optional, Tuple

from ..models import JapaneseWord, RemoteCard
from .parsing import TextParser

ANNOTATION_PATTERN = re.compile(r'\{([^}]+)\}\(([^)]+)\)')

CARD_SEPARATOR = "\n\n---\n\n"
_SEPARATOR_PATTERN = re.compile(r'\n\s*---\s*\n')
_HEADING_PATTERN = re.compile(r'^\s*#\s*')


def annotate(segments: Iterable[Tuple[str, Optional[str]]]) -> str:
    """
    Encode (text, reading) segments into the annotation syntax.

    Segments without a reading (okurigana, kana-only words) are emitted verbatim.

    >>> annotate([("漢", "かん"), ("字", "じ")])
    '{漢}(かん){字}(じ)'
    """
    parts = []
    for text, reading in segments:
        if reading:
            parts.append("{%s}(%s)" % (text, reading))
        else:
            parts.append(text)
    return "".join(parts)


def strip_annotations(text: str) -> str:
    """Display text: ``{漢}(かん)`` becomes ``漢``."""
    return ANNOTATION_PATTERN.sub(r'\1', text or "")


def reading_of(text: str) -> str:
    """Phonetic reading: annotated runs become their reading, kana stays as is."""
    return ANNOTATION_PATTERN.sub(r'\2', text or "")


def kanji_of(text: str) -> str:
    """Only the annotated base characters, empty for kana-only text."""
    return "".join(match.group(1) for match in ANNOTATION_PATTERN.finditer(text or ""))


def to_ruby_markup(text: str) -> str:
    return ANNOTATION_PATTERN.sub(r'<ruby>\1<rt>\2</rt></ruby>', text or "")


def build_card_content(word: JapaneseWord) -> str:
    """Card body for one word: annotated heading, separator, meaning."""
    return f"# {word.display_text}{CARD_SEPARATOR}{word.meaning}"


def parse_card_content(content: str) -> RemoteCard:
    """Inverse of build_card_content."""
    content = TextParser.normalize_unicode(content or "")
    parts = _SEPARATOR_PATTERN.split(content, maxsplit=1)
    front = _HEADING_PATTERN.sub("", parts[0]).strip()
    meaning = parts[1].strip() if len(parts) > 1 else ""
    return RemoteCard(
        front=strip_annotations(front),
        reading=reading_of(front),
        kanji=kanji_of(front),
        meaning=meaning,
    )
