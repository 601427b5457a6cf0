"""Utils module."""

from .parsing import TextParser
from .logger import setup_logger
from .furigana import (
    annotate,
    build_card_content,
    kanji_of,
    parse_card_content,
    reading_of,
    strip_annotations,
    to_ruby_markup,
)

__all__ = [
    'TextParser',
    'setup_logger',
    'annotate',
    'build_card_content',
    'kanji_of',
    'parse_card_content',
    'reading_of',
    'strip_annotations',
    'to_ruby_markup',
]
