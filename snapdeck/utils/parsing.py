"""Text parsing utilities for consistent text processing across the application."""

import json
import re
import unicodedata
from typing import Any, List


class TextParser:
    """
    Centralized text parsing utilities.
    
    Single source of truth for pulling structured data out of free-form
    model output and for cleaning user-pasted identifiers.
    """
    
    # First "[" to last "]" across lines
    JSON_ARRAY_PATTERN = re.compile(r'\[[\s\S]*\]')
    
    DECK_ID_DECORATION_PATTERN = re.compile(r'[\[\]]')
    
    WHITESPACE_PATTERN = re.compile(r'\s+')
    
    @classmethod
    def normalize_unicode(cls, text: str) -> str:
        """
        Normalize text to NFC form for consistent Unicode handling.
        
        Kana with dakuten can arrive either precomposed (が) or as
        base + combining mark; NFC folds both to the same codepoints.
        
        Args:
            text: Input text
            
        Returns:
            NFC-normalized text
        """
        if not text:
            return ""
        return unicodedata.normalize('NFC', str(text))
    
    @classmethod
    def find_json_array(cls, text: str) -> str:
        """
        Return the bracket-delimited array substring of text, or "".
        
        Args:
            text: Accumulated model output
            
        Returns:
            The matched "[...]" substring, or an empty string if none
        """
        if not text:
            return ""
        match = cls.JSON_ARRAY_PATTERN.search(text)
        return match.group(0) if match else ""
    
    @classmethod
    def parse_json_array(cls, text: str) -> List[Any]:
        """
        Parse the bracketed array found in text.
        
        Returns an empty list when text holds no array. Malformed JSON
        raises json.JSONDecodeError; callers decide how to surface it.
        """
        candidate = cls.find_json_array(text)
        if not candidate:
            return []
        data = json.loads(candidate)
        if not isinstance(data, list):
            raise ValueError("Expected a JSON array")
        return data
    
    @classmethod
    def clean_deck_id(cls, raw: str) -> str:
        """Strip [[...]] link decoration and surrounding whitespace from a deck id."""
        if not raw:
            return ""
        return cls.DECK_ID_DECORATION_PATTERN.sub('', str(raw)).strip()
    
    @classmethod
    def one_line(cls, text: str, limit: int = 100) -> str:
        """Collapse text onto a single line, truncated to limit characters."""
        if not text:
            return ""
        return str(text)[:limit].replace("\n", " ")
