"""Utility functions."""

from papersift.utils.text import extract_numerals, join_text, normalize_keyword, truncate

__all__ = ["extract_numerals", "join_text", "normalize_keyword", "truncate"]
