"""
Core module for the Scrum Work Map engine.

Contains configuration and base text utilities.
"""

from scrum_workmap.core.config import *
from scrum_workmap.core.utils import (
    clean_text,
    validate_columns,
    extract_tokens,
    calculate_token_overlap,
    locale_sort_key,
    split_lines,
)

__all__ = [
    'clean_text',
    'validate_columns',
    'extract_tokens',
    'calculate_token_overlap',
    'locale_sort_key',
    'split_lines',
]
