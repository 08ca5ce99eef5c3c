"""
Utility functions for text processing and data validation.
"""

import re
import logging
import unicodedata
import pandas as pd

from .config import CONTINUITY_MIN_TOKEN_LENGTH

logger = logging.getLogger(__name__)


def clean_text(text):
    """Clean and normalize text for processing"""
    if text is None or (not isinstance(text, (list, tuple)) and pd.isna(text)):
        return ""
    text = str(text).replace("\xa0", " ").replace("_x000D_", " ").replace("\n", " ")
    return re.sub(r'\s+', ' ', text).strip()


def validate_columns(df, required_cols):
    """Validate that required columns exist in dataframe"""
    missing = [c for c in required_cols if c not in df.columns]
    if missing:
        logger.warning(f"Missing columns: {missing}. Some features may be limited.")
        return False
    return True


def extract_tokens(texts, min_length=CONTINUITY_MIN_TOKEN_LENGTH):
    """Lowercase, whitespace-split token set of a list of task strings.

    Tokens whose length is ``min_length`` or shorter are dropped.  There is no
    stop-word list and no punctuation stripping: "bug," and "bug" are
    different tokens.
    """
    if not texts:
        return set()
    joined = " ".join(str(t) for t in texts).lower()
    return {w for w in joined.split() if len(w) > min_length}


def calculate_token_overlap(reference_texts, other_texts):
    """Share of the reference token set that also appears in the other set.

    The denominator is always the reference side, so the ratio is not
    symmetric in its arguments.
    """
    reference = extract_tokens(reference_texts)
    other = extract_tokens(other_texts)
    matches = len(reference & other)
    return matches / max(len(reference), 1)


def locale_sort_key(text):
    """Collation key approximating a locale-aware alphabetical compare.

    Case and accents are folded first; the original string breaks ties so
    the order stays total and deterministic.
    """
    text = text or ""
    folded = unicodedata.normalize('NFKD', text).casefold()
    stripped = ''.join(ch for ch in folded if not unicodedata.combining(ch))
    return (stripped, text)


def split_lines(value):
    """Split a multi-line spreadsheet cell into a list of non-empty strings."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [clean_text(v) for v in value if clean_text(v)]
    if pd.isna(value):
        return []
    parts = re.split(r'[\r\n]+', str(value).replace("_x000D_", "\n"))
    return [clean_text(p) for p in parts if clean_text(p)]
