import re
import unicodedata
from typing import Optional

from rapidfuzz import fuzz


PUNCT_PATTERN = re.compile(r"[^\w\s]")
ABBREVIATION_PATTERNS = [
    (re.compile(r"\bfyr\b"), "former yugoslav republic of"),
    (re.compile(r"\brep\b"), "republic"),
    (re.compile(r"\bthe\b"), ""),
]


def normalize_country_name(name: Optional[str]) -> str:
    if not name:
        return ""
    text = unicodedata.normalize("NFKD", name)
    text = "".join(c for c in text if not unicodedata.combining(c))
    text = text.lower().strip()
    text = PUNCT_PATTERN.sub(" ", text)
    for pattern, replacement in ABBREVIATION_PATTERNS:
        text = pattern.sub(replacement, text)
    return re.sub(r"\s+", " ", text).strip()


def token_sort_ratio(a: str, b: str) -> float:
    if not a or not b:
        return 0.0
    return fuzz.token_sort_ratio(a, b) / 100.0
