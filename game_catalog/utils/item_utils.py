# ===== IMPORTS & DEPENDENCIES =====
import re
import math
import logging
from typing import Any, Optional, Union
from bs4 import BeautifulSoup

from game_catalog.models.item import Scalar

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

_TAG_HINT = re.compile(r'<[a-zA-Z/!][^>]*>')

# ===== UTILITY FUNCTIONS =====

def clean_description(raw: Any) -> Optional[str]:
    """
    Turns an upstream description into plain text.
    Several sources (CS2, Marvel Rivals) embed <i>, <br> and color tags in their descriptions.
    """
    if raw is None:
        return None
    text = str(raw)
    if _TAG_HINT.search(text):
        text = BeautifulSoup(text, 'html.parser').get_text(separator=' ')
    text = re.sub(r'\s+', ' ', text).strip()
    return text or None


def slugify(value: str) -> str:
    """Lowercases and collapses anything that is not a letter or digit into single dashes."""
    slug = re.sub(r'[^a-z0-9]+', '-', value.lower()).strip('-')
    return slug or 'item'


def first_present(record: dict, *keys: str) -> Any:
    """Returns the first value under `keys` that is neither None nor an empty string."""
    for key in keys:
        value = record.get(key)
        if value is not None and value != '':
            return value
    return None


def coerce_number(value: Any) -> Optional[Union[int, float]]:
    """
    Converts a numeric-looking value into an int or float.
    Strings such as '47', ' 1,200 ' or '0.07' are accepted; anything else returns None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        # The JSON decoder accepts bare NaN and Infinity tokens
        return value if math.isfinite(value) else None
    if not isinstance(value, str):
        return None

    cleaned = value.strip().replace(',', '')
    if not cleaned:
        return None
    try:
        number = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    if number.is_integer() and not re.search(r'[.eE]', cleaned):
        return int(number)
    return number


def to_scalar(value: Any) -> Optional[Scalar]:
    """
    Reduces an attribute value to a scalar.
    Lists of scalars become a comma-separated string; mappings and empty values are rejected.
    """
    if value is None:
        return None
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, (bool, int)):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    if isinstance(value, (list, tuple)):
        parts = [str(v).strip() for v in value if isinstance(v, (str, int, float)) and not isinstance(v, bool)]
        parts = [p for p in parts if p]
        return ', '.join(parts) if parts else None
    return None


def absolute_url(path: Optional[str], base: str) -> Optional[str]:
    """Prefixes relative asset paths with `base`; absolute URLs are returned unchanged."""
    if not path or not isinstance(path, str):
        return None
    if path.startswith('http://') or path.startswith('https://'):
        return path
    return f"{base.rstrip('/')}/{path.lstrip('/')}"
