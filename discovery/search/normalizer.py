"""
Text normalization for Fanaara Discovery
Canonicalizes raw text so queries and searchable fields compare consistently
"""

import re
import unicodedata
from enum import Enum
from typing import Any, Iterable, List

_WHITESPACE = re.compile(r"\s+", re.UNICODE)
_ALLOWED_SYMBOLS = frozenset("@._-")

# Compatibility decomposition can surface uppercase or decomposable
# characters, so the pass is repeated until the output stops changing.
_MAX_PASSES = 4


def _is_allowed(char: str) -> bool:
    if char in _ALLOWED_SYMBOLS or char.isspace():
        return True
    # L* letters, N* numbers
    return unicodedata.category(char)[0] in ("L", "N")


def _normalize_once(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text.lower())

    chars = []
    for char in decomposed:
        if unicodedata.category(char) == "Mn":
            continue
        chars.append(char if _is_allowed(char) else " ")

    return _WHITESPACE.sub(" ", "".join(chars)).strip()


def normalize_text(text: Any) -> str:
    """
    Normalize text for matching

    Lowercases, applies NFKD decomposition and drops combining marks,
    replaces disallowed characters with a space, collapses whitespace
    and trims.

    Args:
        text: Raw text (None is treated as empty)

    Returns:
        Normalized string
    """
    if text is None:
        return ""

    result = _normalize_once(str(text))
    for _ in range(_MAX_PASSES):
        again = _normalize_once(result)
        if again == result:
            break
        result = again

    return result


def split_terms(text: Any) -> List[str]:
    """Normalize text and split it into non-empty terms"""
    normalized = normalize_text(text)
    if not normalized:
        return []
    return normalized.split(" ")


def build_search_text(*fields: Any) -> str:
    """Join matchable fields into one normalized searchable string"""
    parts: List[str] = []
    for field in fields:
        if field is None or isinstance(field, bool):
            continue
        if isinstance(field, (list, tuple, set, frozenset)):
            parts.extend(_as_text(item) for item in _flatten(field) if item is not None)
        else:
            parts.append(_as_text(field))
    return normalize_text(" ".join(parts))


def _as_text(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _flatten(values: Iterable[Any]) -> Iterable[Any]:
    for value in values:
        if isinstance(value, (list, tuple, set, frozenset)):
            yield from _flatten(value)
        else:
            yield value
