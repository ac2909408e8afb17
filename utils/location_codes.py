# utils/location_codes.py
"""
Single boundary for the string encodings the inventory API uses for
locations:

  - "L01:5,L02:3"   BOM component locations (code:qty pairs)
  - "L01(5)"        item-summary display form

plus the administrative-code filter used by the occupancy stats and the
natural ordering used by the report tables.
"""
import re
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple

from domain.models import LocationQuantity
from utils.formatting import parse_int

_NATURAL_CHUNK_RE = re.compile(r"(\d+)")
_PAREN_TOKEN_RE = re.compile(r"^(.+?)\s*\((.+?)\)")
_COLON_TOKEN_RE = re.compile(r"^(.+?):(.+)")


def parse_code_qty_list(raw: Optional[str]) -> List[LocationQuantity]:
    """
    "L01:5, L02:x" -> [LocationQuantity("L01", 5), LocationQuantity("L02", 0)]

    Splits on the first colon only; tokens with an empty code are dropped.
    """
    if not raw:
        return []

    result: List[LocationQuantity] = []
    for token in raw.split(","):
        code, _, qty = token.strip().partition(":")
        if not code:
            continue
        result.append(LocationQuantity(code=code, quantity=parse_int(qty)))
    return result


def parse_display_tokens(raw: Optional[str]) -> List[Tuple[str, Optional[str]]]:
    """
    Tolerant parse for showing a locations string: each comma token may be
    "code(qty)", "code:qty" or just "code". Returns (code, qty_text|None).
    """
    if not raw:
        return []

    out: List[Tuple[str, Optional[str]]] = []
    for token in raw.split(","):
        token = token.strip()
        if not token:
            continue
        match = _PAREN_TOKEN_RE.match(token) or _COLON_TOKEN_RE.match(token)
        if match:
            out.append((match.group(1), match.group(2)))
        else:
            out.append((token, None))
    return out


def format_location(loc: LocationQuantity) -> str:
    return f"{loc.code}({loc.quantity})"


def format_locations(locs: Iterable[LocationQuantity], sep: str = "\n") -> str:
    return sep.join(format_location(loc) for loc in locs)


# -----------------------------------------------------------------------------
# Administrative (non-storage) codes
# -----------------------------------------------------------------------------

def normalize_code(code: Optional[str]) -> str:
    """Strip a leading '#' marker and a trailing '#V_...' suffix."""
    normalized = (code or "")
    if normalized.startswith("#"):
        normalized = normalized[1:]
    suffix_at = normalized.find("#V_")
    if suffix_at != -1:
        normalized = normalized[:suffix_at]
    return normalized.strip()


def compile_patterns(patterns: Sequence[str]) -> List[Pattern]:
    return [re.compile(p) for p in patterns]


def is_storage_location(code: Optional[str], patterns: Sequence[Pattern]) -> bool:
    normalized = normalize_code(code)
    return not any(p.fullmatch(normalized) for p in patterns)


# -----------------------------------------------------------------------------
# Natural ordering ("A2" < "A10")
# -----------------------------------------------------------------------------

def natural_key(value: Optional[str]) -> Tuple:
    text = value or ""
    chunks = []
    for part in _NATURAL_CHUNK_RE.split(text):
        if not part:
            continue
        if part.isdecimal():
            chunks.append((0, int(part), ""))
        else:
            chunks.append((1, 0, part.casefold()))
    # original text breaks ties such as "a1" vs "A1" or "A01" vs "A1"
    return tuple(chunks), text
