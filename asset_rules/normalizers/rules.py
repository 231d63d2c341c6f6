from copy import deepcopy
import re
from typing import Optional
from .base import Normalizer
from .types import (
    NormalizationResult, RecordKind, Record, Replace, Unchanged, resolve_slot,
)

# Canonical line code: 5 letters + 3 digits + 4 letters, e.g. ADIBW002LFLN
FIRST_LEN, MIDDLE_LEN, LAST_LEN = 5, 3, 4
LETTER_FILL, DIGIT_FILL = "X", "0"

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")
_NON_LETTER = re.compile(r"[^A-Z]")
_NON_DIGIT = re.compile(r"[^0-9]")
_LEADING_LETTERS = re.compile(r"^[A-Za-z]+")
_TRAILING_DIGITS = re.compile(r"[0-9]+$")


class RuleNormalizer(Normalizer):
    """
    Rule-based normalizer for asset records:
    picks the identifier field from the record's own asset/service type
    and rewrites it when the code rules say it should change.
    """
    def normalize_record(self, kind: RecordKind, rec: Record) -> Record:
        r = deepcopy(rec)  # work on a copy so we don’t mutate the input
        if kind != "asset":
            return r
        slot = resolve_slot(r.get("asset_type"), r.get("service_type"))
        if slot is None or slot.field not in r:
            return r
        result = normalize(r[slot.field], r.get("asset_type"), r.get("service_type"))
        if isinstance(result, Replace):
            r[slot.field] = result.new_code
        return r


# --- Individual code helpers ---

def is_blank(raw: Optional[str]) -> bool:
    return raw is None or not str(raw).strip()

def is_short_code(raw: str, prefix: str) -> bool:
    """Hand-entered short reference such as FLID001 or flid1234."""
    return re.fullmatch(rf"{re.escape(prefix)}[0-9]{{3,4}}", raw, re.IGNORECASE) is not None

def clean_code(raw: str) -> str:
    """Drop everything but ASCII letters/digits (order kept) and uppercase."""
    return _NON_ALNUM.sub("", raw).upper()

def rectify(code: str) -> str:
    """Force any string into the 12-character line-code layout."""
    cleaned = clean_code(code)
    letters = _NON_LETTER.sub("", cleaned)
    digits = _NON_DIGIT.sub("", cleaned)

    first = (letters + LETTER_FILL * FIRST_LEN)[:FIRST_LEN]
    middle = (digits + DIGIT_FILL * MIDDLE_LEN)[:MIDDLE_LEN]

    # The last window reads the same letter sequence as the first one,
    # so the two overlap when there are fewer than 9 letters.
    if len(letters) >= FIRST_LEN + LAST_LEN:
        last = letters[-LAST_LEN:]
    elif len(letters) >= FIRST_LEN:
        last = (letters[-min(LAST_LEN, len(letters)):] + LETTER_FILL * LAST_LEN)[:LAST_LEN]
    else:
        last = LETTER_FILL * LAST_LEN
    return first + middle + last

def normalize_well_code(raw: str) -> Optional[str]:
    """
    4-letter prefix + trailing digits, e.g. "adib-0042" -> "ADIB0042".
    Returns None when there are fewer than 4 leading letters or
    fewer than 3 trailing digits to build from.
    """
    cleaned = _NON_ALNUM.sub("", raw)
    letters = _LEADING_LETTERS.search(cleaned)
    digits = _TRAILING_DIGITS.search(cleaned)
    if not letters or len(letters.group()) < 4:
        return None
    if not digits or len(digits.group()) < 3:
        return None
    return letters.group()[:4].upper() + digits.group()

def normalize(raw_code: Optional[str], asset_class=None, service_class=None) -> NormalizationResult:
    """
    Decide whether an operator-entered identifier needs rewriting.

    The classifiers select the field rules (service class first). Blank
    input, unknown classes and classes without a code rule are left alone.
    Never raises on bad input.
    """
    if is_blank(raw_code):
        return Unchanged()
    raw = str(raw_code)

    slot = resolve_slot(asset_class, service_class)
    if slot is None or slot.rule is None:
        return Unchanged()

    if slot.rule == "line":
        if is_short_code(raw, slot.prefix):
            return Unchanged()
        new_code = rectify(raw)
    else:
        new_code = normalize_well_code(raw)
        if new_code is None:
            return Unchanged()

    return Unchanged() if new_code == raw else Replace(new_code)
