"""Identifiers that users type or scan: product barcodes and transaction references.

Barcodes are stored as entered. A scanned EAN may still arrive with spaces,
dashes or without its leading zero, so lookups try each form. Reference
numbers are generated here so every transaction gets a human-readable,
unique handle.
"""

from __future__ import annotations

import re
import secrets
from datetime import datetime, timezone
from typing import Callable

from .errors import ConflictError

__all__ = [
    "REFERENCE_SUFFIX_LENGTH",
    "barcode_aliases",
    "generate_reference_number",
    "normalize_code",
]

REFERENCE_SUFFIX_LENGTH = 6
REFERENCE_MAX_ATTEMPTS = 8

_ALPHA_RE = re.compile(r"[A-Za-z]")
_NON_DIGIT_RE = re.compile(r"\D")
_WHITESPACE_RE = re.compile(r"\s+")


def _clean(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value.strip())


def normalize_code(raw: str | None) -> str | None:
    """Upper-case and trim a warehouse code; blank becomes ``None``."""

    if raw is None:
        return None
    cleaned = _clean(raw)
    return cleaned.upper() or None


def barcode_aliases(raw: str | None) -> list[str]:
    """Every stored form a scanned barcode could match, as typed first.

    Numeric input also matches its digits-only form and the UPC-A/EAN-13
    twin with or without the leading zero.
    """

    if raw is None:
        return []
    cleaned = _clean(raw)
    if not cleaned:
        return []

    candidates: list[str] = []

    def add(candidate: str) -> None:
        if candidate and candidate not in candidates:
            candidates.append(candidate)

    add(cleaned)
    if not _ALPHA_RE.search(cleaned):
        digits = _NON_DIGIT_RE.sub("", cleaned)
        add(digits)
        if len(digits) == 12:
            add("0" + digits)
        elif len(digits) == 13 and digits.startswith("0"):
            add(digits[1:])
    return candidates


def _suffix() -> str:
    return secrets.token_hex(REFERENCE_SUFFIX_LENGTH // 2 + 1)[:REFERENCE_SUFFIX_LENGTH].upper()


def generate_reference_number(
    transaction_type: str,
    *,
    exists: Callable[[str], bool] | None = None,
    now: datetime | None = None,
) -> str:
    """Return ``TYPE-YYYYMMDD-XXXXXX`` for a new transaction.

    ``exists`` is asked about each candidate; a taken number is redrawn. The
    database unique constraint still has the final say.
    """

    stamp = (now or datetime.now(tz=timezone.utc)).strftime("%Y%m%d")
    prefix = f"{transaction_type.strip().upper()}-{stamp}-"
    for _ in range(REFERENCE_MAX_ATTEMPTS):
        candidate = prefix + _suffix()
        if exists is None or not exists(candidate):
            return candidate
    raise ConflictError("Could not allocate a unique reference number, please retry")
