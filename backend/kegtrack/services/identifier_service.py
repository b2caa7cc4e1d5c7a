"""
Identifier Service - keg ids and the QR codes printed on them

FORMATS:
- Keg id:  K-########   (8 digits)
- QR code: SK########   (same 8 digits)

The QR code is derived from the id and never stored independently of it,
so a scanned code always maps back to exactly one id.
"""

from __future__ import annotations

import logging
import re
import secrets
from typing import Callable


KEG_ID_PREFIX = "K-"
QR_PREFIX = "SK"

KEG_ID_PATTERN = re.compile(r"^K-\d{8}$")
QR_CODE_PATTERN = re.compile(r"^SK\d{8}$")

logger = logging.getLogger(__name__)


class IdentifierExhaustedError(RuntimeError):
    """Raised when no unused keg id was found within the attempt budget."""


def generate_keg_id() -> str:
    """Random keg id, K- followed by 8 digits. No uniqueness check."""
    return f"{KEG_ID_PREFIX}{10_000_000 + secrets.randbelow(90_000_000)}"


def generate_qr_code(keg_id: str) -> str:
    return f"{QR_PREFIX}{keg_id.replace(KEG_ID_PREFIX, '')}"


def extract_keg_id_from_qr(qr_code: str) -> str:
    """Inverse of generate_qr_code. Non-SK input is returned unchanged."""
    if qr_code.startswith(QR_PREFIX):
        return f"{KEG_ID_PREFIX}{qr_code[len(QR_PREFIX):]}"
    return qr_code


def is_valid_qr_code(qr_code: str) -> bool:
    return bool(QR_CODE_PATTERN.match(qr_code))


def is_valid_keg_id(keg_id: str) -> bool:
    return bool(KEG_ID_PATTERN.match(keg_id))


def normalize_scan(value: str) -> str:
    """Normalize scanner/keyboard input to uppercase, no spaces."""
    return value.upper().strip().replace(" ", "")


def generate_unique_keg_id(exists: Callable[[str], bool], *, attempts: int = 10) -> str:
    """
    Generate a keg id that `exists` reports as unused.

    Raises:
        IdentifierExhaustedError: every attempt collided
    """
    for attempt in range(attempts):
        keg_id = generate_keg_id()
        if not exists(keg_id):
            return keg_id
        logger.warning("Keg id collision on attempt %d: %s", attempt + 1, keg_id)
    raise IdentifierExhaustedError(f"No unused keg id found after {attempts} attempts")
