import re
import secrets
import string
import time
from typing import Optional

from redeemhub.config import settings

CODE_ALPHABET = string.ascii_uppercase + string.digits
_NON_ALNUM = re.compile(r"[^A-Z0-9]")


def generate_short_code(prefix: Optional[str] = None) -> str:
    """
    Build "<PREFIX>-<4 random chars><last 4 digits of epoch millis>".

    Not unique by construction: callers check the store and retry.
    """
    prefix = prefix or settings.CODE_DEFAULT_PREFIX
    random_part = "".join(secrets.choice(CODE_ALPHABET) for _ in range(4))
    millis = str(int(time.time() * 1000))[-4:]
    return f"{prefix}-{random_part}{millis}"


def code_prefix(product_code: Optional[str], custom_prefix: Optional[str] = None) -> str:
    """Custom prefix if given, else the first 3 chars of the product code; upper-case alphanumerics only."""
    raw = custom_prefix if custom_prefix else (product_code or "")[:3]
    cleaned = _NON_ALNUM.sub("", raw.upper())
    return cleaned or settings.CODE_DEFAULT_PREFIX
