import uuid
from datetime import datetime, timezone

import bcrypt

from .config import settings


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:      # not a bcrypt hash, or password too long
        return False


def generate_pnr() -> str:
    return uuid.uuid4().hex[:10].upper()


def mask_card(card_no) -> str:
    """Keep only the last 4 digits, the full number is never stored."""
    if not card_no:
        return "XXXX"
    digits = "".join(ch for ch in str(card_no) if ch.isdigit())
    return digits[-4:] if digits else "XXXX"


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)
