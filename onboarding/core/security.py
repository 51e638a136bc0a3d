import hmac
import uuid
from typing import Optional


def generate_verification_code() -> str:
    """Generate a member verification code (random UUID4)"""
    return str(uuid.uuid4())


def codes_match(supplied: Optional[str], stored: Optional[str]) -> bool:
    """Exact, constant-time comparison of two codes or secrets"""
    if not supplied or not stored:
        return False
    return hmac.compare_digest(supplied.encode(), stored.encode())
