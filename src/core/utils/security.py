import hashlib
import secrets

from pydantic import EmailStr


def generate_otp(length: int = 6) -> str:
    """
    Generate a numeric one-time passcode of ``length`` digits.

    Leading zeros are kept, so every code has exactly ``length`` characters.
    """
    upper_bound = 10**length
    return str(secrets.randbelow(upper_bound)).zfill(length)


def mask_email(email: str | EmailStr) -> str:
    """
    Masks an email address by replacing part of the local and domain parts
    with asterisks.
    Mask pattern: ab***@cd***

    Args:
        email: str
            A string containing the email address to be masked.

    Returns:
        str
            A masked version of the provided email address with part of
            the local and domain obscured.
    """
    email_str = str(email)
    if "@" not in email_str:
        return "***"
    local, domain = email_str.split("@", 1)
    masked_local = (local[:2] + "***") if local else "*****"
    masked_domain = (domain[:2] + "***") if domain else "*****"
    return f"{masked_local}@{masked_domain}"


def build_email_throttle_key(prefix: str, email: str | EmailStr) -> str:
    """
    Builds a cache throttle key based on a normalized email hash.
    """
    email_norm = normalize_email(str(email))
    digest = hashlib.sha256(email_norm.encode("utf-8")).hexdigest()
    return f"{prefix}:{digest}"


def normalize_email(email: str) -> str:
    """Normalize an email address."""
    return email.strip().lower()
