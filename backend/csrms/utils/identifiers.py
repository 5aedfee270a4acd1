"""
Prefixed identifiers for service requests, audit logs and notifications.
"""

import re
import secrets
import string

REQUEST_ID_PREFIX = "REQ"
AUDIT_LOG_ID_PREFIX = "LOG"
NOTIFICATION_ID_PREFIX = "NOT"

ID_SUFFIX_LENGTH = 8
ID_ALPHABET = string.ascii_uppercase + string.digits
ID_PATTERN = re.compile(r"^[A-Z]{3}[A-Z0-9]{8}$")


def generate_id(prefix: str) -> str:
    """Return ``prefix`` followed by 8 random uppercase alphanumerics."""
    if not re.fullmatch(r"[A-Z]{3}", prefix):
        raise ValueError(f"Identifier prefix must be three uppercase letters: {prefix!r}")
    suffix = "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_SUFFIX_LENGTH))
    return f"{prefix}{suffix}"


def generate_request_id() -> str:
    return generate_id(REQUEST_ID_PREFIX)


def generate_log_id() -> str:
    return generate_id(AUDIT_LOG_ID_PREFIX)


def generate_notification_id() -> str:
    return generate_id(NOTIFICATION_ID_PREFIX)
