"""
Field validation for service request submissions.

Every check here is a pure function: no I/O and no exceptions. The
submission validator reports every violated rule, in rule order, so a
citizen can fix the whole form in one pass.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from csrms.models.service_request import RequestCategory, RequestPriority, RequestStatus
from csrms.utils.identifiers import ID_PATTERN, REQUEST_ID_PREFIX

TITLE_MAX_LENGTH = 100
REGION_MIN_LENGTH = 5
REGION_MAX_LENGTH = 200
MAX_IMAGE_BYTES = 5 * 1024 * 1024
ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/jpg")

VALID_CATEGORIES = [category.value for category in RequestCategory]
VALID_STATUSES = [status.value for status in RequestStatus]
VALID_PRIORITIES = [priority.value for priority in RequestPriority]

REQUEST_ID_PATTERN = re.compile(rf"^{REQUEST_ID_PREFIX}[A-Z0-9]{{8}}$")


class ImageMetadata(Protocol):
    content_type: Optional[str]
    size: int


@dataclass
class RequestSubmission:
    """Raw citizen input as received from the intake form."""

    title: Optional[str] = None
    category: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None
    user_id: Optional[str] = None
    house_number: Optional[str] = None
    description: Optional[str] = None


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


def _text(value: object) -> Optional[str]:
    """Form values arrive as strings, but callers may pass anything."""
    return None if value is None else str(value)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def image_size_error(max_bytes: int) -> str:
    """Message for an image over ``max_bytes``, e.g. "Image size must be less than 5MB"."""
    if max_bytes % (1024 * 1024) == 0:
        limit = f"{max_bytes // (1024 * 1024)}MB"
    elif max_bytes % 1024 == 0:
        limit = f"{max_bytes // 1024}KB"
    else:
        limit = f"{max_bytes} bytes"
    return f"Image size must be less than {limit}"


def validate_request_data(
    submission: RequestSubmission,
    image: Optional[ImageMetadata] = None,
    max_image_bytes: int = MAX_IMAGE_BYTES,
) -> ValidationResult:
    """Check a submission against the intake rules and collect all errors."""
    errors: List[str] = []
    title = _text(submission.title)
    region = _text(submission.region)

    if _is_blank(title):
        errors.append("Title is required")
    elif len(title) > TITLE_MAX_LENGTH:
        errors.append(f"Title must be {TITLE_MAX_LENGTH} characters or less")

    if not is_valid_category(submission.category):
        errors.append(f"Category must be one of: {', '.join(VALID_CATEGORIES)}")

    if _is_blank(region):
        errors.append("Region is required")
    elif not REGION_MIN_LENGTH <= len(region.strip()) <= REGION_MAX_LENGTH:
        errors.append(
            f"Region must be between {REGION_MIN_LENGTH} and {REGION_MAX_LENGTH} characters"
        )

    if _is_blank(_text(submission.city)):
        errors.append("City/Woreda is required")

    if _is_blank(_text(submission.user_id)):
        errors.append("User ID is required")

    if image is not None:
        if image.content_type not in ALLOWED_IMAGE_TYPES:
            errors.append("Image must be JPEG or PNG format")
        if image.size > max_image_bytes:
            errors.append(image_size_error(max_image_bytes))

    return ValidationResult(is_valid=not errors, errors=errors)


def is_valid_identifier(value: Optional[str], prefix: str) -> bool:
    """True for ``prefix`` + 8 uppercase alphanumerics."""
    if not value or not isinstance(value, str):
        return False
    return value.startswith(prefix) and ID_PATTERN.fullmatch(value) is not None


def is_valid_request_id(request_id: Optional[str]) -> bool:
    if not request_id or not isinstance(request_id, str):
        return False
    return REQUEST_ID_PATTERN.fullmatch(request_id) is not None


def is_valid_status(status: Optional[str]) -> bool:
    return status in VALID_STATUSES


def is_valid_priority(priority: Optional[str]) -> bool:
    return priority in VALID_PRIORITIES


def is_valid_category(category: Optional[str]) -> bool:
    return category in VALID_CATEGORIES
