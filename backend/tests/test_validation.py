"""Tests for submission validation rules and predicates."""

from dataclasses import replace
from types import SimpleNamespace

import pytest

from csrms.services.validation import (
    MAX_IMAGE_BYTES,
    RequestSubmission,
    image_size_error,
    is_valid_identifier,
    is_valid_priority,
    is_valid_request_id,
    is_valid_status,
    validate_request_data,
)

CATEGORY_ERROR = (
    "Category must be one of: Waste Disposal, Broken Streetlights, "
    "Water Pipeline Disruptions, Road Maintenance"
)


@pytest.fixture
def submission() -> RequestSubmission:
    return RequestSubmission(
        title="Pothole on Main St",
        category="Road Maintenance",
        region="Addis Ababa Region",
        city="Bole",
        user_id="citizen-1",
    )


def test_valid_submission_has_no_errors(submission):
    result = validate_request_data(submission)
    assert result.is_valid is True
    assert result.errors == []


def test_empty_submission_reports_every_missing_field():
    result = validate_request_data(RequestSubmission())

    assert result.is_valid is False
    assert result.errors == [
        "Title is required",
        CATEGORY_ERROR,
        "Region is required",
        "City/Woreda is required",
        "User ID is required",
    ]


@pytest.mark.parametrize(
    "field_name,expected",
    [
        ("title", "Title is required"),
        ("category", CATEGORY_ERROR),
        ("region", "Region is required"),
        ("city", "City/Woreda is required"),
        ("user_id", "User ID is required"),
    ],
)
def test_single_missing_field(submission, field_name, expected):
    result = validate_request_data(replace(submission, **{field_name: None}))
    assert result.is_valid is False
    assert result.errors == [expected]


def test_whitespace_only_fields_count_as_missing(submission):
    result = validate_request_data(replace(submission, title="   ", city="\t", user_id=" "))
    assert result.errors == [
        "Title is required",
        "City/Woreda is required",
        "User ID is required",
    ]


@pytest.mark.parametrize("length,valid", [(100, True), (101, False)])
def test_title_length_boundary(submission, length, valid):
    result = validate_request_data(replace(submission, title="x" * length))
    assert result.is_valid is valid
    if not valid:
        assert result.errors == ["Title must be 100 characters or less"]


@pytest.mark.parametrize(
    "length,valid",
    [(4, False), (5, True), (200, True), (201, False)],
)
def test_region_length_boundaries(submission, length, valid):
    result = validate_request_data(replace(submission, region="r" * length))
    assert result.is_valid is valid
    if not valid:
        assert result.errors == ["Region must be between 5 and 200 characters"]


def test_region_length_is_measured_after_trimming(submission):
    result = validate_request_data(replace(submission, region="  abcd  "))
    assert result.errors == ["Region must be between 5 and 200 characters"]


def test_unknown_category_names_allowed_list(submission):
    result = validate_request_data(replace(submission, category="Potholes"))
    assert result.is_valid is False
    assert result.errors == [CATEGORY_ERROR]


def test_image_type_and_size_errors_accumulate(submission):
    image = SimpleNamespace(content_type="image/gif", size=MAX_IMAGE_BYTES + 1)
    result = validate_request_data(submission, image)
    assert result.errors == [
        "Image must be JPEG or PNG format",
        "Image size must be less than 5MB",
    ]


@pytest.mark.parametrize("content_type", ["image/jpeg", "image/jpg", "image/png"])
def test_accepted_image_types(submission, content_type):
    image = SimpleNamespace(content_type=content_type, size=MAX_IMAGE_BYTES)
    assert validate_request_data(submission, image).is_valid is True


def test_field_and_image_errors_are_reported_together():
    image = SimpleNamespace(content_type="application/pdf", size=10)
    result = validate_request_data(RequestSubmission(title="Leak"), image)
    assert len(result.errors) == 5
    assert result.errors[-1] == "Image must be JPEG or PNG format"


@pytest.mark.parametrize(
    "value,expected",
    [
        ("REQ1A2B3C4D", True),
        ("REQABCDEFGH", True),
        ("req1a2b3c4d", False),
        ("REQ1A2B3C4", False),
        ("REQ1A2B3C4D5", False),
        ("LOG1A2B3C4D", False),
        ("REQ1A2B3C4D\n", False),
        ("", False),
        (None, False),
    ],
)
def test_is_valid_request_id(value, expected):
    assert is_valid_request_id(value) is expected


def test_is_valid_identifier_checks_prefix():
    assert is_valid_identifier("LOGABCD1234", "LOG") is True
    assert is_valid_identifier("NOTABCD1234", "NOT") is True
    assert is_valid_identifier("LOGABCD1234", "NOT") is False
    assert is_valid_identifier("LOGabcd1234", "LOG") is False


@pytest.mark.parametrize(
    "status,expected",
    [
        ("Pending", True),
        ("In Progress", True),
        ("Resolved", True),
        ("Closed", True),
        ("Deleted", False),
        ("pending", False),
        (None, False),
    ],
)
def test_is_valid_status(status, expected):
    assert is_valid_status(status) is expected


@pytest.mark.parametrize(
    "priority,expected",
    [("Low", True), ("Medium", True), ("High", True), ("Critical", True), ("Urgent", False)],
)
def test_is_valid_priority(priority, expected):
    assert is_valid_priority(priority) is expected


def test_image_limit_can_be_configured(submission):
    image = SimpleNamespace(content_type="image/png", size=3 * 1024 * 1024)

    assert validate_request_data(submission, image).is_valid is True
    result = validate_request_data(submission, image, max_image_bytes=2 * 1024 * 1024)
    assert result.errors == ["Image size must be less than 2MB"]


@pytest.mark.parametrize(
    "max_bytes,message",
    [
        (5 * 1024 * 1024, "Image size must be less than 5MB"),
        (512 * 1024, "Image size must be less than 512KB"),
        (1000, "Image size must be less than 1000 bytes"),
    ],
)
def test_image_size_error(max_bytes, message):
    assert image_size_error(max_bytes) == message


def test_non_string_values_are_coerced_not_raised(submission):
    result = validate_request_data(replace(submission, title=10**101, region=1234, city=42))
    assert result.errors == [
        "Title must be 100 characters or less",
        "Region must be between 5 and 200 characters",
    ]

    result = validate_request_data(replace(submission, title=2026, region=12345, user_id=7))
    assert result.is_valid is True
