"""Recording Validation — tests for duration-per-name windows.

Tests cover:
    - durations inside the window pass with no warnings
    - too short / too long are errors with the expected totals
    - per-name averages outside the window are warnings
    - empty name lists fail
    - custom windows and to_dict/summarize output
"""

from recital.core.recording_validation import (
    DEFAULT_MAX_DURATION_PER_NAME,
    DEFAULT_MIN_DURATION_PER_NAME,
    summarize,
    validate_duration,
)


def test_duration_inside_window_is_valid():
    report = validate_duration(17.5, 5)
    assert report.is_valid
    assert report.errors == []
    assert report.warnings == []
    assert report.duration_per_name == 3.5
    assert report.expected_duration == 17.5


def test_too_short_is_error_and_warning():
    report = validate_duration(4.0, 5)
    assert not report.is_valid
    assert "too short" in report.errors[0]
    assert "at least 10s for 5 names" in report.errors[0]
    assert "below recommended minimum" in report.warnings[0]


def test_too_long_is_error_and_warning():
    report = validate_duration(40.0, 5)
    assert not report.is_valid
    assert "too long" in report.errors[0]
    assert "at most 25s" in report.errors[0]
    assert "above recommended maximum" in report.warnings[0]


def test_window_bounds_are_inclusive():
    assert validate_duration(5 * DEFAULT_MIN_DURATION_PER_NAME, 5).is_valid
    assert validate_duration(5 * DEFAULT_MAX_DURATION_PER_NAME, 5).is_valid


def test_empty_name_list_is_invalid():
    report = validate_duration(10.0, 0)
    assert not report.is_valid
    assert report.duration_per_name == 0.0


def test_custom_window():
    report = validate_duration(10.0, 2, min_per_name=1.0, max_per_name=4.0)
    assert not report.is_valid
    assert "at most 8s" in report.errors[0]


def test_to_dict_shape():
    data = validate_duration(15.0, 5).to_dict()
    assert data["is_valid"] is True
    assert data["metrics"] == {
        "duration": 15.0,
        "expected_duration": 17.5,
        "duration_per_name": 3.0,
    }


def test_summarize_variants():
    assert summarize(validate_duration(17.5, 5)) == "Recording passed all validation checks"
    assert "failed validation with 1 error" in summarize(validate_duration(1.0, 5))
