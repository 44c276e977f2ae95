"""Recording Validation — duration-per-name window checks for a name-list reading.

Invariants:
    - validate_duration is PURE: same inputs, same report
    - Total-duration violations are errors; per-name average violations are warnings
    - DEFAULT_MIN/MAX_DURATION_PER_NAME are the single source of the window

Design Decisions:
    - Report as dataclass with to_dict(): upload route returns it verbatim
    - Advisory, not blocking: the upload route stores the recording and
      surfaces the report so reviewers decide
"""

from dataclasses import dataclass, field


DEFAULT_MIN_DURATION_PER_NAME: float = 2.0   # seconds
DEFAULT_MAX_DURATION_PER_NAME: float = 5.0   # seconds


@dataclass
class ValidationReport:
    """Outcome of checking one recording against its name count."""
    is_valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    duration: float = 0.0
    expected_duration: float = 0.0
    duration_per_name: float = 0.0

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.is_valid = False

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "metrics": {
                "duration": round(self.duration, 2),
                "expected_duration": round(self.expected_duration, 2),
                "duration_per_name": round(self.duration_per_name, 2),
            },
        }


def validate_duration(
    duration: float,
    names_count: int,
    min_per_name: float = DEFAULT_MIN_DURATION_PER_NAME,
    max_per_name: float = DEFAULT_MAX_DURATION_PER_NAME,
) -> ValidationReport:
    """Check a recording's length against the window for `names_count` names."""
    report = ValidationReport(duration=duration)
    if names_count <= 0:
        report.add_error("Name list has no names to validate against")
        return report

    min_total = names_count * min_per_name
    max_total = names_count * max_per_name
    report.expected_duration = names_count * (min_per_name + max_per_name) / 2
    report.duration_per_name = duration / names_count

    if duration < min_total:
        report.add_error(
            f"Recording is too short. Expected at least {min_total:g}s for "
            f"{names_count} names, but got {duration:.1f}s",
        )
    if duration > max_total:
        report.add_error(
            f"Recording is too long. Expected at most {max_total:g}s for "
            f"{names_count} names, but got {duration:.1f}s",
        )
    if report.duration_per_name < min_per_name:
        report.warnings.append(
            f"Average time per name ({report.duration_per_name:.1f}s) is below "
            f"recommended minimum ({min_per_name:g}s)",
        )
    if report.duration_per_name > max_per_name:
        report.warnings.append(
            f"Average time per name ({report.duration_per_name:.1f}s) is above "
            f"recommended maximum ({max_per_name:g}s)",
        )
    return report


def summarize(report: ValidationReport) -> str:
    """One-line summary for logs and admin listings."""
    if report.is_valid and not report.warnings:
        return "Recording passed all validation checks"
    if report.is_valid:
        return f"Recording is valid with {len(report.warnings)} warning(s)"
    return f"Recording failed validation with {len(report.errors)} error(s)"
