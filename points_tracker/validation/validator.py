"""
Form Input Validation

The ledger store trusts its callers to pass a non-empty description and a
whole-number delta. This module is where raw form text is checked before a
ledger action is built.

IMPORTANT: Validation NEVER silently fixes input. "5 points" is not read
as 5; it is reported back to the user.
"""

import re
from typing import Mapping, Optional

from points_tracker.models.catalog import GRADE_EXPECTATIONS, GradeThreshold
from points_tracker.models.validation import ValidationIssue, ValidationResult


_INTEGER_RE = re.compile(r"^[+-]?\d+$")


def parse_points(text: Optional[str]) -> Optional[int]:
    """Parse a whole, optionally signed number of points. None if not one."""
    if text is None:
        return None
    text = str(text).strip()
    if not _INTEGER_RE.match(text):
        return None
    return int(text)


def parse_grade(text: Optional[str]) -> Optional[float]:
    """Parse a numeric grade. None if not a finite number."""
    if text is None:
        return None
    try:
        value = float(str(text).strip())
    except ValueError:
        return None
    if value != value or value in (float("inf"), float("-inf")):
        return None
    return value


class EntryInputValidator:
    """Checks custom entries, grade entries and edits."""

    def __init__(self, expectations: Optional[Mapping[str, GradeThreshold]] = None):
        self._expectations = expectations if expectations is not None else GRADE_EXPECTATIONS

    def _check_description(self, description: Optional[str], issues: list) -> Optional[str]:
        description = (description or "").strip()
        if not description:
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Description is required",
                severity="error",
                suggested_fix="Say what the points are for",
            ))
            return None
        return description

    def _check_points(self, points_text: Optional[str], issues: list) -> Optional[int]:
        if points_text is None or not str(points_text).strip():
            issues.append(ValidationIssue(
                field="points",
                issue_type="missing",
                message="Points are required",
                severity="error",
            ))
            return None
        points = parse_points(points_text)
        if points is None:
            issues.append(ValidationIssue(
                field="points",
                issue_type="invalid_format",
                message=f"'{points_text}' is not a whole number of points",
                severity="error",
                suggested_fix="Use a number like 3 or -2",
            ))
            return None
        if points == 0:
            issues.append(ValidationIssue(
                field="points",
                issue_type="zero_value",
                message="This entry does not change the balance",
                severity="warning",
            ))
        return points

    def validate_custom_entry(
        self,
        description: Optional[str],
        points_text: Optional[str],
    ) -> ValidationResult:
        issues: list[ValidationIssue] = []
        clean_description = self._check_description(description, issues)
        points = self._check_points(points_text, issues)

        return ValidationResult(
            issues=issues,
            description=clean_description,
            points=points,
        )

    def validate_grade(
        self,
        subject: Optional[str],
        grade_text: Optional[str],
    ) -> ValidationResult:
        issues: list[ValidationIssue] = []

        if not subject:
            issues.append(ValidationIssue(
                field="subject",
                issue_type="missing",
                message="Select a subject",
                severity="error",
            ))
        elif subject not in self._expectations:
            issues.append(ValidationIssue(
                field="subject",
                issue_type="unknown_subject",
                message=f"No grade expectations for '{subject}'",
                severity="error",
            ))

        grade = None
        if grade_text is None or not str(grade_text).strip():
            issues.append(ValidationIssue(
                field="grade",
                issue_type="missing",
                message="Grade is required",
                severity="error",
            ))
        else:
            grade = parse_grade(grade_text)
            if grade is None:
                issues.append(ValidationIssue(
                    field="grade",
                    issue_type="invalid_format",
                    message=f"'{grade_text}' is not a number",
                    severity="error",
                ))
            elif not 0 <= grade <= 100:
                issues.append(ValidationIssue(
                    field="grade",
                    issue_type="suspicious_value",
                    message=f"Grade {grade_text} is outside 0-100",
                    severity="warning",
                    suggested_fix="Check the grade was typed correctly",
                ))

        return ValidationResult(issues=issues, subject=subject or None, grade=grade)

    def validate_edit(
        self,
        description: Optional[str],
        date_text: Optional[str],
        points_text: Optional[str],
    ) -> ValidationResult:
        issues: list[ValidationIssue] = []
        clean_description = self._check_description(description, issues)

        clean_date = (date_text or "").strip()
        if not clean_date:
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date is required",
                severity="error",
            ))

        points = self._check_points(points_text, issues)

        return ValidationResult(
            issues=issues,
            description=clean_description,
            date=clean_date or None,
            points=points,
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """One message block suitable for showing next to the form."""
        if result.is_valid and not result.warnings:
            return "✅ Looks good."

        lines = []
        for issue in result.issues:
            if issue.severity == "error":
                lines.append(f"❌ {issue.message}")
                if issue.suggested_fix:
                    lines.append(f"   💡 {issue.suggested_fix}")
        for warning in result.warnings:
            lines.append(f"⚠️ {warning}")
        return "\n".join(lines)
