"""Form input validation package."""

from points_tracker.validation.validator import (
    EntryInputValidator,
    parse_grade,
    parse_points,
)

__all__ = ["EntryInputValidator", "parse_grade", "parse_points"]
