"""
Grade Evaluation

Turns a (subject, grade) pair into a point adjustment using the subject's
expected grade band:

    grade <  min     ->  -4  "(Below minimum)"
    grade >= target  ->  +5  "(Met target)"
    otherwise        ->   0

The minimum check runs first and is strict, so a grade equal to `min`
is never penalized and a grade equal to `target` is always rewarded.
"""

from typing import Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict

from points_tracker.ledger.errors import UnknownSubject
from points_tracker.models.catalog import GRADE_EXPECTATIONS, GradeThreshold


BELOW_MINIMUM_POINTS = -4
MET_TARGET_POINTS = 5

Grade = Union[int, float]


class GradeEvaluation(BaseModel):
    """Result of evaluating one grade."""
    model_config = ConfigDict(frozen=True)

    delta: int
    description: str


def _format_grade(grade: Grade) -> str:
    if isinstance(grade, float) and grade.is_integer():
        return str(int(grade))
    return str(grade)


class GradeEvaluator:
    """Maps subject grades to point deltas."""

    def __init__(self, expectations: Optional[Mapping[str, GradeThreshold]] = None):
        self._expectations = expectations if expectations is not None else GRADE_EXPECTATIONS

    @property
    def expectations(self) -> Mapping[str, GradeThreshold]:
        return self._expectations

    @property
    def subjects(self) -> list[str]:
        return list(self._expectations)

    def threshold_for(self, subject: str) -> GradeThreshold:
        try:
            return self._expectations[subject]
        except KeyError:
            raise UnknownSubject(subject) from None

    def evaluate(self, subject: str, grade: Grade) -> GradeEvaluation:
        """
        Evaluate a grade for a subject.

        Raises:
            UnknownSubject: If the subject has no expectations on file
        """
        threshold = self.threshold_for(subject)
        description = f"{subject} grade: {_format_grade(grade)}"

        if grade < threshold.min:
            return GradeEvaluation(
                delta=BELOW_MINIMUM_POINTS,
                description=f"{description} (Below minimum)",
            )
        if grade >= threshold.target:
            return GradeEvaluation(
                delta=MET_TARGET_POINTS,
                description=f"{description} (Met target)",
            )
        return GradeEvaluation(delta=0, description=description)
