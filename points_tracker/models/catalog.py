"""
Static Reference Data

Point values for deductions and bonuses, and the grade expectations per
subject. Nothing here changes at runtime; the tables are validated once
at import time so a bad edit fails loudly instead of producing wrong points.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# Every ledger starts from this balance at the beginning of a period.
BASE_POINTS = 100


class EntryType(str, Enum):
    """Kinds of entries the form can produce."""
    DEDUCTION = "deduction"
    BONUS = "bonus"
    GRADE = "grade"
    CUSTOM = "custom"


class CatalogItem(BaseModel):
    """
    A labelled, fixed point adjustment.

    The sign of `points` is fixed by category: deductions are negative,
    bonuses are positive.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    label: str = Field(..., min_length=1, max_length=100)
    points: int
    category: EntryType

    @model_validator(mode='after')
    def validate_sign(self) -> 'CatalogItem':
        if self.category == EntryType.DEDUCTION and self.points >= 0:
            raise ValueError(f"Deduction '{self.label}' must have negative points")
        if self.category == EntryType.BONUS and self.points <= 0:
            raise ValueError(f"Bonus '{self.label}' must have positive points")
        if self.category not in (EntryType.DEDUCTION, EntryType.BONUS):
            raise ValueError(f"Catalog items are deductions or bonuses, got {self.category.value}")
        return self


class GradeThreshold(BaseModel):
    """Expected grade band for one subject."""
    model_config = ConfigDict(frozen=True)

    min: int = Field(..., ge=0, le=100)
    target: int = Field(..., ge=0, le=100)

    @model_validator(mode='after')
    def validate_band(self) -> 'GradeThreshold':
        if self.min > self.target:
            raise ValueError(f"Minimum {self.min} cannot exceed target {self.target}")
        return self


def _deduction(label: str, points: int) -> CatalogItem:
    return CatalogItem(label=label, points=points, category=EntryType.DEDUCTION)


def _bonus(label: str, points: int) -> CatalogItem:
    return CatalogItem(label=label, points=points, category=EntryType.BONUS)


DEDUCTIONS: tuple[CatalogItem, ...] = (
    _deduction("Late", -2),
    _deduction("Absence", -3),
    _deduction("Disruption", -3),
    _deduction("Homework not done", -3),
    _deduction("Below minimum grade", -4),
    _deduction("Negative teacher call", -5),
)

BONUSES: tuple[CatalogItem, ...] = (
    _bonus("Grade at/above target", 5),
    _bonus("Positive feedback", 5),
)

GRADE_EXPECTATIONS: Mapping[str, GradeThreshold] = MappingProxyType({
    "Math": GradeThreshold(min=55, target=65),
    "English": GradeThreshold(min=75, target=85),
    "Israeli Culture": GradeThreshold(min=65, target=80),
    "Activity Class": GradeThreshold(min=75, target=85),
    "Mishnah": GradeThreshold(min=65, target=75),
    "Literature": GradeThreshold(min=60, target=70),
    "Hebrew Language": GradeThreshold(min=75, target=85),
    "Science": GradeThreshold(min=70, target=80),
    "Torah": GradeThreshold(min=65, target=75),
    "History": GradeThreshold(min=75, target=85),
})


def catalog_for(entry_type: EntryType) -> tuple[CatalogItem, ...]:
    """Items selectable for a catalog-backed entry type."""
    if entry_type == EntryType.DEDUCTION:
        return DEDUCTIONS
    if entry_type == EntryType.BONUS:
        return BONUSES
    raise ValueError(f"{entry_type.value} entries have no catalog")


def find_catalog_item(entry_type: EntryType, label: str) -> Optional[CatalogItem]:
    """Look up a deduction or bonus by its label."""
    for item in catalog_for(entry_type):
        if item.label == label:
            return item
    return None
