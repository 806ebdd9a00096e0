"""
Ledger Data Models

An Entry is one line of the monthly ledger. LedgerState is the pair
(balance, entries) that is rendered, exported and persisted.

DESIGN DECISION: `is_positive` is a computed field. It is derived from
`delta` every time it is read, is serialized as `isPositive` for the
persisted record, and is ignored on input. It cannot drift from `delta`.
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field

from points_tracker.models.catalog import BASE_POINTS


class Entry(BaseModel):
    """
    A single point adjustment.

    Entries are immutable; an edit replaces the entry at its position.
    Field aliases match the persisted record (`points`, `isPositive`).
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    description: str = Field(
        ...,
        min_length=1,
        description="What the points were for"
    )
    delta: int = Field(
        ...,
        alias="points",
        strict=True,
        description="Signed point adjustment"
    )
    date: str = Field(
        ...,
        min_length=1,
        description="Date the entry applies to, as shown to the user"
    )

    @computed_field(alias="isPositive")
    @property
    def is_positive(self) -> bool:
        return self.delta > 0


class LedgerState(BaseModel):
    """
    Balance plus ordered entries for one period.

    This is both the read-only snapshot handed to the presentation layer
    and the persisted record:

        {"points": 100, "history": [{"description": ..., "points": ...,
                                     "date": ..., "isPositive": ...}]}
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    balance: int = Field(
        default=BASE_POINTS,
        alias="points",
        strict=True,
    )
    entries: tuple[Entry, ...] = Field(
        default=(),
        alias="history",
    )

    @classmethod
    def fresh(cls) -> "LedgerState":
        """State at the start of a period with no prior record."""
        return cls(balance=BASE_POINTS, entries=())

    @property
    def expected_balance(self) -> int:
        """Balance reconstructed from the entries."""
        return BASE_POINTS + sum(entry.delta for entry in self.entries)

    @property
    def is_consistent(self) -> bool:
        return self.balance == self.expected_balance

    def to_record(self) -> dict:
        """Persisted record as a plain dict."""
        return self.model_dump(mode="json", by_alias=True)

    def to_record_json(self) -> str:
        return self.model_dump_json(by_alias=True)
