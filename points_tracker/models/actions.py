"""
Pending Ledger Actions

A mutation waiting for the admin code is described as data rather than
held as a callback. The gate stores one of these, tests can inspect it,
and the ledger store knows how to apply each kind.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class AppendEntry(BaseModel):
    """Add a new entry dated today."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    kind: Literal["append"] = "append"
    description: str = Field(..., min_length=1)
    delta: int = Field(..., strict=True)


class EditEntry(BaseModel):
    """Replace the fields of the entry at `index`."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    kind: Literal["edit"] = "edit"
    index: int
    description: str = Field(..., min_length=1)
    date: str = Field(..., min_length=1)
    delta: int = Field(..., strict=True)


class DeleteEntry(BaseModel):
    """Remove the entry at `index`."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["delete"] = "delete"
    index: int


PendingAction = Annotated[
    Union[AppendEntry, EditEntry, DeleteEntry],
    Field(discriminator="kind"),
]
