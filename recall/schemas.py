"""
Pydantic models exchanged with the dictionary lookup and the review UI.
"""

from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, Field, field_validator

from recall.fsrs.constants import Rating


class LookupResult(BaseModel):
    """What a dictionary returns for a word."""
    word: str
    dictionary: str = Field(..., description="Name shown on the dictionary button")
    html: str = Field(..., description="Display payload (HTML)")
    resources: Dict[str, bytes] = Field(
        default_factory=dict,
        description="Auxiliary files referenced by the payload, keyed by file name",
    )


class FeedbackRequest(BaseModel):
    """A rating submitted by the review front-end."""
    word: str
    rating: Rating

    @field_validator("rating", mode="before")
    @classmethod
    def _parse_rating(cls, value):
        return Rating.parse(value)
