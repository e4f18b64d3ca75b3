"""
Product catalog entry model.

The catalog itself lives in ``ctrm_advisor.catalog``; this module only
defines the shape of one entry.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class Product(BaseModel):
    """A CTRM product that can be recommended.

    Attributes:
        id: Stable machine key, e.g. ``"openlink"``.  Used in score vectors,
            feedback corrections, and the rule table.
        name: Display name, e.g. ``"Openlink"``.
        description: One-sentence positioning statement.
        key_strengths: Ordered short strengths used for display and for the
            fallback justification text.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    key_strengths: tuple[str, ...] = ()

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("product id must not be empty.")
        return v
