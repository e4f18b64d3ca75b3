"""
Recommendation result model.

``RecommendationResult`` pairs the ideal fit with the strong alternative.
It is derived from a score vector and recomputed whenever answers change.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator

from ctrm_advisor.models.product import Product


class RecommendationResult(BaseModel):
    """The top-2 distinct products for one answer set.

    Attributes:
        ideal: Highest-scoring catalog entry.
        strong: Second-highest-scoring catalog entry.
        scores: The score vector both were selected from, keyed by product id.
    """

    model_config = ConfigDict(frozen=True)

    ideal: Product
    strong: Product
    scores: dict[str, int] = {}

    @model_validator(mode="after")
    def validate_distinct(self) -> "RecommendationResult":
        if self.ideal.id == self.strong.id:
            raise ValueError(
                f"ideal and strong must be different products, both are '{self.ideal.id}'."
            )
        return self
