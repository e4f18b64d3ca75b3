"""
Feedback models.

``Feedback`` is a tagged union discriminated on ``rating``:

  - ``AccurateFeedback``   — the prospect agreed; carries the generated
    follow-up suggestion text.
  - ``InaccurateFeedback`` — the prospect disagreed; carries their corrected
    ideal/strong products and a re-weighting of the six ranking factors
    that must total exactly 100%.

Both variants are frozen: feedback is terminal once submitted.  Construct
them through ``ctrm_advisor.feedback.reconcile`` so that raw form input is
clamped and validated with readable reasons first.

``FeedbackRecord`` is the flat row handed to the persistence sink.  Its JSON
form uses the feedback sheet's camelCase column headers.
"""

from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ctrm_advisor.taxonomy.answer_taxonomy import FeedbackRating, RankingFactor

WEIGHT_TOTAL = 100


class UserCorrection(BaseModel):
    """The products the prospect says should have been recommended."""

    model_config = ConfigDict(frozen=True)

    ideal: str
    strong: Optional[str] = None

    @model_validator(mode="after")
    def validate_roles_distinct(self) -> "UserCorrection":
        if not self.ideal.strip():
            raise ValueError("corrected ideal product must not be empty.")
        if self.strong is not None and self.strong == self.ideal:
            raise ValueError("corrected strong alternative must differ from ideal.")
        return self


class AccurateFeedback(BaseModel):
    """Positive feedback with the follow-up suggestion that was shown."""

    model_config = ConfigDict(frozen=True)

    rating: Literal[FeedbackRating.ACCURATE] = FeedbackRating.ACCURATE
    generated_suggestion: Optional[str] = None


class InaccurateFeedback(BaseModel):
    """Negative feedback with a correction and priority re-weighting.

    Attributes:
        comment: Optional free text.
        user_correction: Corrected ideal (required) and strong (optional).
        priority_weights: Percentage per ranking factor; every factor present,
            each in ``[0, 100]``, summing to exactly 100.
    """

    model_config = ConfigDict(frozen=True)

    rating: Literal[FeedbackRating.INACCURATE] = FeedbackRating.INACCURATE
    comment: Optional[str] = None
    user_correction: UserCorrection
    priority_weights: dict[RankingFactor, int]

    @field_validator("priority_weights")
    @classmethod
    def validate_weights(cls, v: dict[RankingFactor, int]) -> dict[RankingFactor, int]:
        missing = [f.value for f in RankingFactor if f not in v]
        if missing:
            raise ValueError(f"priority_weights missing factors: {missing}.")
        for factor, weight in v.items():
            if not 0 <= weight <= WEIGHT_TOTAL:
                raise ValueError(
                    f"priority weight for '{factor}' must be in [0, 100], got {weight}."
                )
        total = sum(v.values())
        if total != WEIGHT_TOTAL:
            raise ValueError(f"priority weights must sum to 100, got {total}.")
        return v


Feedback = Annotated[
    Union[AccurateFeedback, InaccurateFeedback],
    Field(discriminator="rating"),
]


class FeedbackRecord(BaseModel):
    """One flattened feedback row, ready for the spreadsheet sink.

    Serialise with ``model_dump(by_alias=True)`` to get the sheet's column
    names.  List-valued answers are joined with ``", "``; the budget range is
    split into ``budgetMin``/``budgetMax``; ``priorityWeights`` is a JSON
    string.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    timestamp: str
    record_id: str
    feedback_rating: FeedbackRating
    feedback_comment: Optional[str] = None
    user_corrected_ideal: Optional[str] = None
    user_corrected_strong: Optional[str] = None
    priority_weights: Optional[str] = None
    generated_suggestion: Optional[str] = None
    original_ideal_product: str
    original_strong_product: str
    industry: Optional[str] = None
    org_size: Optional[str] = None
    users: Optional[int] = None
    budget_min: Optional[float] = None
    budget_max: Optional[float] = None
    go_live_timeline: Optional[str] = None
    trading_type: Optional[str] = None
    current_system: Optional[str] = None
    priorities: str = ""
    region: Optional[str] = None
    integrations: str = ""

    def to_sheet_row(self) -> dict:
        """Return the record keyed by sheet column header, JSON-safe."""
        return self.model_dump(mode="json", by_alias=True)


# Column order of the feedback sheet header row.
SHEET_HEADERS: tuple[str, ...] = tuple(
    field.alias or name for name, field in FeedbackRecord.model_fields.items()
)
