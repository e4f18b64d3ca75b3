"""
Questionnaire answer models.

``UserAnswers`` is created once per completed questionnaire run and is frozen
thereafter.  Scores and recommendations are always derived from it, never
stored on it.

Field names are snake_case in Python.  Every model also accepts the
camelCase keys used by the questionnaire front end and the feedback sheet
(``orgSize``, ``expectedBudget``, ``goLiveTimeline`` …), so a raw answers
JSON document can be validated directly with ``UserAnswers.model_validate``.

Unknown keys are rejected, so a misspelt question id fails validation
instead of silently dropping its rule group.

Unset answers are ``None`` (single-choice fields) or empty (multi-select
fields).  An unset field simply contributes nothing during scoring.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ctrm_advisor.taxonomy.answer_taxonomy import (
    CurrentSystem,
    GoLiveTimeline,
    Industry,
    Integration,
    OrgSize,
    Priority,
    Region,
    TradingType,
)


class BudgetRange(BaseModel):
    """Expected annual budget range in USD.

    Both bounds are optional.  When both are present ``min`` must not exceed
    ``max``; the range is rejected here rather than being silently swapped.

    Attributes:
        min: Lower bound in USD, or ``None``.
        max: Upper bound in USD, or ``None``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    min: Optional[float] = Field(default=None, ge=0)
    max: Optional[float] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def validate_bounds_ordered(self) -> "BudgetRange":
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(
                f"budget min ({self.min}) must be <= budget max ({self.max})."
            )
        return self

    @property
    def is_empty(self) -> bool:
        return self.min is None and self.max is None


class UserAnswers(BaseModel):
    """One completed questionnaire.

    Attributes:
        industry: Commodity focus, or ``None``.
        org_size: Organisation size bucket, or ``None``.
        users: Number of business users (>= 1), or ``None`` when unanswered.
        expected_budget: Annual budget range; both bounds may be empty.
        go_live_timeline: Desired go-live window, or ``None``.
        trading_type: Physical / Financial / Both, or ``None``.
        current_system: Current setup, or ``None``.
        priorities: Selected priorities; order is irrelevant.
        region: Primary region, or ``None``.
        integrations: Required integrations; order is irrelevant.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    industry: Optional[Industry] = None
    org_size: Optional[OrgSize] = None
    users: Optional[int] = Field(default=None, ge=1)
    expected_budget: BudgetRange = BudgetRange()
    go_live_timeline: Optional[GoLiveTimeline] = None
    trading_type: Optional[TradingType] = None
    current_system: Optional[CurrentSystem] = None
    priorities: frozenset[Priority] = frozenset()
    region: Optional[Region] = None
    integrations: frozenset[Integration] = frozenset()

    @field_validator("expected_budget", mode="before")
    @classmethod
    def coerce_missing_budget(cls, v):
        return BudgetRange() if v is None else v

    @field_validator("priorities", "integrations", mode="before")
    @classmethod
    def coerce_missing_selection(cls, v):
        return frozenset() if v is None else v

    def sorted_priorities(self) -> list[Priority]:
        """Selected priorities in questionnaire declaration order."""
        return [p for p in Priority if p in self.priorities]

    def sorted_integrations(self) -> list[Integration]:
        """Selected integrations in questionnaire declaration order."""
        return [i for i in Integration if i in self.integrations]
