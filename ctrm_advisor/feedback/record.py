"""
Flatten answers + recommendation + feedback into one ``FeedbackRecord`` row.

The row mirrors the feedback sheet header (see ``models.feedback.SHEET_HEADERS``):
list answers are joined with ", ", the budget range is split into two
numeric columns, and priority weights are stored as a JSON object string.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from enum import StrEnum
from typing import Optional
from uuid import uuid4

from ctrm_advisor.models.answers import UserAnswers
from ctrm_advisor.models.feedback import (
    AccurateFeedback,
    Feedback,
    FeedbackRecord,
    InaccurateFeedback,
)
from ctrm_advisor.models.recommendation import RecommendationResult

LIST_SEPARATOR = ", "


def _value(member: Optional[StrEnum]) -> Optional[str]:
    return None if member is None else member.value


def _iso_utc(ts: datetime) -> str:
    return ts.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def build_feedback_record(
    answers: UserAnswers,
    recommendation: RecommendationResult,
    feedback: Feedback,
    now: Optional[datetime] = None,
    record_id: Optional[str] = None,
) -> FeedbackRecord:
    """Build the persistable row for one submitted feedback.

    Args:
        answers:        The questionnaire answers the recommendation came from.
        recommendation: The ideal/strong pair that was shown.
        feedback:       Reconciled feedback.
        now:            Submission time; defaults to the current UTC time.
        record_id:      Correlation id; defaults to a new UUID4.

    Returns:
        FeedbackRecord ready for ``FeedbackSink.persist()``.
    """
    ts = now or datetime.now(tz=timezone.utc)

    comment = corrected_ideal = corrected_strong = weights_json = suggestion = None
    if isinstance(feedback, InaccurateFeedback):
        comment = feedback.comment
        corrected_ideal = feedback.user_correction.ideal
        corrected_strong = feedback.user_correction.strong
        weights_json = json.dumps(
            {factor.value: weight for factor, weight in feedback.priority_weights.items()}
        )
    elif isinstance(feedback, AccurateFeedback):
        suggestion = feedback.generated_suggestion

    return FeedbackRecord(
        timestamp=_iso_utc(ts),
        record_id=record_id or str(uuid4()),
        feedback_rating=feedback.rating,
        feedback_comment=comment,
        user_corrected_ideal=corrected_ideal,
        user_corrected_strong=corrected_strong,
        priority_weights=weights_json,
        generated_suggestion=suggestion,
        original_ideal_product=recommendation.ideal.name,
        original_strong_product=recommendation.strong.name,
        industry=_value(answers.industry),
        org_size=_value(answers.org_size),
        users=answers.users,
        budget_min=answers.expected_budget.min,
        budget_max=answers.expected_budget.max,
        go_live_timeline=_value(answers.go_live_timeline),
        trading_type=_value(answers.trading_type),
        current_system=_value(answers.current_system),
        priorities=LIST_SEPARATOR.join(answers.sorted_priorities()),
        region=_value(answers.region),
        integrations=LIST_SEPARATOR.join(answers.sorted_integrations()),
    )
