"""
AdvisorSession — one questionnaire run from answers to stored feedback.

Flow
----
  1. ``recommend(answers)``
       score every product → select ideal + strong → fetch justification
       (template fallback if the generator is unavailable).
  2. ``suggest(answers, product)``
       follow-up text after the prospect confirms the recommendation.
  3. ``submit_feedback(answers, result, feedback)``
       flatten to a FeedbackRecord → hand to the sink.  A sink failure is
       reported on the returned ``SubmissionResult`` together with the
       record, so nothing the prospect entered is lost.

Scoring and selection are pure; all I/O goes through the injected
generator and sink.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence
from uuid import uuid4

from ctrm_advisor.catalog import PRODUCTS, validate_catalog
from ctrm_advisor.config import AppConfig
from ctrm_advisor.feedback.record import build_feedback_record
from ctrm_advisor.integrations.justification import JustificationGenerator
from ctrm_advisor.integrations.sheets_sink import FeedbackSink, PersistenceError, build_sink
from ctrm_advisor.models.answers import UserAnswers
from ctrm_advisor.models.feedback import Feedback, FeedbackRecord
from ctrm_advisor.models.product import Product
from ctrm_advisor.models.recommendation import RecommendationResult
from ctrm_advisor.recommendations.scorer import ScoreBreakdown, compute_breakdown
from ctrm_advisor.recommendations.selector import RankedProduct, rank_products, select
from ctrm_advisor.utils.logging import session_logger

logger = logging.getLogger(__name__)


@dataclass
class Recommendation:
    """Everything shown on the recommendation screen."""

    result:        RecommendationResult
    breakdown:     ScoreBreakdown
    ranked:        list[RankedProduct] = field(default_factory=list)
    justification: str = ""

    @property
    def ideal(self) -> Product:
        return self.result.ideal

    @property
    def strong(self) -> Product:
        return self.result.strong


@dataclass
class SubmissionResult:
    """Outcome of handing one feedback record to the sink.

    Attributes:
        record: The record that was (or should have been) stored; kept so the
                caller can retry without asking the prospect again.
        saved:  True once the sink accepted the record.
        error:  User-facing reason when ``saved`` is False.
    """

    record: FeedbackRecord
    saved:  bool
    error:  Optional[str] = None


class AdvisorSession:
    """Wires the scoring core to the text generator and feedback sink.

    Args:
        config:    Application config; defaults to ``AppConfig()``.
        generator: Justification generator; built from ``config`` when omitted.
        sink:      Feedback sink; built from ``config.storage`` when omitted.
        catalog:   Product catalog; defaults to the fixed catalog.

    Every log line from one session carries its ``session_id``.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        generator: Optional[JustificationGenerator] = None,
        sink: Optional[FeedbackSink] = None,
        catalog: Sequence[Product] = PRODUCTS,
    ) -> None:
        validate_catalog(catalog)
        self.config = config or AppConfig()
        self.generator = generator or JustificationGenerator(self.config.justification)
        self.sink = sink if sink is not None else build_sink(self.config.storage)
        self.catalog = tuple(catalog)
        self.session_id = uuid4().hex[:8]
        self.log = session_logger(logger, self.session_id)

    def recommend(self, answers: UserAnswers, justify: bool = True) -> Recommendation:
        """Score, select, and (optionally) justify the recommendation."""
        breakdown = compute_breakdown(answers, self.catalog)
        scores = breakdown.totals
        result = select(scores, self.catalog)
        self.log.info(
            "Recommendation | ideal=%s (%d) strong=%s (%d)",
            result.ideal.id, scores[result.ideal.id],
            result.strong.id, scores[result.strong.id],
        )
        self.log.debug("Score vector: %s", scores)

        justification = ""
        if justify:
            justification = self.generator.generate_comparison(
                answers, result.ideal, result.strong
            )

        return Recommendation(
            result=result,
            breakdown=breakdown,
            ranked=rank_products(scores, self.catalog),
            justification=justification,
        )

    def suggest(self, answers: UserAnswers, product: Product) -> str:
        """Follow-up suggestion for a confirmed product (never raises)."""
        return self.generator.generate_suggestion(answers, product)

    def submit_feedback(
        self,
        answers: UserAnswers,
        result: RecommendationResult,
        feedback: Feedback,
    ) -> SubmissionResult:
        """Persist reconciled feedback and report whether it was stored."""
        record = build_feedback_record(answers, result, feedback)
        self.log.info(
            "Submitting %s feedback as record %s", record.feedback_rating, record.record_id
        )
        try:
            self.sink.persist(record)
        except PersistenceError as exc:
            self.log.error("Feedback record %s not saved: %s", record.record_id, exc)
            return SubmissionResult(
                record=record,
                saved=False,
                error="We couldn't save your feedback right now. Please try again later.",
            )
        return SubmissionResult(record=record, saved=True)

    def retry_submission(self, previous: SubmissionResult) -> SubmissionResult:
        """Re-send a record that previously failed, keeping its id and timestamp."""
        if previous.saved:
            return previous
        try:
            self.sink.persist(previous.record)
        except PersistenceError as exc:
            self.log.error("Retry for record %s failed: %s", previous.record.record_id, exc)
            return SubmissionResult(record=previous.record, saved=False, error=previous.error)
        return SubmissionResult(record=previous.record, saved=True)
