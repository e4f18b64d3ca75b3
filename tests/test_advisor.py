"""
Tests for ctrm_advisor/advisor.py.

What we test
------------
AdvisorSession.recommend():
  - Selects the scenario products and exposes breakdown + ranking.
  - Justification comes from the generator; fallback when unconfigured.
  - ``justify=False`` skips the generator entirely.

AdvisorSession.submit_feedback():
  - A stored record -> saved=True, record handed to the sink.
  - A sink failure -> saved=False with a retry-later message; the record is kept.

AdvisorSession.retry_submission():
  - Re-sends the same record (same id) and reports success.
  - An already-saved result is returned unchanged.

Construction:
  - Without a script_url the session uses LogOnlySink.
  - A catalog with fewer than 2 products is rejected.
"""

from __future__ import annotations

import pytest

from ctrm_advisor.advisor import AdvisorSession
from ctrm_advisor.catalog import PRODUCTS, CatalogConfigurationError
from ctrm_advisor.feedback.reconcile import reconcile_accurate
from ctrm_advisor.integrations.justification import (
    JustificationGenerator,
    fallback_comparison_text,
)
from ctrm_advisor.integrations.sheets_sink import LogOnlySink
from ctrm_advisor.models.answers import UserAnswers


@pytest.fixture
def session(fake_llm, recording_sink) -> AdvisorSession:
    return AdvisorSession(
        generator=JustificationGenerator(llm=fake_llm),
        sink=recording_sink,
    )


class TestRecommend:
    def test_enterprise_scenario(self, session: AdvisorSession, enterprise_finserv_answers: UserAnswers) -> None:
        rec = session.recommend(enterprise_finserv_answers)
        assert rec.ideal.id == "openlink"
        assert rec.strong.id == "triplepoint"
        assert rec.breakdown.totals["openlink"] == 12
        assert [r.product.id for r in rec.ranked[:2]] == ["openlink", "triplepoint"]
        assert rec.justification == "Generated justification."

    def test_no_justify_skips_generator(self, session: AdvisorSession, fake_llm, small_metals_answers: UserAnswers) -> None:
        rec = session.recommend(small_metals_answers, justify=False)
        assert rec.ideal.id == "aspect"
        assert rec.justification == ""
        assert fake_llm.calls == []

    def test_unconfigured_generator_falls_back(self, recording_sink, full_answers: UserAnswers) -> None:
        session = AdvisorSession(sink=recording_sink)
        rec = session.recommend(full_answers)
        assert rec.justification == fallback_comparison_text(full_answers, rec.ideal, rec.strong)

    def test_suggest(self, session: AdvisorSession, fake_llm, full_answers: UserAnswers) -> None:
        fake_llm.reply = "Start with a risk pilot."
        assert session.suggest(full_answers, PRODUCTS[2]) == "Start with a risk pilot."


class TestSubmitFeedback:
    def test_saved(self, session: AdvisorSession, recording_sink, full_answers: UserAnswers) -> None:
        rec = session.recommend(full_answers, justify=False)
        feedback = reconcile_accurate("Book a demo.").feedback
        outcome = session.submit_feedback(full_answers, rec.result, feedback)
        assert outcome.saved
        assert outcome.error is None
        assert recording_sink.records == [outcome.record]
        assert outcome.record.original_ideal_product == rec.ideal.name

    def test_sink_failure_reported(self, session: AdvisorSession, recording_sink, full_answers: UserAnswers) -> None:
        recording_sink.fail_times = 5
        rec = session.recommend(full_answers, justify=False)
        outcome = session.submit_feedback(full_answers, rec.result, reconcile_accurate("x").feedback)
        assert not outcome.saved
        assert "try again later" in outcome.error
        assert outcome.record.feedback_rating == "accurate"
        assert recording_sink.records == []


class TestRetry:
    def test_retry_after_failure(self, fake_llm, full_answers: UserAnswers, recording_sink) -> None:
        recording_sink.fail_times = 1
        session = AdvisorSession(generator=JustificationGenerator(llm=fake_llm), sink=recording_sink)
        rec = session.recommend(full_answers, justify=False)
        feedback = reconcile_accurate(None).feedback

        first = session.submit_feedback(full_answers, rec.result, feedback)
        assert not first.saved
        assert first.error == "We couldn't save your feedback right now. Please try again later."
        assert recording_sink.records == []

        second = session.retry_submission(first)
        assert second.saved
        assert second.record.record_id == first.record.record_id
        assert recording_sink.records == [first.record]

    def test_retry_of_saved_is_noop(self, session: AdvisorSession, recording_sink, full_answers: UserAnswers) -> None:
        rec = session.recommend(full_answers, justify=False)
        saved = session.submit_feedback(full_answers, rec.result, reconcile_accurate("x").feedback)
        assert session.retry_submission(saved) is saved
        assert recording_sink.attempts == 1


class TestConstruction:
    def test_log_only_sink_by_default(self) -> None:
        assert isinstance(AdvisorSession().sink, LogOnlySink)

    def test_small_catalog_rejected(self) -> None:
        with pytest.raises(CatalogConfigurationError):
            AdvisorSession(catalog=PRODUCTS[:1])
