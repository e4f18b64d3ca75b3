"""
Tests for ctrm_advisor/reporting/formatters.py.

What we test
------------
format_currency() / format_budget():
  - k / M compaction; open-ended ranges; unset budget.

answer_fields():
  - Unset answers render as "Not specified"; selections joined in order.

format_recommendation():
  - Both products, their scores and the justification text are shown.

format_score_table():
  - One row per product in rank order, one column per rule group.
"""

from __future__ import annotations

from ctrm_advisor.catalog import PRODUCTS
from ctrm_advisor.models.answers import BudgetRange, UserAnswers
from ctrm_advisor.models.recommendation import RecommendationResult
from ctrm_advisor.recommendations.rules import RULE_GROUPS
from ctrm_advisor.recommendations.scorer import compute_breakdown
from ctrm_advisor.recommendations.selector import rank_products
from ctrm_advisor.reporting.formatters import (
    NOT_ANSWERED,
    answer_fields,
    format_budget,
    format_catalog,
    format_currency,
    format_recommendation,
    format_score_table,
)


class TestCurrency:
    def test_units(self) -> None:
        assert format_currency(900) == "$900"
        assert format_currency(750_000) == "$750k"
        assert format_currency(1_000_000) == "$1M"
        assert format_currency(1_250_000) == "$1.2M"

    def test_budget_ranges(self) -> None:
        assert format_budget(BudgetRange(min=200_000, max=500_000)) == "$200k - $500k"
        assert format_budget(BudgetRange(min=200_000)) == "from $200k"
        assert format_budget(BudgetRange(max=500_000)) == "up to $500k"
        assert format_budget(BudgetRange()) == NOT_ANSWERED


class TestAnswerFields:
    def test_unset(self) -> None:
        fields = answer_fields(UserAnswers())
        assert fields["industry"] == NOT_ANSWERED
        assert fields["priorities"] == NOT_ANSWERED

    def test_full(self, full_answers: UserAnswers) -> None:
        fields = answer_fields(full_answers)
        assert fields["industry"] == "Power & Utilities"
        assert fields["users"] == "75"
        assert fields["priorities"] == "Trading, Risk"
        assert fields["budget"] == "$200k - $400k"


class TestFormatRecommendation:
    def test_contents(self, sample_result: RecommendationResult) -> None:
        out = format_recommendation(sample_result, "Because reasons.")
        assert "Ideal Fit: Openlink  (score 12)" in out
        assert "Strong Alternative: TriplePoint  (score 8)" in out
        assert "Because reasons." in out

    def test_no_justification(self, sample_result: RecommendationResult) -> None:
        assert "Why it's recommended" not in format_recommendation(sample_result)


class TestScoreTable:
    def test_rows_and_columns(self, enterprise_finserv_answers: UserAnswers) -> None:
        breakdown = compute_breakdown(enterprise_finserv_answers)
        ranked = rank_products(breakdown.totals)
        out = format_score_table(ranked, breakdown)
        for group in RULE_GROUPS:
            assert group in out
        body = [line for line in out.splitlines() if line.strip()[:1].isdigit()]
        assert len(body) == len(PRODUCTS)
        assert "Openlink" in body[0]
        assert "Aspect" in body[-1]


class TestCatalog:
    def test_lists_every_product(self) -> None:
        out = format_catalog(PRODUCTS)
        for product in PRODUCTS:
            assert f"[{product.id}]" in out
