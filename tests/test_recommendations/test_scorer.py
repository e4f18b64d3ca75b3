"""
Tests for ctrm_advisor/recommendations/scorer.py.

What we test
------------
score():
  - Deterministic: identical answers give identical score vectors.
  - All-unset answers score 0 for every product.
  - One entry per catalog product, in catalog order.
  - Priorities are additive (Regulatory Compliance + Accounting -> openlink +2).
  - Reference scenarios produce the expected exact vectors.

average_budget():
  - Midpoint when both bounds set, single bound otherwise, 0 when empty.
  - A budget of exactly 0 skips the budget group.

compute_breakdown() / describe_breakdown():
  - Every rule group present; skipped groups are all zero and not "fired".
  - Group contributions sum to the totals.
  - describe_breakdown() lists only non-zero fired groups.
"""

from __future__ import annotations

import pytest

from ctrm_advisor.catalog import PRODUCT_IDS
from ctrm_advisor.models.answers import BudgetRange, UserAnswers
from ctrm_advisor.recommendations.rules import RULE_GROUPS
from ctrm_advisor.recommendations.scorer import (
    average_budget,
    compute_breakdown,
    describe_breakdown,
    score,
)
from ctrm_advisor.taxonomy.answer_taxonomy import (
    Industry,
    OrgSize,
    Priority,
    TradingType,
)


class TestScore:
    def test_deterministic(self, full_answers: UserAnswers) -> None:
        assert score(full_answers) == score(full_answers)

    def test_all_unset_scores_zero(self) -> None:
        assert score(UserAnswers()) == {pid: 0 for pid in PRODUCT_IDS}

    def test_one_entry_per_product_in_catalog_order(self, full_answers: UserAnswers) -> None:
        assert tuple(score(full_answers)) == PRODUCT_IDS

    def test_returns_fresh_dict(self, full_answers: UserAnswers) -> None:
        first = score(full_answers)
        first["aspect"] = 999
        assert score(full_answers)["aspect"] != 999

    def test_priorities_additive(self) -> None:
        both = UserAnswers(
            priorities=frozenset({Priority.REGULATORY_COMPLIANCE, Priority.ACCOUNTING})
        )
        one = UserAnswers(priorities=frozenset({Priority.ACCOUNTING}))
        assert score(both)["openlink"] == 2
        assert score(one)["openlink"] == 1

    def test_single_group_only(self) -> None:
        s = score(UserAnswers(trading_type=TradingType.FINANCIAL))
        assert s == {"aspect": 0, "rightangle": -1, "triplepoint": 1, "openlink": 1, "allegro": 0}

    def test_users_bracket_applied(self) -> None:
        assert score(UserAnswers(users=20))["aspect"] == 2
        assert score(UserAnswers(users=21))["aspect"] == 1


class TestReferenceScenarios:
    def test_enterprise_financial_services(self, enterprise_finserv_answers: UserAnswers) -> None:
        assert score(enterprise_finserv_answers) == {
            "aspect": -7,
            "rightangle": -1,
            "triplepoint": 8,
            "openlink": 12,
            "allegro": 0,
        }

    def test_small_metals_startup(self, small_metals_answers: UserAnswers) -> None:
        assert score(small_metals_answers) == {
            "aspect": 14,
            "rightangle": -3,
            "triplepoint": -3,
            "openlink": -7,
            "allegro": 0,
        }


class TestAverageBudget:
    def test_midpoint(self) -> None:
        assert average_budget(BudgetRange(min=100_000, max=300_000)) == 200_000

    def test_min_only(self) -> None:
        assert average_budget(BudgetRange(min=75_000)) == 75_000

    def test_max_only(self) -> None:
        assert average_budget(BudgetRange(max=900_000)) == 900_000

    def test_empty(self) -> None:
        assert average_budget(BudgetRange()) == 0

    @pytest.mark.parametrize(
        "budget, expected_aspect",
        [
            (BudgetRange(min=100_000, max=300_000), 0),   # avg 200k -> <500k
            (BudgetRange(min=100_000), 2),                # 100k -> <200k
            (BudgetRange(max=40_000), 3),                 # 40k -> <50k
        ],
    )
    def test_budget_group_bracket(self, budget: BudgetRange, expected_aspect: int) -> None:
        assert score(UserAnswers(expected_budget=budget))["aspect"] == expected_aspect

    def test_zero_budget_skips_group(self) -> None:
        breakdown = compute_breakdown(UserAnswers(expected_budget=BudgetRange(min=0, max=0)))
        assert "budget" not in breakdown.fired
        assert breakdown.totals == {pid: 0 for pid in PRODUCT_IDS}


class TestBreakdown:
    def test_every_group_present(self) -> None:
        breakdown = compute_breakdown(UserAnswers())
        assert set(breakdown.contributions) == set(RULE_GROUPS)
        assert breakdown.fired == {}

    def test_contributions_sum_to_totals(self, full_answers: UserAnswers) -> None:
        breakdown = compute_breakdown(full_answers)
        for pid in PRODUCT_IDS:
            assert sum(
                breakdown.group_total(g, pid) for g in RULE_GROUPS
            ) == breakdown.totals[pid]

    def test_fired_keys(self, full_answers: UserAnswers) -> None:
        breakdown = compute_breakdown(full_answers)
        assert breakdown.fired["users"] == ["<=100"]
        assert breakdown.fired["budget"] == ["<500k"]
        assert breakdown.fired["priorities"] == ["Trading", "Risk"]

    def test_describe_breakdown_lists_nonzero_groups(self) -> None:
        answers = UserAnswers(
            org_size=OrgSize.ENTERPRISE,
            industry=Industry.METALS,
        )
        lines = describe_breakdown(compute_breakdown(answers), "openlink")
        # Metals gives openlink 0, so only org_size shows.
        assert lines == ["org_size[Enterprise]: +3"]

    def test_describe_breakdown_negative_sign(self) -> None:
        answers = UserAnswers(org_size=OrgSize.ENTERPRISE)
        lines = describe_breakdown(compute_breakdown(answers), "aspect")
        assert lines == ["org_size[Enterprise]: -2"]
