"""
Recommendation scoring: maps a ``UserAnswers`` to one integer score per product.

Score formula (additive, one term per rule group)
--------------------------------------------------
    score[p] = org_size[p] + industry[p] + Σ priorities[p] + trading_type[p]
             + users[p] + current_system[p] + budget[p] + timeline[p]

Every term comes from the fixed tables in ``rules.py``.  An unset answer
contributes 0 to every product, so the all-unset answer set scores 0
across the whole catalog.

Group details
-------------
users:
    Bracketed by ``user_count_bracket()``: <=20, <=100, <=200, >200.
    Exactly one bracket applies whenever ``users`` is set.

budget:
    ``avg_budget`` is the midpoint when both bounds are given, otherwise
    whichever bound is present, otherwise 0.  A zero average skips the
    group.  Brackets: <50k, <200k, <500k, <1M, >=1M.

priorities:
    Each selected priority adds its row independently, so selecting both
    Regulatory Compliance and Accounting gives openlink +2.

Pure functions, no I/O.  Safe to call repeatedly or concurrently.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from ctrm_advisor.catalog import PRODUCTS
from ctrm_advisor.models.answers import BudgetRange, UserAnswers
from ctrm_advisor.models.product import Product
from ctrm_advisor.recommendations.rules import (
    BUDGET_RULES,
    CURRENT_SYSTEM_RULES,
    INDUSTRY_RULES,
    ORG_SIZE_RULES,
    PRIORITY_RULES,
    RULE_GROUPS,
    TIMELINE_RULES,
    TRADING_TYPE_RULES,
    USER_COUNT_RULES,
    budget_bracket,
    user_count_bracket,
)


@dataclass
class ScoreBreakdown:
    """Per-rule-group contributions for every catalog product.

    Attributes:
        product_ids:   Catalog ids in declaration order.
        contributions: group name -> product id -> summed delta from that group.
        fired:         group name -> the answer key(s) that selected the row,
                       e.g. ``{"users": ["<=100"]}``.  Groups that were
                       skipped are absent.
    """

    product_ids:   list[str]
    contributions: dict[str, dict[str, int]] = field(default_factory=dict)
    fired:         dict[str, list[str]] = field(default_factory=dict)

    @property
    def totals(self) -> dict[str, int]:
        """Final score per product id, in catalog order."""
        return {
            pid: sum(group[pid] for group in self.contributions.values())
            for pid in self.product_ids
        }

    def group_total(self, group: str, product_id: str) -> int:
        return self.contributions.get(group, {}).get(product_id, 0)


def average_budget(budget: BudgetRange) -> float:
    """Collapse a budget range into one number (0 when no bound is set).

    The midpoint is taken arithmetically; ordering of the bounds is enforced
    by ``BudgetRange`` itself, not here.
    """
    if budget.min is not None and budget.max is not None:
        return (budget.min + budget.max) / 2
    if budget.min is not None:
        return budget.min
    if budget.max is not None:
        return budget.max
    return 0.0


def compute_breakdown(
    answers: UserAnswers,
    catalog: Sequence[Product] = PRODUCTS,
) -> ScoreBreakdown:
    """Score every catalog product against ``answers``, group by group.

    Args:
        answers: One completed (or partially completed) questionnaire.
        catalog: Products to score.  Defaults to the fixed catalog.

    Returns:
        ScoreBreakdown with every group present in ``contributions``
        (all-zero rows for groups whose answer is unset).
    """
    product_ids = [p.id for p in catalog]
    breakdown = ScoreBreakdown(
        product_ids=product_ids,
        contributions={g: {pid: 0 for pid in product_ids} for g in RULE_GROUPS},
    )

    def _apply(group: str, key, table: Mapping) -> None:
        deltas = table.get(key)
        if deltas is None:
            return
        row = breakdown.contributions[group]
        for pid in product_ids:
            row[pid] += deltas.get(pid, 0)
        breakdown.fired.setdefault(group, []).append(str(key))

    # ── 1. Organization size ──────────────────────────────────────────────────
    if answers.org_size is not None:
        _apply("org_size", answers.org_size, ORG_SIZE_RULES)

    # ── 2. Industry ───────────────────────────────────────────────────────────
    if answers.industry is not None:
        _apply("industry", answers.industry, INDUSTRY_RULES)

    # ── 3. Priorities ─────────────────────────────────────────────────────────
    for priority in answers.sorted_priorities():
        _apply("priorities", priority, PRIORITY_RULES)

    # ── 4. Trading type ───────────────────────────────────────────────────────
    if answers.trading_type is not None:
        _apply("trading_type", answers.trading_type, TRADING_TYPE_RULES)

    # ── 5. User count ─────────────────────────────────────────────────────────
    if answers.users is not None:
        _apply("users", user_count_bracket(answers.users), USER_COUNT_RULES)

    # ── 6. Current system ─────────────────────────────────────────────────────
    if answers.current_system is not None:
        _apply("current_system", answers.current_system, CURRENT_SYSTEM_RULES)

    # ── 7. Budget ─────────────────────────────────────────────────────────────
    bracket = budget_bracket(average_budget(answers.expected_budget))
    if bracket is not None:
        _apply("budget", bracket, BUDGET_RULES)

    # ── 8. Go-live timeline ───────────────────────────────────────────────────
    if answers.go_live_timeline is not None:
        _apply("timeline", answers.go_live_timeline, TIMELINE_RULES)

    return breakdown


def score(
    answers: UserAnswers,
    catalog: Sequence[Product] = PRODUCTS,
) -> dict[str, int]:
    """Return ``{product_id: score}`` for every catalog product.

    Deterministic and total: every product gets a finite integer for every
    valid answer set.  The returned dict is built fresh on each call.
    """
    return compute_breakdown(answers, catalog).totals


def describe_breakdown(
    breakdown: ScoreBreakdown,
    product_id: Optional[str] = None,
) -> list[str]:
    """Render a breakdown as ``"group[key]: +n"`` lines for one product.

    Groups that did not fire or contributed 0 to ``product_id`` are omitted.
    When ``product_id`` is ``None`` the first catalog product is used.
    """
    pid = product_id or breakdown.product_ids[0]
    lines: list[str] = []
    for group in RULE_GROUPS:
        keys = breakdown.fired.get(group)
        if not keys:
            continue
        delta = breakdown.group_total(group, pid)
        if delta == 0:
            continue
        lines.append(f"{group}[{', '.join(keys)}]: {delta:+d}")
    return lines
