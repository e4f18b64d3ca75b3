"""
ASCII terminal formatters for CLI output.

All formatters accept domain objects and return plain multi-line strings
suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).

Score table
-----------
``format_score_table()`` shows one row per product in rank order and one
column per rule group, so a reader can see which answers drove the result::

    Rank  Product       Total  org_size  industry  priorities  ...
    ---------------------------------------------------------------
       1  Openlink         12        +3        +2          +0  ...
"""

from __future__ import annotations

from typing import Optional, Sequence

from ctrm_advisor.models.answers import BudgetRange, UserAnswers
from ctrm_advisor.models.product import Product
from ctrm_advisor.models.recommendation import RecommendationResult
from ctrm_advisor.recommendations.rules import RULE_GROUPS
from ctrm_advisor.recommendations.scorer import ScoreBreakdown
from ctrm_advisor.recommendations.selector import RankedProduct

NOT_ANSWERED = "Not specified"


# ── Scalars ───────────────────────────────────────────────────────────────────


def format_currency(amount: float) -> str:
    """Compact USD, e.g. ``$750k``, ``$1.2M``, ``$900``."""
    if amount >= 1_000_000:
        return f"${amount / 1_000_000:.1f}M".replace(".0M", "M")
    if amount >= 1_000:
        return f"${amount / 1_000:.0f}k"
    return f"${amount:.0f}"


def format_budget(budget: BudgetRange) -> str:
    """Human range string: ``$200k - $500k``, ``from $200k``, ``up to $500k``."""
    if budget.min is not None and budget.max is not None:
        return f"{format_currency(budget.min)} - {format_currency(budget.max)}"
    if budget.min is not None:
        return f"from {format_currency(budget.min)}"
    if budget.max is not None:
        return f"up to {format_currency(budget.max)}"
    return NOT_ANSWERED


def format_choice(value: Optional[object]) -> str:
    return NOT_ANSWERED if value is None else str(value)


def format_selection(values: Sequence[object]) -> str:
    return ", ".join(str(v) for v in values) if values else NOT_ANSWERED


# ── Answers ───────────────────────────────────────────────────────────────────


def answer_fields(answers: UserAnswers) -> dict[str, str]:
    """Display value per answer, keyed by prompt placeholder name."""
    return {
        "industry":       format_choice(answers.industry),
        "org_size":       format_choice(answers.org_size),
        "users":          format_choice(answers.users),
        "budget":         format_budget(answers.expected_budget),
        "timeline":       format_choice(answers.go_live_timeline),
        "trading_type":   format_choice(answers.trading_type),
        "current_system": format_choice(answers.current_system),
        "priorities":     format_selection(answers.sorted_priorities()),
        "region":         format_choice(answers.region),
        "integrations":   format_selection(answers.sorted_integrations()),
    }


def format_answers_summary(answers: UserAnswers) -> str:
    fields = answer_fields(answers)
    lines = ["", "=== Your Answers ==="]
    width = max(len(k) for k in fields)
    for key, value in fields.items():
        lines.append(f"  {key.replace('_', ' ').title():<{width}}  {value}")
    return "\n".join(lines)


# ── Catalog ───────────────────────────────────────────────────────────────────


def format_catalog(catalog: Sequence[Product]) -> str:
    lines = ["", "=== Product Catalog (tie-break order) ==="]
    for position, product in enumerate(catalog, start=1):
        lines.append(f"  {position}. {product.name} [{product.id}]")
        lines.append(f"     {product.description}")
        lines.append(f"     Strengths: {', '.join(product.key_strengths)}")
    return "\n".join(lines)


# ── Recommendation ────────────────────────────────────────────────────────────


def format_recommendation(
    result: RecommendationResult,
    justification: str = "",
) -> str:
    """Ideal fit + strong alternative block with optional justification text."""
    lines: list[str] = []
    lines.append("")
    lines.append("=== Your Recommended CTRM Solution ===")
    for label, product in (("Ideal Fit", result.ideal), ("Strong Alternative", result.strong)):
        score = result.scores.get(product.id)
        score_str = f"  (score {score})" if score is not None else ""
        lines.append("")
        lines.append(f"  {label}: {product.name}{score_str}")
        lines.append(f"    {product.description}")
        lines.append(f"    Strengths: {', '.join(product.key_strengths)}")
    if justification:
        lines.append("")
        lines.append("  Why it's recommended for you:")
        lines.append(f"    {justification}")
    return "\n".join(lines)


def format_score_table(
    ranked:    Sequence[RankedProduct],
    breakdown: ScoreBreakdown,
) -> str:
    """Rank-ordered table of totals and per-rule-group contributions."""
    group_cols = list(RULE_GROUPS)
    header = (
        f"    {'Rank':>4}  {'Product':<12}  {'Total':>5}  "
        + "  ".join(f"{g:>{max(len(g), 4)}}" for g in group_cols)
    )
    lines = ["", "=== Score Breakdown ===", header, "    " + "-" * (len(header) - 4)]
    for rp in ranked:
        cells = "  ".join(
            f"{breakdown.group_total(g, rp.product.id):>+{max(len(g), 4)}d}"
            for g in group_cols
        )
        lines.append(
            f"    {rp.rank + 1:>4}  {rp.product.name:<12}  {rp.score:>5}  {cells}"
        )
    return "\n".join(lines)
