"""
Scoring rule table: the product-positioning judgment behind every recommendation.

Each rule group is keyed off one answer dimension and maps every possible
answer to a delta for EVERY catalog product (not only the best match), so a
product that is merely plausible on every dimension can still win when no
single rule dominates.

Rule groups (evaluation order; the sum is order-independent)
-------------------------------------------------------------
    1. ORG_SIZE_RULES         keyed by OrgSize
    2. INDUSTRY_RULES         keyed by Industry
    3. PRIORITY_RULES         keyed by Priority (each selected priority adds)
    4. TRADING_TYPE_RULES     keyed by TradingType
    5. USER_COUNT_RULES       keyed by UserBracket  (<=20, <=100, <=200, >200)
    6. CURRENT_SYSTEM_RULES   keyed by CurrentSystem
    7. BUDGET_RULES           keyed by BudgetBracket (<50k, <200k, <500k, <1M, >=1M)
    8. TIMELINE_RULES         keyed by GoLiveTimeline

Column order in every row: aspect, rightangle, triplepoint, openlink, allegro.

These values are configuration data.  Change them only together with the
scenario tests in tests/test_recommendations/test_scorer.py.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Mapping, Optional, Sequence

from ctrm_advisor.catalog import CatalogConfigurationError
from ctrm_advisor.models.product import Product
from ctrm_advisor.taxonomy.answer_taxonomy import (
    CurrentSystem,
    GoLiveTimeline,
    Industry,
    OrgSize,
    Priority,
    TradingType,
)


class UserBracket(StrEnum):
    """Business user-count bracket.  Upper bounds are inclusive."""

    UP_TO_20 = "<=20"
    UP_TO_100 = "<=100"
    UP_TO_200 = "<=200"
    OVER_200 = ">200"


class BudgetBracket(StrEnum):
    """Average annual budget bracket (USD).  Upper bounds are exclusive."""

    UNDER_50K = "<50k"
    UNDER_200K = "<200k"
    UNDER_500K = "<500k"
    UNDER_1M = "<1M"
    ONE_MILLION_PLUS = ">=1M"


# Inclusive upper bound per bracket, ascending.  Anything above the last is OVER_200.
USER_BRACKET_LIMITS: tuple[tuple[int, UserBracket], ...] = (
    (20,  UserBracket.UP_TO_20),
    (100, UserBracket.UP_TO_100),
    (200, UserBracket.UP_TO_200),
)

# Exclusive upper bound per bracket, ascending.  Anything at or above the last is >=1M.
BUDGET_BRACKET_LIMITS: tuple[tuple[float, BudgetBracket], ...] = (
    (50_000,    BudgetBracket.UNDER_50K),
    (200_000,   BudgetBracket.UNDER_200K),
    (500_000,   BudgetBracket.UNDER_500K),
    (1_000_000, BudgetBracket.UNDER_1M),
)


# ── 1. Organization size ──────────────────────────────────────────────────────

ORG_SIZE_RULES: dict[OrgSize, dict[str, int]] = {
    OrgSize.SMALL:      {"aspect":  3, "rightangle": -1, "triplepoint": -1, "openlink": -2, "allegro":  0},
    OrgSize.MEDIUM:     {"aspect":  1, "rightangle":  1, "triplepoint":  0, "openlink": -1, "allegro":  1},
    OrgSize.ENTERPRISE: {"aspect": -2, "rightangle":  1, "triplepoint":  2, "openlink":  3, "allegro":  0},
}

# ── 2. Industry ───────────────────────────────────────────────────────────────

INDUSTRY_RULES: dict[Industry, dict[str, int]] = {
    Industry.OIL_AND_GAS:         {"aspect":  1, "rightangle":  2, "triplepoint":  0, "openlink":  0, "allegro":  0},
    Industry.POWER_AND_UTILITIES: {"aspect": -1, "rightangle":  2, "triplepoint":  0, "openlink":  0, "allegro":  3},
    Industry.METALS:              {"aspect":  2, "rightangle": -1, "triplepoint":  0, "openlink":  0, "allegro": -1},
    Industry.AGRI_COMMODITIES:    {"aspect":  2, "rightangle":  0, "triplepoint":  0, "openlink":  0, "allegro": -1},
    Industry.FINANCIAL_SERVICES:  {"aspect": -1, "rightangle": -1, "triplepoint":  1, "openlink":  2, "allegro":  0},
    Industry.MULTI_COMMODITY:     {"aspect":  0, "rightangle":  0, "triplepoint":  1, "openlink":  2, "allegro":  0},
}

# ── 3. Priorities (additive per selected priority) ────────────────────────────

PRIORITY_RULES: dict[Priority, dict[str, int]] = {
    Priority.TRADING:               {"aspect": 0, "rightangle": 0, "triplepoint": 0, "openlink": 1, "allegro": 1},
    Priority.RISK:                  {"aspect": 0, "rightangle": 0, "triplepoint": 3, "openlink": 1, "allegro": 0},
    Priority.LOGISTICS:             {"aspect": 0, "rightangle": 2, "triplepoint": 0, "openlink": 0, "allegro": 0},
    Priority.SETTLEMENTS:           {"aspect": 0, "rightangle": 1, "triplepoint": 0, "openlink": 1, "allegro": 0},
    Priority.REGULATORY_COMPLIANCE: {"aspect": 0, "rightangle": 0, "triplepoint": 1, "openlink": 1, "allegro": 0},
    Priority.ACCOUNTING:            {"aspect": 0, "rightangle": 0, "triplepoint": 1, "openlink": 1, "allegro": 0},
    Priority.FORECASTING:           {"aspect": 0, "rightangle": 0, "triplepoint": 1, "openlink": 0, "allegro": 1},
    Priority.ETRM_INTEGRATION:      {"aspect": 0, "rightangle": 0, "triplepoint": 0, "openlink": 0, "allegro": 2},
}

# ── 4. Trading type ───────────────────────────────────────────────────────────

TRADING_TYPE_RULES: dict[TradingType, dict[str, int]] = {
    TradingType.PHYSICAL:  {"aspect": 0, "rightangle":  1, "triplepoint": 0, "openlink": 0, "allegro": 1},
    TradingType.FINANCIAL: {"aspect": 0, "rightangle": -1, "triplepoint": 1, "openlink": 1, "allegro": 0},
    TradingType.BOTH:      {"aspect": 0, "rightangle":  1, "triplepoint": 0, "openlink": 1, "allegro": 0},
}

# ── 5. User count ─────────────────────────────────────────────────────────────

USER_COUNT_RULES: dict[UserBracket, dict[str, int]] = {
    UserBracket.UP_TO_20:  {"aspect":  2, "rightangle": 0, "triplepoint": 0, "openlink": -1, "allegro": 0},
    UserBracket.UP_TO_100: {"aspect":  1, "rightangle": 1, "triplepoint": 0, "openlink":  0, "allegro": 1},
    UserBracket.UP_TO_200: {"aspect": -1, "rightangle": 1, "triplepoint": 1, "openlink":  0, "allegro": 0},
    UserBracket.OVER_200:  {"aspect": -1, "rightangle": 0, "triplepoint": 1, "openlink":  1, "allegro": 0},
}

# ── 6. Current system ─────────────────────────────────────────────────────────

CURRENT_SYSTEM_RULES: dict[CurrentSystem, dict[str, int]] = {
    CurrentSystem.MANUAL:     {"aspect":  1, "rightangle": 0, "triplepoint": 0, "openlink": 0, "allegro": 0},
    CurrentSystem.IN_HOUSE:   {"aspect":  0, "rightangle": 1, "triplepoint": 1, "openlink": 1, "allegro": 0},
    CurrentSystem.OTHER_CTRM: {"aspect": -1, "rightangle": 1, "triplepoint": 1, "openlink": 1, "allegro": 0},
    CurrentSystem.NONE:       {"aspect":  1, "rightangle": 0, "triplepoint": 0, "openlink": 0, "allegro": 0},
}

# ── 7. Budget ─────────────────────────────────────────────────────────────────

BUDGET_RULES: dict[BudgetBracket, dict[str, int]] = {
    BudgetBracket.UNDER_50K:        {"aspect":  3, "rightangle": -1, "triplepoint": -1, "openlink": -2, "allegro": 0},
    BudgetBracket.UNDER_200K:       {"aspect":  2, "rightangle":  1, "triplepoint":  0, "openlink": -1, "allegro": 1},
    BudgetBracket.UNDER_500K:       {"aspect":  0, "rightangle":  1, "triplepoint":  1, "openlink":  0, "allegro": 1},
    BudgetBracket.UNDER_1M:         {"aspect": -1, "rightangle":  1, "triplepoint":  2, "openlink":  1, "allegro": 0},
    BudgetBracket.ONE_MILLION_PLUS: {"aspect": -2, "rightangle":  0, "triplepoint":  2, "openlink":  3, "allegro": 0},
}

# ── 8. Go-live timeline ───────────────────────────────────────────────────────

TIMELINE_RULES: dict[GoLiveTimeline, dict[str, int]] = {
    GoLiveTimeline.WITHIN_3_MONTHS: {"aspect":  3, "rightangle": 0, "triplepoint": -1, "openlink": -2, "allegro": 1},
    GoLiveTimeline.MONTHS_3_TO_6:   {"aspect":  1, "rightangle": 1, "triplepoint":  0, "openlink":  0, "allegro": 1},
    GoLiveTimeline.MONTHS_6_TO_12:  {"aspect":  0, "rightangle": 1, "triplepoint":  1, "openlink":  1, "allegro": 0},
    GoLiveTimeline.MONTHS_12_PLUS:  {"aspect": -1, "rightangle": 0, "triplepoint":  1, "openlink":  2, "allegro": 0},
}


# Group name -> (enum the group is keyed by, table).  Used for validation and reporting.
RULE_TABLE: dict[str, tuple[type[StrEnum], Mapping[Any, Mapping[str, int]]]] = {
    "org_size":       (OrgSize,        ORG_SIZE_RULES),
    "industry":       (Industry,       INDUSTRY_RULES),
    "priorities":     (Priority,       PRIORITY_RULES),
    "trading_type":   (TradingType,    TRADING_TYPE_RULES),
    "users":          (UserBracket,    USER_COUNT_RULES),
    "current_system": (CurrentSystem,  CURRENT_SYSTEM_RULES),
    "budget":         (BudgetBracket,  BUDGET_RULES),
    "timeline":       (GoLiveTimeline, TIMELINE_RULES),
}

RULE_GROUPS: tuple[str, ...] = tuple(RULE_TABLE)


def user_count_bracket(users: int) -> UserBracket:
    """Return the single bracket ``users`` falls into.

    Brackets are contiguous and exhaustive: <=20, 21-100, 101-200, >200.
    """
    for limit, bracket in USER_BRACKET_LIMITS:
        if users <= limit:
            return bracket
    return UserBracket.OVER_200


def budget_bracket(avg_budget: float) -> Optional[BudgetBracket]:
    """Return the bracket for an average budget, or ``None`` when it is 0.

    A zero average means no budget was given and the budget group is skipped.
    """
    if avg_budget == 0:
        return None
    for limit, bracket in BUDGET_BRACKET_LIMITS:
        if avg_budget < limit:
            return bracket
    return BudgetBracket.ONE_MILLION_PLUS


def validate_rule_table(
    catalog: Sequence[Product],
    table: Optional[Mapping[str, tuple[type[StrEnum], Mapping[Any, Mapping[str, int]]]]] = None,
) -> None:
    """Check that every rule group scores every catalog product for every answer.

    Args:
        catalog: The product catalog the table must cover.
        table:   Rule table to check; defaults to ``RULE_TABLE``.

    Raises:
        CatalogConfigurationError: On a missing answer row, a row that does
            not cover exactly the catalog ids, or a non-integer delta.
    """
    table = RULE_TABLE if table is None else table
    expected_ids = {p.id for p in catalog}

    for group, (keys, rows) in table.items():
        missing_keys = [k.value for k in keys if k not in rows]
        if missing_keys:
            raise CatalogConfigurationError(
                f"rule group '{group}' has no row for: {missing_keys}."
            )
        for key, deltas in rows.items():
            if set(deltas) != expected_ids:
                raise CatalogConfigurationError(
                    f"rule group '{group}' row '{key}' covers {sorted(deltas)}, "
                    f"expected {sorted(expected_ids)}."
                )
            for product_id, delta in deltas.items():
                if isinstance(delta, bool) or not isinstance(delta, int):
                    raise CatalogConfigurationError(
                        f"rule group '{group}' row '{key}' delta for '{product_id}' "
                        f"must be an integer, got {delta!r}."
                    )
